from datetime import date

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from budgetbuddy.core.config import Settings
from budgetbuddy.core.deps import get_app_settings, get_as_of, get_db
from budgetbuddy.db.dal import Database
from budgetbuddy.services.assistant import Assistant, Intent

router = APIRouter(tags=["assistant"])


class ChatIn(BaseModel):
    message: str = ""


class ChatOut(BaseModel):
    reply: str
    intent: Intent


@router.post("/api/chatbot", response_model=ChatOut, summary="Ask the finance assistant")
async def chatbot(
    payload: ChatIn,
    as_of: date = Depends(get_as_of),
    settings: Settings = Depends(get_app_settings),
    db: Database = Depends(get_db),
):
    message = payload.message.strip()
    if not message:
        raise HTTPException(status_code=400, detail="Empty message")
    answer = Assistant(db, settings, today=as_of).reply(message)
    return ChatOut(reply=answer.reply, intent=answer.intent)
