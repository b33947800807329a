from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., APP_NAME, DEBUG,
    DATA_DIR, DB_FILENAME, SEED_SAMPLE_DATA, CURRENCY_SYMBOL).
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Basic app metadata
    app_name: str = "BudgetBuddy"
    debug: bool = False
    version: str = "0.1.0"

    # Data & persistence
    data_dir: Path = Path("data")
    db_filename: str = "expenses.sqlite3"
    db_path: Optional[Path] = None  # derived if not provided
    seed_sample_data: bool = True

    # Presentation
    currency_symbol: str = "$"
    chart_months_back: int = 12
    chart_days_back: int = 30

    # Assistant
    chat_top_n_default: int = 5
    chat_top_n_max: int = 50

    def init_post_load(self) -> None:
        """Finalize derived fields and ensure directories exist."""
        if self.db_path is None:
            self.db_path = self.data_dir / self.db_filename
        self.data_dir.mkdir(parents=True, exist_ok=True)
        for name in (
            "chart_months_back",
            "chart_days_back",
            "chat_top_n_default",
            "chat_top_n_max",
        ):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be >= 1")
        if self.chat_top_n_default > self.chat_top_n_max:
            raise ValueError("chat_top_n_default cannot exceed chat_top_n_max")


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings
