from budgetbuddy.services.export import expenses_to_csv


def test_csv_header_and_amount_format(seeded_db):
    lines = expenses_to_csv(seeded_db.list_expenses()).splitlines()
    assert lines[0] == "id,description,amount,category,date"
    assert lines[1] == "5,Lunch,10.25,Food,2025-08-03"
    assert lines[-1] == "3,Electricity bill,60.00,Utilities,2025-07-05"
    assert len(lines) == 6


def test_csv_quotes_commas_and_quotes():
    rows = [
        {
            "id": 1,
            "description": 'Lunch, "big"',
            "amount_cents": 2450,
            "category": "Food",
            "date": "2025-07-10",
        }
    ]
    body = expenses_to_csv(rows)
    assert body.splitlines()[1] == '1,"Lunch, ""big""",24.50,Food,2025-07-10'


def test_csv_empty_store_is_header_only():
    assert expenses_to_csv([]) == "id,description,amount,category,date\n"


def test_csv_quotes_bare_carriage_return():
    rows = [
        {
            "id": 1,
            "description": "a\rb",
            "amount_cents": 100,
            "category": "Food",
            "date": "2025-07-10",
        }
    ]
    body = expenses_to_csv(rows)
    assert body.split("\n")[1] == '"1","a\rb","1.00","Food","2025-07-10"'
    assert body.count("\n") == 2
