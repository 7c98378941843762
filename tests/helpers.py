import datetime as dt


def days_from_today(days: int) -> str:
    return (dt.date.today() + dt.timedelta(days=days)).isoformat()


def transaction_payload(**overrides) -> dict:
    payload = {
        "type": "expense",
        "category": "food",
        "amount": 12.5,
        "description": "Lunch at cafe",
        "date": dt.date.today().isoformat(),
        "source": "card",
    }
    payload.update(overrides)
    return payload


def goal_payload(**overrides) -> dict:
    payload = {
        "name": "Emergency fund",
        "targetAmount": 5000,
        "currentAmount": 250,
        "deadline": days_from_today(180),
        "color": "#10b981",
        "notes": "Three months of expenses",
    }
    payload.update(overrides)
    return payload
