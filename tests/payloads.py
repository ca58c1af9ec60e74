from datetime import datetime, timedelta, timezone


def days_ago(days: int) -> str:
    return (datetime.now(timezone.utc) - timedelta(days=days)).isoformat()


def blood_donor_payload(**overrides):
    payload = {
        "name": "Ravi",
        "phone": "9123456780",
        "age": 30,
        "weight": 70,
        "bloodGroup": "O+",
        "hasDonatedBefore": False,
        "latitude": 12.97,
        "longitude": 77.59,
    }
    payload.update(overrides)
    return payload


def organ_donor_payload(**overrides):
    payload = {
        "name": "Meera",
        "phone": "9000000001",
        "organType": "kidney",
        "conditionStatus": "healthy",
        "weight": 62,
        "hasDonatedBefore": False,
    }
    payload.update(overrides)
    return payload
