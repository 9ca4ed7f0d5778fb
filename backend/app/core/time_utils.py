from datetime import datetime, timezone


def utcnow() -> datetime:
    """Naive UTC, как хранится в БД."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_instant(value: str) -> datetime:
    """
    Разбирает метку времени от клиента в абсолютный момент (naive UTC).

    Принимает ISO 8601 с `T` или пробелом, с `Z` или смещением, либо без зоны
    (тогда считается UTC). Сравнивать строки лексически нельзя: форматы
    "2026-01-05 9:00" и "2026-01-05T09:00:00Z" не упорядочены как строки.
    """
    s = value.strip()
    if not s:
        raise ValueError("Empty timestamp")

    if s.endswith(("Z", "z")):
        s = s[:-1] + "+00:00"

    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        raise ValueError(f"Invalid timestamp: {value!r}") from None

    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def format_instant(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def to_naive_utc(value: datetime | None) -> datetime | None:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
