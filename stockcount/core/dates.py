from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_epoch_ms(value: datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(round(value.timestamp() * 1000))


def from_epoch_ms(value) -> datetime:
    """Parse an epoch-millisecond timestamp; numeric strings are accepted."""
    if isinstance(value, str):
        value_text = value.strip()
        if not value_text:
            raise ValueError("timestamp is empty")
        value = int(float(value_text))
    return datetime.fromtimestamp(int(value) / 1000, tz=timezone.utc)
