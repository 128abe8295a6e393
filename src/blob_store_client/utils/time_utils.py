from datetime import datetime, timezone
from typing import Optional

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc).replace(microsecond=0)


def to_utc(value: datetime) -> datetime:
    """
    Приводит время к UTC с точностью до секунды.
    Наивные значения считаются уже заданными в UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).replace(microsecond=0)


def format_timestamp(value: Optional[datetime]) -> str:
    if value is None:
        return ""
    return to_utc(value).strftime(TIMESTAMP_FORMAT)
