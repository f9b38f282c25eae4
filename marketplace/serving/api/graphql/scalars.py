"""
Custom GraphQL Scalars

- ``Date``: integer epoch milliseconds on the wire
- ``DateTime``: ISO-8601 string on the wire (epoch milliseconds accepted on input)

Values are handled internally as naive UTC datetimes, matching the store.
Unparseable input raises ``InvalidArgument``; it is never coerced to a default.
"""

from datetime import date, datetime, timezone
from typing import Any, NewType

import strawberry

from marketplace.errors import InvalidArgument


def _to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _as_utc(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    raise TypeError(f"Expected a date or datetime, got {type(value).__name__}")


def _from_epoch_ms(value: int) -> datetime:
    try:
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc).replace(tzinfo=None)
    except (OverflowError, OSError, ValueError) as e:
        raise InvalidArgument(f"Timestamp {value} is out of range") from e


def serialize_date(value: Any) -> int:
    return int(_as_utc(value).timestamp() * 1000)


def parse_date(value: Any) -> datetime:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgument("Date expects an integer epoch timestamp in milliseconds")
    return _from_epoch_ms(value)


def serialize_datetime(value: Any) -> str:
    iso = _as_utc(value).astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return iso.replace("+00:00", "Z")


def parse_datetime(value: Any) -> datetime:
    if isinstance(value, bool):
        raise InvalidArgument("DateTime expects an ISO-8601 string or epoch milliseconds")
    if isinstance(value, int):
        return _from_epoch_ms(value)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return _to_naive_utc(datetime.fromisoformat(text))
        except ValueError as e:
            raise InvalidArgument(f"Invalid DateTime value: {value!r}") from e
    raise InvalidArgument("DateTime expects an ISO-8601 string or epoch milliseconds")


Date = strawberry.scalar(
    NewType("Date", datetime),
    name="Date",
    description="Date as integer epoch milliseconds",
    serialize=serialize_date,
    parse_value=parse_date,
)

DateTime = strawberry.scalar(
    NewType("DateTime", datetime),
    name="DateTime",
    description="Date and time as an ISO-8601 string",
    serialize=serialize_datetime,
    parse_value=parse_datetime,
)
