"""
Codec for the ``Date`` scalar: datetimes travel as integer epoch milliseconds.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from graphql import IntValueNode, ValueNode


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MS = timedelta(milliseconds=1)


def serialize_timestamp(value: datetime) -> int:
    """Datetime -> epoch milliseconds. Naive datetimes are taken as UTC."""
    if not isinstance(value, datetime):
        raise TypeError(f"Date cannot represent non-datetime value: {value!r}")
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return (value - EPOCH) // _ONE_MS


def parse_timestamp(value: Any) -> datetime:
    """Epoch milliseconds (from a variable) -> aware UTC datetime."""
    # bool is an int subclass but never a timestamp
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Date cannot represent non-integer value: {value!r}")
    try:
        return EPOCH + value * _ONE_MS
    except OverflowError as exc:
        raise ValueError(f"Date value out of range: {value}") from exc


def parse_timestamp_literal(node: ValueNode, _variables: Optional[dict] = None) -> Optional[datetime]:
    """Integer literal -> datetime; every other literal kind parses to null."""
    if isinstance(node, IntValueNode):
        return parse_timestamp(int(node.value))
    return None
