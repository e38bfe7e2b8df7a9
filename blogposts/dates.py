import logging
from datetime import datetime, timezone
from typing import Optional, Union

from dateutil import parser
from django.utils import timezone as django_timezone

from blogposts.conf import settings

logger = logging.getLogger(f"{settings.BLOGPOSTS_LOGGER}.dates")

TimestampSource = Union[str, datetime, None]

# Two fill-in values that share no date field; text parsing to different
# instants under them is missing part of its date.
_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))


def _parse_calendar(value: str) -> Optional[datetime]:
    """Free-form parse that rejects text without a full calendar date."""
    try:
        first, second = (parser.parse(value, default=default) for default in _DEFAULTS)
    except (ValueError, OverflowError, TypeError):
        return None
    if first != second:
        return None
    return first


def parse_timestamp(value: TimestampSource) -> Optional[datetime]:
    """
    Parse a textual timestamp into an aware UTC datetime.

    Empty or unparseable input yields ``None``; this function never raises for
    bad input. Naive timestamps are taken to be UTC.

    :param value: The timestamp text, or an already parsed datetime.
    :return: The UTC instant or ``None``.
    """
    if not value:
        return None

    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = parser.isoparse(value)
        except (ValueError, OverflowError, TypeError):
            parsed = _parse_calendar(value)
            if parsed is None:
                return None

    if django_timezone.is_naive(parsed):
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_timestamp_or_now(value: TimestampSource, field: str = "timestamp") -> datetime:
    """
    Like :py:func:`parse_timestamp`, but substitute the current time when the
    value is missing or unparseable. The substitution is logged.
    """
    parsed = parse_timestamp(value)
    if parsed is None:
        logger.warning("Unparseable %s %r, substituting the current time", field, value)
        return django_timezone.now()
    return parsed


def parse_optional_timestamp(value: TimestampSource, field: str = "timestamp") -> Optional[datetime]:
    """
    Like :py:func:`parse_timestamp`, but log when a non-empty value could not be
    parsed.
    """
    parsed = parse_timestamp(value)
    if parsed is None and value:
        logger.warning("Unparseable %s %r, treating it as missing", field, value)
    return parsed
