"""Conversion between calendar dates and RFC 5545 date / date-time tokens.

Also provides ``DateWithZone``, the wrapper used to write DTSTART/DTEND values
that carry a TZID qualifier. Zone lookup follows the zoneinfo + pytz fallback
strategy.
"""

import importlib.util
import logging
import re
from datetime import date, datetime, timezone
from typing import Any, Optional, Union

from .exceptions import RRuleEncodingError, RRuleGrammarError

UTC = timezone.utc

logger = logging.getLogger(__name__)

ZONEINFO_AVAILABLE = importlib.util.find_spec("zoneinfo") is not None
PYTZ_AVAILABLE = importlib.util.find_spec("pytz") is not None

ZoneInfo = None
ZoneInfoNotFoundError: Any = KeyError
if ZONEINFO_AVAILABLE:
    from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

pytz = None
if PYTZ_AVAILABLE:
    import pytz

DATE_FORMAT = "%Y%m%d"
DATETIME_FORMAT = "%Y%m%dT%H%M%S"

_DATE_RE = re.compile(r"^\d{8}$")
# A bare date is accepted where a date-time is expected (UNTIL=20200101)
_DATETIME_RE = re.compile(r"^(\d{8})(?:T(\d{6}))?(Z)?$", re.IGNORECASE)

DateLike = Union[date, datetime]


def to_rfc5545_date(value: DateLike) -> str:
    """Format a date (or the date part of a datetime) as ``YYYYMMDD``."""
    return value.strftime(DATE_FORMAT)


def from_rfc5545_date(token: str) -> date:
    """Parse a ``YYYYMMDD`` token.

    Raises:
        RRuleGrammarError: If the token is not a valid calendar date
    """
    if not _DATE_RE.match(token):
        raise RRuleGrammarError(f"Invalid date value: {token}")
    try:
        return datetime.strptime(token, DATE_FORMAT).date()
    except ValueError as e:
        raise RRuleGrammarError(f"Invalid date value: {token}") from e


def to_rfc5545_datetime(value: DateLike, utc: bool = True) -> str:
    """Format a date-time as ``YYYYMMDDTHHMMSS`` with an optional ``Z`` marker.

    Aware values are converted to UTC when the marker is requested. A plain
    date is written as midnight.
    """
    if not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    if utc and value.tzinfo is not None:
        value = value.astimezone(UTC)
    return value.strftime(DATETIME_FORMAT) + ("Z" if utc else "")


def from_rfc5545_datetime(token: str) -> datetime:
    """Parse a date-time token.

    A trailing ``Z`` yields an aware UTC datetime, anything else a naive one.

    Raises:
        RRuleGrammarError: If the token is not a valid date-time
    """
    match = _DATETIME_RE.match(token)
    if not match:
        raise RRuleGrammarError(f"Invalid date-time value: {token}")

    day_part, time_part, utc_marker = match.groups()
    try:
        dt = datetime.strptime(day_part + "T" + (time_part or "000000"), DATETIME_FORMAT)
    except ValueError as e:
        raise RRuleGrammarError(f"Invalid date-time value: {token}") from e

    if utc_marker:
        dt = dt.replace(tzinfo=UTC)
    return dt


def is_utc_token(token: str) -> bool:
    """Check whether a date-time token carries the UTC marker."""
    return token.upper().endswith("Z")


def resolve_zone(tzid: str) -> Any:
    """Look up a timezone object by IANA identifier.

    Raises:
        RRuleEncodingError: If the zone is unknown to every available library
    """
    if ZONEINFO_AVAILABLE and ZoneInfo is not None:
        try:
            return ZoneInfo(tzid)
        except (ZoneInfoNotFoundError, ValueError):
            logger.debug(f"zoneinfo has no zone {tzid!r}, trying pytz")

    if PYTZ_AVAILABLE and pytz is not None:
        try:
            return pytz.timezone(tzid)
        except pytz.UnknownTimeZoneError:
            pass

    raise RRuleEncodingError(f"Unknown timezone: {tzid}", key="TZID")


class DateWithZone:
    """A date-time paired with the zone it is written in.

    Naive values are wall-clock time in ``tzid``. Aware values are converted
    into ``tzid`` before formatting.
    """

    def __init__(self, value: DateLike, tzid: Optional[str] = None) -> None:
        self.value = value
        self.tzid = tzid

    @property
    def is_utc(self) -> bool:
        return not self.tzid or self.tzid.upper() == "UTC"

    def local_value(self) -> DateLike:
        """Return the wall-clock value in this zone."""
        value = self.value
        if not isinstance(value, datetime) or value.tzinfo is None:
            return value
        if self.is_utc:
            return value.astimezone(UTC)
        return value.astimezone(resolve_zone(self.tzid))  # type: ignore[arg-type]

    def __str__(self) -> str:
        aware = isinstance(self.value, datetime) and self.value.tzinfo is not None
        # A naive value under an explicit TZID=UTC keeps its qualifier
        if self.is_utc and (aware or not self.tzid):
            return ":" + to_rfc5545_datetime(self.value, utc=True)
        token = to_rfc5545_datetime(self.local_value(), utc=False)
        return f";TZID={self.tzid}:{token}"

    def __repr__(self) -> str:
        return f"DateWithZone({self.value!r}, tzid={self.tzid!r})"
