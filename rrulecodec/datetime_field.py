"""DTSTART/DTEND property codec.

Decodes ``PROPERTY[;TZID=<id>][;VALUE=DATE|DATE-TIME](:|=)<token>`` into a
partial options mapping and writes the same shape back. TZID is also accepted
after VALUE, which is where the zoned writer puts it.
"""

import logging
import re
from typing import Any, Dict, Optional, Union

from .datetimes import (
    DateLike,
    DateWithZone,
    from_rfc5545_date,
    from_rfc5545_datetime,
    is_utc_token,
    to_rfc5545_date,
    to_rfc5545_datetime,
)
from .exceptions import RRuleEncodingError
from .models import DateTimeProperty, DateTimeValue

logger = logging.getLogger(__name__)

_PATTERNS = {
    prop: re.compile(
        prop.value
        + r"(?:;TZID=([^:=]+?))?(?:;VALUE=(DATE|DATE-TIME))?(?:;TZID=([^:=]+?))?(?::|=)([^;\s]+)",
        re.IGNORECASE,
    )
    for prop in DateTimeProperty
}


def parse_date_time(
    line: str, prop: Union[DateTimeProperty, str] = DateTimeProperty.START
) -> Dict[str, Any]:
    """Decode a DTSTART or DTEND value found in ``line``.

    Args:
        line: Property line, or an RRULE body that may embed the property
        prop: Which property to look for

    Returns:
        Partial options with ``dtstart``/``dtend``, and ``tzid``/``dtvalue``
        where known. Empty if the property does not occur in the line.

    Raises:
        RRuleEncodingError: If the token conflicts with its TZID qualifier
        RRuleGrammarError: If the token is not a valid date or date-time
    """
    prop = DateTimeProperty(prop)
    options: Dict[str, Any] = {}

    match = _PATTERNS[prop].search(line)
    if not match:
        return options

    tzid, dtvalue, trailing_tzid, token = match.groups()
    tzid = tzid or trailing_tzid
    field = "dtstart" if prop == DateTimeProperty.START else "dtend"
    logger.debug(f"Decoding {prop.value} token {token!r} (tzid={tzid}, value={dtvalue})")

    if tzid:
        if is_utc_token(token):
            raise RRuleEncodingError(
                f"Invalid UTC date-time value with timezone: {line}", line=line, key=prop.value
            )
        options["tzid"] = tzid
    elif is_utc_token(token):
        options["tzid"] = "UTC"

    if dtvalue and dtvalue.upper() == DateTimeValue.DATE.value:
        if options.get("tzid"):
            raise RRuleEncodingError(
                f"Invalid date value with timezone: {line}", line=line, key=prop.value
            )
        options[field] = from_rfc5545_date(token)
        options["dtvalue"] = DateTimeValue.DATE
    else:
        options[field] = from_rfc5545_datetime(token)
        if dtvalue:
            options["dtvalue"] = DateTimeValue.DATE_TIME

    return options


def format_date_time(
    value: Optional[DateLike],
    dtvalue: Optional[Union[DateTimeValue, str]] = None,
    tzid: Optional[str] = None,
    prop: Union[DateTimeProperty, str] = DateTimeProperty.START,
) -> str:
    """Write a DTSTART or DTEND line.

    Returns an empty string when ``value`` is absent; callers skip it.
    """
    if not value:
        return ""

    prop = DateTimeProperty(prop)
    prefix = prop.value
    if dtvalue:
        dtvalue = DateTimeValue(dtvalue)
        prefix += ";VALUE=" + dtvalue.value

    if not tzid:
        if dtvalue == DateTimeValue.DATE:
            return prefix + ":" + to_rfc5545_date(value)
        aware = getattr(value, "tzinfo", None) is not None
        return prefix + ":" + to_rfc5545_datetime(value, utc=aware)

    return prefix + str(DateWithZone(value, tzid))
