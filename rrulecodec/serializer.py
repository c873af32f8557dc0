"""Serializer from ``Options`` to RFC 5545 rule strings."""

import logging
from datetime import datetime
from typing import Any, Iterator, List, Mapping, Tuple, Union

from .datetime_field import format_date_time
from .datetimes import to_rfc5545_date, to_rfc5545_datetime
from .lists import format_value, format_weekday, format_weekday_list
from .models import DateTimeProperty, DateTimeValue, Options, to_frequency

logger = logging.getLogger(__name__)

OptionsLike = Union[Options, Mapping[str, Any]]


def _items(options: OptionsLike) -> Iterator[Tuple[str, Any]]:
    """Yield recognized option keys in order, with their values."""
    if isinstance(options, Options):
        for name in type(options).model_fields:
            yield name, getattr(options, name)
        return

    for name, value in options.items():
        if name in Options.model_fields:
            yield name, value


def _get(options: OptionsLike, name: str) -> Any:
    if isinstance(options, Options):
        return getattr(options, name)
    return options.get(name)


def format_until(value: Any, dtvalue: Any = None) -> str:
    """Write an UNTIL value.

    Plain dates and DATE rules get a date token. Aware values are written in
    UTC with the ``Z`` marker; naive values keep their wall-clock time, which
    is floating or local to the rule's TZID.
    """
    if not isinstance(value, datetime) or (
        dtvalue and DateTimeValue(dtvalue) == DateTimeValue.DATE
    ):
        return to_rfc5545_date(value)
    return to_rfc5545_datetime(value, utc=value.tzinfo is not None)


def options_to_string(options: OptionsLike) -> str:
    """Write options as DTSTART, DTEND and RRULE lines joined by newlines.

    Accepts ``Options`` or a plain mapping with the same keys. Unknown keys,
    ``None`` values and empty lists are skipped.
    """
    rrule: List[Tuple[str, str]] = []
    dtstart = ""
    dtend = ""
    dtvalue = _get(options, "dtvalue")
    tzid = _get(options, "tzid")

    for name, value in _items(options):
        if name == "tzid":
            continue
        if value is None or (isinstance(value, (list, tuple)) and not value):
            continue

        key = name.upper()
        out_value = ""

        if key == "FREQ":
            out_value = to_frequency(value).name
        elif key == "WKST":
            out_value = format_weekday(value)
        elif key == "BYWEEKDAY":
            # Internal BYWEEKDAY is BYDAY on the wire
            key = "BYDAY"
            out_value = format_weekday_list(value)
        elif key == "DTSTART":
            dtstart = format_date_time(value, dtvalue, tzid, DateTimeProperty.START)
        elif key == "DTEND":
            dtend = format_date_time(value, dtvalue, tzid, DateTimeProperty.END)
        elif key == "DTVALUE":
            pass
        elif key == "UNTIL":
            out_value = format_until(value, dtvalue)
        else:
            out_value = format_value(value)

        if out_value:
            rrule.append((key, out_value))

    rules = ";".join(f"{key}={value}" for key, value in rrule)
    rule_string = f"RRULE:{rules}" if rules else ""

    result = "\n".join(part for part in (dtstart, dtend, rule_string) if part)
    logger.debug(f"Serialized options to {result!r}")
    return result
