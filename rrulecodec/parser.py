"""Parser for RFC 5545 rule strings (RRULE, EXRULE, DTSTART, DTEND lines)."""

import re
from functools import reduce
from typing import Any, Dict, Iterable, Optional

from pydantic import ValidationError

from .datetime_field import parse_date_time
from .datetimes import DateLike, from_rfc5545_date, from_rfc5545_datetime
from .exceptions import (
    DuplicatePropertyError,
    InvalidRangeError,
    RRuleError,
    RRuleGrammarError,
    RRuleStructureError,
    TimezoneMismatchError,
    UnknownAttributeError,
    UnsupportedPropertyError,
    ValueTypeMismatchError,
)
from .lists import parse_number_list, parse_weekday_list, weekday_from_code
from .models import DateTimeProperty, Options, comparable_instant, to_frequency
from .utils.logging import get_logger

logger = get_logger("parser")

_HEADER_RE = re.compile(r"^([A-Z]+?)[:;]")
_RRULE_PREFIX_RE = re.compile(r"^RRULE:", re.IGNORECASE)
_RULE_PREFIX_RE = re.compile(r"^(?:RRULE|EXRULE):", re.IGNORECASE)
_INTEGER_RE = re.compile(r"^[+-]?\d+$")
_DATE_TOKEN_RE = re.compile(r"^\d{8}$")

NUMERIC_ATTRIBUTES = (
    "COUNT",
    "INTERVAL",
    "BYSETPOS",
    "BYMONTH",
    "BYMONTHDAY",
    "BYYEARDAY",
    "BYWEEKNO",
    "BYHOUR",
    "BYMINUTE",
    "BYSECOND",
)

PartialOptions = Dict[str, Any]


class RRuleStringParser:
    """Turns newline-joined RFC 5545 property lines into ``Options``.

    Each line is dispatched on its property name, decoded into a partial
    mapping, and the partials are folded together while checking the
    DTSTART/DTEND rules.
    """

    def __init__(self, settings: Optional[Any] = None):
        """Initialize the parser.

        Args:
            settings: Codec settings; defaults apply to any flag not present
        """
        self.settings = settings
        self.strict_numbers = getattr(settings, "strict_numbers", False)
        self.allow_bare_rules = getattr(settings, "allow_bare_rules", True)
        self.allow_embedded_dtstart = getattr(settings, "allow_embedded_dtstart", True)

    def parse_string(self, text: str) -> Options:
        """Parse a rule string into options.

        Raises:
            RRuleError: On the first invalid line or DTSTART/DTEND conflict
        """
        try:
            partials = [
                partial
                for partial in (self.parse_line(line) for line in text.split("\n"))
                if partial is not None
            ]
            options = self._build(self.merge(partials))
        except RRuleError as e:
            logger.debug(f"Rejected rule string {text!r}: {e.message}")
            raise

        logger.verbose(  # type: ignore[attr-defined]
            "Parsed rule string into %d fields from %d lines",
            len(options.model_dump(exclude_none=True)),
            len(partials),
        )
        return options

    def parse_line(self, line: str) -> Optional[PartialOptions]:
        """Dispatch one line on its property name.

        Returns:
            Partial options, or None for an empty line

        Raises:
            UnsupportedPropertyError: If the property is not a rule or date property
        """
        line = line.strip()
        if not line:
            return None

        header = _HEADER_RE.match(line.upper())
        if not header:
            if not self.allow_bare_rules:
                raise RRuleGrammarError(f"Missing property name in {line}", line=line)
            return self.parse_rrule(line)

        key = header.group(1)
        logger.debug(f"Dispatching {key} line: {line}")

        if key in ("RRULE", "EXRULE"):
            return self.parse_rrule(line)
        if key == DateTimeProperty.START.value:
            return parse_date_time(line, DateTimeProperty.START)
        if key == DateTimeProperty.END.value:
            return parse_date_time(line, DateTimeProperty.END)

        raise UnsupportedPropertyError(f"Unsupported RFC prop {key} in {line}", line=line, key=key)

    def parse_rrule(self, line: str) -> PartialOptions:
        """Decode the attributes of an RRULE or EXRULE line.

        Raises:
            UnknownAttributeError: If an attribute key is not recognized
            UnknownFrequencyError: If FREQ names no frequency
            RRuleGrammarError: If an attribute value is malformed
        """
        options = self._embedded_dtstart(_RRULE_PREFIX_RE.sub("", line))

        for attr in _RULE_PREFIX_RE.sub("", line).split(";"):
            if not attr:
                continue
            key, _, value = attr.partition("=")
            name = key.upper()
            if name == "FREQ":
                options["freq"] = to_frequency(value)
            elif name == "WKST":
                options["wkst"] = weekday_from_code(value)
            elif name in NUMERIC_ATTRIBUTES:
                options[name.lower()] = parse_number_list(value, strict=self.strict_numbers)
            elif name in ("BYWEEKDAY", "BYDAY"):
                options["byweekday"] = parse_weekday_list(value)
            elif name in ("DTSTART", "TZID") and self.allow_embedded_dtstart:
                parsed = parse_date_time(line)
                options["tzid"] = parsed.get("tzid")
                options["dtstart"] = parsed.get("dtstart")
                if parsed.get("dtvalue"):
                    options["dtvalue"] = parsed["dtvalue"]
            elif name == "UNTIL":
                options["until"] = parse_until(value)
            elif name == "BYEASTER":
                if not _INTEGER_RE.match(value):
                    raise RRuleGrammarError(
                        f"Invalid BYEASTER value: {value!r}", line=line, key=name
                    )
                options["byeaster"] = int(value)
            else:
                raise UnknownAttributeError(
                    f"Unknown RRULE property '{key}'", line=line, key=key
                )

        return options

    def _embedded_dtstart(self, body: str) -> PartialOptions:
        """Recover a DTSTART some producers put inside the RRULE body."""
        if not self.allow_embedded_dtstart:
            return {}
        return parse_date_time(body, DateTimeProperty.START)

    def merge(self, partials: Iterable[PartialOptions]) -> PartialOptions:
        """Fold per-line partials into one mapping, enforcing the DTSTART/DTEND rules.

        Raises:
            RRuleStructureError: On duplicate, misordered or inconsistent DTSTART/DTEND
        """
        return reduce(self._merge_one, partials, {})

    def _build(self, merged: PartialOptions) -> Options:
        try:
            return Options(**merged)
        except ValidationError as e:
            raise RRuleStructureError(f"Invalid rule: {e}") from e

    def _merge_one(self, acc: PartialOptions, cur: PartialOptions) -> PartialOptions:
        existing = None

        if cur.get("dtstart") is not None:
            if acc.get("dtstart") is not None:
                raise DuplicatePropertyError(
                    "Invalid rule: DTSTART must occur only once", key="DTSTART"
                )
            if acc.get("dtend") is not None and comparable_instant(
                acc["dtend"]
            ) <= comparable_instant(cur["dtstart"]):
                raise InvalidRangeError(
                    "Invalid rule: DTEND must be later than DTSTART", key="DTSTART"
                )
            existing = acc.get("dtend")

        if cur.get("dtend") is not None:
            if acc.get("dtend") is not None:
                raise DuplicatePropertyError(
                    "Invalid rule: DTEND must occur only once", key="DTEND"
                )
            if acc.get("dtstart") is not None and comparable_instant(
                acc["dtstart"]
            ) >= comparable_instant(cur["dtend"]):
                raise InvalidRangeError(
                    "Invalid rule: DTEND must be later than DTSTART", key="DTEND"
                )
            existing = acc.get("dtstart")

        if existing is not None and acc.get("dtvalue") != cur.get("dtvalue"):
            raise ValueTypeMismatchError(
                "Invalid rule: DTSTART and DTEND must have the same value type"
            )
        if existing is not None and acc.get("tzid") != cur.get("tzid"):
            raise TimezoneMismatchError(
                "Invalid rule: DTSTART and DTEND must have the same timezone"
            )

        acc.update(cur)
        return acc


def parse_string(text: str, settings: Optional[Any] = None) -> Options:
    """Parse a rule string with a parser built from ``settings`` (global settings if omitted)."""
    if settings is None:
        from .config.settings import get_settings  # noqa: PLC0415

        settings = get_settings()
    return RRuleStringParser(settings).parse_string(text)


def parse_until(value: str) -> DateLike:
    """Decode an UNTIL value; a bare ``YYYYMMDD`` token stays a date."""
    if _DATE_TOKEN_RE.match(value):
        return from_rfc5545_date(value)
    return from_rfc5545_datetime(value)
