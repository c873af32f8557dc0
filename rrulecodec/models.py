"""Data models for recurrence rule options."""

from datetime import date, datetime
from enum import Enum, IntEnum
from typing import Any, Dict, List, Optional, Union

from dateutil.rrule import DAILY, HOURLY, MINUTELY, MONTHLY, SECONDLY, WEEKLY, YEARLY, weekday
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .datetimes import (
    UTC,
    from_rfc5545_date,
    from_rfc5545_datetime,
    to_rfc5545_date,
    to_rfc5545_datetime,
)
from .exceptions import UnknownFrequencyError
from .lists import format_weekday, to_weekday


class Frequency(IntEnum):
    """Recurrence frequencies, valued as the python-dateutil constants."""

    YEARLY = YEARLY
    MONTHLY = MONTHLY
    WEEKLY = WEEKLY
    DAILY = DAILY
    HOURLY = HOURLY
    MINUTELY = MINUTELY
    SECONDLY = SECONDLY


class DateTimeValue(str, Enum):
    """VALUE qualifier of DTSTART/DTEND."""

    DATE = "DATE"
    DATE_TIME = "DATE-TIME"


class DateTimeProperty(str, Enum):
    """Date properties that may appear as their own line."""

    START = "DTSTART"
    END = "DTEND"


DateLike = Union[datetime, date]
NumberField = Optional[Union[int, str, List[Union[int, str]]]]


def to_frequency(value: Any) -> Frequency:
    """Resolve a frequency from the enum, its integer value or its name.

    Raises:
        UnknownFrequencyError: If the value names no frequency
    """
    if isinstance(value, Frequency):
        return value
    try:
        if isinstance(value, str):
            return Frequency[value.strip().upper()]
        return Frequency(value)
    except (KeyError, ValueError) as e:
        raise UnknownFrequencyError(f"Invalid frequency: {value!r}", key="FREQ") from e


def comparable_instant(value: DateLike) -> datetime:
    """Normalize a date or datetime so DTSTART and DTEND can be ordered.

    Dates compare as midnight; aware datetimes compare in UTC.
    """
    if not isinstance(value, datetime):
        return datetime(value.year, value.month, value.day)
    if value.tzinfo is not None:
        return value.astimezone(UTC).replace(tzinfo=None)
    return value


class Options(BaseModel):
    """Structured recurrence rule options.

    Field order is the order attributes are written in by the serializer.
    """

    freq: Optional[Frequency] = Field(default=None, description="Recurrence frequency")
    dtstart: Optional[DateLike] = Field(default=None, description="First occurrence")
    dtend: Optional[DateLike] = Field(default=None, description="End of the first occurrence")
    dtvalue: Optional[DateTimeValue] = Field(
        default=None, description="Value type of dtstart/dtend/until"
    )
    interval: NumberField = Field(default=None, description="Interval between occurrences")
    wkst: Optional[weekday] = Field(default=None, description="Week start day")
    count: NumberField = Field(default=None, description="Number of occurrences")
    until: Optional[DateLike] = Field(default=None, description="Last possible occurrence")
    tzid: Optional[str] = Field(default=None, description="Timezone of dtstart/dtend")

    bysetpos: NumberField = None
    bymonth: NumberField = None
    bymonthday: NumberField = None
    byyearday: NumberField = None
    byweekno: NumberField = None
    byweekday: Optional[List[weekday]] = Field(
        default=None, description="Weekdays, written as BYDAY"
    )
    byhour: NumberField = None
    byminute: NumberField = None
    bysecond: NumberField = None
    byeaster: Optional[int] = Field(default=None, description="Offset from Easter Sunday")

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @field_validator("freq", mode="before")
    @classmethod
    def coerce_freq(cls, value: Any) -> Any:
        if value is None:
            return value
        return to_frequency(value)

    @field_validator("wkst", mode="before")
    @classmethod
    def coerce_wkst(cls, value: Any) -> Any:
        if value is None:
            return value
        return to_weekday(value)

    @field_validator("byweekday", mode="before")
    @classmethod
    def coerce_byweekday(cls, value: Any) -> Any:
        if value is None:
            return value
        if not isinstance(value, (list, tuple)):
            value = [value]
        return [to_weekday(day) for day in value]

    @model_validator(mode="after")
    def check_dates(self) -> "Options":
        if self.dtvalue == DateTimeValue.DATE and self.tzid:
            raise ValueError("Date values cannot carry a timezone")
        if (
            self.dtstart is not None
            and self.dtend is not None
            and comparable_instant(self.dtend) <= comparable_instant(self.dtstart)
        ):
            raise ValueError("DTEND must be later than DTSTART")
        return self

    def to_json_dict(self) -> Dict[str, Any]:
        """Render set fields with wire-format values, suitable for JSON output."""
        result: Dict[str, Any] = {}
        for name in type(self).model_fields:
            value = getattr(self, name)
            if value is None:
                continue
            if name == "freq":
                value = value.name
            elif name == "dtvalue":
                value = value.value
            elif name == "wkst":
                value = format_weekday(value)
            elif name == "byweekday":
                value = [format_weekday(day) for day in value]
            elif name in ("dtstart", "dtend", "until"):
                value = _date_token(value)
            result[name] = value
        return result

    @classmethod
    def from_json_dict(cls, data: Dict[str, Any]) -> "Options":
        """Build options from the shape produced by ``to_json_dict``."""
        values = dict(data)
        for name in ("dtstart", "dtend", "until"):
            token = values.get(name)
            if isinstance(token, str):
                if len(token) == 8:
                    values[name] = from_rfc5545_date(token)
                else:
                    values[name] = from_rfc5545_datetime(token)
        return cls.model_validate(values)


def _date_token(value: DateLike) -> str:
    if isinstance(value, datetime):
        return to_rfc5545_datetime(value, utc=value.tzinfo is not None)
    return to_rfc5545_date(value)
