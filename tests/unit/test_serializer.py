"""Unit tests for the options serializer."""

from datetime import date, datetime, timezone

from dateutil.rrule import FR, MO, TH

from rrulecodec.models import DateTimeValue, Frequency, Options
from rrulecodec.serializer import format_until, options_to_string


class TestFormatUntil:
    """Tests for UNTIL value rendering."""

    def test_floating(self):
        assert format_until(datetime(2020, 1, 31, 12)) == "20200131T120000"

    def test_naive_value_keeps_wall_clock_time(self):
        assert format_until(datetime(2020, 1, 5)) == "20200105T000000"

    def test_plain_date_stays_a_date(self):
        assert format_until(date(2020, 1, 5)) == "20200105"

    def test_aware_value_gets_utc_marker(self):
        value = datetime(2020, 1, 31, 12, tzinfo=timezone.utc)

        assert format_until(value) == "20200131T120000Z"

    def test_date_value(self):
        assert format_until(date(2020, 1, 31), DateTimeValue.DATE) == "20200131"

    def test_date_value_as_text(self):
        assert format_until(datetime(2020, 1, 31, 12), "DATE") == "20200131"


class TestOptionsToString:
    """Tests for writing options as rule strings."""

    def test_rule_only(self):
        result = options_to_string(Options(freq=Frequency.DAILY, interval=2))

        assert result == "RRULE:FREQ=DAILY;INTERVAL=2"

    def test_empty_options(self):
        assert options_to_string(Options()) == ""

    def test_mapping_input(self):
        result = options_to_string({"freq": Frequency.WEEKLY, "byweekday": [[0, -1]]})

        assert result == "RRULE:FREQ=WEEKLY;BYDAY=-1MO"

    def test_mapping_input_skips_unknown_keys(self):
        result = options_to_string({"freq": Frequency.DAILY, "color": "red", "count": None})

        assert result == "RRULE:FREQ=DAILY"

    def test_empty_list_skipped(self):
        assert options_to_string({"freq": Frequency.DAILY, "bymonth": []}) == "RRULE:FREQ=DAILY"

    def test_attribute_order(self):
        options = Options(
            byweekday=[MO, FR],
            bymonth=[1, 6],
            count=5,
            wkst=MO,
            interval=1,
            freq=Frequency.MONTHLY,
        )

        assert options_to_string(options) == (
            "RRULE:FREQ=MONTHLY;INTERVAL=1;WKST=MO;COUNT=5;BYMONTH=1,6;BYDAY=MO,FR"
        )

    def test_ordinal_weekdays(self):
        options = Options(freq=Frequency.MONTHLY, byweekday=[TH(4), FR(-1)])

        assert options_to_string(options) == "RRULE:FREQ=MONTHLY;BYDAY=+4TH,-1FR"

    def test_zoned_dtstart(self):
        options = Options(
            freq=Frequency.WEEKLY,
            dtstart=datetime(2020, 1, 1, 9),
            tzid="America/New_York",
            until=datetime(2020, 3, 1, 14, tzinfo=timezone.utc),
        )

        assert options_to_string(options) == (
            "DTSTART;TZID=America/New_York:20200101T090000\n"
            "RRULE:FREQ=WEEKLY;UNTIL=20200301T140000Z"
        )

    def test_zoned_rule_with_naive_until(self):
        options = Options(
            freq=Frequency.DAILY,
            dtstart=datetime(2020, 1, 1, 9),
            tzid="Europe/Paris",
            until=datetime(2020, 1, 5),
        )

        assert options_to_string(options) == (
            "DTSTART;TZID=Europe/Paris:20200101T090000\n"
            "RRULE:FREQ=DAILY;UNTIL=20200105T000000"
        )

    def test_date_until_in_date_time_rule(self):
        options = Options(
            freq=Frequency.DAILY,
            dtstart=datetime(2020, 1, 1, 9, tzinfo=timezone.utc),
            tzid="UTC",
            until=date(2020, 1, 5),
        )

        assert options_to_string(options) == (
            "DTSTART:20200101T090000Z\nRRULE:FREQ=DAILY;UNTIL=20200105"
        )

    def test_utc_dtstart(self):
        options = Options(freq=Frequency.DAILY, dtstart=datetime(2020, 1, 1, tzinfo=timezone.utc))

        assert options_to_string(options) == "DTSTART:20200101T000000Z\nRRULE:FREQ=DAILY"

    def test_dtstart_and_dtend_without_rule(self):
        options = Options(dtstart=datetime(2020, 1, 1, 9), dtend=datetime(2020, 1, 1, 10))

        assert options_to_string(options) == "DTSTART:20200101T090000\nDTEND:20200101T100000"

    def test_date_values(self):
        options = Options(
            freq=Frequency.YEARLY,
            dtstart=date(2020, 1, 1),
            dtvalue=DateTimeValue.DATE,
            until=date(2025, 1, 1),
        )

        assert options_to_string(options) == (
            "DTSTART;VALUE=DATE:20200101\nRRULE:FREQ=YEARLY;UNTIL=20250101"
        )

    def test_byeaster(self):
        assert options_to_string(Options(freq=Frequency.YEARLY, byeaster=0)) == (
            "RRULE:FREQ=YEARLY;BYEASTER=0"
        )
