"""
Tests for slot generator.
"""

import pendulum
import pytest

from meetingslots.domain.models import BusyWindow, SlotTemplate
from meetingslots.domain.slot_generator import SlotGenerator

TZ = "America/Santiago"
DEFAULT_TEMPLATES = ["09:00", "11:00", "14:00", "16:00"]


def _at(value: str):
    return pendulum.parse(value, tz=TZ)


def _generator(templates=DEFAULT_TEMPLATES, duration=45) -> SlotGenerator:
    return SlotGenerator(
        templates=[SlotTemplate.parse(t) for t in templates],
        duration_minutes=duration,
    )


class TestGenerateDays:
    """Tests for business day enumeration."""

    def test_never_includes_weekends_over_a_year(self):
        """No start date in a full year yields a Saturday or Sunday."""
        generator = _generator()
        reference = _at("2024-01-01 10:00")

        for offset in range(366):
            days = generator.generate_days(reference.add(days=offset), 12)
            assert all(day.isoweekday() <= 5 for day in days)

    @pytest.mark.parametrize("offset", range(7))
    def test_returns_exactly_lookahead_days(self, offset):
        """Lookahead counts business days whatever weekday we start on."""
        generator = _generator()
        reference = _at("2024-11-25 10:00").add(days=offset)

        for count in (1, 5, 12):
            days = generator.generate_days(reference, count)
            assert len(days) == count
            assert len({day.date() for day in days}) == count

    def test_starts_today_on_a_business_day(self):
        days = _generator().generate_days(_at("2024-11-27 15:30"), 3)  # Wednesday

        assert [d.to_date_string() for d in days] == ["2024-11-27", "2024-11-28", "2024-11-29"]
        assert all(d.hour == 0 and d.minute == 0 for d in days)

    def test_skips_weekend(self):
        days = _generator().generate_days(_at("2024-11-29 10:00"), 3)  # Friday

        assert [d.to_date_string() for d in days] == ["2024-11-29", "2024-12-02", "2024-12-03"]

    def test_saturday_start_begins_on_monday(self):
        days = _generator().generate_days(_at("2024-11-23 10:00"), 1)

        assert days[0].to_date_string() == "2024-11-25"

    def test_zero_lookahead(self):
        assert _generator().generate_days(_at("2024-11-25 10:00"), 0) == []


class TestGenerateSlotsForDay:
    """Tests for per-day slot generation."""

    def test_monday_morning_scenario(self):
        """Monday 08:00, nothing busy, two templates, 45 minutes."""
        generator = _generator(["09:00", "11:00"], 45)
        now = _at("2024-11-25 08:00")

        slots = generator.generate_slots_for_day(now.start_of("day"), now, [])

        assert [(s.start, s.end) for s in slots] == [
            (_at("2024-11-25 09:00"), _at("2024-11-25 09:45")),
            (_at("2024-11-25 11:00"), _at("2024-11-25 11:45")),
        ]
        assert [s.label for s in slots] == ["09:00", "11:00"]

    def test_busy_window_excludes_overlapping_slot(self):
        generator = _generator(["09:00", "11:00", "14:00"], 45)
        now = _at("2024-11-25 08:00")
        busy = [BusyWindow(start=_at("2024-11-25 10:30"), end=_at("2024-11-25 12:00"))]

        slots = generator.generate_slots_for_day(now.start_of("day"), now, busy)

        assert [s.label for s in slots] == ["09:00", "14:00"]

    def test_touching_busy_window_keeps_slot(self):
        generator = _generator(["09:00"], 45)
        now = _at("2024-11-25 08:00")
        busy = [
            BusyWindow(start=_at("2024-11-25 08:00"), end=_at("2024-11-25 09:00")),
            BusyWindow(start=_at("2024-11-25 09:45"), end=_at("2024-11-25 11:00")),
        ]

        slots = generator.generate_slots_for_day(now.start_of("day"), now, busy)

        assert [s.label for s in slots] == ["09:00"]

    def test_slot_starting_now_is_kept(self):
        generator = _generator(["09:00", "11:00"])
        now = _at("2024-11-25 09:00")

        slots = generator.generate_slots_for_day(now.start_of("day"), now, [])

        assert [s.label for s in slots] == ["09:00", "11:00"]

    def test_past_slot_is_dropped(self):
        generator = _generator(["09:00", "11:00"])
        now = _at("2024-11-25 09:00").add(seconds=1)

        slots = generator.generate_slots_for_day(now.start_of("day"), now, [])

        assert [s.label for s in slots] == ["11:00"]

    def test_future_day_ignores_time_of_now(self):
        generator = _generator()
        now = _at("2024-11-25 17:00")

        slots = generator.generate_slots_for_day(_at("2024-11-26 00:00"), now, [])

        assert len(slots) == 4

    def test_preserves_template_order(self):
        generator = _generator(DEFAULT_TEMPLATES)
        now = _at("2024-11-25 08:00")

        slots = generator.generate_slots_for_day(now.start_of("day"), now, [])

        assert [s.label for s in slots] == DEFAULT_TEMPLATES

    def test_does_not_sort_unsorted_templates(self):
        templates = ["16:00", "09:00", "14:00", "11:00"]
        generator = _generator(templates)
        now = _at("2024-11-25 08:00")

        slots = generator.generate_slots_for_day(now.start_of("day"), now, [])

        assert [s.label for s in slots] == templates

    def test_slots_carry_configured_zone(self):
        generator = _generator(["09:00"], 30)
        now = _at("2024-11-25 08:00")

        slot = generator.generate_slots_for_day(now.start_of("day"), now, [])[0]

        assert slot.start.timezone_name == TZ
        assert slot.end == _at("2024-11-25 09:30")

    def test_rejects_non_positive_duration(self):
        with pytest.raises(ValueError):
            _generator(duration=0)
