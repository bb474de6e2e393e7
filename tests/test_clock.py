"""
Tests for the time-zone aware clock.
"""

import pendulum

from meetingslots.domain.clock import Clock, FixedClock

TZ = "America/Santiago"


def test_now_is_in_configured_zone():
    assert Clock(TZ).now().timezone_name == TZ


def test_fixed_clock_converts_instant():
    clock = FixedClock(pendulum.datetime(2024, 11, 25, 12, 0, tz="UTC"), timezone=TZ)

    now = clock.now()

    assert now.timezone_name == TZ
    assert now.hour == 9


def test_day_bounds():
    clock = FixedClock(pendulum.parse("2024-11-25 15:20", tz=TZ))

    assert clock.start_of_day() == pendulum.parse("2024-11-25 00:00", tz=TZ)
    assert clock.end_of_day() == pendulum.parse("2024-11-25 23:59:59.999999", tz=TZ)


def test_day_bounds_localize_other_zones():
    clock = Clock(TZ)
    # 01:00 UTC on the 26th is still the 25th in Santiago
    moment = pendulum.datetime(2024, 11, 26, 1, 0, tz="UTC")

    assert clock.start_of_day(moment).to_date_string() == "2024-11-25"
    assert clock.end_of_day(moment).to_date_string() == "2024-11-25"
