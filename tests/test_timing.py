import time

import pytest

from taskbase.timing import (
    ElapsedTimer,
    Time,
    TimeDelta,
    TimeTicks,
    days,
    hours,
    microseconds,
    milliseconds,
    minutes,
    nanoseconds,
    seconds,
)


def test_default_delta_is_zero():
    delta = TimeDelta()
    assert delta.is_zero()
    assert delta == microseconds(0)


def test_factories_agree():
    assert days(1) == hours(24)
    assert hours(1) == minutes(60)
    assert minutes(1) == seconds(60)
    assert seconds(1) == milliseconds(1000)
    assert milliseconds(1) == microseconds(1000)
    assert microseconds(1) == nanoseconds(1000)


@pytest.mark.parametrize("n", [0, 3, -7])
def test_unit_round_trips(n):
    assert days(n).in_days() == n
    assert hours(n).in_hours() == n
    assert minutes(n).in_minutes() == n
    assert seconds(n).in_seconds() == n
    assert milliseconds(n).in_milliseconds() == n
    assert microseconds(n).in_microseconds() == n
    assert nanoseconds(n * 1000).in_nanoseconds() == n * 1000


def test_conversions_truncate_toward_zero():
    assert milliseconds(1500).in_seconds() == 1
    assert milliseconds(-1500).in_seconds() == -1
    assert nanoseconds(1999) == microseconds(1)
    assert nanoseconds(-1999) == -microseconds(1)


def test_fractional_inputs():
    assert seconds(1.5) == milliseconds(1500)
    assert seconds(1.5).in_seconds_f() == 1.5
    assert milliseconds(2.5).in_milliseconds_f() == 2.5
    assert microseconds(42).in_microseconds_f() == 42.0


def test_predicates():
    assert seconds(1).is_positive()
    assert not seconds(1).is_negative()
    assert seconds(-1).is_negative()
    assert not seconds(-1).is_zero()


def test_arithmetic():
    a = seconds(5)
    b = milliseconds(250)
    assert a + b - b == a
    assert -(-a) == a
    assert a * 3 == a + a + a
    assert 3 * a == a * 3
    assert (a * 3) / 3 == a
    total = a
    total += b
    assert total == a + b
    total -= b
    assert total == a


def test_ordering():
    assert milliseconds(1) < seconds(1)
    assert seconds(1) >= milliseconds(1000)
    assert sorted([seconds(3), seconds(1), seconds(2)]) == [seconds(1), seconds(2), seconds(3)]


def test_delta_from_timespec():
    assert TimeDelta.from_timespec(2, 500_000_999) == seconds(2) + microseconds(500_000)


def test_delta_hashable():
    assert len({seconds(1), milliseconds(1000), seconds(2)}) == 2


def test_time_t_round_trip():
    assert Time.from_time_t(1_700_000_000).to_time_t() == 1_700_000_000


def test_timespec_round_trip():
    t = Time.from_timespec(123, 456_789_000)
    assert t.to_timespec() == (123, 456_789_000)


def test_time_arithmetic():
    t = Time.from_time_t(1000)
    delta = milliseconds(1234)
    assert t + delta - delta == t
    assert (t + delta) - t == delta
    assert t + delta > t
    assert t - delta < t


def test_time_now_is_current():
    before = Time.from_time_t(int(time.time()) - 1)
    now = Time.now()
    after = Time.from_time_t(int(time.time()) + 2)
    assert before <= now <= after


def test_ticks_monotonic():
    first = TimeTicks.now()
    second = TimeTicks.now()
    assert second >= first
    assert not (second - first).is_negative()
    assert first + (second - first) == second


def test_mixing_clocks_is_rejected():
    with pytest.raises(TypeError):
        Time.now() < TimeTicks.now()
    with pytest.raises(TypeError):
        Time.now() - TimeTicks.now()


def test_elapsed_timer():
    timer = ElapsedTimer()
    begin = timer.begin()
    time.sleep(0.01)
    elapsed = timer.elapsed()
    assert elapsed >= milliseconds(10)
    assert timer.begin() == begin
    assert begin <= TimeTicks.now()