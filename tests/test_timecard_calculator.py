"""타임카드 계산기 테스트 — 근무 시간, 휴식, 일급, 합계, 경고."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from talentops.services.timecard_calculator import (
    as_utc,
    break_hours,
    calculate_day,
    calculate_period,
    daily_pay,
    hours_worked,
    round_money,
    validate_time_sequence,
)

WORK_DATE = date(2026, 3, 2)


def at(hour: int, minute: int = 0, day: date = WORK_DATE) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute, tzinfo=timezone.utc)


@dataclass
class Entry:
    work_date: date
    check_in_time: datetime | None = None
    check_out_time: datetime | None = None
    break_start_time: datetime | None = None
    break_end_time: datetime | None = None


class TestHoursWorked:
    """근무 시간 계산 테스트"""

    def test_shift_minus_break(self):
        assert hours_worked(at(9), at(17, 30), at(12), at(12, 30)) == Decimal("8.00")

    def test_no_break(self):
        assert hours_worked(at(9), at(17)) == Decimal("8.00")

    def test_missing_check_out_is_zero(self):
        assert hours_worked(at(9), None) == Decimal("0.00")

    def test_missing_check_in_is_zero(self):
        assert hours_worked(None, at(17)) == Decimal("0.00")

    def test_break_longer_than_shift_clamps_to_zero(self):
        assert hours_worked(at(9), at(10), at(9), at(12)) == Decimal("0.00")

    def test_check_out_before_check_in_clamps_to_zero(self):
        assert hours_worked(at(17), at(9)) == Decimal("0.00")

    def test_half_break_ignored(self):
        assert hours_worked(at(9), at(17), at(12), None) == Decimal("8.00")

    def test_rounds_to_two_places(self):
        # 10분 = 0.1666... 시간
        assert hours_worked(at(9), at(9, 10)) == Decimal("0.17")

    def test_rounds_half_up(self):
        check_in = at(9)
        check_out = check_in + timedelta(seconds=450)  # 0.125 시간
        assert hours_worked(check_in, check_out) == Decimal("0.13")

    def test_overnight_shift(self):
        next_day = WORK_DATE + timedelta(days=1)
        assert hours_worked(at(22), at(2, day=next_day)) == Decimal("4.00")


class TestBreakHours:
    """휴식 시간 계산 테스트"""

    def test_half_hour(self):
        assert break_hours(at(12), at(12, 30)) == Decimal("0.50")

    def test_missing_bound(self):
        assert break_hours(None, at(12, 30)) == Decimal("0.00")

    def test_reversed_break_is_zero(self):
        assert break_hours(at(13), at(12)) == Decimal("0.00")


class TestDailyPay:
    """일급 계산 테스트"""

    def test_multiplies_rate(self):
        assert daily_pay(Decimal("8.00"), Decimal("25.00")) == Decimal("200.00")

    def test_rounds_half_up(self):
        assert daily_pay(Decimal("0.17"), Decimal("25.00")) == Decimal("4.25")
        assert daily_pay(Decimal("1.00"), Decimal("10.005")) == Decimal("10.01")

    def test_round_money(self):
        assert round_money(Decimal("2.345")) == Decimal("2.35")
        assert round_money(Decimal("2.344")) == Decimal("2.34")


class TestTimezones:
    """시간대 정규화 테스트"""

    def test_naive_is_utc(self):
        assert as_utc(datetime(2026, 3, 2, 9, 0)) == at(9)

    def test_aware_is_converted(self):
        plus_two = timezone(timedelta(hours=2))
        assert as_utc(datetime(2026, 3, 2, 11, 0, tzinfo=plus_two)) == at(9)

    def test_mixed_offsets(self):
        plus_two = timezone(timedelta(hours=2))
        check_in = datetime(2026, 3, 2, 11, 0, tzinfo=plus_two)  # 09:00 UTC
        assert hours_worked(check_in, datetime(2026, 3, 2, 17, 0)) == Decimal("8.00")


class TestValidateTimeSequence:
    """시간 순서 경고 테스트"""

    def test_consistent_entry_has_no_warnings(self):
        entry = Entry(WORK_DATE, at(9), at(17), at(12), at(12, 30))
        assert validate_time_sequence(entry) == []

    def test_check_out_without_check_in(self):
        assert "Check-out recorded without check-in" in validate_time_sequence(Entry(WORK_DATE, None, at(17)))

    def test_check_out_before_check_in(self):
        assert "Check-out must be after check-in" in validate_time_sequence(Entry(WORK_DATE, at(17), at(9)))

    def test_long_shift(self):
        next_day = WORK_DATE + timedelta(days=1)
        warnings = validate_time_sequence(Entry(WORK_DATE, at(6), at(8, day=next_day)))
        assert any("Shift exceeds" in w for w in warnings)

    def test_half_break(self):
        warnings = validate_time_sequence(Entry(WORK_DATE, at(9), at(17), at(12), None))
        assert "Break is missing a start or end time" in warnings

    def test_break_outside_shift(self):
        warnings = validate_time_sequence(Entry(WORK_DATE, at(9), at(17), at(8), at(18)))
        assert "Break starts before check-in" in warnings
        assert "Break ends after check-out" in warnings


class TestCalculatePeriod:
    """기간 합계 테스트"""

    def test_totals_are_sum_of_days(self):
        entries = [
            Entry(WORK_DATE, at(9), at(17)),
            Entry(WORK_DATE + timedelta(days=1)),
            Entry(WORK_DATE + timedelta(days=2), at(9, day=WORK_DATE + timedelta(days=2)),
                  at(17, 30, day=WORK_DATE + timedelta(days=2)),
                  at(12, day=WORK_DATE + timedelta(days=2)),
                  at(12, 30, day=WORK_DATE + timedelta(days=2))),
        ]
        result = calculate_period(entries, Decimal("25.00"))

        assert [d.hours_worked for d in result.days] == [Decimal("8.00"), Decimal("0.00"), Decimal("8.00")]
        assert result.total_hours == Decimal("16.00")
        assert result.total_break_duration == Decimal("0.50")
        assert result.total_pay == Decimal("400.00")

    def test_days_sorted_by_date(self):
        later = Entry(WORK_DATE + timedelta(days=3))
        earlier = Entry(WORK_DATE)
        result = calculate_period([later, earlier], Decimal("10"))
        assert [d.work_date for d in result.days] == [earlier.work_date, later.work_date]

    def test_totals_use_rounded_days(self):
        # 각 10분 = 0.17 시간, 합계는 반올림된 값의 합
        entries = [Entry(WORK_DATE + timedelta(days=i), at(9, day=WORK_DATE + timedelta(days=i)),
                         at(9, 10, day=WORK_DATE + timedelta(days=i))) for i in range(3)]
        result = calculate_period(entries, Decimal("25.00"))
        assert result.total_hours == Decimal("0.51")
        assert result.total_pay == Decimal("12.75")

    def test_empty_period(self):
        result = calculate_period([], Decimal("25.00"))
        assert result.days == []
        assert result.total_hours == Decimal("0.00")
        assert result.total_pay == Decimal("0.00")

    def test_warnings_are_prefixed_with_date(self):
        result = calculate_period([Entry(WORK_DATE, at(17), at(9))], Decimal("25.00"))
        assert result.warnings == [f"{WORK_DATE}: Check-out must be after check-in"]

    @pytest.mark.parametrize("rate", [Decimal("0"), Decimal("0.00")])
    def test_zero_rate(self, rate):
        day_result = calculate_day(Entry(WORK_DATE, at(9), at(17)), rate)
        assert day_result.hours_worked == Decimal("8.00")
        assert day_result.daily_pay == Decimal("0.00")
