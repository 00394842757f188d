"""타임카드 계산기 — 근무 시간, 휴식 시간, 일급 계산 (순수 함수).

Timecard calculator — Pure functions for worked hours, break time and pay.

Rules:
    - break_duration = break_end − break_start, 0 when either bound is missing
    - hours_worked = (check_out − check_in) − break_duration, 0 when either bound is missing
    - negative results are clamped to 0
    - daily_pay = hours_worked × pay_rate
    - hours, breaks and pay are rounded to 2 places with ROUND_HALF_UP
    - naive timestamps are treated as UTC
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Protocol

TWO_PLACES: Decimal = Decimal("0.01")
ZERO: Decimal = Decimal("0.00")
SECONDS_PER_HOUR: Decimal = Decimal(3600)
# 최대 근무 시간 — Shifts longer than this are flagged (not blocked)
MAX_SHIFT_HOURS: Decimal = Decimal(20)


class TimeFields(Protocol):
    """일별 시간 필드 — Anything carrying the four daily timestamps."""

    work_date: date
    check_in_time: datetime | None
    check_out_time: datetime | None
    break_start_time: datetime | None
    break_end_time: datetime | None


@dataclass
class DayResult:
    """일별 계산 결과 (Per-day calculation result)."""

    work_date: date
    hours_worked: Decimal
    break_duration: Decimal
    daily_pay: Decimal
    warnings: list[str] = field(default_factory=list)


@dataclass
class PeriodResult:
    """기간 계산 결과 (Per-period calculation result)."""

    days: list[DayResult]
    total_hours: Decimal
    total_break_duration: Decimal
    total_pay: Decimal

    @property
    def warnings(self) -> list[str]:
        return [f"{day.work_date}: {message}" for day in self.days for message in day.warnings]


def as_utc(value: datetime | None) -> datetime | None:
    """시각을 UTC aware로 정규화 (Normalize a timestamp to aware UTC; naive means UTC)."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def round_money(value: Decimal) -> Decimal:
    """소수점 2자리 반올림 (Round half-up to 2 decimal places)."""
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def _hours(delta: timedelta) -> Decimal:
    seconds: Decimal = Decimal(delta.days * 86400 + delta.seconds) + Decimal(delta.microseconds) / Decimal(1_000_000)
    return seconds / SECONDS_PER_HOUR


def _raw_break(break_start: datetime | None, break_end: datetime | None) -> Decimal:
    if break_start is None or break_end is None:
        return Decimal(0)
    return max(Decimal(0), _hours(as_utc(break_end) - as_utc(break_start)))


def break_hours(break_start: datetime | None, break_end: datetime | None) -> Decimal:
    """휴식 시간(시간 단위) (Break length in hours, rounded, never negative)."""
    return round_money(_raw_break(break_start, break_end))


def hours_worked(
    check_in: datetime | None,
    check_out: datetime | None,
    break_start: datetime | None = None,
    break_end: datetime | None = None,
) -> Decimal:
    """근무 시간 계산.

    Worked hours for one day: shift length minus break, clamped at zero.

    Args:
        check_in: 출근 시각 (Check-in time)
        check_out: 퇴근 시각 (Check-out time)
        break_start: 휴식 시작 (Break start, optional)
        break_end: 휴식 종료 (Break end, optional)

    Returns:
        Decimal: 근무 시간, 소수점 2자리 (Worked hours, 2 decimal places)
    """
    if check_in is None or check_out is None:
        return ZERO
    shift: Decimal = _hours(as_utc(check_out) - as_utc(check_in))
    worked: Decimal = shift - _raw_break(break_start, break_end)
    return round_money(max(Decimal(0), worked))


def daily_pay(worked: Decimal, pay_rate: Decimal) -> Decimal:
    """일급 = 근무 시간 × 시급 (Daily pay, rounded half-up, never negative)."""
    return round_money(max(Decimal(0), worked * pay_rate))


def validate_time_sequence(entry: TimeFields) -> list[str]:
    """시간 순서 검증 — 경고 목록 반환 (저장은 막지 않음).

    Check the ordering of the four timestamps. Returns human-readable
    warnings; an entry with warnings is still saved (values are clamped).

    Args:
        entry: 일별 시간 필드 (Daily time fields)

    Returns:
        list[str]: 경고 메시지 목록 (Warning messages, empty when consistent)
    """
    warnings: list[str] = []
    check_in: datetime | None = as_utc(entry.check_in_time)
    check_out: datetime | None = as_utc(entry.check_out_time)
    break_start: datetime | None = as_utc(entry.break_start_time)
    break_end: datetime | None = as_utc(entry.break_end_time)

    if check_out is not None and check_in is None:
        warnings.append("Check-out recorded without check-in")
    if check_in is not None and check_out is not None:
        if check_out <= check_in:
            warnings.append("Check-out must be after check-in")
        elif _hours(check_out - check_in) > MAX_SHIFT_HOURS:
            warnings.append(f"Shift exceeds {MAX_SHIFT_HOURS} hours")
    if (break_start is None) != (break_end is None):
        warnings.append("Break is missing a start or end time")
    if break_start is not None and break_end is not None:
        if break_end <= break_start:
            warnings.append("Break end must be after break start")
        if check_in is not None and break_start < check_in:
            warnings.append("Break starts before check-in")
        if check_out is not None and break_end > check_out:
            warnings.append("Break ends after check-out")
    return warnings


def calculate_day(entry: TimeFields, pay_rate: Decimal) -> DayResult:
    """하루치 계산 (Derive hours, break and pay for one entry)."""
    worked: Decimal = hours_worked(
        entry.check_in_time, entry.check_out_time, entry.break_start_time, entry.break_end_time
    )
    return DayResult(
        work_date=entry.work_date,
        hours_worked=worked,
        break_duration=break_hours(entry.break_start_time, entry.break_end_time),
        daily_pay=daily_pay(worked, pay_rate),
        warnings=validate_time_sequence(entry),
    )


def calculate_period(entries: Iterable[TimeFields], pay_rate: Decimal) -> PeriodResult:
    """기간 계산 — 일별 결과와 합계.

    Calculate every day and the period totals. Totals are sums of the
    already-rounded daily values, so they always equal the sum of the rows.

    Args:
        entries: 일별 시간 필드 목록 (Daily entries, any order)
        pay_rate: 시급 (Hourly pay rate)

    Returns:
        PeriodResult: 일별 결과(날짜순)와 합계 (Days by date plus totals)
    """
    days: list[DayResult] = sorted(
        (calculate_day(entry, pay_rate) for entry in entries),
        key=lambda day: day.work_date,
    )
    return PeriodResult(
        days=days,
        total_hours=sum((day.hours_worked for day in days), ZERO),
        total_break_duration=sum((day.break_duration for day in days), ZERO),
        total_pay=sum((day.daily_pay for day in days), ZERO),
    )
