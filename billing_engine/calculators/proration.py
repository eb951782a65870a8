"""
Proration Calculator

Prices a facility for the month, scaling the flat monthly rate by the share of
scheduled service days that fall outside a date-range pause.
"""

import calendar
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from ..models import FacilityResolution, MonthlyOverride, ProrationResult


def quantize_money(value: Decimal) -> Decimal:
    """Round to 2 decimal places, half up."""
    return value.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)


def weekday_index(day: date) -> int:
    """Weekday with Sunday = 0 through Saturday = 6."""
    return (day.weekday() + 1) % 7


def count_scheduled_days(
    year: int,
    month: int,
    days_of_week: tuple[int, ...],
    pause_start: int,
    pause_end: int,
) -> tuple[int, int]:
    """
    Count scheduled days in the month and those left after the pause range.

    Returns:
        (scheduled_days, active_days)
    """
    days_in_month = calendar.monthrange(year, month)[1]
    schedule = set(days_of_week)
    scheduled = 0
    paused = 0

    for day in range(1, days_in_month + 1):
        if weekday_index(date(year, month, day)) not in schedule:
            continue
        scheduled += 1
        if pause_start <= day <= pause_end:
            paused += 1

    return scheduled, scheduled - paused


class ProrationCalculator:
    """Computes the line item total for one resolved facility."""

    def calculate(
        self,
        resolution: FacilityResolution,
        override: MonthlyOverride | None,
        year: int,
        month: int,
    ) -> ProrationResult:
        """
        Price the facility.

        - Excluded facilities bill nothing.
        - A pause range pro-rates by scheduled service days, not calendar days.
          A Mondays-only facility with four Mondays loses a quarter of its
          rate for one paused Monday.
        - Otherwise the full effective rate applies.
        """
        if not resolution.included_in_total:
            return ProrationResult()

        if override is None or not override.has_pause_range:
            return ProrationResult(line_item_total=resolution.effective_rate)

        scheduled, active = count_scheduled_days(
            year,
            month,
            resolution.effective_days_of_week,
            override.pause_start_day,
            override.pause_end_day,
        )

        if scheduled > 0:
            total = quantize_money(resolution.effective_rate * active / scheduled)
        else:
            # Nothing scheduled this month
            total = Decimal('0')

        return ProrationResult(
            line_item_total=total,
            is_pro_rated=active < scheduled and scheduled > 0,
            scheduled_days=scheduled,
            active_days=active,
        )
