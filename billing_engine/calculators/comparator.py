"""
Month-over-Month Comparator

Recomputes the previous month's total with the same rules and describes the
change. Best effort: a failed comparison never fails the current month.
"""

import logging
from decimal import Decimal

from ..loader import ConfigurationLoader
from ..models import (
    BillingPreview,
    DeltaReport,
    FacilityDelta,
    MonthComparison,
)
from .aggregator import BillingAggregator, format_money
from .line_item import LineItemCalculator
from .proration import quantize_money

logger = logging.getLogger(__name__)

MONTH_LABELS = [
    '', 'January', 'February', 'March', 'April', 'May', 'June',
    'July', 'August', 'September', 'October', 'November', 'December',
]


def previous_month(year: int, month: int) -> tuple[int, int]:
    """January wraps to December of the prior year."""
    if month == 1:
        return year - 1, 12
    return year, month - 1


class MonthOverMonthComparator:
    """Compares a month's total against the previous month."""

    def __init__(self, loader: ConfigurationLoader, line_item_calculator: LineItemCalculator,
                 aggregator: BillingAggregator):
        self.loader = loader
        self.line_item_calculator = line_item_calculator
        self.aggregator = aggregator

    def previous_total(self, client_id: str, company_id: str, year: int, month: int) -> Decimal:
        """
        Total for (year, month) without building the explanation.
        """
        snapshot = self.loader.load(client_id, company_id, year, month)
        line_items = self.line_item_calculator.calculate_all(snapshot.client, snapshot.facilities, year, month)
        return self.aggregator.aggregate(line_items).total

    def compare(self, client_id: str, company_id: str, year: int, month: int, total: Decimal) -> MonthComparison:
        prev_year, prev_month = previous_month(year, month)
        try:
            previous_total = self.previous_total(client_id, company_id, prev_year, prev_month)
        except Exception as e:
            logger.warning(
                f"Previous month comparison unavailable for client {client_id} "
                f"({prev_year}-{prev_month:02d}): {str(e)}",
                exc_info=True,
            )
            return MonthComparison()

        delta = quantize_money(total - previous_total)
        reason = None
        if delta != 0:
            direction = "increase" if delta > 0 else "decrease"
            reason = f"{format_money(abs(delta))} {direction} from {MONTH_LABELS[prev_month]}"

        return MonthComparison(
            previous_month_total=previous_total,
            delta_amount=delta,
            delta_reason=reason,
        )


class DeltaReportBuilder:
    """Merges two full previews into a per-facility comparison."""

    def build(self, current: BillingPreview, previous: BillingPreview) -> DeltaReport:
        facilities: dict[str, FacilityDelta] = {}

        for li in current.line_items:
            facilities[li.facility_profile_id] = FacilityDelta(
                facility_profile_id=li.facility_profile_id,
                location_name=li.location_name,
                category=li.category,
                current_status=li.effective_status.value,
                current_rate=li.effective_rate,
                current_total=li.line_item_total,
                current_frequency=li.effective_frequency,
                current_included=li.included_in_total,
                total_delta=li.line_item_total,
                is_new=True,
                change_type="added",
            )

        for li in previous.line_items:
            existing = facilities.get(li.facility_profile_id)
            if existing is None:
                # Existed last month but not this month
                facilities[li.facility_profile_id] = FacilityDelta(
                    facility_profile_id=li.facility_profile_id,
                    location_name=li.location_name,
                    category=li.category,
                    previous_status=li.effective_status.value,
                    previous_rate=li.effective_rate,
                    previous_total=li.line_item_total,
                    previous_frequency=li.effective_frequency,
                    previous_included=li.included_in_total,
                    total_delta=-li.line_item_total,
                    is_removed=True,
                    change_type="removed",
                )
                continue

            existing.previous_status = li.effective_status.value
            existing.previous_rate = li.effective_rate
            existing.previous_total = li.line_item_total
            existing.previous_frequency = li.effective_frequency
            existing.previous_included = li.included_in_total
            existing.total_delta = existing.current_total - li.line_item_total
            existing.is_new = False
            if existing.total_delta == 0 and existing.current_status == existing.previous_status:
                existing.change_type = "unchanged"
            else:
                existing.change_type = "changed"

        return DeltaReport(
            current=current,
            previous=previous,
            total_delta=current.total - previous.total,
            subtotal_delta=current.subtotal - previous.subtotal,
            tax_delta=current.tax_amount - previous.tax_amount,
            facilities=list(facilities.values()),
        )
