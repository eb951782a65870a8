"""
Line Item Calculator

Runs one facility through resolve -> prorate -> tax and assembles its line item.
"""

from ..models import Client, FacilityLineItem, FacilitySnapshot
from .proration import ProrationCalculator
from .resolver import FacilityResolver
from .tax import TaxCalculator


class LineItemCalculator:
    """Prices a single facility for a single month."""

    def __init__(self):
        self.resolver = FacilityResolver()
        self.proration_calculator = ProrationCalculator()
        self.tax_calculator = TaxCalculator()

    def calculate(self, client: Client, facility: FacilitySnapshot, year: int, month: int) -> FacilityLineItem:
        profile = facility.profile
        override = facility.override

        resolution = self.resolver.resolve(facility, year, month)
        priced = self.proration_calculator.calculate(resolution, override, year, month)
        tax = self.tax_calculator.calculate(
            priced.line_item_total,
            profile.tax_behavior,
            client,
            resolution.included_in_total,
        )

        return FacilityLineItem(
            facility_profile_id=profile.id,
            location_name=profile.location_name,
            category=profile.category,
            effective_status=resolution.effective_status,
            effective_rate=resolution.effective_rate,
            effective_frequency=resolution.effective_frequency,
            effective_days_of_week=resolution.effective_days_of_week,
            is_overridden=resolution.is_overridden,
            override_notes=override.override_notes if override else None,
            is_seasonally_paused=resolution.is_seasonally_paused,
            included_in_total=resolution.included_in_total,
            tax_behavior=profile.tax_behavior,
            line_item_tax=tax,
            line_item_total=priced.line_item_total,
            is_pro_rated=priced.is_pro_rated,
            scheduled_days=priced.scheduled_days,
            active_days=priced.active_days,
            pause_start_day=override.pause_start_day if override else None,
            pause_end_day=override.pause_end_day if override else None,
        )

    def calculate_all(self, client: Client, facilities, year: int, month: int) -> list[FacilityLineItem]:
        """Facilities are independent; order follows the snapshot."""
        return [self.calculate(client, facility, year, month) for facility in facilities]
