"""
Aggregator & Explainer

Sums line items into totals and classifies every facility for the
human-readable explanation.
"""

from decimal import Decimal

from ..models import (
    BillingExplanation,
    BillingTotals,
    EffectiveStatus,
    FacilityLineItem,
    FacilitySnapshot,
    MonthlyOverride,
)
from .proration import quantize_money


def format_money(value) -> str:
    """Format a number as currency string for descriptions."""
    return f"${value:,.2f}"


class BillingAggregator:
    """Computes subtotal, tax and total for a month."""

    def aggregate(self, line_items: list[FacilityLineItem]) -> BillingTotals:
        """
        Each sum is rounded on its own before the grand total is formed.
        """
        subtotal = quantize_money(sum((li.line_item_total for li in line_items), Decimal('0')))
        tax_amount = quantize_money(sum((li.line_item_tax for li in line_items), Decimal('0')))
        return BillingTotals(
            subtotal=subtotal,
            tax_amount=tax_amount,
            total=quantize_money(subtotal + tax_amount),
        )


class ExplanationBuilder:
    """Classifies facilities by effective status and describes overrides."""

    def build(
        self,
        facilities: tuple[FacilitySnapshot, ...],
        line_items: list[FacilityLineItem],
        month: int,
    ) -> BillingExplanation:
        explanation = BillingExplanation()
        buckets = {
            EffectiveStatus.ACTIVE: explanation.active_facilities,
            EffectiveStatus.PAUSED: explanation.paused_facilities,
            EffectiveStatus.SEASONAL_PAUSED: explanation.seasonally_paused,
            EffectiveStatus.PENDING_APPROVAL: explanation.pending_approval,
            EffectiveStatus.CLOSED: explanation.closed_facilities,
        }

        for facility, line_item in zip(facilities, line_items):
            if facility.override is not None:
                description = self.describe_override(line_item, facility.override, month)
                if description:
                    explanation.overrides.append(description)

            buckets[line_item.effective_status].append(line_item.location_name)

        return explanation

    def describe_override(self, line_item: FacilityLineItem, override: MonthlyOverride, month: int) -> str | None:
        """
        Describe each field the override changed, e.g.
        "Main Office: rate → $1,200.00, paused 3/10–3/20 (spring break)".

        Returns None when the override changed nothing worth reporting.
        """
        parts = []
        if override.override_rate is not None:
            parts.append(f"rate → {format_money(override.override_rate)}")
        if override.override_status is not None:
            parts.append(f"status → {override.override_status.value}")
        if override.override_frequency is not None:
            parts.append(f"frequency → {override.override_frequency}x/week")
        if line_item.included_in_total and override.has_pause_range:
            parts.append(f"paused {month}/{override.pause_start_day}–{month}/{override.pause_end_day}")

        if not parts:
            return None

        description = f"{line_item.location_name}: {', '.join(parts)}"
        if override.override_notes:
            description += f" ({override.override_notes})"
        return description
