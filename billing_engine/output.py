"""
Output Builder

Constructs JSON-safe API responses from billing results.
"""

from decimal import Decimal
from typing import Optional

from .models import BillingExplanation, BillingPreview, DeltaReport, FacilityDelta, FacilityLineItem


def to_money(value: Optional[Decimal]) -> Optional[float]:
    """Convert Decimal to float with 2 decimal places."""
    if value is None:
        return None
    return round(float(value), 2)


class OutputBuilder:
    """Builds the final output response."""

    def build_preview(self, preview: BillingPreview) -> dict:
        return {
            "client_id": preview.client_id,
            "client_name": preview.client_name,
            "year": preview.year,
            "month": preview.month,
            "month_label": preview.month_label,
            "line_items": [self._build_line_item(li) for li in preview.line_items],
            "subtotal": to_money(preview.subtotal),
            "tax_rate": float(preview.tax_rate),
            "tax_amount": to_money(preview.tax_amount),
            "total": to_money(preview.total),
            "display_mode": preview.display_mode,
            "explanation": self._build_explanation(preview.explanation),
            "previous_month_total": to_money(preview.previous_month_total),
            "active_facility_count": preview.active_facility_count,
            "total_facility_count": preview.total_facility_count,
        }

    def build_delta_report(self, report: DeltaReport) -> dict:
        return {
            "current_month": self._build_month_summary(report.current),
            "previous_month": self._build_month_summary(report.previous),
            "total_delta": to_money(report.total_delta),
            "subtotal_delta": to_money(report.subtotal_delta),
            "tax_delta": to_money(report.tax_delta),
            "facilities": [self._build_facility_delta(f) for f in report.facilities],
            "changed_count": report.changed_count,
            "unchanged_count": report.unchanged_count,
        }

    def _build_line_item(self, li: FacilityLineItem) -> dict:
        return {
            "facility_profile_id": li.facility_profile_id,
            "location_name": li.location_name,
            "category": li.category,
            "effective_status": li.effective_status.value,
            "effective_rate": to_money(li.effective_rate),
            "effective_frequency": li.effective_frequency,
            "effective_days_of_week": list(li.effective_days_of_week),
            "is_overridden": li.is_overridden,
            "override_notes": li.override_notes,
            "is_seasonally_paused": li.is_seasonally_paused,
            "included_in_total": li.included_in_total,
            "tax_behavior": li.tax_behavior.value,
            "line_item_tax": to_money(li.line_item_tax),
            "line_item_total": to_money(li.line_item_total),
            "is_pro_rated": li.is_pro_rated,
            "scheduled_days": li.scheduled_days,
            "active_days": li.active_days,
            "pause_start_day": li.pause_start_day,
            "pause_end_day": li.pause_end_day,
        }

    def _build_explanation(self, explanation: BillingExplanation) -> dict:
        return {
            "active_facilities": list(explanation.active_facilities),
            "paused_facilities": list(explanation.paused_facilities),
            "seasonally_paused": list(explanation.seasonally_paused),
            "pending_approval": list(explanation.pending_approval),
            "closed_facilities": list(explanation.closed_facilities),
            "overrides": list(explanation.overrides),
            "delta_amount": to_money(explanation.delta_amount),
            "delta_reason": explanation.delta_reason,
        }

    def _build_month_summary(self, preview: BillingPreview) -> dict:
        return {
            "year": preview.year,
            "month": preview.month,
            "month_label": preview.month_label,
            "total": to_money(preview.total),
        }

    def _build_facility_delta(self, delta: FacilityDelta) -> dict:
        return {
            "facility_profile_id": delta.facility_profile_id,
            "location_name": delta.location_name,
            "category": delta.category,
            "current_status": delta.current_status,
            "previous_status": delta.previous_status,
            "current_rate": to_money(delta.current_rate),
            "previous_rate": to_money(delta.previous_rate),
            "current_total": to_money(delta.current_total),
            "previous_total": to_money(delta.previous_total),
            "current_frequency": delta.current_frequency,
            "previous_frequency": delta.previous_frequency,
            "current_included": delta.current_included,
            "previous_included": delta.previous_included,
            "total_delta": to_money(delta.total_delta),
            "is_new": delta.is_new,
            "is_removed": delta.is_removed,
            "change_type": delta.change_type,
        }
