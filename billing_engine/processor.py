"""
Billing Processor - Main Orchestrator

Coordinates billing preview generation through discrete, testable steps.
"""

from typing import Any, Dict

from .calculators import (
    BillingAggregator,
    DeltaReportBuilder,
    ExplanationBuilder,
    LineItemCalculator,
    MonthOverMonthComparator,
)
from .calculators.comparator import MONTH_LABELS, previous_month
from .loader import ConfigurationLoader, ConfigurationStore, InMemoryConfigurationStore
from .models import BillingContext, BillingPreview, Client, DeltaReport
from .output import OutputBuilder
from .validators import RequestValidator


class BillingProcessor:
    """
    Main orchestrator for billing previews.

    Implements a clear pipeline pattern:
    1. Validate Request
    2. Load Configuration Snapshot
    3. Price Each Facility (resolve, prorate, tax)
    4. Aggregate Totals
    5. Build Explanation
    6. Compare With Previous Month (best effort)
    7. Build Preview
    """

    def __init__(self, store: ConfigurationStore):
        self.validator = RequestValidator()
        self.loader = ConfigurationLoader(store)
        self.line_item_calculator = LineItemCalculator()
        self.aggregator = BillingAggregator()
        self.explanation_builder = ExplanationBuilder()
        self.comparator = MonthOverMonthComparator(self.loader, self.line_item_calculator, self.aggregator)
        self.delta_report_builder = DeltaReportBuilder()
        self.output_builder = OutputBuilder()

    def preview(self, client_id: str, company_id: str, year: int, month: int) -> BillingPreview:
        """
        Generate the billing preview for one client and month.

        Raises:
            ValueError: invalid request parameters
            ClientNotFoundError: unknown client or outside company scope
        """
        # Step 1: Validate
        self.validator.validate(client_id, company_id, year, month)

        # Step 2: Load snapshot
        ctx = BillingContext(snapshot=self.loader.load(client_id, company_id, year, month))
        client = ctx.snapshot.client

        # Step 3: Price facilities
        ctx.line_items = self.line_item_calculator.calculate_all(client, ctx.snapshot.facilities, year, month)

        # Step 4: Aggregate
        ctx.totals = self.aggregator.aggregate(ctx.line_items)

        # Step 5: Explain
        ctx.explanation = self.explanation_builder.build(ctx.snapshot.facilities, ctx.line_items, month)

        # Step 6: Previous month
        ctx.comparison = self.comparator.compare(client_id, company_id, year, month, ctx.totals.total)
        ctx.explanation.delta_amount = ctx.comparison.delta_amount
        ctx.explanation.delta_reason = ctx.comparison.delta_reason

        # Step 7: Build preview
        return self._build_preview(ctx)

    def delta_report(self, client_id: str, company_id: str, year: int, month: int) -> DeltaReport:
        """Compare a month against the previous one facility by facility."""
        self.validator.validate(client_id, company_id, year, month)
        prev_year, prev_month = previous_month(year, month)

        current = self.preview(client_id, company_id, year, month)
        previous = self.preview(client_id, company_id, prev_year, prev_month)
        return self.delta_report_builder.build(current, previous)

    def preview_to_dict(self, client_id: str, company_id: str, year: int, month: int) -> Dict[str, Any]:
        return self.output_builder.build_preview(self.preview(client_id, company_id, year, month))

    def delta_report_to_dict(self, client_id: str, company_id: str, year: int, month: int) -> Dict[str, Any]:
        return self.output_builder.build_delta_report(self.delta_report(client_id, company_id, year, month))

    def _build_preview(self, ctx: BillingContext) -> BillingPreview:
        snapshot = ctx.snapshot
        client = snapshot.client
        return BillingPreview(
            client_id=client.id,
            client_name=client.name,
            year=snapshot.year,
            month=snapshot.month,
            month_label=MONTH_LABELS[snapshot.month],
            line_items=ctx.line_items,
            subtotal=ctx.totals.subtotal,
            tax_rate=client.tax_rate,
            tax_amount=ctx.totals.tax_amount,
            total=ctx.totals.total,
            display_mode=client.billing_display_mode,
            explanation=ctx.explanation,
            previous_month_total=ctx.comparison.previous_month_total,
            active_facility_count=sum(1 for li in ctx.line_items if li.included_in_total),
            total_facility_count=len(ctx.line_items),
        )


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def preview_from_dict(input_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Compute a preview from an inline client snapshot.

    Expected shape: {"client": {...}, "year": 2026, "month": 3}.
    "company_id" defaults to the client's own company.
    """
    if "client" not in input_data:
        raise ValueError("client is required")

    client = Client.from_dict(input_data["client"])
    company_id = input_data.get("company_id", client.company_id)
    processor = BillingProcessor(InMemoryConfigurationStore([client]))
    return processor.preview_to_dict(client.id, company_id, input_data.get("year"), input_data.get("month"))
