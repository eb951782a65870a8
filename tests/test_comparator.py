"""
Unit Tests for the Month-over-Month Comparator and delta report
"""

from decimal import Decimal

import pytest

from billing_engine import BillingProcessor, InMemoryConfigurationStore
from billing_engine.calculators import BillingAggregator, DeltaReportBuilder, LineItemCalculator
from billing_engine.calculators.comparator import MONTH_LABELS, MonthOverMonthComparator, previous_month
from billing_engine.loader import ConfigurationLoader, ConfigurationStore
from billing_engine.models import Client


def make_client(overrides=None, facilities=None) -> Client:
    return Client.from_dict({
        "id": "client-1",
        "company_id": "company-1",
        "name": "Harbor Offices",
        "tax_exempt": True,
        "facilities": facilities or [
            {
                "id": "fp-1",
                "location_name": "Lobby",
                "default_monthly_rate": 1000,
                "normal_days_of_week": [1, 3, 5],
                "monthly_overrides": overrides or [],
            }
        ],
    })


class FailingStore(ConfigurationStore):
    def get_client(self, client_id, company_id):
        raise RuntimeError("database unavailable")


def make_comparator(store) -> MonthOverMonthComparator:
    return MonthOverMonthComparator(ConfigurationLoader(store), LineItemCalculator(), BillingAggregator())


class TestPreviousMonth:

    def test_mid_year(self):
        assert previous_month(2026, 3) == (2026, 2)

    def test_january_wraps_to_december(self):
        assert previous_month(2026, 1) == (2025, 12)

    def test_month_labels(self):
        assert MONTH_LABELS[1] == "January"
        assert MONTH_LABELS[12] == "December"


class TestMonthOverMonthComparator:
    """Previous totals use the same precedence, proration and tax rules."""

    def test_previous_total_uses_previous_month_override(self):
        client = make_client(overrides=[{"year": 2026, "month": 2, "override_rate": 1500}])
        comparator = make_comparator(InMemoryConfigurationStore([client]))

        assert comparator.previous_total("client-1", "company-1", 2026, 2) == Decimal("1500.00")

    def test_increase(self):
        client = make_client(overrides=[{"year": 2026, "month": 3, "override_rate": 1200}])
        comparator = make_comparator(InMemoryConfigurationStore([client]))

        result = comparator.compare("client-1", "company-1", 2026, 3, Decimal("1200.00"))

        assert result.previous_month_total == Decimal("1000.00")
        assert result.delta_amount == Decimal("200.00")
        assert result.delta_reason == "$200.00 increase from February"

    def test_decrease(self):
        client = make_client(overrides=[{"year": 2026, "month": 2, "override_rate": 1500}])
        comparator = make_comparator(InMemoryConfigurationStore([client]))

        result = comparator.compare("client-1", "company-1", 2026, 3, Decimal("1000.00"))

        assert result.delta_amount == Decimal("-500.00")
        assert result.delta_reason == "$500.00 decrease from February"

    def test_no_change_has_no_reason(self):
        comparator = make_comparator(InMemoryConfigurationStore([make_client()]))

        result = comparator.compare("client-1", "company-1", 2026, 3, Decimal("1000.00"))

        assert result.delta_amount == Decimal("0.00")
        assert result.delta_reason is None

    def test_january_compares_against_december(self):
        client = make_client(overrides=[{"year": 2025, "month": 12, "override_status": "PAUSED"}])
        comparator = make_comparator(InMemoryConfigurationStore([client]))

        result = comparator.compare("client-1", "company-1", 2026, 1, Decimal("1000.00"))

        assert result.previous_month_total == Decimal("0.00")
        assert result.delta_reason == "$1,000.00 increase from December"

    def test_missing_client_is_unavailable(self):
        comparator = make_comparator(InMemoryConfigurationStore())

        result = comparator.compare("client-1", "company-1", 2026, 3, Decimal("1000.00"))

        assert result.previous_month_total is None
        assert result.delta_amount is None
        assert result.delta_reason is None

    def test_store_failure_is_unavailable(self):
        comparator = make_comparator(FailingStore())

        result = comparator.compare("client-1", "company-1", 2026, 3, Decimal("1000.00"))

        assert result.previous_month_total is None
        assert result.delta_amount is None


class TestDeltaReportBuilder:
    """Per-facility merge of two full previews."""

    @pytest.fixture
    def builder(self):
        return DeltaReportBuilder()

    def _preview(self, facilities, month):
        client = make_client(facilities=facilities)
        processor = BillingProcessor(InMemoryConfigurationStore([client]))
        return processor.preview("client-1", "company-1", 2026, month)

    def test_added_removed_changed_unchanged(self, builder):
        current = self._preview([
            {"id": "same", "location_name": "Lobby", "default_monthly_rate": 1000},
            {"id": "raised", "location_name": "Gym", "default_monthly_rate": 800},
            {"id": "new", "location_name": "Annex", "default_monthly_rate": 300},
        ], 3)
        previous = self._preview([
            {"id": "same", "location_name": "Lobby", "default_monthly_rate": 1000},
            {"id": "raised", "location_name": "Gym", "default_monthly_rate": 600},
            {"id": "gone", "location_name": "Kiosk", "default_monthly_rate": 200},
        ], 2)

        report = builder.build(current, previous)
        by_id = {f.facility_profile_id: f for f in report.facilities}

        assert by_id["same"].change_type == "unchanged"
        assert by_id["raised"].change_type == "changed"
        assert by_id["raised"].total_delta == Decimal("200")
        assert by_id["new"].change_type == "added"
        assert by_id["new"].is_new is True
        assert by_id["gone"].change_type == "removed"
        assert by_id["gone"].is_removed is True
        assert by_id["gone"].total_delta == Decimal("-200")
        assert report.changed_count == 3
        assert report.unchanged_count == 1
        assert report.total_delta == Decimal("300.00")

    def test_status_change_with_equal_total_is_changed(self, builder):
        current = self._preview([
            {"id": "a", "location_name": "Lobby", "default_monthly_rate": 0, "status": "PAUSED"},
        ], 3)
        previous = self._preview([
            {"id": "a", "location_name": "Lobby", "default_monthly_rate": 0},
        ], 2)

        report = builder.build(current, previous)

        assert report.facilities[0].change_type == "changed"
        assert report.facilities[0].current_status == "PAUSED"
        assert report.facilities[0].previous_status == "ACTIVE"
