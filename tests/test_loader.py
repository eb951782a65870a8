"""
Tests for the Configuration Loader and in-memory store
"""

import json
from decimal import Decimal

import pytest

from billing_engine.loader import ClientNotFoundError, ConfigurationLoader, InMemoryConfigurationStore
from billing_engine.models import Client, FacilityStatus, OverrideStatus, TaxBehavior


@pytest.fixture
def client_data():
    return {
        "id": "client-1",
        "company_id": "company-1",
        "name": "Harbor Offices",
        "tax_rate": 0.0825,
        "facilities": [
            {
                "id": "fp-b",
                "location_name": "Warehouse",
                "default_monthly_rate": 500,
                "sort_order": 2,
            },
            {
                "id": "fp-a",
                "location_name": "Lobby",
                "default_monthly_rate": 1000,
                "status": "ACTIVE",
                "normal_frequency_per_week": 3,
                "normal_days_of_week": [1, 3, 5],
                "tax_behavior": "PRE_TAX",
                "seasonal_rules_enabled": True,
                "sort_order": 1,
                "seasonal_rules": [
                    {"active_months": [5, 6, 7], "is_active": True},
                    {"paused_months": [1], "is_active": False},
                ],
                "monthly_overrides": [
                    {"year": 2026, "month": 3, "override_rate": 1200},
                    {"year": 2026, "month": 4, "override_status": "PAUSED"},
                ],
            },
        ],
    }


@pytest.fixture
def store(client_data):
    return InMemoryConfigurationStore.from_dict({"clients": [client_data]})


class TestModelParsing:
    """from_dict builds typed, immutable records."""

    def test_client_fields(self, client_data):
        client = Client.from_dict(client_data)

        assert client.tax_rate == Decimal("0.0825")
        assert client.tax_exempt is False
        assert client.billing_display_mode == "DETAILED"
        assert len(client.facilities) == 2

    def test_facility_defaults(self, client_data):
        warehouse = Client.from_dict(client_data).facilities[0]

        assert warehouse.status == FacilityStatus.ACTIVE
        assert warehouse.tax_behavior == TaxBehavior.INHERIT_CLIENT
        assert warehouse.normal_days_of_week == ()
        assert warehouse.seasonal_rules_enabled is False

    def test_missing_rate_is_zero(self):
        client = Client.from_dict({"id": "c", "company_id": "co", "facilities": [{"id": "f"}]})
        assert client.facilities[0].default_monthly_rate == Decimal("0")

    def test_unknown_tax_behavior_rejected(self, client_data):
        client_data["facilities"][0]["tax_behavior"] = "SOMETIMES"
        with pytest.raises(ValueError):
            Client.from_dict(client_data)

    def test_records_are_frozen(self, client_data):
        client = Client.from_dict(client_data)
        with pytest.raises(AttributeError):
            client.tax_rate = Decimal("0.5")


class TestInMemoryConfigurationStore:

    def test_lookup_by_id_and_company(self, store):
        assert store.get_client("client-1", "company-1").name == "Harbor Offices"

    def test_other_company_cannot_see_client(self, store):
        assert store.get_client("client-1", "company-2") is None

    def test_unknown_client(self, store):
        assert store.get_client("nobody", "company-1") is None

    def test_from_json_file(self, tmp_path, client_data):
        path = tmp_path / "billing.json"
        path.write_text(json.dumps({"clients": [client_data]}))

        store = InMemoryConfigurationStore.from_json_file(path)

        assert store.get_client("client-1", "company-1") is not None


class TestConfigurationLoader:
    """Snapshots hold active rules and only the target month's override."""

    @pytest.fixture
    def loader(self, store):
        return ConfigurationLoader(store)

    def test_unknown_client_raises(self, loader):
        with pytest.raises(ClientNotFoundError) as exc:
            loader.load("nobody", "company-1", 2026, 3)
        assert exc.value.client_id == "nobody"

    def test_wrong_company_raises(self, loader):
        with pytest.raises(ClientNotFoundError):
            loader.load("client-1", "company-2", 2026, 3)

    def test_facilities_sorted_by_sort_order(self, loader):
        snapshot = loader.load("client-1", "company-1", 2026, 3)
        assert [f.profile.location_name for f in snapshot.facilities] == ["Lobby", "Warehouse"]

    def test_inactive_rules_filtered(self, loader):
        lobby = loader.load("client-1", "company-1", 2026, 3).facilities[0]
        assert len(lobby.seasonal_rules) == 1
        assert lobby.seasonal_rules[0].active_months == frozenset({5, 6, 7})

    def test_override_matches_target_month(self, loader):
        march = loader.load("client-1", "company-1", 2026, 3).facilities[0]
        april = loader.load("client-1", "company-1", 2026, 4).facilities[0]
        may = loader.load("client-1", "company-1", 2026, 5).facilities[0]

        assert march.override.override_rate == Decimal("1200")
        assert april.override.override_status == OverrideStatus.PAUSED
        assert may.override is None

    def test_override_for_other_year_ignored(self, loader):
        lobby = loader.load("client-1", "company-1", 2025, 3).facilities[0]
        assert lobby.override is None
