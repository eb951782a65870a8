"""
Per-Facility Resolver

Applies the override > seasonal > default precedence to one facility.
"""

from ..models import (
    EffectiveStatus,
    FacilityResolution,
    FacilitySnapshot,
    FacilityStatus,
    MonthlyOverride,
    OverrideStatus,
    SeasonalRule,
)

OVERRIDE_STATUS_MAP = {
    OverrideStatus.ACTIVE: EffectiveStatus.ACTIVE,
    OverrideStatus.PAUSED: EffectiveStatus.PAUSED,
    OverrideStatus.CANCELLED: EffectiveStatus.CLOSED,
}


def is_month_active_by_seasonal_rules(rules: tuple[SeasonalRule, ...], year: int, month: int) -> bool:
    """
    Check whether every applicable seasonal rule allows the month.

    Rules outside their effective years are skipped. A rule disqualifies the
    month when its active_months list is non-empty and excludes the month, or
    when its paused_months list contains it. All rules must agree (AND).
    """
    for rule in rules:
        if not rule.is_active or not rule.applies_to_year(year):
            continue

        if rule.active_months and month not in rule.active_months:
            return False

        if rule.paused_months and month in rule.paused_months:
            return False

    return True


class FacilityResolver:
    """Resolves effective rate, frequency, days and status for one facility."""

    def __init__(self):
        # Status steps run in precedence order; the first to return a status wins.
        self.status_steps = [
            self._status_from_override,
            self._status_from_seasonal_rules,
            self._status_from_default,
        ]

    def resolve(self, facility: FacilitySnapshot, year: int, month: int) -> FacilityResolution:
        profile = facility.profile
        override = facility.override

        resolution = FacilityResolution(
            effective_rate=profile.default_monthly_rate,
            effective_frequency=profile.normal_frequency_per_week,
            effective_days_of_week=profile.normal_days_of_week,
            effective_status=EffectiveStatus(profile.status.value),
            is_overridden=override is not None,
        )

        if override is not None:
            self._apply_field_overrides(resolution, override)

        for step in self.status_steps:
            status = step(facility, year, month)
            if status is not None:
                resolution.effective_status = status
                break

        resolution.is_seasonally_paused = resolution.effective_status == EffectiveStatus.SEASONAL_PAUSED
        return resolution

    def _apply_field_overrides(self, resolution: FacilityResolution, override: MonthlyOverride) -> None:
        """Partial overrides are legal: only present fields replace defaults."""
        if override.override_rate is not None:
            resolution.effective_rate = override.override_rate
        if override.override_frequency is not None:
            resolution.effective_frequency = override.override_frequency
        if override.override_days_of_week:
            resolution.effective_days_of_week = override.override_days_of_week

    def _status_from_override(self, facility: FacilitySnapshot, year: int, month: int) -> EffectiveStatus | None:
        override = facility.override
        if override is None or override.override_status is None:
            return None
        return OVERRIDE_STATUS_MAP[override.override_status]

    def _status_from_seasonal_rules(
        self, facility: FacilitySnapshot, year: int, month: int
    ) -> EffectiveStatus | None:
        profile = facility.profile
        if not profile.seasonal_rules_enabled or profile.status != FacilityStatus.ACTIVE:
            return None
        if is_month_active_by_seasonal_rules(facility.seasonal_rules, year, month):
            return None
        return EffectiveStatus.SEASONAL_PAUSED

    def _status_from_default(self, facility: FacilitySnapshot, year: int, month: int) -> EffectiveStatus:
        return EffectiveStatus(facility.profile.status.value)
