"""
Domain Models for the Facility Billing Engine

These dataclasses provide type-safe representations of all billing entities.
All monetary values use Decimal for precision. Input records are frozen so a
loaded configuration snapshot cannot change while a month is being computed.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

# =============================================================================
# ENUMERATIONS
# =============================================================================


class FacilityStatus(str, Enum):
    """Configured status of a facility."""

    ACTIVE = "ACTIVE"
    PAUSED = "PAUSED"
    PENDING_APPROVAL = "PENDING_APPROVAL"
    CLOSED = "CLOSED"


class EffectiveStatus(str, Enum):
    """Status a facility resolves to for one billed month."""

    ACTIVE = "ACTIVE"
    PAUSED = "PAUSED"
    SEASONAL_PAUSED = "SEASONAL_PAUSED"
    PENDING_APPROVAL = "PENDING_APPROVAL"
    CLOSED = "CLOSED"


class OverrideStatus(str, Enum):
    """Status forced by a monthly override."""

    ACTIVE = "ACTIVE"
    PAUSED = "PAUSED"
    CANCELLED = "CANCELLED"


class TaxBehavior(str, Enum):
    """How a facility's rate interacts with the client tax rate."""

    INHERIT_CLIENT = "INHERIT_CLIENT"
    PRE_TAX = "PRE_TAX"
    TAX_INCLUDED = "TAX_INCLUDED"


def _to_decimal(value, default: Decimal | None = None) -> Decimal | None:
    if value is None:
        return default
    return Decimal(str(value))


# =============================================================================
# INPUT MODELS
# =============================================================================


@dataclass(frozen=True)
class SeasonalRule:
    """A recurring, year-scoped policy for which months a facility is serviced."""

    active_months: frozenset[int] = frozenset()
    paused_months: frozenset[int] = frozenset()
    effective_year_start: int | None = None  # None = unbounded
    effective_year_end: int | None = None
    is_active: bool = True

    def applies_to_year(self, year: int) -> bool:
        if self.effective_year_start is not None and year < self.effective_year_start:
            return False
        if self.effective_year_end is not None and year > self.effective_year_end:
            return False
        return True

    @classmethod
    def from_dict(cls, data: dict) -> "SeasonalRule":
        return cls(
            active_months=frozenset(data.get("active_months") or ()),
            paused_months=frozenset(data.get("paused_months") or ()),
            effective_year_start=data.get("effective_year_start"),
            effective_year_end=data.get("effective_year_end"),
            is_active=data.get("is_active", True),
        )


@dataclass(frozen=True)
class MonthlyOverride:
    """A one-off exception for a single facility in a single calendar month."""

    year: int
    month: int
    override_rate: Decimal | None = None
    override_status: OverrideStatus | None = None
    override_frequency: int | None = None
    override_days_of_week: tuple[int, ...] = ()
    pause_start_day: int | None = None
    pause_end_day: int | None = None
    override_notes: str | None = None

    @property
    def has_pause_range(self) -> bool:
        return self.pause_start_day is not None and self.pause_end_day is not None

    @classmethod
    def from_dict(cls, data: dict) -> "MonthlyOverride":
        status = data.get("override_status")
        return cls(
            year=data["year"],
            month=data["month"],
            override_rate=_to_decimal(data.get("override_rate")),
            override_status=OverrideStatus(status) if status else None,
            override_frequency=data.get("override_frequency"),
            override_days_of_week=tuple(data.get("override_days_of_week") or ()),
            pause_start_day=data.get("pause_start_day"),
            pause_end_day=data.get("pause_end_day"),
            override_notes=data.get("override_notes") or None,
        )


@dataclass(frozen=True)
class FacilityProfile:
    """One serviced location under a client contract."""

    id: str
    location_name: str
    default_monthly_rate: Decimal = Decimal("0")
    status: FacilityStatus = FacilityStatus.ACTIVE
    normal_frequency_per_week: int = 0
    normal_days_of_week: tuple[int, ...] = ()
    category: str | None = None
    tax_behavior: TaxBehavior = TaxBehavior.INHERIT_CLIENT
    seasonal_rules_enabled: bool = False
    sort_order: int = 0
    seasonal_rules: tuple[SeasonalRule, ...] = ()
    monthly_overrides: tuple[MonthlyOverride, ...] = ()

    def override_for(self, year: int, month: int) -> MonthlyOverride | None:
        """Return the override for (year, month), if one exists."""
        for override in self.monthly_overrides:
            if override.year == year and override.month == month:
                return override
        return None

    @classmethod
    def from_dict(cls, data: dict) -> "FacilityProfile":
        return cls(
            id=str(data["id"]),
            location_name=data.get("location_name") or str(data["id"]),
            default_monthly_rate=_to_decimal(data.get("default_monthly_rate"), Decimal("0")),
            status=FacilityStatus(data.get("status", "ACTIVE")),
            normal_frequency_per_week=data.get("normal_frequency_per_week", 0),
            normal_days_of_week=tuple(data.get("normal_days_of_week") or ()),
            category=data.get("category"),
            tax_behavior=TaxBehavior(data.get("tax_behavior", "INHERIT_CLIENT")),
            seasonal_rules_enabled=data.get("seasonal_rules_enabled", False),
            sort_order=data.get("sort_order", 0),
            seasonal_rules=tuple(SeasonalRule.from_dict(r) for r in data.get("seasonal_rules", [])),
            monthly_overrides=tuple(MonthlyOverride.from_dict(o) for o in data.get("monthly_overrides", [])),
        )


@dataclass(frozen=True)
class Client:
    """Tenant-scoped billing subject."""

    id: str
    company_id: str
    name: str
    tax_rate: Decimal = Decimal("0")
    tax_exempt: bool = False
    billing_display_mode: str = "DETAILED"
    facilities: tuple[FacilityProfile, ...] = ()

    @classmethod
    def from_dict(cls, data: dict) -> "Client":
        return cls(
            id=str(data["id"]),
            company_id=str(data["company_id"]),
            name=data.get("name", ""),
            tax_rate=_to_decimal(data.get("tax_rate"), Decimal("0")),
            tax_exempt=data.get("tax_exempt", False),
            billing_display_mode=data.get("billing_display_mode", "DETAILED"),
            facilities=tuple(FacilityProfile.from_dict(f) for f in data.get("facilities", [])),
        )


@dataclass(frozen=True)
class FacilitySnapshot:
    """A facility with the rules and override that apply to one billed month."""

    profile: FacilityProfile
    seasonal_rules: tuple[SeasonalRule, ...] = ()
    override: MonthlyOverride | None = None


@dataclass(frozen=True)
class BillingSnapshot:
    """Point-in-time configuration for one client and one month."""

    client: Client
    year: int
    month: int
    facilities: tuple[FacilitySnapshot, ...] = ()


# =============================================================================
# OUTPUT / RESULT MODELS
# =============================================================================


@dataclass
class FacilityResolution:
    """Effective values after applying override > seasonal > default."""

    effective_rate: Decimal
    effective_frequency: int
    effective_days_of_week: tuple[int, ...]
    effective_status: EffectiveStatus
    is_overridden: bool = False
    is_seasonally_paused: bool = False

    @property
    def included_in_total(self) -> bool:
        return self.effective_status == EffectiveStatus.ACTIVE


@dataclass
class ProrationResult:
    """Priced amount for one facility, pro-rated when a pause range applies."""

    line_item_total: Decimal = Decimal("0")
    is_pro_rated: bool = False
    scheduled_days: int | None = None
    active_days: int | None = None


@dataclass
class FacilityLineItem:
    """Computed billing record for one facility in one month."""

    facility_profile_id: str
    location_name: str
    category: str | None
    effective_status: EffectiveStatus
    effective_rate: Decimal
    effective_frequency: int
    effective_days_of_week: tuple[int, ...]
    is_overridden: bool
    override_notes: str | None
    is_seasonally_paused: bool
    included_in_total: bool
    tax_behavior: TaxBehavior
    line_item_tax: Decimal = Decimal("0")
    line_item_total: Decimal = Decimal("0")
    # Pro-rating
    is_pro_rated: bool = False
    scheduled_days: int | None = None
    active_days: int | None = None
    pause_start_day: int | None = None
    pause_end_day: int | None = None


@dataclass
class BillingTotals:
    """Rounded sums over a set of line items."""

    subtotal: Decimal = Decimal("0")
    tax_amount: Decimal = Decimal("0")
    total: Decimal = Decimal("0")


@dataclass
class BillingExplanation:
    """Human-readable classification of every facility for the month."""

    active_facilities: list[str] = field(default_factory=list)
    paused_facilities: list[str] = field(default_factory=list)
    seasonally_paused: list[str] = field(default_factory=list)
    pending_approval: list[str] = field(default_factory=list)
    closed_facilities: list[str] = field(default_factory=list)
    overrides: list[str] = field(default_factory=list)
    delta_amount: Decimal | None = None
    delta_reason: str | None = None


@dataclass
class MonthComparison:
    """Result of the best-effort previous-month comparison."""

    previous_month_total: Decimal | None = None
    delta_amount: Decimal | None = None
    delta_reason: str | None = None


@dataclass
class BillingContext:
    """
    Holds all intermediate state while a preview is computed.
    This is the "bag" that flows through the pipeline.
    """

    # Input (immutable during processing)
    snapshot: BillingSnapshot

    # Step results (populated as we go)
    line_items: list[FacilityLineItem] = field(default_factory=list)
    totals: BillingTotals = field(default_factory=BillingTotals)
    explanation: BillingExplanation = field(default_factory=BillingExplanation)
    comparison: MonthComparison = field(default_factory=MonthComparison)


@dataclass
class BillingPreview:
    """Complete priced, taxed, explained result for one client in one month."""

    client_id: str
    client_name: str
    year: int
    month: int
    month_label: str
    line_items: list[FacilityLineItem]
    subtotal: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    total: Decimal
    display_mode: str
    explanation: BillingExplanation
    previous_month_total: Decimal | None
    active_facility_count: int
    total_facility_count: int


@dataclass
class FacilityDelta:
    """Comparison of one facility between two consecutive months."""

    facility_profile_id: str
    location_name: str
    category: str | None
    current_status: str = "-"
    previous_status: str = "-"
    current_rate: Decimal = Decimal("0")
    previous_rate: Decimal = Decimal("0")
    current_total: Decimal = Decimal("0")
    previous_total: Decimal = Decimal("0")
    current_frequency: int = 0
    previous_frequency: int = 0
    current_included: bool = False
    previous_included: bool = False
    total_delta: Decimal = Decimal("0")
    is_new: bool = False
    is_removed: bool = False
    change_type: str = "unchanged"  # 'added', 'removed', 'changed', 'unchanged'


@dataclass
class DeltaReport:
    """Month-over-month comparison between two full previews."""

    current: BillingPreview
    previous: BillingPreview
    total_delta: Decimal
    subtotal_delta: Decimal
    tax_delta: Decimal
    facilities: list[FacilityDelta] = field(default_factory=list)

    @property
    def changed_count(self) -> int:
        return sum(1 for f in self.facilities if f.change_type != "unchanged")

    @property
    def unchanged_count(self) -> int:
        return sum(1 for f in self.facilities if f.change_type == "unchanged")
