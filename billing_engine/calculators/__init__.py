"""
Calculators Package

Provides all calculation components for billing preview generation.
"""

from .aggregator import BillingAggregator, ExplanationBuilder
from .comparator import DeltaReportBuilder, MonthOverMonthComparator
from .line_item import LineItemCalculator
from .proration import ProrationCalculator
from .resolver import FacilityResolver
from .tax import TaxCalculator

__all__ = [
    "FacilityResolver",
    "ProrationCalculator",
    "TaxCalculator",
    "LineItemCalculator",
    "BillingAggregator",
    "ExplanationBuilder",
    "MonthOverMonthComparator",
    "DeltaReportBuilder",
]
