"""
FACILITY BILLING ENGINE
Monthly billing previews for recurring facility-cleaning contracts
"""

from .loader import ClientNotFoundError, ConfigurationStore, InMemoryConfigurationStore
from .models import BillingPreview, DeltaReport
from .processor import BillingProcessor

__all__ = [
    'BillingProcessor',
    'BillingPreview',
    'DeltaReport',
    'ClientNotFoundError',
    'ConfigurationStore',
    'InMemoryConfigurationStore',
]
