"""Subscription entitlement and the free-message quota."""

from .base import EntitlementProvider
from .models import DEFAULT_PRODUCT_ID, EntitlementState, SubscriptionRecord
from .providers import HttpSubscriptionSource, RecordEntitlementProvider, StaticEntitlementProvider
from .quota import USAGE_KEY, QuotaGate

__all__ = [
    "DEFAULT_PRODUCT_ID",
    "USAGE_KEY",
    "EntitlementProvider",
    "EntitlementState",
    "HttpSubscriptionSource",
    "QuotaGate",
    "RecordEntitlementProvider",
    "StaticEntitlementProvider",
    "SubscriptionRecord",
]
