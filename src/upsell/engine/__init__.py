"""Headless offering resolution and purchase orchestration.

IMPORTANT: This package must never import a UI toolkit or a concrete provider.
"""

from .orchestrator import PurchaseOrchestrator
from .provider import ConcurrentCallError, ProviderError, PurchaseProvider, PurchaseResponse
from .purchaser import PurchaserInfo
from .resolver import OfferingResolver
from .types import (
    CatalogSnapshot,
    Entitlement,
    EntitlementNotGranted,
    ErrorDetail,
    Failed,
    Loading,
    Offering,
    Product,
    PurchaseCancelled,
    PurchaseFailure,
    PurchaseResult,
    PurchaseSuccess,
    Ready,
    ResolutionState,
)

__all__ = [
    "CatalogSnapshot",
    "ConcurrentCallError",
    "Entitlement",
    "EntitlementNotGranted",
    "ErrorDetail",
    "Failed",
    "Loading",
    "Offering",
    "OfferingResolver",
    "Product",
    "ProviderError",
    "PurchaseCancelled",
    "PurchaseFailure",
    "PurchaseOrchestrator",
    "PurchaseProvider",
    "PurchaseResponse",
    "PurchaseResult",
    "PurchaseSuccess",
    "PurchaserInfo",
    "Ready",
    "ResolutionState",
]
