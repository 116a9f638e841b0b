from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable

from .provider import ConcurrentCallError, ProviderError, PurchaseProvider, PurchaseResponse
from .resolver import OfferingResolver
from .types import (
    EntitlementNotGranted,
    ErrorDetail,
    Product,
    PurchaseCancelled,
    PurchaseFailure,
    PurchaseResult,
    PurchaseSuccess,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


def classify_response(
    response: PurchaseResponse, product: Product, entitlement_key: str, now: datetime
) -> PurchaseResult:
    granted = (
        response.purchaser_info.active_entitlements(now)
        if response.purchaser_info is not None
        else frozenset()
    )
    if entitlement_key in granted:
        return PurchaseSuccess(entitlements=granted, product_id=product.identifier)
    if response.user_cancelled:
        return PurchaseCancelled(product_id=product.identifier)
    return EntitlementNotGranted(product_id=product.identifier, entitlements=granted)


class PurchaseOrchestrator:
    def __init__(
        self,
        provider: PurchaseProvider,
        resolver: OfferingResolver,
        entitlement_key: str | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._provider = provider
        self._resolver = resolver
        self._entitlement_key = entitlement_key
        self._clock = clock
        self._busy = False

    @property
    def entitlement_key(self) -> str | None:
        return self._entitlement_key or self._resolver.entitlement_key

    @property
    def in_progress(self) -> bool:
        return self._busy

    async def purchase(self, product: Product | None) -> PurchaseResult | None:
        """Buy ``product`` once and classify what the provider reported.

        Returns ``None`` without contacting the provider when the product was
        not handed out by a ready resolver.
        """
        target = self.entitlement_key
        if product is None or target is None or not self._resolver.owns(product):
            logger.debug("Ignoring purchase of unresolved product %r", product)
            return None
        if self._busy:
            raise ConcurrentCallError("purchase() is already in progress")

        self._busy = True
        try:
            response = await self._provider.execute_purchase(product)
        except ProviderError as e:
            logger.warning("PURCHASE ERROR: %s", e.message)
            return PurchaseFailure(
                error=ErrorDetail(kind="purchase_provider", message=e.message, key=product.identifier),
                product_id=product.identifier,
                user_cancelled=e.user_cancelled,
            )
        finally:
            self._busy = False

        result = classify_response(response, product, target, self._clock())
        if isinstance(result, PurchaseSuccess):
            logger.info("Purchased %s, %s is active", product.identifier, target)
        else:
            logger.info("Purchase of %s ended without %s (%s)", product.identifier, target, result.outcome)
        return result
