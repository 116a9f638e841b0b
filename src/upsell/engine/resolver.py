from __future__ import annotations

import logging
from typing import Iterable

from .provider import ConcurrentCallError, ProviderError, PurchaseProvider
from .types import (
    CatalogSnapshot,
    ErrorDetail,
    Failed,
    Loading,
    Product,
    Ready,
    ResolutionState,
)

logger = logging.getLogger(__name__)


def resolve_snapshot(
    snapshot: CatalogSnapshot, entitlement_key: str, offering_keys: Iterable[str]
) -> ResolutionState:
    """Pick one active product per required offering out of a fetched catalog.

    Every offering is checked for presence before any is checked for an
    active product; within each pass the caller's key order decides which
    missing key is reported. Repeated keys count once.
    """
    keys = tuple(dict.fromkeys(offering_keys))
    ent = snapshot.entitlements.get(entitlement_key)
    if ent is None:
        return Failed(
            ErrorDetail(
                kind="missing_entitlement",
                message=f"{entitlement_key} entitlement not found",
                key=entitlement_key,
            )
        )

    for key in keys:
        if key not in ent.offerings:
            return Failed(
                ErrorDetail(kind="missing_offering", message=f"{key} offering not found", key=key)
            )

    products: dict[str, Product] = {}
    for key in keys:
        product = ent.offerings[key].active_product
        if product is None:
            return Failed(
                ErrorDetail(
                    kind="missing_active_product",
                    message=f"{key} active product not found",
                    key=key,
                )
            )
        products[key] = product

    return Ready(products=products)


class OfferingResolver:
    def __init__(self, provider: PurchaseProvider) -> None:
        self._provider = provider
        self._state: ResolutionState = Loading()
        self._busy = False
        self.entitlement_key: str | None = None

    @property
    def state(self) -> ResolutionState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return isinstance(self._state, Ready)

    def product(self, offering_key: str) -> Product | None:
        if isinstance(self._state, Ready):
            return self._state.products.get(offering_key)
        return None

    def owns(self, product: Product) -> bool:
        if not isinstance(self._state, Ready):
            return False
        return any(p == product for p in self._state.products.values())

    async def resolve(self, entitlement_key: str, offering_keys: Iterable[str]) -> ResolutionState:
        if self._busy:
            raise ConcurrentCallError("resolve() is already in progress")
        self._busy = True
        self.entitlement_key = entitlement_key
        self._state = Loading()
        try:
            try:
                snapshot = await self._provider.fetch_entitlements()
            except ProviderError as e:
                logger.warning("Catalog fetch failed: %s", e.message)
                self._state = Failed(ErrorDetail(kind="catalog_fetch", message=e.message))
                return self._state

            self._state = resolve_snapshot(snapshot, entitlement_key, offering_keys)
        finally:
            self._busy = False

        if isinstance(self._state, Failed):
            logger.warning("Offering resolution failed: %s", self._state.error.message)
        else:
            logger.info("Resolved %d offerings for %s", len(self._state.products), entitlement_key)
        return self._state
