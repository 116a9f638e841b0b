from __future__ import annotations

import asyncio
from dataclasses import replace
from datetime import datetime, timezone
from typing import Literal

from upsell.engine.provider import ProviderError, PurchaseResponse
from upsell.engine.purchaser import PurchaserInfo
from upsell.engine.types import CatalogSnapshot, Product

PurchaseBehavior = Literal["grant", "error", "cancel", "deny"]


class MockPurchaseProvider:
    """In-process purchase provider serving a fixed catalog.

    Real implementations (StoreKit/Play Billing SDK bridges) can replace this
    later. ``behavior`` picks how purchases end; ``fetch_error`` makes every
    catalog fetch fail with that message.
    """

    def __init__(
        self,
        catalog: CatalogSnapshot,
        *,
        behavior: PurchaseBehavior = "grant",
        error_message: str = "purchase failed",
        fetch_error: str | None = None,
    ) -> None:
        self.catalog = catalog
        self.behavior: PurchaseBehavior = behavior
        self.error_message = error_message
        self.fetch_error = fetch_error
        self.purchaser_info = PurchaserInfo()
        self.fetch_calls = 0
        self.purchase_calls: list[str] = []

    async def fetch_entitlements(self) -> CatalogSnapshot:
        self.fetch_calls += 1
        await asyncio.sleep(0)
        if self.fetch_error is not None:
            raise ProviderError(self.fetch_error)
        return self.catalog

    async def execute_purchase(self, product: Product) -> PurchaseResponse:
        self.purchase_calls.append(product.identifier)
        await asyncio.sleep(0)

        if self.behavior == "error":
            raise ProviderError(self.error_message)
        if self.behavior == "cancel":
            return PurchaseResponse(purchaser_info=self.purchaser_info, user_cancelled=True)
        if self.behavior == "deny":
            return PurchaseResponse(purchaser_info=self.purchaser_info)

        self.purchaser_info = self._grant(product)
        return PurchaseResponse(
            purchaser_info=self.purchaser_info,
            transaction_id=f"mock-{len(self.purchase_calls)}",
        )

    def _grant(self, product: Product) -> PurchaserInfo:
        now = datetime.now(tz=timezone.utc)
        info = self.purchaser_info
        ent_key = self.catalog.entitlement_for_product(product.identifier)
        if ent_key is None:
            return info
        # Mock grants never expire.
        return replace(
            info,
            expiration_date_by_entitlement={**info.expiration_date_by_entitlement, ent_key: None},
            purchase_date_by_entitlement={**info.purchase_date_by_entitlement, ent_key: now},
            expiration_dates_by_product={**info.expiration_dates_by_product, product.identifier: None},
            purchase_dates_by_product={**info.purchase_dates_by_product, product.identifier: now},
        )
