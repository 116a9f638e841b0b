from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from .purchaser import PurchaserInfo
from .types import CatalogSnapshot, Product


class ProviderError(RuntimeError):
    """Raised by a purchase provider when a catalog fetch or purchase fails."""

    def __init__(self, message: str, *, user_cancelled: bool = False) -> None:
        super().__init__(message)
        self.message = message
        self.user_cancelled = user_cancelled


class ConcurrentCallError(RuntimeError):
    pass


@dataclass(frozen=True)
class PurchaseResponse:
    purchaser_info: PurchaserInfo | None
    user_cancelled: bool = False
    transaction_id: str | None = None


class PurchaseProvider(Protocol):
    async def fetch_entitlements(self) -> CatalogSnapshot: ...

    async def execute_purchase(self, product: Product) -> PurchaseResponse: ...
