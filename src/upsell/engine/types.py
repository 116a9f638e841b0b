from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Literal

ErrorKind = Literal[
    "catalog_fetch",
    "missing_entitlement",
    "missing_offering",
    "missing_active_product",
    "purchase_provider",
]


@dataclass(frozen=True)
class Product:
    identifier: str
    price: Decimal
    currency_code: str
    currency_symbol: str = ""
    title: str = ""

    @property
    def price_label(self) -> str:
        return format_price(self)


@dataclass(frozen=True)
class Offering:
    key: str
    active_product: Product | None = None

    @property
    def purchasable(self) -> bool:
        return self.active_product is not None


@dataclass(frozen=True)
class Entitlement:
    key: str
    offerings: dict[str, Offering] = field(default_factory=dict)


@dataclass(frozen=True)
class CatalogSnapshot:
    """Everything the provider knows about purchasable entitlements at fetch time."""

    entitlements: dict[str, Entitlement] = field(default_factory=dict)

    def entitlement_for_product(self, identifier: str) -> str | None:
        for ent in self.entitlements.values():
            for off in ent.offerings.values():
                if off.active_product is not None and off.active_product.identifier == identifier:
                    return ent.key
        return None


@dataclass(frozen=True)
class ErrorDetail:
    kind: ErrorKind
    message: str
    key: str | None = None


# -------- Resolution state --------


@dataclass(frozen=True)
class Loading:
    status: Literal["loading"] = "loading"


@dataclass(frozen=True)
class Ready:
    products: dict[str, Product]
    status: Literal["ready"] = "ready"


@dataclass(frozen=True)
class Failed:
    error: ErrorDetail
    status: Literal["failed"] = "failed"


ResolutionState = Loading | Ready | Failed


# -------- Purchase results --------


@dataclass(frozen=True)
class PurchaseSuccess:
    entitlements: frozenset[str]
    product_id: str
    outcome: Literal["success"] = "success"


@dataclass(frozen=True)
class PurchaseFailure:
    error: ErrorDetail
    product_id: str
    user_cancelled: bool = False
    outcome: Literal["failure"] = "failure"


@dataclass(frozen=True)
class PurchaseCancelled:
    product_id: str
    outcome: Literal["cancelled"] = "cancelled"


@dataclass(frozen=True)
class EntitlementNotGranted:
    """Provider call completed without error, but the target entitlement is not active."""

    product_id: str
    entitlements: frozenset[str] = frozenset()
    outcome: Literal["not_granted"] = "not_granted"


PurchaseResult = PurchaseSuccess | PurchaseFailure | PurchaseCancelled | EntitlementNotGranted


def format_price(product: Product) -> str:
    return f"{product.currency_symbol}{product.price}"
