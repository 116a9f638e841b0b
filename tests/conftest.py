from __future__ import annotations

from decimal import Decimal

import pytest

from upsell.engine.types import CatalogSnapshot, Entitlement, Offering, Product

OFFERING_KEYS = ("monthly_cats", "annual_cats", "lifetime_cats")


def make_product(identifier: str, price: str, title: str = "") -> Product:
    return Product(
        identifier=identifier,
        price=Decimal(price),
        currency_code="USD",
        currency_symbol="$",
        title=title,
    )


def make_catalog(offerings: dict[str, Product | None], entitlement_key: str = "pro_cat") -> CatalogSnapshot:
    ent = Entitlement(
        key=entitlement_key,
        offerings={k: Offering(key=k, active_product=p) for k, p in offerings.items()},
    )
    return CatalogSnapshot(entitlements={entitlement_key: ent})


@pytest.fixture
def cat_products() -> dict[str, Product]:
    return {
        "monthly_cats": make_product("cats.monthly", "4.99", "Monthly"),
        "annual_cats": make_product("cats.annual", "39.99", "Annual"),
        "lifetime_cats": make_product("cats.lifetime", "99.99", "Lifetime"),
    }


@pytest.fixture
def cat_catalog(cat_products) -> CatalogSnapshot:
    return make_catalog(dict(cat_products))
