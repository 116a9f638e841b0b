from __future__ import annotations

import json
from decimal import Decimal

import pytest

from upsell.paths import get_paths
from upsell.services.catalog import CatalogError, CatalogService, parse_catalog


def test_catalog_schema_validates() -> None:
    paths = get_paths()
    catalog = CatalogService(paths.catalog_path, paths.schema_dir)
    catalog.validate_all()


def test_packaged_catalog_has_pro_cat_offerings() -> None:
    paths = get_paths()
    snapshot = CatalogService(paths.catalog_path, paths.schema_dir).load_catalog()

    pro = snapshot.entitlements["pro_cat"]
    assert set(pro.offerings) == {"monthly_cats", "annual_cats", "lifetime_cats"}
    annual = pro.offerings["annual_cats"].active_product
    assert annual is not None
    assert annual.price == Decimal("39.99")
    assert annual.price_label == "$39.99"


def test_schema_violation_reports_location(tmp_path) -> None:
    bad = {
        "entitlements": {
            "pro_cat": {
                "offerings": {
                    "monthly_cats": {
                        "active_product": {"identifier": "m", "price": 4.99, "currency_code": "USD"}
                    }
                }
            }
        }
    }
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps(bad), encoding="utf-8")

    with pytest.raises(CatalogError) as exc:
        CatalogService(path, get_paths().schema_dir).load_catalog()
    assert "Schema validation failed" in str(exc.value)
    assert "entitlements/pro_cat/offerings/monthly_cats/active_product" in str(exc.value)


def test_missing_catalog_file(tmp_path) -> None:
    with pytest.raises(CatalogError, match="Missing catalog file"):
        CatalogService(tmp_path / "nope.json", get_paths().schema_dir).load_catalog()


def test_parse_catalog_keeps_offering_without_active_product() -> None:
    snapshot = parse_catalog(
        {"entitlements": {"pro_cat": {"offerings": {"lifetime_cats": {"active_product": None}}}}}
    )
    offering = snapshot.entitlements["pro_cat"].offerings["lifetime_cats"]
    assert offering.active_product is None
    assert not offering.purchasable


def test_parse_catalog_rejects_bad_price() -> None:
    raw = {
        "entitlements": {
            "pro_cat": {
                "offerings": {
                    "annual_cats": {
                        "active_product": {"identifier": "a", "price": "abc", "currency_code": "USD"}
                    }
                }
            }
        }
    }
    with pytest.raises(CatalogError, match="Invalid price"):
        parse_catalog(raw)
