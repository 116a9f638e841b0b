from __future__ import annotations

from datetime import datetime, timezone

from upsell.engine.purchaser import PurchaserInfo

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


def _sample() -> dict[str, object]:
    return {
        "expiration_date_by_entitlement": {
            "pro_cat": "2024-07-01T00:00:00Z",
            "old_cat": "2024-01-01T00:00:00+00:00",
            "forever_cat": None,
            "garbage": "not a date",
        },
        "purchase_date_by_entitlement": {"pro_cat": "2024-06-01T00:00:00Z", "forever_cat": None},
        "expiration_dates_by_product": {
            "cats.monthly": "2024-07-01T00:00:00Z",
            "cats.lifetime": None,
        },
        "purchase_dates_by_product": {"cats.monthly": "2024-06-01T00:00:00"},
        "non_consumable_purchases": ["cats.lifetime"],
        "original_application_version": "1.0",
    }


def test_active_entitlements_respect_expiration() -> None:
    info = PurchaserInfo.from_dict(_sample())

    assert info.active_entitlements(NOW) == frozenset({"pro_cat", "forever_cat"})


def test_from_dict_skips_invalid_entries() -> None:
    info = PurchaserInfo.from_dict(_sample())

    assert "garbage" not in info.expiration_date_by_entitlement
    assert "forever_cat" not in info.purchase_date_by_entitlement
    assert info.purchase_dates_by_product["cats.monthly"] == NOW
    assert info.non_consumable_purchases == frozenset({"cats.lifetime"})
    assert info.original_application_version == "1.0"


def test_from_dict_tolerates_wrong_types() -> None:
    info = PurchaserInfo.from_dict(
        {"expiration_date_by_entitlement": [], "non_consumable_purchases": "x", "original_application_version": 3}
    )

    assert info == PurchaserInfo()
    assert info.active_entitlements(NOW) == frozenset()


def test_to_dict_is_json_ready_and_reloadable() -> None:
    info = PurchaserInfo.from_dict(_sample())
    data = info.to_dict()

    assert data["expiration_date_by_entitlement"]["forever_cat"] is None
    assert data["non_consumable_purchases"] == ["cats.lifetime"]
    assert PurchaserInfo.from_dict(data) == info

