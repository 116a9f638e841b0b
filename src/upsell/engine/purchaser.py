from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Mapping


def _parse_date(raw: object) -> datetime | None:
    if not isinstance(raw, str):
        return None
    try:
        dt = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _format_date(dt: datetime | None) -> str | None:
    if dt is None:
        return None
    return dt.isoformat()


def _date_map(raw: object, *, allow_none: bool) -> dict[str, datetime | None]:
    out: dict[str, datetime | None] = {}
    if not isinstance(raw, dict):
        return out
    for k, v in raw.items():
        if not isinstance(k, str):
            continue
        if v is None:
            # null expiration means the grant never lapses
            if allow_none:
                out[k] = None
            continue
        parsed = _parse_date(v)
        if parsed is not None:
            out[k] = parsed
    return out


@dataclass(frozen=True)
class PurchaserInfo:
    """Customer state reported by the provider after a transaction."""

    expiration_date_by_entitlement: dict[str, datetime | None] = field(default_factory=dict)
    purchase_date_by_entitlement: dict[str, datetime | None] = field(default_factory=dict)
    expiration_dates_by_product: dict[str, datetime | None] = field(default_factory=dict)
    purchase_dates_by_product: dict[str, datetime | None] = field(default_factory=dict)
    non_consumable_purchases: frozenset[str] = frozenset()
    original_application_version: str | None = None

    def active_entitlements(self, now: datetime | None = None) -> frozenset[str]:
        now = now or datetime.now(tz=timezone.utc)
        return frozenset(
            key
            for key, expires in self.expiration_date_by_entitlement.items()
            if expires is None or expires > now
        )

    @staticmethod
    def from_dict(d: Mapping[str, object]) -> "PurchaserInfo":
        non_consumables_raw = d.get("non_consumable_purchases", [])
        non_consumables = (
            frozenset(str(x) for x in non_consumables_raw)
            if isinstance(non_consumables_raw, list)
            else frozenset()
        )
        version = d.get("original_application_version")
        return PurchaserInfo(
            expiration_date_by_entitlement=_date_map(d.get("expiration_date_by_entitlement"), allow_none=True),
            purchase_date_by_entitlement=_date_map(d.get("purchase_date_by_entitlement"), allow_none=False),
            expiration_dates_by_product=_date_map(d.get("expiration_dates_by_product"), allow_none=True),
            purchase_dates_by_product=_date_map(d.get("purchase_dates_by_product"), allow_none=False),
            non_consumable_purchases=non_consumables,
            original_application_version=version if isinstance(version, str) else None,
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "expiration_date_by_entitlement": {
                k: _format_date(v) for k, v in self.expiration_date_by_entitlement.items()
            },
            "purchase_date_by_entitlement": {
                k: _format_date(v) for k, v in self.purchase_date_by_entitlement.items()
            },
            "expiration_dates_by_product": {
                k: _format_date(v) for k, v in self.expiration_dates_by_product.items()
            },
            "purchase_dates_by_product": {
                k: _format_date(v) for k, v in self.purchase_dates_by_product.items()
            },
            "non_consumable_purchases": sorted(self.non_consumable_purchases),
            "original_application_version": self.original_application_version,
        }
