from __future__ import annotations

import json
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Mapping

from jsonschema import Draft202012Validator

from upsell.engine.types import CatalogSnapshot, Entitlement, Offering, Product


class CatalogError(RuntimeError):
    pass


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise CatalogError(f"Missing catalog file: {path}") from e
    except json.JSONDecodeError as e:
        raise CatalogError(f"Invalid JSON in {path}: {e}") from e


def validate_json(instance: object, schema: object, *, context: str) -> None:
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: list(e.path))
    if errors:
        lines = [f"Schema validation failed for {context}:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        raise CatalogError("\n".join(lines))


def _require_str(obj: Mapping[str, object], key: str) -> str:
    v = obj.get(key)
    if not isinstance(v, str):
        raise CatalogError(f"Expected string for {key}")
    return v


def _parse_price(raw: object) -> Decimal:
    # floats rejected: Decimal(4.99) is not 4.99
    if not isinstance(raw, (str, int)) or isinstance(raw, bool):
        raise CatalogError(f"Invalid price: {raw!r}")
    try:
        price = Decimal(str(raw))
    except InvalidOperation as e:
        raise CatalogError(f"Invalid price: {raw!r}") from e
    if not price.is_finite() or price < 0:
        raise CatalogError(f"Invalid price: {raw!r}")
    return price


def _parse_product(raw: Mapping[str, object]) -> Product:
    symbol = raw.get("currency_symbol", "")
    title = raw.get("title", "")
    return Product(
        identifier=_require_str(raw, "identifier"),
        price=_parse_price(raw.get("price")),
        currency_code=_require_str(raw, "currency_code"),
        currency_symbol=symbol if isinstance(symbol, str) else "",
        title=title if isinstance(title, str) else "",
    )


def parse_catalog(raw: object) -> CatalogSnapshot:
    if not isinstance(raw, dict):
        raise CatalogError("catalog must be an object")
    raw_ents = raw.get("entitlements")
    if not isinstance(raw_ents, dict):
        raise CatalogError("catalog.entitlements must be an object")

    entitlements: dict[str, Entitlement] = {}
    for ent_key, ent_raw in raw_ents.items():
        if not isinstance(ent_key, str) or not isinstance(ent_raw, dict):
            continue
        raw_offs = ent_raw.get("offerings", {})
        offerings: dict[str, Offering] = {}
        if isinstance(raw_offs, dict):
            for off_key, off_raw in raw_offs.items():
                if not isinstance(off_key, str) or not isinstance(off_raw, dict):
                    continue
                prod_raw = off_raw.get("active_product")
                product = _parse_product(prod_raw) if isinstance(prod_raw, dict) else None
                offerings[off_key] = Offering(key=off_key, active_product=product)
        entitlements[ent_key] = Entitlement(key=ent_key, offerings=offerings)
    return CatalogSnapshot(entitlements=entitlements)


class CatalogService:
    def __init__(self, catalog_path: Path, schema_dir: Path) -> None:
        self._catalog_path = catalog_path
        self._schema_dir = schema_dir

    def load_catalog(self) -> CatalogSnapshot:
        raw = _load_json(self._catalog_path)
        schema = _load_json(self._schema_dir / "catalog.schema.json")
        validate_json(raw, schema, context=str(self._catalog_path))
        return parse_catalog(raw)

    def validate_all(self) -> None:
        # Load is validation (schema + parse)
        _ = self.load_catalog()
