"""Environment-driven configuration for the upsell flow."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from upsell.paths import Paths, get_paths

DEFAULT_ENTITLEMENT = "pro_cat"
DEFAULT_OFFERINGS = ("monthly_cats", "annual_cats", "lifetime_cats")


@dataclass(frozen=True)
class UpsellConfig:
    entitlement_key: str
    offering_keys: tuple[str, ...]
    catalog_path: Path
    schema_dir: Path
    telemetry_path: Path
    log_level: int


def _to_keys(value: Optional[str], *, default: tuple[str, ...]) -> tuple[str, ...]:
    if value is None or not value.strip():
        return default
    keys = tuple(k.strip() for k in value.split(",") if k.strip())
    return keys or default


def _to_log_level(value: Optional[str], *, default: int) -> int:
    if value is None or value == "":
        return default
    level = logging.getLevelName(value.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {value!r}")
    return level


def load_config(env: Optional[Mapping[str, str]] = None, paths: Optional[Paths] = None) -> UpsellConfig:
    """Load :class:`UpsellConfig` from ``UPSELL_*`` environment variables."""

    env_mapping = os.environ if env is None else env
    paths = paths or get_paths()

    entitlement_key = (env_mapping.get("UPSELL_ENTITLEMENT") or DEFAULT_ENTITLEMENT).strip() or DEFAULT_ENTITLEMENT
    offering_keys = _to_keys(env_mapping.get("UPSELL_OFFERINGS"), default=DEFAULT_OFFERINGS)

    catalog_raw = env_mapping.get("UPSELL_CATALOG")
    catalog_path = Path(catalog_raw) if catalog_raw else paths.catalog_path

    telemetry_raw = env_mapping.get("UPSELL_TELEMETRY")
    telemetry_path = Path(telemetry_raw) if telemetry_raw else paths.userdata_dir / "telemetry.jsonl"

    log_level = _to_log_level(env_mapping.get("UPSELL_LOG_LEVEL"), default=logging.INFO)

    return UpsellConfig(
        entitlement_key=entitlement_key,
        offering_keys=offering_keys,
        catalog_path=catalog_path,
        schema_dir=paths.schema_dir,
        telemetry_path=telemetry_path,
        log_level=log_level,
    )
