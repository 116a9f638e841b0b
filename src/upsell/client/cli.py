from __future__ import annotations

import argparse
import asyncio
import json
import logging
from typing import Sequence

from upsell.config import UpsellConfig, load_config
from upsell.engine.serialize import purchase_result_to_dict, resolution_to_dict
from upsell.engine.types import PurchaseSuccess, Ready
from upsell.services.billing import MockPurchaseProvider, PurchaseBehavior
from upsell.services.catalog import CatalogError, CatalogService
from upsell.services.telemetry import TelemetryService

from .session import UpsellSession

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="upsell")
    parser.add_argument("--json", action="store_true", help="Print machine-readable output")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("offerings", help="Resolve offerings and print their price labels")

    buy = sub.add_parser("buy", help="Purchase the product behind an offering")
    buy.add_argument("offering")
    outcome = buy.add_mutually_exclusive_group()
    outcome.add_argument("--fail", metavar="MESSAGE", help="Simulate a provider error")
    outcome.add_argument("--cancel", action="store_true", help="Simulate the user cancelling")
    outcome.add_argument("--deny", action="store_true", help="Simulate a purchase that grants nothing")

    sub.add_parser("skip", help="Skip buying and go straight to content")
    sub.add_parser("validate", help="Validate the catalog file against its schema")
    return parser


def _behavior(args: argparse.Namespace) -> PurchaseBehavior:
    if getattr(args, "fail", None):
        return "error"
    if getattr(args, "cancel", False):
        return "cancel"
    if getattr(args, "deny", False):
        return "deny"
    return "grant"


def _print(args: argparse.Namespace, human: str, data: dict[str, object]) -> None:
    if args.json:
        print(json.dumps(data, indent=2))
    else:
        print(human)


async def _run(args: argparse.Namespace, cfg: UpsellConfig, catalog_service: CatalogService) -> int:
    provider = MockPurchaseProvider(
        catalog_service.load_catalog(),
        behavior=_behavior(args),
        error_message=getattr(args, "fail", None) or "purchase failed",
    )
    session = UpsellSession(
        provider,
        cfg.entitlement_key,
        cfg.offering_keys,
        telemetry=TelemetryService(cfg.telemetry_path),
    )

    if args.command == "skip":
        session.skip()
        _print(args, "Showing cat content.", {"content_unlocked": session.content_unlocked})
        return 0

    state = await session.load()
    if not isinstance(state, Ready):
        _print(args, f"Error: {session.message}", resolution_to_dict(state))
        return 1

    if args.command == "offerings":
        lines = [session.button_labels[k] for k in cfg.offering_keys]
        _print(args, "\n".join(lines), resolution_to_dict(state))
        return 0

    result = await session.buy(args.offering)
    if result is None:
        _print(args, f"Unknown offering: {args.offering}", {"outcome": None, "offering": args.offering})
        return 1
    if isinstance(result, PurchaseSuccess):
        _print(args, "Purchased Pro Cats. Showing cat content.", purchase_result_to_dict(result))
        return 0
    _print(args, f"No purchase ({result.outcome}). {session.message}".strip(), purchase_result_to_dict(result))
    return 1


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    cfg = load_config()
    logging.basicConfig(level=cfg.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    catalog_service = CatalogService(cfg.catalog_path, cfg.schema_dir)
    try:
        if args.command == "validate":
            catalog_service.validate_all()
            print(f"{cfg.catalog_path}: OK")
            return 0
        return asyncio.run(_run(args, cfg, catalog_service))
    except CatalogError as e:
        logger.error("%s", e)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
