from __future__ import annotations

from .types import (
    EntitlementNotGranted,
    ErrorDetail,
    Failed,
    Product,
    PurchaseCancelled,
    PurchaseFailure,
    PurchaseResult,
    PurchaseSuccess,
    Ready,
    ResolutionState,
)


def product_to_dict(p: Product) -> dict[str, object]:
    return {
        "identifier": p.identifier,
        "title": p.title,
        "price": str(p.price),
        "currency_code": p.currency_code,
        "currency_symbol": p.currency_symbol,
        "price_label": p.price_label,
    }


def _error_to_dict(e: ErrorDetail) -> dict[str, object]:
    return {"kind": e.kind, "message": e.message, "key": e.key}


def resolution_to_dict(state: ResolutionState) -> dict[str, object]:
    """Return a JSON-serializable snapshot of a resolution state."""
    if isinstance(state, Ready):
        return {
            "status": state.status,
            "products": {k: product_to_dict(p) for k, p in sorted(state.products.items())},
        }
    if isinstance(state, Failed):
        return {"status": state.status, "error": _error_to_dict(state.error)}
    return {"status": state.status}


def purchase_result_to_dict(r: PurchaseResult) -> dict[str, object]:
    if isinstance(r, PurchaseSuccess):
        return {"outcome": r.outcome, "product_id": r.product_id, "entitlements": sorted(r.entitlements)}
    if isinstance(r, PurchaseFailure):
        return {
            "outcome": r.outcome,
            "product_id": r.product_id,
            "error": _error_to_dict(r.error),
            "user_cancelled": r.user_cancelled,
        }
    if isinstance(r, PurchaseCancelled):
        return {"outcome": r.outcome, "product_id": r.product_id}
    if isinstance(r, EntitlementNotGranted):
        return {"outcome": r.outcome, "product_id": r.product_id, "entitlements": sorted(r.entitlements)}
    # should be unreachable
    return {"outcome": "unknown"}
