from __future__ import annotations

from typing import Sequence

from upsell.engine.orchestrator import PurchaseOrchestrator
from upsell.engine.provider import PurchaseProvider
from upsell.engine.resolver import OfferingResolver
from upsell.engine.serialize import purchase_result_to_dict, resolution_to_dict
from upsell.engine.types import (
    Failed,
    PurchaseFailure,
    PurchaseResult,
    PurchaseSuccess,
    Ready,
    ResolutionState,
)
from upsell.services.telemetry import TelemetryService


class UpsellSession:
    """UI-free upsell screen: offerings on buttons, one purchase per tap."""

    def __init__(
        self,
        provider: PurchaseProvider,
        entitlement_key: str,
        offering_keys: Sequence[str],
        telemetry: TelemetryService | None = None,
    ) -> None:
        self.entitlement_key = entitlement_key
        self.offering_keys = tuple(offering_keys)
        self.telemetry = telemetry
        self.resolver = OfferingResolver(provider)
        self.orchestrator = PurchaseOrchestrator(provider, self.resolver, entitlement_key=entitlement_key)

        self.loading = False
        self.message = ""
        self.button_labels: dict[str, str] = {}
        self.active_entitlements: set[str] = set()
        self.content_unlocked = False

    @property
    def state(self) -> ResolutionState:
        return self.resolver.state

    @property
    def buttons_enabled(self) -> bool:
        return not self.loading and self.resolver.is_ready

    async def load(self) -> ResolutionState:
        if self.loading:
            return self.resolver.state
        self.loading = True
        self.button_labels = {}
        try:
            state = await self.resolver.resolve(self.entitlement_key, self.offering_keys)
        finally:
            self.loading = False

        if isinstance(state, Ready):
            self.button_labels = {
                key: f"Buy {p.title or key} - {p.price_label}" for key, p in state.products.items()
            }
            self.message = ""
        elif isinstance(state, Failed):
            self.message = state.error.message
        self._log("resolve", resolution_to_dict(state))
        return state

    async def buy(self, offering_key: str) -> PurchaseResult | None:
        if self.loading:
            return None
        product = self.resolver.product(offering_key)
        if product is None:
            return None

        self.loading = True
        try:
            result = await self.orchestrator.purchase(product)
        finally:
            self.loading = False
        if result is None:
            return None

        if isinstance(result, PurchaseSuccess):
            self.active_entitlements |= result.entitlements
            self.content_unlocked = True
            self.message = "Purchased."
        elif isinstance(result, PurchaseFailure):
            self.message = result.error.message
        else:
            self.message = ""
        self._log("purchase", {"offering": offering_key, **purchase_result_to_dict(result)})
        return result

    def skip(self) -> None:
        self.content_unlocked = True
        self._log("skip", {"entitlement": self.entitlement_key})

    def _log(self, event_type: str, payload: dict[str, object]) -> None:
        if self.telemetry is not None:
            self.telemetry.log(event_type, payload)
