"""
Pricing types — policy and results.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal

from pharmacart.config import Settings
from pharmacart.errors import InvalidPromoCode

# ═══════════════════════════════════════════════════════════════════════════════
# Policy — Configurable Constants
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class PricingPolicy:
    """
    Shipping and promo rules.

    Immutable; each ``with_*`` returns a new policy.

    Example:
        policy = (
            PricingPolicy()
            .with_free_shipping_threshold(Decimal("50"))
            .with_promo_codes("SPRING15", rate=Decimal("0.15"))
        )
    """

    free_shipping_threshold: Decimal = Decimal("100")
    shipping_fee: Decimal = Decimal("10.00")
    # Stored lowercase; lookups are case-insensitive.
    promo_codes: frozenset[str] = field(default_factory=lambda: frozenset({"discount10"}))
    promo_rate: Decimal = Decimal("0.10")

    @classmethod
    def from_settings(cls, settings: Settings) -> PricingPolicy:
        return cls(
            free_shipping_threshold=settings.free_shipping_threshold,
            shipping_fee=settings.shipping_fee,
            promo_codes=frozenset(c.lower() for c in settings.promo_codes),
            promo_rate=settings.promo_rate,
        )

    def with_free_shipping_threshold(self, threshold: Decimal) -> PricingPolicy:
        return replace(self, free_shipping_threshold=threshold)

    def with_shipping_fee(self, fee: Decimal) -> PricingPolicy:
        return replace(self, shipping_fee=fee)

    def with_promo_codes(self, *codes: str, rate: Decimal | None = None) -> PricingPolicy:
        return replace(
            self,
            promo_codes=frozenset(c.lower() for c in codes),
            promo_rate=self.promo_rate if rate is None else rate,
        )

    def recognizes(self, code: str) -> bool:
        return code.lower() in self.promo_codes


# ═══════════════════════════════════════════════════════════════════════════════
# Results
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Totals:
    subtotal: Decimal
    discount: Decimal
    shipping: Decimal
    total: Decimal
    promo_code: str | None = None

    @property
    def free_shipping(self) -> bool:
        return self.shipping == 0


@dataclass(frozen=True, slots=True)
class Quote:
    """
    Totals plus the promo outcome.

    ``rejection`` is set when a promo code was supplied but not recognized;
    the totals then carry no discount.
    """

    totals: Totals
    rejection: InvalidPromoCode | None = None

    @property
    def promo_applied(self) -> bool:
        return self.totals.promo_code is not None


__all__ = ("PricingPolicy", "Totals", "Quote")
