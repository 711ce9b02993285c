"""
Pricing — subtotal, shipping, promo discount, total.

    from pharmacart import pricing as P

    quote = P.compute_totals(store.state, promo_code="DISCOUNT10")
    if quote.rejection:
        toast(quote.rejection.message)
"""

from pharmacart.pricing._types import PricingPolicy, Totals, Quote
from pharmacart.pricing._compute import (
    DEFAULT_POLICY,
    round_money,
    subtotal_of,
    shipping_for,
    validate_promo,
    compute_totals,
)

__all__ = (
    "PricingPolicy",
    "Totals",
    "Quote",
    "DEFAULT_POLICY",
    "round_money",
    "subtotal_of",
    "shipping_for",
    "validate_promo",
    "compute_totals",
)
