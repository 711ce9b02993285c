"""
Pricing computation — pure functions, no state.
"""

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_EVEN

from pharmacart.cart import CartItem, CartState, line_sum
from pharmacart.errors import InvalidPromoCode
from pharmacart.pricing._types import PricingPolicy, Quote, Totals

DEFAULT_POLICY = PricingPolicy()


def round_money(amount: Decimal, places: int = 2) -> Decimal:
    """Round to specified decimal places using banker's rounding."""
    quantize_str = "0." + "0" * places
    return amount.quantize(Decimal(quantize_str), rounding=ROUND_HALF_EVEN)


def subtotal_of(cart: CartState | tuple[CartItem, ...] | list[CartItem]) -> Decimal:
    items = cart.items if isinstance(cart, CartState) else tuple(cart)
    return line_sum(items)


def shipping_for(subtotal: Decimal, policy: PricingPolicy = DEFAULT_POLICY) -> Decimal:
    """Free strictly above the threshold; the flat fee at or below it."""
    if subtotal > policy.free_shipping_threshold:
        return Decimal("0.00")
    return policy.shipping_fee


def validate_promo(code: str, policy: PricingPolicy = DEFAULT_POLICY) -> Decimal:
    """
    Return the discount rate for ``code``.

    Raises:
        InvalidPromoCode: code is not on the allowlist
    """
    if not policy.recognizes(code):
        raise InvalidPromoCode(code)
    return policy.promo_rate


def compute_totals(
    cart: CartState | tuple[CartItem, ...] | list[CartItem],
    promo_code: str | None = None,
    policy: PricingPolicy = DEFAULT_POLICY,
) -> Quote:
    """
    Compute subtotal, discount, shipping and total.

    An unrecognized promo code never raises here: the quote carries zero
    discount and the rejection, so callers can show both.

    Example:
        quote = compute_totals(store.state, "DISCOUNT10")
        quote.totals.discount   # 10% of subtotal
        quote.rejection         # None
    """
    subtotal = subtotal_of(cart)
    shipping = shipping_for(subtotal, policy)

    discount = Decimal("0.00")
    applied: str | None = None
    rejection: InvalidPromoCode | None = None

    if promo_code is not None:
        try:
            rate = validate_promo(promo_code, policy)
        except InvalidPromoCode as e:
            rejection = e
        else:
            discount = round_money(subtotal * rate)
            applied = promo_code

    return Quote(
        totals=Totals(
            subtotal=subtotal,
            discount=discount,
            shipping=shipping,
            total=subtotal - discount + shipping,
            promo_code=applied,
        ),
        rejection=rejection,
    )


__all__ = (
    "DEFAULT_POLICY",
    "round_money",
    "subtotal_of",
    "shipping_for",
    "validate_promo",
    "compute_totals",
)
