"""
Operate on a file-backed cart from the shell.

Usage:
    python -m pharmacart add 7 "Amoxicillin 500mg" 12.50 --qty 2 --rx
    python -m pharmacart set 7 3
    python -m pharmacart quote --promo DISCOUNT10
"""

from __future__ import annotations

import argparse
from decimal import Decimal, InvalidOperation

from pharmacart import cart as C
from pharmacart import pricing as P
from pharmacart.config import settings
from pharmacart.logging_config import setup_logging


def _price(value: str) -> Decimal:
    try:
        price = Decimal(value)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"invalid price: {value!r}") from None
    if not price.is_finite():
        raise argparse.ArgumentTypeError(f"invalid price: {value!r}")
    if price < 0:
        raise argparse.ArgumentTypeError("price must be non-negative")
    return price


def _positive(value: str) -> int:
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError("quantity must be at least 1")
    return n


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pharmacart", description="Pharmacy cart")
    parser.add_argument(
        "--storage",
        default=settings.cart_storage_path,
        help=f"Storage file (default: {settings.cart_storage_path})",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("show", help="Print cart contents")

    add = sub.add_parser("add", help="Add an item (merges by id)")
    add.add_argument("id")
    add.add_argument("name")
    add.add_argument("price", type=_price)
    add.add_argument("--qty", type=_positive, default=1)
    add.add_argument("--rx", action="store_true", help="Requires prescription")
    add.add_argument("--image", default="", help="Image URL")

    remove = sub.add_parser("remove", help="Remove an item")
    remove.add_argument("id")

    set_qty = sub.add_parser("set", help="Set quantity (0 removes)")
    set_qty.add_argument("id")
    set_qty.add_argument("qty", type=int)

    sub.add_parser("clear", help="Empty the cart")

    quote = sub.add_parser("quote", help="Show totals")
    quote.add_argument("--promo", default=None)

    return parser


def _render_cart(state: C.CartState) -> str:
    if state.is_empty:
        return "Cart is empty."
    lines = []
    for item in state.items:
        rx = " [Rx]" if item.requires_prescription else ""
        lines.append(
            f"{item.id:>6}  {item.name}{rx}  {item.quantity} x {item.price} = {item.line_total}"
        )
    lines.append(f"Total: {state.total}")
    return "\n".join(lines)


def _render_quote(quote: P.Quote) -> str:
    t = quote.totals
    lines = [f"Subtotal: {t.subtotal}"]
    if quote.rejection is not None:
        lines.append(f"Promo:    {quote.rejection.message}")
    elif t.promo_code:
        lines.append(f"Discount: -{t.discount} ({t.promo_code})")
    lines.append(f"Shipping: {'Free' if t.free_shipping else t.shipping}")
    lines.append(f"Total:    {t.total}")
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()

    persistence = C.KeyValuePersistence(
        C.JsonFileStorage(args.storage), key=settings.cart_storage_key
    )
    store = C.CartStore(persistence)

    match args.command:
        case "add":
            store.add_item(
                C.CartItem(
                    id=args.id,
                    name=args.name,
                    price=args.price,
                    quantity=args.qty,
                    image_url=args.image,
                    requires_prescription=args.rx,
                )
            )
        case "remove":
            store.remove_item(args.id)
        case "set":
            store.update_quantity(args.id, args.qty)
        case "clear":
            store.clear_cart()
        case "quote":
            policy = P.PricingPolicy.from_settings(settings)
            print(_render_quote(P.compute_totals(store.state, args.promo, policy)))
            return 0

    print(_render_cart(store.state))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
