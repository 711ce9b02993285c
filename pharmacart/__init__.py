"""
pharmacart — cart, checkout and order lifecycle for a pharmacy storefront.

    from pharmacart import cart as C       # Cart state + persistence
    from pharmacart import pricing as P    # Totals, shipping, promo codes
    from pharmacart import checkout as CH  # Prescription gate + order submission
    from pharmacart import orders as O     # Order records + lifecycle
    from pharmacart import api             # Backend HTTP client
"""

from pharmacart import cart
from pharmacart import pricing
from pharmacart import orders
from pharmacart import api
from pharmacart import checkout
from pharmacart.gate import ActionGate
from pharmacart.errors import (
    PharmacartError,
    BackendRejected,
    NetworkError,
    ApiError,
)

__version__ = "0.1.0"

__all__ = (
    "cart",
    "pricing",
    "orders",
    "api",
    "checkout",
    "ActionGate",
    "PharmacartError",
    "BackendRejected",
    "NetworkError",
    "ApiError",
)
