"""
Settings — environment-driven configuration, read once at import.

    from pharmacart.config import settings, load_settings

    settings.backend_url                      # BACKEND_URL / NEXT_PUBLIC_BACKEND_URL
    load_settings(".env.test").promo_codes    # explicit env file

A ``.env`` file is loaded first; real environment variables win. Blank
values count as unset.

    BACKEND_URL                http://localhost:8089
    API_PREFIX                 /api/v1
    REQUEST_TIMEOUT            10.0 seconds
    CART_STORAGE_PATH          ~/.pharmacart/storage.json
    CART_STORAGE_KEY           cart
    FREE_SHIPPING_THRESHOLD    100
    SHIPPING_FEE               10.00
    PROMO_CODES                discount10 (comma-separated, case-insensitive)
    PROMO_RATE                 0.10
    MAX_PRESCRIPTION_BYTES     5 MiB
    LOG_LEVEL / LOG_FORMAT     INFO / DEFAULT_LOG_FORMAT
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def _get_env(*keys: str, default: str | None = None) -> str | None:
    for k in keys:
        v = os.getenv(k)
        if v is not None and str(v).strip() != "":
            return v.strip()
    return default


def _get_int(*keys: str, default: int) -> int:
    v = _get_env(*keys)
    if v is None:
        return default
    return int(v)


def _get_float(*keys: str, default: float) -> float:
    v = _get_env(*keys)
    if v is None:
        return default
    return float(v)


def _get_decimal(*keys: str, default: str) -> Decimal:
    return Decimal(_get_env(*keys, default=default) or default)


def _get_list(*keys: str, default: str) -> frozenset[str]:
    raw = _get_env(*keys, default=default) or ""
    return frozenset(p.strip().lower() for p in raw.split(",") if p.strip())


@dataclass(frozen=True)
class Settings:
    backend_url: str
    api_prefix: str
    request_timeout: float
    cart_storage_path: str
    cart_storage_key: str
    free_shipping_threshold: Decimal
    shipping_fee: Decimal
    promo_codes: frozenset[str]
    promo_rate: Decimal
    max_prescription_bytes: int
    log_level: str
    log_format: str


def load_settings(env_file: str | Path | None = None) -> Settings:
    """Read settings from the environment (after loading ``.env``)."""
    load_dotenv(dotenv_path=env_file)

    return Settings(
        backend_url=_get_env(
            "BACKEND_URL", "NEXT_PUBLIC_BACKEND_URL", default="http://localhost:8089"
        )
        or "http://localhost:8089",
        api_prefix=_get_env("API_PREFIX", default="/api/v1") or "/api/v1",
        request_timeout=_get_float("REQUEST_TIMEOUT", default=10.0),
        cart_storage_path=_get_env(
            "CART_STORAGE_PATH",
            default=str(Path.home() / ".pharmacart" / "storage.json"),
        )
        or "",
        cart_storage_key=_get_env("CART_STORAGE_KEY", default="cart") or "cart",
        free_shipping_threshold=_get_decimal("FREE_SHIPPING_THRESHOLD", default="100"),
        shipping_fee=_get_decimal("SHIPPING_FEE", default="10.00"),
        promo_codes=_get_list("PROMO_CODES", default="discount10"),
        promo_rate=_get_decimal("PROMO_RATE", default="0.10"),
        max_prescription_bytes=_get_int(
            "MAX_PRESCRIPTION_BYTES", default=5 * 1024 * 1024
        ),
        log_level=_get_env("LOG_LEVEL", default="INFO") or "INFO",
        log_format=_get_env("LOG_FORMAT", default=DEFAULT_LOG_FORMAT) or DEFAULT_LOG_FORMAT,
    )


settings = load_settings()
