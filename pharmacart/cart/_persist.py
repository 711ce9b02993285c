"""
Cart persistence — port, codec and key-value storage backends.

    persistence = KeyValuePersistence(JsonFileStorage("~/.pharmacart/storage.json"))
    store = CartStore(persistence)

The stored value is the JSON document ``{"items": [...], "total": "..."}``.
An absent or malformed value loads as an empty cart.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Annotated, Protocol

from pydantic import BaseModel, BeforeValidator, Field, ValidationError
from sqlalchemy import DateTime, Engine, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, sessionmaker

from pharmacart.cart._types import CartItem, CartState, EMPTY_CART

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# Persistence Port
# ═══════════════════════════════════════════════════════════════════════════════


class CartPersistence(Protocol):
    """Durable home of the cart. Injected into CartStore."""

    def load(self) -> CartState:
        """Return the persisted cart, or an empty one."""
        ...

    def save(self, state: CartState) -> None:
        """Write ``state``. Failures propagate."""
        ...


# ═══════════════════════════════════════════════════════════════════════════════
# Key-Value Storage Protocol
# ═══════════════════════════════════════════════════════════════════════════════


class Storage(Protocol):
    """
    String key-value storage (the localStorage shape).

    Implement this for other backends (Redis, browser bridge, ...).
    """

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStorage:
    """In-memory storage. For tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStorage:
    """
    All keys in one JSON object on disk.

    Writes go to a sibling temp file first, then replace the original.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            logger.warning("Storage file %s is not valid UTF-8 JSON; ignoring", self._path)
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def get(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
        tmp.replace(self._path)


# ═══════════════════════════════════════════════════════════════════════════════
# SQLAlchemy Storage
# ═══════════════════════════════════════════════════════════════════════════════


class Base(DeclarativeBase):
    pass


class StorageEntry(Base):
    __tablename__ = "storage"

    key: Mapped[str] = mapped_column(String(100), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


class SQLAlchemyStorage:
    """
    Key-value rows in a ``storage`` table.

    Example:
        engine = create_engine("sqlite:///cart.db")
        persistence = KeyValuePersistence(SQLAlchemyStorage(engine))
    """

    def __init__(self, engine: Engine, *, create_tables: bool = True) -> None:
        if create_tables:
            Base.metadata.create_all(engine)
        self._session = sessionmaker(engine, expire_on_commit=False)

    def get(self, key: str) -> str | None:
        with self._session() as session:
            row = session.get(StorageEntry, key)
            return row.value if row is not None else None

    def set(self, key: str, value: str) -> None:
        with self._session.begin() as session:
            session.merge(StorageEntry(key=key, value=value, updated_at=datetime.now()))


# ═══════════════════════════════════════════════════════════════════════════════
# Codec — pydantic models for the stored document
# ═══════════════════════════════════════════════════════════════════════════════

_Id = Annotated[str, BeforeValidator(lambda v: str(v) if isinstance(v, int) else v)]


class StoredItem(BaseModel):
    id: _Id
    name: str
    image_url: str | None = ""
    price: Decimal = Field(ge=0)
    quantity: int = Field(ge=1)
    requires_prescription: bool | None = False

    @classmethod
    def from_domain(cls, item: CartItem) -> StoredItem:
        return cls(
            id=item.id,
            name=item.name,
            image_url=item.image_url,
            price=item.price,
            quantity=item.quantity,
            requires_prescription=item.requires_prescription,
        )

    def to_domain(self) -> CartItem:
        return CartItem(
            id=self.id,
            name=self.name,
            price=self.price,
            quantity=self.quantity,
            image_url=self.image_url or "",
            requires_prescription=bool(self.requires_prescription),
        )


class StoredCart(BaseModel):
    items: list[StoredItem] = Field(default_factory=list)
    total: Decimal = Decimal("0")


def encode_cart(state: CartState) -> str:
    """Serialize to the persisted JSON document (decimals as strings)."""
    doc = StoredCart(
        items=[StoredItem.from_domain(i) for i in state.items],
        total=state.total,
    )
    return doc.model_dump_json()


def decode_cart(raw: str | None) -> CartState:
    """
    Parse a persisted document.

    Absent or malformed input yields EMPTY_CART. Items are returned as
    stored (duplicates included); CartStore replays them through the
    reducer. The stored total is ignored and recomputed.
    """
    if raw is None:
        return EMPTY_CART
    try:
        doc = StoredCart.model_validate_json(raw)
    except ValidationError as e:
        logger.warning("Discarding malformed persisted cart: %s", e.errors()[:1])
        return EMPTY_CART
    return CartState.of(tuple(item.to_domain() for item in doc.items))


# ═══════════════════════════════════════════════════════════════════════════════
# KeyValuePersistence — port implementation over Storage
# ═══════════════════════════════════════════════════════════════════════════════


class KeyValuePersistence:
    """CartPersistence backed by any Storage under a single key."""

    def __init__(self, storage: Storage, key: str = "cart") -> None:
        self._storage = storage
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> CartState:
        return decode_cart(self._storage.get(self._key))

    def save(self, state: CartState) -> None:
        self._storage.set(self._key, encode_cart(state))


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "CartPersistence",
    "Storage",
    "MemoryStorage",
    "JsonFileStorage",
    "SQLAlchemyStorage",
    "StorageEntry",
    "StoredItem",
    "StoredCart",
    "encode_cart",
    "decode_cart",
    "KeyValuePersistence",
)
