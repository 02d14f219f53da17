"""Client-side shopping cart state.

The cart lives with the shopper, not on the server: a small reducer over
add, remove, set-quantity and clear. Each change is mirrored as a JSON
snapshot into a key/value storage (browser-local storage in the web client,
any ``MutableMapping[str, str]`` here) so the cart survives reloads.
"""

import json
from collections.abc import MutableMapping
from dataclasses import dataclass, replace
from decimal import Decimal

import structlog

from shared.money import format_amount, parse_amount

logger = structlog.get_logger(__name__)

STORAGE_KEY = "cart"


@dataclass(frozen=True)
class CartItem:
    id: str  # product id
    name: str
    price: Decimal
    quantity: int = 1
    image: str | None = None

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "price": format_amount(self.price),
            "quantity": self.quantity,
            "image": self.image,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartItem":
        price = parse_amount(data["price"])
        quantity = int(data.get("quantity", 1))
        if price is None or price < 0 or quantity < 1:
            raise ValueError(f"Invalid cart line: {data!r}")
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            price=price,
            quantity=quantity,
            image=data.get("image"),
        )


class Cart:
    """Cart reducer.

    ``total`` is recomputed after every mutation. The cart holds no order or
    request identifiers, so a repeated checkout creates a second order.
    """

    def __init__(self, storage: MutableMapping[str, str] | None = None, key: str = STORAGE_KEY) -> None:
        self.storage = storage
        self.key = key
        self.items: list[CartItem] = []
        self.total = Decimal("0")
        self.is_open = False

    # -------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------
    @classmethod
    def load(cls, storage: MutableMapping[str, str], key: str = STORAGE_KEY) -> "Cart":
        """Rehydrate from ``storage``. A corrupt snapshot yields an empty cart."""
        cart = cls(storage, key)
        raw = storage.get(key)
        if not raw:
            return cart

        try:
            data = json.loads(raw)
            cart.items = [CartItem.from_dict(line) for line in data.get("items", [])]
            cart.is_open = bool(data.get("isCartOpen", False))
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.warning("cart_snapshot_corrupt", key=key, error=str(exc))
            cart.items = []
            cart.is_open = False

        cart._recalculate()
        return cart

    def snapshot(self) -> dict:
        return {
            "items": [item.to_dict() for item in self.items],
            "total": format_amount(self.total),
            "isCartOpen": self.is_open,
        }

    def _changed(self) -> None:
        self._recalculate()
        if self.storage is not None:
            self.storage[self.key] = json.dumps(self.snapshot())

    def _recalculate(self) -> None:
        self.total = sum((item.subtotal for item in self.items), start=Decimal("0"))

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def add(self, item: CartItem) -> None:
        """Add ``item``, merging its quantity into an existing line for the same product."""
        for index, existing in enumerate(self.items):
            if existing.id == item.id:
                self.items[index] = replace(existing, quantity=existing.quantity + item.quantity)
                break
        else:
            self.items.append(item)
        self._changed()

    def remove(self, product_id: str) -> None:
        self.items = [item for item in self.items if item.id != str(product_id)]
        self._changed()

    def set_quantity(self, product_id: str, quantity: int) -> None:
        """Replace a line's quantity; zero or less removes the line."""
        if quantity < 1:
            self.remove(product_id)
            return
        self.items = [
            replace(item, quantity=quantity) if item.id == str(product_id) else item for item in self.items
        ]
        self._changed()

    def clear(self) -> None:
        self.items = []
        self._changed()

    def open(self) -> None:
        self.is_open = True
        self._changed()

    def close(self) -> None:
        self.is_open = False
        self._changed()

    def toggle(self) -> None:
        self.is_open = not self.is_open
        self._changed()

    # -------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------
    @property
    def count(self) -> int:
        return sum(item.quantity for item in self.items)

    def checkout_payload(self) -> dict:
        """Body for ``POST /api/create-payment-intent``."""
        return {
            "amount": format_amount(self.total),
            "items": [
                {"id": item.id, "name": item.name, "price": format_amount(item.price), "quantity": item.quantity}
                for item in self.items
            ],
        }
