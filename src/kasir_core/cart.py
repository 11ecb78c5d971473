"""Cart engine: quantities of selected items for one in-progress order.

A cart is a plain ``dict`` of item name to quantity. Every function here
treats the input cart as read-only and returns a new mapping; the
invariant is that no entry ever holds a quantity of zero or less (absence
means zero).
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from enum import Enum

from kasir_core.catalog import Catalog
from kasir_core.utils import format_currency

EMPTY_CART_LINE = "Keranjang kosong."


class CartDelta(Enum):
    """Direction of a single quantity adjustment."""

    INCREMENT = "inc"
    DECREMENT = "dec"


def apply_delta(cart: Mapping[str, int], item: str, delta: CartDelta) -> dict[str, int]:
    """Return a new cart with one unit of ``item`` added or removed.

    Increments are unconditional. Decrements are clamped at zero and an
    item that reaches zero is dropped from the mapping, so decrementing an
    absent item is a no-op.

    Args:
        cart: Current cart.
        item: Item name.
        delta: CartDelta.INCREMENT or CartDelta.DECREMENT.

    Returns:
        New cart dictionary; ``cart`` itself is not modified.
    """
    new_cart = dict(cart)
    current_qty = new_cart.get(item, 0)

    if delta is CartDelta.INCREMENT:
        new_cart[item] = current_qty + 1
    elif current_qty > 1:
        new_cart[item] = current_qty - 1
    else:
        new_cart.pop(item, None)

    return new_cart


def cart_total(cart: Mapping[str, int], catalog: Catalog) -> int:
    """Sum of unit price times quantity; unknown items contribute nothing."""
    return sum(catalog.price_of(item) * qty for item, qty in cart.items())


def summary_lines(cart: Mapping[str, int], catalog: Catalog) -> Iterator[str]:
    """Yield one ``• item x2 = Rp28.000`` line per entry, in insertion order.

    An empty cart yields a single EMPTY_CART_LINE.
    """
    if not cart:
        yield EMPTY_CART_LINE
        return

    for item, qty in cart.items():
        yield f"• {item} x{qty} = {format_currency(catalog.price_of(item) * qty)}"
