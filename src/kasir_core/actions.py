"""Operator actions understood by the controller.

An action is one of:

- StartCommand: the ``/start`` command
- TextInput: free text typed by the operator
- Press: a button without a payload (see Signal)
- SelectItem: a menu button for one catalog item
- AdjustItem: the +/- buttons on the item detail view

Transports that carry buttons as strings use ``encode_callback`` and
``decode_callback``; the string form never reaches the controller.

Example:
    >>> decode_callback("inc_Tea")
    AdjustItem(delta=<CartDelta.INCREMENT: 'inc'>, item='Tea')
    >>> encode_callback(Press(Signal.CHECKOUT))
    'checkout'
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from kasir_core.cart import CartDelta
from kasir_core.exceptions import InvalidSignalError

SELECT_PREFIX = "item_"


class Signal(Enum):
    """Payload-free buttons. Values are the callback identifiers."""

    START_TRANSACTION = "start_transaction"
    END_SESSION = "end_session"
    NEW_CUSTOMER = "new_customer"
    CONTINUE_SAME_CUSTOMER = "continue_same_customer"
    BACK_TO_MENU = "back_to_menu"
    CHECKOUT = "checkout"
    BACK_TO_CHECKOUT = "back_to_checkout"
    PAY_CASH = "pay_cash"
    PAY_QRIS = "pay_qris"
    QRIS_DONE = "qris_done"
    OPEN_ADMIN = "admin_panel"
    ADMIN_REPORT = "adm_rekap"
    ADMIN_RESET = "adm_reset"


ADMIN_SIGNALS = frozenset({Signal.OPEN_ADMIN, Signal.ADMIN_REPORT, Signal.ADMIN_RESET})


@dataclass(frozen=True)
class StartCommand:
    pass


@dataclass(frozen=True)
class TextInput:
    text: str


@dataclass(frozen=True)
class Press:
    signal: Signal


@dataclass(frozen=True)
class SelectItem:
    item: str


@dataclass(frozen=True)
class AdjustItem:
    delta: CartDelta
    item: str


Action = StartCommand | TextInput | Press | SelectItem | AdjustItem

_SIGNALS_BY_VALUE = {signal.value: signal for signal in Signal}


def decode_callback(data: str) -> Press | SelectItem | AdjustItem:
    """Decode a button identifier into an action.

    Args:
        data: Callback identifier, e.g. ``"checkout"``, ``"item_Tea"``,
            ``"dec_Tea"``.

    Returns:
        The decoded action.

    Raises:
        InvalidSignalError: If the identifier is not recognised.
    """
    signal = _SIGNALS_BY_VALUE.get(data)
    if signal is not None:
        return Press(signal)

    if data.startswith(SELECT_PREFIX) and len(data) > len(SELECT_PREFIX):
        return SelectItem(data[len(SELECT_PREFIX):])

    for delta in CartDelta:
        prefix = f"{delta.value}_"
        if data.startswith(prefix) and len(data) > len(prefix):
            return AdjustItem(delta, data[len(prefix):])

    raise InvalidSignalError(f"Unknown button: {data!r}")


def encode_callback(action: Press | SelectItem | AdjustItem) -> str:
    """Inverse of ``decode_callback``."""
    if isinstance(action, Press):
        return action.signal.value
    if isinstance(action, SelectItem):
        return f"{SELECT_PREFIX}{action.item}"
    if isinstance(action, AdjustItem):
        return f"{action.delta.value}_{action.item}"
    raise TypeError(f"Action {action!r} has no callback form")
