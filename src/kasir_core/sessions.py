"""Per-operator session state.

Each operator has exactly one Session, created lazily on first access.
The SessionStore owns all sessions; callers work on the record returned
by ``get`` while holding the operator's lock and never keep it across
actions.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)


class View(Enum):
    """Conversational state an operator is in."""

    WELCOME = "welcome"
    GETTING_NAME = "getting_name"
    MENU = "menu"
    ITEM_DETAIL = "item_detail"
    CHECKOUT = "checkout"
    WAITING_CASH = "waiting_cash"
    QRIS = "qris"
    POST_TRANSACTION = "post_transaction"
    ADMIN_PANEL = "admin_panel"
    ADMIN_REKAP = "admin_rekap"


@dataclass
class Session:
    """Mutable state of one operator's conversation.

    Attributes:
        customer_name: Name of the current customer, once an order begins.
        cart: Item name to quantity; never holds zero or negative quantities.
        current_view: View the operator is in.
        current_item: Item shown while in View.ITEM_DETAIL, else None.
        total: Cart total captured at checkout; used for payment.
    """

    customer_name: str | None = None
    cart: dict[str, int] = field(default_factory=dict)
    current_view: View = View.WELCOME
    current_item: str | None = None
    total: int = 0

    def clear_order(self) -> None:
        """Forget the customer, cart and total; the view is left to the caller."""
        self.customer_name = None
        self.cart = {}
        self.current_item = None
        self.total = 0

    def reset(self) -> None:
        """Clear the order and return to View.WELCOME."""
        self.clear_order()
        self.current_view = View.WELCOME


class SessionStore:
    """Thread-safe map of operator id to Session.

    Sessions of different operators are independent. ``lock_for`` returns a
    re-entrant lock per operator so one action can be processed to
    completion before the next action of the same operator starts.

    Example:
        >>> store = SessionStore()
        >>> store.get(42).current_view
        <View.WELCOME: 'welcome'>
        >>> 42 in store
        True

    """

    def __init__(self) -> None:
        self._sessions: dict[int, Session] = {}
        self._locks: dict[int, threading.RLock] = {}
        self._guard = threading.Lock()

    def get(self, operator_id: int) -> Session:
        """Return the operator's session, creating a blank one if needed."""
        with self._guard:
            session = self._sessions.get(operator_id)
            if session is None:
                session = Session()
                self._sessions[operator_id] = session
                logger.debug("Created session for operator %s", operator_id)
            return session

    def peek(self, operator_id: int) -> Session | None:
        """Return the operator's session without creating one."""
        with self._guard:
            return self._sessions.get(operator_id)

    def lock_for(self, operator_id: int) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(operator_id)
            if lock is None:
                lock = threading.RLock()
                self._locks[operator_id] = lock
            return lock

    def reset(self, operator_id: int) -> Session:
        """Fully reset the operator's session back to View.WELCOME."""
        session = self.get(operator_id)
        session.reset()
        return session

    def __contains__(self, operator_id: object) -> bool:
        with self._guard:
            return operator_id in self._sessions

    def __len__(self) -> int:
        with self._guard:
            return len(self._sessions)
