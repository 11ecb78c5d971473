"""View state machine for the cashier conversation.

KasirController is the single entry point used by a transport. For each
action it checks authorization, loads the operator's session, applies the
transition for the session's current view, records completed sales in the
ledger and returns a RenderRequest describing what to show next.

Session and ledger mutations are complete before the RenderRequest is
returned, so a transport that fails to deliver it cannot cause a sale to
be recorded twice.

Example:
    >>> from kasir_core import AuthorizationPolicy, KasirController, StartCommand
    >>> controller = KasirController(AuthorizationPolicy(operator_ids={7}))
    >>> controller.handle_action(7, StartCommand()).view
    <View.WELCOME: 'welcome'>
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from kasir_core import views
from kasir_core.actions import (
    ADMIN_SIGNALS,
    Action,
    AdjustItem,
    Press,
    SelectItem,
    Signal,
    StartCommand,
    TextInput,
    decode_callback,
)
from kasir_core.auth import AuthorizationPolicy, Role
from kasir_core.cart import apply_delta, cart_total
from kasir_core.catalog import Catalog
from kasir_core.exceptions import (
    EmptyCartError,
    InvalidSignalError,
    UnauthorizedError,
    ValidationError,
)
from kasir_core.ledger import PaymentMethod, Sale, SalesLedger
from kasir_core.render import RenderRequest
from kasir_core.sessions import Session, SessionStore, View
from kasir_core.utils import parse_cash_amount

logger = logging.getLogger(__name__)

MIN_NAME_LENGTH = 2
MAX_NAME_LENGTH = 50

SignalHandler = Callable[[int, Session], RenderRequest]


class KasirController:
    """Drive every operator's conversation through the view state machine.

    Args:
        policy: Authorization policy for operator ids.
        catalog: Items for sale. Defaults to the built-in menu.
        ledger: Sales ledger. A fresh one is created if omitted.
        sessions: Session store. A fresh one is created if omitted.
        clock: Returns the timestamp recorded on each sale.
    """

    def __init__(
        self,
        policy: AuthorizationPolicy,
        catalog: Catalog | None = None,
        ledger: SalesLedger | None = None,
        sessions: SessionStore | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.policy = policy
        self.catalog = catalog if catalog is not None else Catalog()
        self.ledger = ledger if ledger is not None else SalesLedger()
        self.sessions = sessions if sessions is not None else SessionStore()
        self._clock = clock

        # (current view, signal) -> handler. Pairs not listed are illegal.
        self._transitions: dict[tuple[View, Signal], SignalHandler] = {
            (View.WELCOME, Signal.START_TRANSACTION): self._start_order,
            (View.WELCOME, Signal.OPEN_ADMIN): self._open_admin,
            (View.MENU, Signal.CHECKOUT): self._checkout,
            (View.MENU, Signal.OPEN_ADMIN): self._open_admin,
            (View.ITEM_DETAIL, Signal.BACK_TO_MENU): self._show_menu,
            (View.CHECKOUT, Signal.PAY_CASH): self._pay_cash,
            (View.CHECKOUT, Signal.PAY_QRIS): self._pay_qris,
            (View.CHECKOUT, Signal.BACK_TO_MENU): self._show_menu,
            (View.QRIS, Signal.QRIS_DONE): self._confirm_qris,
            (View.QRIS, Signal.BACK_TO_CHECKOUT): self._show_checkout,
            (View.POST_TRANSACTION, Signal.NEW_CUSTOMER): self._new_customer,
            (View.POST_TRANSACTION, Signal.CONTINUE_SAME_CUSTOMER): self._show_menu,
            (View.POST_TRANSACTION, Signal.END_SESSION): self._end_session,
            (View.ADMIN_PANEL, Signal.ADMIN_REPORT): self._admin_report,
            (View.ADMIN_PANEL, Signal.ADMIN_RESET): self._admin_reset,
            (View.ADMIN_PANEL, Signal.OPEN_ADMIN): self._open_admin,
            (View.ADMIN_PANEL, Signal.END_SESSION): self._end_session,
            (View.ADMIN_REKAP, Signal.OPEN_ADMIN): self._open_admin,
        }

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def handle_action(self, operator_id: int, action: Action) -> RenderRequest:
        """Apply one operator action and describe what to show next.

        Expected rejections (access denied, invalid input, illegal button,
        empty cart) come back as render requests; they are never raised.

        Args:
            operator_id: Identity of the operator sending the action.
            action: The decoded action.

        Returns:
            RenderRequest for the transport to display.
        """
        try:
            self.policy.require(operator_id)
        except UnauthorizedError:
            return views.access_denied(as_alert=not isinstance(action, (StartCommand, TextInput)))

        with self.sessions.lock_for(operator_id):
            session = self.sessions.get(operator_id)
            try:
                return self._dispatch(operator_id, session, action)
            except UnauthorizedError:
                # Admin-only action from a regular operator: ignore silently.
                return RenderRequest(view=session.current_view)
            except (EmptyCartError, InvalidSignalError) as e:
                logger.debug("Rejected %r from operator %s in %s: %s", action, operator_id, session.current_view.name, e)
                return RenderRequest(view=session.current_view, alert=str(e))
            except ValidationError as e:
                logger.debug("Invalid input from operator %s in %s", operator_id, session.current_view.name)
                return RenderRequest(view=session.current_view, text=str(e))

    def handle_callback(self, operator_id: int, data: str) -> RenderRequest:
        """Decode a button identifier and handle it as an action."""
        try:
            action = decode_callback(data)
        except InvalidSignalError:
            if not self.policy.is_authorized(operator_id):
                return views.access_denied(as_alert=True)
            session = self.sessions.get(operator_id)
            return RenderRequest(view=session.current_view, alert=views.INVALID_ACTION_ALERT)
        return self.handle_action(operator_id, action)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _dispatch(self, operator_id: int, session: Session, action: Action) -> RenderRequest:
        if isinstance(action, StartCommand):
            session.reset()
            return self._render_welcome(operator_id)
        if isinstance(action, TextInput):
            return self._handle_text(operator_id, session, action.text)
        if isinstance(action, Press):
            return self._handle_signal(operator_id, session, action.signal)
        if isinstance(action, SelectItem):
            return self._select_item(session, action.item)
        if isinstance(action, AdjustItem):
            return self._adjust_item(session, action)
        raise TypeError(f"Unsupported action: {action!r}")

    def _handle_signal(self, operator_id: int, session: Session, signal: Signal) -> RenderRequest:
        if signal in ADMIN_SIGNALS:
            self.policy.require(operator_id, Role.ADMINISTRATOR)

        handler = self._transitions.get((session.current_view, signal))
        if handler is None:
            raise InvalidSignalError(views.INVALID_ACTION_ALERT)
        return handler(operator_id, session)

    def _handle_text(self, operator_id: int, session: Session, text: str) -> RenderRequest:
        if session.current_view is View.GETTING_NAME:
            return self._set_customer_name(operator_id, session, text)
        if session.current_view is View.WAITING_CASH:
            return self._receive_cash(operator_id, session, text)
        return RenderRequest(view=session.current_view, text=views.USE_BUTTONS_TEXT)

    # ------------------------------------------------------------------
    # Order entry
    # ------------------------------------------------------------------

    def _start_order(self, operator_id: int, session: Session) -> RenderRequest:
        session.clear_order()
        session.current_view = View.GETTING_NAME
        return views.ask_customer_name()

    def _new_customer(self, operator_id: int, session: Session) -> RenderRequest:
        session.clear_order()
        session.current_view = View.GETTING_NAME
        return views.ask_customer_name(next_customer=True)

    def _set_customer_name(self, operator_id: int, session: Session, text: str) -> RenderRequest:
        name = text.strip()
        if not MIN_NAME_LENGTH <= len(name) <= MAX_NAME_LENGTH:
            raise ValidationError(views.INVALID_NAME_TEXT)
        session.customer_name = name
        return self._show_menu(operator_id, session)

    def _show_menu(self, operator_id: int, session: Session) -> RenderRequest:
        session.current_view = View.MENU
        session.current_item = None
        return views.menu(session, self.catalog, self.policy.is_admin(operator_id))

    def _select_item(self, session: Session, item: str) -> RenderRequest:
        if session.current_view is not View.MENU or item not in self.catalog:
            raise InvalidSignalError(views.INVALID_ACTION_ALERT)
        session.current_view = View.ITEM_DETAIL
        session.current_item = item
        return views.item_detail(item, session.cart, self.catalog)

    def _adjust_item(self, session: Session, action: AdjustItem) -> RenderRequest:
        if session.current_view is not View.ITEM_DETAIL or action.item != session.current_item:
            raise InvalidSignalError(views.INVALID_ACTION_ALERT)
        session.cart = apply_delta(session.cart, action.item, action.delta)
        return views.item_detail(action.item, session.cart, self.catalog)

    # ------------------------------------------------------------------
    # Checkout and payment
    # ------------------------------------------------------------------

    def _checkout(self, operator_id: int, session: Session) -> RenderRequest:
        if not session.cart:
            raise EmptyCartError(views.EMPTY_CART_ALERT)
        session.total = cart_total(session.cart, self.catalog)
        return self._show_checkout(operator_id, session)

    def _show_checkout(self, operator_id: int, session: Session) -> RenderRequest:
        session.current_view = View.CHECKOUT
        return views.checkout(session, self.catalog)

    def _pay_cash(self, operator_id: int, session: Session) -> RenderRequest:
        session.current_view = View.WAITING_CASH
        return views.cash_prompt(session.total)

    def _pay_qris(self, operator_id: int, session: Session) -> RenderRequest:
        session.current_view = View.QRIS
        return views.qris_prompt(session.total)

    def _receive_cash(self, operator_id: int, session: Session, text: str) -> RenderRequest:
        amount = parse_cash_amount(text.strip())
        if amount is None:
            raise ValidationError(views.invalid_cash_format_text(session.total))
        if amount < session.total:
            raise ValidationError(views.cash_shortfall_text(session.total - amount))
        return self._complete_sale(operator_id, session, PaymentMethod.CASH, cash_received=amount)

    def _confirm_qris(self, operator_id: int, session: Session) -> RenderRequest:
        return self._complete_sale(operator_id, session, PaymentMethod.QRIS)

    def _complete_sale(
        self,
        operator_id: int,
        session: Session,
        method: PaymentMethod,
        cash_received: int | None = None,
    ) -> RenderRequest:
        sale = Sale(
            timestamp=self._clock(),
            operator_id=operator_id,
            customer_name=session.customer_name or "",
            items=session.cart,
            total=session.total,
            payment_method=method,
        )
        self.ledger.append(sale)
        session.current_view = View.POST_TRANSACTION
        return views.receipt(sale, self.catalog, cash_received)

    # ------------------------------------------------------------------
    # Session end and admin
    # ------------------------------------------------------------------

    def _end_session(self, operator_id: int, session: Session) -> RenderRequest:
        session.reset()
        return self._render_welcome(operator_id)

    def _render_welcome(self, operator_id: int) -> RenderRequest:
        return views.welcome(self.policy.is_admin(operator_id))

    def _open_admin(self, operator_id: int, session: Session) -> RenderRequest:
        session.current_view = View.ADMIN_PANEL
        return views.admin_panel()

    def _admin_report(self, operator_id: int, session: Session) -> RenderRequest:
        session.current_view = View.ADMIN_REKAP
        return views.admin_report(self.ledger.report())

    def _admin_reset(self, operator_id: int, session: Session) -> RenderRequest:
        removed = self.ledger.reset_all()
        logger.info("Sales data reset by admin %s (%d sale(s) removed)", operator_id, removed)
        return views.admin_reset_done()
