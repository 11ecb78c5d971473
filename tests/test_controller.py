"""Tests for the view state machine."""

from datetime import datetime

import pytest

from kasir_core import views
from kasir_core.actions import Action, AdjustItem, Press, SelectItem, Signal, StartCommand, TextInput
from kasir_core.auth import AuthorizationPolicy
from kasir_core.cart import CartDelta
from kasir_core.catalog import Catalog
from kasir_core.controller import KasirController
from kasir_core.ledger import PaymentMethod, SalesLedger
from kasir_core.render import RenderRequest
from kasir_core.sessions import View

ADMIN = 1
OPERATOR = 2
STRANGER = 99
NOW = datetime(2025, 1, 6, 10, 30, 0)


@pytest.fixture
def controller() -> KasirController:
    return KasirController(
        AuthorizationPolicy(admin_ids={ADMIN}, operator_ids={OPERATOR}),
        Catalog({"X": 14000, "A": 1000, "B": 2000}),
        ledger=SalesLedger(),
        clock=lambda: NOW,
    )


def press(controller: KasirController, operator_id: int, signal: Signal) -> RenderRequest:
    return controller.handle_action(operator_id, Press(signal))


def to_menu(controller: KasirController, operator_id: int = OPERATOR, name: str = "Ani") -> None:
    controller.handle_action(operator_id, StartCommand())
    press(controller, operator_id, Signal.START_TRANSACTION)
    controller.handle_action(operator_id, TextInput(name))


def to_checkout(controller: KasirController, operator_id: int = OPERATOR) -> None:
    """Order two X (28000) and go to checkout."""
    to_menu(controller, operator_id)
    controller.handle_action(operator_id, SelectItem("X"))
    controller.handle_action(operator_id, AdjustItem(CartDelta.INCREMENT, "X"))
    controller.handle_action(operator_id, AdjustItem(CartDelta.INCREMENT, "X"))
    press(controller, operator_id, Signal.BACK_TO_MENU)
    press(controller, operator_id, Signal.CHECKOUT)


def test_cash_sale_scenario(controller: KasirController) -> None:
    """Test the full cash flow from start to receipt."""
    request = controller.handle_action(OPERATOR, StartCommand())
    assert request.view is View.WELCOME

    request = press(controller, OPERATOR, Signal.START_TRANSACTION)
    assert request.view is View.GETTING_NAME

    request = controller.handle_action(OPERATOR, TextInput("Ani"))
    assert request.view is View.MENU
    assert "Ani" in request.text

    request = controller.handle_action(OPERATOR, SelectItem("X"))
    assert request.view is View.ITEM_DETAIL

    controller.handle_action(OPERATOR, AdjustItem(CartDelta.INCREMENT, "X"))
    request = controller.handle_action(OPERATOR, AdjustItem(CartDelta.INCREMENT, "X"))
    assert "Jumlah: 2" in request.text
    assert "Subtotal: Rp28.000" in request.text
    assert controller.sessions.get(OPERATOR).cart == {"X": 2}

    request = press(controller, OPERATOR, Signal.BACK_TO_MENU)
    assert request.view is View.MENU

    request = press(controller, OPERATOR, Signal.CHECKOUT)
    assert request.view is View.CHECKOUT
    assert controller.sessions.get(OPERATOR).total == 28000

    request = press(controller, OPERATOR, Signal.PAY_CASH)
    assert request.view is View.WAITING_CASH

    request = controller.handle_action(OPERATOR, TextInput("30000"))
    assert request.view is View.POST_TRANSACTION
    assert "Kembalian: Rp2.000" in request.text
    assert "Tunai: Rp30.000" in request.text
    assert "LUNAS" in request.text
    assert request.follow_up is not None
    assert request.follow_up.actions() == [
        Press(Signal.NEW_CUSTOMER),
        Press(Signal.CONTINUE_SAME_CUSTOMER),
        Press(Signal.END_SESSION),
    ]
    assert controller.sessions.get(OPERATOR).current_view is View.POST_TRANSACTION

    sales = controller.ledger.sales()
    assert len(sales) == 1
    assert sales[0].total == 28000
    assert dict(sales[0].items) == {"X": 2}
    assert sales[0].customer_name == "Ani"
    assert sales[0].operator_id == OPERATOR
    assert sales[0].payment_method is PaymentMethod.CASH
    assert sales[0].timestamp == NOW


def test_insufficient_cash_rejected(controller: KasirController) -> None:
    """Test that cash below the total is rejected with the shortfall."""
    to_checkout(controller)
    press(controller, OPERATOR, Signal.PAY_CASH)

    request = controller.handle_action(OPERATOR, TextInput("20000"))

    assert request.view is View.WAITING_CASH
    assert "Rp8.000" in request.text
    assert controller.sessions.get(OPERATOR).current_view is View.WAITING_CASH
    assert len(controller.ledger) == 0


def test_exact_cash_accepted(controller: KasirController) -> None:
    """Test that paying exactly the total gives zero change."""
    to_checkout(controller)
    press(controller, OPERATOR, Signal.PAY_CASH)

    request = controller.handle_action(OPERATOR, TextInput("Rp 28.000"))

    assert request.view is View.POST_TRANSACTION
    assert "Kembalian: Rp0" in request.text
    assert len(controller.ledger) == 1


def test_non_numeric_cash_rejected(controller: KasirController) -> None:
    """Test that unparseable cash input is a format error."""
    to_checkout(controller)
    press(controller, OPERATOR, Signal.PAY_CASH)

    request = controller.handle_action(OPERATOR, TextInput("tiga puluh ribu"))

    assert request.view is View.WAITING_CASH
    assert "Format tidak valid" in request.text
    assert "Rp28.000" in request.text
    assert len(controller.ledger) == 0


def test_qris_sale(controller: KasirController) -> None:
    """Test confirming a QRIS payment records the sale."""
    to_checkout(controller)
    request = press(controller, OPERATOR, Signal.PAY_QRIS)
    assert request.view is View.QRIS

    request = press(controller, OPERATOR, Signal.QRIS_DONE)

    assert request.view is View.POST_TRANSACTION
    assert "Kembalian" not in request.text
    assert "QRIS" in request.text
    sales = controller.ledger.sales()
    assert len(sales) == 1
    assert sales[0].payment_method is PaymentMethod.QRIS
    assert sales[0].total == 28000


def test_qris_cancel_returns_to_checkout(controller: KasirController) -> None:
    """Test cancelling QRIS renders the checkout view directly."""
    to_checkout(controller)
    press(controller, OPERATOR, Signal.PAY_QRIS)

    request = press(controller, OPERATOR, Signal.BACK_TO_CHECKOUT)

    assert request.view is View.CHECKOUT
    assert "Rp28.000" in request.text
    assert Press(Signal.PAY_CASH) in request.actions()
    assert len(controller.ledger) == 0


def test_checkout_empty_cart_rejected(controller: KasirController) -> None:
    """Test checkout with an empty cart stays on the menu."""
    to_menu(controller)

    request = press(controller, OPERATOR, Signal.CHECKOUT)

    assert request.view is View.MENU
    assert request.alert == views.EMPTY_CART_ALERT
    assert request.text is None
    assert controller.sessions.get(OPERATOR).current_view is View.MENU


def test_checkout_after_removing_all_items_rejected(controller: KasirController) -> None:
    """Test that the cart is checked at the moment of checkout."""
    to_menu(controller)
    controller.handle_action(OPERATOR, SelectItem("A"))
    controller.handle_action(OPERATOR, AdjustItem(CartDelta.INCREMENT, "A"))
    controller.handle_action(OPERATOR, AdjustItem(CartDelta.DECREMENT, "A"))
    press(controller, OPERATOR, Signal.BACK_TO_MENU)

    request = press(controller, OPERATOR, Signal.CHECKOUT)

    assert request.alert == views.EMPTY_CART_ALERT
    assert controller.sessions.get(OPERATOR).cart == {}


def test_decrement_absent_item_is_noop(controller: KasirController) -> None:
    """Test decrementing an item with quantity zero."""
    to_menu(controller)
    controller.handle_action(OPERATOR, SelectItem("A"))

    request = controller.handle_action(OPERATOR, AdjustItem(CartDelta.DECREMENT, "A"))

    assert request.view is View.ITEM_DETAIL
    assert "Jumlah: 0" in request.text
    assert controller.sessions.get(OPERATOR).cart == {}


@pytest.mark.parametrize("name", ["A", "", "   ", "x" * 51])
def test_invalid_customer_name(controller: KasirController, name: str) -> None:
    """Test that names outside 2-50 characters are re-prompted."""
    controller.handle_action(OPERATOR, StartCommand())
    press(controller, OPERATOR, Signal.START_TRANSACTION)

    request = controller.handle_action(OPERATOR, TextInput(name))

    assert request.view is View.GETTING_NAME
    assert request.text == views.INVALID_NAME_TEXT
    assert controller.sessions.get(OPERATOR).customer_name is None


def test_customer_name_trimmed(controller: KasirController) -> None:
    """Test that boundary-length names are accepted after trimming."""
    to_menu(controller, name="  Bo  ")
    assert controller.sessions.get(OPERATOR).customer_name == "Bo"

    controller.handle_action(OPERATOR, StartCommand())
    press(controller, OPERATOR, Signal.START_TRANSACTION)
    controller.handle_action(OPERATOR, TextInput("y" * 50))
    assert controller.sessions.get(OPERATOR).current_view is View.MENU


def test_text_outside_input_views_gets_hint(controller: KasirController) -> None:
    """Test free text in a button-driven view."""
    to_menu(controller)

    request = controller.handle_action(OPERATOR, TextInput("hello"))

    assert request.view is View.MENU
    assert request.text == views.USE_BUTTONS_TEXT


def test_signal_illegal_in_current_view(controller: KasirController) -> None:
    """Test that buttons not valid in the current view are rejected without change."""
    controller.handle_action(OPERATOR, StartCommand())

    request = press(controller, OPERATOR, Signal.QRIS_DONE)

    assert request.view is View.WELCOME
    assert request.alert == views.INVALID_ACTION_ALERT
    assert len(controller.ledger) == 0


def test_select_item_only_from_menu(controller: KasirController) -> None:
    """Test that item buttons are rejected outside the menu."""
    to_checkout(controller)

    request = controller.handle_action(OPERATOR, SelectItem("A"))

    assert request.view is View.CHECKOUT
    assert request.alert == views.INVALID_ACTION_ALERT


def test_select_unknown_item_rejected(controller: KasirController) -> None:
    """Test that items outside the catalog cannot be selected."""
    to_menu(controller)

    request = controller.handle_action(OPERATOR, SelectItem("Ghost"))

    assert request.view is View.MENU
    assert request.alert == views.INVALID_ACTION_ALERT


def test_adjust_other_item_rejected(controller: KasirController) -> None:
    """Test that a stale +/- button for another item is ignored."""
    to_menu(controller)
    controller.handle_action(OPERATOR, SelectItem("A"))

    request = controller.handle_action(OPERATOR, AdjustItem(CartDelta.INCREMENT, "B"))

    assert request.alert == views.INVALID_ACTION_ALERT
    assert controller.sessions.get(OPERATOR).cart == {}


def test_checkout_back_to_menu_keeps_cart(controller: KasirController) -> None:
    """Test returning from checkout to the menu."""
    to_checkout(controller)

    request = press(controller, OPERATOR, Signal.BACK_TO_MENU)

    assert request.view is View.MENU
    assert controller.sessions.get(OPERATOR).cart == {"X": 2}


def test_new_customer_clears_order(controller: KasirController) -> None:
    """Test the new-customer transition after a sale."""
    to_checkout(controller)
    press(controller, OPERATOR, Signal.PAY_QRIS)
    press(controller, OPERATOR, Signal.QRIS_DONE)

    request = press(controller, OPERATOR, Signal.NEW_CUSTOMER)

    session = controller.sessions.get(OPERATOR)
    assert request.view is View.GETTING_NAME
    assert "berikutnya" in request.text
    assert session.customer_name is None
    assert session.cart == {}
    assert session.total == 0


def test_continue_same_customer(controller: KasirController) -> None:
    """Test continuing with the same customer goes back to the menu."""
    to_checkout(controller)
    press(controller, OPERATOR, Signal.PAY_QRIS)
    press(controller, OPERATOR, Signal.QRIS_DONE)

    request = press(controller, OPERATOR, Signal.CONTINUE_SAME_CUSTOMER)

    assert request.view is View.MENU
    assert controller.sessions.get(OPERATOR).customer_name == "Ani"


def test_end_session_full_reset(controller: KasirController) -> None:
    """Test ending the session returns to WELCOME with a blank order."""
    to_checkout(controller)
    press(controller, OPERATOR, Signal.PAY_QRIS)
    press(controller, OPERATOR, Signal.QRIS_DONE)

    request = press(controller, OPERATOR, Signal.END_SESSION)

    session = controller.sessions.get(OPERATOR)
    assert request.view is View.WELCOME
    assert session.current_view is View.WELCOME
    assert session.cart == {}
    assert session.customer_name is None
    assert len(controller.ledger) == 1


def test_start_command_resets_any_view(controller: KasirController) -> None:
    """Test /start from the middle of an order."""
    to_checkout(controller)

    request = controller.handle_action(OPERATOR, StartCommand())

    assert request.view is View.WELCOME
    assert controller.sessions.get(OPERATOR).cart == {}


def test_welcome_admin_choice_only_for_admin(controller: KasirController) -> None:
    """Test that only administrators are offered the admin panel."""
    operator_view = controller.handle_action(OPERATOR, StartCommand())
    admin_view = controller.handle_action(ADMIN, StartCommand())

    assert Press(Signal.OPEN_ADMIN) not in operator_view.actions()
    assert Press(Signal.OPEN_ADMIN) in admin_view.actions()


def test_admin_report_and_reset(controller: KasirController) -> None:
    """Test the admin panel flow."""
    to_checkout(controller)
    press(controller, OPERATOR, Signal.PAY_CASH)
    controller.handle_action(OPERATOR, TextInput("50000"))

    controller.handle_action(ADMIN, StartCommand())
    request = press(controller, ADMIN, Signal.OPEN_ADMIN)
    assert request.view is View.ADMIN_PANEL

    request = press(controller, ADMIN, Signal.ADMIN_REPORT)
    assert request.view is View.ADMIN_REKAP
    assert "• X x2" in request.text
    assert "Total Transaksi: 1" in request.text
    assert "Cash: Rp28.000" in request.text
    assert "QRIS: Rp0" in request.text
    assert "Total Omzet: Rp28.000" in request.text

    request = press(controller, ADMIN, Signal.OPEN_ADMIN)
    assert request.view is View.ADMIN_PANEL

    request = press(controller, ADMIN, Signal.ADMIN_RESET)
    assert request.view is View.ADMIN_PANEL
    assert len(controller.ledger) == 0

    press(controller, ADMIN, Signal.ADMIN_REPORT)
    assert controller.ledger.report().is_empty

    request = press(controller, ADMIN, Signal.OPEN_ADMIN)
    request = press(controller, ADMIN, Signal.END_SESSION)
    assert request.view is View.WELCOME


def test_admin_report_empty(controller: KasirController) -> None:
    """Test the report text with no sales."""
    controller.handle_action(ADMIN, StartCommand())
    press(controller, ADMIN, Signal.OPEN_ADMIN)

    request = press(controller, ADMIN, Signal.ADMIN_REPORT)

    assert "Belum ada transaksi" in request.text


def test_admin_panel_from_menu(controller: KasirController) -> None:
    """Test that admins can open the panel from the menu."""
    to_menu(controller, ADMIN)
    request = press(controller, ADMIN, Signal.OPEN_ADMIN)
    assert request.view is View.ADMIN_PANEL


def test_admin_actions_ignored_for_operator(controller: KasirController) -> None:
    """Test that admin-only buttons from a regular operator are silently ignored."""
    to_checkout(controller)
    press(controller, OPERATOR, Signal.PAY_QRIS)
    press(controller, OPERATOR, Signal.QRIS_DONE)
    press(controller, OPERATOR, Signal.END_SESSION)

    for signal in (Signal.OPEN_ADMIN, Signal.ADMIN_REPORT, Signal.ADMIN_RESET):
        request = press(controller, OPERATOR, signal)
        assert request.is_empty
        assert request.view is View.WELCOME

    assert controller.sessions.get(OPERATOR).current_view is View.WELCOME
    assert len(controller.ledger) == 1


@pytest.mark.parametrize(
    "action",
    [
        StartCommand(),
        TextInput("Ani"),
        Press(Signal.START_TRANSACTION),
        Press(Signal.ADMIN_RESET),
        SelectItem("X"),
        AdjustItem(CartDelta.INCREMENT, "X"),
    ],
)
def test_unauthorized_operator_changes_nothing(controller: KasirController, action: Action) -> None:
    """Test that strangers are denied and leave no trace."""
    to_checkout(controller)
    press(controller, OPERATOR, Signal.PAY_QRIS)
    press(controller, OPERATOR, Signal.QRIS_DONE)

    request = controller.handle_action(STRANGER, action)

    assert request.view is None
    assert views.ACCESS_DENIED_TEXT in (request.text, request.alert)
    assert STRANGER not in controller.sessions
    assert len(controller.ledger) == 1
    assert controller.sessions.get(OPERATOR).current_view is View.POST_TRANSACTION


def test_handle_callback_decodes(controller: KasirController) -> None:
    """Test the string-based entry point."""
    controller.handle_action(OPERATOR, StartCommand())
    request = controller.handle_callback(OPERATOR, "start_transaction")
    assert request.view is View.GETTING_NAME

    controller.handle_action(OPERATOR, TextInput("Ani"))
    request = controller.handle_callback(OPERATOR, "item_X")
    assert request.view is View.ITEM_DETAIL
    controller.handle_callback(OPERATOR, "inc_X")
    assert controller.sessions.get(OPERATOR).cart == {"X": 1}


def test_handle_callback_unknown_data(controller: KasirController) -> None:
    """Test undecodable callback data."""
    controller.handle_action(OPERATOR, StartCommand())

    request = controller.handle_callback(OPERATOR, "garbage")
    assert request.alert == views.INVALID_ACTION_ALERT
    assert request.view is View.WELCOME

    request = controller.handle_callback(STRANGER, "garbage")
    assert request.alert == views.ACCESS_DENIED_TEXT
    assert STRANGER not in controller.sessions


def test_sessions_are_per_operator(controller: KasirController) -> None:
    """Test two operators working at once do not interfere."""
    to_menu(controller, OPERATOR, "Ani")
    to_menu(controller, ADMIN, "Budi")
    controller.handle_action(OPERATOR, SelectItem("A"))
    controller.handle_action(OPERATOR, AdjustItem(CartDelta.INCREMENT, "A"))

    assert controller.sessions.get(OPERATOR).cart == {"A": 1}
    assert controller.sessions.get(ADMIN).cart == {}
    assert controller.sessions.get(ADMIN).customer_name == "Budi"


def test_total_snapshot_used_for_payment(controller: KasirController) -> None:
    """Test that the new ledger entry's total equals the checkout snapshot."""
    to_checkout(controller)
    snapshot = controller.sessions.get(OPERATOR).total
    press(controller, OPERATOR, Signal.PAY_CASH)
    controller.handle_action(OPERATOR, TextInput("100.000"))

    assert controller.ledger.sales()[-1].total == snapshot == 28000
