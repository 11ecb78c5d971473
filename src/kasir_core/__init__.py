"""Kasir Core - conversational point-of-sale state machine.

This package provides the core of a chat-driven cashier: an operator
converses with the controller to record a customer's order, take payment
and review the day's sales.

Module Structure:
    kasir_core.controller: View state machine (KasirController)
    kasir_core.sessions: Per-operator sessions and the View enumeration
    kasir_core.cart: Cart quantities and totals
    kasir_core.catalog: Item prices
    kasir_core.ledger: Completed sales and the sales report
    kasir_core.auth: Operator and administrator classification
    kasir_core.actions: Operator actions and button identifiers
    kasir_core.render: RenderRequest returned to the transport
    kasir_core.config: Environment-driven startup configuration

Quick Start:
    >>> from kasir_core import AuthorizationPolicy, KasirController, StartCommand, TextInput
    >>>
    >>> # In a deployment: config = KasirConfig.from_env(); policy = config.build_policy()
    >>> controller = KasirController(AuthorizationPolicy(operator_ids={1234}))
    >>>
    >>> request = controller.handle_action(1234, StartCommand())
    >>> request = controller.handle_callback(1234, "start_transaction")
    >>> request = controller.handle_action(1234, TextInput("Ani"))
    >>> request.view
    <View.MENU: 'menu'>

The transport owns message delivery, markup and button layout; the core
only returns RenderRequest objects.
"""

__version__ = "0.1.0"

from kasir_core.actions import AdjustItem, Press, SelectItem, Signal, StartCommand, TextInput
from kasir_core.auth import AuthorizationPolicy, Role
from kasir_core.catalog import Catalog
from kasir_core.config import KasirConfig
from kasir_core.controller import KasirController
from kasir_core.exceptions import ConfigError, KasirError
from kasir_core.ledger import PaymentMethod, Sale, SalesLedger, SalesReport
from kasir_core.render import Choice, RenderRequest
from kasir_core.sessions import SessionStore, View

__all__ = [
    "AdjustItem",
    "AuthorizationPolicy",
    "Catalog",
    "Choice",
    "ConfigError",
    "KasirConfig",
    "KasirController",
    "KasirError",
    "PaymentMethod",
    "Press",
    "RenderRequest",
    "Role",
    "Sale",
    "SalesLedger",
    "SalesReport",
    "SelectItem",
    "SessionStore",
    "Signal",
    "StartCommand",
    "TextInput",
    "View",
    "__version__",
]
