"""Example: Record two sales and print the daily report

This example drives the controller directly, the way a chat transport
would, then reads the aggregated report from the ledger.

Prerequisites:
- None; operator ids are set up inline (use KasirConfig.from_env() in a real deployment)
"""

from kasir_core import AuthorizationPolicy, KasirController, StartCommand, TextInput
from kasir_core.formatters import format_render_request

ADMIN_ID = 1001
CASHIER_ID = 2002

controller = KasirController(AuthorizationPolicy(admin_ids={ADMIN_ID}, operator_ids={CASHIER_ID}))

# Sale 1: two Matcha OG paid in cash
controller.handle_action(CASHIER_ID, StartCommand())
controller.handle_callback(CASHIER_ID, "start_transaction")
controller.handle_action(CASHIER_ID, TextInput("Ani"))
controller.handle_callback(CASHIER_ID, "item_🍵 Matcha OG")
controller.handle_callback(CASHIER_ID, "inc_🍵 Matcha OG")
controller.handle_callback(CASHIER_ID, "inc_🍵 Matcha OG")
controller.handle_callback(CASHIER_ID, "back_to_menu")
controller.handle_callback(CASHIER_ID, "checkout")
controller.handle_callback(CASHIER_ID, "pay_cash")
receipt = controller.handle_action(CASHIER_ID, TextInput("Rp30.000"))

print("Receipt:")
print(format_render_request(receipt))

# Sale 2: one Honey Matcha paid by QRIS, same cashier, next customer
controller.handle_callback(CASHIER_ID, "new_customer")
controller.handle_action(CASHIER_ID, TextInput("Budi"))
controller.handle_callback(CASHIER_ID, "item_🍯 Honey Matcha")
controller.handle_callback(CASHIER_ID, "inc_🍯 Honey Matcha")
controller.handle_callback(CASHIER_ID, "back_to_menu")
controller.handle_callback(CASHIER_ID, "checkout")
controller.handle_callback(CASHIER_ID, "pay_qris")
controller.handle_callback(CASHIER_ID, "qris_done")

# Admin reviews the day
controller.handle_action(ADMIN_ID, StartCommand())
controller.handle_callback(ADMIN_ID, "admin_panel")
report_view = controller.handle_callback(ADMIN_ID, "adm_rekap")

print("\nReport:")
print(format_render_request(report_view))

print("\nLedger as DataFrame:")
print(controller.ledger.to_frame())
