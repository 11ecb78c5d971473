"""Message templates, one function per view.

Each function composes the text of a view and the choices it offers and
returns a RenderRequest. Nothing here mutates state.
"""

from __future__ import annotations

from collections.abc import Mapping

from kasir_core.actions import AdjustItem, Press, SelectItem, Signal
from kasir_core.cart import CartDelta, cart_total, summary_lines
from kasir_core.catalog import Catalog
from kasir_core.ledger import PaymentMethod, Sale, SalesReport
from kasir_core.render import Choice, RenderRequest
from kasir_core.sessions import Session, View
from kasir_core.utils import format_currency

RULE = "=" * 25

ACCESS_DENIED_TEXT = "🚫 Akses Ditolak. Anda tidak terdaftar."
USE_BUTTONS_TEXT = "ℹ️ Silakan gunakan tombol yang tersedia atau /start untuk memulai ulang."
INVALID_NAME_TEXT = "❌ Nama tidak valid (min 2, maks 50 karakter). Coba lagi:"
EMPTY_CART_ALERT = "🛒 Keranjang kosong!"
INVALID_ACTION_ALERT = "⚠️ Tombol tidak berlaku di tampilan ini."

_ADMIN_CHOICE = Choice("🔧 Admin Panel", Press(Signal.OPEN_ADMIN))
_BACK_TO_MENU_CHOICE = Choice("⬅️ Kembali ke Menu", Press(Signal.BACK_TO_MENU))
_BACK_TO_ADMIN_CHOICE = Choice("🔙 Kembali", Press(Signal.OPEN_ADMIN))


def access_denied(as_alert: bool = False) -> RenderRequest:
    if as_alert:
        return RenderRequest(view=None, alert=ACCESS_DENIED_TEXT)
    return RenderRequest(view=None, text=ACCESS_DENIED_TEXT)


def welcome(is_admin: bool) -> RenderRequest:
    choices = [Choice("✅ Mulai Sesi Transaksi", Press(Signal.START_TRANSACTION))]
    if is_admin:
        choices.append(_ADMIN_CHOICE)
    return RenderRequest(
        view=View.WELCOME,
        text="🍵 Selamat Datang di Matcha Kasir Bot!\n\nSilakan mulai sesi untuk mencatat transaksi.",
        choices=tuple(choices),
    )


def ask_customer_name(next_customer: bool = False) -> RenderRequest:
    who = "nama pelanggan berikutnya" if next_customer else "nama pelanggan"
    return RenderRequest(view=View.GETTING_NAME, text=f"👤 Silakan masukkan {who}:")


def menu(session: Session, catalog: Catalog, is_admin: bool) -> RenderRequest:
    """Main menu: current customer, cart contents, running total, item buttons."""
    cart_summary = "\n".join(summary_lines(session.cart, catalog))
    text = (
        f"👤 Pelanggan: {session.customer_name}\n\n"
        f"🛒 Keranjang Saat Ini:\n{cart_summary}\n\n"
        f"💰 Total Sementara: {format_currency(cart_total(session.cart, catalog))}\n\n"
        "Silakan pilih item:"
    )
    choices = [Choice(item, SelectItem(item)) for item in catalog.items()]
    choices.append(Choice("🛒 Checkout", Press(Signal.CHECKOUT)))
    if is_admin:
        choices.append(_ADMIN_CHOICE)
    return RenderRequest(view=View.MENU, text=text, choices=tuple(choices))


def item_detail(item: str, cart: Mapping[str, int], catalog: Catalog) -> RenderRequest:
    price = catalog.price_of(item)
    qty = cart.get(item, 0)
    text = (
        f"🛍️ {item}\n\n"
        f"💰 Harga: {format_currency(price)}\n"
        f"🔢 Jumlah: {qty}\n"
        f"💵 Subtotal: {format_currency(price * qty)}"
    )
    return RenderRequest(
        view=View.ITEM_DETAIL,
        text=text,
        choices=(
            Choice("➖", AdjustItem(CartDelta.DECREMENT, item)),
            Choice("➕", AdjustItem(CartDelta.INCREMENT, item)),
            _BACK_TO_MENU_CHOICE,
        ),
    )


def checkout(session: Session, catalog: Catalog) -> RenderRequest:
    """Order summary with payment method choices; uses the captured total."""
    cart_summary = "\n".join(summary_lines(session.cart, catalog))
    text = (
        "🧾 Ringkasan Pesanan\n\n"
        f"👤 Pelanggan: {session.customer_name}\n\n"
        f"🛍️ Items:\n{cart_summary}\n\n"
        f"💰 Total: {format_currency(session.total)}\n\n"
        "Pilih metode pembayaran:"
    )
    return RenderRequest(
        view=View.CHECKOUT,
        text=text,
        choices=(
            Choice("💵 Cash", Press(Signal.PAY_CASH)),
            Choice("📱 QRIS", Press(Signal.PAY_QRIS)),
            _BACK_TO_MENU_CHOICE,
        ),
    )


def cash_prompt(total: int) -> RenderRequest:
    return RenderRequest(
        view=View.WAITING_CASH,
        text=f"💵 Pembayaran Tunai\n\n💰 Total: {format_currency(total)}\n\nKetik nominal uang yang diterima:",
    )


def invalid_cash_format_text(total: int) -> str:
    return f"❌ Format tidak valid. Masukkan angka saja.\nTotal: {format_currency(total)}"


def cash_shortfall_text(shortfall: int) -> str:
    return f"💰 Uang kurang. Dibutuhkan {format_currency(shortfall)} lagi."


def qris_prompt(total: int) -> RenderRequest:
    return RenderRequest(
        view=View.QRIS,
        text=f"📱 Pembayaran QRIS\n\n💰 Total: {format_currency(total)}\n\n🔲 Silakan scan QRIS dan konfirmasi pembayaran.",
        choices=(
            Choice("✅ Pembayaran Selesai", Press(Signal.QRIS_DONE)),
            Choice("❌ Batal", Press(Signal.BACK_TO_CHECKOUT)),
        ),
    )


def receipt(sale: Sale, catalog: Catalog, cash_received: int | None = None) -> RenderRequest:
    """Payment receipt followed by the next-step choices."""
    cart_summary = "\n".join(summary_lines(sale.items, catalog))
    text = (
        f"🧾 STRUK PEMBAYARAN\n{RULE}\n"
        f"👤 Pelanggan: {sale.customer_name}\n"
        f"📅 Waktu: {sale.timestamp.strftime('%d/%m/%Y, %H.%M.%S')}\n"
        f"💳 Metode: {sale.payment_method.value}\n\n"
        f"🛍️ Pesanan:\n{cart_summary}\n\n"
        f"💰 Total: {format_currency(sale.total)}"
    )
    if sale.payment_method is PaymentMethod.CASH and cash_received is not None:
        change = cash_received - sale.total
        text += f"\n💵 Tunai: {format_currency(cash_received)}\n💸 Kembalian: {format_currency(change)}"
    text += f"\n\n✅ LUNAS\n{RULE}"

    return RenderRequest(view=View.POST_TRANSACTION, text=text, follow_up=post_transaction())


def post_transaction() -> RenderRequest:
    return RenderRequest(
        view=View.POST_TRANSACTION,
        text="Pilih langkah selanjutnya:",
        choices=(
            Choice("👤 Pelanggan Baru", Press(Signal.NEW_CUSTOMER)),
            Choice("➕ Tambah Item (Pelanggan Sama)", Press(Signal.CONTINUE_SAME_CUSTOMER)),
            Choice("🚪 Selesai Sesi (Tutup Toko)", Press(Signal.END_SESSION)),
        ),
    )


def admin_panel() -> RenderRequest:
    return RenderRequest(
        view=View.ADMIN_PANEL,
        text="🔧 Panel Admin",
        choices=(
            Choice("📊 Rekap Penjualan", Press(Signal.ADMIN_REPORT)),
            Choice("🗑️ Reset Data Harian", Press(Signal.ADMIN_RESET)),
            Choice("🔙 Halaman Utama", Press(Signal.END_SESSION)),
        ),
    )


def admin_report(report: SalesReport) -> RenderRequest:
    """Daily sales summary; an empty ledger gets a fixed notice."""
    if report.is_empty:
        text = "📊 Rekap Penjualan\n\nBelum ada transaksi hari ini."
    else:
        item_lines = "\n".join(f"• {item} x{qty}" for item, qty in report.item_quantities.items())
        text = (
            "📊 Rekap Penjualan Hari Ini\n\n"
            f"Penjualan Item:\n{item_lines}\n\n"
            f"📈 Total Transaksi: {report.transaction_count}\n"
            f"💵 Cash: {format_currency(report.cash_total)}\n"
            f"📱 QRIS: {format_currency(report.qris_total)}\n"
            f"💰 Total Omzet: {format_currency(report.grand_total)}"
        )
    return RenderRequest(view=View.ADMIN_REKAP, text=text, choices=(_BACK_TO_ADMIN_CHOICE,))


def admin_reset_done() -> RenderRequest:
    return RenderRequest(
        view=View.ADMIN_PANEL,
        text="🗑️ Data Penjualan Harian Berhasil Direset",
        choices=(_BACK_TO_ADMIN_CHOICE,),
    )
