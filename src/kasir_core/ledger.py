"""Sales ledger: completed sales for the lifetime of the process.

The ledger is append-only. Entries are never edited or removed one by one;
an administrator can only clear the whole ledger. ``report`` aggregates the
entries into per-item quantities and per-payment-method subtotals.

Example:
    >>> ledger = SalesLedger()
    >>> ledger.append(Sale(datetime(2025, 1, 1), 1, "Ani", {"Tea": 2}, 18000, PaymentMethod.CASH))
    >>> ledger.report().grand_total
    18000
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType

import pandas as pd

logger = logging.getLogger(__name__)

# Column layout of SalesLedger.to_frame(): one row per sale x item.
FRAME_COLUMNS = [
    "sale_id",
    "timestamp",
    "operator_id",
    "customer_name",
    "payment_method",
    "item",
    "quantity",
    "total",
]


class PaymentMethod(Enum):
    """How a sale was settled."""

    CASH = "Cash"
    QRIS = "QRIS"


@dataclass(frozen=True)
class Sale:
    """One completed sale.

    Attributes:
        timestamp: When the sale was recorded.
        operator_id: Operator who recorded it.
        customer_name: Customer the order was for.
        items: Item name to quantity, frozen at the moment of sale.
        total: Amount charged, captured at checkout.
        payment_method: Cash or QRIS.
    """

    timestamp: datetime
    operator_id: int
    customer_name: str
    items: Mapping[str, int] = field(hash=False)
    total: int
    payment_method: PaymentMethod

    def __post_init__(self) -> None:
        # Detach from the caller's cart so later cart edits cannot leak in.
        object.__setattr__(self, "items", MappingProxyType(dict(self.items)))


@dataclass(frozen=True)
class SalesReport:
    """Aggregate view of the ledger.

    Attributes:
        transaction_count: Number of sales.
        item_quantities: Item name to total quantity, sorted by item name.
        cash_total: Sum of totals paid in cash.
        qris_total: Sum of totals paid by QRIS.
        grand_total: Sum of all totals (cash_total + qris_total).
    """

    transaction_count: int = 0
    item_quantities: dict[str, int] = field(default_factory=dict)
    cash_total: int = 0
    qris_total: int = 0
    grand_total: int = 0

    @property
    def is_empty(self) -> bool:
        return self.transaction_count == 0


class SalesLedger:
    """Process-wide, thread-safe list of completed sales.

    ``append``, ``reset_all`` and the snapshot taken by ``to_frame`` and
    ``report`` are mutually exclusive, so a report always reflects a
    consistent set of entries.
    """

    def __init__(self) -> None:
        self._sales: list[Sale] = []
        self._lock = threading.Lock()

    def append(self, sale: Sale) -> None:
        """Record a sale. Identical sales are allowed and kept separately."""
        with self._lock:
            self._sales.append(sale)
            count = len(self._sales)
        logger.info(
            "Sale recorded: %s - %d (%s), %d sale(s) in ledger",
            sale.customer_name,
            sale.total,
            sale.payment_method.value,
            count,
        )

    def reset_all(self) -> int:
        """Remove every entry and return how many were removed."""
        with self._lock:
            removed = len(self._sales)
            self._sales.clear()
        return removed

    def sales(self) -> list[Sale]:
        """Return a snapshot of the entries in append order."""
        with self._lock:
            return list(self._sales)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sales)

    def to_frame(self) -> pd.DataFrame:
        """Return the ledger as a DataFrame with one row per sale x item.

        ``total`` repeats the sale total on each of its rows; deduplicate on
        ``sale_id`` before summing it.
        """
        rows = []
        for sale_id, sale in enumerate(self.sales()):
            for item, qty in sale.items.items():
                rows.append(
                    {
                        "sale_id": sale_id,
                        "timestamp": sale.timestamp,
                        "operator_id": sale.operator_id,
                        "customer_name": sale.customer_name,
                        "payment_method": sale.payment_method.value,
                        "item": item,
                        "quantity": qty,
                        "total": sale.total,
                    }
                )
        return pd.DataFrame(rows, columns=FRAME_COLUMNS)

    def report(self) -> SalesReport:
        """Aggregate all current entries.

        Returns:
            SalesReport; an empty ledger gives a report with
            ``is_empty == True`` and all amounts zero.
        """
        sales = self.sales()
        if not sales:
            return SalesReport()

        totals = pd.DataFrame(
            {
                "payment_method": [s.payment_method.value for s in sales],
                "total": [s.total for s in sales],
            }
        )
        by_method = totals.groupby("payment_method")["total"].sum()

        item_rows = [(item, qty) for s in sales for item, qty in s.items.items()]
        if item_rows:
            items_df = pd.DataFrame(item_rows, columns=["item", "quantity"])
            by_item = items_df.groupby("item", sort=True)["quantity"].sum()
            item_quantities = {str(k): int(v) for k, v in by_item.items()}
        else:
            item_quantities = {}

        return SalesReport(
            transaction_count=len(sales),
            item_quantities=item_quantities,
            cash_total=int(by_method.get(PaymentMethod.CASH.value, 0)),
            qris_total=int(by_method.get(PaymentMethod.QRIS.value, 0)),
            grand_total=int(totals["total"].sum()),
        )
