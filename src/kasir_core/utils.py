"""Shared parsing and formatting helpers.

This module provides small, pure functions used across the core:

- Cash input parsing: tolerant of thousands separators and a currency prefix
- Currency formatting: Indonesian Rupiah display
- Identity list parsing: comma-separated operator ids from the environment

Examples:
    >>> parse_cash_amount("Rp 30.000")
    30000
    >>> format_currency(1250000)
    'Rp1.250.000'
    >>> sorted(parse_id_set("12, 34,,x"))
    [12, 34]

"""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

CURRENCY_PREFIX = "rp"

# Amounts of ten digits or more are rejected as typos.
MAX_CASH_DIGITS = 9

_WHITESPACE_RE = re.compile(r"\s")


def parse_cash_amount(text: str) -> int | None:
    """Parse a cash amount typed by the operator.

    Thousands separators (``.`` and ``,``) and all whitespace are removed,
    then a leading case-insensitive ``Rp`` prefix is stripped. What remains
    must be ASCII digits only and at most nine characters long.

    No decimal interpretation is applied: Rupiah has no fractional unit, so
    ``"30,000"`` and ``"30.000"`` both mean thirty thousand.

    Args:
        text: Raw text from the operator.

    Returns:
        The parsed amount, or None if the text is not a valid amount.

    Examples:
        >>> parse_cash_amount("30000")
        30000
        >>> parse_cash_amount("rp30,000")
        30000
        >>> parse_cash_amount("tiga puluh") is None
        True
    """
    cleaned = _WHITESPACE_RE.sub("", text.replace(".", "").replace(",", "")).lower()
    if cleaned.startswith(CURRENCY_PREFIX):
        cleaned = cleaned[len(CURRENCY_PREFIX):]

    if not cleaned or not (cleaned.isascii() and cleaned.isdigit()):
        return None
    if len(cleaned) > MAX_CASH_DIGITS:
        return None
    return int(cleaned)


def format_currency(amount: int) -> str:
    """Format an amount as Indonesian Rupiah, e.g. ``Rp14.000``."""
    sign = "-" if amount < 0 else ""
    return f"{sign}Rp{abs(amount):,}".replace(",", ".")


def parse_id_set(raw: str | None) -> frozenset[int]:
    """Parse a comma-separated list of operator ids.

    Blank entries are skipped. Entries that are not integers are skipped
    with a warning so one typo does not lock every operator out.

    Args:
        raw: Value such as ``"1234, 5678"``, or None.

    Returns:
        Frozen set of parsed ids (empty if raw is None or blank).
    """
    if not raw:
        return frozenset()

    ids: set[int] = set()
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            ids.add(int(part))
        except ValueError:
            logger.warning("Ignoring non-numeric operator id %r", part)
    return frozenset(ids)
