"""Catalog of sellable items and their unit prices.

The catalog is fixed at process start and read-only afterwards. It is
loaded either from the built-in menu or from a JSON file mapping item
names to integer prices in Rupiah.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping
from pathlib import Path
from types import MappingProxyType

from kasir_core.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_MENU: Mapping[str, int] = MappingProxyType(
    {
        "🍵 Matcha OG": 14000,
        "🍓 Strawberry Matcha": 16000,
        "🍪 Matcha Cookies": 17000,
        "🍫 Choco Matcha": 16000,
        "☁️ Matcha Cloud": 15000,
        "🍯 Honey Matcha": 15000,
        "🥥 Coconut Matcha": 15000,
        "🍊 Orange Matcha": 14000,
    }
)


class Catalog:
    """Immutable mapping from item name to unit price.

    Item order is preserved as given, which is the order the menu is shown in.

    Example:
        >>> catalog = Catalog({"Latte": 18000, "Tea": 9000})
        >>> catalog.price_of("Latte")
        18000
        >>> catalog.price_of("Unknown")
        0
        >>> catalog.items()
        ['Latte', 'Tea']

    """

    def __init__(self, prices: Mapping[str, int] | None = None) -> None:
        """Initialize the catalog.

        Args:
            prices: Item name to unit price. Defaults to DEFAULT_MENU.

        Raises:
            ConfigError: If the catalog is empty or a price is not a
                positive integer.

        """
        prices = DEFAULT_MENU if prices is None else prices
        if not prices:
            raise ConfigError("Catalog must contain at least one item")

        for name, price in prices.items():
            if not isinstance(name, str) or not name:
                raise ConfigError(f"Invalid item name in catalog: {name!r}")
            # bool is an int subclass; reject it explicitly
            if isinstance(price, bool) or not isinstance(price, int) or price <= 0:
                raise ConfigError(f"Price for {name!r} must be a positive integer, got {price!r}")

        self._prices: Mapping[str, int] = MappingProxyType(dict(prices))

    @classmethod
    def from_json(cls, path: str | Path) -> Catalog:
        """Load a catalog from a JSON object of ``{"item": price}``.

        Args:
            path: Path to the catalog JSON file.

        Returns:
            Catalog instance.

        Raises:
            ConfigError: If the file is missing, malformed, or has invalid prices.

        """
        if isinstance(path, str):
            path = Path(path)

        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise ConfigError(f"Catalog file not found: {path}") from e
        except json.JSONDecodeError as e:
            raise ConfigError(f"Catalog file {path} is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Catalog file {path} must contain a JSON object")

        logger.info("Loaded %d catalog items from %s", len(data), path)
        return cls(data)

    def price_of(self, item: str) -> int:
        """Return the unit price of an item, or 0 if it is not in the catalog."""
        return self._prices.get(item, 0)

    def items(self) -> list[str]:
        """List item names in menu order."""
        return list(self._prices)

    def __contains__(self, item: object) -> bool:
        return item in self._prices

    def __iter__(self) -> Iterator[str]:
        return iter(self._prices)

    def __len__(self) -> int:
        return len(self._prices)
