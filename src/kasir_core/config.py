"""Startup configuration for the Kasir core.

This module provides a single configuration class built from environment
variables. It is read once at startup; nothing in the core reads the
environment afterwards.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from kasir_core.auth import AuthorizationPolicy
from kasir_core.catalog import Catalog
from kasir_core.exceptions import ConfigError
from kasir_core.utils import parse_id_set

ADMIN_IDS_VAR = "ADMIN_IDS"
USER_IDS_VAR = "USER_IDS"
CATALOG_VAR = "KASIR_CATALOG"
LOG_LEVEL_VAR = "KASIR_LOG_LEVEL"


@dataclass
class KasirConfig:
    """Operator roles, catalog location and logging level.

    Attributes:
        admin_ids: Operator ids with administrator rights.
        operator_ids: Operator ids allowed to record sales.
        catalog_json: Optional path to a ``{"item": price}`` JSON file.
            None means the built-in menu.
        log_level: Logging level name, e.g. "INFO".

    Environment:
        ADMIN_IDS         comma-separated ids, e.g. ``"111,222"``
        USER_IDS          comma-separated ids
        KASIR_CATALOG     path to catalog JSON (optional)
        KASIR_LOG_LEVEL   logging level name (optional, default INFO)
    """

    admin_ids: frozenset[int] = field(default_factory=frozenset)
    operator_ids: frozenset[int] = field(default_factory=frozenset)
    catalog_json: Path | None = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> KasirConfig:
        """Create KasirConfig from environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``.

        Returns:
            KasirConfig instance.

        Raises:
            ConfigError: If KASIR_LOG_LEVEL is not a known logging level.

        Examples:
            >>> config = KasirConfig.from_env({"ADMIN_IDS": "1", "USER_IDS": "2,3"})
            >>> sorted(config.operator_ids)
            [2, 3]
        """
        if environ is None:
            environ = os.environ

        catalog_json = environ.get(CATALOG_VAR) or None
        log_level = (environ.get(LOG_LEVEL_VAR) or "INFO").upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ConfigError(f"Unknown log level in {LOG_LEVEL_VAR}: {log_level!r}")

        return cls(
            admin_ids=parse_id_set(environ.get(ADMIN_IDS_VAR)),
            operator_ids=parse_id_set(environ.get(USER_IDS_VAR)),
            catalog_json=Path(catalog_json) if catalog_json else None,
            log_level=log_level,
        )

    def build_policy(self) -> AuthorizationPolicy:
        return AuthorizationPolicy(admin_ids=self.admin_ids, operator_ids=self.operator_ids)

    def load_catalog(self) -> Catalog:
        """Load the configured catalog, or the built-in menu if none is set."""
        if self.catalog_json is None:
            return Catalog()
        return Catalog.from_json(self.catalog_json)
