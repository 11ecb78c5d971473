"""Authorization policy for operators.

Operators are classified from two static id sets loaded at startup.
Administrators always pass the operator check, whether or not they also
appear in the operator set.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import IntEnum

from kasir_core.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)


class Role(IntEnum):
    """Operator role, ordered by privilege."""

    UNAUTHORIZED = 0
    OPERATOR = 1
    ADMINISTRATOR = 2


class AuthorizationPolicy:
    """Classify operator identities against admin and operator id sets.

    Example:
        >>> policy = AuthorizationPolicy(admin_ids={1}, operator_ids={2})
        >>> policy.classify(1)
        <Role.ADMINISTRATOR: 2>
        >>> policy.classify(3)
        <Role.UNAUTHORIZED: 0>

    """

    def __init__(self, admin_ids: Iterable[int] = (), operator_ids: Iterable[int] = ()) -> None:
        self.admin_ids = frozenset(admin_ids)
        self.operator_ids = frozenset(operator_ids)

    def classify(self, operator_id: int) -> Role:
        if operator_id in self.admin_ids:
            return Role.ADMINISTRATOR
        if operator_id in self.operator_ids:
            return Role.OPERATOR
        return Role.UNAUTHORIZED

    def is_authorized(self, operator_id: int) -> bool:
        return self.classify(operator_id) >= Role.OPERATOR

    def is_admin(self, operator_id: int) -> bool:
        return self.classify(operator_id) is Role.ADMINISTRATOR

    def require(self, operator_id: int, role: Role = Role.OPERATOR) -> Role:
        """Return the operator's role, or raise if it is below ``role``.

        Args:
            operator_id: Operator identity.
            role: Minimum role required.

        Returns:
            The operator's actual role.

        Raises:
            UnauthorizedError: If the operator's role is insufficient.
        """
        actual = self.classify(operator_id)
        if actual < role:
            logger.warning("Denied %s action for operator %s (%s)", role.name, operator_id, actual.name)
            raise UnauthorizedError(operator_id, admin_only=actual is not Role.UNAUTHORIZED)
        return actual
