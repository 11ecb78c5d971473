"""Domain-specific exceptions for the Kasir core.

This module defines custom exceptions that are part of the public API.
All exceptions inherit from KasirError for easy catching.

Apart from ConfigError, every exception here describes an expected,
recoverable condition. They are raised inside the core and translated by
KasirController.handle_action into render requests; none of them escapes
handle_action.
"""


class KasirError(Exception):
    """Base exception for all Kasir core errors.

    Users can catch this exception to handle any Kasir core error.
    """

    pass


class ConfigError(KasirError):
    """Raised when there is a configuration error.

    This exception is raised when:
    - The catalog file cannot be read or parsed
    - A catalog price is not a positive integer
    """

    pass


class UnauthorizedError(KasirError):
    """Raised when an operator is not allowed to perform an action.

    Attributes:
        operator_id: Identity of the rejected operator.
        admin_only: True when the operator is known but the action
            requires an administrator.
    """

    def __init__(self, operator_id: int, admin_only: bool = False) -> None:
        self.operator_id = operator_id
        self.admin_only = admin_only
        scope = "administrator" if admin_only else "operator"
        super().__init__(f"Operator {operator_id} is not an authorized {scope}")


class ValidationError(KasirError):
    """Raised when operator input is rejected.

    This exception is raised when:
    - A customer name has an invalid length
    - A cash amount cannot be parsed or is below the total

    The message is shown to the operator as a reply.
    """

    pass


class InvalidSignalError(ValidationError):
    """Raised when a button press is not legal in the current view.

    Also raised when callback data cannot be decoded at all.
    """

    pass


class EmptyCartError(ValidationError):
    """Raised when checkout is attempted with nothing in the cart."""

    pass
