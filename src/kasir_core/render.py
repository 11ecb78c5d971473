"""Render requests: what the transport should show after an action.

A RenderRequest carries semantic content only. The transport decides how
text is marked up and how choices are laid out as buttons.
"""

from __future__ import annotations

from dataclasses import dataclass

from kasir_core.actions import Action
from kasir_core.sessions import View


@dataclass(frozen=True)
class Choice:
    """One selectable next action and its label."""

    label: str
    action: Action


@dataclass(frozen=True)
class RenderRequest:
    """Outcome of handling one action.

    Attributes:
        view: View the operator is in afterwards, or None when the operator
            has no session (e.g. access denied).
        text: Message to display, or None if only an alert is shown.
        choices: Next legal actions to offer, in display order.
        alert: Short notice (toast) shown without replacing the message.
        follow_up: Second message to send after this one.
    """

    view: View | None
    text: str | None = None
    choices: tuple[Choice, ...] = ()
    alert: str | None = None
    follow_up: RenderRequest | None = None

    @property
    def is_empty(self) -> bool:
        """True when there is nothing to show (the action was ignored)."""
        return self.text is None and self.alert is None and self.follow_up is None

    def actions(self) -> list[Action]:
        return [choice.action for choice in self.choices]
