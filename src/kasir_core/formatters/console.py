"""Console output formatting for render requests."""

from __future__ import annotations

import re

from kasir_core.render import Choice, RenderRequest


def sanitize_for_console(text: str) -> str:
    """Sanitize text for console output by removing emojis and other non-ASCII characters.

    This prevents UnicodeEncodeError on consoles with a legacy code page.

    Args:
        text: Text that may contain emojis

    Returns:
        Sanitized text safe for console output
    """
    # Drop the space that follows an emoji along with it
    return re.sub(r"[^\x00-\x7F]+ ?", "", text)


def format_render_request(request: RenderRequest, ascii_only: bool = False) -> str:
    """Build a human-readable representation of a render request.

    Messages are separated by a rule; choices of each message are listed as
    ``[n] label`` numbered from 1 across the whole request, in the order
    returned by ``pending_choices``.

    Args:
        request: RenderRequest returned by the controller
        ascii_only: Strip emojis and other non-ASCII characters

    Returns:
        Text for the terminal (empty string if the request is empty)
    """
    lines: list[str] = []
    if request.alert:
        lines.append(f"[!] {request.alert}")

    current: RenderRequest | None = request
    number = 1
    while current is not None:
        if current.text is not None:
            if lines:
                lines.append("-" * 40)
            lines.append(current.text)
        for choice in current.choices:
            lines.append(f"  [{number}] {choice.label}")
            number += 1
        current = current.follow_up

    text = "\n".join(lines)
    return sanitize_for_console(text) if ascii_only else text


def pending_choices(request: RenderRequest) -> list[Choice] | None:
    """Return the choices offered by a request, numbered as displayed.

    Returns None when the request offers no choices at all (alerts, hints,
    prompts for typed input), meaning the previously displayed choices are
    still valid.
    """
    choices: list[Choice] = []
    current: RenderRequest | None = request
    while current is not None:
        choices.extend(current.choices)
        current = current.follow_up
    return choices or None
