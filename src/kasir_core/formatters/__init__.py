"""Output formatting utilities."""

from kasir_core.formatters.console import format_render_request, pending_choices, sanitize_for_console

__all__ = ["format_render_request", "pending_choices", "sanitize_for_console"]
