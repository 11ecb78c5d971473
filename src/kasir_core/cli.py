"""Terminal front-end for the cashier conversation.

This module provides a command-line interface that drives a
KasirController from standard input, standing in for a chat transport.
All conversation logic is in kasir_core.controller.

Input lines:
    /start   send the start command
    /quit    exit
    #n       press choice number n of the last message
    other    free text (customer name, cash amount)
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable, Iterable

from kasir_core.actions import StartCommand, TextInput
from kasir_core.config import KasirConfig
from kasir_core.controller import KasirController
from kasir_core.exceptions import ConfigError
from kasir_core.formatters.console import format_render_request, pending_choices
from kasir_core.render import Choice, RenderRequest

logger = logging.getLogger(__name__)

QUIT_COMMAND = "/quit"
START_COMMAND = "/start"


def run_console(
    controller: KasirController,
    operator_id: int,
    lines: Iterable[str],
    write: Callable[[str], None] = print,
    ascii_only: bool = False,
) -> None:
    """Feed input lines to the controller and write each response.

    The conversation opens with the start command. Processing stops at
    ``/quit`` or when ``lines`` is exhausted.
    """
    choices: list[Choice] = []

    def show(request: RenderRequest) -> None:
        nonlocal choices
        output = format_render_request(request, ascii_only=ascii_only)
        if output:
            write(output)
        offered = pending_choices(request)
        if offered is not None:
            choices = offered

    show(controller.handle_action(operator_id, StartCommand()))

    for raw in lines:
        line = raw.strip()
        if line == QUIT_COMMAND:
            break
        if line == START_COMMAND:
            show(controller.handle_action(operator_id, StartCommand()))
            continue
        if line.startswith("#") and line[1:].isdigit():
            index = int(line[1:]) - 1
            if not 0 <= index < len(choices):
                write(f"No choice {line[1:]}; pick 1-{len(choices)}")
                continue
            show(controller.handle_action(operator_id, choices[index].action))
            continue
        show(controller.handle_action(operator_id, TextInput(raw.rstrip("\n"))))


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Reads configuration from the environment, then runs the conversation
    for one operator on standard input.
    """
    parser = argparse.ArgumentParser(description="Run the cashier conversation in a terminal.")
    parser.add_argument(
        "--operator-id",
        type=int,
        help="Operator id to act as (default: first admin id, else first user id)",
    )
    parser.add_argument(
        "--ascii",
        action="store_true",
        help="Strip emojis from output for consoles without Unicode support",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    args = parser.parse_args(argv)

    try:
        config = KasirConfig.from_env()
        logging.basicConfig(
            level=logging.DEBUG if args.verbose else config.log_level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        catalog = config.load_catalog()
    except ConfigError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 2

    operator_id = args.operator_id
    if operator_id is None:
        known = sorted(config.admin_ids) or sorted(config.operator_ids)
        if not known:
            print("[ERROR] Set ADMIN_IDS or USER_IDS, or pass --operator-id", file=sys.stderr)
            return 2
        operator_id = known[0]

    logger.info("Starting console session for operator %s", operator_id)
    controller = KasirController(config.build_policy(), catalog)
    run_console(controller, operator_id, sys.stdin, ascii_only=args.ascii)
    return 0


if __name__ == "__main__":
    sys.exit(main())
