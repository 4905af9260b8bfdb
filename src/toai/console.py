"""
Coloured status messages on stderr.

Everything goes to stderr so a dump written to stdout is never mixed with
progress output.
"""

from __future__ import annotations

import sys

from colorama import Fore, Style

PREFIX = "[to-ai]"


def _emit(msg: str, colour: str = "") -> None:
    if colour:
        print(colour + msg + Style.RESET_ALL, file=sys.stderr)
    else:
        print(msg, file=sys.stderr)


def info(msg: str) -> None:
    _emit(f"{PREFIX} {msg}")


def warn(msg: str) -> None:
    _emit(f"{PREFIX} ! {msg}", Fore.YELLOW)


def success(msg: str) -> None:
    _emit(msg, Fore.GREEN)


def error(msg: str) -> None:
    _emit(f"Error: {msg}", Fore.RED)
