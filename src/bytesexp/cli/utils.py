"""Shared utilities for CLI commands."""

from __future__ import annotations

import logging
import sys
import traceback
from typing import TYPE_CHECKING, BinaryIO

from bytesexp.exceptions import ParseError, SexpError

if TYPE_CHECKING:
    from rich.console import Console

__all__ = [
    "format_error",
    "print_error",
    "get_error_console",
    "setup_logging",
    "binary_stdout",
]

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Module-level console for error output, created lazily
_error_console: Console | None = None


def get_error_console() -> Console:
    """Get or create the Rich console for error output.

    The console writes to stderr and is cached for reuse.
    """
    global _error_console
    if _error_console is None:
        from rich.console import Console

        _error_console = Console(stderr=True, force_terminal=None)
    return _error_console


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure root logging on stderr for a CLI run."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def print_error(
    e: Exception,
    verbose: bool = False,
    use_rich: bool | None = None,
) -> None:
    """
    Print an exception, with Rich formatting on a terminal.

    Args:
        e: The exception to print
        verbose: If True, include full stack trace
        use_rich: Override automatic TTY detection (None = auto-detect)
    """
    console = get_error_console()

    if use_rich is None:
        use_rich = console.is_terminal

    if verbose:
        # Always use plain text for stack traces
        print(traceback.format_exc(), file=sys.stderr)
        return

    if use_rich and isinstance(e, SexpError):
        from rich.panel import Panel
        from rich.text import Text

        title = f"[bold red]{type(e).__name__}[/]"
        if isinstance(e, ParseError):
            title += f" at byte {e.offset}"
        console.print(Panel(Text(str(e)), title=title, title_align="left", border_style="red"))
    else:
        print(format_error(e, verbose=False), file=sys.stderr)


def format_error(e: Exception, verbose: bool = False) -> str:
    """
    Format an exception for user-friendly display (plain text).

    Args:
        e: The exception to format
        verbose: If True, include full stack trace

    Returns:
        Formatted error message string
    """
    if verbose:
        return traceback.format_exc()

    if isinstance(e, SexpError):
        return f"Error: {e}"

    # For other exceptions, show type and message
    return f"Error: {type(e).__name__}: {e}"


def binary_stdout() -> BinaryIO:
    """Binary stream behind sys.stdout, flushed of pending text."""
    sys.stdout.flush()
    return sys.stdout.buffer
