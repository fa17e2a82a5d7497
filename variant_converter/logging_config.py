"""
Logging configuration for the converter.

Standard output may carry variant data, so every handler writes to
standard error through a rich console.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

_console = Console(stderr=True)
_logging_initialized = False


def console() -> Console:
    """Shared standard-error console."""
    return _console


def setup_logging(verbose: bool = False) -> None:
    """
    Install a RichHandler on the package logger.

    Args:
        verbose: Log at DEBUG instead of WARNING.
    """
    global _logging_initialized

    logger = logging.getLogger("variant_converter")
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    if _logging_initialized:
        return

    handler = RichHandler(
        console=_console,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logger.addHandler(handler)
    logger.propagate = False
    _logging_initialized = True
