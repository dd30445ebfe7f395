"""
Logging setup for the command line.
"""
from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO


def configure_logging(verbose: bool = False, stream: Optional[TextIO] = None) -> None:
    """
    Configure root logging for command-line use.

    Calling it again replaces the handler installed by the previous call.

    Args:
        verbose: Log at DEBUG instead of INFO
        stream: Output stream (defaults to stderr)
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_cbt_cli", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    handler._cbt_cli = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.INFO)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)
