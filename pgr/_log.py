"""Konfiguracja logowania CLI — RichHandler na stderr."""

from __future__ import annotations

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

_FORMAT = "%(name)s: %(message)s"


def setup_logging(verbose: bool = False) -> None:
    """
    --verbose → DEBUG; w przeciwnym razie poziom z PGR_LOG_LEVEL (domyślnie WARNING).
    Nieznana nazwa poziomu → WARNING.
    """
    if verbose:
        level = logging.DEBUG
    else:
        name  = os.getenv("PGR_LOG_LEVEL", "WARNING").strip().upper()
        level = logging.getLevelNamesMapping().get(name, logging.WARNING)

    logging.basicConfig(
        level=level,
        format=_FORMAT,
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)],
        force=True,
    )
