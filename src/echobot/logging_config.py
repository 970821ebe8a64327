"""Application logging setup.

Routes the standard ``logging`` hierarchy through rich so log lines share
the console with CLI output. Configuration is applied once per process.
"""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

_IS_CONFIGURED = False


def configure_logging(level: str | None = None, console: Console | None = None) -> None:
    """Initialize logging for the ``echobot`` package.

    Args:
        level: Level name (debug/info/warning/error). Defaults to
            ECHOBOT_LOG_LEVEL, then WARNING.
        console: Rich console to write to (stderr when omitted)
    """
    global _IS_CONFIGURED
    if _IS_CONFIGURED:
        return

    level_name = (level or os.getenv("ECHOBOT_LOG_LEVEL", "WARNING")).upper()

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s | %(message)s", datefmt="%H:%M:%S"))

    package_logger = logging.getLogger("echobot")
    package_logger.setLevel(level_name)
    package_logger.addHandler(handler)
    package_logger.propagate = False

    _IS_CONFIGURED = True
