"""Process-level logging configuration."""

import logging


def setup_logging(
    level: str = "INFO",
    echo_channels: bool = False,
) -> None:
    """Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        echo_channels: Show every channel line on the console
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    # Channel lines are emitted at DEBUG; keep them quiet unless asked for
    if echo_channels:
        logging.getLogger("diaglog.channel").setLevel(logging.DEBUG)
    else:
        logging.getLogger("diaglog.channel").setLevel(logging.WARNING)
