"""Console logging for the analyzer, rendered through rich."""

import logging

from rich.logging import RichHandler

# Client libraries that log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "openai")


def configure(level: str = "INFO") -> None:
    """Install a RichHandler on the root logger at the given level name."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, markup=False, show_path=False)],
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
