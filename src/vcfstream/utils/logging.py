"""
Logging for vcfstream.

Library modules only create loggers under the ``vcfstream`` namespace and
never install handlers. Applications (the ``vcfstream`` CLI among them) call
``setup_logging`` to send those records to stderr through rich, and
optionally to a plain-text log file.
"""

import logging
import time
from contextlib import contextmanager
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

__all__ = [
    "setup_logging",
    "get_logger",
    "timed",
]

# Records go to stderr; stdout carries command output (JSON, counts).
_console = Console(stderr=True)

_FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(verbose: bool = False, log_file: Path | str | None = None) -> None:
    """
    Route vcfstream log records to the terminal.

    Only warnings (such as lines skipped under the partial batch policy) are
    shown by default; ``verbose`` adds the DEBUG trace of header parsing and
    batch reads. Calling this again replaces the previous configuration.
    """
    handlers: list[logging.Handler] = [
        RichHandler(console=_console, rich_tracebacks=True, markup=False, show_path=verbose)
    ]
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        handlers.append(file_handler)

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=handlers,
        force=True,
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


@contextmanager
def timed(operation: str, logger: logging.Logger | None = None):
    """
    Log how long a block took, at DEBUG level.

    Nothing is logged if the block raises; the exception carries the story.

    Example:
        with timed("Reading header of calls.vcf", logger):
            header = HeaderParser.parse(lines)
    """
    log = logger or logging.getLogger("vcfstream")
    start = time.perf_counter()
    yield
    log.debug("%s took %.1f ms", operation, (time.perf_counter() - start) * 1000)
