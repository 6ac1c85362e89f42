"""Console logging for sitepub.

All loggers live under the ``sitepub`` namespace and write one line per
record to stderr::

    [INFO] 10-19 08:15:02 upload_3 Uploading: css/main.css

The thread name is part of every line so that interleaved output from
the upload workers stays attributable. Level tags are coloured with
*colorama*.

Usage::

    from sitepub.utils.logger import get_logger, log_step

    log = get_logger(__name__)
    with log_step(log, "deploy oss draft"):
        ...
"""
import logging
import sys
import time
from contextlib import contextmanager

from colorama import Fore, Style

__all__ = ["get_logger", "setup_logging", "level_from_flags", "log_step"]

ROOT_LOGGER_NAME = "sitepub"

LOG_FORMAT = "%(asctime)s %(threadName)s %(message)s"
DATE_FORMAT = "%m-%d %H:%M:%S"

# Third-party loggers that flood DEBUG output with per-request detail
QUIET_THIRD_PARTY = ("botocore", "boto3", "s3transfer", "urllib3")

_TAG_COLOURS = {
    logging.DEBUG: Fore.WHITE,
    logging.INFO: Fore.CYAN,
    logging.WARNING: Fore.YELLOW,
    logging.ERROR: Fore.RED,
    logging.CRITICAL: Fore.RED + Style.BRIGHT,
}

_configured = False


class ColouredFormatter(logging.Formatter):
    """Prefixes each formatted record with a coloured ``[LEVEL]`` tag."""

    def format(self, record: logging.LogRecord) -> str:
        colour = _TAG_COLOURS.get(record.levelno, "")
        return f"{colour}[{record.levelname}]{Style.RESET_ALL} {super().format(record)}"


def level_from_flags(verbose: bool = False, quiet: bool = False) -> int:
    """Map the ``--verbose`` / ``--quiet`` flags to a level; quiet wins."""
    if quiet:
        return logging.WARNING
    if verbose:
        return logging.DEBUG
    return logging.INFO


def setup_logging(verbose: bool = False, quiet: bool = False, stream=None) -> None:
    """Configure the ``sitepub`` logger.

    Safe to call more than once: the first call installs the stderr
    handler, later calls only change the level.

    Args:
        verbose: Show DEBUG records
        quiet: Show only warnings and errors (overrides *verbose*)
        stream: Output stream for the handler (default: ``sys.stderr``)
    """
    global _configured  # noqa: PLW0603

    level = level_from_flags(verbose, quiet)
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)

    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(level)
    else:
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(ColouredFormatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)

    for name in QUIET_THIRD_PARTY:
        logging.getLogger(name).setLevel(logging.WARNING)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return ``sitepub.<name>``, configuring defaults on first use."""
    if not _configured:
        setup_logging()

    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


@contextmanager
def log_step(log: logging.Logger, name: str):
    """Log the start of a step and, on success, its duration.

    Failures are not logged here; they propagate to whoever reports them.
    """
    log.info("%s: started", name)
    started = time.monotonic()
    yield
    log.info("%s: finished in %.2fs", name, time.monotonic() - started)
