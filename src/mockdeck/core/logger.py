"""The ``mockdeck`` logger.

Console records go to stderr, filtered at ``MOCKDECK_LOG_LEVEL``.  Extra
destinations (the CLI's ``--log-file``) are attached through
:class:`LogStream`, each with its own threshold, so a file can capture the
request trace while the terminal stays quiet.
"""

import itertools
import logging
import sys
from typing import TextIO

from mockdeck.core.config import LOG_LEVEL

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

LOGGER = logging.getLogger("mockdeck")
# Handlers do the filtering; the logger itself lets everything through.
LOGGER.setLevel(logging.DEBUG)

_stderr = logging.StreamHandler(sys.stderr)
_stderr.setLevel(LOG_LEVEL if LOG_LEVEL in LEVELS else "WARNING")
_stderr.setFormatter(logging.Formatter(FORMAT))
LOGGER.addHandler(_stderr)


class LogStream:
    """Extra log destinations, keyed by the id ``Register`` hands back."""

    _handlers: dict[int, logging.Handler] = {}
    _ids = itertools.count(1)

    @classmethod
    def Register(cls, stream: TextIO, level: str = "DEBUG") -> int:
        """Send records at ``level`` and above to ``stream``."""
        if level.upper() not in LEVELS:
            raise ValueError(f"unknown log level {level!r}")
        handler = logging.StreamHandler(stream)
        handler.setLevel(level.upper())
        handler.setFormatter(logging.Formatter(FORMAT))
        LOGGER.addHandler(handler)
        stream_id = next(cls._ids)
        cls._handlers[stream_id] = handler
        return stream_id

    @classmethod
    def Unregister(cls, stream_id: int) -> None:
        handler = cls._handlers.pop(stream_id, None)
        if handler is not None:
            LOGGER.removeHandler(handler)
            handler.flush()
