"""Console logging for the command line

Resolution traces of the finder carry the tagged module identifier in the
``stub`` attribute of the log record; :class:`StubFormatter` renders it after
the message, so that the generation each stub module belongs to shows up in
``--debug`` output.
"""

import logging
import sys
import time
from typing import Optional

from termcolor import colored

from modstub.identifiers import ModuleId

LEVELS = {
    logging.DEBUG: ("debug", "dark_grey"),
    logging.INFO: ("info", "green"),
    logging.WARNING: ("warn", "yellow"),
    logging.ERROR: ("error", "red"),
    logging.CRITICAL: ("fatal", "red"),
}


class StubFormatter(logging.Formatter):
    """Formats records as ``[time] level logger: message (generation N, path)``"""

    def __init__(self, use_color: bool = True, timestamps: bool = False):
        super().__init__()
        self.use_color = use_color
        self.timestamps = timestamps

    def _paint(self, text: str, color: str, bold: bool = False) -> str:
        if not self.use_color:
            return text
        return colored(text, color, attrs=["bold"] if bold else None)

    def describe(self, identifier: Optional[ModuleId]) -> str:
        if identifier is None:
            return ""
        if identifier.generation is None:
            return f" ({identifier})"
        where = identifier.path or identifier.name
        return f" (generation {identifier.generation}, {where})"

    def format(self, record: logging.LogRecord) -> str:
        label, color = LEVELS.get(record.levelno, (record.levelname.lower(), "white"))
        parts = []
        if self.timestamps:
            parts.append(time.strftime("%H:%M:%S", time.localtime(record.created)))
        parts.append(self._paint(f"{label:5}", color, bold=True))
        parts.append(self._paint(f"{record.name}:", "cyan"))
        parts.append(record.getMessage())

        result = " ".join(parts)
        stub = self.describe(getattr(record, "stub", None))
        if stub:
            result += self._paint(stub, "magenta")

        if record.exc_info:
            result += "\n" + self.formatException(record.exc_info)
        return result


def setup_logging(debug: bool = False, force_color: bool = False, quiet: bool = False):
    """Sends log records to stderr

    Args:
        debug: Also report debug records (with timestamps)
        force_color: Colors even when stderr is not a terminal
        quiet: Only report warnings and errors
    """
    if quiet:
        level = logging.WARNING
    else:
        level = logging.DEBUG if debug else logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        StubFormatter(use_color=force_color or sys.stderr.isatty(), timestamps=debug)
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for previous in root_logger.handlers[:]:
        root_logger.removeHandler(previous)
    root_logger.addHandler(handler)
