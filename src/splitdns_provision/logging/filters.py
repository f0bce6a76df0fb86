"""
Logging filters and formatters for provisioning progress output.
"""

import logging
from datetime import datetime


class StepLabelFilter(logging.Filter):
    """
    Make sure every record carries a ``step`` attribute.

    Reconciliation steps pass ``extra={"step": ...}``; records from anywhere
    else get ``default`` so format strings using ``%(step)s`` never fail.
    """

    def __init__(self, name: str = "", default: str = "-"):
        super().__init__(name)
        self.default = default

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "step", None):
            record.step = self.default
        return True


class IsoTimestampFormatter(logging.Formatter):
    """Render ``%(asctime)s`` as a local ISO-8601 timestamp with UTC offset."""

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        ts = datetime.fromtimestamp(record.created).astimezone()
        if datefmt:
            return ts.strftime(datefmt)
        return ts.isoformat(timespec="seconds")
