"""
Logging helpers for splitdns-provision.

These can be used in logging.yaml:

    filters:
      step:
        (): splitdns_provision.logging.StepLabelFilter
    formatters:
      iso:
        (): splitdns_provision.logging.IsoTimestampFormatter
"""

from splitdns_provision.logging.config import setup_logging
from splitdns_provision.logging.filters import IsoTimestampFormatter, StepLabelFilter

__all__ = ["IsoTimestampFormatter", "StepLabelFilter", "setup_logging"]
