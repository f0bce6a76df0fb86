"""
Logging setup for the provisioning CLI.

Without a logging config file, progress lines go to stdout as:

    2026-10-18T09:14:02+02:00 [subnet inside] Client subnet 'inside' (10.0.3.0/26) created

A logging.yaml passed with --logging-config replaces this entirely:

    version: 1
    filters:
      step:
        (): splitdns_provision.logging.StepLabelFilter
    formatters:
      iso:
        (): splitdns_provision.logging.IsoTimestampFormatter
        format: "%(asctime)s [%(step)s] %(message)s"
    handlers:
      console:
        class: logging.StreamHandler
        stream: ext://sys.stdout
        formatter: iso
        filters: [step]
    root:
      level: INFO
      handlers: [console]
"""

import logging
import logging.config
import sys

import yaml

from splitdns_provision.logging.filters import IsoTimestampFormatter, StepLabelFilter

DEFAULT_FORMAT = "%(asctime)s [%(step)s] %(message)s"
HANDLER_NAME = "splitdns-progress"


def setup_logging(
    logging_config: str | None = None, debug: bool = False, quiet: bool = False
) -> None:
    if logging_config:
        with open(logging_config, "r") as f:
            cfg = yaml.safe_load(f)
        logging.config.dictConfig(cfg)
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(IsoTimestampFormatter(DEFAULT_FORMAT))
    handler.addFilter(StepLabelFilter())

    root = logging.getLogger()
    # replace our own handler from an earlier call, leave any others alone
    for existing in list(root.handlers):
        if existing.get_name() == HANDLER_NAME:
            root.removeHandler(existing)
    root.addHandler(handler)

    if debug:
        root.setLevel(logging.DEBUG)
    elif quiet:
        root.setLevel(logging.WARNING)
    else:
        root.setLevel(logging.INFO)
