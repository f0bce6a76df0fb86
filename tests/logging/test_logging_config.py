"""Tests for logging/config.py"""

import logging
from pathlib import Path

import pytest

from splitdns_provision.logging.config import HANDLER_NAME, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)


def own_handlers(root):
    return [h for h in root.handlers if h.get_name() == HANDLER_NAME]


class TestSetupLogging:
    """Tests for setup_logging()."""

    def test_installs_stdout_handler(self, restore_root_logger, capsys):
        setup_logging()

        logging.getLogger("splitdns_provision.test").info(
            "Zone 'local' created", extra={"step": "zone local"}
        )

        captured = capsys.readouterr()
        assert "[zone local] Zone 'local' created" in captured.out

    def test_default_step_label(self, restore_root_logger, capsys):
        setup_logging()

        logging.getLogger("splitdns_provision.test").info("starting")

        assert "[-] starting" in capsys.readouterr().out

    def test_repeated_calls_keep_one_handler(self, restore_root_logger):
        setup_logging()
        setup_logging()

        assert len(own_handlers(restore_root_logger)) == 1

    def test_levels(self, restore_root_logger):
        setup_logging(debug=True)
        assert restore_root_logger.level == logging.DEBUG

        setup_logging(quiet=True)
        assert restore_root_logger.level == logging.WARNING

        setup_logging()
        assert restore_root_logger.level == logging.INFO

    def test_logging_config_file(self, restore_root_logger, tmp_path, capsys):
        """The bundled logging.yaml should load through dictConfig."""
        bundled = Path(__file__).resolve().parents[2] / "logging.yaml"
        config = tmp_path / "logging.yaml"
        config.write_text(bundled.read_text())

        setup_logging(str(config))

        logging.getLogger("splitdns_provision.test").warning(
            "Aborting: remaining steps skipped", extra={"step": "scope inside"}
        )
        assert "[scope inside] Aborting" in capsys.readouterr().out

    def test_missing_logging_config(self, restore_root_logger, tmp_path):
        with pytest.raises(OSError):
            setup_logging(str(tmp_path / "missing.yaml"))
