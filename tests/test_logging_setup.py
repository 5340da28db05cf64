"""Tests for root logger configuration."""

import logging

from updown.logging_setup import QUIET_LOGGERS, setup_logging


class TestSetupLogging:
    """Tests for root logger configuration."""

    def test_repeated_setup_keeps_one_handler(self) -> None:
        """Calling setup twice replaces the earlier handler."""
        root = logging.getLogger()
        before = list(root.handlers)
        level = root.level
        try:
            setup_logging("debug")
            setup_logging("warning")

            added = [h for h in root.handlers if h not in before]
            assert len(added) == 1
            assert root.level == logging.WARNING
            assert logging.getLogger("httpx").level == logging.WARNING
        finally:
            for handler in root.handlers[:]:
                if handler not in before:
                    root.removeHandler(handler)
            root.setLevel(level)

    def test_quiets_third_party_loggers(self) -> None:
        """Noisy libraries log warnings and above only."""
        root = logging.getLogger()
        before = list(root.handlers)
        level = root.level
        try:
            setup_logging("DEBUG")

            for name in QUIET_LOGGERS:
                assert logging.getLogger(name).level == logging.WARNING
        finally:
            for handler in root.handlers[:]:
                if handler not in before:
                    root.removeHandler(handler)
            root.setLevel(level)
