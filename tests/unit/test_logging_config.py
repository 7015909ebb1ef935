"""
Unit tests for logging setup.
"""

import logging

import pytest

from alexandria_core.config import Settings
from alexandria_core.logging_config import LOG_RETENTION, setup_logging, setup_logging_from_settings

pytestmark = pytest.mark.unit


@pytest.fixture
def restore_root_logger():
    """Put the root logger back the way pytest configured it"""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestSetupLogging:
    """Test handlers and session log retention"""
    
    def test_handlers(self, tmp_path, restore_root_logger):
        session_log = setup_logging(str(tmp_path / "logs" / "core.log"), console_level="WARNING")
        
        assert session_log.parent == tmp_path / "logs"
        assert session_log.name.startswith("core_")
        levels = sorted(handler.level for handler in restore_root_logger.handlers)
        assert levels == [logging.DEBUG, logging.WARNING]
        assert logging.getLogger("nltk").level == logging.WARNING
    
    def test_file_receives_debug(self, tmp_path, restore_root_logger):
        session_log = setup_logging(str(tmp_path / "core.log"))
        logging.getLogger("alexandria_core.test").debug("detailed message")
        for handler in restore_root_logger.handlers:
            handler.flush()
        assert "detailed message" in session_log.read_text(encoding="utf-8")
    
    def test_retention(self, tmp_path, restore_root_logger):
        for i in range(6):
            (tmp_path / f"core_2020010{i}_000000.log").write_text("old")
        
        setup_logging(str(tmp_path / "core.log"))
        
        remaining = sorted(path.name for path in tmp_path.glob("core_*.log"))
        assert len(remaining) == LOG_RETENTION
        assert "core_20200100_000000.log" not in remaining
        assert "core_20200101_000000.log" not in remaining
        assert "core_20200105_000000.log" in remaining
    
    def test_from_settings(self, tmp_path, restore_root_logger):
        setup_logging_from_settings(Settings(log_level="ERROR"), log_file=str(tmp_path / "core.log"))
        console = [
            handler for handler in restore_root_logger.handlers
            if type(handler) is logging.StreamHandler
        ]
        assert console[0].level == logging.ERROR
