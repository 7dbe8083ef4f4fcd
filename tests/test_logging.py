"""Tests for logging setup."""

import logging
from pathlib import Path

from docwriter.utils.logging import setup_logging


class TestSetupLogging:
    """Tests for the setup_logging function."""

    def test_returns_logger(self) -> None:
        logger = setup_logging()
        assert isinstance(logger, logging.Logger)
        assert logger.name == "docwriter"

    def test_default_level_is_info(self) -> None:
        logger = setup_logging()
        assert logger.level == logging.INFO

    def test_custom_level(self) -> None:
        logger = setup_logging(level="debug")
        assert logger.level == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self) -> None:
        logger = setup_logging(level="CHATTY")
        assert logger.level == logging.INFO

    def test_console_handler_present(self) -> None:
        logger = setup_logging()
        handler_types = [type(h) for h in logger.handlers]
        assert logging.StreamHandler in handler_types

    def test_no_file_handler_by_default(self) -> None:
        logger = setup_logging()
        handler_types = [type(h) for h in logger.handlers]
        assert logging.FileHandler not in handler_types

    def test_clears_existing_handlers(self) -> None:
        logger = setup_logging()
        initial_count = len(logger.handlers)
        logger = setup_logging()
        assert len(logger.handlers) == initial_count

    def test_module_loggers_propagate(self, tmp_path: Path) -> None:
        log_file = tmp_path / "run.log"
        logger = setup_logging(level="INFO", log_file=str(log_file))
        logging.getLogger("docwriter.generators.doc_writer").info("Writing docs to Foo.java")
        for handler in logger.handlers:
            handler.flush()
        assert "Writing docs to Foo.java" in log_file.read_text(encoding="utf-8")

    def test_custom_format(self, tmp_path: Path) -> None:
        log_file = tmp_path / "run.log"
        logger = setup_logging(log_format="%(levelname)s|%(message)s", log_file=str(log_file))
        logger.warning("careful")
        for handler in logger.handlers:
            handler.flush()
        assert log_file.read_text(encoding="utf-8").strip() == "WARNING|careful"
