"""Tests for logger setup."""

import logging

from agent_segmenter.config import Config
from agent_segmenter.logger import DEFAULT_LOG_FILE, log_path_for, setup_logger


class TestSetupLogger:

    def test_level_follows_verbose(self):
        assert setup_logger(Config(), "agent_segmenter.t_quiet").level == logging.WARNING
        assert setup_logger(Config(verbose=True), "agent_segmenter.t_loud").level == logging.INFO

    def test_stderr_only_by_default(self):
        logger = setup_logger(Config(), "agent_segmenter.t_default")
        assert [type(h) for h in logger.handlers] == [logging.StreamHandler]
        assert logger.propagate is False

    def test_reconfigure_replaces_handlers(self, tmp_path):
        name = "agent_segmenter.t_twice"
        setup_logger(Config(log_file=str(tmp_path / "a.log")), name)
        logger = setup_logger(Config(), name)
        assert len(logger.handlers) == 1

    def test_log_file_receives_records(self, tmp_path):
        log_path = tmp_path / "logs" / "seg.log"
        name = "agent_segmenter.t_file"
        logger = setup_logger(Config(verbose=True, log_file=str(log_path)), name)
        logger.info("stream closed")
        for handler in logger.handlers:
            handler.flush()
        text = log_path.read_text(encoding="utf-8")
        assert f"Logging to {log_path}" in text
        assert "stream closed" in text
        setup_logger(Config(), name)  # closes the file handler


class TestLogPath:

    def test_disabled(self):
        assert log_path_for(False) is None

    def test_default_and_custom(self, tmp_path):
        assert log_path_for(True) == DEFAULT_LOG_FILE
        assert log_path_for(str(tmp_path / "x.log")) == tmp_path / "x.log"
