"""Unit tests for settings loading and logging setup."""

import json
import logging
import sys

import pytest
from pydantic import ValidationError

from knowledgehub.config.logging import JSONExceptionFormatter, get_logger, setup_logging
from knowledgehub.config.settings import Settings

pytestmark = pytest.mark.unit


class TestSettings:
    def test_defaults(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("API_URL", raising=False)
        config = Settings()
        assert config.api_url == "http://localhost:5000"
        assert config.request_timeout == 30.0

    def test_api_url_from_environment_is_sanitized(self, monkeypatch):
        monkeypatch.setenv("API_URL", "  https://kb.example.com/  ")
        assert Settings().api_url == "https://kb.example.com"

    def test_api_url_strips_bom(self):
        assert Settings(api_url="\ufeffhttp://kb.local").api_url == "http://kb.local"

    def test_rejects_non_http_url(self):
        with pytest.raises(ValidationError):
            Settings(api_url="ftp://kb.local")

    def test_storage_path_and_directories(self, tmp_path):
        config = Settings(data_dir=tmp_path / "state", storage_file="kv.db")
        config.ensure_directories()
        assert config.storage_path == tmp_path / "state" / "kv.db"
        assert config.storage_path.parent.is_dir()


class TestLogging:
    def test_setup_logging_writes_file(self, tmp_path):
        log_file = tmp_path / "logs" / "client.log"
        logger = setup_logging("DEBUG", log_file=log_file)

        get_logger("tests").debug("hello from tests")
        for handler in logger.handlers:
            handler.flush()

        assert logger.level == logging.DEBUG
        assert "hello from tests" in log_file.read_text(encoding="utf-8")
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()

    def test_json_formatter_includes_exception(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.LogRecord(
                "knowledgehub", logging.ERROR, __file__, 1, "failed", None, sys.exc_info()
            )

        entry = json.loads(JSONExceptionFormatter().format(record))

        assert entry["level"] == "ERROR"
        assert entry["message"] == "failed"
        assert entry["exception"]["type"] == "RuntimeError"

    def test_secrets_are_masked(self, tmp_path):
        log_file = tmp_path / "client.log"
        logger = setup_logging("INFO", log_file=log_file)

        get_logger("tests").info('Authorization: Bearer abc.def.ghi body={"password": "hunter2"}')
        for handler in logger.handlers:
            handler.flush()

        text = log_file.read_text(encoding="utf-8")
        assert "abc.def.ghi" not in text
        assert "hunter2" not in text
        assert "Bearer ***" in text
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()
