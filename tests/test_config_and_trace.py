"""
Tests for configuration loading and debug tracing.
"""

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from voice_tasks.core.config import Config, ConfigError, load_config, load_env_file
from voice_tasks.core.debug_log import TraceLogger, get_trace_logger, is_debug_enabled
from voice_tasks.core.interpret import UtteranceInterpreter
from voice_tasks.core.timing import timer


@pytest.fixture(autouse=True)
def clear_load_config_cache():
    """Ensure cached dotenv loads do not leak between tests."""
    load_config.cache_clear()
    yield
    load_config.cache_clear()


class TestConfig:
    """Test configuration properties."""

    def test_defaults(self):
        """Defaults apply without any VT_ variables."""
        with patch.dict(os.environ, {}, clear=True):
            config = Config()
            assert config.debug is False
            assert config.trace_dir == Path(".voice_tasks") / "debug"
            assert config.lexicon_file is None

    def test_debug_flag(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("VT_DEBUG", "1")
        assert Config().debug is True
        assert is_debug_enabled() is True
        monkeypatch.setenv("VT_DEBUG", "yes")
        assert Config().debug is False

    def test_lexicon_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        path = tmp_path / "lexicon.json"
        path.write_text("{}", encoding="utf-8")
        monkeypatch.setenv("VT_LEXICON_FILE", str(path))
        assert Config().lexicon_file == path

    def test_missing_lexicon_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("VT_LEXICON_FILE", str(tmp_path / "missing.json"))
        with pytest.raises(ConfigError):
            _ = Config().lexicon_file


class TestEnvFile:
    """Test explicit dotenv loading."""

    def test_no_implicit_loading(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("VT_ENV_FILE", raising=False)
        assert load_env_file() is None

    def test_explicit_path(self, tmp_path: Path):
        env_path = tmp_path / "vt.env"
        env_path.write_text(f"VT_TRACE_DIR={tmp_path / 'traces'}\n", encoding="utf-8")

        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("VT_TRACE_DIR", None)
            assert load_env_file(str(env_path)) == str(env_path)
            assert Config().trace_dir == tmp_path / "traces"

    def test_env_var_path(self, tmp_path: Path):
        env_path = tmp_path / "vt.env"
        env_path.write_text("VT_DEBUG=1\n", encoding="utf-8")

        with patch.dict(os.environ, {"VT_ENV_FILE": str(env_path)}, clear=False):
            os.environ.pop("VT_DEBUG", None)
            assert load_env_file() == str(env_path)
            assert Config().debug is True

    def test_existing_environment_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("VT_DEBUG", "0")
        env_path = tmp_path / "vt.env"
        env_path.write_text("VT_DEBUG=1\n", encoding="utf-8")

        load_env_file(str(env_path))
        assert Config().debug is False

    def test_missing_env_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_env_file(str(tmp_path / "nope.env"))


class TestTraceLogger:
    """Test JSON traces."""

    def test_disabled_writes_nothing(self, tmp_path: Path):
        logger = TraceLogger(tmp_path, enabled=False)
        assert logger.log_interpretation("utterance", "x", {}, {}) is None
        assert list(tmp_path.iterdir()) == []

    def test_enabled_writes_json(self, tmp_path: Path):
        logger = TraceLogger(tmp_path, enabled=True)
        path = logger.log_interpretation("query", "I have 5 minutes", {"rule": "time_budget"}, {"type": "time-based"})

        assert path is not None and path.parent.parent == tmp_path
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["type"] == "query"
        assert data["input"] == "I have 5 minutes"
        assert data["stages"] == {"rule": "time_budget"}
        assert data["result"] == {"type": "time-based"}

    def test_interpreter_writes_trace_when_debug(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("VT_DEBUG", "1")
        monkeypatch.setenv("VT_TRACE_DIR", str(tmp_path))

        UtteranceInterpreter().interpret("call mom tomorrow")

        traces = list(tmp_path.glob("session_*/utterance_*.json"))
        assert len(traces) == 1
        data = json.loads(traces[0].read_text(encoding="utf-8"))
        assert data["result"]["name"] == "Call mom"
        assert data["stages"]["remaining_after_dates"] == "call mom"

    def test_shared_logger_follows_config(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("VT_DEBUG", "0")
        assert get_trace_logger().enabled is False
        monkeypatch.setenv("VT_DEBUG", "1")
        monkeypatch.setenv("VT_TRACE_DIR", str(tmp_path))
        assert get_trace_logger().enabled is True
        assert get_trace_logger() is get_trace_logger()


class TestTimer:
    """Test the debug timing decorator."""

    def test_silent_without_debug(self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture):
        monkeypatch.setenv("VT_DEBUG", "0")
        assert timer(lambda x: x * 2)(21) == 42
        assert capsys.readouterr().err == ""

    def test_reports_when_debug_set_after_import(self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture):
        """The flag is checked per call, so enabling it later still reports."""

        @timer
        def double(x):
            return x * 2

        monkeypatch.setenv("VT_DEBUG", "1")
        assert double(21) == 42
        assert "[VT_DEBUG] TestTimer.test_reports_when_debug_set_after_import.<locals>.double took" in capsys.readouterr().err
