import logging
from pathlib import Path

import pytest

from nre_tracker import logging_setup
from nre_tracker.config import TrackerConfig


def test_defaults_under_data_dir(tracker_config, tmp_path):
    assert tracker_config.data_dir == tmp_path / "Database"
    assert tracker_config.config_path.name == "config.json"
    assert tracker_config.backend == "json"
    assert tracker_config.database_url.endswith("/tasks.db")
    assert tracker_config.resolve_api_url() == "http://127.0.0.1:3001"


def test_user_data_path_fallback(monkeypatch, tmp_path):
    monkeypatch.delenv("NRE_DATA_DIR", raising=False)
    monkeypatch.setenv("USER_DATA_PATH", str(tmp_path))
    assert TrackerConfig.from_env().data_dir == Path(tmp_path) / "Database"


def test_env_overrides(tracker_config, monkeypatch):
    monkeypatch.setenv("PORT", "4100")
    monkeypatch.setenv("NRE_API_URL", "http://tracker.local:9000/")
    monkeypatch.setenv("NRE_HTTP_TIMEOUT_SECONDS", "bogus")
    cfg = TrackerConfig.from_env()
    assert cfg.port_override == 4100
    assert cfg.resolve_api_url() == "http://tracker.local:9000"
    assert cfg.http_timeout_seconds == 10.0


def test_port_override_used_for_default_api_url(tracker_config, monkeypatch):
    monkeypatch.setenv("PORT", "4100")
    assert TrackerConfig.from_env().resolve_api_url() == "http://127.0.0.1:4100"


def test_unknown_backend_rejected(tracker_config, monkeypatch):
    monkeypatch.setenv("NRE_STORE_BACKEND", "mongo")
    with pytest.raises(ValueError):
        TrackerConfig.from_env()


def test_setup_logging_writes_rotating_file(tmp_path, monkeypatch):
    root = logging.getLogger()
    monkeypatch.setattr(logging_setup, "_configured", False)
    before = list(root.handlers)
    try:
        logfile = logging_setup.setup_logging("DEBUG", tmp_path / "logs")
        assert logfile == tmp_path / "logs" / "nre-tracker.log"
        logging.getLogger("nre_tracker.test").info("hello")
        for h in root.handlers:
            h.flush()
        assert "| INFO | nre_tracker.test | hello" in logfile.read_text(encoding="utf-8")
        # second call does not stack handlers
        count = len(root.handlers)
        logging_setup.setup_logging("INFO", tmp_path / "logs")
        assert len(root.handlers) == count
    finally:
        for h in list(root.handlers):
            if h not in before:
                root.removeHandler(h)
                h.close()
