import logging

from adapters.error_sink import LoggingErrorSink
from core.config import AppSettings, _parse_env_lines, write_user_env_vars
from core.domain.errors import TransportError
from core.logging_setup import HANDLER_NAME, configure_logging


def test_settings_from_environment(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("MORTY_CATALOG_API_BASE_URL", "http://localhost:8080/api")
    monkeypatch.setenv("MORTY_CATALOG_DEBOUNCE_MS", "50")

    settings = AppSettings()

    assert settings.api_base_url == "http://localhost:8080/api"
    assert settings.debounce_ms == 50


def test_resolved_paths_prefer_explicit_values(tmp_path):
    settings = AppSettings(favorites_path=tmp_path / "fav.json", state_path=tmp_path / "q.txt")
    assert settings.resolved_favorites_path() == tmp_path / "fav.json"
    assert settings.resolved_state_path() == tmp_path / "q.txt"

    defaults = AppSettings(favorites_path=None, state_path=None)
    assert defaults.resolved_favorites_path().name == "favorites.json"
    assert defaults.resolved_state_path().name == "last_query.txt"


def test_write_user_env_vars_merges(tmp_path):
    env_path = tmp_path / "cfg" / ".env"
    write_user_env_vars({"MORTY_CATALOG_DEBOUNCE_MS": "100"}, env_path=env_path)
    write_user_env_vars({"MORTY_CATALOG_API_BASE_URL": "http://x/api"}, env_path=env_path)

    data = _parse_env_lines(env_path.read_text(encoding="utf-8"))
    assert data == {
        "MORTY_CATALOG_API_BASE_URL": "http://x/api",
        "MORTY_CATALOG_DEBOUNCE_MS": "100",
    }


def test_configure_logging_is_idempotent():
    root = logging.getLogger()
    previous_level = root.level
    try:
        configure_logging("debug")
        configure_logging("INFO")
        handlers = [h for h in root.handlers if h.name == HANDLER_NAME]
        assert len(handlers) == 1
        assert handlers[0].level == logging.INFO
    finally:
        for handler in [h for h in root.handlers if h.name == HANDLER_NAME]:
            root.removeHandler(handler)
        root.setLevel(previous_level)


def test_logging_error_sink_counts_and_logs(caplog):
    sink = LoggingErrorSink()
    with caplog.at_level(logging.ERROR, logger="morty_catalog.errors"):
        sink.report("Error loading characters", TransportError("HTTP 500", status_code=500))

    assert sink.reported == 1
    assert "Error loading characters: HTTP 500" in caplog.text
