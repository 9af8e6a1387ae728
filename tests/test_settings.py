import importlib
import os
from types import ModuleType

import pytest
from pydantic import ValidationError


def _reload_settings_with_env(
    monkeypatch: pytest.MonkeyPatch, env: dict[str, str | None]
) -> ModuleType:
    # Clear related envs first to avoid leakage across tests
    prefixes = ("APP_", "BACKEND_", "SYNC_", "LOG_")
    for key in list(os.environ.keys()):
        if key.startswith(prefixes):
            monkeypatch.delenv(key, raising=False)

    for k, v in env.items():
        if v is None:
            monkeypatch.delenv(k, raising=False)
        else:
            monkeypatch.setenv(k, str(v))

    import citypulse.config.settings as settings

    settings = importlib.reload(settings)
    return settings


def test_backend_settings_defaults(monkeypatch: pytest.MonkeyPatch):
    settings = _reload_settings_with_env(monkeypatch, {})

    assert settings.backend_settings.base_url == "http://localhost:3000"
    assert settings.backend_settings.snapshot_url == "http://localhost:3000/data/all"
    assert settings.backend_settings.live_url == "http://localhost:3000/data/live"
    assert settings.backend_settings.request_timeout == 5.0


def test_backend_settings_env_override(monkeypatch: pytest.MonkeyPatch):
    settings = _reload_settings_with_env(
        monkeypatch,
        {
            "BACKEND_BASE_URL": "http://dashboard-api:8080/",
            "BACKEND_SNAPSHOT_PATH": "v2/all",
            "BACKEND_REQUEST_TIMEOUT": "1.5",
        },
    )

    assert settings.backend_settings.snapshot_url == "http://dashboard-api:8080/v2/all"
    assert settings.backend_settings.request_timeout == 1.5


def test_sync_settings_defaults(monkeypatch: pytest.MonkeyPatch):
    settings = _reload_settings_with_env(monkeypatch, {})

    assert settings.sync_settings.debounce_ms == 1000
    assert settings.sync_settings.poll_interval_ms == 10_000
    assert settings.sync_settings.default_view_mode == "grid"


def test_sync_settings_env_override(monkeypatch: pytest.MonkeyPatch):
    settings = _reload_settings_with_env(
        monkeypatch,
        {
            "SYNC_DEBOUNCE_MS": "250",
            "SYNC_POLL_INTERVAL_MS": "3000",
            "SYNC_DEFAULT_VIEW_MODE": "list",
        },
    )

    assert settings.sync_settings.debounce_ms == 250
    assert settings.sync_settings.poll_interval_ms == 3000
    assert settings.sync_settings.default_view_mode == "list"


def test_sync_settings_reject_non_positive_interval(monkeypatch: pytest.MonkeyPatch):
    with pytest.raises(ValidationError):
        _reload_settings_with_env(monkeypatch, {"SYNC_POLL_INTERVAL_MS": "0"})
    # 다른 테스트를 위해 정상 값으로 다시 로드
    _reload_settings_with_env(monkeypatch, {})


def test_log_settings_env_override(monkeypatch: pytest.MonkeyPatch):
    settings = _reload_settings_with_env(monkeypatch, {"LOG_LEVEL": "DEBUG", "LOG_TO_FILE": "true"})
    assert settings.log_settings.level == "DEBUG"
    assert settings.log_settings.to_file is True
    _reload_settings_with_env(monkeypatch, {})
