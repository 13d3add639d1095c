from __future__ import annotations

from pathlib import Path

import pytest

from eventcompat.core.settings import Settings, load_settings


def test_missing_file_uses_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("EVENTCOMPAT_LOG_LEVEL", raising=False)
    monkeypatch.delenv("EVENTCOMPAT_API_PORT", raising=False)
    assert load_settings(tmp_path / "nope.yaml") == Settings()


def test_yaml_and_env_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    p = tmp_path / "settings.yaml"
    p.write_text("env: prod\nlogging:\n  level: warning\napi:\n  host: 127.0.0.1\n  port: 9000\n", encoding="utf-8")
    monkeypatch.delenv("EVENTCOMPAT_LOG_LEVEL", raising=False)
    monkeypatch.setenv("EVENTCOMPAT_API_PORT", "9100")

    s = load_settings(p)
    assert s.env == "prod"
    assert s.log_level == "WARNING"
    assert s.api_host == "127.0.0.1"
    assert s.api_port == 9100


def test_repo_settings_file_loads() -> None:
    s = load_settings(Path(__file__).resolve().parents[2] / "config" / "settings.yaml")
    assert s.env == "dev"
