from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

import os

import yaml


@dataclass(frozen=True)
class Settings:
    env: str = "dev"
    log_level: str = "INFO"
    api_host: str = "0.0.0.0"
    api_port: int = 8000


def load_settings(path: str | Path = "config/settings.yaml") -> Settings:
    p = Path(path)

    data: Dict[str, Any] = {}
    if p.exists():
        data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}

    # Env overrides (container deployments set these instead of shipping YAML).
    env_log_level = os.getenv("EVENTCOMPAT_LOG_LEVEL")
    env_api_port = os.getenv("EVENTCOMPAT_API_PORT")

    defaults = Settings()
    api_section = data.get("api", {}) or {}
    logging_section = data.get("logging", {}) or {}
    return Settings(
        env=data.get("env", defaults.env),
        log_level=str(env_log_level or logging_section.get("level") or defaults.log_level).upper(),
        api_host=api_section.get("host", defaults.api_host),
        api_port=int(env_api_port or api_section.get("port", defaults.api_port)),
    )
