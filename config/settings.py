"""
Configuration loader for the PressNotifier system.
Reads settings from YAML file with environment variable substitution.
"""
from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml


@dataclass
class RepositoryConfig:
    backend: str = "contentful"                        # "contentful" | "memory"
    space_id: str = ""
    environment: str = "master"
    access_token: str = ""
    base_url: str = "https://api.contentful.com"
    timeout: float = 30.0
    page_size: int = 100
    seed_file: str = ""                                # memory backend only


@dataclass
class ChannelConfig:
    backend: str = "slack"                             # "slack" | "memory"
    token: str = ""
    base_url: str = "https://slack.com/api"
    timeout: float = 10.0


@dataclass
class Settings:
    app_name: str = "PressNotifier"
    debug: bool = False
    repository: RepositoryConfig = field(default_factory=RepositoryConfig)
    channel: ChannelConfig = field(default_factory=ChannelConfig)


_settings: Optional[Settings] = None


def _substitute_env_vars(value: str) -> str:
    """Replace ${VAR_NAME} patterns with environment variable values."""
    pattern = re.compile(r'\$\{(\w+)\}')
    def replacer(match):
        var_name = match.group(1)
        return os.environ.get(var_name, match.group(0))
    return pattern.sub(replacer, value)


def _process_values(obj: Any) -> Any:
    """Recursively substitute env vars in all string values."""
    if isinstance(obj, str):
        return _substitute_env_vars(obj)
    elif isinstance(obj, dict):
        return {k: _process_values(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_process_values(v) for v in obj]
    return obj


def load_settings(config_path: str = None) -> Settings:
    """Load settings from YAML file."""
    global _settings

    if config_path is None:
        config_path = os.environ.get(
            "PRESS_NOTIFIER_CONFIG",
            str(Path(__file__).parent / "settings.yaml"),
        )

    settings = Settings()

    if Path(config_path).exists():
        with open(config_path) as f:
            raw = yaml.safe_load(f) or {}
        raw = _process_values(raw)

        settings.app_name = raw.get("app_name", settings.app_name)
        settings.debug = raw.get("debug", settings.debug)

        if "repository" in raw:
            repo = raw["repository"] or {}
            defaults = RepositoryConfig()
            settings.repository = RepositoryConfig(
                backend=repo.get("backend", defaults.backend),
                space_id=repo.get("space_id", ""),
                environment=repo.get("environment", defaults.environment),
                access_token=repo.get("access_token", ""),
                base_url=repo.get("base_url", defaults.base_url),
                timeout=float(repo.get("timeout", defaults.timeout)),
                page_size=int(repo.get("page_size", defaults.page_size)),
                seed_file=repo.get("seed_file", ""),
            )

        if "channel" in raw:
            ch = raw["channel"] or {}
            defaults = ChannelConfig()
            settings.channel = ChannelConfig(
                backend=ch.get("backend", defaults.backend),
                token=ch.get("token", ""),
                base_url=ch.get("base_url", defaults.base_url),
                timeout=float(ch.get("timeout", defaults.timeout)),
            )

    _settings = settings
    return settings


def get_settings() -> Settings:
    """Return cached settings or load from default path."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings
