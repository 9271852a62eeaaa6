from __future__ import annotations

import json
import os
import tomllib
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator

from .paths import default_config_path, default_data_dir, expand_path

CONFIG_ENV_VAR = "LANSEARCH_CONFIG"

PRIORITY_SOURCES = ("freebox", "unifi", "scanner")
DEFAULT_PRIORITY = list(PRIORITY_SOURCES)


class DatabaseConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    path: str = Field(default_factory=lambda: str(default_data_dir()))


class SearchConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    plugin_timeout: float = Field(default=5.0, gt=0)
    case_sensitive: bool = False
    exact_match: bool = True


class PingConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    count: int = Field(default=3, ge=1, le=10)
    delay: float = Field(default=0.2, ge=0)
    timeout: float = Field(default=2.0, gt=0)
    command: str = "ping"


class PriorityConfig(BaseModel):
    """Which source wins when several report a hostname or vendor."""

    model_config = {"frozen": True, "extra": "forbid"}

    hostname: list[str] = Field(default_factory=lambda: list(DEFAULT_PRIORITY))
    vendor: list[str] = Field(default_factory=lambda: list(DEFAULT_PRIORITY))
    overwrite_hostname: bool = True
    overwrite_vendor: bool = True

    @field_validator("hostname", "vendor")
    @classmethod
    def _complete_order(cls, value: list[str]) -> list[str]:
        if len(set(value)) != len(value):
            raise ValueError("priority list contains duplicates")
        missing = [source for source in PRIORITY_SOURCES if source not in value]
        if missing:
            names = ", ".join(missing)
            raise ValueError(f"priority list is missing sources: {names}")
        return value

    def order(self, field: str) -> list[str]:
        return list(getattr(self, field))

    def overwrite(self, field: str) -> bool:
        return bool(getattr(self, f"overwrite_{field}"))


class PluginsConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    enabled: list[str] = Field(default_factory=lambda: list(PRIORITY_SOURCES))


class Settings(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    ping: PingConfig = Field(default_factory=PingConfig)
    priority: PriorityConfig = Field(default_factory=PriorityConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)


def resolve_config_path(allow_missing: bool = False) -> tuple[Path, bool]:
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        path = expand_path(env_path)
        if not allow_missing and not path.exists():
            raise FileNotFoundError(f"{CONFIG_ENV_VAR} points to missing file: {path}")
        return path, path.exists()

    path = default_config_path()
    return path, path.exists()


def load_settings(path: Path) -> Settings:
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Invalid TOML in config file: {path}\n{exc}") from exc

    try:
        return Settings.model_validate(data or {})
    except ValidationError as exc:
        raise ValueError(f"Invalid config file: {path}\n{exc}") from exc


@lru_cache
def get_settings() -> Settings:
    path, exists = resolve_config_path(allow_missing=False)
    if exists:
        return load_settings(path)
    return Settings()


def data_dir_from_settings(settings: Settings) -> Path:
    return expand_path(settings.database.path)


def _toml_value(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return json.dumps(value)


def render_settings_toml(settings: Settings) -> str:
    lines = ["# lansearch configuration", ""]
    for section, model in (
        ("database", settings.database),
        ("search", settings.search),
        ("ping", settings.ping),
        ("priority", settings.priority),
        ("plugins", settings.plugins),
    ):
        lines.append(f"[{section}]")
        for key, value in model.model_dump().items():
            lines.append(f"{key} = {_toml_value(value)}")
        lines.append("")
    return "\n".join(lines)


def write_settings(settings: Settings, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_settings_toml(settings))
