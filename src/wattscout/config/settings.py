from __future__ import annotations

import json
import os
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from .durations import format_duration, parse_duration
from .paths import default_config_path, expand_path

CONFIG_ENV_VAR = "WATTSCOUT_CONFIG"

NETWORK_ENV_VAR = "NETWORK_RANGE"
DISCOVERY_INTERVAL_ENV_VAR = "DISCOVERY_INTERVAL"
METRICS_INTERVAL_ENV_VAR = "METRICS_INTERVAL"
HTTP_PORT_ENV_VAR = "HTTP_PORT"


class ScanningConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    network: str = "10.10.10.0/24"
    interval: float = Field(default=60.0, gt=0)
    timeout: float = Field(default=2.0, gt=0)

    @field_validator("interval", "timeout", mode="before")
    @classmethod
    def _parse_duration(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_duration(value)
        return value


class MetricsConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    interval: float = Field(default=10.0, gt=0)
    timeout: float = Field(default=5.0, gt=0)
    startup_delay: float = Field(default=5.0, ge=0)

    @field_validator("interval", "timeout", "startup_delay", mode="before")
    @classmethod
    def _parse_duration(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_duration(value)
        return value


class ServerConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    host: str = ""
    port: int = Field(default=8080, ge=1, le=65535)


class Settings(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    scanning: ScanningConfig = Field(default_factory=ScanningConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)


def parse_listen_address(value: str) -> tuple[str, int]:
    """Split ``":8080"``, ``"8080"`` or ``"host:8080"`` into host and port."""
    text = value.strip()
    host, _, port_text = text.rpartition(":")
    try:
        port = int(port_text)
    except ValueError as exc:
        raise ValueError(f"Invalid listen address: {value!r}") from exc
    return host, port


def resolve_config_path(allow_missing: bool = False) -> tuple[Path, bool]:
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        path = expand_path(env_path)
        if not allow_missing and not path.exists():
            raise FileNotFoundError(f"{CONFIG_ENV_VAR} points to missing file: {path}")
        return path, path.exists()

    path = default_config_path()
    return path, path.exists()


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Invalid TOML in config file: {path}\n{exc}") from exc


def apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay the process environment on raw settings data.

    Empty variables count as unset.
    """
    merged = {
        section: dict(values) if isinstance(values, dict) else values
        for section, values in data.items()
    }

    def _set(section: str, key: str, value: Any) -> None:
        merged.setdefault(section, {})[key] = value

    if network := os.environ.get(NETWORK_ENV_VAR):
        _set("scanning", "network", network)
    if interval := os.environ.get(DISCOVERY_INTERVAL_ENV_VAR):
        _set("scanning", "interval", interval)
    if interval := os.environ.get(METRICS_INTERVAL_ENV_VAR):
        _set("metrics", "interval", interval)
    if listen := os.environ.get(HTTP_PORT_ENV_VAR):
        host, port = parse_listen_address(listen)
        _set("server", "port", port)
        if host:
            _set("server", "host", host)
    return merged


def build_settings(data: dict[str, Any], source: str = "environment") -> Settings:
    try:
        return Settings.model_validate(apply_env_overrides(data))
    except ValidationError as exc:
        raise ValueError(f"Invalid configuration ({source}):\n{exc}") from exc


def load_settings(path: Path) -> Settings:
    return build_settings(_read_toml(path) or {}, source=str(path))


@lru_cache
def get_settings() -> Settings:
    path, exists = resolve_config_path(allow_missing=False)
    if exists:
        return load_settings(path)
    return build_settings({})


def _toml_string(value: str) -> str:
    return json.dumps(value)


def render_settings_toml(settings: Settings) -> str:
    scanning = settings.scanning
    metrics = settings.metrics
    lines = [
        "# wattscout configuration",
        "",
        "[scanning]",
        f"network = {_toml_string(scanning.network)}",
        f"interval = {_toml_string(format_duration(scanning.interval))}",
        f"timeout = {_toml_string(format_duration(scanning.timeout))}",
        "",
        "[metrics]",
        f"interval = {_toml_string(format_duration(metrics.interval))}",
        f"timeout = {_toml_string(format_duration(metrics.timeout))}",
        f"startup_delay = {_toml_string(format_duration(metrics.startup_delay))}",
        "",
        "[server]",
        f"host = {_toml_string(settings.server.host)}",
        f"port = {settings.server.port}",
        "",
    ]
    return "\n".join(lines)


def write_settings(settings: Settings, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_settings_toml(settings))
