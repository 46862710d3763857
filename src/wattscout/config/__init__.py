from __future__ import annotations

from .durations import format_duration, parse_duration
from .paths import APP_NAME, CONFIG_FILENAME, default_config_path, expand_path
from .settings import (
    CONFIG_ENV_VAR,
    MetricsConfig,
    ScanningConfig,
    ServerConfig,
    Settings,
    apply_env_overrides,
    build_settings,
    get_settings,
    load_settings,
    parse_listen_address,
    render_settings_toml,
    resolve_config_path,
    write_settings,
)

__all__ = [
    "APP_NAME",
    "CONFIG_ENV_VAR",
    "CONFIG_FILENAME",
    "MetricsConfig",
    "ScanningConfig",
    "ServerConfig",
    "Settings",
    "apply_env_overrides",
    "build_settings",
    "default_config_path",
    "expand_path",
    "format_duration",
    "get_settings",
    "load_settings",
    "parse_duration",
    "parse_listen_address",
    "render_settings_toml",
    "resolve_config_path",
    "write_settings",
]
