"""wattscout - discover network power meters and export their readings to Prometheus."""

from __future__ import annotations

from importlib.metadata import version

from .config import MetricsConfig, ScanningConfig, ServerConfig, Settings, get_settings
from .models import DeviceRecord, PowerLabels

__all__ = [
    "DeviceRecord",
    "MetricsConfig",
    "PowerLabels",
    "ScanningConfig",
    "ServerConfig",
    "Settings",
    "__version__",
    "get_settings",
]

__version__ = version("wattscout")
