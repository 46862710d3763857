"""Payloads returned by the device HTTP endpoints.

Only the fields the exporter reads are modelled; anything else a device
reports is ignored. A ``null`` in a modelled field reads as its default.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, ValidationInfo, field_validator


class WireModel(BaseModel):
    model_config = {"extra": "ignore", "populate_by_name": True}

    @field_validator("*", mode="before")
    @classmethod
    def _null_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None and info.field_name is not None:
            field = cls.model_fields[info.field_name]
            return field.get_default(call_default_factory=True)
        return value


class IdentifyResponse(WireModel):
    """``GET /identify``."""

    device_type: str = Field(default="", alias="type")
    mac: str = ""


class SettingsDevice(WireModel):
    name: str | None = None
    hostname: str | None = None


class DeviceSettings(WireModel):
    """``GET /settings``."""

    name: str | None = None
    hostname: str | None = None
    device: SettingsDevice | None = None


class Meter(WireModel):
    power: float = 0.0
    is_valid: bool = False


class StatusResponse(WireModel):
    """``GET /status``."""

    meters: list[Meter | None] | None = None

    def valid_meters(self) -> list[Meter]:
        return [meter for meter in self.meters or () if meter and meter.is_valid]
