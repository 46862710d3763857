"""Mock power meter for development and testing."""

from __future__ import annotations

import asyncio
import json
import logging
import random
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from asyncio import StreamReader, StreamWriter

logger = logging.getLogger(__name__)

REASONS = {200: "OK", 400: "Bad Request", 404: "Not Found", 405: "Method Not Allowed"}


@dataclass
class MockPowerMeter:
    """Minimal HTTP server answering /identify, /settings and /status."""

    device_type: str = "SHPLG-S"
    mac: str = "AABBCCDDEEFF"
    name: str = "Mock Plug"
    hostname: str = ""
    power: float = 42.0
    jitter: float = 0.0
    meter_valid: bool = True
    host: str = "127.0.0.1"
    port: int = 8081

    _server: asyncio.Server | None = field(default=None, repr=False)

    @property
    def bound_port(self) -> int:
        """Listening port, useful when started with ``port=0``."""
        if self._server is None or not self._server.sockets:
            return self.port
        return int(self._server.sockets[0].getsockname()[1])

    async def start(self) -> None:
        self._server = await asyncio.start_server(
            self._handle_client, self.host, self.port
        )
        logger.info(
            "Mock device '%s' listening on %s:%d", self.name, self.host, self.bound_port
        )

    async def stop(self) -> None:
        if self._server:
            self._server.close()
            await self._server.wait_closed()
            logger.info("Mock device '%s' stopped", self.name)

    async def run_forever(self) -> None:
        await self.start()
        if self._server:
            await self._server.serve_forever()

    def identify_payload(self) -> dict[str, Any]:
        return {
            "type": self.device_type,
            "mac": self.mac,
            "auth": False,
            "fw": "mock-1.0.0",
            "num_outputs": 1,
            "num_meters": 1,
        }

    def settings_payload(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "hostname": self.hostname,
            "device": {
                "type": self.device_type,
                "mac": self.mac,
                "hostname": self.hostname,
            },
        }

    def status_payload(self) -> dict[str, Any]:
        power = self.power
        if self.jitter:
            power = max(0.0, power + random.uniform(-self.jitter, self.jitter))
        return {
            "meters": [
                {
                    "power": round(power, 2),
                    "is_valid": self.meter_valid,
                    "timestamp": int(time.time()),
                    "counters": [round(power, 3), 0.0, 0.0],
                }
            ],
            "relays": [{"ison": power > 0, "has_timer": False, "overpower": False}],
        }

    def route(self, method: str, path: str) -> tuple[int, dict[str, Any] | None]:
        if method != "GET":
            return 405, None
        routes = {
            "/identify": self.identify_payload,
            "/settings": self.settings_payload,
            "/status": self.status_payload,
        }
        handler = routes.get(path.split("?", 1)[0])
        if handler is None:
            return 404, None
        return 200, handler()

    async def _handle_client(
        self, reader: "StreamReader", writer: "StreamWriter"
    ) -> None:
        try:
            request_line = await reader.readline()
            # Drain headers; requests carry no body.
            while (line := await reader.readline()) not in (b"\r\n", b"\n", b""):
                pass

            parts = request_line.decode("latin-1").split()
            if len(parts) < 2:
                status, payload = 400, None
            else:
                status, payload = self.route(parts[0], parts[1])
                logger.debug("%s %s -> %d", parts[0], parts[1], status)

            body = json.dumps(payload).encode() if payload is not None else b""
            headers = [
                f"HTTP/1.0 {status} {REASONS[status]}",
                "Content-Type: application/json",
                f"Content-Length: {len(body)}",
                "Connection: close",
                "",
                "",
            ]
            writer.write("\r\n".join(headers).encode("latin-1") + body)
            await writer.drain()
        except (ConnectionResetError, BrokenPipeError):
            logger.debug("Client disconnected")
        finally:
            writer.close()
            await writer.wait_closed()


async def run_mock_device(
    port: int = 8081,
    host: str = "0.0.0.0",
    device_type: str = "SHPLG-S",
    mac: str = "AABBCCDDEEFF",
    name: str = "Mock Plug",
    power: float = 42.0,
    jitter: float = 5.0,
) -> None:
    device = MockPowerMeter(
        device_type=device_type,
        mac=mac,
        name=name,
        power=power,
        jitter=jitter,
        host=host,
        port=port,
    )
    await device.run_forever()
