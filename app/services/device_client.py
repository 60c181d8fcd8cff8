from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from app.common.values import clamp_pulse
from app.constants import (
    CALIBRATE_COMMANDS,
    DEVICE_URL,
    REQUEST_TIMEOUT_S,
    SERVO_COMMANDS,
)
from app.state import DeviceStatus


class DeviceClient:
    """HTTP client for the servo unit.

    Only `fetch_status` reads a response. Every command goes through `send`,
    which schedules the request and returns at once; failures are dropped.
    """

    def __init__(
        self,
        base_url: str = DEVICE_URL,
        timeout: float = REQUEST_TIMEOUT_S,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._http = httpx.AsyncClient(
            base_url=base_url, timeout=timeout, transport=transport
        )
        self._inflight: set[asyncio.Task] = set()

    @property
    def base_url(self) -> str:
        return str(self._http.base_url)

    @base_url.setter
    def base_url(self, url: str) -> None:
        self._http.base_url = url

    # ---- Status ----

    async def fetch_status(self) -> DeviceStatus:
        """GET /api/status. Raises httpx.HTTPError or ValueError on failure."""
        resp = await self._http.get("/api/status")
        resp.raise_for_status()
        return DeviceStatus.from_payload(resp.json())

    # ---- Send-and-ignore ----

    def send(self, path: str, params: dict[str, Any]) -> None:
        task = asyncio.create_task(self._get_and_ignore(path, params))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    async def _get_and_ignore(self, path: str, params: dict[str, Any]) -> None:
        try:
            await self._http.get(path, params=params)
        except httpx.HTTPError as e:
            logging.debug("Command %s %s dropped: %s", path, params, e)

    async def drain(self) -> None:
        """Wait for commands already sent to finish."""
        if self._inflight:
            await asyncio.gather(*list(self._inflight), return_exceptions=True)

    async def aclose(self) -> None:
        await self.drain()
        await self._http.aclose()

    # ---- Commands ----

    def set_angle(self, angle: int) -> None:
        self.send("/api/set", {"angle": int(angle)})

    def calibrate(self, cmd: str) -> None:
        if cmd not in CALIBRATE_COMMANDS:
            raise ValueError(f"Unknown calibrate command: {cmd}")
        self.send("/api/calibrate", {"cmd": cmd})

    def servo_pulse(self, pulse: int) -> None:
        self.send("/api/servo", {"pulse": int(pulse)})

    def servo_command(self, cmd: str) -> None:
        """zero / reset. Use servo_save for save."""
        if cmd not in SERVO_COMMANDS or cmd == "save":
            raise ValueError(f"Unknown servo command: {cmd}")
        self.send("/api/servo", {"cmd": cmd})

    def servo_save(self, min_us: Any, max_us: Any, zero_us: Any) -> None:
        self.send(
            "/api/servo",
            {
                "cmd": "save",
                "min": clamp_pulse(min_us),
                "max": clamp_pulse(max_us),
                "zero": clamp_pulse(zero_us),
            },
        )


# Module-level singleton instance
client = DeviceClient()
