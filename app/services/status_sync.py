from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx

from app.common import elements as el
from app.common.logging_config import TRACE, trace_enabled
from app.common.values import clamp_fill, show
from app.services.projection import project_pulse

if TYPE_CHECKING:
    from app.common.focus import FocusGuard
    from app.common.surface import Surface
    from app.services.device_client import DeviceClient
    from app.state import DeviceStatus, UiState


class StatusSynchronizer:
    """Poll /api/status and project the snapshot onto the page.

    Editable fields are written through the focus guard so a poll never
    overwrites a field the user is editing. A failed poll only turns the
    WiFi indicator off; everything else keeps its last value.
    """

    def __init__(
        self,
        client: DeviceClient,
        ui_state: UiState,
        surface: Surface,
        guard: FocusGuard,
    ) -> None:
        self.client = client
        self.ui_state = ui_state
        self.surface = surface
        self.guard = guard

    async def poll(self) -> DeviceStatus | None:
        try:
            status = await self.client.fetch_status()
        except (httpx.HTTPError, ValueError, TypeError) as e:
            logging.debug("Status poll failed: %s", e)
            self.surface.set_text(el.WIFI_TEXT, "WiFi: OFF")
            return None
        if trace_enabled():
            logging.log(TRACE, "Status %s", status)
        self.apply(status)
        return status

    def apply(self, s: DeviceStatus) -> None:
        surface = self.surface

        # Angle
        if s.angle is not None:
            self.ui_state.angle = s.angle
            self.guard.write_if_not_focused(el.ANGLE_SLIDER, s.angle)
        surface.set_text(el.ANGLE_TEXT, f"{show(s.angle)} deg")

        # Sensor and calibration bounds
        surface.set_text(el.RAW_TEXT, f"raw: {show(s.raw)}")
        cal_text = "-" if s.cal is None else f"{s.cal:.1f}"
        surface.set_text(el.CAL_TEXT, f"cal: {cal_text}%")
        surface.set_text(el.MIN_TEXT, show(s.min))
        surface.set_text(el.MAX_TEXT, show(s.max))
        surface.set_text(el.RANGE_TEXT, f"min: {show(s.min)} | max: {show(s.max)}")
        surface.set_width(el.CAL_FILL, clamp_fill(s.cal))

        # Network
        surface.set_text(el.PULSE_STATUS_TEXT, f"pulse: {show(s.pulse)} us")
        surface.set_text(el.WIFI_TEXT, "WiFi: ON" if s.wifi else "WiFi: OFF")
        surface.set_text(el.IP_TEXT, f"IP: {show(s.ip)}")
        surface.set_text(el.CLIENTS_TEXT, f"Clients: {show(s.clients)}")

        # Server pulse is authoritative (e.g. after a zero command)
        if s.pulse is not None:
            project_pulse(self.ui_state, surface, self.guard, s.pulse)

        # Servo limits
        for element_id, value in (
            (el.SERVO_MIN_INPUT, s.servo_min_us),
            (el.SERVO_MAX_INPUT, s.servo_max_us),
            (el.SERVO_ZERO_INPUT, s.servo_zero_us),
        ):
            if value is not None:
                self.guard.write_if_not_focused(element_id, value)
        surface.set_text(
            el.SERVO_RANGE_TEXT,
            f"range: {show(s.servo_min_us)}-{show(s.servo_max_us)}",
        )

        if s.calibrating:
            surface.set_text(el.CAL_STATE_TEXT, "Calibrating")
            surface.set_text(el.NOTICE_TEXT, "Calibration running")
        else:
            surface.set_text(el.CAL_STATE_TEXT, "Idle")
            surface.set_text(el.NOTICE_TEXT, "Calibration idle")
