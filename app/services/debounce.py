from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from functools import partial
from typing import TYPE_CHECKING, Literal, Protocol

from app.common.elements import PULSE_SLIDER
from app.common.values import clamp_pulse
from app.constants import PULSE_DEBOUNCE_S
from app.services.projection import project_pulse

if TYPE_CHECKING:
    from collections.abc import Callable

    from app.common.focus import FocusGuard
    from app.common.surface import Surface
    from app.services.device_client import DeviceClient
    from app.state import UiState

PendingStatus = Literal["pending", "fired", "cancelled"]

PULSE_CONTROL = "pulse"


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class LoopScheduler:
    """Schedule callbacks on the running asyncio loop."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        return asyncio.get_running_loop().call_later(delay, callback)


@dataclass
class PendingCommand:
    """One armed debounce timer: pending -> fired | pending -> cancelled."""

    control: str
    value: int
    action: Callable[[int], None]
    status: PendingStatus = "pending"
    handle: TimerHandle | None = field(default=None, repr=False)

    def cancel(self) -> bool:
        if self.status != "pending":
            return False
        self.status = "cancelled"
        if self.handle is not None:
            self.handle.cancel()
        return True

    def fire(self) -> bool:
        if self.status != "pending":
            return False
        self.status = "fired"
        self.action(self.value)
        return True


class Debouncer:
    """Trailing-edge debounce with at most one pending command per control."""

    def __init__(
        self, delay_s: float = PULSE_DEBOUNCE_S, scheduler: Scheduler | None = None
    ) -> None:
        self.delay_s = delay_s
        self.scheduler = scheduler or LoopScheduler()
        self._pending: dict[str, PendingCommand] = {}

    def pending(self, control: str) -> PendingCommand | None:
        return self._pending.get(control)

    def schedule(
        self, control: str, value: int, action: Callable[[int], None]
    ) -> PendingCommand:
        prev = self._pending.get(control)
        if prev is not None:
            prev.cancel()
        cmd = PendingCommand(control=control, value=value, action=action)
        cmd.handle = self.scheduler.call_later(self.delay_s, partial(self._fire, cmd))
        self._pending[control] = cmd
        return cmd

    def _fire(self, cmd: PendingCommand) -> None:
        if self._pending.get(cmd.control) is cmd:
            del self._pending[cmd.control]
        cmd.fire()

    def cancel_all(self) -> None:
        for cmd in list(self._pending.values()):
            cmd.cancel()
        self._pending.clear()


class CommandDebouncer:
    """Pulse slider / number field input: immediate UI update, debounced command."""

    def __init__(
        self,
        client: DeviceClient,
        ui_state: UiState,
        surface: Surface,
        guard: FocusGuard,
        debouncer: Debouncer | None = None,
    ) -> None:
        self.client = client
        self.ui_state = ui_state
        self.surface = surface
        self.guard = guard
        self.debouncer = debouncer or Debouncer()

    def submit_control_value(self, raw_input: object, source: str = PULSE_SLIDER) -> int:
        pulse = clamp_pulse(raw_input)
        project_pulse(self.ui_state, self.surface, self.guard, pulse, source=source)
        self.debouncer.schedule(PULSE_CONTROL, pulse, self._send_pulse)
        return pulse

    def _send_pulse(self, pulse: int) -> None:
        self.client.servo_pulse(pulse)
        logging.info("SERVO pulse=%s", pulse)
