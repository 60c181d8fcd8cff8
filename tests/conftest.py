from __future__ import annotations

import pytest

from app.common.focus import FocusGuard
from app.services.debounce import CommandDebouncer, Debouncer
from app.state import UiState
from tests.utils.fakes import FakeSurface, ManualScheduler, RecordingClient

pytest_plugins = ["nicegui.testing.user_plugin"]

STATUS_PAYLOAD = {
    "angle": 45,
    "raw": 1234,
    "cal": 12.3,
    "min": 800,
    "max": 3100,
    "pulse": 1600,
    "servoMinUs": 500,
    "servoMaxUs": 2500,
    "servoZeroUs": 1500,
    "wifi": True,
    "ip": "192.168.4.1",
    "clients": 1,
    "calibrating": False,
}


@pytest.fixture
def status_payload() -> dict:
    """A full /api/status body; tests copy and tweak it."""
    return dict(STATUS_PAYLOAD)


@pytest.fixture
def surface() -> FakeSurface:
    return FakeSurface()


@pytest.fixture
def guard(surface: FakeSurface) -> FocusGuard:
    return FocusGuard(surface, surface.is_focused)


@pytest.fixture
def ui_state() -> UiState:
    return UiState()


@pytest.fixture
def recorder() -> RecordingClient:
    return RecordingClient()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def pulse_debouncer(
    recorder: RecordingClient,
    ui_state: UiState,
    surface: FakeSurface,
    guard: FocusGuard,
    scheduler: ManualScheduler,
) -> CommandDebouncer:
    """Pulse control wired to the recording client and the manual clock (120 ms window)."""
    return CommandDebouncer(
        recorder, ui_state, surface, guard, Debouncer(delay_s=0.12, scheduler=scheduler)
    )
