from __future__ import annotations

from typing import TYPE_CHECKING

from app.common.elements import PULSE_INPUT, PULSE_SLIDER, PULSE_TEXT
from app.common.values import clamp_pulse

if TYPE_CHECKING:
    from app.common.focus import FocusGuard
    from app.common.surface import Surface
    from app.state import UiState


def project_pulse(
    ui_state: UiState,
    surface: Surface,
    guard: FocusGuard,
    pulse: object,
    source: str | None = None,
) -> int:
    """Write a pulse value into UiState, the readout, the slider and the number field.

    `source` is the element the value came from; it already shows the user's
    input and is left alone. The other pulse controls are focus-guarded.
    """
    value = clamp_pulse(pulse)
    ui_state.pulse = value
    surface.set_text(PULSE_TEXT, f"{value} us")
    for element_id in (PULSE_SLIDER, PULSE_INPUT):
        if element_id != source:
            guard.write_if_not_focused(element_id, value)
    return value
