from __future__ import annotations

import logging
from typing import Any, Protocol

from nicegui import ui

from app.common.elements import EDITABLE
from app.common.logging_config import TRACE, trace_enabled


class Surface(Protocol):
    """Write-side view of the control page, addressed by element id."""

    def set_text(self, element_id: str, text: str) -> None: ...

    def set_value(self, element_id: str, value: Any) -> None: ...

    def set_width(self, element_id: str, percent: float) -> None: ...

    def get_value(self, element_id: str) -> Any: ...


class NiceGuiSurface:
    """Surface backed by registered NiceGUI elements.

    Editable elements report focus/blur back to the server so that
    `is_focused` mirrors the browser's active element.
    """

    def __init__(self) -> None:
        self._elements: dict[str, ui.element] = {}
        self._focused: set[str] = set()

    def register(self, element_id: str, element: ui.element) -> ui.element:
        self._elements[element_id] = element
        element.mark(element_id)
        if element_id in EDITABLE:
            element.on("focus", lambda _e, i=element_id: self._set_focus(i, True))
            element.on("blur", lambda _e, i=element_id: self._set_focus(i, False))
        return element

    def _set_focus(self, element_id: str, focused: bool) -> None:
        if focused:
            self._focused.add(element_id)
        else:
            self._focused.discard(element_id)
        if trace_enabled():
            logging.log(TRACE, "Focus %s=%s", element_id, focused)

    def is_focused(self, element_id: str) -> bool:
        return element_id in self._focused

    def set_text(self, element_id: str, text: str) -> None:
        el = self._elements.get(element_id)
        if el is not None:
            el.text = text  # type: ignore[attr-defined]

    def set_value(self, element_id: str, value: Any) -> None:
        el = self._elements.get(element_id)
        if el is not None:
            el.value = value  # type: ignore[attr-defined]

    def set_width(self, element_id: str, percent: float) -> None:
        el = self._elements.get(element_id)
        if el is not None:
            el.style(f"width: {percent}%")

    def get_value(self, element_id: str) -> Any:
        el = self._elements.get(element_id)
        return getattr(el, "value", None) if el is not None else None
