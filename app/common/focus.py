from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

    from app.common.surface import Surface


class FocusGuard:
    """Skip programmatic writes to a field while the user has it focused.

    `is_focused` is consulted on every call; a skipped write is dropped, not
    queued. The next poll or input event writes again.
    """

    def __init__(self, surface: Surface, is_focused: Callable[[str], bool]) -> None:
        self.surface = surface
        self.is_focused = is_focused

    def write_if_not_focused(self, element_id: str, value: Any) -> bool:
        if self.is_focused(element_id):
            logging.debug("Skip write to focused %s", element_id)
            return False
        self.surface.set_value(element_id, value)
        return True
