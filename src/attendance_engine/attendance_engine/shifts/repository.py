from __future__ import annotations

from typing import Optional, Protocol

from .model import ShiftDefinition


class ShiftRepository(Protocol):
    def get_for_user(self, user_id: int) -> Optional[ShiftDefinition]:
        """Shift currently assigned to the user, if any."""

        raise NotImplementedError
