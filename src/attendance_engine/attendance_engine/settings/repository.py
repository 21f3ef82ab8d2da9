from __future__ import annotations

from typing import Mapping, Optional, Protocol


class SettingsRepository(Protocol):
    def get_value(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def get_all(self) -> Mapping[str, str]:
        raise NotImplementedError

    def set_value(self, key: str, value: str) -> None:
        raise NotImplementedError
