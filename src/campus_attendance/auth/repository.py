from __future__ import annotations

from typing import Optional, Protocol

from .model import AdminPasswordConfig


class AdminConfigRepository(Protocol):
    def get(self) -> Optional[AdminPasswordConfig]:
        raise NotImplementedError

    def save(self, config: AdminPasswordConfig) -> None:
        """Overwrite the single config record."""
        raise NotImplementedError
