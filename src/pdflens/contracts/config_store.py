from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pdflens.config import Config


class ConfigStore(ABC):
    """Load and persist settings snapshots."""

    @abstractmethod
    def load(self) -> Config:
        """Return the stored settings, or defaults if none exist."""
        raise NotImplementedError

    @abstractmethod
    def save(self, config: Config) -> None:
        """Persist *config*. Raises ``ConfigError`` on failure."""
        raise NotImplementedError
