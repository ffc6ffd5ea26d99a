from __future__ import annotations

import logging
from typing import Union

from pydantic import BaseModel, ConfigDict, Field

from pdflens.contracts import ConfigStore

logger = logging.getLogger(__name__)

ConfigValue = Union[bool, int, float, str]


class ConfigParam(BaseModel):
    """Declaration of one tunable exposed by an analyzer or output module."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    key: str
    label: str
    default: ConfigValue
    description: str

    def accepts(self, value: ConfigValue) -> bool:
        """True if *value* narrows to the type of :attr:`default`."""
        if isinstance(self.default, bool):
            return as_bool(value) is not None
        if isinstance(self.default, int):
            return as_int(value) is not None
        if isinstance(self.default, float):
            return as_float(value) is not None
        return as_str(value) is not None


class Config(BaseModel):
    """Loosely typed settings snapshot, keyed by module id then parameter key.

    Values stay untyped here; modules narrow them with :func:`as_bool`,
    :func:`as_float`, :func:`as_int` and :func:`as_str` when the snapshot is
    applied.
    """

    model_config = ConfigDict(extra="forbid")

    analyzers: dict[str, dict[str, ConfigValue]] = Field(default_factory=dict)
    outputs: dict[str, dict[str, ConfigValue]] = Field(default_factory=dict)

    def get_analyzer_value(self, analyzer_id: str, key: str) -> ConfigValue | None:
        return self.analyzers.get(analyzer_id, {}).get(key)

    def set_analyzer_value(
        self, analyzer_id: str, key: str, value: ConfigValue
    ) -> None:
        self.analyzers.setdefault(analyzer_id, {})[key] = value

    def get_output_value(self, output_id: str, key: str) -> ConfigValue | None:
        return self.outputs.get(output_id, {}).get(key)

    def set_output_value(self, output_id: str, key: str, value: ConfigValue) -> None:
        self.outputs.setdefault(output_id, {})[key] = value

    def snapshot(self) -> Config:
        """Return a deep copy that later ``set_*`` calls cannot affect."""
        return self.model_copy(deep=True)


def as_bool(value: ConfigValue | None) -> bool | None:
    return value if isinstance(value, bool) else None


def as_int(value: ConfigValue | None) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def as_float(value: ConfigValue | None) -> float | None:
    # ints are accepted so that "cost_bw = 1" in a settings file still applies
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def as_str(value: ConfigValue | None) -> str | None:
    return value if isinstance(value, str) else None


def parse_config_value(text: str) -> ConfigValue:
    """Parse a command-line literal into the narrowest matching ConfigValue."""
    lowered = text.strip().lower()
    if lowered in ("true", "yes", "on"):
        return True
    if lowered in ("false", "no", "off"):
        return False
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return text


class InMemoryConfigStore(ConfigStore):
    """ConfigStore that keeps settings for the lifetime of the process only."""

    def __init__(self, initial: Config | None = None) -> None:
        self._config = initial.snapshot() if initial is not None else Config()

    def load(self) -> Config:
        return self._config.snapshot()

    def save(self, config: Config) -> None:
        logger.debug("Storing settings in memory.")
        self._config = config.snapshot()
