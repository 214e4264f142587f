"""Client configuration for pygear."""

from __future__ import annotations

import dataclasses
import os
from pathlib import Path
from typing import Any

from pygear.exceptions import GearConfigError

EQUIPMENT_KEY = "sound_equip_db_v1"
NOTIFICATIONS_KEY = "sound_equip_notifications_v1"


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_float(env_key: str, value: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise GearConfigError(f"{env_key} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class GearConfig:
    """Client configuration.

    Parameters
    ----------
    storage_path : Path or None
        JSON file backing the key-value namespace. ``None`` keeps
        everything in memory for the lifetime of the client.
    equipment_key : str
        Key holding the serialized equipment collection.
    notifications_key : str
        Key holding the serialized notification collection.
    read_delay : float
        Artificial latency in seconds awaited before listing equipment.
    write_delay : float
        Artificial latency in seconds awaited before each mutation.
    poll_interval : float
        Seconds between two refreshes of the polling loop.
    seed_demo_data : bool
        Seed the four demo records the first time an empty store is listed.
    """

    storage_path: Path | None = None
    equipment_key: str = EQUIPMENT_KEY
    notifications_key: str = NOTIFICATIONS_KEY
    read_delay: float = 0.3
    write_delay: float = 0.2
    poll_interval: float = 5.0
    seed_demo_data: bool = True

    def __post_init__(self) -> None:
        if self.storage_path is not None and not isinstance(self.storage_path, Path):
            object.__setattr__(self, "storage_path", Path(self.storage_path))
        if self.read_delay < 0 or self.write_delay < 0:
            raise GearConfigError("read_delay and write_delay must not be negative")
        if self.poll_interval <= 0:
            raise GearConfigError("poll_interval must be positive")
        if not self.equipment_key or not self.notifications_key:
            raise GearConfigError("storage keys must be non-empty")
        if self.equipment_key == self.notifications_key:
            raise GearConfigError("equipment_key and notifications_key must differ")

    @classmethod
    def from_env(cls, **overrides: Any) -> GearConfig:
        """Create configuration from environment variables.

        Reads optional ``GEAR_*`` variables. Explicit keyword arguments
        override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        GearConfig
            Populated configuration.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        _ENV_STR_MAP = {
            "GEAR_EQUIPMENT_KEY": "equipment_key",
            "GEAR_NOTIFICATIONS_KEY": "notifications_key",
        }
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        path_env = env.get("GEAR_STORAGE_PATH")
        if path_env:
            config_kwargs["storage_path"] = Path(path_env).expanduser()

        _ENV_FLOAT_MAP = {
            "GEAR_READ_DELAY": "read_delay",
            "GEAR_WRITE_DELAY": "write_delay",
            "GEAR_POLL_INTERVAL": "poll_interval",
        }
        for env_key, field_name in _ENV_FLOAT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _env_float(env_key, val)

        if "seed_demo_data" not in overrides:
            config_kwargs["seed_demo_data"] = _env_bool(env.get("GEAR_SEED_DEMO_DATA"), True)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
