"""
Bridge configuration.

The configuration names the bridge endpoint, the protocol variant to use and
the devices (one per zone) to expose. It can be built in code, from a mapping
or from a JSON file:

```json
{
    "bridge_host": "192.168.0.66",
    "bridge_port": 8899,
    "power_mode": "fixed_codes",
    "level_mode": "full_on",
    "power_on_delay": 0.1,
    "devices": [
        {"id": "living-room", "zone": 1, "name": "Living Room"}
    ]
}
```
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple, Union

from .codec import LevelMode, validate_zone
from .device import DEFAULT_POWER_ON_DELAY, PowerMode
from .exceptions import ConfigError
from .transport import DEFAULT_BRIDGE_HOST, DEFAULT_BRIDGE_PORT


DEFAULT_DEVICE_ID = "milight-adapter-0"


@dataclass(frozen=True)
class DeviceConfig:
    """
    A device to expose.

    Attributes:
        id: Unique device id.
        zone: Bridge zone (0-4).
        name: Optional human-readable name.
    """
    id: str
    zone: int = 0
    name: Optional[str] = None

    def __post_init__(self):
        """Validate the device entry."""
        if not self.id or not isinstance(self.id, str):
            raise ConfigError(f"Device id must be a non-empty string, got {self.id!r}")
        try:
            validate_zone(self.zone)
        except ValueError as e:
            raise ConfigError(f"Device {self.id}: {e}") from e


@dataclass(frozen=True)
class BridgeConfig:
    """
    Adapter configuration.

    Attributes:
        bridge_host: Bridge hostname or IP address.
        bridge_port: Bridge UDP port.
        power_mode: How ``on`` changes are encoded.
        level_mode: How a 100% level is encoded.
        power_on_delay: Seconds between an implicit power-on and a dim command.
        devices: Devices to create when the adapter starts.
    """
    bridge_host: str = DEFAULT_BRIDGE_HOST
    bridge_port: int = DEFAULT_BRIDGE_PORT
    power_mode: PowerMode = PowerMode.FIXED_CODES
    level_mode: LevelMode = LevelMode.FULL_ON
    power_on_delay: float = DEFAULT_POWER_ON_DELAY
    devices: Tuple[DeviceConfig, ...] = field(
        default_factory=lambda: (DeviceConfig(DEFAULT_DEVICE_ID),)
    )

    def __post_init__(self):
        """Validate the configuration."""
        if not self.bridge_host:
            raise ConfigError("bridge_host is required")
        if isinstance(self.bridge_port, bool) or not isinstance(self.bridge_port, int):
            raise ConfigError(f"bridge_port must be an int, got {self.bridge_port!r}")
        if not 0 < self.bridge_port < 65536:
            raise ConfigError(f"bridge_port out of range: {self.bridge_port}")
        if self.power_on_delay < 0:
            raise ConfigError(f"power_on_delay must not be negative, got {self.power_on_delay}")

        ids = [device.id for device in self.devices]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ConfigError(f"Duplicate device ids: {', '.join(duplicates)}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BridgeConfig":
        """
        Build a configuration from a mapping.

        Missing keys take their defaults.

        Args:
            data: Parsed configuration (e.g. from JSON).

        Returns:
            The validated configuration.

        Raises:
            ConfigError: If a value is missing, of the wrong type or invalid.
        """
        if not isinstance(data, Mapping):
            raise ConfigError("Configuration must be a mapping")

        kwargs: dict = {}
        if "bridge_host" in data:
            kwargs["bridge_host"] = data["bridge_host"]
        if "bridge_port" in data:
            kwargs["bridge_port"] = data["bridge_port"]

        try:
            if "power_mode" in data:
                kwargs["power_mode"] = PowerMode(data["power_mode"])
            if "level_mode" in data:
                kwargs["level_mode"] = LevelMode(data["level_mode"])
        except ValueError as e:
            raise ConfigError(str(e)) from e

        if "power_on_delay" in data:
            try:
                kwargs["power_on_delay"] = float(data["power_on_delay"])
            except (TypeError, ValueError) as e:
                raise ConfigError(f"Invalid power_on_delay: {data['power_on_delay']!r}") from e

        if "devices" in data:
            entries = data["devices"]
            if not isinstance(entries, list):
                raise ConfigError("devices must be a list")
            devices = []
            for entry in entries:
                if not isinstance(entry, Mapping) or "id" not in entry:
                    raise ConfigError(f"Invalid device entry: {entry!r}")
                devices.append(DeviceConfig(
                    id=entry["id"],
                    zone=entry.get("zone", 0),
                    name=entry.get("name"),
                ))
            kwargs["devices"] = tuple(devices)

        return cls(**kwargs)

    @classmethod
    def load(cls, path: Union[str, Path]) -> "BridgeConfig":
        """
        Load a configuration from a JSON file.

        Args:
            path: Path to the JSON file.

        Returns:
            The validated configuration.

        Raises:
            ConfigError: If the file cannot be read or is invalid.
        """
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Cannot load configuration from {path}: {e}") from e
        return cls.from_dict(data)
