"""
Exceptions raised by libmilight.

Argument and state errors use the built-in ``ValueError`` and
``RuntimeError``; the classes here cover the device registry and
configuration loading.
"""


class MiLightError(Exception):
    """Base class for libmilight errors."""


class DeviceAlreadyExistsError(MiLightError, ValueError):
    """Raised when adding a device whose id is already registered."""

    def __init__(self, device_id: str):
        super().__init__(f"Device: {device_id} already exists.")
        self.device_id = device_id


class DeviceNotFoundError(MiLightError, KeyError):
    """Raised when a device id is not registered with the adapter."""

    def __init__(self, device_id: str):
        super().__init__(f"Device: {device_id} not found.")
        self.device_id = device_id

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0])


class ConfigError(MiLightError, ValueError):
    """Raised when the bridge configuration is invalid."""
