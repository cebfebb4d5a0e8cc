"""
MiLight adapter: device registry and host integration.

The adapter owns the devices exposed for one bridge. It creates them from
the configuration, keeps them in a registry keyed by id, and reports device
and property changes to the host through the AdapterHost interface. The host
is whatever application embeds the library; the adapter never depends on a
particular one.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

from .codec import Command, MiLightCodec
from .config import BridgeConfig
from .device import DIMMABLE_COLOR_LIGHT, DelayFunction, DeviceTemplate, MiLightDevice
from .exceptions import DeviceAlreadyExistsError, DeviceNotFoundError
from .properties import LightProperty
from .transport import CommandSender, DatagramSender


class AdapterHost(ABC):
    """
    Interface the adapter uses to report to its host application.
    """

    @abstractmethod
    def handle_device_added(self, device: MiLightDevice) -> None:
        """Called after a device has been added to the adapter."""

    @abstractmethod
    def handle_device_removed(self, device: MiLightDevice) -> None:
        """Called after a device has been removed from the adapter."""

    @abstractmethod
    def handle_property_changed(self, device: MiLightDevice, prop: LightProperty) -> None:
        """Called for every accepted property change of a device."""


class LoggingHost(AdapterHost):
    """Host that only logs what it is told. Used when no host is given."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger("milight.host")

    def handle_device_added(self, device: MiLightDevice) -> None:
        self._logger.info("Device added: %s", device.id)

    def handle_device_removed(self, device: MiLightDevice) -> None:
        self._logger.info("Device removed: %s", device.id)

    def handle_property_changed(self, device: MiLightDevice, prop: LightProperty) -> None:
        self._logger.debug("%s: %s = %r", device.id, prop.name, prop.value)


class MiLightAdapter:
    """
    Registry of MiLight devices sharing one bridge.

    Example:
        ```python
        async def main():
            adapter = MiLightAdapter(BridgeConfig(bridge_host="192.168.0.66"))
            await adapter.start()

            device = adapter.get_device("milight-adapter-0")
            await device.set_property_value("color", "red")
        ```
    """

    name = "miLightAdapter"

    def __init__(
        self,
        config: Optional[BridgeConfig] = None,
        host: Optional[AdapterHost] = None,
        sender: Optional[CommandSender] = None,
        delay: DelayFunction = asyncio.sleep,
    ):
        """
        Initialize the adapter.

        Args:
            config: Bridge configuration; defaults are used when omitted.
            host: Receiver of device and property notifications.
            sender: Command transport; UDP when omitted.
            delay: Awaitable used by devices for the power-on delay.
        """
        self._config = config or BridgeConfig()
        self._host = host or LoggingHost()
        self._sender = sender or DatagramSender()
        self._delay = delay
        self._codec = MiLightCodec(level_mode=self._config.level_mode)
        self._devices: Dict[str, MiLightDevice] = {}
        self._pairing = False

        self._logger = logging.getLogger("milight.adapter")

    @property
    def config(self) -> BridgeConfig:
        return self._config

    @property
    def codec(self) -> MiLightCodec:
        return self._codec

    @property
    def devices(self) -> Dict[str, MiLightDevice]:
        """
        Get the registered devices.

        Returns:
            A copy of the id -> device mapping.
        """
        return dict(self._devices)

    @property
    def is_pairing(self) -> bool:
        return self._pairing

    def get_device(self, device_id: str) -> Optional[MiLightDevice]:
        """
        Look up a device by id.

        Args:
            device_id: The device id.

        Returns:
            The device, or None if not registered.
        """
        return self._devices.get(device_id)

    async def start(self) -> None:
        """
        Add every device named in the configuration.

        Raises:
            DeviceAlreadyExistsError: If a configured device is already
                registered.
        """
        for device_config in self._config.devices:
            await self.add_device(
                device_config.id,
                zone=device_config.zone,
                name=device_config.name,
            )

        self._logger.info(
            "Adapter started with %d device(s), bridge %s:%d",
            len(self._devices),
            self._config.bridge_host,
            self._config.bridge_port
        )

    async def add_device(
        self,
        device_id: str,
        zone: int = 0,
        template: DeviceTemplate = DIMMABLE_COLOR_LIGHT,
        name: Optional[str] = None,
    ) -> MiLightDevice:
        """
        Create and register a device.

        Args:
            device_id: Unique id of the new device.
            zone: Bridge zone (0-4).
            template: Device description and property set.
            name: Human-readable name.

        Returns:
            The new device.

        Raises:
            DeviceAlreadyExistsError: If the id is already registered.
            ValueError: If the zone is outside 0-4.
        """
        if device_id in self._devices:
            raise DeviceAlreadyExistsError(device_id)

        device = MiLightDevice(
            device_id,
            self._sender,
            zone=zone,
            codec=self._codec,
            bridge_host=self._config.bridge_host,
            bridge_port=self._config.bridge_port,
            template=template,
            name=name,
            power_mode=self._config.power_mode,
            power_on_delay=self._config.power_on_delay,
            delay=self._delay,
        )
        device.add_property_callback(self._host.handle_property_changed)

        self._devices[device_id] = device
        self._notify_host(self._host.handle_device_added, device)

        self._logger.info("Added device %s (zone %d)", device_id, zone)
        return device

    async def remove_device(self, device_id: str) -> MiLightDevice:
        """
        Unregister a device.

        Args:
            device_id: The id of the device to remove.

        Returns:
            The removed device.

        Raises:
            DeviceNotFoundError: If the id is not registered.
        """
        device = self._devices.pop(device_id, None)
        if device is None:
            raise DeviceNotFoundError(device_id)

        device.remove_property_callback(self._host.handle_property_changed)
        self._notify_host(self._host.handle_device_removed, device)

        self._logger.info("Removed device %s", device_id)
        return device

    async def send_command(self, device_id: str, command: Command) -> None:
        """
        Send a command to the bridge on behalf of a device.

        Arms the device's echo guard. Transport failures are logged by the
        sender and not raised.

        Args:
            device_id: The id of the sending device.
            command: The command to send.

        Raises:
            DeviceNotFoundError: If the id is not registered.
        """
        device = self._devices.get(device_id)
        if device is None:
            raise DeviceNotFoundError(device_id)
        await device.send_command(command)

    def start_pairing(self, timeout_seconds: float) -> None:
        """
        Start the pairing process.

        MiLight bulbs are bound to zones on the bridge itself, so there is
        nothing to discover; the call is only logged.

        Args:
            timeout_seconds: Requested pairing duration.
        """
        self._pairing = True
        self._logger.info(
            "%s pairing started (timeout %.0fs)",
            self.name,
            timeout_seconds
        )

    def cancel_pairing(self) -> None:
        """Cancel the pairing process."""
        self._pairing = False
        self._logger.info("%s pairing cancelled", self.name)

    async def remove_thing(self, device: MiLightDevice) -> bool:
        """
        Unpair a device.

        Failures are logged, not raised.

        Args:
            device: The device to unpair.

        Returns:
            True if the device was removed.
        """
        self._logger.info("removeThing(%s) started", device.id)

        try:
            await self.remove_device(device.id)
        except DeviceNotFoundError as e:
            self._logger.error("Unpairing %s failed: %s", device.id, e)
            return False

        self._logger.info("Device %s was unpaired", device.id)
        return True

    def cancel_remove_thing(self, device: MiLightDevice) -> None:
        """
        Cancel an unpairing in progress.

        Args:
            device: The device being unpaired.
        """
        self._logger.info("cancelRemoveThing(%s)", device.id)

    def _notify_host(self, handler, device: MiLightDevice) -> None:
        try:
            handler(device)
        except Exception as e:
            self._logger.exception("Host callback raised exception: %s", e)

    def __repr__(self) -> str:
        return (
            f"MiLightAdapter("
            f"bridge={self._config.bridge_host}:{self._config.bridge_port}, "
            f"devices={len(self._devices)})"
        )
