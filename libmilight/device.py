"""
MiLight device representation and command state machine.

This module provides the MiLightDevice class that represents a single
virtual light bound to one zone of a MiLight bridge. It handles:

- Property caching and change notification
- Translating property changes into bridge commands
- Sequencing the power-on command ahead of a dim command
- Echo suppression for state refreshes caused by our own commands

Commands for one device are sent in the order their causing changes were
accepted. A change arriving while the device waits for the bridge to latch
a power-on command queues behind the pending dim command.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, Union

from .codec import Command, MiLightCodec, validate_zone
from .properties import (
    COLOR_PROPERTY,
    LEVEL_PROPERTY,
    ON_PROPERTY,
    LightProperty,
    PropertyDescription,
    PropertyKind,
    PropertyValue,
)
from .transport import DEFAULT_BRIDGE_HOST, DEFAULT_BRIDGE_PORT, CommandSender


# Time the bridge needs to latch a power-on command before it accepts a dim
DEFAULT_POWER_ON_DELAY = 0.1


class PowerMode(Enum):
    """How changes of the ``on`` property are encoded."""
    # Send the zone's dedicated on/off code
    FIXED_CODES = "fixed_codes"
    # Send the on/off code and, when turning on, replay color and level
    RECOMPUTE = "recompute"


@dataclass(frozen=True)
class DeviceTemplate:
    """
    Description used to build a device.

    Attributes:
        type: Device type identifier.
        name: Default human-readable name.
        context: Schema context URL.
        at_types: Semantic capabilities of the device.
        properties: Properties created on the device, in order.
    """
    type: str
    name: str
    context: str
    at_types: Tuple[str, ...]
    properties: Tuple[PropertyDescription, ...]


DIMMABLE_COLOR_LIGHT = DeviceTemplate(
    type="dimmableColorLight",
    name="Dimmable Color Light",
    context="https://iot.mozilla.org/schemas",
    at_types=("OnOffSwitch", "Light", "ColorControl"),
    properties=(COLOR_PROPERTY, LEVEL_PROPERTY, ON_PROPERTY),
)


# Type alias for property change callbacks
PropertyChangeCallback = Union[
    Callable[["MiLightDevice", LightProperty], None],
    Callable[["MiLightDevice", LightProperty], Awaitable[None]]
]

# Awaitable pause, asyncio.sleep by default
DelayFunction = Callable[[float], Awaitable[Any]]


class MiLightDevice:
    """
    A virtual light driving one zone of a MiLight bridge.

    Property values are set through ``set_property_value`` (or directly on
    a property with ``LightProperty.set_value``). Each accepted change is
    translated into bridge commands:

    - ``color``: the palette command, or nothing if the color is not in
      the palette or cannot be parsed
    - ``on``: the zone's on or off code
    - ``level``: 0 turns the light off; any other level is sent as a dim
      command, preceded by an on command and a short delay when the light
      was off

    Example:
        ```python
        device = MiLightDevice("milight-0", DatagramSender(), zone=1)
        await device.set_property_value("level", 50)
        assert device.get_property("on") is True
        ```
    """

    def __init__(
        self,
        device_id: str,
        sender: CommandSender,
        zone: int = 0,
        codec: Optional[MiLightCodec] = None,
        bridge_host: str = DEFAULT_BRIDGE_HOST,
        bridge_port: int = DEFAULT_BRIDGE_PORT,
        template: DeviceTemplate = DIMMABLE_COLOR_LIGHT,
        name: Optional[str] = None,
        power_mode: PowerMode = PowerMode.FIXED_CODES,
        power_on_delay: float = DEFAULT_POWER_ON_DELAY,
        delay: DelayFunction = asyncio.sleep,
    ):
        """
        Initialize a MiLight device.

        Args:
            device_id: Unique id of the device.
            sender: Transport used to deliver commands.
            zone: Bridge zone (0 = all, 1-4 = groups).
            codec: Command codec; a default codec when omitted.
            bridge_host: Bridge hostname or IP address.
            bridge_port: Bridge UDP port.
            template: Device description and property set.
            name: Human-readable name; the template name when omitted.
            power_mode: How changes of ``on`` are encoded.
            power_on_delay: Seconds to wait between an implicit power-on
                command and the following dim command.
            delay: Awaitable used to wait ``power_on_delay`` seconds.

        Raises:
            ValueError: If the id is empty, the zone is outside 0-4 or the
                delay is negative.
        """
        if not device_id:
            raise ValueError("device_id is required")
        if power_on_delay < 0:
            raise ValueError(f"power_on_delay must not be negative, got {power_on_delay}")

        self._id = device_id
        self._zone = validate_zone(zone)
        self._sender = sender
        self._codec = codec or MiLightCodec()
        self._template = template
        self._name = name or template.name
        self._power_mode = power_mode
        self._power_on_delay = power_on_delay
        self._delay = delay

        self.bridge_host = bridge_host
        self.bridge_port = bridge_port

        # Echo guard, armed on every send
        self.suppress_next_update = False

        self._logger = logging.getLogger(f"milight.device.{device_id}")

        self._properties: Dict[str, LightProperty] = {}
        for description in template.properties:
            self._properties[description.name] = LightProperty(self, description)

        self._handlers = {
            PropertyKind.ON: self._on_power_changed,
            PropertyKind.LEVEL: self._on_level_changed,
            PropertyKind.COLOR: self._on_color_changed,
        }

        # Serializes command emission for this device
        self._command_lock = asyncio.Lock()

        self._property_callbacks: List[PropertyChangeCallback] = []

    @property
    def id(self) -> str:
        return self._id

    @property
    def zone(self) -> int:
        return self._zone

    @property
    def name(self) -> str:
        return self._name

    @property
    def template(self) -> DeviceTemplate:
        return self._template

    @property
    def power_mode(self) -> PowerMode:
        return self._power_mode

    @property
    def properties(self) -> Dict[str, LightProperty]:
        """
        Get the device properties.

        Returns:
            A copy of the name -> property mapping, in template order.
        """
        return dict(self._properties)

    @property
    def is_on(self) -> bool:
        prop = self._find_kind(PropertyKind.ON)
        return bool(prop.value) if prop else False

    @property
    def level(self) -> Optional[int]:
        prop = self._find_kind(PropertyKind.LEVEL)
        return prop.value if prop else None  # type: ignore[return-value]

    @property
    def color(self) -> Optional[str]:
        prop = self._find_kind(PropertyKind.COLOR)
        return prop.value if prop else None  # type: ignore[return-value]

    def find_property(self, name: str) -> Optional[LightProperty]:
        """
        Look up a property by name.

        Args:
            name: The property name.

        Returns:
            The property, or None if the device has no such property.
        """
        return self._properties.get(name)

    def get_property(self, name: str) -> Optional[PropertyValue]:
        """
        Get the cached value of a property.

        Args:
            name: The property name.

        Returns:
            The current value, or None if the device has no such property.
        """
        prop = self._properties.get(name)
        return prop.value if prop else None

    async def set_property_value(self, name: str, value: Any) -> Optional[PropertyValue]:
        """
        Set a property value, sending the resulting bridge commands.

        Unknown property names are logged and ignored.

        Args:
            name: The property name ("on", "level" or "color").
            value: The requested value.

        Returns:
            The stored value, which is the ground truth for callers, or None
            for an unknown property.

        Raises:
            ValueError: If the value has the wrong type.
        """
        prop = self._properties.get(name)
        if prop is None:
            self._logger.warning("Unknown property: %s", name)
            return None
        return await prop.set_value(value)

    def add_property_callback(self, callback: PropertyChangeCallback) -> None:
        """
        Register a callback for accepted property changes.

        The callback is invoked with (device, property) for every change,
        including the implicit power changes driven by the level.

        Args:
            callback: Function or coroutine function to call.
        """
        if callback not in self._property_callbacks:
            self._property_callbacks.append(callback)

    def remove_property_callback(self, callback: PropertyChangeCallback) -> bool:
        """
        Remove a property change callback.

        Args:
            callback: The callback to remove.

        Returns:
            True if the callback was removed, False if not found.
        """
        if callback in self._property_callbacks:
            self._property_callbacks.remove(callback)
            return True
        return False

    async def notify_property_changed(self, prop: LightProperty, value: PropertyValue) -> None:
        """
        Handle a changed property.

        Called by ``LightProperty.set_value`` after the new value has been
        committed. Waits for any earlier change of this device to finish
        sending before emitting commands. The commands encode ``value``, the
        value accepted at the time of the change, even if the property has
        changed again while this change was queued.

        Args:
            prop: The property whose value changed.
            value: The accepted value.
        """
        async with self._command_lock:
            await self._handle_change(prop, value)

    async def send_command(self, command: Command) -> None:
        """
        Send a raw command to this device's bridge and zone.

        Arms the echo guard before handing the command to the transport.

        Args:
            command: The command to send.
        """
        self.suppress_next_update = True
        self._logger.debug(
            "Sending %s to %s:%d",
            command,
            self.bridge_host,
            self.bridge_port
        )
        await self._sender.send(self.bridge_host, self.bridge_port, command)

    def consume_suppressed_update(self) -> bool:
        """
        Check and clear the echo guard.

        Returns:
            True if a command was sent since the last check, meaning the
            next bridge state refresh should be ignored.
        """
        suppressed = self.suppress_next_update
        self.suppress_next_update = False
        return suppressed

    async def apply_bridge_update(self, name: str, value: Any) -> bool:
        """
        Apply a state refresh read back from the bridge.

        The refresh updates the cache without sending any command. If the
        echo guard is armed, the refresh is dropped and the guard cleared.

        Args:
            name: The property name.
            value: The value reported by the bridge.

        Returns:
            True if the refresh was applied, False if it was suppressed or
            the property is unknown.
        """
        if self.consume_suppressed_update():
            self._logger.debug("Suppressed bridge update for %s", name)
            return False

        prop = self._properties.get(name)
        if prop is None:
            self._logger.warning("Unknown property in bridge update: %s", name)
            return False

        old_value = prop.value
        if prop.set_cached_value(value) != old_value:
            await self._invoke_property_callbacks(prop)
        return True

    async def _handle_change(self, prop: LightProperty, value: PropertyValue) -> None:
        """
        Emit the commands for a changed property.

        Must be called with the command lock held.
        """
        self._logger.debug("Property changed: %s = %r", prop.name, value)
        await self._invoke_property_callbacks(prop)
        await self._handlers[prop.kind](value)

    async def _on_color_changed(self, color: str) -> None:
        try:
            command = self._codec.color_command(color, self._zone)
        except ValueError as e:
            self._logger.warning("Ignoring color %r: %s", color, e)
            return
        if command is None:
            self._logger.debug("Color %s is not in the palette, ignoring", color)
            return
        await self.send_command(command)

    async def _on_power_changed(self, on: bool) -> None:
        await self.send_command(self._codec.power_command(on, self._zone))

        if on and self._power_mode is PowerMode.RECOMPUTE:
            followups = self._restore_commands()
            if followups:
                await self._delay(self._power_on_delay)
            for command in followups:
                await self.send_command(command)

    async def _on_level_changed(self, level: int) -> None:
        if level == 0:
            await self._set_power(False)
            return

        command = self._codec.level_command(level, self._zone)

        if not self.is_on and await self._set_power(True):
            if self._power_mode is PowerMode.RECOMPUTE:
                # power-on already replayed the stored level
                return
            # full level is the on code that was just sent
            if command == self._codec.power_command(True, self._zone):
                return
            await self._delay(self._power_on_delay)

        await self.send_command(command)

    async def _set_power(self, on: bool) -> bool:
        """
        Drive the ``on`` property as a side effect of another change.

        Returns:
            True if the power state changed and its command was sent.
        """
        prop = self._find_kind(PropertyKind.ON)
        if prop is None or prop.value == on:
            return False
        await self._handle_change(prop, prop.set_cached_value(on))
        return True

    def _restore_commands(self) -> List[Command]:
        """Build the color and level commands replayed after a power-on."""
        commands: List[Command] = []

        color = self._find_kind(PropertyKind.COLOR)
        if color is not None:
            command = self._codec.color_command(color.value, self._zone)  # type: ignore[arg-type]
            if command is not None:
                commands.append(command)

        level = self._find_kind(PropertyKind.LEVEL)
        if level is not None and level.value:
            command = self._codec.level_command(level.value, self._zone)  # type: ignore[arg-type]
            # the on code was just sent
            if command != self._codec.power_command(True, self._zone):
                commands.append(command)

        return commands

    def _find_kind(self, kind: PropertyKind) -> Optional[LightProperty]:
        return self._properties.get(kind.value)

    async def _invoke_property_callbacks(self, prop: LightProperty) -> None:
        """
        Invoke all registered property change callbacks.
        """
        for callback in list(self._property_callbacks):
            try:
                result = callback(self, prop)
                if asyncio.iscoroutine(result):
                    await result
            except Exception as e:
                self._logger.exception(
                    "Property callback raised exception: %s",
                    e
                )

    def as_dict(self) -> Dict[str, Any]:
        """
        Describe the device for a host.

        Returns:
            Mapping with id, name, type, context, semantic types, zone and
            the property descriptions.
        """
        return {
            "id": self._id,
            "name": self._name,
            "type": self._template.type,
            "@context": self._template.context,
            "@type": list(self._template.at_types),
            "zone": self._zone,
            "properties": {
                name: prop.as_dict() for name, prop in self._properties.items()
            },
        }

    def __str__(self) -> str:
        return f"MiLightDevice({self._name} @ zone {self._zone})"

    def __repr__(self) -> str:
        return (
            f"MiLightDevice("
            f"id={self._id}, "
            f"zone={self._zone}, "
            f"bridge={self.bridge_host}:{self.bridge_port}, "
            f"on={self.is_on})"
        )
