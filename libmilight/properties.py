"""
Light property model.

A MiLight device exposes three properties:

- ``on``: boolean power state
- ``level``: brightness, an int from 0 to 100
- ``color``: a CSS color string

Each property caches its current value and only notifies its device when a
``set_value`` call actually changes that value. The kind of each property is
resolved once, when it is created, so the device can dispatch on a closed
set of kinds instead of on free-form names.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Optional, Union

from .codec import MAX_LEVEL, MIN_LEVEL

if TYPE_CHECKING:
    from .device import MiLightDevice


PropertyValue = Union[bool, int, str]


class PropertyKind(Enum):
    """The properties a MiLight device understands."""
    ON = "on"
    LEVEL = "level"
    COLOR = "color"


@dataclass(frozen=True)
class PropertyMetadata:
    """
    Descriptive metadata for a property.

    Attributes:
        label: Human-readable name.
        type: Value type ("boolean", "integer" or "string").
        at_type: Semantic type (e.g. "OnOffProperty").
        unit: Optional unit (e.g. "percent").
        minimum: Optional lower bound for numeric values.
        maximum: Optional upper bound for numeric values.
    """
    label: str
    type: str
    at_type: str
    unit: Optional[str] = None
    minimum: Optional[int] = None
    maximum: Optional[int] = None

    def as_dict(self) -> Dict[str, Any]:
        """Return the metadata in the host description format."""
        result: Dict[str, Any] = {
            "label": self.label,
            "type": self.type,
            "@type": self.at_type,
        }
        if self.unit is not None:
            result["unit"] = self.unit
        if self.minimum is not None:
            result["minimum"] = self.minimum
        if self.maximum is not None:
            result["maximum"] = self.maximum
        return result


@dataclass(frozen=True)
class PropertyDescription:
    """
    Template entry used to build a property on a new device.

    Attributes:
        kind: The property kind; its value is the property name.
        default: Initial cached value.
        metadata: Descriptive metadata.
    """
    kind: PropertyKind
    default: PropertyValue
    metadata: PropertyMetadata = field(compare=False)

    @property
    def name(self) -> str:
        return self.kind.value


ON_PROPERTY = PropertyDescription(
    kind=PropertyKind.ON,
    default=False,
    metadata=PropertyMetadata(label="On/Off", type="boolean", at_type="OnOffProperty"),
)

COLOR_PROPERTY = PropertyDescription(
    kind=PropertyKind.COLOR,
    default="#ffffff",
    metadata=PropertyMetadata(label="Color", type="string", at_type="ColorProperty"),
)

LEVEL_PROPERTY = PropertyDescription(
    kind=PropertyKind.LEVEL,
    default=0,
    metadata=PropertyMetadata(
        label="Brightness",
        type="integer",
        at_type="BrightnessProperty",
        unit="percent",
        minimum=MIN_LEVEL,
        maximum=MAX_LEVEL,
    ),
)


def coerce_value(kind: PropertyKind, value: Any) -> PropertyValue:
    """
    Normalize a requested value for a property kind.

    Levels are rounded (halves up) and clamped to 0-100, power must be a
    bool, and colors are stripped and lower-cased.

    Args:
        kind: The property kind.
        value: The requested value.

    Returns:
        The value that will be stored.

    Raises:
        ValueError: If the value has the wrong type for the kind.
    """
    if kind is PropertyKind.ON:
        if not isinstance(value, bool):
            raise ValueError(f"On must be a bool, got {value!r}")
        return value

    if kind is PropertyKind.LEVEL:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"Level must be a number, got {value!r}")
        if isinstance(value, float):
            if math.isnan(value):
                raise ValueError("Level must not be NaN")
            value = math.floor(max(MIN_LEVEL, min(MAX_LEVEL, value)) + 0.5)
        return int(max(MIN_LEVEL, min(MAX_LEVEL, value)))

    if not isinstance(value, str):
        raise ValueError(f"Color must be a string, got {value!r}")
    return value.strip().lower()


class LightProperty:
    """
    A single cached property of a MiLight device.

    The property owns its cached value. ``set_value`` is the only mutation
    path that reaches the device; ``set_cached_value`` updates silently.
    """

    def __init__(
        self,
        device: "MiLightDevice",
        description: PropertyDescription,
        value: Optional[PropertyValue] = None,
    ):
        """
        Initialize the property.

        Args:
            device: The owning device, notified on change.
            description: Kind, default and metadata of the property.
            value: Initial value; the description default when omitted.
        """
        self._device = device
        self._description = description
        self._value: PropertyValue = coerce_value(
            description.kind,
            description.default if value is None else value,
        )

    @property
    def name(self) -> str:
        return self._description.name

    @property
    def kind(self) -> PropertyKind:
        return self._description.kind

    @property
    def metadata(self) -> PropertyMetadata:
        return self._description.metadata

    @property
    def device(self) -> "MiLightDevice":
        return self._device

    @property
    def value(self) -> PropertyValue:
        return self._value

    def set_cached_value(self, value: Any) -> PropertyValue:
        """
        Update the cached value without notifying the device.

        Args:
            value: The new value.

        Returns:
            The stored (coerced) value.
        """
        self._value = coerce_value(self.kind, value)
        return self._value

    async def set_value(self, value: Any) -> PropertyValue:
        """
        Set the value of the property.

        The value is committed to the cache first; the device is notified
        only if it differs from the previous value.

        Args:
            value: The requested value.

        Returns:
            The stored value, which may differ from the one requested
            (levels are clamped, for example).

        Raises:
            ValueError: If the value has the wrong type for this property.
        """
        new_value = coerce_value(self.kind, value)
        changed = new_value != self._value
        self._value = new_value

        if changed:
            await self._device.notify_property_changed(self, new_value)

        return new_value

    def as_dict(self) -> Dict[str, Any]:
        """Return the property description including its current value."""
        result = self.metadata.as_dict()
        result["name"] = self.name
        result["value"] = self._value
        return result

    def __repr__(self) -> str:
        return f"LightProperty(name={self.name!r}, value={self._value!r})"
