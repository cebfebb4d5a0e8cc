"""
libmilight - Virtual lights for MiLight UDP bridges.

Exposes lights with an on/off, brightness and color property model and
translates property changes into MiLight bridge commands.

Example:
    ```python
    import asyncio
    from libmilight import BridgeConfig, MiLightAdapter

    async def main():
        adapter = MiLightAdapter(BridgeConfig(bridge_host="192.168.0.66"))
        await adapter.start()

        device = adapter.get_device("milight-adapter-0")
        await device.set_property_value("level", 50)
        await device.set_property_value("color", "orange")

    asyncio.run(main())
    ```
"""

from .adapter import AdapterHost, LoggingHost, MiLightAdapter
from .codec import (
    COLOR_CODE,
    COMMAND_TRAILER,
    DEFAULT_CODE_TABLES,
    DIM_CODE,
    PALETTE,
    CodeTables,
    Command,
    LevelMode,
    MiLightCodec,
    level_to_param,
    validate_zone,
)
from .color import NAMED_COLORS, number_to_rgb, parse_css_color, rgb_to_number
from .config import BridgeConfig, DeviceConfig
from .device import (
    DEFAULT_POWER_ON_DELAY,
    DIMMABLE_COLOR_LIGHT,
    DeviceTemplate,
    MiLightDevice,
    PowerMode,
)
from .exceptions import (
    ConfigError,
    DeviceAlreadyExistsError,
    DeviceNotFoundError,
    MiLightError,
)
from .properties import (
    LightProperty,
    PropertyDescription,
    PropertyKind,
    PropertyMetadata,
)
from .transport import CommandSender, DatagramSender

__version__ = "0.1.0"

__all__ = [
    # Adapter
    "MiLightAdapter",
    "AdapterHost",
    "LoggingHost",
    # Codec
    "Command",
    "CodeTables",
    "DEFAULT_CODE_TABLES",
    "LevelMode",
    "MiLightCodec",
    "PALETTE",
    "COLOR_CODE",
    "DIM_CODE",
    "COMMAND_TRAILER",
    "level_to_param",
    "validate_zone",
    # Color
    "NAMED_COLORS",
    "parse_css_color",
    "rgb_to_number",
    "number_to_rgb",
    # Config
    "BridgeConfig",
    "DeviceConfig",
    # Device
    "MiLightDevice",
    "DeviceTemplate",
    "DIMMABLE_COLOR_LIGHT",
    "DEFAULT_POWER_ON_DELAY",
    "PowerMode",
    # Properties
    "LightProperty",
    "PropertyDescription",
    "PropertyKind",
    "PropertyMetadata",
    # Transport
    "CommandSender",
    "DatagramSender",
    # Exceptions
    "MiLightError",
    "ConfigError",
    "DeviceAlreadyExistsError",
    "DeviceNotFoundError",
]
