#!/usr/bin/env python3
"""
Example: Drive a MiLight zone through the property model.

This example registers one light, then walks it through the transitions the
adapter handles:
- Dimming while off (power-on, delay, dim)
- Palette colors and an out-of-palette color (ignored)
- Level 0 (turns the zone off)

Usage:
    python control_light.py 192.168.0.66 8899 1
"""

import asyncio
import logging
import sys

from libmilight import (
    BridgeConfig,
    DeviceConfig,
    LightProperty,
    LoggingHost,
    MiLightAdapter,
    MiLightDevice,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

# Show every datagram
logging.getLogger("milight").setLevel(logging.DEBUG)


class PrintingHost(LoggingHost):
    """Host that prints property changes."""

    def handle_property_changed(self, device: MiLightDevice, prop: LightProperty) -> None:
        print(f"  {device.id}: {prop.name} -> {prop.value!r}")


async def main() -> int:
    """Main entry point."""
    host = sys.argv[1] if len(sys.argv) > 1 else "192.168.0.66"
    port = int(sys.argv[2]) if len(sys.argv) > 2 else 8899
    zone = int(sys.argv[3]) if len(sys.argv) > 3 else 0

    config = BridgeConfig(
        bridge_host=host,
        bridge_port=port,
        devices=(DeviceConfig("example-light", zone=zone),),
    )
    adapter = MiLightAdapter(config, host=PrintingHost())
    await adapter.start()

    light = adapter.get_device("example-light")

    print(f"Bridge {host}:{port}, zone {zone}")
    print("=" * 60)

    steps = [
        ("level", 50),
        ("color", "orange"),
        ("color", "#123456"),
        ("color", "white"),
        ("level", 100),
        ("level", 0),
    ]

    for name, value in steps:
        print(f"\nSetting {name} = {value!r}")
        stored = await light.set_property_value(name, value)
        print(f"  stored: {stored!r}")
        await asyncio.sleep(1)

    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
