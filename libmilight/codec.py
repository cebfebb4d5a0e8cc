"""
MiLight bridge command codec.

Every instruction understood by the bridge is a ``code``/``param`` byte pair
followed by the trailer byte ``0x55``. This module maps the abstract light
properties (power, brightness level, CSS color) onto those pairs:

- Power uses a per-zone on/off code.
- Brightness uses a dedicated off code at 0%, optionally the on code at
  100%, and the dim code ``0x4E`` with ``param = round(level / 4)`` otherwise.
- Color is quantized to a fixed palette; white is per-zone, every other
  palette entry shares the color code ``0x40``. Colors outside the palette
  produce no command.

The codec is pure: it holds only the immutable code tables it was built with.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional, Tuple

from .color import parse_css_color


# Trailer byte closing every command
COMMAND_TRAILER = 0x55

# Shared code for palette colors
COLOR_CODE = 0x40

# Dim code, param carries the 0-25 step
DIM_CODE = 0x4E

# Number of addressable zones (0 = all, 1-4 = groups)
ZONE_COUNT = 5

MIN_LEVEL = 0
MAX_LEVEL = 100


class LevelMode(Enum):
    """How a 100% level is encoded."""
    # 100% sends the zone's on code
    FULL_ON = "full_on"
    # 100% sends the dim code with param 25 (command set A)
    DIM_ONLY = "dim_only"


@dataclass(frozen=True)
class Command:
    """
    A single bridge command.

    Attributes:
        code: The command byte.
        param: The parameter byte.
    """
    code: int
    param: int = 0x00

    def __post_init__(self):
        """Validate that both fields fit in a byte."""
        for field_name, value in (("code", self.code), ("param", self.param)):
            if not isinstance(value, int) or not 0 <= value <= 0xFF:
                raise ValueError(f"Command {field_name} must be a byte, got {value!r}")

    def to_bytes(self) -> bytes:
        """
        Serialize the command for the wire.

        Returns:
            The 3-byte datagram ``[code, param, 0x55]``.
        """
        return bytes((self.code, self.param, COMMAND_TRAILER))

    def __str__(self) -> str:
        return f"Command(0x{self.code:02X}, 0x{self.param:02X})"


@dataclass(frozen=True)
class CodeTables:
    """
    Per-zone command codes, indexed by zone (0-4).

    Attributes:
        on_codes: Power-on code for each zone.
        off_codes: Power-off code for each zone.
        white_codes: White-mode code for each zone.
    """
    on_codes: Tuple[int, ...] = (0x42, 0x45, 0x47, 0x49, 0x4B)
    off_codes: Tuple[int, ...] = (0x41, 0x46, 0x48, 0x4A, 0x4C)
    white_codes: Tuple[int, ...] = (0xC2, 0xC5, 0xC7, 0xC9, 0xCB)

    def __post_init__(self):
        """Check every table has one entry per zone."""
        for name in ("on_codes", "off_codes", "white_codes"):
            table = tuple(getattr(self, name))
            if len(table) != ZONE_COUNT:
                raise ValueError(
                    f"{name} must have {ZONE_COUNT} entries, got {len(table)}"
                )
            object.__setattr__(self, name, table)

    def on_code(self, zone: int) -> int:
        return self.on_codes[validate_zone(zone)]

    def off_code(self, zone: int) -> int:
        return self.off_codes[validate_zone(zone)]

    def white_code(self, zone: int) -> int:
        return self.white_codes[validate_zone(zone)]


DEFAULT_CODE_TABLES = CodeTables()


# Palette: RGB value -> param byte for COLOR_CODE. White is resolved per zone.
PALETTE: Dict[int, int] = {
    0x000080: 0x00,  # Navy
    0x0000FF: 0xBA,  # Blue
    0x008000: 0x7A,  # Green
    0x00FF00: 0x54,  # Lime
    0x00FFFF: 0x85,  # Aqua
    0x800080: 0xD9,  # Purple
    0xFF0000: 0xFF,  # Red
    0xFFA500: 0x1E,  # Orange
    0xFFFF00: 0x3B,  # Yellow
}

WHITE = 0xFFFFFF


def validate_zone(zone: int) -> int:
    """
    Check a zone index.

    Args:
        zone: The zone to check.

    Returns:
        The zone unchanged.

    Raises:
        ValueError: If the zone is not an int in 0-4.
    """
    if isinstance(zone, bool) or not isinstance(zone, int) or not 0 <= zone < ZONE_COUNT:
        raise ValueError(f"Zone must be between 0 and {ZONE_COUNT - 1}, got {zone!r}")
    return zone


def level_to_param(level: int) -> int:
    """
    Convert a 0-100 level to the 0-25 dim step.

    Halves round up, so 50% maps to 13.
    """
    return (level * 2 + 4) // 8


class MiLightCodec:
    """
    Translates light property values into bridge commands.

    Example:
        ```python
        codec = MiLightCodec()
        codec.level_command(50)          # Command(0x4E, 0x0D)
        codec.color_command("white", 2)  # Command(0xC7, 0x00)
        codec.color_command("#123456")   # None
        ```
    """

    def __init__(
        self,
        tables: CodeTables = DEFAULT_CODE_TABLES,
        level_mode: LevelMode = LevelMode.FULL_ON,
        color_parser: Callable[[str], int] = parse_css_color,
    ):
        """
        Initialize the codec.

        Args:
            tables: Per-zone code tables.
            level_mode: Whether 100% uses the on code or the dim code.
            color_parser: Converts a CSS color string to a 24-bit RGB int.
                Its errors are not caught.
        """
        self._tables = tables
        self._level_mode = level_mode
        self._parse_color = color_parser

    @property
    def tables(self) -> CodeTables:
        return self._tables

    @property
    def level_mode(self) -> LevelMode:
        return self._level_mode

    def power_command(self, on: bool, zone: int = 0) -> Command:
        """
        Build the power command for a zone.

        Args:
            on: True for the on code, False for the off code.
            zone: The target zone (0-4).

        Returns:
            The on or off command with param 0.
        """
        code = self._tables.on_code(zone) if on else self._tables.off_code(zone)
        return Command(code, 0x00)

    def level_command(self, level: int, zone: int = 0) -> Command:
        """
        Build the brightness command for a level.

        Args:
            level: Brightness from 0 to 100.
            zone: The target zone, used by the 0% and 100% codes.

        Returns:
            The off code at 0, the on code at 100 (``LevelMode.FULL_ON``
            only), otherwise the dim code with ``round(level / 4)``.

        Raises:
            ValueError: If the level is not an int in 0-100.
        """
        if isinstance(level, bool) or not isinstance(level, int):
            raise ValueError(f"Level must be an int, got {level!r}")
        if not MIN_LEVEL <= level <= MAX_LEVEL:
            raise ValueError(f"Level must be between 0 and 100, got {level}")

        if level == MIN_LEVEL:
            return Command(self._tables.off_code(zone), 0x00)
        if level == MAX_LEVEL and self._level_mode is LevelMode.FULL_ON:
            return Command(self._tables.on_code(zone), 0x00)
        return Command(DIM_CODE, level_to_param(level))

    def color_command(self, css_color: str, zone: int = 0) -> Optional[Command]:
        """
        Quantize a CSS color to a palette command.

        Args:
            css_color: Any CSS color string.
            zone: The target zone, used by white.

        Returns:
            The palette command, or None when the color is not in the
            palette (black included).

        Raises:
            ValueError: If the color string cannot be parsed.
        """
        validate_zone(zone)
        rgb = self._parse_color(css_color)

        if rgb == WHITE:
            return Command(self._tables.white_code(zone), 0x00)

        param = PALETTE.get(rgb)
        if param is None:
            return None
        return Command(COLOR_CODE, param)
