"""Tests for the command-line interface."""

import asyncio
import json

import pytest
from libmilight import BridgeConfig, Command, LevelMode, MiLightCodec
from libmilight.cli import build_parser, commands_for, load_config, main, run


def parse(*argv):
    return build_parser().parse_args(list(argv))


class TestCommandsFor:
    """Tests for turning arguments into command batches."""

    def test_on_off(self) -> None:
        """Test power commands use the zone codes."""
        codec = MiLightCodec()
        assert commands_for(parse("--zone", "2", "on"), codec) == [[Command(0x47, 0)]]
        assert commands_for(parse("--zone", "2", "off"), codec) == [[Command(0x48, 0)]]

    def test_level(self) -> None:
        """Test that a level is preceded by a power-on batch."""
        batches = commands_for(parse("level", "50"), MiLightCodec())
        assert batches == [[Command(0x42, 0)], [Command(0x4E, 13)]]

    def test_full_level_single_batch(self) -> None:
        """Test that 100% sends the on code once."""
        assert commands_for(parse("level", "100"), MiLightCodec()) == [[Command(0x42, 0)]]
        codec = MiLightCodec(level_mode=LevelMode.DIM_ONLY)
        assert commands_for(parse("level", "100"), codec) == [
            [Command(0x42, 0)],
            [Command(0x4E, 25)],
        ]

    def test_level_zero(self) -> None:
        """Test that level 0 turns the zone off."""
        assert commands_for(parse("level", "0"), MiLightCodec()) == [[Command(0x41, 0)]]

    def test_color(self) -> None:
        """Test palette and out-of-palette colors."""
        codec = MiLightCodec()
        assert commands_for(parse("color", "orange"), codec) == [[Command(0x40, 0x1E)]]
        assert commands_for(parse("color", "#123456"), codec) == []

    def test_raw(self) -> None:
        """Test raw hex arguments."""
        assert commands_for(parse("raw", "0x4E", "0x0d"), MiLightCodec()) == [[Command(0x4E, 13)]]

    def test_invalid_level(self) -> None:
        """Test that argparse rejects out of range levels."""
        with pytest.raises(SystemExit):
            parse("level", "101")


class TestRun:
    """Tests for sending the parsed request."""

    def test_sends_batches_in_order(self, sender) -> None:
        """Test that every batch is sent to the configured bridge."""
        config = BridgeConfig(bridge_host="10.0.0.5", power_on_delay=0)
        code = asyncio.run(run(parse("level", "20"), config, sender))

        assert code == 0
        assert sender.sent == [
            ("10.0.0.5", 80, Command(0x42, 0)),
            ("10.0.0.5", 80, Command(0x4E, 5)),
        ]

    def test_bad_color(self, sender, capsys) -> None:
        """Test that a malformed color is reported and nothing is sent."""
        code = asyncio.run(run(parse("color", "sparkly"), BridgeConfig(), sender))

        assert code == 2
        assert sender.sent == []
        assert "Unknown color format" in capsys.readouterr().err


class TestConfig:
    """Tests for command-line configuration."""

    def test_flags_override_file(self, tmp_path) -> None:
        """Test that --host and --port override the file."""
        path = tmp_path / "milight.json"
        path.write_text(json.dumps({"bridge_host": "10.0.0.5", "level_mode": "dim_only"}))

        config = load_config(parse("--config", str(path), "--port", "8899", "on"))

        assert config.bridge_host == "10.0.0.5"
        assert config.bridge_port == 8899
        assert config.level_mode.value == "dim_only"

    def test_invalid_zone_exit_code(self, capsys) -> None:
        """Test that an invalid zone exits with status 2."""
        assert main(["--zone", "7", "on"]) == 2
        assert "Zone" in capsys.readouterr().err
