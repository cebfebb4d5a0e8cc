"""Tests for configuration loading."""

import json

import pytest
from libmilight import BridgeConfig, ConfigError, DeviceConfig, LevelMode, PowerMode


class TestDeviceConfig:
    """Tests for DeviceConfig."""

    def test_defaults(self) -> None:
        """Test default zone and name."""
        device = DeviceConfig("lamp")
        assert device.zone == 0
        assert device.name is None

    def test_invalid_zone(self) -> None:
        """Test that zones are validated."""
        with pytest.raises(ConfigError, match="lamp"):
            DeviceConfig("lamp", zone=5)

    def test_empty_id(self) -> None:
        """Test that an id is required."""
        with pytest.raises(ConfigError, match="id"):
            DeviceConfig("")


class TestBridgeConfig:
    """Tests for BridgeConfig."""

    def test_defaults(self) -> None:
        """Test the default configuration."""
        config = BridgeConfig()
        assert config.bridge_host == "192.168.0.66"
        assert config.bridge_port == 80
        assert config.power_mode is PowerMode.FIXED_CODES
        assert config.level_mode is LevelMode.FULL_ON
        assert config.power_on_delay == 0.1
        assert config.devices == (DeviceConfig("milight-adapter-0"),)

    def test_invalid_port(self) -> None:
        """Test port validation."""
        with pytest.raises(ConfigError, match="out of range"):
            BridgeConfig(bridge_port=70000)
        with pytest.raises(ConfigError, match="int"):
            BridgeConfig(bridge_port="80")  # type: ignore[arg-type]

    def test_negative_delay(self) -> None:
        """Test delay validation."""
        with pytest.raises(ConfigError, match="power_on_delay"):
            BridgeConfig(power_on_delay=-0.1)

    def test_duplicate_devices(self) -> None:
        """Test that device ids must be unique."""
        with pytest.raises(ConfigError, match="Duplicate device ids: a"):
            BridgeConfig(devices=(DeviceConfig("a"), DeviceConfig("a", zone=1)))

    def test_from_dict(self) -> None:
        """Test building from a mapping."""
        config = BridgeConfig.from_dict({
            "bridge_host": "10.0.0.5",
            "bridge_port": 8899,
            "power_mode": "recompute",
            "level_mode": "dim_only",
            "power_on_delay": "0.2",
            "devices": [{"id": "hall", "zone": 2, "name": "Hall"}],
        })
        assert config.bridge_host == "10.0.0.5"
        assert config.bridge_port == 8899
        assert config.power_mode is PowerMode.RECOMPUTE
        assert config.level_mode is LevelMode.DIM_ONLY
        assert config.power_on_delay == 0.2
        assert config.devices == (DeviceConfig("hall", 2, "Hall"),)

    def test_from_dict_empty(self) -> None:
        """Test that missing keys take defaults."""
        assert BridgeConfig.from_dict({}) == BridgeConfig()

    def test_from_dict_bad_mode(self) -> None:
        """Test that unknown modes are rejected."""
        with pytest.raises(ConfigError):
            BridgeConfig.from_dict({"power_mode": "sometimes"})

    def test_from_dict_bad_devices(self) -> None:
        """Test that device entries are validated."""
        with pytest.raises(ConfigError, match="list"):
            BridgeConfig.from_dict({"devices": {"id": "a"}})
        with pytest.raises(ConfigError, match="Invalid device entry"):
            BridgeConfig.from_dict({"devices": [{"zone": 1}]})

    def test_from_dict_not_mapping(self) -> None:
        """Test that the top level must be a mapping."""
        with pytest.raises(ConfigError, match="mapping"):
            BridgeConfig.from_dict(["bridge_host"])  # type: ignore[arg-type]

    def test_load(self, tmp_path) -> None:
        """Test loading from a JSON file."""
        path = tmp_path / "milight.json"
        path.write_text(json.dumps({"bridge_port": 8899, "devices": [{"id": "x", "zone": 4}]}))

        config = BridgeConfig.load(path)

        assert config.bridge_port == 8899
        assert config.devices == (DeviceConfig("x", 4),)

    def test_load_missing_file(self, tmp_path) -> None:
        """Test that an unreadable file raises ConfigError."""
        with pytest.raises(ConfigError, match="Cannot load configuration"):
            BridgeConfig.load(tmp_path / "missing.json")

    def test_load_invalid_json(self, tmp_path) -> None:
        """Test that malformed JSON raises ConfigError."""
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError, match="Cannot load configuration"):
            BridgeConfig.load(path)
