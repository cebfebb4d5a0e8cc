"""Tests for the property store."""

import asyncio

import pytest
from libmilight import LightProperty, PropertyKind
from libmilight.properties import COLOR_PROPERTY, LEVEL_PROPERTY, ON_PROPERTY, coerce_value


class StubDevice:
    """Records notifications and the value seen during each."""

    def __init__(self):
        self.notified = []

    async def notify_property_changed(self, prop: LightProperty, value) -> None:
        self.notified.append((prop.name, value))
        assert prop.value == value


class TestCoerceValue:
    """Tests for value normalization."""

    def test_level_clamped(self) -> None:
        """Test that levels are clamped to 0-100."""
        assert coerce_value(PropertyKind.LEVEL, 150) == 100
        assert coerce_value(PropertyKind.LEVEL, -5) == 0

    def test_level_float_rounded(self) -> None:
        """Test that float levels round halves up."""
        assert coerce_value(PropertyKind.LEVEL, 49.5) == 50
        assert coerce_value(PropertyKind.LEVEL, 49.4) == 49
        assert isinstance(coerce_value(PropertyKind.LEVEL, 12.0), int)

    def test_level_rejects_non_number(self) -> None:
        """Test that levels must be numeric."""
        with pytest.raises(ValueError, match="number"):
            coerce_value(PropertyKind.LEVEL, "50")
        with pytest.raises(ValueError, match="number"):
            coerce_value(PropertyKind.LEVEL, True)
        with pytest.raises(ValueError, match="NaN"):
            coerce_value(PropertyKind.LEVEL, float("nan"))

    def test_on_is_bool(self) -> None:
        """Test that power accepts bools only."""
        assert coerce_value(PropertyKind.ON, True) is True
        assert coerce_value(PropertyKind.ON, False) is False

    @pytest.mark.parametrize("value", ["false", 0, 1, None])
    def test_on_rejects_non_bool(self, value) -> None:
        """Test that truthy or falsy non-bools are not coerced."""
        with pytest.raises(ValueError, match="bool"):
            coerce_value(PropertyKind.ON, value)

    def test_color_normalized(self) -> None:
        """Test that colors are stripped and lower-cased."""
        assert coerce_value(PropertyKind.COLOR, " #FF0000 ") == "#ff0000"

    def test_color_rejects_non_string(self) -> None:
        """Test that colors must be strings."""
        with pytest.raises(ValueError, match="string"):
            coerce_value(PropertyKind.COLOR, 0xFF0000)


class TestLightProperty:
    """Tests for LightProperty."""

    def test_defaults(self) -> None:
        """Test initial values from the descriptions."""
        device = StubDevice()
        assert LightProperty(device, ON_PROPERTY).value is False
        assert LightProperty(device, LEVEL_PROPERTY).value == 0
        assert LightProperty(device, COLOR_PROPERTY).value == "#ffffff"

    def test_name_and_kind(self) -> None:
        """Test that name and kind come from the description."""
        prop = LightProperty(StubDevice(), LEVEL_PROPERTY)
        assert prop.name == "level"
        assert prop.kind is PropertyKind.LEVEL
        assert prop.metadata.unit == "percent"

    def test_change_notifies_after_commit(self) -> None:
        """Test that the device sees the new value when notified."""
        device = StubDevice()
        prop = LightProperty(device, LEVEL_PROPERTY)

        result = asyncio.run(prop.set_value(40))

        assert result == 40
        assert device.notified == [("level", 40)]

    def test_same_value_is_noop(self) -> None:
        """Test that setting the current value does not notify."""
        device = StubDevice()
        prop = LightProperty(device, ON_PROPERTY, True)

        result = asyncio.run(prop.set_value(True))

        assert result is True
        assert device.notified == []

    def test_returns_stored_value(self) -> None:
        """Test that the clamped value is returned, not the requested one."""
        device = StubDevice()
        prop = LightProperty(device, LEVEL_PROPERTY)

        assert asyncio.run(prop.set_value(250)) == 100
        assert prop.value == 100

    def test_clamped_to_current_is_noop(self) -> None:
        """Test that change detection uses the stored value."""
        device = StubDevice()
        prop = LightProperty(device, LEVEL_PROPERTY, 100)

        asyncio.run(prop.set_value(120))

        assert device.notified == []

    def test_set_cached_value_is_silent(self) -> None:
        """Test that cache updates do not notify."""
        device = StubDevice()
        prop = LightProperty(device, COLOR_PROPERTY)

        assert prop.set_cached_value("RED") == "red"
        assert device.notified == []

    def test_invalid_value_keeps_cache(self) -> None:
        """Test that a rejected value leaves the cache untouched."""
        device = StubDevice()
        prop = LightProperty(device, LEVEL_PROPERTY, 30)

        with pytest.raises(ValueError):
            asyncio.run(prop.set_value("bright"))

        assert prop.value == 30
        assert device.notified == []

    def test_as_dict(self) -> None:
        """Test the host description of a property."""
        prop = LightProperty(StubDevice(), LEVEL_PROPERTY, 25)
        assert prop.as_dict() == {
            "name": "level",
            "value": 25,
            "label": "Brightness",
            "type": "integer",
            "@type": "BrightnessProperty",
            "unit": "percent",
            "minimum": 0,
            "maximum": 100,
        }
