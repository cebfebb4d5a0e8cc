"""Tests for CSS color parsing."""

import pytest
from libmilight import number_to_rgb, parse_css_color, rgb_to_number


class TestParseCssColor:
    """Tests for parse_css_color."""

    def test_named_color(self) -> None:
        """Test a basic named color."""
        assert parse_css_color("orange") == 0xFFA500

    def test_named_color_case_and_whitespace(self) -> None:
        """Test that names are case and whitespace insensitive."""
        assert parse_css_color("  Navy ") == 0x000080

    def test_aliases(self) -> None:
        """Test the cyan and magenta aliases."""
        assert parse_css_color("cyan") == parse_css_color("aqua")
        assert parse_css_color("magenta") == parse_css_color("fuchsia")

    def test_hex_long(self) -> None:
        """Test six-digit hex with and without the hash."""
        assert parse_css_color("#123456") == 0x123456
        assert parse_css_color("ABCDEF") == 0xABCDEF

    def test_hex_short(self) -> None:
        """Test three-digit hex expansion."""
        assert parse_css_color("#f00") == 0xFF0000
        assert parse_css_color("#fff") == 0xFFFFFF

    def test_rgb_function(self) -> None:
        """Test rgb() notation."""
        assert parse_css_color("rgb(255, 165, 0)") == 0xFFA500
        assert parse_css_color("RGB(0,0,128)") == 0x000080

    def test_rgb_out_of_range(self) -> None:
        """Test that rgb() components are bounded."""
        with pytest.raises(ValueError, match="out of range"):
            parse_css_color("rgb(256, 0, 0)")

    @pytest.mark.parametrize("text", ["", "#12345", "#gggggg", "reddish", "hsl(0, 100%, 50%)"])
    def test_invalid(self, text: str) -> None:
        """Test that malformed strings raise ValueError."""
        with pytest.raises(ValueError, match="Unknown color format"):
            parse_css_color(text)

    def test_non_string(self) -> None:
        """Test that non-string input raises ValueError."""
        with pytest.raises(ValueError, match="must be a string"):
            parse_css_color(0xFF0000)  # type: ignore[arg-type]


class TestRgbHelpers:
    """Tests for RGB packing helpers."""

    def test_pack(self) -> None:
        """Test packing components."""
        assert rgb_to_number(0x12, 0x34, 0x56) == 0x123456

    def test_unpack(self) -> None:
        """Test splitting a packed value."""
        assert number_to_rgb(0xFFA500) == (0xFF, 0xA5, 0x00)
