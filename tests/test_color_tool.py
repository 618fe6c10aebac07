"""Test conversions between color definitions.

:author: Shay Hill
:created: 2024-12-31
"""

import pytest

from drawing_kit import color_tool
from drawing_kit.errors import ArgumentError


class TestIsHexFormat:
    """Accept 2, 3, 6, and 8 hex digits with or without #."""

    @pytest.mark.parametrize("value", ["#fff", "ff", "#00FF00", "80ff0000", "#AbC"])
    def test_hex(self, value: str):
        """Any case, optional #."""
        assert color_tool.is_hex_format(value)

    @pytest.mark.parametrize("value", ["#ffff", "#ggg", "", "#", "red", "#1234567"])
    def test_not_hex(self, value: str):
        """Other lengths and non-hex digits are not hex."""
        assert not color_tool.is_hex_format(value)

    def test_sequence_is_never_hex(self):
        """Only strings can be hex."""
        assert not color_tool.is_hex_format([255, 0, 0])


class TestHexToRgb:
    """Decode every hex length."""

    def test_three_digits(self):
        """Each nibble is doubled."""
        assert color_tool.hex_to_rgb("#f00") == (255, 0, 0)

    def test_six_digits(self):
        """No # required."""
        assert color_tool.hex_to_rgb("0a141e") == (10, 20, 30)

    def test_eight_digits_drop_alpha(self):
        """The top byte is dropped."""
        assert color_tool.hex_to_rgb("#7fff0000") == (255, 0, 0)

    def test_two_digits_are_gray(self):
        """One byte for all three channels."""
        assert color_tool.hex_to_rgb("#7f") == (127, 127, 127)

    @pytest.mark.parametrize("value", ["#ffff", "zz", "rgb(1,2,3)"])
    def test_invalid(self, value: str):
        """Return None for anything else."""
        assert color_tool.hex_to_rgb(value) is None


class TestRgbToHex:
    """Encode every accepted argument shape."""

    def test_three_ints(self):
        """Lowercase output."""
        assert color_tool.rgb_to_hex(255, 0, 171) == "#ff00ab"

    def test_clamp(self):
        """Each channel is clamped to [0, 255]."""
        assert color_tool.rgb_to_hex(300, -5, 16) == "#ff0010"

    def test_sequence(self):
        """A 3-item sequence in r."""
        assert color_tool.rgb_to_hex([1, 2, 3]) == "#010203"

    def test_mapping(self):
        """Keys are case-insensitive."""
        assert color_tool.rgb_to_hex({"Red": 1, "GREEN": 2, "blue": 3}) == "#010203"

    def test_short_keys(self):
        """r, g, b keys."""
        assert color_tool.rgb_to_hex({"r": 1, "g": 2, "b": 3}) == "#010203"

    @pytest.mark.parametrize("value", ["rgb(10, 20, 30)", "10,20,30", " 10, 20 ,30 "])
    def test_strings(self, value: str):
        """Textual rgb forms."""
        assert color_tool.rgb_to_hex(value) == "#0a141e"

    @pytest.mark.parametrize(
        "value",
        ["nonsense", [1, 2], {"r": 1}, ["a", 2, 3], "rgb(1,2,3", "1,2,3)", "(1,2,3)"],
    )
    def test_unreadable(self, value: object):
        """Return None for input that cannot be read."""
        assert color_tool.rgb_to_hex(value) is None  # type: ignore[arg-type]

    def test_round_trip(self):
        """Encoding then decoding gives the original channels."""
        for rgb in ((0, 0, 0), (255, 255, 255), (1, 128, 254)):
            hex_ = color_tool.rgb_to_hex(*rgb)
            assert hex_ is not None
            assert color_tool.hex_to_rgb(hex_) == rgb


class TestColorToRgb:
    """Resolve any color definition to channels."""

    @pytest.mark.parametrize("value", ["red", "RED", "#f00", "#ff0000", "rgb(255,0,0)"])
    def test_red(self, value: str):
        """Names, hex, and rgb text all resolve."""
        assert color_tool.color_to_rgb(value) == (255, 0, 0)

    def test_rgb_text(self):
        """rgb() text is read through rgb_to_hex."""
        assert color_tool.color_to_rgb("rgb(10,20,30)") == (10, 20, 30)

    def test_mapping(self):
        """r/g/b mappings are read."""
        assert color_tool.color_to_rgb({"r": 1, "g": 2, "b": 3}) == (1, 2, 3)

    def test_sequence_passes_through_unchecked(self):
        """Sequences keep their length and are not range checked."""
        assert color_tool.color_to_rgb([300, 0, 0]) == (300, 0, 0)
        assert color_tool.color_to_rgb([1, 2, 3, 4]) == (1, 2, 3, 4)

    @pytest.mark.parametrize("value", [[1, 2], [1, 2, 3, 4, 5], "nope", 42])
    def test_invalid(self, value: object):
        """Raise an ArgumentError naming the value."""
        with pytest.raises(ArgumentError) as excinfo:
            _ = color_tool.color_to_rgb(value)  # type: ignore[arg-type]
        assert excinfo.value.value == value


class TestColorToHex:
    """Resolve any color definition to #rrggbb."""

    def test_name(self):
        """Names resolve to lowercase hex."""
        assert color_tool.color_to_hex("Aqua") == "#00ffff"

    def test_three_item_sequence(self):
        """Sequences are clamped."""
        assert color_tool.color_to_hex([256, 0, 1]) == "#ff0001"

    def test_four_item_sequence(self):
        """Only three items are accepted."""
        with pytest.raises(ArgumentError):
            _ = color_tool.color_to_hex([1, 2, 3, 4])


class TestNamedColors:
    """Exact and nearest names."""

    def test_first_declared_name_wins(self):
        """aqua and cyan share a value. aqua is declared first."""
        assert color_tool.get_named_color("#00ffff") == "aqua"
        assert color_tool.get_named_color("#FF00FF") == "fuchsia"

    def test_named_from_sequence(self):
        """Any definition works."""
        assert color_tool.get_named_color([255, 0, 0]) == "red"

    def test_not_named(self):
        """Most colors have no exact name."""
        assert not color_tool.is_named_color("#123456")
        assert color_tool.get_named_color("nope") is None

    def test_is_named(self):
        """Exact match."""
        assert color_tool.is_named_color("rgb(0, 0, 0)")

    def test_nearest(self):
        """An off-by-one red is nearest to red."""
        assert color_tool.get_nearest_color_name("#fe0000") == "red"

    def test_nearest_exact(self):
        """An exact name is its own nearest name."""
        assert color_tool.get_nearest_color_name("#00ffff") == "aqua"

    def test_color_names(self):
        """Table order is kept."""
        names = color_tool.get_color_names()
        assert len(names) == 140
        assert names[0] == "aliceblue"
        assert names.index("aqua") < names.index("cyan")


class TestParseColorText:
    """The textual forms keep alpha where they have it."""

    def test_argb(self):
        """Alpha comes first in argb."""
        assert color_tool.parse_color_text("argb(1, 2, 3, 4)") == (2, 3, 4, 1)

    def test_rgba(self):
        """Alpha comes last in rgba."""
        assert color_tool.parse_color_text("RGBA(1,2,3,4)") == (1, 2, 3, 4)

    def test_bare(self):
        """No alpha."""
        assert color_tool.parse_color_text("1, 2, 3") == (1, 2, 3, None)

    def test_invalid(self):
        """Two channels are not a color."""
        assert color_tool.parse_color_text("rgb(1,2)") is None

    @pytest.mark.parametrize("value", ["rgb(1, 2, 3", "1, 2, 3)"])
    def test_unbalanced(self, value: str):
        """A closing parenthesis needs an opening one."""
        assert color_tool.parse_color_text(value) is None


class TestReadChannelMapping:
    """Mappings with optional alpha."""

    def test_with_alpha(self):
        """Upper-case keys."""
        value = {"R": 1, "G": 2, "B": 3, "A": 4}
        assert color_tool.read_channel_mapping(value) == (1, 2, 3, 4)

    def test_long_keys(self):
        """red/green/blue without alpha."""
        value = {"red": 1, "green": 2, "blue": 3}
        assert color_tool.read_channel_mapping(value) == (1, 2, 3, None)

    def test_missing_keys(self):
        """No channels."""
        assert color_tool.read_channel_mapping({"x": 1}) is None

    def test_not_integers(self):
        """Values must be integers."""
        assert color_tool.read_channel_mapping({"r": "a", "g": 1, "b": 1}) is None
