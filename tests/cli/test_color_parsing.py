import pytest

from colorblend.core.errors import InvalidParameter
from colorblend.utils.color import hex_to_rgb, parse_color, rgb_to_hex


def test_hex_colors():
    assert hex_to_rgb("#ff8000") == (255, 128, 0)
    assert hex_to_rgb("0000FF") == (0, 0, 255)
    assert hex_to_rgb("#fff") == (255, 255, 255)


def test_component_colors():
    assert parse_color("10, 20, 30") == (10, 20, 30)
    assert parse_color("#102030") == (16, 32, 48)


def test_hex_round_trip():
    assert rgb_to_hex((16, 32, 48)) == "#102030"


@pytest.mark.parametrize("value", ["#12345", "red", "1,2", "1,2,x", "0,0,256", ""])
def test_invalid_colors(value):
    with pytest.raises(InvalidParameter):
        parse_color(value)
