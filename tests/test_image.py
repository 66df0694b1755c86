import numpy as np
import pytest
from PIL import Image

from asciishade.errors import ResolutionError
from asciishade.image import (
    SubImageBrightness,
    load_image,
    next_power_of_two,
    pad_to_power_of_two,
    resolution_bounds,
    split_tiles,
    tile_brightness,
)


@pytest.mark.parametrize("n, expected", [(0, 1), (1, 1), (2, 2), (3, 4), (5, 8), (64, 64), (65, 128)])
def test_next_power_of_two(n, expected):
    assert next_power_of_two(n) == expected


def test_pad_centres_image_on_white():
    pixels = np.zeros((3, 5, 3), dtype=np.uint8)
    padded = pad_to_power_of_two(pixels)
    assert padded.shape == (4, 8, 3)
    # (4 - 3) // 2 rows above, (8 - 5) // 2 columns to the left
    assert (padded[0:3, 1:6] == 0).all()
    assert (padded[3, :] == 255).all()
    assert (padded[:, 0] == 255).all()
    assert (padded[:, 6:] == 255).all()


def test_pad_leaves_power_of_two_image_alone():
    pixels = np.full((4, 8, 3), 7, dtype=np.uint8)
    np.testing.assert_array_equal(pad_to_power_of_two(pixels), pixels)


@pytest.mark.parametrize(
    "width, height, expected",
    [(256, 16, (16, 256)), (16, 256, (1, 16)), (100, 50, (2, 128)), (1, 1, (1, 1))],
)
def test_resolution_bounds(width, height, expected):
    assert resolution_bounds(width, height) == expected


def test_split_tiles_shape():
    padded = np.zeros((8, 16, 3), dtype=np.uint8)
    tiles = split_tiles(padded, 4)
    assert tiles.shape == (2, 4, 4, 4, 3)


def test_split_tiles_order():
    padded = np.zeros((4, 4, 3), dtype=np.uint8)
    padded[0:2, 2:4] = 9  # top right tile
    tiles = split_tiles(padded, 2)
    assert (tiles[0, 1] == 9).all()
    assert (tiles[0, 0] == 0).all()
    assert (tiles[1, 1] == 0).all()


def test_tile_brightness_uses_luma_weights():
    red = np.zeros((4, 4, 3), dtype=np.uint8)
    red[..., 0] = 255
    np.testing.assert_allclose(tile_brightness(red, 1), [[0.2126]])

    green = np.zeros((4, 4, 3), dtype=np.uint8)
    green[..., 1] = 255
    np.testing.assert_allclose(tile_brightness(green, 2), np.full((2, 2), 0.7152))


def test_tile_brightness_halves():
    pixels = np.zeros((8, 8, 3), dtype=np.uint8)
    pixels[:, 4:] = 255
    grid = tile_brightness(pixels, 2)
    np.testing.assert_allclose(grid, [[0.0, 1.0], [0.0, 1.0]])


def test_load_image_converts_to_rgb():
    img = Image.new("L", (6, 3), 200)
    arr = load_image(img)
    assert arr.shape == (3, 6, 3)
    assert arr.dtype == np.uint8
    assert (arr == 200).all()


def test_load_image_from_path(tmp_path):
    path = tmp_path / "img.png"
    Image.new("RGB", (5, 4), (1, 2, 3)).save(path)
    arr = load_image(path)
    assert arr.shape == (4, 5, 3)
    assert tuple(arr[0, 0]) == (1, 2, 3)


def test_sub_image_brightness_caches_per_resolution():
    sub = SubImageBrightness(Image.new("RGB", (16, 16), (255, 255, 255)))
    first = sub.brightness(4)
    assert sub.brightness(4) is first
    second = sub.brightness(8)
    assert second.shape == (8, 8)
    np.testing.assert_allclose(second, 1.0)


def test_sub_image_brightness_padding_counts_as_white():
    sub = SubImageBrightness(Image.new("RGB", (6, 6), (0, 0, 0)))
    assert sub.padded.shape == (8, 8, 3)
    # each 4x4 tile keeps a 3x3 block of black pixels
    np.testing.assert_allclose(sub.brightness(2), np.full((2, 2), 7 / 16))


@pytest.mark.parametrize("resolution", [0, 1, 32])
def test_sub_image_brightness_rejects_out_of_bounds(resolution):
    sub = SubImageBrightness(Image.new("RGB", (16, 8)))
    with pytest.raises(ResolutionError):
        sub.brightness(resolution)


def test_resolution_error_is_value_error():
    sub = SubImageBrightness(Image.new("RGB", (4, 4)))
    with pytest.raises(ValueError, match="outside bounds"):
        sub.check_resolution(8)


def test_load_image_converts_grayscale_array():
    arr = load_image(np.full((6, 5), 90, dtype=np.uint8))
    assert arr.shape == (6, 5, 3)
    assert (arr == 90).all()


def test_load_image_drops_alpha_channel():
    rgba = np.zeros((6, 5, 4), dtype=np.uint8)
    rgba[..., :3] = (10, 20, 30)
    rgba[..., 3] = 255
    arr = load_image(rgba)
    assert arr.shape == (6, 5, 3)
    assert tuple(arr[0, 0]) == (10, 20, 30)


def test_load_image_rejects_unknown_shape():
    with pytest.raises(ValueError, match="shape"):
        load_image(np.zeros((4, 4, 2), dtype=np.uint8))
