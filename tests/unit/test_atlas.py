import numpy as np
import pytest
from PIL import Image

from robo_avatar.atlas import (
    SpriteAtlas,
    atlas_from_image,
    check_atlas_size,
    load_atlas,
)
from robo_avatar.errors import AtlasError
from tests.test_utils import make_pixels


def test_atlas_is_read_only() -> None:
    pixels = make_pixels(10, 10)
    atlas = SpriteAtlas(pixels)
    assert not atlas.pixels.flags.writeable
    with pytest.raises(ValueError):
        atlas.pixels[0, 0] = (1, 1, 1, 1)
    # the caller's buffer is left writable
    pixels[0, 0] = (1, 1, 1, 1)
    assert tuple(atlas.pixels[0, 0]) == (0, 0, 0, 0)


def test_read_only_pixels_are_shared_not_copied() -> None:
    pixels = make_pixels(10, 10)
    pixels.setflags(write=False)
    assert SpriteAtlas(pixels).pixels is pixels


@pytest.mark.parametrize(
    "pixels",
    [
        np.zeros((10, 10, 3), dtype=np.uint8),
        np.zeros((10, 10), dtype=np.uint8),
        np.zeros((10, 10, 4), dtype=np.float32),
    ],
)
def test_atlas_rejects_non_rgba_arrays(pixels: np.ndarray) -> None:
    with pytest.raises(AtlasError):
        SpriteAtlas(pixels)


def test_region_is_a_view() -> None:
    pixels = make_pixels(600, 300)
    pixels[10, 310] = (9, 9, 9, 9)
    atlas = SpriteAtlas(pixels)
    region = atlas.region(300, 0)
    assert region.shape == (300, 300, 4)
    assert tuple(region[10, 10]) == (9, 9, 9, 9)
    assert np.shares_memory(region, atlas.pixels)


@pytest.mark.parametrize("x, y", [(301, 0), (0, 1), (-1, 0), (0, -1)])
def test_region_out_of_bounds(x: int, y: int) -> None:
    atlas = SpriteAtlas(make_pixels(600, 300))
    with pytest.raises(AtlasError):
        atlas.region(x, y)


def test_atlas_from_image_converts_to_rgba() -> None:
    atlas = atlas_from_image(Image.new("RGB", (4, 3), (5, 6, 7)))
    assert atlas.size == (4, 3)
    assert tuple(atlas.pixels[0, 0]) == (5, 6, 7, 255)


def test_check_atlas_size() -> None:
    with pytest.raises(AtlasError):
        check_atlas_size(SpriteAtlas(make_pixels(3000, 14999)))
    with pytest.raises(AtlasError):
        check_atlas_size(SpriteAtlas(make_pixels(2999, 15000)))
    check_atlas_size(SpriteAtlas(make_pixels(3000, 15000)))


def test_load_missing_atlas(tmp_path) -> None:
    with pytest.raises(AtlasError):
        load_atlas(str(tmp_path / "missing.png"))


def test_load_corrupt_atlas(tmp_path) -> None:
    path = tmp_path / "robo.png"
    path.write_bytes(b"not a png at all")
    with pytest.raises(AtlasError):
        load_atlas(str(path))


def test_load_too_small_atlas(tmp_path) -> None:
    path = tmp_path / "small.png"
    Image.new("RGBA", (300, 300)).save(path)
    with pytest.raises(AtlasError):
        load_atlas(str(path))


def test_load_atlas(tmp_path) -> None:
    path = tmp_path / "robo.png"
    Image.new("RGBA", (3000, 15000), (1, 2, 3, 4)).save(path)
    atlas = load_atlas(str(path))
    assert atlas.size == (3000, 15000)
    assert tuple(atlas.pixels[14999, 2999]) == (1, 2, 3, 4)
    assert not atlas.pixels.flags.writeable
