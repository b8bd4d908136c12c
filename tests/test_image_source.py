import numpy as np
import pytest
from PIL import Image

from photofilter.errors import ImageLoadError
from photofilter.io.image_source import PickedImage, load_bitmap


def test_load_png_keeps_pixels(tmp_path, gradient):
    path = tmp_path / "gradient.png"
    gradient.to_pil().save(path)

    bitmap = load_bitmap(path, scale=2.0)

    assert bitmap.same_pixels(gradient)
    assert bitmap.scale == 2.0


def test_load_applies_exif_orientation(tmp_path):
    path = tmp_path / "rotated.jpg"
    image = Image.new("RGB", (4, 2), (200, 10, 10))
    exif = Image.Exif()
    exif[0x0112] = 6
    image.save(path, exif=exif)

    bitmap = load_bitmap(path)

    assert bitmap.size == (2, 4)
    assert bitmap.is_opaque


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_bitmap(tmp_path / "absent.png")


def test_garbage_file_raises_image_load_error(tmp_path):
    path = tmp_path / "broken.png"
    path.write_bytes(b"not an image at all")

    with pytest.raises(ImageLoadError):
        load_bitmap(path)


def test_edited_image_wins_over_original(gradient, checkerboard):
    assert PickedImage(original=gradient, edited=checkerboard).selected is checkerboard
    assert PickedImage(original=gradient).selected is gradient
    assert PickedImage().selected is None


def test_picked_image_from_paths(tmp_path, gradient):
    path = tmp_path / "picked.png"
    gradient.to_pil().save(path)

    picked = PickedImage.from_paths(path)

    assert picked.edited is None
    assert picked.selected.same_pixels(gradient)
    assert np.array_equal(picked.original.pixels, gradient.pixels)
