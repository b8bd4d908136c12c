import pytest

from photofilter.core.scaler import preview_target_size, scale_bitmap, target_pixel_size



def test_preview_target_size_multiplies_by_device_scale():
    assert preview_target_size(100, 50, 2.0) == (200.0, 100.0)
    assert preview_target_size(100, 50, 1.5) == (150.0, 75.0)


def test_preview_target_size_never_drops_below_one_pixel_per_point():
    assert preview_target_size(100, 50, 0.5) == (100.0, 50.0)


def test_target_pixel_size_rounds_half_up_with_minimum_of_one():
    assert target_pixel_size((7.4, 3.6)) == (7, 4)
    assert target_pixel_size((10.5, 2.5)) == (11, 3)
    assert target_pixel_size((0.2, 0.4)) == (1, 1)


def test_missing_source_returns_none():
    assert scale_bitmap(None, (10.0, 10.0)) is None


@pytest.mark.parametrize(
    "source_size, target, expected",
    [
        ((40, 10), (12.0, 12.0), (12, 12)),
        ((10, 40), (30.0, 6.0), (30, 6)),
        ((16, 16), (5.6, 9.2), (6, 9)),
        ((8, 6), (20.0, 15.0), (20, 15)),
        ((3, 3), (1.0, 1.0), (1, 1)),
    ],
)
def test_output_dimensions_match_rounded_target(make_gradient, source_size, target, expected):
    bitmap = make_gradient(*source_size)

    scaled = scale_bitmap(bitmap, target)

    assert scaled is not None
    assert scaled.size == expected


def test_scaled_bitmap_carries_device_scale(make_checkerboard):
    bitmap = make_checkerboard(8, 8)

    scaled = scale_bitmap(bitmap, preview_target_size(2, 2, 2.0), device_scale=2.0)

    assert scaled is not None
    assert scaled.size == (4, 4)
    assert scaled.scale == 2.0


def test_matching_size_keeps_pixels(make_gradient):
    bitmap = make_gradient(9, 4)

    scaled = scale_bitmap(bitmap, (9.0, 4.0))

    assert scaled is not None
    assert scaled.same_pixels(bitmap)
