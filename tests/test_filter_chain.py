"""Behavioural tests for the colour-controls and blur chain."""

import logging
import time

import numpy as np
import pytest

from photofilter.core.bitmap import Bitmap
from photofilter.core.filters import apply_filters, facade
from photofilter.core.parameters import FilterParameters


@pytest.mark.parametrize("executor", ["auto", "jit", "numpy"])
def test_identity_parameters_return_identical_pixels(gradient, executor):
    result = apply_filters(gradient, FilterParameters(), executor=executor)

    assert result.same_pixels(gradient)


def test_two_by_two_checkerboard_is_unchanged_by_defaults(make_checkerboard):
    board = make_checkerboard(2, 2)

    result = apply_filters(board, FilterParameters())

    assert result.same_pixels(board)


@pytest.mark.parametrize("executor", ["jit", "numpy"])
def test_saturation_has_no_effect_on_gray(make_solid, executor):
    gray = make_solid(6, 4, (128, 128, 128, 255))

    result = apply_filters(gray, FilterParameters(saturation=0.0), executor=executor)

    assert result.same_pixels(gray)


def test_zero_saturation_maps_colour_to_luminance(make_solid):
    red = make_solid(2, 2, (255, 0, 0, 255))

    result = apply_filters(red, FilterParameters(saturation=0.0))

    # Rec.709 red weight: 0.2125 * 255 = 54.19
    assert np.all(result.pixels[..., :3] == 54)


def test_brightness_is_an_additive_offset(make_solid):
    image = make_solid(3, 3, (100, 100, 100, 255))

    result = apply_filters(image, FilterParameters(brightness=0.2))

    assert np.all(result.pixels[..., :3] == 151)


def test_contrast_pivots_around_mid_gray(make_solid):
    image = make_solid(1, 1, (150, 200, 60, 255))

    result = apply_filters(image, FilterParameters(contrast=2.0))

    # (v - 127.5) * 2 + 127.5, clamped to [0, 255]
    assert result.pixels[0, 0, :3].tolist() == [173, 255, 0]


def test_colour_controls_preserve_alpha(make_solid):
    image = make_solid(4, 4, (90, 120, 30, 77))

    result = apply_filters(image, FilterParameters(brightness=0.1, contrast=1.4, saturation=1.6))

    assert np.all(result.pixels[..., 3] == 77)


def test_apply_is_deterministic(gradient):
    params = FilterParameters(brightness=0.1, contrast=1.3, saturation=0.6, blur_radius=1.5)

    first = apply_filters(gradient, params)
    second = apply_filters(gradient, params)

    assert first.tobytes() == second.tobytes()


@pytest.mark.parametrize("radius", [0.0, 0.3, 1.0, 2.5, 7.0])
def test_output_dimensions_match_input_for_any_radius(make_gradient, radius):
    image = make_gradient(5, 3).with_scale(2.0)

    result = apply_filters(image, FilterParameters(blur_radius=radius, brightness=0.05))

    assert result.size == image.size
    assert result.scale == 2.0


def test_blur_does_not_fade_edges(make_solid):
    image = make_solid(10, 10, (200, 100, 50, 255))

    result = apply_filters(image, FilterParameters(blur_radius=3.0))

    assert result.same_pixels(image)


def test_larger_radius_smooths_more():
    # A black/white step: the clamped border repeats the same values the step
    # already has, so only the blur itself changes the spread.
    pixels = np.zeros((8, 16, 3), dtype=np.uint8)
    pixels[:, 8:] = 255
    step = Bitmap(pixels)

    variances = []
    for radius in (0.0, 0.5, 1.0, 2.0, 4.0):
        result = apply_filters(step, FilterParameters(blur_radius=radius))
        variances.append(float(np.var(result.pixels[..., :3].astype(np.float64))))

    assert variances[0] > 0.0
    for previous, current in zip(variances, variances[1:]):
        assert current <= previous


def test_blur_keeps_translucent_colour(make_solid):
    image = make_solid(6, 6, (40, 160, 220, 100))

    result = apply_filters(image, FilterParameters(blur_radius=1.0))

    assert result.same_pixels(image)


@pytest.mark.parametrize(
    "params",
    [
        FilterParameters(blur_radius=-1.0),
        FilterParameters(brightness=float("nan")),
        FilterParameters(contrast=float("inf")),
    ],
)
def test_invalid_parameters_fall_back_to_the_input(gradient, params, caplog):
    with caplog.at_level(logging.WARNING):
        result = apply_filters(gradient, params)

    assert result is gradient
    assert "returning the unfiltered input" in caplog.text


def test_jit_failure_retries_with_numpy(gradient, monkeypatch):
    params = FilterParameters(brightness=-0.1, contrast=1.2, saturation=1.5)
    expected = apply_filters(gradient, params, executor="numpy")

    def _broken(*_args, **_kwargs):
        raise RuntimeError("kernel unavailable")

    monkeypatch.setattr(facade, "apply_color_controls_jit", _broken)

    assert apply_filters(gradient, params).same_pixels(expected)
    assert apply_filters(gradient, params, executor="jit") is gradient


@pytest.mark.parametrize(
    "params",
    [
        FilterParameters(brightness=0.07, contrast=0.8, saturation=1.7, blur_radius=0.8),
        FilterParameters(brightness=-0.3, contrast=2.5, saturation=0.0),
        FilterParameters(blur_radius=6.0),
    ],
)
def test_executors_agree_bit_for_bit(gradient, params):
    jit_result = apply_filters(gradient, params, executor="jit")
    numpy_result = apply_filters(gradient, params, executor="numpy")

    assert jit_result.same_pixels(numpy_result)


def test_executors_agree_on_translucent_blur(make_gradient):
    pixels = np.array(make_gradient(20, 14).pixels)
    pixels[..., 3] = np.linspace(0, 255, 20, dtype=np.uint8)[None, :]
    image = Bitmap(pixels)
    params = FilterParameters(saturation=1.4, blur_radius=2.0)

    jit_result = apply_filters(image, params, executor="jit")

    assert jit_result.same_pixels(apply_filters(image, params, executor="numpy"))


def test_jit_blur_failure_retries_with_numpy(gradient, monkeypatch):
    params = FilterParameters(blur_radius=1.5)
    expected = apply_filters(gradient, params, executor="numpy")

    def _broken(*_args, **_kwargs):
        raise RuntimeError("kernel unavailable")

    monkeypatch.setattr(facade, "convolve_valid_jit", _broken)

    assert apply_filters(gradient, params).same_pixels(expected)
    assert apply_filters(gradient, params, executor="jit") is gradient


def test_largest_blur_radius_stays_interactive():
    rng = np.random.default_rng(7)
    image = Bitmap(rng.integers(0, 256, size=(240, 320, 4), dtype=np.uint8))
    # Compile the kernels before timing.
    apply_filters(image, FilterParameters(brightness=0.1, blur_radius=1.0), executor="jit")

    started = time.perf_counter()
    result = apply_filters(image, FilterParameters(brightness=0.1, blur_radius=100.0), executor="jit")
    elapsed = time.perf_counter() - started

    assert result is not image
    assert result.size == image.size
    assert elapsed < 3.0


def test_missing_bitmap_yields_none():
    assert apply_filters(None, FilterParameters(brightness=0.5)) is None


def test_unknown_executor_is_a_programming_error(gradient):
    with pytest.raises(ValueError):
        apply_filters(gradient, FilterParameters(), executor="opencl")


def test_mapping_parameters_are_accepted(gradient):
    expected = apply_filters(gradient, FilterParameters(brightness=0.1, blur_radius=1.0))

    result = apply_filters(gradient, {"brightness": 0.1, "blurRadius": 1.0})

    assert result.same_pixels(expected)


def test_single_pixel_bitmap_survives_large_blur():
    image = Bitmap(np.array([[[10, 20, 30, 255]]], dtype=np.uint8))

    result = apply_filters(image, FilterParameters(blur_radius=50.0))

    assert result.same_pixels(image)
