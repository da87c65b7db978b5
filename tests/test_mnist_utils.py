import numpy as np
import pytest

from GetData import get_mnist
from utilities import mnist_utils
from utilities.pixel_csv import load_pixel_matrix_from_csv, to_float_array


def test_all_zero_pixels_render_white():
    raster = mnist_utils.to_grayscale_raster(np.zeros(784))
    assert raster.shape == (28, 28)
    assert raster.dtype == np.uint8
    assert (raster == 255).all()


def test_all_one_pixels_render_black():
    raster = mnist_utils.to_grayscale_raster(np.ones(784, dtype=np.float32))
    assert (raster == 0).all()


@pytest.mark.parametrize(("row", "col"), [(0, 0), (3, 17), (27, 1), (27, 27)])
def test_column_major_source_is_transposed(row, col):
    pixels = np.zeros(784)
    pixels[col * 28 + row] = 1.0

    raster = mnist_utils.to_grayscale_raster(pixels)

    assert raster[row, col] == 0
    mask = np.ones_like(raster, dtype=bool)
    mask[row, col] = False
    assert (raster[mask] == 255).all()


def test_midtones_truncate_toward_zero():
    # 255 - 0.5 * 255 = 127.5
    raster = mnist_utils.to_grayscale_raster(np.full(784, 0.5))
    assert (raster == 127).all()


def test_out_of_range_values_wrap_instead_of_clamping():
    pixels = np.zeros(784)
    pixels[0] = 1.01  # 255 - 257.55 = -2.55 -> -2 -> 254
    pixels[1] = -0.01  # 255 + 2.55 = 257.55 -> 257 -> 1
    raster = mnist_utils.to_grayscale_raster(pixels)
    assert raster[0, 0] == 254
    assert raster[1, 0] == 1


def test_render_is_deterministic():
    rng = np.random.default_rng(7)
    pixels = rng.random(784).astype(np.float32)
    first = mnist_utils.to_grayscale_raster(pixels)
    second = mnist_utils.to_grayscale_raster(pixels)
    np.testing.assert_array_equal(first, second)


def test_rejects_wrong_buffer_length():
    with pytest.raises(ValueError):
        mnist_utils.to_grayscale_raster(np.zeros(783))


def test_draw_sends_upsampled_frame_with_duration_hint(recording_display):
    image = mnist_utils.draw(np.zeros(784), recording_display)

    assert len(recording_display.frames) == 1
    frame = recording_display.frames[0]
    assert frame.shape == (280, 280)
    assert frame.dtype == np.uint8
    assert (frame == 255).all()
    np.testing.assert_array_equal(frame, image)
    assert recording_display.duration_hints == [mnist_utils.FRAME_DURATION_HINT_MILLIS]


def test_upsample_keeps_block_interiors():
    raster = np.full((28, 28), 255, dtype=np.uint8)
    raster[5, 9] = 0
    image = mnist_utils.upsample(raster)
    # Centre of the 10x10 block that pixel (5, 9) expands into.
    assert image[55, 95] < 128
    assert image[0, 0] == 255
    assert image[279, 279] == 255


def test_draw_is_deterministic(recording_display):
    rng = np.random.default_rng(3)
    pixels = rng.random(784)
    mnist_utils.draw(pixels, recording_display)
    mnist_utils.draw(pixels, recording_display)
    np.testing.assert_array_equal(recording_display.frames[0], recording_display.frames[1])


@pytest.mark.parametrize(
    ("value", "expected"),
    [(0.2, 204), (0.4, 153), (0.0627451, 239)],
)
def test_scaling_is_single_precision(value, expected):
    raster = mnist_utils.to_grayscale_raster(np.full(784, value, dtype=np.float32))
    assert (raster == expected).all()


def test_every_mnist_level_survives_csv_round_trip(tmp_path):
    row = np.zeros(784, dtype=np.float32)
    row[:256] = np.arange(256, dtype=np.float32) / 255.0
    path = tmp_path / "levels.csv"
    get_mnist.write_pixel_csv(row[None, :], str(path))
    loaded = to_float_array(load_pixel_matrix_from_csv(str(path), 0, 1))[0]

    rendered = mnist_utils.to_grayscale_raster(loaded).T.ravel()[:256]

    expected = [int(255.0 - float(np.float32(v) * np.float32(255))) % 256 for v in loaded[:256]]
    np.testing.assert_array_equal(rendered, expected)
    assert np.abs(rendered.astype(int) - (255 - np.arange(256))).max() <= 1


def test_non_finite_and_huge_values_saturate_before_wrapping():
    pixels = np.zeros(784, dtype=np.float32)
    pixels[:5] = [np.inf, -np.inf, np.nan, 1e12, -1e12]
    raster = mnist_utils.to_grayscale_raster(pixels)
    assert raster[:5, 0].tolist() == [0, 255, 0, 0, 255]
