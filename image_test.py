import numpy as np
import pytest

from _image_utils import load_image, prepare_image, save_image



def test_prepare_image_resizes_into_canvas():
    image = np.full((120, 90, 3), 77, dtype=np.uint8)

    prepared = prepare_image(image, 400, 300)

    assert prepared.shape == (300, 400, 3)
    assert prepared.dtype == np.uint8
    assert np.all(prepared == 77)


def test_prepare_image_grayscale_and_alpha():
    gray = np.full((50, 50), 10, dtype=np.uint8)
    rgba = np.zeros((50, 50, 4), dtype=np.uint8)
    rgba[..., 0] = 200

    assert prepare_image(gray, 50, 50).shape == (50, 50, 3)

    prepared = prepare_image(rgba, 50, 50)
    assert prepared.shape == (50, 50, 3)
    assert np.all(prepared[..., 0] == 200)


def test_prepare_image_copies_canvas_sized_input():
    image = np.zeros((40, 40, 3), dtype=np.uint8)

    prepared = prepare_image(image, 40, 40)
    prepared[0, 0] = 255

    assert not image.any()


def test_save_and_load_round_trip(tmp_path):
    rng = np.random.default_rng(4)
    image = rng.integers(0, 256, (30, 20, 3), dtype=np.uint8)
    path = str(tmp_path / "image.png")

    save_image(path, image)

    np.testing.assert_array_equal(load_image(path), image)


def test_save_rgba(tmp_path):
    image = np.zeros((10, 10, 4), dtype=np.uint8)
    image[..., 2] = 255
    image[..., 3] = 255
    path = str(tmp_path / "image.png")

    save_image(path, image)

    assert np.all(load_image(path) == (0, 0, 255))


def test_load_missing_image(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_image(str(tmp_path / "missing.png"))
