import cv2
import numpy as np
import pytest

from homography_playground.errors import ImageDecodeError
from homography_playground.raster import Raster, generate_grid_image, load_or_generate


def test_shape_must_match_dimensions():
    with pytest.raises(ValueError):
        Raster(3, 2, np.zeros((3, 2, 4), dtype=np.uint8))
    with pytest.raises(ValueError):
        Raster(2, 2, np.zeros((2, 2, 3), dtype=np.uint8))
    with pytest.raises(ValueError):
        Raster(2, 2, np.zeros((2, 2, 4), dtype=np.float32))


def test_pixel_access():
    pixels = np.zeros((2, 3, 4), dtype=np.uint8)
    pixels[1, 2] = (1, 2, 3, 4)
    r = Raster(3, 2, pixels)

    assert r.pixel(2, 1) == (1, 2, 3, 4)
    assert r.pixel(0, 0) == (0, 0, 0, 0)
    with pytest.raises(IndexError):
        r.pixel(3, 0)
    with pytest.raises(IndexError):
        r.pixel(0, -1)


def test_filled():
    r = Raster.filled(4, 3, (255, 0, 0, 255))
    assert r.size == (4, 3)
    assert all(r.pixel(x, y) == (255, 0, 0, 255) for x in range(4) for y in range(3))


def test_from_rgb_promotes_to_opaque_rgba():
    rgb = np.zeros((2, 2, 3), dtype=np.uint8)
    rgb[0, 1] = (10, 20, 30)
    r = Raster.from_array(rgb)
    assert r.pixel(1, 0) == (10, 20, 30, 255)
    assert r.pixel(0, 0) == (0, 0, 0, 255)


def test_from_gray_promotes_to_opaque_rgba():
    gray = np.array([[0, 128]], dtype=np.uint8)
    r = Raster.from_array(gray)
    assert r.size == (2, 1)
    assert r.pixel(1, 0) == (128, 128, 128, 255)
    assert Raster.from_array(gray[:, :, None]) == r


def test_from_rgba_copies():
    rgba = np.full((2, 2, 4), 7, dtype=np.uint8)
    r = Raster.from_array(rgba)
    rgba[0, 0] = 0
    assert r.pixel(0, 0) == (7, 7, 7, 7)


def test_from_array_rejects_bad_input():
    with pytest.raises(ValueError):
        Raster.from_array(np.zeros((2, 2, 2), dtype=np.uint8))
    with pytest.raises(ValueError):
        Raster.from_array(np.zeros((2, 2, 3), dtype=np.float64))


def test_resize_reallocates():
    r = Raster.filled(2, 2, (1, 1, 1, 1))
    r.resize(5, 3, color=(9, 8, 7, 6))
    assert r.size == (5, 3)
    assert r.pixels.shape == (3, 5, 4)
    assert r.pixel(4, 2) == (9, 8, 7, 6)


def test_equality():
    a = Raster.filled(2, 2, (1, 2, 3, 4))
    assert a == Raster.filled(2, 2, (1, 2, 3, 4))
    assert a != Raster.filled(2, 2, (1, 2, 3, 5))
    assert a != Raster.filled(2, 1, (1, 2, 3, 4))


def test_load_converts_bgr_to_rgba(tmp_path):
    bgr = np.zeros((3, 4, 3), dtype=np.uint8)
    bgr[1, 2] = (255, 0, 0)  # blue in OpenCV order
    path = str(tmp_path / "blue.png")
    assert cv2.imwrite(path, bgr)

    r = Raster.load(path)
    assert r.size == (4, 3)
    assert r.pixel(2, 1) == (0, 0, 255, 255)


def test_load_keeps_alpha(tmp_path):
    bgra = np.zeros((2, 2, 4), dtype=np.uint8)
    bgra[0, 0] = (0, 0, 255, 100)
    path = str(tmp_path / "alpha.png")
    assert cv2.imwrite(path, bgra)

    assert Raster.load(path).pixel(0, 0) == (255, 0, 0, 100)


def test_load_grayscale(tmp_path):
    gray = np.full((2, 3), 77, dtype=np.uint8)
    path = str(tmp_path / "gray.png")
    assert cv2.imwrite(path, gray)

    assert Raster.load(path).pixel(2, 1) == (77, 77, 77, 255)


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(ImageDecodeError):
        Raster.load(str(tmp_path / "nope.png"))


def test_load_undecodable_file_raises(tmp_path):
    path = tmp_path / "broken.png"
    path.write_bytes(b"not an image")
    with pytest.raises(ImageDecodeError):
        Raster.load(str(path))


def test_load_or_generate_falls_back_to_grid(tmp_path):
    r = load_or_generate(str(tmp_path / "missing.png"))
    assert r.size == (512, 512)
    assert r.pixel(0, 0) == (0, 0, 0, 255)
    assert r.pixel(10, 10) == (255, 255, 255, 255)


def test_grid_image():
    r = generate_grid_image(width=100, height=60, grid_spacing=20)
    assert r.size == (100, 60)
    assert r.pixel(20, 5) == (0, 0, 0, 255)


def test_to_qimage():
    QtGui = pytest.importorskip("PyQt5.QtGui")

    r = Raster.filled(3, 2, (255, 0, 0, 255))
    qimg = r.to_qimage()
    assert qimg.format() == QtGui.QImage.Format_RGBA8888
    assert (qimg.width(), qimg.height()) == (3, 2)
    assert qimg.pixel(2, 1) == 0xFFFF0000
