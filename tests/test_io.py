import numpy as np
import pytest
from PIL import Image

from matte_core import MissingInput, RasterImage, decode, decode_bytes, encode
from matte_core.errors import MatteIOError


def test_decode_synthesises_opaque_alpha(make_png):
    path = make_png("rgb.png", (3, 2), (10, 20, 30))
    img = decode(path)
    assert img.size == (3, 2)
    assert img.pixel(2, 1) == (10, 20, 30, 255)


def test_decode_palette_image(tmp_path):
    path = tmp_path / "p.png"
    Image.new("RGB", (2, 2), (0, 255, 0)).convert("P").save(path)
    assert decode(path).pixel(0, 0) == (0, 255, 0, 255)


def test_encode_round_trips_rgba(tmp_path):
    rng = np.random.default_rng(1)
    arr = rng.integers(0, 256, size=(5, 7, 4), dtype=np.uint8)
    img = RasterImage.from_array(arr)
    path = encode(img, tmp_path / "nested" / "out.png")
    assert path.exists()
    assert decode(path) == img


def test_encode_refuses_overwrite(tmp_path):
    img = RasterImage.filled(1, 1, (0, 0, 0, 0))
    path = encode(img, tmp_path / "out.png")
    with pytest.raises(MatteIOError):
        encode(img, path, overwrite=False)


def test_missing_input(tmp_path):
    with pytest.raises(MissingInput):
        decode(tmp_path / "nope.png")


def test_unreadable_input(tmp_path):
    path = tmp_path / "broken.png"
    path.write_bytes(b"not an image")
    with pytest.raises(MatteIOError):
        decode(path)
    with pytest.raises(MatteIOError):
        decode_bytes(b"not an image")


def test_encode_into_blocked_directory(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("x")
    with pytest.raises(MatteIOError):
        encode(RasterImage.filled(1, 1, (0, 0, 0, 0)), blocker / "out.png")
