from pathlib import Path

import pytest
from PIL import Image


@pytest.fixture
def make_png(tmp_path):
    """Write a solid image under ``tmp_path`` and return its path."""

    def _make(name, size, color, mode="RGB"):
        path = Path(tmp_path) / name
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new(mode, size, color).save(path, format="PNG")
        return path

    return _make
