"""
Pytest configuration and shared fixtures.
"""
import os

import pytest
from PIL import Image, ImageDraw

from iconcraft.utils.config import IconCraftConfig


def draw_icon(path, size=(1024, 1024), color=(255, 87, 34, 255), fmt="PNG"):
    """
    Writes a test source image: a filled circle on transparency.

    Returns:
        str: The written path.
    """
    mode = "RGB" if fmt == "JPEG" else "RGBA"
    background = (255, 255, 255) if mode == "RGB" else (0, 0, 0, 0)
    image = Image.new(mode, size, background)
    draw = ImageDraw.Draw(image)
    draw.ellipse((0, 0, size[0] - 1, size[1] - 1), fill=color[:3] if mode == "RGB" else color)
    image.save(path, format=fmt)
    return str(path)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Points the user config at an empty location and clears ICONCRAFT_* overrides."""
    for name in list(os.environ):
        if name.startswith("ICONCRAFT_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("ICONCRAFT_CONFIG", str(tmp_path / "no-config.yaml"))
    IconCraftConfig.reload()
    yield
    IconCraftConfig.reload()


@pytest.fixture
def source_image(tmp_path):
    """Square 1024x1024 PNG."""
    return draw_icon(tmp_path / "icon.png")


@pytest.fixture
def small_image(tmp_path):
    """Non-square image below every platform minimum."""
    return draw_icon(tmp_path / "small.png", size=(200, 100))


@pytest.fixture
def jpeg_image(tmp_path):
    return draw_icon(tmp_path / "photo.jpg", size=(600, 600), fmt="JPEG")


@pytest.fixture
def foreground_image(tmp_path):
    """Opaque square foreground, so padding is measurable from the alpha channel."""
    path = tmp_path / "foreground.png"
    Image.new("RGBA", (512, 512), (0, 128, 255, 255)).save(path)
    return str(path)


@pytest.fixture
def background_image(tmp_path):
    path = tmp_path / "background.png"
    Image.new("RGBA", (800, 400), (20, 200, 20, 255)).save(path)
    return str(path)


@pytest.fixture
def not_an_image(tmp_path):
    path = tmp_path / "notes.png"
    path.write_text("definitely not a png", encoding="utf-8")
    return str(path)


@pytest.fixture
def output_dir(tmp_path):
    return tmp_path / "out"
