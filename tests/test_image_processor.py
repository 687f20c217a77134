import unittest

import pytest
from PIL import Image

from iconcraft.errors import DecodeError, InputValidationError
from iconcraft.models import AdaptiveLayers, IOSIconSize, LayerSource, PaddingConfig, Platform
from iconcraft.services.image_processor import BACKGROUND, FOREGROUND, ImageProcessor

from conftest import draw_icon


class TestPixelMath(unittest.TestCase):
    def setUp(self):
        self.processor = ImageProcessor()

    def test_calculate_pixel_size(self):
        self.assertEqual(self.processor.calculate_pixel_size("20x20", "2x"), 40)
        self.assertEqual(self.processor.calculate_pixel_size("83.5x83.5", "2x"), 167)
        self.assertEqual(self.processor.calculate_pixel_size("1024x1024", "1x"), 1024)
        self.assertEqual(IOSIconSize("83.5x83.5", "2x", "a.png").pixel_size, 167)

    def test_content_ratio_clamped(self):
        padding = PaddingConfig(android_scale=0)
        self.assertEqual(self.processor.compute_content_ratio(Platform.ANDROID, padding), 0.1)

    def test_content_ratio_scaled(self):
        padding = PaddingConfig(ios_scale=1.25)
        self.assertAlmostEqual(self.processor.compute_content_ratio(Platform.IOS, padding), 1.0)
        self.assertAlmostEqual(self.processor.compute_content_ratio(Platform.ANDROID, padding), 0.54)

    def test_safe_zone_constant_kept_separately(self):
        self.assertAlmostEqual(PaddingConfig.ANDROID_SAFE_ZONE_RATIO, 66 / 108)
        self.assertEqual(PaddingConfig().android_ratio, 0.54)

    def test_is_hex_color(self):
        self.assertTrue(self.processor.is_hex_color("#FF5722"))
        self.assertTrue(self.processor.is_hex_color("#abc"))
        self.assertFalse(self.processor.is_hex_color("FF5722"))
        self.assertFalse(self.processor.is_hex_color("#12345"))
        self.assertFalse(self.processor.is_hex_color(None))


def test_load_image_converts_to_rgba(jpeg_image):
    image, metadata = ImageProcessor().load_image(jpeg_image)
    assert image.mode == "RGBA"
    assert (metadata.width, metadata.height, metadata.format) == (600, 600, "jpeg")


def test_load_image_errors(tmp_path, not_an_image):
    processor = ImageProcessor()
    with pytest.raises(DecodeError):
        processor.load_image(not_an_image)
    with pytest.raises(DecodeError):
        processor.load_image(tmp_path / "missing.png")


def test_validate_image_format(source_image, jpeg_image, not_an_image, tmp_path):
    processor = ImageProcessor()
    assert processor.validate_image_format(source_image)
    assert processor.validate_image_format(jpeg_image)
    assert not processor.validate_image_format(not_an_image)
    assert not processor.validate_image_format(tmp_path / "missing.png")

    gif = tmp_path / "anim.gif"
    Image.new("RGB", (10, 10)).save(gif)
    assert not processor.validate_image_format(gif)


def test_prepare_image_upscales_square(tmp_path):
    processor = ImageProcessor()
    image, _ = processor.load_image(draw_icon(tmp_path / "512.png", size=(512, 512)))
    prepared = processor.prepare_image(image, 1024)
    assert prepared.size == (1024, 1024)


def test_prepare_image_centers_non_square(tmp_path):
    processor = ImageProcessor()
    path = tmp_path / "wide.png"
    Image.new("RGBA", (800, 400), (255, 0, 0, 255)).save(path)
    image, _ = processor.load_image(path)

    prepared = processor.prepare_image(image, 512)

    assert prepared.size == (800, 800)
    alpha = prepared.getchannel("A")
    # Transparent bands above and below, opaque original in the middle
    assert alpha.getpixel((400, 0)) == 0
    assert alpha.getpixel((400, 199)) == 0
    assert alpha.getpixel((400, 200)) == 255
    assert alpha.getpixel((400, 599)) == 255
    assert alpha.getpixel((400, 600)) == 0
    assert alpha.getpixel((400, 799)) == 0


def test_prepare_image_keeps_large_square(source_image):
    processor = ImageProcessor()
    image, _ = processor.load_image(source_image)
    assert processor.prepare_image(image, 1024).size == (1024, 1024)


def test_resize_does_not_touch_source():
    processor = ImageProcessor()
    source = Image.new("RGBA", (100, 100), (1, 2, 3, 255))
    icon = processor.resize(source, 40)
    assert icon.size == (40, 40)
    assert source.size == (100, 100)


def test_resize_round_clears_outside_circle():
    processor = ImageProcessor()
    source = Image.new("RGBA", (256, 256), (10, 20, 30, 255))
    icon = processor.resize_round(source, 96)
    alpha = icon.getchannel("A")
    mask = processor.create_circular_mask(96)

    for y in range(96):
        for x in range(96):
            if mask.getpixel((x, y)) == 0:
                assert alpha.getpixel((x, y)) == 0
            else:
                assert alpha.getpixel((x, y)) == 255


def test_resize_round_keeps_source_alpha_inside():
    processor = ImageProcessor()
    source = Image.new("RGBA", (64, 64), (10, 20, 30, 128))
    icon = processor.resize_round(source, 64)
    assert icon.getchannel("A").getpixel((32, 32)) == 128
    assert icon.getchannel("A").getpixel((0, 0)) == 0


def test_solid_color_layers():
    processor = ImageProcessor()
    layer = processor.prepare_adaptive_layer(LayerSource.color("#FF5722"), 108, BACKGROUND)
    assert layer.size == (108, 108)
    assert layer.getextrema()[3] == (255, 255)
    assert layer.getpixel((50, 50)) == (255, 87, 34, 255)

    default = processor.prepare_adaptive_layer(None, 81, BACKGROUND)
    assert default.getpixel((0, 0)) == (17, 17, 17, 255)

    short = processor.prepare_adaptive_layer("#f00", 10, BACKGROUND)
    assert short.getpixel((5, 5)) == (255, 0, 0, 255)


def test_background_image_covers_canvas(background_image):
    layer = ImageProcessor().prepare_adaptive_layer(background_image, 162, BACKGROUND)
    assert layer.size == (162, 162)
    assert layer.getchannel("A").getextrema() == (255, 255)


def test_foreground_layer_padded(foreground_image):
    processor = ImageProcessor()
    layer = processor.prepare_adaptive_layer(foreground_image, 108, FOREGROUND, Platform.ANDROID, PaddingConfig())

    assert layer.size == (108, 108)
    alpha = layer.getchannel("A")
    # content is round(108 * 0.54) = 58px, offset (108 - 58) // 2 = 25
    assert alpha.getbbox() == (25, 25, 83, 83)
    for corner in ((0, 0), (107, 0), (0, 107), (107, 107)):
        assert alpha.getpixel(corner) == 0


def test_foreground_layer_ios_ratio(foreground_image):
    layer = ImageProcessor().prepare_adaptive_layer(foreground_image, 1000, FOREGROUND, Platform.IOS, PaddingConfig())
    assert layer.getchannel("A").getbbox() == (100, 100, 900, 900)


def test_foreground_zoom_crops_to_target(foreground_image):
    padding = PaddingConfig(android_scale=3.0)
    layer = ImageProcessor().prepare_adaptive_layer(foreground_image, 108, FOREGROUND, Platform.ANDROID, padding)
    assert layer.size == (108, 108)
    # 1.62 ratio on an opaque square fills the whole window
    assert layer.getchannel("A").getextrema() == (255, 255)


def test_foreground_odd_padding_split(foreground_image):
    layer = ImageProcessor().prepare_adaptive_layer(foreground_image, 81, FOREGROUND, Platform.ANDROID, PaddingConfig())
    # content round(81 * 0.54) = 44px, padding 37 splits 18 before and 19 after
    assert layer.getchannel("A").getbbox() == (18, 18, 62, 62)


def test_foreground_zoom_window_is_centered(tmp_path):
    source = Image.new("RGBA", (200, 200), (255, 0, 0, 255))
    source.paste((0, 255, 0, 255), (50, 50, 150, 150))
    source.putpixel((50, 50), (0, 0, 255, 255))
    source.putpixel((149, 149), (255, 255, 255, 255))
    path = tmp_path / "marked.png"
    source.save(path)

    # 0.8 * 2.5 = 2.0: content 200px, window starts at (200 - 100) / 2 = 50
    padding = PaddingConfig(ios_scale=2.5)
    layer = ImageProcessor().prepare_adaptive_layer(str(path), 100, FOREGROUND, Platform.IOS, padding)

    assert layer.size == (100, 100)
    assert layer.getpixel((0, 0)) == (0, 0, 255, 255)
    assert layer.getpixel((99, 99)) == (255, 255, 255, 255)
    assert layer.getpixel((99, 0)) == (0, 255, 0, 255)
    assert layer.getpixel((0, 99)) == (0, 255, 0, 255)


def test_foreground_tiny_target_keeps_one_pixel(foreground_image):
    padding = PaddingConfig(android_scale=0)
    layer = ImageProcessor().prepare_adaptive_layer(foreground_image, 1, FOREGROUND, Platform.ANDROID, padding)
    assert layer.size == (1, 1)
    assert layer.getpixel((0, 0))[3] == 255


def test_foreground_never_collapses(foreground_image):
    padding = PaddingConfig(android_scale=0)
    layer = ImageProcessor().prepare_adaptive_layer(foreground_image, 100, FOREGROUND, Platform.ANDROID, padding)
    # clamped to a 10px content box
    assert layer.getchannel("A").getbbox() == (45, 45, 55, 55)


def test_composite_from_layers(foreground_image):
    composite = ImageProcessor().create_composite_from_layers(
        foreground_image, "#FF5722", 200, Platform.IOS, PaddingConfig()
    )
    assert composite.size == (200, 200)
    assert composite.getpixel((0, 0)) == (255, 87, 34, 255)
    assert composite.getpixel((100, 100)) == (0, 128, 255, 255)


def test_validate_adaptive_layers(foreground_image, not_an_image, tmp_path):
    processor = ImageProcessor()
    layers = AdaptiveLayers.from_values(foreground_image, "#123456")
    assert processor.validate_adaptive_layers(layers) is layers

    with pytest.raises(InputValidationError, match="Background layer not found"):
        processor.validate_adaptive_layers(AdaptiveLayers.from_values(foreground_image, str(tmp_path / "bg.png")))

    with pytest.raises(InputValidationError, match="Monochrome layer is not a valid image"):
        processor.validate_adaptive_layers(AdaptiveLayers.from_values(foreground_image, None, not_an_image))


def test_adaptive_layers_require_foreground():
    with pytest.raises(InputValidationError):
        AdaptiveLayers.from_values(None, "#FFFFFF")
    with pytest.raises(InputValidationError):
        LayerSource.color("#GGGGGG")
