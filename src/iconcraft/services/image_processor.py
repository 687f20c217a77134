import logging
from pathlib import Path
from typing import Optional, Tuple, Union

from PIL import Image, ImageChops, ImageColor, ImageDraw, ImageOps, UnidentifiedImageError

from iconcraft.errors import DecodeError, InputValidationError
from iconcraft.models import (
    HEX_COLOR_PATTERN,
    AdaptiveLayers,
    ImageMetadata,
    LayerSource,
    PaddingConfig,
    Platform,
    ios_pixel_size,
    round_half_up,
)

logger = logging.getLogger(__name__)

# Pillow reports "JPEG", "PNG", ... ; "jpg" is listed for callers that check extensions
SUPPORTED_FORMATS = ("jpeg", "jpg", "png", "webp", "avif", "tiff")

RESAMPLE = Image.Resampling.LANCZOS
TRANSPARENT = (0, 0, 0, 0)

FOREGROUND = "foreground"
BACKGROUND = "background"


class ImageProcessor:
    """
    All raster work for icon generation, on top of Pillow.

    The processor keeps no per-request state. Padding ratios and foreground
    scale arrive as a PaddingConfig argument on every adaptive call, so one
    instance can be shared by concurrent generators.
    """

    def get_supported_formats(self) -> Tuple[str, ...]:
        return SUPPORTED_FORMATS

    def load_image(self, file_path: Union[str, Path]) -> Tuple[Image.Image, ImageMetadata]:
        """Decodes an image file into an RGBA raster plus its metadata."""
        try:
            with Image.open(file_path) as img:
                img.load()
                fmt = (img.format or "").lower()
                rgba = img.convert("RGBA")
        except FileNotFoundError as e:
            raise DecodeError(f"Failed to load image: file not found: {file_path}") from e
        except (UnidentifiedImageError, OSError, ValueError) as e:
            raise DecodeError(f"Failed to load image {file_path}: {e}") from e

        if not rgba.width or not rgba.height:
            raise DecodeError(f"Invalid image file: unable to read dimensions: {file_path}")

        return rgba, ImageMetadata(width=rgba.width, height=rgba.height, format=fmt)

    def validate_image_format(self, file_path: Union[str, Path]) -> bool:
        """Probe only: returns False instead of raising for unreadable or unsupported files."""
        try:
            with Image.open(file_path) as img:
                img.verify()
                fmt = (img.format or "").lower()
        except Exception as e:
            logger.debug(f"Format probe failed for {file_path}: {e}")
            return False
        return fmt in SUPPORTED_FORMATS

    def prepare_image(self, image: Image.Image, min_size: int = 1024) -> Image.Image:
        """
        Normalizes a decoded source:
        - upscales (LANCZOS) so the longer side reaches min_size
        - centers non-square images on a transparent square canvas
        """
        processed = image
        width, height = processed.size
        max_dimension = max(width, height)

        if max_dimension < min_size:
            factor = min_size / max_dimension
            width = round_half_up(width * factor)
            height = round_half_up(height * factor)
            logger.info(f"Image is smaller than {min_size}px, upscaling with Lanczos to {width}x{height}")
            processed = processed.resize((width, height), RESAMPLE)

        if width != height:
            logger.info("Non-square image detected, centering on transparent canvas")
            target = max(width, height)
            canvas = Image.new("RGBA", (target, target), TRANSPARENT)
            canvas.paste(processed, ((target - width) // 2, (target - height) // 2))
            processed = canvas

        return processed

    def resize(self, source: Image.Image, size: int) -> Image.Image:
        # Work on an independent copy; the source is shared between concurrent tasks
        return source.copy().resize((size, size), RESAMPLE)

    def resize_round(self, source: Image.Image, size: int) -> Image.Image:
        """Resizes and clears everything outside the inscribed circle."""
        icon = self.resize(source, size)
        mask = self.create_circular_mask(size)
        icon.putalpha(ImageChops.multiply(icon.getchannel("A"), mask))
        return icon

    def create_circular_mask(self, size: int) -> Image.Image:
        mask = Image.new("L", (size, size), 0)
        draw = ImageDraw.Draw(mask)
        draw.ellipse((0, 0, size - 1, size - 1), fill=255)
        return mask

    def calculate_pixel_size(self, size_str: str, scale: str) -> int:
        return ios_pixel_size(size_str, scale)

    def is_hex_color(self, value) -> bool:
        return isinstance(value, str) and bool(HEX_COLOR_PATTERN.match(value))

    def create_solid_color_image(self, width: int, height: int, hex_color: str) -> Image.Image:
        r, g, b = ImageColor.getrgb(hex_color)[:3]
        return Image.new("RGBA", (width, height), (r, g, b, 255))

    def compute_content_ratio(self, platform: str, padding: PaddingConfig) -> float:
        """Foreground content ratio, never below PaddingConfig.MIN_CONTENT_RATIO."""
        ratio = padding.base_ratio(platform) * padding.scale_for(platform)
        return max(PaddingConfig.MIN_CONTENT_RATIO, ratio)

    def prepare_adaptive_layer(
        self,
        source: Union[None, str, LayerSource],
        target_size: int,
        role: str = BACKGROUND,
        platform: str = Platform.ANDROID,
        padding: Optional[PaddingConfig] = None,
    ) -> Image.Image:
        """
        Renders one adaptive layer at target_size x target_size.

        Colors (and the default) become a flat opaque canvas. Background
        images are resized with a centered "cover" crop. Foreground images are
        fitted into the platform's content box and padded with transparency,
        or zoomed and center-cropped when the content ratio exceeds 1.
        """
        source = LayerSource.parse(source)
        padding = padding or PaddingConfig()

        if not source.is_image:
            return self.create_solid_color_image(target_size, target_size, source.hex_color)

        image, _ = self.load_image(source.value)

        if role != FOREGROUND:
            return ImageOps.fit(image, (target_size, target_size), RESAMPLE, centering=(0.5, 0.5))

        ratio = self.compute_content_ratio(platform, padding)
        content_size = max(1, round_half_up(target_size * ratio))
        content = self._contain(image, content_size)

        if ratio <= 1.0:
            total_padding = target_size - content_size
            padding_top = total_padding // 2
            layer = Image.new("RGBA", (target_size, target_size), TRANSPARENT)
            layer.paste(content, (padding_top, padding_top))
            return layer

        # Zoom mode: crop the centered target window out of the oversized content
        offset = round_half_up((content_size - target_size) / 2)
        return content.crop((offset, offset, offset + target_size, offset + target_size))

    def _contain(self, image: Image.Image, box: int) -> Image.Image:
        """Aspect-preserving fit into box x box, centered on transparency."""
        fitted = ImageOps.contain(image, (box, box), RESAMPLE)
        canvas = Image.new("RGBA", (box, box), TRANSPARENT)
        canvas.paste(fitted, ((box - fitted.width) // 2, (box - fitted.height) // 2))
        return canvas

    def create_composite_from_layers(
        self,
        foreground: Union[str, LayerSource],
        background: Union[None, str, LayerSource] = None,
        size: int = 1024,
        platform: str = Platform.IOS,
        padding: Optional[PaddingConfig] = None,
    ) -> Image.Image:
        """Background first, then the padded foreground alpha-blended over it."""
        bg_layer = self.prepare_adaptive_layer(background, size, BACKGROUND, platform, padding)
        fg_layer = self.prepare_adaptive_layer(foreground, size, FOREGROUND, platform, padding)
        return Image.alpha_composite(bg_layer.convert("RGBA"), fg_layer)

    def validate_adaptive_layers(self, layers: AdaptiveLayers) -> AdaptiveLayers:
        """
        Checks every image-backed layer before any rendering starts.
        Raises InputValidationError naming the failing layer.
        """
        checks = [("Foreground", layers.foreground), ("Background", layers.background)]
        if layers.monochrome is not None:
            checks.append(("Monochrome", layers.monochrome))

        for label, source in checks:
            if not source.is_image:
                continue
            if not Path(source.value).exists():
                raise InputValidationError(f"{label} layer not found: {source.value}")
            if not self.validate_image_format(source.value):
                raise InputValidationError(f"{label} layer is not a valid image format: {source.value}")

        return layers
