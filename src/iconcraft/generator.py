"""
Programmatic entry points.

Thin functions over the shared IconGeneratorFactory, for build scripts and
other callers that don't want to wire generators themselves.
"""
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from iconcraft.configs.ios import IOS_CONFIG
from iconcraft.errors import IconCraftError, InputValidationError
from iconcraft.factory import icon_generator_factory
from iconcraft.models import AdaptiveLayers, GenerationOptions, GenerationResult, Platform, SizeCustomization

logger = logging.getLogger(__name__)


def generate_icons(input_path, output_dir, options: Optional[GenerationOptions] = None) -> GenerationResult:
    """Generates iOS icons."""
    return generate_icons_for_platform(Platform.IOS, input_path, output_dir, options)


def generate_icons_for_platform(
    platform: str,
    input_path,
    output_dir,
    options: Optional[GenerationOptions] = None,
) -> GenerationResult:
    generator = icon_generator_factory.create_generator(platform)
    return generator.generate(input_path, output_dir, options)


def generate_icons_for_multiple_platforms(
    platforms: Iterable[str],
    input_path,
    output_dir,
    options: Optional[GenerationOptions] = None,
) -> List[GenerationResult]:
    """
    Runs each platform independently. A failing platform is reported as an
    unsuccessful GenerationResult and does not stop the others.
    """
    results = []
    for platform in platforms:
        try:
            results.append(generate_icons_for_platform(platform, input_path, output_dir, options))
        except IconCraftError as e:
            logger.error(f"Failed to generate {platform} icons: {e}")
            results.append(GenerationResult(success=False, platform=platform, error=str(e)))
    return results


def validate_image_file(file_path) -> bool:
    return icon_generator_factory.image_processor.validate_image_format(file_path)


def create_zip_archive(source_dir, output_path, archive_dir_name: Optional[str] = IOS_CONFIG.output_directory_name) -> str:
    return icon_generator_factory.archive_manager.create_zip_archive(source_dir, output_path, archive_dir_name)


def get_supported_platforms() -> List[str]:
    return icon_generator_factory.get_supported_platforms()


def get_platform_info(platform: str) -> dict:
    return icon_generator_factory.create_generator(platform).get_platform_info()


def get_all_platforms_info() -> List[dict]:
    return icon_generator_factory.get_all_platform_info()


def quick_generate(
    foreground: Union[str, Path],
    output: Union[str, Path],
    background: Optional[str] = None,
    monochrome: Optional[Union[str, Path]] = None,
    platform: str = Platform.ALL,
    zip: bool = False,
    force: bool = False,
    custom_sizes: Optional[Union[SizeCustomization, Dict[str, Any]]] = None,
    fg_scale: Optional[float] = None,
    fg_scale_ios: Optional[float] = None,
    fg_scale_android: Optional[float] = None,
) -> List[GenerationResult]:
    """
    One-call adaptive generation from a foreground image.

    Example:
        quick_generate("icon.png", "build/icons", background="#FF5722", zip=True)

    The background may be an image path or a hex color and defaults to
    #111111. Returns one result per generated platform; "all" generates
    iOS then Android and stops at the first failure.
    """
    if not foreground:
        raise InputValidationError("'foreground' is required (path to your icon image)")
    if not output:
        raise InputValidationError("'output' is required (output directory path)")

    options = GenerationOptions(
        force=force,
        create_archive=zip,
        custom_sizes=custom_sizes,
        adaptive_layers=AdaptiveLayers.from_values(foreground, background, monochrome),
        foreground_scale=fg_scale,
        foreground_scale_ios=fg_scale_ios,
        foreground_scale_android=fg_scale_android,
    )

    if platform.lower() == Platform.ALL:
        platforms = get_supported_platforms()
    else:
        platforms = [platform.lower()]

    return [generate_icons_for_platform(key, None, output, options) for key in platforms]
