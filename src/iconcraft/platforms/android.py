import logging
from pathlib import Path
from typing import Iterable, List, Optional

from iconcraft.configs.android import (
    ADAPTIVE_XML_FILES,
    ADAPTIVE_XML_FOLDER,
    ANDROID_CONFIG,
    BACKGROUND_FILE,
    FOREGROUND_FILE,
    MONOCHROME_FILE,
)
from iconcraft.models import AdaptiveLayers, GenerationOptions, GenerationResult, PaddingConfig, PlatformConfig
from iconcraft.platforms.base import PlatformGenerator
from iconcraft.services.image_processor import BACKGROUND, FOREGROUND

logger = logging.getLogger(__name__)

# Legacy icons in adaptive mode are resized from one composite at this size
LEGACY_COMPOSITE_SIZE = 432

ADAPTIVE_ICON_XML = """<?xml version="1.0" encoding="utf-8"?>
<adaptive-icon xmlns:android="http://schemas.android.com/apk/res/android">
    <background android:drawable="@mipmap/ic_launcher_background"/>
    <foreground android:drawable="@mipmap/ic_launcher_foreground"/>{monochrome}
</adaptive-icon>
"""
MONOCHROME_XML = '\n    <monochrome android:drawable="@mipmap/ic_launcher_monochrome"/>'


class AndroidGenerator(PlatformGenerator):
    """
    Writes density-bucketed mipmap folders.

    Legacy mode resizes one source into every launcher size, masking the
    *_round icons to a circle. Adaptive mode renders foreground, background
    and monochrome layers per density, the mipmap-anydpi-v26 XML, and
    flattened legacy icons for API 25 and below.
    """

    def __init__(self, image_processor, file_manager, archive_manager, custom_sizes=None):
        super().__init__(ANDROID_CONFIG, image_processor, file_manager, archive_manager, custom_sizes)

    def _run_pipeline(self, input_path, output_dir: Path, options: GenerationOptions) -> GenerationResult:
        if options.adaptive_mode:
            return self.generate_adaptive_mode(options.adaptive_layers, output_dir, options)
        return super()._run_pipeline(input_path, output_dir, options)

    # ------------------------------------------------------------------
    # Legacy mode
    # ------------------------------------------------------------------

    def generate_icons(self, source, target_dir, config, padding):
        self.create_folder_structure(target_dir, self.group_icons_by_folder(config))
        self.run_asset_tasks(
            (icon.relative_path, lambda icon=icon: self.generate_single_icon(source, target_dir, icon))
            for icon in config.icon_sizes
        )

    def group_icons_by_folder(self, config: Optional[PlatformConfig] = None) -> List[str]:
        config = config or self.config
        return list(dict.fromkeys(icon.folder for icon in config.icon_sizes))

    def create_folder_structure(self, target_dir, folders: Iterable[str]):
        for folder in folders:
            self.file_manager.ensure_directory(Path(target_dir) / folder)

    def generate_single_icon(self, source, target_dir, icon):
        output_path = Path(target_dir) / icon.folder / icon.filename
        if "_round" in icon.filename:
            image = self.image_processor.resize_round(source, icon.size)
            logger.debug(f"{icon.relative_path} ({icon.size}x{icon.size}px, circular)")
        else:
            image = self.image_processor.resize(source, icon.size)
            logger.debug(f"{icon.relative_path} ({icon.size}x{icon.size}px)")
        self.file_manager.write_image(image, output_path)

    def generate_metadata(self, target_dir, config):
        # No central manifest; resources are referenced from AndroidManifest.xml
        logger.info("Android icons ready - reference them in AndroidManifest.xml")
        return None

    def get_generated_files(self, config: Optional[PlatformConfig] = None) -> List[str]:
        config = config or self.config
        return [icon.relative_path for icon in config.icon_sizes]

    # ------------------------------------------------------------------
    # Adaptive mode
    # ------------------------------------------------------------------

    def generate_adaptive_mode(self, layers: AdaptiveLayers, output_dir: Path, options: GenerationOptions) -> GenerationResult:
        config = self.resolve_config(options.custom_sizes)
        padding = self.resolve_padding(options)

        logger.info(f"{config.platform_name} Icon Generator (Adaptive Mode)")
        logger.info(f"Foreground: {layers.foreground}")
        logger.info(f"Background: {layers.background}")
        if layers.has_monochrome:
            logger.info(f"Monochrome: {layers.monochrome}")
        logger.info(f"Output:     {output_dir}")

        self.image_processor.validate_adaptive_layers(layers)

        target_dir = self.prepare_output_directory(output_dir, config, options.force)

        folders = dict.fromkeys(
            [icon.folder for icon in config.icon_sizes]
            + [size.folder for size in config.adaptive_icon_sizes]
        )
        self.create_folder_structure(target_dir, folders)

        self.generate_adaptive_icons(layers, target_dir, config, padding)
        self.generate_legacy_from_adaptive(layers, target_dir, config, padding)

        zip_path = None
        if options.create_archive:
            zip_path = self.create_archive(target_dir, output_dir, config)

        files = self.get_adaptive_generated_files(config)
        logger.info(f"Successfully generated {len(files)} {config.platform_name} files")

        return GenerationResult(
            success=True,
            platform=config.platform_key,
            output_dir=str(target_dir),
            files=tuple(files),
            metadata_path=None,
            zip_path=zip_path,
            adaptive_mode=True,
        )

    def generate_adaptive_icons(self, layers: AdaptiveLayers, target_dir, config: PlatformConfig, padding: PaddingConfig):
        logger.info("Generating adaptive icon layers...")

        layer_sources = {
            FOREGROUND_FILE: (layers.foreground, FOREGROUND),
            BACKGROUND_FILE: (layers.background, BACKGROUND),
            # Monochrome falls back to the foreground artwork, padded the same way
            MONOCHROME_FILE: (layers.monochrome_source, FOREGROUND),
        }

        tasks = []
        for size in config.adaptive_icon_sizes:
            for filename in config.adaptive_layer_files:
                source, role = layer_sources[filename]
                tasks.append((
                    f"{size.folder}/{filename}",
                    lambda size=size, filename=filename, source=source, role=role: self.generate_adaptive_layer(
                        source, size, filename, role, target_dir, padding
                    ),
                ))
        self.run_asset_tasks(tasks)

        include_monochrome = layers.has_monochrome and MONOCHROME_FILE in config.adaptive_layer_files
        self.generate_adaptive_icon_xml(target_dir, include_monochrome)

    def generate_adaptive_layer(self, source, size, filename, role, target_dir, padding):
        output_path = Path(target_dir) / size.folder / filename
        layer = self.image_processor.prepare_adaptive_layer(source, size.size, role, self.platform_key, padding)
        self.file_manager.write_image(layer, output_path)
        logger.debug(f"{size.folder}/{filename} ({size.size}x{size.size}px)")

    def generate_adaptive_icon_xml(self, target_dir, has_monochrome: bool):
        xml_dir = self.file_manager.ensure_directory(Path(target_dir) / ADAPTIVE_XML_FOLDER)
        content = self.create_adaptive_icon_xml(has_monochrome)
        for name in ADAPTIVE_XML_FILES:
            self.file_manager.write_xml(xml_dir / name, content)
            logger.debug(f"{ADAPTIVE_XML_FOLDER}/{name}")

    def create_adaptive_icon_xml(self, has_monochrome: bool) -> str:
        return ADAPTIVE_ICON_XML.format(monochrome=MONOCHROME_XML if has_monochrome else "")

    def generate_legacy_from_adaptive(self, layers: AdaptiveLayers, target_dir, config: PlatformConfig, padding: PaddingConfig):
        """Flattens foreground over background once, then resizes into every legacy size."""
        logger.info("Generating legacy icons (API 25 and below)...")
        composite = self.image_processor.create_composite_from_layers(
            layers.foreground,
            layers.background,
            LEGACY_COMPOSITE_SIZE,
            self.platform_key,
            padding,
        )
        self.run_asset_tasks(
            (icon.relative_path, lambda icon=icon: self.generate_single_icon(composite, target_dir, icon))
            for icon in config.icon_sizes
        )

    def get_adaptive_generated_files(self, config: Optional[PlatformConfig] = None) -> List[str]:
        config = config or self.config
        files = [
            f"{size.folder}/{filename}"
            for size in config.adaptive_icon_sizes
            for filename in config.adaptive_layer_files
        ]
        files.extend(self.get_generated_files(config))
        files.extend(f"{ADAPTIVE_XML_FOLDER}/{name}" for name in ADAPTIVE_XML_FILES)
        return files
