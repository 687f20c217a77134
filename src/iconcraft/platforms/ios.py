import logging
from pathlib import Path

from iconcraft.configs.ios import IOS_CONFIG
from iconcraft.platforms.base import PlatformGenerator

logger = logging.getLogger(__name__)


class IOSGenerator(PlatformGenerator):
    """Writes a flat AppIcon.appiconset with a Contents.json manifest."""

    def __init__(self, image_processor, file_manager, archive_manager, custom_sizes=None):
        super().__init__(IOS_CONFIG, image_processor, file_manager, archive_manager, custom_sizes)

    def generate_icons(self, source, target_dir, config, padding):
        self.run_asset_tasks(
            (icon.filename, lambda icon=icon: self.generate_single_icon(source, target_dir, icon))
            for icon in config.icon_sizes
        )

    def generate_single_icon(self, source, target_dir, icon):
        pixel_size = self.image_processor.calculate_pixel_size(icon.size, icon.scale)
        output_path = Path(target_dir) / icon.filename
        self.file_manager.write_image(self.image_processor.resize(source, pixel_size), output_path)
        logger.debug(f"{icon.filename} ({pixel_size}x{pixel_size}px)")

    def generate_metadata(self, target_dir, config):
        contents_path = Path(target_dir) / config.metadata_file_name
        self.file_manager.write_json(contents_path, self.create_contents_json(config))
        logger.info(f"Wrote {config.metadata_file_name}")
        return contents_path

    def create_contents_json(self, config=None) -> dict:
        config = config or self.config
        images = [
            {
                "filename": icon.filename,
                "idiom": "universal",
                "platform": config.platform_key,
                "scale": icon.scale,
                "size": icon.size,
            }
            for icon in config.icon_sizes
        ]
        return {
            "images": images,
            "info": {
                "author": "xcode",
                "version": 1,
            },
        }
