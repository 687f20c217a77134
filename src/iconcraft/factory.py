import logging
from typing import Dict, List, Optional, Type

from iconcraft.errors import ConfigValidationError
from iconcraft.models import Platform, SizeCustomization
from iconcraft.platforms.android import AndroidGenerator
from iconcraft.platforms.base import PlatformGenerator
from iconcraft.platforms.ios import IOSGenerator
from iconcraft.services.image_processor import ImageProcessor
from iconcraft.utils.archive_manager import ArchiveManager
from iconcraft.utils.file_manager import FileManager

logger = logging.getLogger(__name__)


class IconGeneratorFactory:
    """
    Builds platform generators wired to shared collaborators.

    The collaborators hold no per-request state, so a single instance of
    each is handed to every generator this factory creates.
    """

    def __init__(self, image_processor=None, file_manager=None, archive_manager=None):
        self.image_processor = image_processor or ImageProcessor()
        self.file_manager = file_manager or FileManager()
        self.archive_manager = archive_manager or ArchiveManager()
        self._generators: Dict[str, Type[PlatformGenerator]] = {
            Platform.IOS: IOSGenerator,
            Platform.ANDROID: AndroidGenerator,
        }

    def register_platform(self, platform: str, generator_class: Type[PlatformGenerator]):
        if not issubclass(generator_class, PlatformGenerator):
            raise TypeError(f"{generator_class.__name__} must extend PlatformGenerator")
        self._generators[platform.lower()] = generator_class
        logger.debug(f"Registered generator for platform '{platform}': {generator_class.__name__}")

    def create_generator(self, platform: str, custom_sizes: Optional[SizeCustomization] = None) -> PlatformGenerator:
        generator_class = self._generators.get((platform or "").lower())
        if generator_class is None:
            available = ", ".join(self.get_supported_platforms())
            raise ConfigValidationError(f"Unsupported platform: {platform}. Available platforms: {available}")

        return generator_class(
            self.image_processor,
            self.file_manager,
            self.archive_manager,
            custom_sizes,
        )

    def get_supported_platforms(self) -> List[str]:
        return list(self._generators)

    def is_platform_supported(self, platform: str) -> bool:
        return (platform or "").lower() in self._generators

    def get_all_platform_info(self) -> List[dict]:
        return [self.create_generator(key).get_platform_info() for key in self._generators]


icon_generator_factory = IconGeneratorFactory()
