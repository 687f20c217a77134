import logging
from abc import ABC, abstractmethod
from dataclasses import replace
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple

from PIL import Image

from iconcraft.errors import GenerationError, IconCraftError, InputValidationError
from iconcraft.models import (
    AdaptiveLayers,
    GenerationOptions,
    GenerationResult,
    PaddingConfig,
    PlatformConfig,
    SizeCustomization,
)
from iconcraft.services.image_processor import ImageProcessor
from iconcraft.services.size_config_service import size_config_manager
from iconcraft.utils.archive_manager import ArchiveManager
from iconcraft.utils.concurrency import run_all
from iconcraft.utils.config import IconCraftConfig
from iconcraft.utils.file_manager import FileManager

logger = logging.getLogger(__name__)

ADAPTIVE_SOURCE_SIZE = 1024


class PlatformGenerator(ABC):
    """
    Template for one platform's generation pipeline.

    generate() always runs the same states in order:
    validate input, prepare the output directory, load and normalize the
    source, generate icons, generate metadata, archive. Subclasses supply
    generate_icons() and generate_metadata().

    The size table is resolved once per call and passed down explicitly;
    the generator itself holds no per-call state and can be reused.
    """

    def __init__(
        self,
        config: PlatformConfig,
        image_processor: ImageProcessor,
        file_manager: FileManager,
        archive_manager: ArchiveManager,
        custom_sizes: Optional[SizeCustomization] = None,
    ):
        self.base_config = config
        self.custom_sizes = SizeCustomization.from_dict(custom_sizes)
        # Validates construction-time customization early
        self.config = size_config_manager.apply_size_customization(config, self.custom_sizes)
        self.image_processor = image_processor
        self.file_manager = file_manager
        self.archive_manager = archive_manager

    @property
    def platform_key(self) -> str:
        return self.base_config.platform_key

    def resolve_config(self, custom_sizes: Optional[SizeCustomization] = None) -> PlatformConfig:
        """Runtime customization wins over the one given at construction."""
        if custom_sizes is not None:
            return size_config_manager.apply_size_customization(self.base_config, custom_sizes)
        return self.config

    def generate(self, input_path, output_dir, options: Optional[GenerationOptions] = None) -> GenerationResult:
        """
        Generates every icon for this platform.

        Args:
            input_path: Source image. Ignored (may be None) in adaptive mode.
            output_dir: Base output directory.
            options: force, create_archive, custom_sizes, adaptive_layers, foreground scales.

        Returns:
            GenerationResult describing the written files.
        """
        options = options or GenerationOptions()
        try:
            return self._run_pipeline(input_path, Path(output_dir), options)
        except IconCraftError as e:
            raise e.with_platform(self.base_config.platform_name)
        except OSError as e:
            raise GenerationError(str(e), platform=self.base_config.platform_name) from e

    def _run_pipeline(self, input_path, output_dir: Path, options: GenerationOptions) -> GenerationResult:
        config = self.resolve_config(options.custom_sizes)
        padding = self.resolve_padding(options)
        layers = options.adaptive_layers

        logger.info(f"{config.platform_name} Icon Generator")
        logger.info(f"Input:  {input_path if not layers else layers.foreground}")
        logger.info(f"Output: {output_dir}")

        # 1. Validate input
        if layers:
            self.image_processor.validate_adaptive_layers(layers)
        else:
            self.validate_input(input_path)

        # 2. Prepare output directory
        target_dir = self.prepare_output_directory(output_dir, config, options.force)

        # 3. Load and normalize the source (adaptive mode composites the layers instead)
        if layers:
            source = self.build_adaptive_source(layers, padding)
        else:
            source = self.load_source(input_path, config)

        # 4. Generate icons (platform-specific)
        logger.info(f"Generating {config.platform_name} icons...")
        self.generate_icons(source, target_dir, config, padding)

        # 5. Metadata (platform-specific, optional)
        metadata_path = self.generate_metadata(target_dir, config)

        # 6. Archive
        zip_path = None
        if options.create_archive:
            zip_path = self.create_archive(target_dir, output_dir, config)

        logger.info(f"Successfully generated {len(config.icon_sizes)} {config.platform_name} icons")

        return GenerationResult(
            success=True,
            platform=config.platform_key,
            output_dir=str(target_dir),
            files=tuple(self.get_generated_files(config)),
            metadata_path=str(metadata_path) if metadata_path else None,
            zip_path=zip_path,
            adaptive_mode=bool(layers),
        )

    def resolve_padding(self, options: GenerationOptions) -> PaddingConfig:
        if options.padding is None:
            options = replace(options, padding=IconCraftConfig.get_padding_config())
        return options.padding_config()

    def validate_input(self, input_path):
        if not input_path or not self.file_manager.exists(input_path):
            raise InputValidationError(f"Input file not found: {input_path}")
        if not self.file_manager.is_accessible(input_path):
            raise InputValidationError(f"Input file is not readable: {input_path}")
        if not self.image_processor.validate_image_format(input_path):
            raise InputValidationError(f"Input file is not a valid image format: {input_path}")

    def prepare_output_directory(self, output_dir: Path, config: PlatformConfig, force: bool) -> Path:
        return self.file_manager.prepare_output_directory(output_dir, config.output_directory_name, force)

    def load_source(self, input_path, config: PlatformConfig) -> Image.Image:
        image, metadata = self.image_processor.load_image(input_path)
        logger.info(f"Loaded: {metadata.width}x{metadata.height}, format: {metadata.format}")
        return self.image_processor.prepare_image(image, config.min_source_image_size)

    def build_adaptive_source(self, layers: AdaptiveLayers, padding: PaddingConfig) -> Image.Image:
        """Flattens foreground over background into a single square source."""
        return self.image_processor.create_composite_from_layers(
            layers.foreground,
            layers.background,
            ADAPTIVE_SOURCE_SIZE,
            self.platform_key,
            padding,
        )

    def run_asset_tasks(self, tasks: Iterable[Tuple[str, Callable[[], None]]]):
        """
        Fans out one task per asset and joins on all of them.
        The first failure aborts the join; non-library errors are wrapped
        with the asset name.
        """
        def guarded(asset: str, task: Callable[[], None]):
            def run():
                try:
                    return task()
                except IconCraftError:
                    raise
                except Exception as e:
                    raise GenerationError(
                        f"Failed to generate {asset}: {e}",
                        platform=self.base_config.platform_name,
                        asset=asset,
                    ) from e
            return run

        return run_all(
            [guarded(asset, task) for asset, task in tasks],
            max_workers=IconCraftConfig.get_max_workers(),
        )

    def create_archive(self, target_dir: Path, output_dir: Path, config: PlatformConfig) -> str:
        zip_path = Path(output_dir) / config.archive_name
        path = self.archive_manager.create_zip_archive(target_dir, zip_path, config.output_directory_name)
        stats = self.archive_manager.get_stats(path)
        logger.info(f"Created ZIP: {path} ({stats['total_files']} files, {stats['total_bytes']} bytes)")
        return path

    def get_generated_files(self, config: Optional[PlatformConfig] = None) -> List[str]:
        config = config or self.config
        files = [icon.filename for icon in config.icon_sizes]
        if config.metadata_file_name:
            files.append(config.metadata_file_name)
        return files

    def get_platform_info(self) -> dict:
        return {
            "name": self.config.platform_name,
            "key": self.config.platform_key,
            "icon_count": len(self.config.icon_sizes),
            "size_info": list(self.config.size_info),
        }

    @abstractmethod
    def generate_icons(self, source: Image.Image, target_dir: Path, config: PlatformConfig, padding: PaddingConfig):
        """Render and write every icon in config.icon_sizes."""
        pass

    @abstractmethod
    def generate_metadata(self, target_dir: Path, config: PlatformConfig) -> Optional[Path]:
        """Write the platform manifest and return its path, or None."""
        pass

