import json
import logging
import numbers
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import yaml

from iconcraft.errors import ConfigValidationError
from iconcraft.models import (
    AdaptiveIconSize,
    AndroidIconSize,
    IOSIconSize,
    Platform,
    PlatformConfig,
    PlatformCustomization,
    SizeCustomization,
    round_half_up,
    size_to_dict,
)

logger = logging.getLogger(__name__)

MIN_SCALE_EXCLUSIVE = 0.0
MAX_SCALE = 5.0
RECOMMENDED_SCALE_RANGE = (0.5, 3.0)


@dataclass
class ValidationResult:
    valid: bool
    error: Optional[str] = None
    warnings: List[str] = field(default_factory=list)


class SizeConfigManager:
    """
    Applies size customization (scale, added sizes, excluded sizes) to a
    platform config.

    Every operation is pure: the base config and size tuples are never
    modified, a derived PlatformConfig is returned instead.
    """

    def apply_size_customization(
        self,
        base_config: PlatformConfig,
        customization: Union[None, SizeCustomization, Mapping[str, Any]],
    ) -> PlatformConfig:
        if customization is None:
            return base_config

        customization = SizeCustomization.from_dict(customization)

        validation = self.validate_size_customization(customization)
        if not validation.valid:
            raise ConfigValidationError(f"Invalid size customization: {validation.error}")

        platform_key = base_config.platform_key.lower()
        platform_customization = customization.for_platform(platform_key)

        # Platform-specific scale overrides global
        scale_factor = platform_customization.scale or customization.scale or 1.0

        icon_sizes = base_config.icon_sizes
        adaptive_sizes = base_config.adaptive_icon_sizes
        layer_files = base_config.adaptive_layer_files

        if scale_factor != 1.0:
            icon_sizes = self.apply_scale_factor(icon_sizes, scale_factor, platform_key)
            if adaptive_sizes:
                adaptive_sizes = self.apply_scale_factor(adaptive_sizes, scale_factor, platform_key)
            logger.info(f"Applied {scale_factor}x scale factor to {base_config.platform_name} icons")

        if platform_customization.add_sizes:
            icon_sizes = self.add_custom_sizes(icon_sizes, platform_customization.add_sizes, platform_key)
            logger.info(
                f"Added {len(platform_customization.add_sizes)} custom size(s) to {base_config.platform_name}"
            )

        if platform_customization.exclude_sizes:
            exclusions = platform_customization.exclude_sizes
            original_count = len(icon_sizes)
            icon_sizes = self.exclude_sizes(icon_sizes, exclusions, platform_key)
            if adaptive_sizes:
                adaptive_sizes = self.exclude_sizes(adaptive_sizes, exclusions, platform_key)
            if layer_files:
                layer_files = self.exclude_layer_files(layer_files, exclusions)

            excluded_count = original_count - len(icon_sizes)
            if excluded_count > 0:
                logger.info(f"Excluded {excluded_count} size(s) from {base_config.platform_name}")

        return replace(
            base_config,
            icon_sizes=tuple(icon_sizes),
            adaptive_icon_sizes=tuple(adaptive_sizes),
            adaptive_layer_files=tuple(layer_files),
        )

    def apply_scale_factor(self, sizes: Iterable, scale_factor: float, platform_key: str) -> Tuple:
        scaled = []
        for spec in sizes:
            if isinstance(spec, IOSIconSize):
                # "WxH" -> scaled "W'xH'"
                width, height = (float(part) for part in spec.size.split("x"))
                new_size = f"{round_half_up(width * scale_factor)}x{round_half_up(height * scale_factor)}"
                scaled.append(replace(spec, size=new_size))
            elif isinstance(spec, (AndroidIconSize, AdaptiveIconSize)):
                scaled.append(replace(spec, size=round_half_up(spec.size * scale_factor)))
            else:
                scaled.append(spec)
        return tuple(scaled)

    def add_custom_sizes(self, sizes: Iterable, additional_sizes: Sequence, platform_key: str) -> Tuple:
        existing = list(sizes)
        new_specs = [self._build_size_spec(entry, platform_key) for entry in additional_sizes]

        taken = {self._unique_key(spec) for spec in existing}
        for spec in new_specs:
            key = self._unique_key(spec)
            if key in taken:
                raise ConfigValidationError(f"Custom size duplicates an existing file name: {key}")
            taken.add(key)

        return tuple(existing + new_specs)

    def _build_size_spec(self, entry, platform_key: str):
        if isinstance(entry, (IOSIconSize, AndroidIconSize)):
            entry = size_to_dict(entry)
        if not isinstance(entry, Mapping):
            raise ConfigValidationError(f"Custom size must be an object: {entry!r}")

        if platform_key == Platform.IOS:
            if not (entry.get("size") and entry.get("scale") and entry.get("filename")):
                raise ConfigValidationError(
                    f"iOS custom size must have 'size', 'scale', and 'filename' fields: {self._describe(entry)}"
                )
            return IOSIconSize(
                size=str(entry["size"]),
                scale=str(entry["scale"]),
                filename=str(entry["filename"]),
                idiom=str(entry.get("idiom") or "universal"),
            )

        if platform_key == Platform.ANDROID:
            size = entry.get("size")
            if (
                not entry.get("density")
                or not isinstance(size, numbers.Real)
                or isinstance(size, bool)
                or not entry.get("folder")
                or not entry.get("filename")
            ):
                raise ConfigValidationError(
                    "Android custom size must have 'density', 'size' (number), 'folder', and 'filename' "
                    f"fields: {self._describe(entry)}"
                )
            return AndroidIconSize(
                density=str(entry["density"]),
                size=int(size),
                folder=str(entry["folder"]),
                filename=str(entry["filename"]),
            )

        raise ConfigValidationError(f"Unknown platform for custom sizes: {platform_key}")

    @staticmethod
    def _unique_key(spec) -> str:
        if isinstance(spec, AndroidIconSize):
            return spec.relative_path
        return spec.filename

    @staticmethod
    def _describe(entry) -> str:
        try:
            return json.dumps(dict(entry), default=str)
        except (TypeError, ValueError):
            return repr(entry)

    def exclude_sizes(self, sizes: Iterable, exclusions: Sequence[str], platform_key: str) -> Tuple:
        return tuple(spec for spec in sizes if not self._is_excluded(spec, exclusions, platform_key))

    def _is_excluded(self, spec, exclusions: Sequence[str], platform_key: str) -> bool:
        for exclusion in exclusions:
            if platform_key == Platform.IOS:
                # "20x20@2x" exact, "20x20" any scale, "@2x" any size
                if exclusion == spec.key or exclusion == spec.size or exclusion == f"@{spec.scale}":
                    return True
            elif platform_key == Platform.ANDROID:
                # "ldpi" density, "mipmap-ldpi" folder, filename substrings
                # ("ic_launcher_round", "monochrome", "round")
                if exclusion == spec.density or exclusion == spec.folder:
                    return True
                filename = getattr(spec, "filename", None)
                if filename and exclusion in filename:
                    return True
        return False

    def exclude_layer_files(self, filenames: Iterable[str], exclusions: Sequence[str]) -> Tuple[str, ...]:
        """
        Applies Android filename patterns to adaptive layer file names.

        Patterns match whole "_"-separated segments of the name, so "round"
        does not remove ic_launcher_foreground.png or ic_launcher_background.png.
        """
        return tuple(
            name for name in filenames
            if not any(self._layer_file_matches(name, exclusion) for exclusion in exclusions)
        )

    @staticmethod
    def _layer_file_matches(filename: str, exclusion: str) -> bool:
        stem = Path(filename).stem
        return exclusion in (filename, stem) or stem.endswith(f"_{exclusion}")

    def validate_size_customization(self, customization) -> ValidationResult:
        if isinstance(customization, Mapping):
            customization = SizeCustomization.from_dict(customization)
        if not isinstance(customization, SizeCustomization):
            return ValidationResult(False, "Customization must be an object")

        result = ValidationResult(True)

        error = self._check_scale(customization.scale, "Global scale", result)
        if error:
            return ValidationResult(False, error)

        for platform_key in (Platform.IOS, Platform.ANDROID):
            platform_customization = customization.platforms.get(platform_key)
            if platform_customization is None:
                continue
            if not isinstance(platform_customization, PlatformCustomization):
                return ValidationResult(False, f"{platform_key} customization must be an object")

            error = self._check_scale(platform_customization.scale, f"{platform_key} scale", result)
            if error:
                return ValidationResult(False, error)

            if not isinstance(platform_customization.add_sizes, (list, tuple)):
                return ValidationResult(False, f"{platform_key} addSizes must be an array")
            if not isinstance(platform_customization.exclude_sizes, (list, tuple)):
                return ValidationResult(False, f"{platform_key} excludeSizes must be an array")
            if not all(isinstance(p, str) for p in platform_customization.exclude_sizes):
                return ValidationResult(False, f"{platform_key} excludeSizes entries must be strings")

        return result

    def _check_scale(self, scale, label: str, result: ValidationResult) -> Optional[str]:
        if scale is None:
            return None
        if isinstance(scale, bool) or not isinstance(scale, numbers.Real):
            return f"{label} must be a number"
        if scale <= MIN_SCALE_EXCLUSIVE or scale > MAX_SCALE:
            return f"{label} must be between 0 and 5"
        low, high = RECOMMENDED_SCALE_RANGE
        if scale < low or scale > high:
            warning = f"{label} {scale} is outside recommended range ({low}-{high})"
            logger.warning(warning)
            result.warnings.append(warning)
        return None

    def parse_from_cli(
        self,
        scale: Optional[float] = None,
        ios_scale: Optional[float] = None,
        android_scale: Optional[float] = None,
        exclude: Optional[str] = None,
        platform: Optional[str] = None,
    ) -> Optional[SizeCustomization]:
        """Builds a customization from CLI flags, or None when nothing was set."""
        customization = SizeCustomization()
        has_customization = False

        if scale:
            customization.scale = float(scale)
            has_customization = True

        if ios_scale:
            self._platform_entry(customization, Platform.IOS).scale = float(ios_scale)
            has_customization = True

        if android_scale:
            self._platform_entry(customization, Platform.ANDROID).scale = float(android_scale)
            has_customization = True

        if exclude:
            exclusions = [s.strip() for s in exclude.split(",") if s.strip()]
            if exclusions:
                if platform in (Platform.IOS, Platform.ANDROID):
                    targets = [platform]
                else:
                    # Apply to both; patterns that don't fit a platform just never match
                    targets = [Platform.IOS, Platform.ANDROID]
                for key in targets:
                    self._platform_entry(customization, key).exclude_sizes = list(exclusions)
                has_customization = True

        return customization if has_customization else None

    @staticmethod
    def _platform_entry(customization: SizeCustomization, platform_key: str) -> PlatformCustomization:
        entry = customization.platforms.get(platform_key)
        if entry is None:
            entry = PlatformCustomization()
            customization.platforms[platform_key] = entry
        return entry

    def load_customization_file(self, config_path: Union[str, Path]) -> SizeCustomization:
        """Loads a size customization document (JSON or YAML)."""
        path = Path(config_path)
        if not path.exists():
            raise ConfigValidationError(f"Custom config file not found: {path}")
        try:
            with open(path, 'r', encoding='utf-8') as f:
                if path.suffix.lower() == ".json":
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ConfigValidationError(f"Invalid custom config file {path}: {e}") from e

        if not isinstance(data, Mapping):
            raise ConfigValidationError(f"Custom config file must contain an object: {path}")

        logger.info(f"Loaded custom size config from {path}")
        return SizeCustomization.from_dict(data)


# Shared instance for convenience
size_config_manager = SizeConfigManager()
