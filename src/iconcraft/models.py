import math
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from iconcraft.errors import ConfigValidationError, InputValidationError

HEX_COLOR_PATTERN = re.compile(r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")
DEFAULT_BACKGROUND_COLOR = "#111111"


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positive values."""
    return int(math.floor(value + 0.5))


def ios_pixel_size(size: str, scale: str) -> int:
    """"83.5x83.5" at "2x" -> 167"""
    base = float(size.split("x")[0])
    factor = int(scale.replace("x", ""))
    return round_half_up(base * factor)


class Platform:
    IOS = "ios"
    ANDROID = "android"
    ALL = "all"


@dataclass(frozen=True)
class IOSIconSize:
    size: str
    scale: str
    filename: str
    idiom: str = "universal"

    @property
    def pixel_size(self) -> int:
        return ios_pixel_size(self.size, self.scale)

    @property
    def key(self) -> str:
        return f"{self.size}@{self.scale}"


@dataclass(frozen=True)
class AndroidIconSize:
    density: str
    size: int
    folder: str
    filename: str

    @property
    def pixel_size(self) -> int:
        return self.size

    @property
    def relative_path(self) -> str:
        return f"{self.folder}/{self.filename}"


@dataclass(frozen=True)
class AdaptiveIconSize:
    density: str
    size: int
    folder: str

    @property
    def pixel_size(self) -> int:
        return self.size


IconSize = Union[IOSIconSize, AndroidIconSize]


@dataclass(frozen=True)
class PlatformConfig:
    """Immutable description of one platform's icon set."""
    platform_name: str
    platform_key: str
    output_directory_name: Optional[str]
    metadata_file_name: Optional[str]
    min_source_image_size: int
    archive_name: str
    icon_sizes: Tuple[IconSize, ...]
    adaptive_icon_sizes: Tuple[AdaptiveIconSize, ...] = ()
    adaptive_layer_files: Tuple[str, ...] = ()
    size_info: Tuple[Dict[str, str], ...] = ()


@dataclass(frozen=True)
class ImageMetadata:
    width: int
    height: int
    format: str


@dataclass(frozen=True)
class LayerSource:
    """
    A single adaptive layer input.

    kind is one of "color", "image" or "default". Default renders the
    standard dark background color.
    """
    kind: str
    value: Optional[str] = None

    COLOR = "color"
    IMAGE = "image"
    DEFAULT = "default"

    @classmethod
    def color(cls, hex_color: str) -> "LayerSource":
        if not HEX_COLOR_PATTERN.match(hex_color or ""):
            raise InputValidationError(f"Invalid hex color: {hex_color}")
        return cls(cls.COLOR, hex_color)

    @classmethod
    def image(cls, path: Union[str, Path]) -> "LayerSource":
        return cls(cls.IMAGE, str(path))

    @classmethod
    def default(cls) -> "LayerSource":
        return cls(cls.DEFAULT, DEFAULT_BACKGROUND_COLOR)

    @classmethod
    def parse(cls, value: Union[None, str, Path, "LayerSource"]) -> "LayerSource":
        if isinstance(value, LayerSource):
            return value
        if value is None or value == "":
            return cls.default()
        if isinstance(value, str) and HEX_COLOR_PATTERN.match(value):
            return cls.color(value)
        return cls.image(value)

    @property
    def is_image(self) -> bool:
        return self.kind == self.IMAGE

    @property
    def hex_color(self) -> Optional[str]:
        if self.kind == self.IMAGE:
            return None
        return self.value or DEFAULT_BACKGROUND_COLOR

    def __str__(self):
        if self.kind == self.DEFAULT:
            return f"{DEFAULT_BACKGROUND_COLOR} (default)"
        return str(self.value)


@dataclass(frozen=True)
class AdaptiveLayers:
    foreground: LayerSource
    background: LayerSource = field(default_factory=LayerSource.default)
    monochrome: Optional[LayerSource] = None

    def __post_init__(self):
        if self.foreground is None or self.foreground.kind == LayerSource.DEFAULT:
            raise InputValidationError("Foreground layer is required for adaptive icons")

    @classmethod
    def from_values(cls, foreground, background=None, monochrome=None) -> "AdaptiveLayers":
        if not foreground:
            raise InputValidationError("Foreground layer is required for adaptive icons")
        return cls(
            foreground=LayerSource.parse(foreground),
            background=LayerSource.parse(background),
            monochrome=LayerSource.parse(monochrome) if monochrome else None,
        )

    @property
    def has_monochrome(self) -> bool:
        return self.monochrome is not None

    @property
    def monochrome_source(self) -> LayerSource:
        return self.monochrome or self.foreground


@dataclass
class PlatformCustomization:
    scale: Any = None
    add_sizes: Any = field(default_factory=list)
    exclude_sizes: Any = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PlatformCustomization":
        return cls(
            scale=data.get("scale"),
            add_sizes=_first_present(data, ("addSizes", "add_sizes"), []),
            exclude_sizes=_first_present(data, ("excludeSizes", "exclude_sizes"), []),
        )


@dataclass
class SizeCustomization:
    """
    Per-request size customization. Values stay raw until validated by
    SizeConfigManager, so malformed input surfaces as ConfigValidationError
    instead of a TypeError while building this object.
    """
    scale: Any = None
    platforms: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        # Non-mapping entries are left as-is for validation to reject
        self.platforms = {
            key: PlatformCustomization.from_dict(value) if isinstance(value, Mapping) else value
            for key, value in self.platforms.items()
            if value is not None
        }

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> Optional["SizeCustomization"]:
        if data is None:
            return None
        if isinstance(data, SizeCustomization):
            return data
        if not isinstance(data, Mapping):
            raise ConfigValidationError("Invalid size customization: Customization must be an object")
        platforms = {key: data.get(key) for key in (Platform.IOS, Platform.ANDROID)}
        return cls(scale=data.get("scale"), platforms=platforms)

    def for_platform(self, platform_key: str) -> PlatformCustomization:
        value = self.platforms.get(platform_key)
        if isinstance(value, PlatformCustomization):
            return value
        return PlatformCustomization()


@dataclass(frozen=True)
class PaddingConfig:
    """
    Foreground content ratios for adaptive layers.

    android_ratio is the rendering default. ANDROID_SAFE_ZONE_RATIO is the
    66dp/108dp safe zone from the Android launcher guidelines and is kept
    separately; the two values intentionally differ.
    """
    ios_ratio: float = 0.8
    android_ratio: float = 0.54
    ios_scale: float = 1.0
    android_scale: float = 1.0

    ANDROID_SAFE_ZONE_RATIO = 66 / 108
    MIN_CONTENT_RATIO = 0.1

    def base_ratio(self, platform: str) -> float:
        if platform == Platform.IOS:
            return self.ios_ratio
        return self.android_ratio

    def scale_for(self, platform: str) -> float:
        if platform == Platform.IOS:
            return self.ios_scale
        return self.android_scale


@dataclass
class GenerationOptions:
    force: bool = False
    create_archive: bool = False
    custom_sizes: Optional[SizeCustomization] = None
    adaptive_layers: Optional[AdaptiveLayers] = None
    foreground_scale: Optional[float] = None
    foreground_scale_ios: Optional[float] = None
    foreground_scale_android: Optional[float] = None
    padding: Optional[PaddingConfig] = None

    def __post_init__(self):
        if self.custom_sizes is not None and not isinstance(self.custom_sizes, SizeCustomization):
            self.custom_sizes = SizeCustomization.from_dict(self.custom_sizes)

    @property
    def adaptive_mode(self) -> bool:
        return self.adaptive_layers is not None

    def padding_config(self) -> PaddingConfig:
        base = self.padding or PaddingConfig()
        ios_scale = _first_not_none(self.foreground_scale_ios, self.foreground_scale, base.ios_scale)
        android_scale = _first_not_none(self.foreground_scale_android, self.foreground_scale, base.android_scale)
        return PaddingConfig(
            ios_ratio=base.ios_ratio,
            android_ratio=base.android_ratio,
            ios_scale=float(ios_scale),
            android_scale=float(android_scale),
        )


@dataclass(frozen=True)
class GenerationResult:
    success: bool
    platform: str
    output_dir: Optional[str] = None
    files: Tuple[str, ...] = ()
    metadata_path: Optional[str] = None
    zip_path: Optional[str] = None
    adaptive_mode: bool = False
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "platform": self.platform,
            "outputDir": self.output_dir,
            "files": list(self.files),
            "metadataPath": self.metadata_path,
            "zipPath": self.zip_path,
            "adaptiveMode": self.adaptive_mode,
            "error": self.error,
        }


def _first_present(data: Mapping[str, Any], keys, default):
    for key in keys:
        if key in data:
            return data[key]
    return default


def _first_not_none(*values):
    for value in values:
        if value is not None:
            return value
    return None


def size_to_dict(spec) -> Dict[str, Any]:
    """Serializes a size spec back to the document shape used in config files."""
    if isinstance(spec, IOSIconSize):
        return {"size": spec.size, "scale": spec.scale, "filename": spec.filename, "idiom": spec.idiom}
    if isinstance(spec, AndroidIconSize):
        return {"density": spec.density, "size": spec.size, "folder": spec.folder, "filename": spec.filename}
    return {"density": spec.density, "size": spec.size, "folder": spec.folder}
