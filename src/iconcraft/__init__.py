__version__ = "2026.1.0"

from iconcraft.models import (  # noqa: E402
    Platform,
    LayerSource,
    AdaptiveLayers,
    SizeCustomization,
    PaddingConfig,
    GenerationOptions,
    GenerationResult,
)
from iconcraft.errors import (  # noqa: E402
    IconCraftError,
    InputValidationError,
    DecodeError,
    ConfigValidationError,
    OutputConflictError,
    GenerationError,
    ArchiveError,
)

__all__ = [
    "__version__",
    "Platform",
    "LayerSource",
    "AdaptiveLayers",
    "SizeCustomization",
    "PaddingConfig",
    "GenerationOptions",
    "GenerationResult",
    "IconCraftError",
    "InputValidationError",
    "DecodeError",
    "ConfigValidationError",
    "OutputConflictError",
    "GenerationError",
    "ArchiveError",
]
