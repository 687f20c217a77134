from typing import Optional


class IconCraftError(Exception):
    """
    Base class for all errors raised by the icon generation engine.

    The platform is attached by the generation pipeline once the error
    crosses a platform boundary, so callers see which generator failed.
    """

    def __init__(self, message: str, platform: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.platform = platform

    def with_platform(self, platform: str) -> "IconCraftError":
        if not self.platform:
            self.platform = platform
        return self

    def __str__(self):
        if self.platform:
            return f"[{self.platform}] {self.message}"
        return self.message


class InputValidationError(IconCraftError):
    """Source image (or adaptive layer) is missing, unreadable or unsupported."""


class DecodeError(InputValidationError):
    """The image library could not decode the file."""


class ConfigValidationError(IconCraftError):
    """Bad scale factor or malformed add/exclude size entries."""


class OutputConflictError(IconCraftError):
    """Output directory already exists and force was not given."""


class GenerationError(IconCraftError):
    """Wraps a failure while rendering or writing a single asset."""

    def __init__(self, message: str, platform: Optional[str] = None, asset: Optional[str] = None):
        super().__init__(message, platform)
        self.asset = asset

    def __str__(self):
        base = super().__str__()
        if self.asset:
            return f"{base} (asset: {self.asset})"
        return base


class ArchiveError(IconCraftError):
    """Creating the ZIP archive failed."""
