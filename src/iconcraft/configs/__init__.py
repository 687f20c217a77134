from iconcraft.configs.ios import IOS_CONFIG, IOS_ICON_SIZES, IOS_SIZE_INFO
from iconcraft.configs.android import (
    ANDROID_CONFIG,
    ANDROID_ICON_SIZES,
    ANDROID_ADAPTIVE_ICON_SIZES,
    ANDROID_ADAPTIVE_LAYER_FILES,
    ANDROID_SIZE_INFO,
)

__all__ = [
    "IOS_CONFIG",
    "IOS_ICON_SIZES",
    "IOS_SIZE_INFO",
    "ANDROID_CONFIG",
    "ANDROID_ICON_SIZES",
    "ANDROID_ADAPTIVE_ICON_SIZES",
    "ANDROID_ADAPTIVE_LAYER_FILES",
    "ANDROID_SIZE_INFO",
]
