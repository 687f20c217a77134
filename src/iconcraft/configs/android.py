from iconcraft.models import AdaptiveIconSize, AndroidIconSize, Platform, PlatformConfig

_DENSITIES = (
    ("ldpi", 36),
    ("mdpi", 48),
    ("hdpi", 72),
    ("xhdpi", 96),
    ("xxhdpi", 144),
    ("xxxhdpi", 192),
)

# Legacy launcher icons, then round launcher icons (Android 7.1+), then Play Store
ANDROID_ICON_SIZES = (
    tuple(AndroidIconSize(d, px, f"mipmap-{d}", "ic_launcher.png") for d, px in _DENSITIES)
    + tuple(AndroidIconSize(d, px, f"mipmap-{d}", "ic_launcher_round.png") for d, px in _DENSITIES)
    + (AndroidIconSize("playstore", 512, "playstore", "ic_launcher_playstore.png"),)
)

# Adaptive layers (API 26+): 108dp canvas per density, 66dp safe zone in the center
ANDROID_ADAPTIVE_ICON_SIZES = (
    AdaptiveIconSize("ldpi", 81, "mipmap-ldpi"),        # 0.75x
    AdaptiveIconSize("mdpi", 108, "mipmap-mdpi"),       # 1x
    AdaptiveIconSize("hdpi", 162, "mipmap-hdpi"),       # 1.5x
    AdaptiveIconSize("xhdpi", 216, "mipmap-xhdpi"),     # 2x
    AdaptiveIconSize("xxhdpi", 324, "mipmap-xxhdpi"),   # 3x
    AdaptiveIconSize("xxxhdpi", 432, "mipmap-xxxhdpi"), # 4x
)

FOREGROUND_FILE = "ic_launcher_foreground.png"
BACKGROUND_FILE = "ic_launcher_background.png"
MONOCHROME_FILE = "ic_launcher_monochrome.png"
ANDROID_ADAPTIVE_LAYER_FILES = (FOREGROUND_FILE, BACKGROUND_FILE, MONOCHROME_FILE)

ADAPTIVE_XML_FOLDER = "mipmap-anydpi-v26"
ADAPTIVE_XML_FILES = ("ic_launcher.xml", "ic_launcher_round.xml")

ANDROID_SIZE_INFO = (
    {"density": "ldpi", "dpi": "120 dpi", "size": "36×36", "use": "Low density screens"},
    {"density": "mdpi", "dpi": "160 dpi", "size": "48×48", "use": "Medium density screens"},
    {"density": "hdpi", "dpi": "240 dpi", "size": "72×72", "use": "High density screens"},
    {"density": "xhdpi", "dpi": "320 dpi", "size": "96×96", "use": "Extra-high density"},
    {"density": "xxhdpi", "dpi": "480 dpi", "size": "144×144", "use": "Extra-extra-high density"},
    {"density": "xxxhdpi", "dpi": "640 dpi", "size": "192×192", "use": "Extra-extra-extra-high density"},
    {"density": "Play Store", "dpi": "-", "size": "512×512", "use": "Google Play Store"},
)

ANDROID_CONFIG = PlatformConfig(
    platform_name="Android",
    platform_key=Platform.ANDROID,
    output_directory_name="android-icons",
    metadata_file_name=None,
    min_source_image_size=512,
    archive_name="AndroidIcons.zip",
    icon_sizes=ANDROID_ICON_SIZES,
    adaptive_icon_sizes=ANDROID_ADAPTIVE_ICON_SIZES,
    adaptive_layer_files=ANDROID_ADAPTIVE_LAYER_FILES,
    size_info=ANDROID_SIZE_INFO,
)
