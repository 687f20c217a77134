from iconcraft.models import IOSIconSize, Platform, PlatformConfig

# Pixel dimension = float(size width) * int(scale)
IOS_ICON_SIZES = (
    # iPhone
    IOSIconSize("20x20", "2x", "Icon-App-20x20@2x.png", "iphone"),
    IOSIconSize("20x20", "3x", "Icon-App-20x20@3x.png", "iphone"),
    IOSIconSize("29x29", "2x", "Icon-App-29x29@2x.png", "iphone"),
    IOSIconSize("29x29", "3x", "Icon-App-29x29@3x.png", "iphone"),
    IOSIconSize("40x40", "2x", "Icon-App-40x40@2x.png", "iphone"),
    IOSIconSize("40x40", "3x", "Icon-App-40x40@3x.png", "iphone"),
    IOSIconSize("60x60", "2x", "Icon-App-60x60@2x.png", "iphone"),
    IOSIconSize("60x60", "3x", "Icon-App-60x60@3x.png", "iphone"),
    # iPad
    IOSIconSize("76x76", "2x", "Icon-App-76x76@2x.png", "ipad"),
    IOSIconSize("83.5x83.5", "2x", "Icon-App-83.5x83.5@2x.png", "ipad"),
    # App Store
    IOSIconSize("1024x1024", "1x", "Icon-App-1024x1024@1x.png", "ios-marketing"),
)

IOS_SIZE_INFO = (
    {"size": "20×20", "scale": "@2x/@3x", "pixels": "40/60", "use": "Notification"},
    {"size": "29×29", "scale": "@2x/@3x", "pixels": "58/87", "use": "Settings"},
    {"size": "40×40", "scale": "@2x/@3x", "pixels": "80/120", "use": "Spotlight"},
    {"size": "60×60", "scale": "@2x/@3x", "pixels": "120/180", "use": "iPhone App"},
    {"size": "76×76", "scale": "@2x", "pixels": "152", "use": "iPad App"},
    {"size": "83.5×83.5", "scale": "@2x", "pixels": "167", "use": "iPad Pro"},
    {"size": "1024×1024", "scale": "@1x", "pixels": "1024", "use": "App Store"},
)

IOS_CONFIG = PlatformConfig(
    platform_name="iOS",
    platform_key=Platform.IOS,
    output_directory_name="AppIcon.appiconset",
    metadata_file_name="Contents.json",
    min_source_image_size=1024,
    archive_name="AppIcon.zip",
    icon_sizes=IOS_ICON_SIZES,
    size_info=IOS_SIZE_INFO,
)
