import json
import unittest

import pytest

from iconcraft.configs import ANDROID_CONFIG, IOS_CONFIG
from iconcraft.errors import ConfigValidationError
from iconcraft.models import IOSIconSize, SizeCustomization
from iconcraft.services.size_config_service import SizeConfigManager


class TestScaleValidation(unittest.TestCase):
    def setUp(self):
        self.manager = SizeConfigManager()

    def test_rejects_out_of_range_scales(self):
        for scale in (0, -1, 5.0001):
            with self.subTest(scale=scale):
                result = self.manager.validate_size_customization({"scale": scale})
                self.assertFalse(result.valid)
                self.assertIn("between 0 and 5", result.error)

    def test_accepts_recommended_scales_without_warning(self):
        for scale in (0.5, 1, 3):
            with self.subTest(scale=scale):
                result = self.manager.validate_size_customization({"scale": scale})
                self.assertTrue(result.valid)
                self.assertEqual(result.warnings, [])

    def test_accepts_unusual_scales_with_warning(self):
        for scale in (0.4, 3.1):
            with self.subTest(scale=scale):
                result = self.manager.validate_size_customization({"scale": scale})
                self.assertTrue(result.valid)
                self.assertEqual(len(result.warnings), 1)

    def test_rejects_non_numeric_scale(self):
        self.assertFalse(self.manager.validate_size_customization({"scale": "2"}).valid)
        self.assertFalse(self.manager.validate_size_customization({"scale": True}).valid)

    def test_platform_scale_validated(self):
        result = self.manager.validate_size_customization({"android": {"scale": 6}})
        self.assertFalse(result.valid)
        self.assertIn("android scale", result.error)

    def test_rejects_malformed_lists(self):
        self.assertFalse(self.manager.validate_size_customization({"ios": {"addSizes": "nope"}}).valid)
        self.assertFalse(self.manager.validate_size_customization({"ios": {"excludeSizes": "20x20"}}).valid)
        self.assertFalse(self.manager.validate_size_customization({"ios": "nope"}).valid)

    def test_non_object_rejected(self):
        self.assertFalse(self.manager.validate_size_customization(["scale"]).valid)


class TestApplyCustomization(unittest.TestCase):
    def setUp(self):
        self.manager = SizeConfigManager()

    def test_none_returns_base(self):
        self.assertIs(self.manager.apply_size_customization(IOS_CONFIG, None), IOS_CONFIG)

    def test_global_scale_ios(self):
        config = self.manager.apply_size_customization(IOS_CONFIG, {"scale": 1.2})
        spec = next(s for s in config.icon_sizes if s.filename == "Icon-App-20x20@2x.png")
        self.assertEqual(spec.size, "24x24")
        self.assertEqual(spec.pixel_size, 48)

    def test_platform_scale_overrides_global(self):
        config = self.manager.apply_size_customization(ANDROID_CONFIG, {"scale": 2, "android": {"scale": 0.5}})
        mdpi = next(s for s in config.icon_sizes if s.density == "mdpi" and s.filename == "ic_launcher.png")
        self.assertEqual(mdpi.size, 24)
        xxxhdpi_layer = next(s for s in config.adaptive_icon_sizes if s.density == "xxxhdpi")
        self.assertEqual(xxxhdpi_layer.size, 216)

    def test_base_config_not_mutated_and_idempotent(self):
        snapshot = (IOS_CONFIG.icon_sizes, ANDROID_CONFIG.icon_sizes, ANDROID_CONFIG.adaptive_layer_files)
        customization = {"scale": 1.5, "android": {"excludeSizes": ["ldpi", "monochrome"]}}

        first = self.manager.apply_size_customization(ANDROID_CONFIG, customization)
        second = self.manager.apply_size_customization(ANDROID_CONFIG, customization)

        self.assertEqual(first, second)
        self.assertEqual(
            snapshot,
            (IOS_CONFIG.icon_sizes, ANDROID_CONFIG.icon_sizes, ANDROID_CONFIG.adaptive_layer_files),
        )
        self.assertEqual(len(ANDROID_CONFIG.icon_sizes), 13)

    def test_invalid_customization_raises(self):
        with self.assertRaises(ConfigValidationError):
            self.manager.apply_size_customization(IOS_CONFIG, {"scale": 0})

    def test_add_custom_sizes(self):
        config = self.manager.apply_size_customization(
            IOS_CONFIG,
            {"ios": {"addSizes": [{"size": "50x50", "scale": "2x", "filename": "Icon-50@2x.png"}]}},
        )
        self.assertEqual(len(config.icon_sizes), len(IOS_CONFIG.icon_sizes) + 1)
        self.assertEqual(config.icon_sizes[-1], IOSIconSize("50x50", "2x", "Icon-50@2x.png"))

    def test_add_android_size_requires_fields(self):
        with self.assertRaises(ConfigValidationError) as ctx:
            self.manager.apply_size_customization(
                ANDROID_CONFIG,
                {"android": {"addSizes": [{"density": "tvdpi", "size": "213", "folder": "mipmap-tvdpi"}]}},
            )
        self.assertIn("Android custom size", str(ctx.exception))

    def test_add_duplicate_filename_rejected(self):
        with self.assertRaises(ConfigValidationError):
            self.manager.apply_size_customization(
                ANDROID_CONFIG,
                {"android": {"addSizes": [
                    {"density": "mdpi", "size": 64, "folder": "mipmap-mdpi", "filename": "ic_launcher.png"},
                ]}},
            )

    def test_add_same_filename_other_folder_allowed(self):
        config = self.manager.apply_size_customization(
            ANDROID_CONFIG,
            {"android": {"addSizes": [
                {"density": "tvdpi", "size": 64, "folder": "mipmap-tvdpi", "filename": "ic_launcher.png"},
            ]}},
        )
        self.assertEqual(config.icon_sizes[-1].relative_path, "mipmap-tvdpi/ic_launcher.png")


class TestExclusions(unittest.TestCase):
    def setUp(self):
        self.manager = SizeConfigManager()

    def test_ios_patterns(self):
        config = self.manager.apply_size_customization(IOS_CONFIG, {"ios": {"excludeSizes": ["20x20@2x"]}})
        self.assertNotIn("Icon-App-20x20@2x.png", [s.filename for s in config.icon_sizes])
        self.assertIn("Icon-App-20x20@3x.png", [s.filename for s in config.icon_sizes])

        config = self.manager.apply_size_customization(IOS_CONFIG, {"ios": {"excludeSizes": ["20x20"]}})
        self.assertFalse(any(s.size == "20x20" for s in config.icon_sizes))

        config = self.manager.apply_size_customization(IOS_CONFIG, {"ios": {"excludeSizes": ["@3x"]}})
        self.assertFalse(any(s.scale == "3x" for s in config.icon_sizes))
        self.assertEqual(len(config.icon_sizes), 7)

    def test_ldpi_removes_only_ldpi(self):
        config = self.manager.apply_size_customization(ANDROID_CONFIG, {"android": {"excludeSizes": ["ldpi"]}})
        self.assertFalse(any(s.density == "ldpi" for s in config.icon_sizes))
        self.assertFalse(any(s.density == "ldpi" for s in config.adaptive_icon_sizes))
        self.assertEqual(len(config.icon_sizes), len(ANDROID_CONFIG.icon_sizes) - 2)
        self.assertEqual(len(config.adaptive_icon_sizes), len(ANDROID_CONFIG.adaptive_icon_sizes) - 1)
        self.assertEqual(config.adaptive_layer_files, ANDROID_CONFIG.adaptive_layer_files)

    def test_monochrome_removes_only_monochrome(self):
        config = self.manager.apply_size_customization(ANDROID_CONFIG, {"android": {"excludeSizes": ["monochrome"]}})
        self.assertEqual(config.adaptive_layer_files, ("ic_launcher_foreground.png", "ic_launcher_background.png"))
        self.assertEqual(config.icon_sizes, ANDROID_CONFIG.icon_sizes)
        self.assertEqual(config.adaptive_icon_sizes, ANDROID_CONFIG.adaptive_icon_sizes)

    def test_round_filename_substring(self):
        config = self.manager.apply_size_customization(ANDROID_CONFIG, {"android": {"excludeSizes": ["round"]}})
        self.assertFalse(any("round" in s.filename for s in config.icon_sizes))
        self.assertEqual(len(config.icon_sizes), 7)
        # foreground/background contain "round" but are not round icons
        self.assertEqual(config.adaptive_layer_files, ANDROID_CONFIG.adaptive_layer_files)

    def test_layer_file_patterns(self):
        files = ANDROID_CONFIG.adaptive_layer_files
        self.assertEqual(
            self.manager.exclude_layer_files(files, ["ic_launcher_monochrome.png"]),
            files[:2],
        )
        self.assertEqual(self.manager.exclude_layer_files(files, ["ic_launcher"]), files)


class TestParseFromCli(unittest.TestCase):
    def setUp(self):
        self.manager = SizeConfigManager()

    def test_nothing_set_returns_none(self):
        self.assertIsNone(self.manager.parse_from_cli())

    def test_exclude_targets_selected_platform(self):
        customization = self.manager.parse_from_cli(exclude="ldpi, round", platform="android")
        self.assertEqual(customization.for_platform("android").exclude_sizes, ["ldpi", "round"])
        self.assertEqual(customization.for_platform("ios").exclude_sizes, [])

    def test_exclude_all_platforms(self):
        customization = self.manager.parse_from_cli(exclude="@3x", platform="all")
        self.assertEqual(customization.for_platform("ios").exclude_sizes, ["@3x"])
        self.assertEqual(customization.for_platform("android").exclude_sizes, ["@3x"])

    def test_scales(self):
        customization = self.manager.parse_from_cli(scale=1.5, ios_scale=2)
        self.assertEqual(customization.scale, 1.5)
        self.assertEqual(customization.for_platform("ios").scale, 2.0)
        self.assertIsNone(customization.for_platform("android").scale)


def test_load_json_customization(tmp_path):
    path = tmp_path / "sizes.json"
    path.write_text(json.dumps({"android": {"excludeSizes": ["ldpi"]}}), encoding="utf-8")
    customization = SizeConfigManager().load_customization_file(path)
    assert isinstance(customization, SizeCustomization)
    assert customization.for_platform("android").exclude_sizes == ["ldpi"]


def test_load_yaml_customization(tmp_path):
    path = tmp_path / "sizes.yaml"
    path.write_text("scale: 1.2\nios:\n  exclude_sizes:\n    - '@3x'\n", encoding="utf-8")
    customization = SizeConfigManager().load_customization_file(path)
    assert customization.scale == 1.2
    assert customization.for_platform("ios").exclude_sizes == ["@3x"]


def test_load_customization_errors(tmp_path):
    manager = SizeConfigManager()
    with pytest.raises(ConfigValidationError, match="not found"):
        manager.load_customization_file(tmp_path / "missing.json")

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigValidationError, match="Invalid custom config"):
        manager.load_customization_file(broken)

    listing = tmp_path / "list.yaml"
    listing.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ConfigValidationError, match="must contain an object"):
        manager.load_customization_file(listing)
