import os
import re
import sys
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)


class IconCraftConfig:
    """
    Centralized configuration management for IconCraft.
    Handles precedence of settings:
    1. Environment variable (ICONCRAFT_<UPPER_SNAKE_NAME>) - CI / build scripts
    2. User config file (YAML, ICONCRAFT_CONFIG or ~/.config/iconcraft/config.yaml)
    3. Caller supplied default
    """

    ENV_PREFIX = "ICONCRAFT_"
    CONFIG_ENV_VAR = "ICONCRAFT_CONFIG"
    DEFAULT_CONFIG_PATH = Path.home() / ".config" / "iconcraft" / "config.yaml"

    @classmethod
    def get_value(cls, value_name: str, default: Any = None) -> Any:
        """
        Retrieves a setting respecting the precedence order.
        Returns 'default' if the value is not found in any location.
        """
        env_name = cls.ENV_PREFIX + cls._to_env_name(value_name)
        val = os.environ.get(env_name)
        if val is not None:
            logger.debug(f"Config '{value_name}' found in environment ({env_name}): {val}")
            return val

        data = cls.load_config_file(str(cls.get_config_path()))
        if value_name in data:
            logger.debug(f"Config '{value_name}' found in config file: {data[value_name]}")
            return data[value_name]

        return default

    @classmethod
    def get_config_path(cls) -> Path:
        override = os.environ.get(cls.CONFIG_ENV_VAR)
        if override:
            return Path(override)
        return cls.DEFAULT_CONFIG_PATH

    @staticmethod
    @lru_cache(maxsize=8)
    def load_config_file(path: str) -> Dict[str, Any]:
        config_path = Path(path)
        if not config_path.exists():
            return {}
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except (yaml.YAMLError, OSError) as e:
            logger.warning(f"Ignoring unreadable config file {config_path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring config file {config_path}: expected a mapping at top level")
            return {}
        return data

    @classmethod
    def reload(cls):
        """Drops the cached config file contents."""
        cls.load_config_file.cache_clear()

    @staticmethod
    def _to_env_name(value_name: str) -> str:
        # "AndroidPaddingRatio" -> "ANDROID_PADDING_RATIO"
        return re.sub(r'(?<!^)(?=[A-Z])', '_', value_name).upper()

    @classmethod
    def get_float(cls, value_name: str, default: Optional[float] = None) -> Optional[float]:
        val = cls.get_value(value_name)
        if val is None:
            return default
        try:
            return float(val)
        except (TypeError, ValueError):
            logger.warning(f"Config '{value_name}' is not a number: {val!r}, using default {default}")
            return default

    @classmethod
    def get_int(cls, value_name: str, default: Optional[int] = None) -> Optional[int]:
        val = cls.get_value(value_name)
        if val is None:
            return default
        try:
            return int(val)
        except (TypeError, ValueError):
            logger.warning(f"Config '{value_name}' is not an integer: {val!r}, using default {default}")
            return default

    @classmethod
    def is_debug_mode(cls) -> bool:
        """Checks if debug mode is enabled via Command Line, Environment or config file."""
        # 1. CLI Arguments
        if '--debug' in sys.argv or '-d' in sys.argv:
            return True

        # 2. Environment Variable
        if os.environ.get('ICONCRAFT_DEBUG', '').lower() in ('1', 'true', 'yes'):
            return True

        # 3. Config file
        val = cls.load_config_file(str(cls.get_config_path())).get("DebugMode")
        if val is not None:
            return val in (1, True, "1", "true", "yes")

        # 4. Default for dev builds
        from iconcraft import __version__
        return "dev" in __version__.lower()

    @classmethod
    def get_padding_config(cls):
        """Builds the default PaddingConfig, honoring configured ratio overrides."""
        from iconcraft.models import PaddingConfig
        defaults = PaddingConfig()
        return PaddingConfig(
            ios_ratio=cls.get_float("IosPaddingRatio", defaults.ios_ratio),
            android_ratio=cls.get_float("AndroidPaddingRatio", defaults.android_ratio),
        )

    @classmethod
    def get_max_workers(cls) -> Optional[int]:
        """Thread count for per-asset work. None lets the executor decide."""
        val = cls.get_int("MaxWorkers")
        if val is not None and val < 1:
            logger.warning(f"MaxWorkers must be positive, got {val}; using executor default")
            return None
        return val

    @classmethod
    def get_log_directory(cls) -> Optional[str]:
        return cls.get_value("LogDirectory")
