# ==============================================================================
# TGX FORGE - CONFIGURATION MODULE
# ==============================================================================
# Centralized configuration management for the command line tools.
#
# This module handles:
#   - Loading/saving configuration from a JSON file
#   - Default values for all settings
#   - Range clamping for numeric settings
#
# Configuration is stored in: data/config.json
#
# The codec itself never reads this module. Everything the codec needs is
# passed in explicitly; the CLI is the only place that turns config values
# into arguments.
#
# Usage:
#   from tgxforge.core.config import Config
#   config = Config()
#   config.load()
#   print(config.atlas_width)
#   config.smooth_colors = False
#   config.save()
# ==============================================================================

import os
import json
from typing import Optional, Dict, Any


# ==============================================================================
# DEFAULT CONFIGURATION VALUES
# ==============================================================================
# These are used when no config file exists or when values are missing.

DEFAULT_CONFIG = {
    # -------------------------------------------------------------------------
    # PREVIEW
    # -------------------------------------------------------------------------
    # Width of the atlas preview image in pixels
    "atlas_width": 1000,

    # Replicate high bits into the low 3 bits when decoding colors
    "smooth_colors": True,

    # -------------------------------------------------------------------------
    # ENCODING
    # -------------------------------------------------------------------------
    # Set the opacity bit on every pixel regardless of data type
    "force_opaque": False,

    # Leave bit 15 of raw colors untouched (False forces it on)
    "animated": True,

    # Horizontal extent after which tiled diamonds wrap to a new line
    "placement_wrap_width": 4000,

    # -------------------------------------------------------------------------
    # ADVANCED
    # -------------------------------------------------------------------------
    # Enable debug logging
    "debug_mode": False,
}


# ==============================================================================
# CONFIGURATION CLASS
# ==============================================================================
class Config:
    """
    Configuration manager for TGX Forge.

    Handles loading, saving, and accessing settings. Settings are stored
    in a JSON file and can be accessed as properties on this object.

    Attributes:
        config_path: Path to the configuration file
        data: Dictionary containing all settings

    Example:
        >>> config = Config()
        >>> config.load()
        >>> print(config.atlas_width)
        >>> config.atlas_width = 2048
        >>> config.save()
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize the configuration manager.

        Args:
            config_path: Path to config file. If None, uses default location.
        """
        if config_path:
            self.config_path = config_path
        else:
            # Default: data/config.json relative to project root
            project_root = os.path.dirname(
                os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
            )
            self.config_path = os.path.join(project_root, 'data', 'config.json')

        self.data: Dict[str, Any] = DEFAULT_CONFIG.copy()
        self._modified = False

    # -------------------------------------------------------------------------
    # LOADING AND SAVING
    # -------------------------------------------------------------------------

    def load(self) -> bool:
        """
        Load configuration from file.

        If the file doesn't exist, defaults are used.
        Unknown keys in the file are ignored.

        Returns:
            True if file was loaded, False if using defaults
        """
        if not os.path.isfile(self.config_path):
            if self.debug_mode:
                print(f"[DEBUG] Config file not found, using defaults")
            return False

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                loaded = json.load(f)
        except json.JSONDecodeError as e:
            print(f"[ERROR] Invalid config file: {e}")
            return False
        except OSError as e:
            print(f"[ERROR] Failed to load config: {e}")
            return False

        if not isinstance(loaded, dict):
            print(f"[ERROR] Invalid config file: expected an object")
            return False

        for key, value in loaded.items():
            if key in self.data:
                self.data[key] = value

        print(f"[INFO] Loaded config from {self.config_path}")
        self._modified = False
        return True

    def save(self) -> bool:
        """
        Save configuration to file.

        Creates the directory if it doesn't exist.

        Returns:
            True if saved successfully
        """
        try:
            directory = os.path.dirname(self.config_path)
            if directory:
                os.makedirs(directory, exist_ok=True)

            with open(self.config_path, 'w', encoding='utf-8') as f:
                json.dump(self.data, f, indent=4, sort_keys=True)

            print(f"[INFO] Saved config to {self.config_path}")
            self._modified = False
            return True

        except OSError as e:
            print(f"[ERROR] Failed to save config: {e}")
            return False

    def reset_to_defaults(self):
        """Reset all settings to their default values."""
        self.data = DEFAULT_CONFIG.copy()
        self._modified = True

    @property
    def modified(self) -> bool:
        """Whether settings changed since the last load or save."""
        return self._modified

    # -------------------------------------------------------------------------
    # PROPERTY ACCESS
    # -------------------------------------------------------------------------

    @property
    def atlas_width(self) -> int:
        """Get the atlas preview width."""
        return self.data.get('atlas_width', 1000)

    @atlas_width.setter
    def atlas_width(self, value: int):
        self.data['atlas_width'] = max(64, min(16384, int(value)))
        self._modified = True

    @property
    def smooth_colors(self) -> bool:
        """Check if decoded colors get their low bits filled in."""
        return self.data.get('smooth_colors', True)

    @smooth_colors.setter
    def smooth_colors(self, value: bool):
        self.data['smooth_colors'] = bool(value)
        self._modified = True

    @property
    def force_opaque(self) -> bool:
        """Check if every encoded pixel gets the opacity bit."""
        return self.data.get('force_opaque', False)

    @force_opaque.setter
    def force_opaque(self, value: bool):
        self.data['force_opaque'] = bool(value)
        self._modified = True

    @property
    def animated(self) -> bool:
        """Check if raw colors keep their own bit 15."""
        return self.data.get('animated', True)

    @animated.setter
    def animated(self, value: bool):
        self.data['animated'] = bool(value)
        self._modified = True

    @property
    def placement_wrap_width(self) -> int:
        """Get the horizontal wrap threshold for tiled diamonds."""
        return self.data.get('placement_wrap_width', 4000)

    @placement_wrap_width.setter
    def placement_wrap_width(self, value: int):
        self.data['placement_wrap_width'] = max(1, int(value))
        self._modified = True

    @property
    def debug_mode(self) -> bool:
        """Check if debug mode is enabled."""
        return self.data.get('debug_mode', False)

    @debug_mode.setter
    def debug_mode(self, value: bool):
        self.data['debug_mode'] = bool(value)
        self._modified = True

    # -------------------------------------------------------------------------
    # GENERIC ACCESS
    # -------------------------------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value.

        Args:
            key: Configuration key
            default: Default value if key not found

        Returns:
            The configuration value
        """
        return self.data.get(key, default)

    def set(self, key: str, value: Any):
        """Set a configuration value."""
        self.data[key] = value
        self._modified = True

    def __getitem__(self, key: str) -> Any:
        return self.data[key]

    def __setitem__(self, key: str, value: Any):
        self.data[key] = value
        self._modified = True


# ==============================================================================
# GLOBAL CONFIG INSTANCE
# ==============================================================================

_global_config: Optional[Config] = None


def get_config() -> Config:
    """
    Get the shared configuration instance.

    Creates and loads config on first call.

    Returns:
        The shared Config instance
    """
    global _global_config

    if _global_config is None:
        _global_config = Config()
        _global_config.load()

    return _global_config
