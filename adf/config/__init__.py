"""
Configuration management for Account Data Forms.

This package provides typed configuration models and loaders.
"""

from .models import ADFConfig, NetworkConfig, RelayConfig
from .loader import build_config_from_raw, load_config_from_file, save_config_to_file

__all__ = [
    "ADFConfig",
    "NetworkConfig",
    "RelayConfig",
    "build_config_from_raw",
    "load_config_from_file",
    "save_config_to_file",
]
