"""Config module.

  - load_config(defaults, file_path) -> dict      layered defaults < file < env
  - load_settings(file_path) -> SupportSettings    typed view used by the package
"""

from __future__ import annotations

from .loader import DEFAULTS, SupportSettings, load_config, load_settings
from .providers import (
    ConfigManager,
    ConfigProvider,
    DictProvider,
    EnvProvider,
    FileProvider,
)

__all__ = [
    "DEFAULTS",
    "SupportSettings",
    "load_config",
    "load_settings",
    "ConfigProvider",
    "ConfigManager",
    "DictProvider",
    "EnvProvider",
    "FileProvider",
]
