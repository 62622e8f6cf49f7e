from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .providers import ConfigManager, DictProvider, EnvProvider, FileProvider

ENV_PREFIX = "ASSERTSUPPORT_"
CONFIG_PATH_ENV = "ASSERTSUPPORT_CONFIG"

DEFAULTS: Dict[str, Any] = {
    "diff": {"color": False, "context_lines": 3},
    "log": {"level": "warning", "json": False, "file": None},
}


def load_config(
    defaults: Optional[Dict[str, Any]] = None,
    file_path: Optional[str] = None,
    *,
    use_env: bool = True,
    env_prefix: str = ENV_PREFIX,
    environ: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """Load layered config: defaults < file < env."""
    providers = [DictProvider(data=dict(defaults if defaults is not None else DEFAULTS))]
    if file_path:
        providers.append(FileProvider(path=file_path, optional=False))
    if use_env:
        providers.append(EnvProvider(prefix=env_prefix, environ=os.environ if environ is None else environ))
    return ConfigManager(providers).load()


@dataclass(frozen=True)
class SupportSettings:
    diff_color: bool = False
    diff_context_lines: int = 3
    log_level: str = "warning"
    log_json: bool = False
    log_file: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SupportSettings":
        diff = data.get("diff") or {}
        log = data.get("log") or {}
        context_lines = int(diff.get("context_lines", 3))
        if context_lines < 0:
            raise ValueError(f"diff.context_lines must be >= 0, got {context_lines}")
        return cls(
            diff_color=bool(diff.get("color", False)),
            diff_context_lines=context_lines,
            log_level=str(log.get("level", "warning")),
            log_json=bool(log.get("json", False)),
            log_file=log.get("file") or None,
        )


def load_settings(file_path: Optional[str] = None, *, environ: Optional[Mapping[str, str]] = None) -> SupportSettings:
    """Build settings from defaults, an optional file and ASSERTSUPPORT_* env vars.

    The file path falls back to $ASSERTSUPPORT_CONFIG when not given.
    """
    env = os.environ if environ is None else environ
    path = file_path or env.get(CONFIG_PATH_ENV) or None
    # the path variable itself is not a setting
    scrubbed = {k: v for k, v in env.items() if k != CONFIG_PATH_ENV}
    return SupportSettings.from_dict(load_config(file_path=path, environ=scrubbed))
