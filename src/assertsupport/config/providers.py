"""Config providers.

Settings are layered: defaults < file < env. Each provider returns a plain
dict and ConfigManager merges them in precedence order, so a runner can add
its own provider (e.g. values parsed from its CLI) without touching this
package.
"""

from __future__ import annotations

import copy
import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Protocol, runtime_checkable

try:
    import tomllib
except ImportError:  # python < 3.11
    tomllib = None  # type: ignore[assignment]


@runtime_checkable
class ConfigProvider(Protocol):
    name: str

    def load(self) -> Dict[str, Any]:
        """Return the provider config as a plain dict."""
        ...


def _deep_merge(a: Dict[str, Any], b: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge mapping b into dict a (recursive for dict values)."""
    for k, v in b.items():
        if isinstance(v, Mapping) and isinstance(a.get(k), Mapping):
            a[k] = _deep_merge(dict(a[k]), v)
        else:
            a[k] = v
    return a


def _set_nested(d: Dict[str, Any], keys: List[str], value: Any) -> None:
    cur = d
    for k in keys[:-1]:
        if k not in cur or not isinstance(cur[k], dict):
            cur[k] = {}
        cur = cur[k]
    cur[keys[-1]] = value


def _coerce_value(s: str) -> Any:
    # bool
    sl = s.strip().lower()
    if sl in {"true", "yes", "y", "on"}:
        return True
    if sl in {"false", "no", "n", "off"}:
        return False
    # int/float
    try:
        if "." in sl:
            return float(sl)
        return int(sl)
    except ValueError:
        pass
    # json
    if (sl.startswith("{") and sl.endswith("}")) or (sl.startswith("[") and sl.endswith("]")):
        try:
            return json.loads(s)
        except json.JSONDecodeError:
            return s
    return s.strip()


@dataclass
class DictProvider:
    name: str = "dict"
    data: Dict[str, Any] = field(default_factory=dict)

    def load(self) -> Dict[str, Any]:
        return copy.deepcopy(self.data)


@dataclass
class EnvProvider:
    """Reads ASSERTSUPPORT_* variables and builds a nested dict via '__'.

    Example:
      ASSERTSUPPORT_DIFF__CONTEXT_LINES=5
    becomes:
      {"diff": {"context_lines": 5}}

    The prefix is stripped and keys are lowercased.
    """

    name: str = "env"
    prefix: str = "ASSERTSUPPORT_"
    sep: str = "__"
    environ: Mapping[str, str] = field(default_factory=lambda: os.environ)

    def load(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for k, v in self.environ.items():
            if not k.startswith(self.prefix):
                continue
            key = k[len(self.prefix):]
            parts = [p.strip().lower() for p in key.split(self.sep) if p.strip()]
            if not parts:
                continue
            _set_nested(out, parts, _coerce_value(v))
        return out


@dataclass
class FileProvider:
    """Reads a JSON or TOML config file."""

    name: str = "file"
    path: str = ""
    optional: bool = True

    def load(self) -> Dict[str, Any]:
        if not self.path:
            return {}
        if not os.path.exists(self.path):
            if self.optional:
                return {}
            raise FileNotFoundError(self.path)

        with open(self.path, "rb") as f:
            raw = f.read().decode("utf-8")

        p = self.path.lower()
        if p.endswith(".json"):
            return json.loads(raw)
        if p.endswith(".toml"):
            if tomllib is None:
                raise RuntimeError("TOML config requires tomllib (python>=3.11)")
            return tomllib.loads(raw)
        raise RuntimeError(f"Unsupported config format for {self.path} (use .toml or .json)")


@dataclass
class ConfigManager:
    """Compose providers in precedence order (later overrides earlier)."""

    providers: List[ConfigProvider]

    def load(self) -> Dict[str, Any]:
        merged: Dict[str, Any] = {}
        for p in self.providers:
            payload = p.load()
            if payload:
                _deep_merge(merged, payload)
        return merged
