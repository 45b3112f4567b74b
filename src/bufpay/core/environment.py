"""
Helpers that assemble the environment used to configure the BufPay client.

Values come from three layers: the process environment (or a caller supplied
``base`` mapping), an optional ``.env`` file that only fills gaps, and explicit
overrides that always win. The result is a plain mapping that
:class:`bufpay.core.config.BufPayConfig` knows how to read.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, MutableMapping, Optional

__all__ = [
    "BufPayEnvironment",
    "build_environment",
    "load_env_file",
    "parse_env_file",
]

_EXPORT_PREFIX = "export "


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def parse_env_file(path: Path) -> Dict[str, str]:
    """
    Read ``KEY=VALUE`` pairs from ``path``.

    A missing file yields an empty mapping.
    """
    if not path.is_file():
        return {}

    values: Dict[str, str] = {}
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith(_EXPORT_PREFIX):
            line = line[len(_EXPORT_PREFIX):].lstrip()
        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or not key:
            continue
        values[key] = _unquote(value.strip())
    return values


def load_env_file(
    path: str = ".env",
    *,
    environ: Optional[MutableMapping[str, str]] = None,
) -> Dict[str, str]:
    """
    Copy the values found in ``path`` into ``environ`` without replacing
    keys that are already set, and return the merged result.
    """
    target: MutableMapping[str, str] = os.environ if environ is None else environ
    for key, value in parse_env_file(Path(path)).items():
        target.setdefault(key, value)
    return dict(target)


@dataclass(frozen=True)
class BufPayEnvironment:
    variables: Mapping[str, str]

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.variables.get(key, default)


def build_environment(
    *,
    env_file: Optional[str] = ".env",
    base: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, str]] = None,
) -> BufPayEnvironment:
    """
    Merge ``base`` (default :data:`os.environ`), ``env_file`` and ``overrides``.

    Pass ``env_file=None`` to skip reading a file.
    """
    merged: Dict[str, str] = dict(os.environ if base is None else base)

    if env_file is not None:
        for key, value in parse_env_file(Path(env_file)).items():
            merged.setdefault(key, value)

    merged.update(overrides or {})
    return BufPayEnvironment(variables=merged)
