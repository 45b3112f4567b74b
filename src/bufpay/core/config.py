"""
Configuration objects and helpers for the BufPay client.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from .environment import build_environment

__all__ = [
    "DEFAULT_BASE_URL",
    "ConfigError",
    "BufPayConfig",
    "load_bufpay_config",
]

DEFAULT_BASE_URL = "https://bufpay.com/api"
DEFAULT_TIMEOUT_SECONDS = 30.0

_PARAMETER_TO_ENV_KEY = {
    "app_id": "BUFPAY_APP_ID",
    "app_secret": "BUFPAY_APP_SECRET",
    "base_url": "BUFPAY_BASE_URL",
    "timeout_seconds": "BUFPAY_TIMEOUT_SECONDS",
}


class ConfigError(Exception):
    """Raised when the supplied configuration is invalid."""


def _require(values: Mapping[str, str], key: str) -> str:
    raw = values.get(key)
    if raw is None or not raw.strip():
        raise ConfigError(f"{key} must be provided")
    return raw.strip()


def _parse_timeout(raw: str) -> float:
    try:
        timeout = float(raw)
    except ValueError as exc:
        raise ConfigError(
            f"BUFPAY_TIMEOUT_SECONDS must be a number, got '{raw}'"
        ) from exc
    if not math.isfinite(timeout) or timeout <= 0:
        raise ConfigError("BUFPAY_TIMEOUT_SECONDS must be a finite number greater than zero")
    return timeout


@dataclass(frozen=True)
class BufPayConfig:
    """
    Credentials and endpoint settings for one BufPay application.

    ``app_secret`` is only ever used as the last input of a signature; it is
    kept out of ``repr`` so the config can be logged safely.
    """

    app_id: str
    app_secret: str = field(repr=False)
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    def __post_init__(self) -> None:
        if not self.app_id:
            raise ConfigError("app_id must not be empty")
        if not self.app_secret:
            raise ConfigError("app_secret must not be empty")
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    def pay_url(self) -> str:
        return f"{self.base_url}/pay/{self.app_id}"

    def query_url(self, aoid: str) -> str:
        return f"{self.base_url}/query/{aoid}"

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> "BufPayConfig":
        return cls(
            app_id=_require(values, "BUFPAY_APP_ID"),
            app_secret=_require(values, "BUFPAY_APP_SECRET"),
            base_url=values.get("BUFPAY_BASE_URL") or DEFAULT_BASE_URL,
            timeout_seconds=_parse_timeout(
                values.get("BUFPAY_TIMEOUT_SECONDS") or str(DEFAULT_TIMEOUT_SECONDS)
            ),
        )

    @classmethod
    def from_env(
        cls,
        *,
        env_file: Optional[str] = ".env",
        overrides: Optional[Mapping[str, str]] = None,
        base: Optional[Mapping[str, str]] = None,
        app_id: Optional[str] = None,
        app_secret: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_seconds: Optional[float | int | str] = None,
    ) -> "BufPayConfig":
        merged_overrides: Dict[str, str] = dict(overrides or {})
        merged_overrides.update(
            _parameter_overrides(
                {
                    "app_id": app_id,
                    "app_secret": app_secret,
                    "base_url": base_url,
                    "timeout_seconds": timeout_seconds,
                }
            )
        )
        environment = build_environment(
            env_file=env_file,
            base=base,
            overrides=merged_overrides,
        )
        return cls.from_mapping(environment.variables)


def _parameter_overrides(explicit: Mapping[str, Any]) -> Dict[str, str]:
    return {
        _PARAMETER_TO_ENV_KEY[name]: str(value)
        for name, value in explicit.items()
        if value is not None
    }


def load_bufpay_config(
    *,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    app_id: Optional[str] = None,
    app_secret: Optional[str] = None,
    base_url: Optional[str] = None,
    timeout_seconds: Optional[float | int | str] = None,
) -> BufPayConfig:
    """
    Convenience wrapper that mirrors :meth:`BufPayConfig.from_env`.

    Settings can come from environment variables, a ``.env`` file, direct
    keyword arguments, or any combination of the three.
    """
    return BufPayConfig.from_env(
        env_file=env_file,
        overrides=overrides,
        base=base,
        app_id=app_id,
        app_secret=app_secret,
        base_url=base_url,
        timeout_seconds=timeout_seconds,
    )
