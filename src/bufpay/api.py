"""
Public, high-level helpers for talking to the BufPay gateway.
"""

from __future__ import annotations

from contextlib import nullcontext
from typing import Any, ContextManager, Mapping, Optional

import requests

from .core.client import BufPayClient
from .core.config import BufPayConfig, ConfigError, load_bufpay_config
from .core.payloads import NotificationPayload, PaymentRequest

__all__ = [
    "ConfigError",
    "BufPayClient",
    "BufPayConfig",
    "create_bufpay_client",
    "create_payment",
    "load_bufpay_config",
    "query_payment",
    "verify_notification",
]


def create_bufpay_client(
    *,
    config: Optional[BufPayConfig] = None,
    session: Optional[requests.Session] = None,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    app_id: Optional[str] = None,
    app_secret: Optional[str] = None,
    base_url: Optional[str] = None,
    timeout_seconds: Optional[float | int | str] = None,
) -> BufPayClient:
    """
    Construct a :class:`BufPayClient`.

    Callers can either supply a ready-made :class:`BufPayConfig` or let the
    helper assemble one from environment data and keyword arguments.
    """
    if config is not None:
        extras = (overrides, base, app_id, app_secret, base_url, timeout_seconds)
        if any(item is not None and item != {} for item in extras):
            raise ValueError(
                "Provide either a pre-built BufPayConfig or individual parameters, not both."
            )
        cfg = config
    else:
        cfg = load_bufpay_config(
            env_file=env_file,
            overrides=overrides,
            base=base,
            app_id=app_id,
            app_secret=app_secret,
            base_url=base_url,
            timeout_seconds=timeout_seconds,
        )
    return BufPayClient(cfg, session=session)


def _session_scope(session: Optional[requests.Session]) -> ContextManager[requests.Session]:
    # Sessions opened here are closed here; caller sessions are left alone.
    return requests.Session() if session is None else nullcontext(session)


def create_payment(
    config: BufPayConfig,
    request: Optional[PaymentRequest] = None,
    *,
    session: Optional[requests.Session] = None,
    **fields: Any,
) -> Any:
    """One-shot wrapper around :meth:`BufPayClient.create_payment`."""
    with _session_scope(session) as active:
        return BufPayClient(config, session=active).create_payment(request, **fields)


def query_payment(
    config: BufPayConfig,
    aoid: str,
    *,
    session: Optional[requests.Session] = None,
) -> Any:
    with _session_scope(session) as active:
        return BufPayClient(config, session=active).query_payment(aoid)


def verify_notification(
    config: BufPayConfig,
    payload: NotificationPayload | Mapping[str, Any],
) -> bool:
    with _session_scope(None) as active:
        return BufPayClient(config, session=active).verify_notification(payload)
