"""
Client SDK for the BufPay payment gateway.

The most useful pieces are re-exported here so integrators can
``from bufpay import ...`` without navigating the package. The FastAPI
notification adapter lives in :mod:`bufpay.webhook`.
"""

from .api import create_bufpay_client, create_payment, query_payment, verify_notification
from .core import (
    DEFAULT_BASE_URL,
    PAY_TYPES,
    BufPayClient,
    BufPayConfig,
    BufPayEnvironment,
    BufPayError,
    ConfigError,
    GatewayError,
    NotificationPayload,
    PaymentRequest,
    ValidationError,
    build_environment,
    load_bufpay_config,
    load_env_file,
)

__all__ = (
    "DEFAULT_BASE_URL",
    "PAY_TYPES",
    "BufPayClient",
    "BufPayConfig",
    "BufPayEnvironment",
    "BufPayError",
    "ConfigError",
    "GatewayError",
    "NotificationPayload",
    "PaymentRequest",
    "ValidationError",
    "build_environment",
    "create_bufpay_client",
    "create_payment",
    "load_bufpay_config",
    "load_env_file",
    "query_payment",
    "verify_notification",
)
