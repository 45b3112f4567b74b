"""
Core primitives: configuration, payload types and the signing HTTP client.
"""

from .client import BufPayClient
from .config import DEFAULT_BASE_URL, BufPayConfig, ConfigError, load_bufpay_config
from .environment import BufPayEnvironment, build_environment, load_env_file
from .errors import BufPayError, GatewayError, ValidationError
from .payloads import PAY_TYPES, NotificationPayload, PaymentRequest

__all__ = [
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
    "load_bufpay_config",
    "load_env_file",
]
