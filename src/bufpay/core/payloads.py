"""
Typed views of the data exchanged with the BufPay gateway.
"""

from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .errors import ValidationError

__all__ = [
    "PAY_TYPES",
    "NotificationPayload",
    "PaymentRequest",
]

PAY_TYPES = ("alipay", "wechat")

Price = Union[str, int, float, Decimal]

_NOTIFICATION_FIELDS = ("aoid", "order_id", "order_uid", "price", "pay_price", "sign")


def _stringify(value: Any) -> str:
    """Render ``value`` the way the gateway's JavaScript side does with ``String()``."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def _is_missing(value: Any) -> bool:
    # Mirrors a falsy check on the gateway side: zero, false and NaN count as absent.
    if value is None or value == "":
        return True
    if isinstance(value, bool):
        return not value
    if isinstance(value, Decimal):
        return value.is_nan() or value.is_zero()
    if isinstance(value, (int, float)):
        return value == 0 or math.isnan(value)
    return False


@dataclass(frozen=True)
class PaymentRequest:
    """
    A payment to be created on the gateway.

    All fields except ``return_url`` and ``feedback_url`` are mandatory; the
    optional URLs are normalised to ``""`` because they take part in the
    signature even when unused.
    """

    name: str
    pay_type: str
    price: Price
    order_id: str
    order_uid: str
    notify_url: str
    return_url: Optional[str] = ""
    feedback_url: Optional[str] = ""

    def __post_init__(self) -> None:
        missing = [
            name
            for name in ("name", "pay_type", "price", "order_id", "order_uid", "notify_url")
            if _is_missing(getattr(self, name))
        ]
        if missing:
            raise ValidationError(
                "Missing required payment parameters: " + ", ".join(missing)
            )
        if self.pay_type not in PAY_TYPES:
            raise ValidationError(
                f"pay_type must be one of {', '.join(PAY_TYPES)}, got '{self.pay_type}'"
            )
        if self.return_url is None:
            object.__setattr__(self, "return_url", "")
        if self.feedback_url is None:
            object.__setattr__(self, "feedback_url", "")

    @classmethod
    def from_fields(cls, **fields: Any) -> "PaymentRequest":
        """
        Like the constructor, but an omitted mandatory field raises
        :class:`ValidationError` instead of :class:`TypeError`.
        """
        known = {item.name: item for item in dataclasses.fields(cls)}
        unknown = sorted(set(fields) - set(known))
        if unknown:
            raise TypeError("Unknown payment parameters: " + ", ".join(unknown))
        values = {
            name: fields.get(name, None if item.default is dataclasses.MISSING else item.default)
            for name, item in known.items()
        }
        return cls(**values)

    def signing_fields(self) -> Tuple[Any, ...]:
        return (
            self.name,
            self.pay_type,
            self.price,
            self.order_id,
            self.order_uid,
            self.notify_url,
            self.return_url,
            self.feedback_url,
        )

    def to_form(self, sign: str) -> Dict[str, str]:
        """Map onto the gateway's form field names, ``sign`` last."""
        return {
            "name": _stringify(self.name),
            "pay_type": _stringify(self.pay_type),
            "price": _stringify(self.price),
            "order_id": _stringify(self.order_id),
            "order_uid": _stringify(self.order_uid),
            "notify_url": _stringify(self.notify_url),
            "return_url": _stringify(self.return_url),
            "feedback_url": _stringify(self.feedback_url),
            "sign": sign,
        }


@dataclass(frozen=True)
class NotificationPayload:
    """
    An inbound, untrusted claim that a payment completed.

    Nothing here is trustworthy until
    :meth:`bufpay.core.client.BufPayClient.verify_notification` accepts it.
    """

    aoid: Any
    order_id: Any
    order_uid: Any
    price: Any
    pay_price: Any
    sign: str

    @classmethod
    def from_mapping(cls, values: Any) -> "NotificationPayload":
        if not isinstance(values, Mapping):
            raise ValidationError("Notification payload must be a mapping")
        missing = [name for name in _NOTIFICATION_FIELDS if _is_missing(values.get(name))]
        if missing:
            raise ValidationError(
                "Missing notification fields: " + ", ".join(missing)
            )
        return cls(**{name: values[name] for name in _NOTIFICATION_FIELDS})

    def signing_fields(self) -> Tuple[Any, ...]:
        return (self.aoid, self.order_id, self.order_uid, self.price, self.pay_price)
