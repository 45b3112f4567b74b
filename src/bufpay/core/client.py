"""
HTTP client for the BufPay gateway.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import logging
from typing import Any, Mapping, Optional, Union
from urllib.parse import quote

import requests

from .config import BufPayConfig
from .errors import GatewayError, ValidationError
from .payloads import NotificationPayload, PaymentRequest, _stringify

__all__ = [
    "BufPayClient",
]

_FORM_HEADERS = {"Content-Type": "application/x-www-form-urlencoded"}


def _create_signature(*params: Any) -> str:
    # MD5 is what the gateway computes on its side; it cannot be swapped for a
    # stronger digest without breaking every signed request and notification.
    concatenated = "".join(_stringify(param) for param in params if param is not None)
    digest = hashlib.md5(concatenated.encode("utf-8"), usedforsecurity=False)
    return digest.hexdigest().upper()


def _decode(response: requests.Response, url: str) -> Any:
    if response.status_code >= 400:
        raise GatewayError(
            f"BufPay responded with {response.status_code}: {response.text}",
            status_code=response.status_code,
            body=response.text,
        )
    try:
        return response.json()
    except (json.JSONDecodeError, ValueError):
        logging.info("BufPay at %s answered with a non-JSON body", url)
        return response.text


class BufPayClient:
    """
    Signs and sends requests for a single BufPay application.

    The client keeps no state between calls beyond its configuration and the
    HTTP session, so one instance can be shared freely.
    """

    def __init__(
        self,
        config: BufPayConfig,
        *,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config
        self.session = session or requests.Session()

    def _sign(self, *params: Any) -> str:
        return _create_signature(*params, self.config.app_secret)

    def _send(self, method: str, url: str, **kwargs: Any) -> Any:
        logging.info("Sending %s request to %s", method, url)
        try:
            response = self.session.request(
                method, url, timeout=self.config.timeout_seconds, **kwargs
            )
        except requests.RequestException as exc:
            raise GatewayError(f"BufPay request to {url} failed: {exc}") from exc
        return _decode(response, url)

    def create_payment(
        self,
        request: Optional[PaymentRequest] = None,
        **fields: Any,
    ) -> Any:
        """
        Create a payment and return the gateway's response body untouched.

        Either pass a :class:`PaymentRequest` or its fields as keyword
        arguments. Missing fields raise :class:`ValidationError` before
        anything is signed or sent.
        """
        if request is None:
            request = PaymentRequest.from_fields(**fields)
        elif fields:
            raise TypeError("Pass either a PaymentRequest or keyword fields, not both")

        sign = self._sign(*request.signing_fields())
        return self._send(
            "POST",
            self.config.pay_url(),
            params={"format": "json"},
            data=request.to_form(sign),
            headers=_FORM_HEADERS,
        )

    def query_payment(self, aoid: str) -> Any:
        """Fetch the status of the payment identified by the gateway's ``aoid``."""
        if aoid is None or not str(aoid).strip():
            raise ValidationError("AOID is required")
        return self._send("GET", self.config.query_url(quote(str(aoid), safe="")))

    def verify_notification(
        self,
        payload: Union[NotificationPayload, Mapping[str, Any], Any],
    ) -> bool:
        """
        Return ``True`` if ``payload`` carries a valid signature.

        Safe to call on arbitrary input: anything malformed is simply
        rejected.
        """
        if not isinstance(payload, NotificationPayload):
            try:
                payload = NotificationPayload.from_mapping(payload)
            except ValidationError as exc:
                logging.warning("Rejected BufPay notification: %s", exc)
                return False

        if not isinstance(payload.sign, str):
            return False

        try:
            expected = self._sign(*payload.signing_fields())
            matches = hmac.compare_digest(
                expected.encode("utf-8"), payload.sign.encode("utf-8")
            )
        except UnicodeEncodeError:
            matches = False
        if matches:
            return True

        logging.warning(
            "Signature mismatch on BufPay notification for order %s", payload.order_id
        )
        return False
