"""
Shared fixtures for the BufPay client tests.
"""
import hashlib
from typing import Any, Optional
from unittest.mock import MagicMock

import pytest
import requests

from bufpay import BufPayClient, BufPayConfig

SECRET = "s3cr3t"


def md5_upper(text: str) -> str:
    return hashlib.md5(text.encode("utf-8")).hexdigest().upper()


def make_response(status_code: int = 200, payload: Any = None, text: Optional[str] = None):
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    if payload is not None:
        response.json.return_value = payload
        response.text = text if text is not None else str(payload)
    else:
        response.json.side_effect = ValueError("No JSON object could be decoded")
        response.text = text or ""
    return response


@pytest.fixture
def config():
    return BufPayConfig(app_id="app-42", app_secret=SECRET, base_url="https://gw.test/api/")


@pytest.fixture
def session():
    """Mock HTTP session answering every request with a small JSON object"""
    mock = MagicMock(spec=requests.Session)
    mock.request.return_value = make_response(200, {"status": "ok"})
    return mock


@pytest.fixture
def client(config, session):
    return BufPayClient(config, session=session)


@pytest.fixture
def payment_fields():
    return {
        "name": "VIP",
        "pay_type": "alipay",
        "price": "10.00",
        "order_id": "O1",
        "order_uid": "U1",
        "notify_url": "https://shop.test/bufpay/notify",
    }


@pytest.fixture
def notification():
    """Notification signed with SECRET"""
    return {
        "aoid": "A1",
        "order_id": "O1",
        "order_uid": "U1",
        "price": "10.00",
        "pay_price": "9.50",
        "sign": md5_upper("A1O1U110.009.50" + SECRET),
    }
