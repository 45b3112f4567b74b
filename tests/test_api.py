"""
Tests for the one-shot helpers in bufpay.api.
"""
from unittest.mock import MagicMock, patch

import pytest
import requests

from bufpay import (
    GatewayError,
    ValidationError,
    create_payment,
    query_payment,
    verify_notification,
)

from .conftest import make_response


@pytest.fixture
def owned_session():
    """Session the helpers open themselves when none is passed in"""
    session = MagicMock(spec=requests.Session)
    session.__enter__.return_value = session
    session.request.return_value = make_response(200, {"status": "ok"})
    with patch("bufpay.api.requests.Session", return_value=session):
        yield session


def test_create_payment(config, session, payment_fields):
    assert create_payment(config, session=session, **payment_fields) == {"status": "ok"}
    assert session.request.call_args.args[0] == "POST"


def test_create_payment_validates_first(config, session, payment_fields):
    del payment_fields["notify_url"]
    with pytest.raises(ValidationError):
        create_payment(config, session=session, **payment_fields)
    session.request.assert_not_called()


def test_query_payment(config, session):
    assert query_payment(config, "A1", session=session) == {"status": "ok"}


def test_verify_notification(config, notification):
    assert verify_notification(config, notification) is True
    notification["order_uid"] = "someone-else"
    assert verify_notification(config, notification) is False


def test_caller_session_is_left_open(config, session):
    query_payment(config, "A1", session=session)
    session.close.assert_not_called()
    session.__exit__.assert_not_called()


def test_own_session_is_closed_after_create(config, owned_session, payment_fields):
    assert create_payment(config, **payment_fields) == {"status": "ok"}
    owned_session.__exit__.assert_called_once()


def test_own_session_is_closed_after_failure(config, owned_session):
    owned_session.request.return_value = make_response(500, text="boom")

    with pytest.raises(GatewayError):
        query_payment(config, "A1")
    owned_session.__exit__.assert_called_once()


def test_own_session_is_closed_after_verify(config, owned_session, notification):
    assert verify_notification(config, notification) is True
    owned_session.__exit__.assert_called_once()
