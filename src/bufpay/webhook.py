"""
FastAPI adapter that receives BufPay payment notifications.
"""

import inspect
import json
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import PlainTextResponse

from .core.client import BufPayClient

__all__ = [
    "NOTIFY_PATH",
    "create_bufpay_app",
    "create_bufpay_router",
]

NOTIFY_PATH = "/bufpay/notify"

PaymentCallback = Callable[[Dict[str, Any]], Union[Any, Awaitable[Any]]]


def create_bufpay_router(
    client: BufPayClient,
    on_payment_success: Optional[PaymentCallback] = None,
    *,
    path: str = NOTIFY_PATH,
) -> APIRouter:
    """
    Build a router with a single ``POST`` route for gateway notifications.

    ``on_payment_success`` is called once per verified notification with the
    parsed JSON body, before the ``200`` response is sent. It may be a plain
    function or a coroutine function; coroutines are awaited. Exceptions raised
    by the callback are logged and re-raised, so the host application turns
    them into a ``500`` and the gateway delivers the notification again.
    """
    router = APIRouter(tags=["bufpay"])

    @router.post(path, response_class=PlainTextResponse)
    async def bufpay_notify(request: Request) -> PlainTextResponse:
        try:
            payload = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            payload = None

        if not client.verify_notification(payload):
            return PlainTextResponse("Invalid signature", status_code=400)

        if on_payment_success is not None:
            try:
                result = on_payment_success(payload)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logging.exception(
                    "Payment callback failed for BufPay order %s", payload.get("order_id")
                )
                raise

        logging.info("Accepted BufPay notification for order %s", payload.get("order_id"))
        return PlainTextResponse("OK", status_code=200)

    return router


def create_bufpay_app(
    client: BufPayClient,
    on_payment_success: Optional[PaymentCallback] = None,
) -> FastAPI:
    """Standalone application serving only the notification route."""
    app = FastAPI(title="BufPay notifications")
    app.include_router(create_bufpay_router(client, on_payment_success))
    return app
