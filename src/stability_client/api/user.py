"""Account endpoints (``GET /v1/user/account`` and ``GET /v1/user/balance``)."""

from __future__ import annotations

import httpx

from stability_client.core.client import ACCEPT, APPLICATION_JSON, GET, Client, ClientBuilder
from stability_client.core.config import StabilitySettings

from .models import Balance, User, decode_json

ACCOUNT_PATH = "/user/account"
BALANCE_PATH = "/user/balance"


def _get(path: str, settings: StabilitySettings | None, transport: httpx.BaseTransport | None) -> Client:
    return (
        ClientBuilder(settings=settings, transport=transport)
        .method(GET)
        .path(path)
        .header(ACCEPT, APPLICATION_JSON)
        .build()
    )


def get_user_account(
    settings: StabilitySettings | None = None,
    transport: httpx.BaseTransport | None = None,
) -> User:
    """Get the account associated with the API key."""
    return decode_json(User, _get(ACCOUNT_PATH, settings, transport).send())


def get_user_balance(
    settings: StabilitySettings | None = None,
    transport: httpx.BaseTransport | None = None,
) -> Balance:
    """Get the credit balance of the account/organization associated with the API key."""
    return decode_json(Balance, _get(BALANCE_PATH, settings, transport).send())
