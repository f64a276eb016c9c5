"""Canned Bling API responses shared by the test modules.

Usage:
    from tests.upstream import BLING_API, products, unauthorized  # sourcery skip: dont-import-test-modules
"""

import httpx

BLING_API = "https://bling.test/Api/v3"
DEPOSIT_ID = "14887164856"

WIDGET = {
    "id": 42,
    "nome": "Widget",
    "codigo": "W-1",
    "gtin": "07891234567890",
    "imagemURL": "https://x/miniatura/42.png",
}


def products(*items: dict) -> httpx.Response:
    """Bling list response carrying *items* under ``data``."""
    return httpx.Response(200, json={"data": list(items)})


def balances(*records: dict) -> httpx.Response:
    return httpx.Response(200, json={"data": list(records)})


def token_pair(access: str, refresh: str) -> httpx.Response:
    return httpx.Response(
        200,
        json={"access_token": access, "refresh_token": refresh, "expires_in": 21600, "token_type": "Bearer"},
    )


def unauthorized() -> httpx.Response:
    return httpx.Response(
        401,
        json={"error": {"type": "invalid_token", "message": "invalid_token", "description": "Invalid token"}},
    )
