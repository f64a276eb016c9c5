"""Authenticated client for the Bling API v3.

Every call carries the current bearer token.  A call rejected as unauthorized
triggers one refresh-token exchange and is then re-sent exactly once.
Refreshes are single-flight: concurrent callers that hit a 401 with the same
stale token share one exchange instead of racing to rotate the refresh token.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

import httpx

from blingproxy.config import Settings

logger = logging.getLogger(__name__)

MAX_RETRIES = 1
TOKEN_PATH = "/oauth/token"
PRODUCTS_PATH = "/produtos"
STOCK_BALANCES_PATH = "/estoques/saldos"
GTIN_EXACT_MATCH = 2


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class BlingError(Exception):
    """Base class for errors raised by the Bling client."""


class BlingAPIError(BlingError):
    """Bling answered with a non-2xx status."""

    def __init__(self, status_code: int, payload: Any = None, message: str | None = None):
        self.status_code = status_code
        self.payload = payload
        super().__init__(message or f"Bling API returned HTTP {status_code}")


class BlingAuthError(BlingAPIError):
    """Token refresh was rejected, or a call is still unauthorized after refreshing."""


# ---------------------------------------------------------------------------
# Credentials and call outcomes
# ---------------------------------------------------------------------------


@dataclass
class Credentials:
    """OAuth credentials for one Bling app.

    ``client_id``/``client_secret`` are static; ``access_token`` and
    ``refresh_token`` are rewritten by every successful refresh.
    """

    client_id: str
    client_secret: str
    access_token: str = ""
    refresh_token: str = ""

    @classmethod
    def from_settings(cls, settings: Settings) -> "Credentials":
        return cls(
            client_id=settings.bling_client_id,
            client_secret=settings.bling_client_secret,
            access_token=settings.bling_access_token,
            refresh_token=settings.bling_refresh_token,
        )


class Outcome(Enum):
    """Classification of a single upstream call."""

    SUCCESS = "success"
    UNAUTHORIZED = "unauthorized"
    ERROR = "error"


@dataclass
class CallResult:
    """Result of one attempt: the outcome plus the response or the error to raise."""

    outcome: Outcome
    access_token: str
    response: httpx.Response | None = None
    error: Exception | None = None


def _json_or_none(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _is_invalid_token(payload: Any) -> bool:
    """Return True when a Bling error body reports ``invalid_token``."""
    if not isinstance(payload, dict):
        return False
    error = payload.get("error")
    return isinstance(error, dict) and error.get("type") == "invalid_token"


def _data(payload: Any) -> list[dict]:
    """Extract the ``data`` list from a Bling list response."""
    if payload is None:
        return []
    if not isinstance(payload, dict):
        raise BlingError(f"Unexpected Bling response body: {type(payload).__name__}")
    data = payload.get("data") or []
    if not isinstance(data, list):
        raise BlingError(f"Unexpected 'data' in Bling response: {type(data).__name__}")
    return data


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class BlingClient:
    """Bling API client holding its own credentials and HTTP connection pool."""

    def __init__(self, credentials: Credentials, http: httpx.AsyncClient):
        self.credentials = credentials
        self.http = http
        self._refresh_lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "BlingClient":
        """Build a client with a fresh ``httpx.AsyncClient`` bounded by the configured timeout."""
        http = httpx.AsyncClient(base_url=settings.bling_api_url, timeout=settings.bling_timeout)
        return cls(Credentials.from_settings(settings), http)

    async def aclose(self) -> None:
        await self.http.aclose()

    # -- low level ---------------------------------------------------------

    async def _send(self, method: str, path: str, params: dict | None = None) -> CallResult:
        """Send one request with the current bearer token and classify the outcome."""
        token = self.credentials.access_token
        headers = {"Authorization": f"Bearer {token}"}
        try:
            response = await self.http.request(method, path, params=params, headers=headers)
        except httpx.HTTPError as e:
            return CallResult(Outcome.ERROR, token, error=e)

        payload = _json_or_none(response)
        if response.status_code == 401 or _is_invalid_token(payload):
            logger.warning("Bling rejected token on %s %s (HTTP %d)", method, path, response.status_code)
            return CallResult(Outcome.UNAUTHORIZED, token, response=response)
        if response.is_error:
            return CallResult(
                Outcome.ERROR,
                token,
                response=response,
                error=BlingAPIError(response.status_code, payload if payload is not None else response.text),
            )
        return CallResult(Outcome.SUCCESS, token, response=response)

    async def request(self, method: str, path: str, params: dict | None = None) -> Any:
        """Send a request, refreshing the access token and retrying once on 401.

        Returns the decoded JSON body.  Non-auth failures (HTTP errors,
        timeouts, connection errors) are raised unchanged and never retried.

        Raises:
            BlingAuthError: the refresh was rejected, or the retried call was
                unauthorized again.
            BlingAPIError:  any other non-2xx response.
            httpx.HTTPError: transport failures, including timeouts.
        """
        for attempt in range(MAX_RETRIES + 1):
            result = await self._send(method, path, params)
            if result.outcome is Outcome.SUCCESS:
                return _json_or_none(result.response)
            if result.outcome is Outcome.ERROR:
                raise result.error
            if attempt < MAX_RETRIES:
                await self.refresh_tokens(stale_access_token=result.access_token)

        response = result.response
        raise BlingAuthError(
            response.status_code,
            _json_or_none(response),
            message=f"Bling still unauthorized after {MAX_RETRIES} token refresh",
        )

    async def get(self, path: str, params: dict | None = None) -> Any:
        return await self.request("GET", path, params=params)

    # -- token refresh -----------------------------------------------------

    async def refresh_tokens(self, stale_access_token: str | None = None) -> None:
        """Exchange the refresh token for a new token pair.

        When *stale_access_token* is given and the stored access token has
        already moved on (another task refreshed while this one waited for the
        lock), no exchange is made.
        """
        async with self._refresh_lock:
            if stale_access_token is not None and self.credentials.access_token != stale_access_token:
                logger.debug("Token already refreshed by a concurrent request")
                return
            await self._exchange_refresh_token()

    async def _exchange_refresh_token(self) -> None:
        creds = self.credentials
        response = await self.http.post(
            TOKEN_PATH,
            data={"grant_type": "refresh_token", "refresh_token": creds.refresh_token},
            auth=httpx.BasicAuth(creds.client_id, creds.client_secret),
        )
        payload = _json_or_none(response)
        if response.is_error:
            raise BlingAuthError(response.status_code, payload, message="Bling refused the refresh token")
        if not isinstance(payload, dict) or not payload.get("access_token"):
            raise BlingAuthError(response.status_code, payload, message="Bling token response has no access_token")

        creds.access_token = payload["access_token"]
        # Bling rotates the refresh token on every exchange
        creds.refresh_token = payload.get("refresh_token", creds.refresh_token)
        logger.info("Bling token renewed")

    # -- endpoints ---------------------------------------------------------

    async def search_by_gtin(self, gtin: str, limit: int = 1) -> list[dict]:
        """Search products whose GTIN matches *gtin* exactly."""
        payload = await self.get(
            PRODUCTS_PATH,
            params={"gtins[]": gtin, "criterio": GTIN_EXACT_MATCH, "limite": limit},
        )
        return _data(payload)

    async def search_by_code(self, codigo: str, limit: int = 1) -> list[dict]:
        """Search products by seller code (SKU)."""
        payload = await self.get(PRODUCTS_PATH, params={"codigo": codigo, "limite": limit})
        return _data(payload)

    async def get_stock_balances(self, product_id: Any, deposit_id: str | None = None) -> list[dict]:
        """Fetch stock balance records for one product, optionally scoped to a deposit."""
        params: dict[str, Any] = {"idsProdutos[]": product_id}
        if deposit_id is not None:
            params["idDeposito"] = deposit_id
        payload = await self.get(STOCK_BALANCES_PATH, params=params)
        return _data(payload)
