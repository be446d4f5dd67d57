"""
HTTP Transport Adapter

Turns a relative path into a request against the configured base address
and normalizes the answer:
1. JSON bodies are decoded, anything else comes back as text
2. Non-success statuses raise RequestFailedError with the best message available
3. Connection-level failures raise NetworkError

CRITICAL: Working out an error message must never hide the status code.
If the failed body can't be read, the generic message is used instead.
"""

from typing import Any, Optional
from urllib.parse import quote

import httpx
import structlog

from wallet.services.api.interface import NetworkError, RequestFailedError


logger = structlog.get_logger("wallet.transport")


def build_url(base_url: str, path: str) -> str:
    """Join a base address and a path with exactly one slash between them."""
    base = base_url.rstrip("/")
    p = path if path.startswith("/") else f"/{path}"
    return f"{base}{p}"


def encode_segment(value: Any) -> str:
    """Percent-encode a single path segment (slashes included)."""
    return quote(str(value), safe="")


def _is_json(response: httpx.Response) -> bool:
    return "application/json" in response.headers.get("content-type", "").lower()


def _failure_message(response: httpx.Response) -> str:
    """Best-effort message for a failed response."""
    message = f"Request failed with status {response.status_code}"
    try:
        if _is_json(response):
            body = response.json()
            if isinstance(body, dict):
                candidate = body.get("message")
            else:
                candidate = body
        else:
            candidate = response.text
    except ValueError:
        return message

    if candidate is None or isinstance(candidate, (dict, list)):
        # No usable message field; show the body as the server sent it
        candidate = response.text
    candidate = str(candidate).strip()
    return candidate or message


class Transport:
    """
    Thin async HTTP adapter bound to one base address.

    The httpx client can be injected (tests pass one built on
    httpx.MockTransport); otherwise the transport owns and closes its own.
    """

    def __init__(
        self,
        base_url: str,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ):
        self._base_url = base_url
        self._owns_client = client is None
        if client is None:
            client = httpx.AsyncClient(timeout=timeout) if timeout else httpx.AsyncClient()
        self._client = client

    @property
    def base_url(self) -> str:
        return self._base_url

    def build_url(self, path: str) -> str:
        url = build_url(self._base_url, path)
        logger.debug("request_url", url=url)
        return url

    @staticmethod
    def decode_response(response: httpx.Response) -> Any:
        """
        Decode a response body or raise for a failure status.

        Returns:
            Parsed JSON for JSON responses (None for an empty body),
            raw text otherwise

        Raises:
            RequestFailedError: If the status is not 2xx
        """
        if not response.is_success:
            raise RequestFailedError(response.status_code, _failure_message(response))

        if _is_json(response):
            if not response.content:
                return None
            return response.json()
        return response.text

    async def request(
        self,
        method: str,
        path: str,
        json: Optional[Any] = None,
    ) -> Any:
        """
        Send a request and decode the answer.

        Raises:
            RequestFailedError: If the service answers with a failure status
            NetworkError: If no HTTP answer was received
        """
        url = self.build_url(path)
        kwargs: dict[str, Any] = {}
        if json is not None:
            kwargs["json"] = json

        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.TransportError as e:
            logger.warning("request_transport_error", method=method, url=url, error=str(e))
            raise NetworkError(str(e) or f"{type(e).__name__} while requesting {url}") from e

        logger.debug("response_received", method=method, url=url, status=response.status_code)
        return self.decode_response(response)

    async def aclose(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "Transport":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
