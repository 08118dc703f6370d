from collections.abc import Mapping
from typing import Any, Optional, Protocol

import httpx
import structlog
from azure.core.credentials_async import AsyncTokenCredential
from azure.core.exceptions import ClientAuthenticationError

from armrest.shared.core.config import ARM_DEFAULT_SCOPE
from armrest.shared.core.exceptions import DecodeError, TransportError
from armrest.shared.core.http import get_http_client

logger = structlog.get_logger()


class RestTransport(Protocol):
    """The four REST verbs the resource services need from the wire."""

    async def rest_get(self, url: str) -> httpx.Response: ...

    async def rest_put(self, url: str, body: Mapping[str, Any]) -> httpx.Response: ...

    async def rest_post(
        self, url: str, body: Optional[Mapping[str, Any]] = None
    ) -> httpx.Response: ...

    async def rest_delete(self, url: str) -> httpx.Response: ...


def _arm_error_details(response: httpx.Response) -> dict[str, Any]:
    """Extract ARM's ``{"error": {"code", "message"}}`` envelope when present."""
    try:
        payload = response.json()
    except ValueError:
        return {}
    error = payload.get("error") if isinstance(payload, dict) else None
    if not isinstance(error, dict):
        return {}
    return {
        "arm_error_code": error.get("code"),
        "arm_error_message": error.get("message"),
    }


class HttpxRestTransport:
    """
    Bearer-authenticated ARM transport over httpx.

    Non-2xx responses, connection failures and token acquisition failures
    surface as TransportError; nothing is retried.
    """

    def __init__(
        self,
        credential: Optional[AsyncTokenCredential] = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
        scope: str = ARM_DEFAULT_SCOPE,
    ):
        self._credential = credential
        self._client = client
        self._scope = scope

    async def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._credential is not None:
            access_token = await self._credential.get_token(self._scope)
            headers["Authorization"] = f"Bearer {access_token.token}"
        return headers

    async def _send(
        self, method: str, url: str, body: Optional[Mapping[str, Any]] = None
    ) -> httpx.Response:
        client = self._client or get_http_client()
        try:
            headers = await self._headers()
            response = await client.request(
                method,
                url,
                headers=headers,
                json=dict(body) if body is not None else None,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            details = {"method": method, "url": url, **_arm_error_details(exc.response)}
            logger.warning(
                "arm_request_failed_status",
                method=method,
                url=url,
                status_code=status_code,
                arm_error_code=details.get("arm_error_code"),
            )
            raise TransportError(
                f"ARM {method} request failed with status {status_code}",
                status_code=status_code,
                details=details,
            ) from exc
        except (httpx.TimeoutException, httpx.TransportError) as exc:
            logger.warning(
                "arm_request_failed_transport", method=method, url=url, error=str(exc)
            )
            raise TransportError(
                f"ARM {method} request failed: {exc}",
                details={"method": method, "url": url},
            ) from exc
        except ClientAuthenticationError as exc:
            logger.warning(
                "arm_token_acquisition_failed", method=method, url=url, error=str(exc)
            )
            raise TransportError(
                f"ARM {method} request could not be authenticated: {exc}",
                details={"method": method, "url": url},
            ) from exc

        logger.debug(
            "arm_request_completed",
            method=method,
            url=url,
            status_code=response.status_code,
        )
        return response

    async def rest_get(self, url: str) -> httpx.Response:
        return await self._send("GET", url)

    async def rest_put(self, url: str, body: Mapping[str, Any]) -> httpx.Response:
        return await self._send("PUT", url, body)

    async def rest_post(
        self, url: str, body: Optional[Mapping[str, Any]] = None
    ) -> httpx.Response:
        return await self._send("POST", url, body)

    async def rest_delete(self, url: str) -> httpx.Response:
        return await self._send("DELETE", url)


def decode_json(response: httpx.Response) -> dict[str, Any]:
    """
    Decode an ARM response body into a mapping.

    Accepted/No Content responses (empty bodies, e.g. from DELETE or an async
    PUT) decode to an empty dict.
    """
    if not response.content or not response.content.strip():
        return {}
    try:
        payload = response.json()
    except ValueError as exc:
        raise DecodeError(
            "ARM returned invalid JSON payload",
            details={"status_code": response.status_code},
        ) from exc
    if not isinstance(payload, dict):
        raise DecodeError(
            "ARM returned invalid payload shape",
            details={"payload_type": type(payload).__name__},
        )
    return payload


def extract_value(payload: Mapping[str, Any]) -> list[dict[str, Any]]:
    """Return the single ``value`` array of a list response (no paging)."""
    value = payload.get("value")
    if value is None:
        return []
    if not isinstance(value, list):
        raise DecodeError(
            "ARM list response 'value' is not an array",
            details={"value_type": type(value).__name__},
        )
    return value
