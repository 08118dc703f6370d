"""
Shared async HTTP client.

Every service talks to Resource Manager through one httpx.AsyncClient so that
concurrent per-group listings reuse a single connection pool.
"""

import inspect
from typing import Optional
import httpx
import structlog

from armrest.shared.core.config import get_settings

logger = structlog.get_logger()

_client: Optional[httpx.AsyncClient] = None


def _build_client(timeout: float, max_connections: int) -> httpx.AsyncClient:
    settings = get_settings()
    user_agent = f"{settings.APP_NAME}-python/{settings.VERSION}"
    return httpx.AsyncClient(
        http2=True,
        timeout=httpx.Timeout(timeout, connect=10.0),
        limits=httpx.Limits(
            max_connections=max_connections,
            max_keepalive_connections=20,
            keepalive_expiry=30.0,
        ),
        headers={"User-Agent": user_agent, "Accept": "application/json"},
    )


def get_http_client(timeout: Optional[float] = None) -> httpx.AsyncClient:
    """
    Returns the shared httpx.AsyncClient, creating it lazily if
    init_http_client() was never called.
    """
    global _client

    if _client is None:
        logger.warning(
            "http_client_lazy_initialized",
            msg="Client was not pre-initialized",
        )
        _client = _build_client(
            timeout or get_settings().HTTP_TIMEOUT_SECONDS, max_connections=100
        )
    return _client


async def init_http_client() -> None:
    global _client
    if _client is not None:
        logger.warning("http_client_already_initialized")
        return

    settings = get_settings()
    _client = _build_client(settings.HTTP_TIMEOUT_SECONDS, max_connections=200)
    logger.info("http_client_initialized", http2=True, max_connections=200)


async def close_http_client() -> None:
    """
    Gracefully shuts down the shared client, flushing its connection pool.
    """
    global _client

    client = _client
    _client = None
    if not client:
        return

    close_result = None
    aclose = getattr(client, "aclose", None)
    if callable(aclose):
        close_result = aclose()
    else:
        close = getattr(client, "close", None)
        if callable(close):
            close_result = close()

    if inspect.isawaitable(close_result):
        await close_result

    logger.info("http_client_closed")
