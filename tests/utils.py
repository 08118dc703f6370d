from typing import Any

import httpx

ARM_ROOT = "https://management.azure.com/subscriptions"


def arm_response(
    status_code: int = 200,
    json: Any = None,
    *,
    method: str = "GET",
    url: str = "https://management.azure.com/",
    content: bytes | None = None,
) -> httpx.Response:
    request = httpx.Request(method, url)
    if content is not None:
        return httpx.Response(status_code=status_code, request=request, content=content)
    return httpx.Response(status_code=status_code, request=request, json=json)
