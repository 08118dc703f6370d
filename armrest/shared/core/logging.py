import re
import sys
import structlog
import logging
from typing import Any, cast
from armrest.shared.core.config import get_settings

_SECRET_FIELDS = {
    "password",
    "token",
    "secret",
    "authorization",
    "client_secret",
    "access_token",
    "primarykey",
    "secondarykey",
    "key1",
    "key2",
}
_SECRET_SUFFIXES = ("_token", "_secret", "_password", "key")
_SECRET_CONTAINS = ("authorization", "secret", "token")


def _is_sensitive_key(key: Any) -> bool:
    key_norm = str(key).strip().replace("-", "_").lower()
    if key_norm in _SECRET_FIELDS:
        return True
    if key_norm.endswith(_SECRET_SUFFIXES):
        return True
    return any(fragment in key_norm for fragment in _SECRET_CONTAINS)


def secret_redactor(
    _logger: Any, _method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """
    Recursively mask credentials and storage account keys before rendering.
    Account key payloads (listKeys, regenerateKey) must never reach log sinks.
    """
    bearer = re.compile(r"Bearer\s+[A-Za-z0-9\-._~+/]+=*")

    def redact_recursive(data: Any) -> Any:
        if isinstance(data, dict):
            return {
                k: ("[REDACTED]" if _is_sensitive_key(k) else redact_recursive(v))
                for k, v in data.items()
            }
        elif isinstance(data, list):
            return [redact_recursive(item) for item in data]
        elif isinstance(data, str):
            return bearer.sub("Bearer [REDACTED]", data)
        return data

    redacted = redact_recursive(event_dict)
    if isinstance(redacted, dict):
        return cast(dict[str, Any], redacted)
    return {}


def setup_logging() -> None:
    settings = get_settings()

    base_processors = [
        structlog.contextvars.merge_contextvars,  # Support async context
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        secret_redactor,
    ]

    if settings.DEBUG:
        renderer: Any = structlog.dev.ConsoleRenderer()
        processors = base_processors + [renderer]
        min_level = logging.DEBUG
    else:
        renderer = structlog.processors.JSONRenderer()
        processors = base_processors + [structlog.processors.dict_tracebacks, renderer]
        min_level = logging.INFO

    structlog.configure(
        processors=cast(Any, processors),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    # httpx and azure-identity log through stdlib logging.
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=min_level,
    )
