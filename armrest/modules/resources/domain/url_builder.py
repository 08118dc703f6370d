"""
Versioned Resource Manager URLs.

    <root>/<sub>/resourceGroups/<group>/providers/<namespace>/<type>[/<segment>...]?api-version=<v>
    <root>/<sub>/providers/<namespace>/<type>[/<segment>...]?api-version=<v>
"""
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import quote, urlencode

from armrest.shared.core.config import ARM_COMMON_URI
from armrest.shared.core.exceptions import InvalidArgumentError, MissingResourceGroupError

# ARM resource group names may contain parentheses and periods.
_SAFE_SEGMENT_CHARS = "()"


def require_resource_group(resource_group: Any) -> str:
    """
    Return the group name with surrounding whitespace stripped.

    ARM group names cannot begin or end with whitespace, so " rg1 " addresses
    rg1. None, non-strings and blank names raise MissingResourceGroupError.
    """
    if not isinstance(resource_group, str) or not resource_group.strip():
        raise MissingResourceGroupError()
    return resource_group.strip()


def _segment(value: Any, label: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgumentError(f"{label} must be a non-empty string")
    return quote(value.strip(), safe=_SAFE_SEGMENT_CHARS)


@dataclass(frozen=True)
class ResourceUrlBuilder:
    """Pure URL construction for one provider/resource-type pair."""

    subscription_id: str
    provider_namespace: str
    resource_type: str
    api_version: str
    common_root: str = ARM_COMMON_URI

    def __post_init__(self) -> None:
        for label in ("subscription_id", "provider_namespace", "resource_type", "api_version"):
            value = getattr(self, label)
            if not isinstance(value, str) or not value.strip():
                raise InvalidArgumentError(f"{label} must be a non-empty string")

    def build(
        self,
        resource_group: Optional[str],
        *segments: str,
        query: Optional[Mapping[str, str]] = None,
    ) -> str:
        group = require_resource_group(resource_group)
        parts = [
            _segment(self.subscription_id, "subscription_id"),
            "resourceGroups",
            _segment(group, "resource_group"),
            "providers",
            _segment(self.provider_namespace, "provider_namespace"),
            _segment(self.resource_type, "resource_type"),
        ]
        parts.extend(_segment(s, "path segment") for s in segments)
        return self._finish(parts, query)

    def build_for_subscription(
        self, *segments: str, query: Optional[Mapping[str, str]] = None
    ) -> str:
        parts = [
            _segment(self.subscription_id, "subscription_id"),
            "providers",
            _segment(self.provider_namespace, "provider_namespace"),
            _segment(self.resource_type, "resource_type"),
        ]
        parts.extend(_segment(s, "path segment") for s in segments)
        return self._finish(parts, query)

    def _finish(self, parts: list[str], query: Optional[Mapping[str, str]]) -> str:
        params: dict[str, str] = {
            k: v for k, v in (query or {}).items() if k != "api-version"
        }
        # api-version always goes last.
        params["api-version"] = self.api_version
        return f"{self.common_root.rstrip('/')}/{'/'.join(parts)}?{urlencode(params)}"
