from collections.abc import Mapping
from typing import Any, Optional

import structlog

from armrest.modules.resources.domain.url_builder import (
    ResourceUrlBuilder,
    require_resource_group,
)
from armrest.shared.adapters.transport import RestTransport, decode_json, extract_value
from armrest.shared.core.credentials import ArmrestConfiguration

logger = structlog.get_logger()


def resolve_resource_group(
    group: Optional[str], configuration: ArmrestConfiguration
) -> str:
    """
    Resolve the effective group at the public call boundary: explicit argument
    first, configured default second. Raises MissingResourceGroupError.
    """
    if group is None:
        group = configuration.resource_group
    return require_resource_group(group)


class ResourceAccessor:
    """
    Single-resource-group REST capability for one provider/resource-type pair.

    Services compose this rather than inheriting from it; every method takes
    an already-resolved group.
    """

    def __init__(self, urls: ResourceUrlBuilder, transport: RestTransport):
        self.urls = urls
        self.transport = transport

    @property
    def subscription_id(self) -> str:
        return self.urls.subscription_id

    async def fetch(self, group: str, *segments: str) -> dict[str, Any]:
        url = self.urls.build(group, *segments)
        return decode_json(await self.transport.rest_get(url))

    async def list_group(self, group: str) -> list[dict[str, Any]]:
        """Raw ``value`` array for one group, untagged."""
        return extract_value(await self.fetch(group))

    async def list_for_subscription(self) -> dict[str, Any]:
        url = self.urls.build_for_subscription()
        return decode_json(await self.transport.rest_get(url))

    async def put(
        self,
        group: str,
        name: str,
        body: Mapping[str, Any],
        query: Optional[Mapping[str, str]] = None,
    ) -> dict[str, Any]:
        url = self.urls.build(group, name, query=query)
        logger.info(
            "arm_resource_put",
            resource_type=self.urls.resource_type,
            resource_group=group,
            name=name,
        )
        return decode_json(await self.transport.rest_put(url, body))

    async def post_action(
        self,
        group: str,
        name: str,
        action: str,
        body: Optional[Mapping[str, Any]] = None,
    ) -> dict[str, Any]:
        url = self.urls.build(group, name, action)
        return decode_json(await self.transport.rest_post(url, body))

    async def delete(self, group: str, name: str) -> dict[str, Any]:
        url = self.urls.build(group, name)
        logger.info(
            "arm_resource_delete",
            resource_type=self.urls.resource_type,
            resource_group=group,
            name=name,
        )
        return decode_json(await self.transport.rest_delete(url))
