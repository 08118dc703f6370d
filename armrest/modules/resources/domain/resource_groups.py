from typing import Any, Optional, Protocol
from urllib.parse import quote, urlencode

import structlog

from armrest.shared.adapters.transport import RestTransport, decode_json, extract_value
from armrest.shared.core.config import get_settings
from armrest.shared.core.credentials import ArmrestConfiguration

logger = structlog.get_logger()


class GroupEnumerator(Protocol):
    """
    Source of the resource groups a multi-group listing fans out over.
    Each returned item carries at least a ``name``; order is unspecified.
    """

    async def list_resource_groups(
        self, subscription_id: Optional[str] = None
    ) -> list[dict[str, Any]]: ...


class ResourceGroupService:
    """Lists resource groups of a subscription."""

    def __init__(
        self,
        configuration: ArmrestConfiguration,
        transport: RestTransport,
        *,
        api_version: Optional[str] = None,
    ):
        self.configuration = configuration
        self.transport = transport
        self.api_version = api_version or get_settings().RESOURCE_GROUP_API_VERSION

    def build_url(self, subscription_id: Optional[str] = None) -> str:
        sub_id = subscription_id or self.configuration.subscription_id
        root = self.configuration.base_url.rstrip("/")
        query = urlencode({"api-version": self.api_version})
        return f"{root}/{quote(sub_id, safe='')}/resourcegroups?{query}"

    async def list_resource_groups(
        self, subscription_id: Optional[str] = None
    ) -> list[dict[str, Any]]:
        response = await self.transport.rest_get(self.build_url(subscription_id))
        groups = extract_value(decode_json(response))
        logger.debug(
            "resource_groups_listed",
            subscription_id=subscription_id or self.configuration.subscription_id,
            count=len(groups),
        )
        return groups
