from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from armrest.modules.resources.domain.accessor import (
    ResourceAccessor,
    resolve_resource_group,
)
from armrest.modules.resources.domain.aggregation import AggregatingLister
from armrest.modules.resources.domain.resource_groups import (
    GroupEnumerator,
    ResourceGroupService,
)
from armrest.modules.resources.domain.storage_accounts import validate_tags
from armrest.modules.resources.domain.url_builder import ResourceUrlBuilder
from armrest.shared.adapters.transport import RestTransport
from armrest.shared.core.config import get_settings
from armrest.shared.core.credentials import ArmrestConfiguration
from armrest.shared.core.exceptions import MissingRequiredFieldError

SNAPSHOT_PROVIDER = "Microsoft.Compute"
SNAPSHOT_RESOURCE_TYPE = "snapshots"


class SnapshotService:
    """Manage managed-disk snapshots (Microsoft.Compute/snapshots)."""

    def __init__(
        self,
        configuration: ArmrestConfiguration,
        transport: RestTransport,
        group_enumerator: Optional[GroupEnumerator] = None,
        *,
        api_version: Optional[str] = None,
        max_concurrency: Optional[int] = None,
        group_timeout: Optional[float] = None,
    ):
        self.configuration = configuration
        self.api_version = api_version or get_settings().SNAPSHOT_API_VERSION
        self.accessor = ResourceAccessor(
            ResourceUrlBuilder(
                subscription_id=configuration.subscription_id,
                provider_namespace=SNAPSHOT_PROVIDER,
                resource_type=SNAPSHOT_RESOURCE_TYPE,
                api_version=self.api_version,
                common_root=configuration.base_url,
            ),
            transport,
        )
        self.lister = AggregatingLister(
            self.accessor,
            group_enumerator or ResourceGroupService(configuration, transport),
            max_concurrency=max_concurrency,
            group_timeout=group_timeout,
        )

    async def get(self, name: str, group: Optional[str] = None) -> dict[str, Any]:
        group = resolve_resource_group(group, self.configuration)
        return await self.accessor.fetch(group, name)

    async def list(self, group: Optional[str] = None) -> list[dict[str, Any]]:
        return await self.lister.list(group)

    async def list_all_for_subscription(self) -> dict[str, Any]:
        return await self.accessor.list_for_subscription()

    list_all = list_all_for_subscription

    async def create(
        self, params: Mapping[str, Any], group: Optional[str] = None
    ) -> dict[str, Any]:
        """
        PUT a snapshot. ``name`` and ``location`` are required; ``properties``
        (e.g. ``creationData``) and ``tags`` are passed through.
        """
        for required in ("name", "location"):
            if not params.get(required):
                raise MissingRequiredFieldError(required)
        tags = params.get("tags")
        validate_tags(tags)

        group = resolve_resource_group(
            group if group is not None else params.get("resource_group"),
            self.configuration,
        )
        body = {
            "name": params["name"],
            "location": params["location"],
            "tags": dict(tags) if tags is not None else None,
            "properties": dict(params.get("properties") or {}),
        }
        return await self.accessor.put(group, params["name"], body)

    update = create

    async def delete(self, name: str, group: Optional[str] = None) -> dict[str, Any]:
        group = resolve_resource_group(group, self.configuration)
        return await self.accessor.delete(group, name)
