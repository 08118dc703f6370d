"""
Storage account operations (Microsoft.Storage/storageAccounts).
"""
from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Optional

import structlog

from armrest.modules.resources.domain.accessor import (
    ResourceAccessor,
    resolve_resource_group,
)
from armrest.modules.resources.domain.aggregation import AggregatingLister
from armrest.modules.resources.domain.resource_groups import (
    GroupEnumerator,
    ResourceGroupService,
)
from armrest.modules.resources.domain.url_builder import ResourceUrlBuilder
from armrest.shared.adapters.transport import RestTransport
from armrest.shared.core.config import get_settings
from armrest.shared.core.credentials import ArmrestConfiguration
from armrest.shared.core.exceptions import (
    InvalidAccountNameError,
    InvalidAccountTypeError,
    InvalidTagsError,
    MissingRequiredFieldError,
)

logger = structlog.get_logger()

STORAGE_PROVIDER = "Microsoft.Storage"
STORAGE_RESOURCE_TYPE = "storageAccounts"

# Valid account types for create/update.
VALID_ACCOUNT_TYPES = (
    "Standard_LRS",
    "Standard_ZRS",
    "Standard_GRS",
    "Standard_RAGRS",
)
DEFAULT_ACCOUNT_TYPE = "Standard_GRS"

MAX_TAGS = 10
MAX_TAG_KEY_LENGTH = 128
MAX_TAG_VALUE_LENGTH = 256

_ACCOUNT_NAME_PATTERN = re.compile(r"^[A-Za-z0-9]{3,24}$")


def validate_account_type(account_type: Any) -> None:
    if account_type not in VALID_ACCOUNT_TYPES:
        raise InvalidAccountTypeError(
            f"invalid account type '{account_type}'",
            details={"valid_account_types": list(VALID_ACCOUNT_TYPES)},
        )


def validate_account_name(name: Any) -> None:
    if not isinstance(name, str) or not _ACCOUNT_NAME_PATTERN.match(name):
        raise InvalidAccountNameError(
            "name must be 3-24 alpha-numeric characters only",
            details={"name": name},
        )


def validate_tags(tags: Optional[Mapping[str, Any]]) -> None:
    if tags is None:
        return
    if not isinstance(tags, Mapping):
        raise InvalidTagsError("tags must be a mapping of strings")
    if len(tags) > MAX_TAGS:
        raise InvalidTagsError(f"at most {MAX_TAGS} tags are allowed")
    for key, value in tags.items():
        if len(str(key)) > MAX_TAG_KEY_LENGTH:
            raise InvalidTagsError(
                f"tag key exceeds {MAX_TAG_KEY_LENGTH} characters", details={"key": key}
            )
        if len(str(value)) > MAX_TAG_VALUE_LENGTH:
            raise InvalidTagsError(
                f"tag value exceeds {MAX_TAG_VALUE_LENGTH} characters",
                details={"key": key},
            )


class StorageAccountService:
    """
    Manage storage accounts of one subscription.

    Example:

        sas = StorageAccountService(configuration, transport)
        await sas.get("portalvhds1234", "Default-Storage-CentralUS")
        await sas.create(
            {"name": "yourstorageaccount1", "location": "West US",
             "account_type": "Standard_ZRS", "tags": {"YourCompany": "true"}},
            "my-group",
        )
    """

    def __init__(
        self,
        configuration: ArmrestConfiguration,
        transport: RestTransport,
        group_enumerator: Optional[GroupEnumerator] = None,
        *,
        provider: Optional[str] = None,
        api_version: Optional[str] = None,
        max_concurrency: Optional[int] = None,
        group_timeout: Optional[float] = None,
    ):
        self.configuration = configuration
        self.provider = provider or STORAGE_PROVIDER
        self.api_version = api_version or get_settings().STORAGE_API_VERSION
        self.accessor = ResourceAccessor(
            ResourceUrlBuilder(
                subscription_id=configuration.subscription_id,
                provider_namespace=self.provider,
                resource_type=STORAGE_RESOURCE_TYPE,
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

    def build_url(self, group: Optional[str], *segments: str) -> str:
        return self.accessor.urls.build(
            resolve_resource_group(group, self.configuration), *segments
        )

    async def get(
        self, account_name: str, group: Optional[str] = None, include_keys: bool = False
    ) -> dict[str, Any]:
        """
        Return the given storage account. With ``include_keys`` the account
        keys are merged into the record's ``properties``.
        """
        group = resolve_resource_group(group, self.configuration)
        record = await self.accessor.fetch(group, account_name)
        if include_keys:
            keys = await self.list_account_keys(account_name, group)
            properties = record.get("properties")
            record["properties"] = {
                **(properties if isinstance(properties, dict) else {}),
                **keys,
            }
        return record

    async def list(self, group: Optional[str] = None) -> list[dict[str, Any]]:
        """
        Storage accounts of ``group``, or of every resource group in the
        subscription when no group is given. Only the latter tags each record
        with ``resourceGroup``.
        """
        return await self.lister.list(group)

    async def list_all_for_subscription(self) -> dict[str, Any]:
        """All storage accounts of the subscription, without key information."""
        return await self.accessor.list_for_subscription()

    list_all = list_all_for_subscription

    async def create(
        self, params: Mapping[str, Any], group: Optional[str] = None
    ) -> dict[str, Any]:
        """
        Create a storage account, or update an existing one (ARM upsert).

        Params:
        - name: required, 3-24 alphanumeric characters.
        - location: required, e.g. "West US".
        - account_type: one of VALID_ACCOUNT_TYPES, default "Standard_GRS".
        - tags: optional mapping, at most 10 entries.
        - validating: optional, e.g. "nameAvailability".
        - resource_group: used when ``group`` is not passed.
        """
        for required in ("name", "location"):
            if not params.get(required):
                raise MissingRequiredFieldError(required)

        name = params["name"]
        account_type = params.get("account_type") or DEFAULT_ACCOUNT_TYPE
        tags = params.get("tags")

        validate_account_type(account_type)
        validate_account_name(name)
        validate_tags(tags)

        group = resolve_resource_group(
            group if group is not None else params.get("resource_group"),
            self.configuration,
        )
        query = {"validating": params["validating"]} if params.get("validating") else None
        body = {
            "name": name,
            "location": params["location"],
            "tags": dict(tags) if tags is not None else None,
            "properties": {"accountType": account_type},
        }
        return await self.accessor.put(group, name, body, query=query)

    update = create

    async def delete(self, account_name: str, group: Optional[str] = None) -> dict[str, Any]:
        group = resolve_resource_group(group, self.configuration)
        return await self.accessor.delete(group, account_name)

    async def list_account_keys(
        self, account_name: str, group: Optional[str] = None
    ) -> dict[str, Any]:
        """Primary and secondary access keys for the given storage account."""
        group = resolve_resource_group(group, self.configuration)
        return await self.accessor.post_action(group, account_name, "listKeys")

    async def regenerate_keys(
        self,
        account_name: str,
        group: Optional[str] = None,
        key_name: Optional[str] = None,
    ) -> dict[str, Any]:
        """Regenerate the access keys of the given storage account."""
        group = resolve_resource_group(group, self.configuration)
        body = {"keyName": key_name} if key_name else None
        result = await self.accessor.post_action(group, account_name, "regenerateKey", body)
        logger.info(
            "storage_account_keys_regenerated",
            resource_group=group,
            name=account_name,
            key_name=key_name,
        )
        return result
