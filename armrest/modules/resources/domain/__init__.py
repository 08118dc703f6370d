from .accessor import ResourceAccessor, resolve_resource_group
from .aggregation import AggregatingLister, GroupResultAccumulator
from .resource_groups import GroupEnumerator, ResourceGroupService
from .snapshots import SnapshotService
from .storage_accounts import StorageAccountService, VALID_ACCOUNT_TYPES
from .url_builder import ResourceUrlBuilder

__all__ = [
    "ResourceAccessor",
    "resolve_resource_group",
    "AggregatingLister",
    "GroupResultAccumulator",
    "GroupEnumerator",
    "ResourceGroupService",
    "SnapshotService",
    "StorageAccountService",
    "VALID_ACCOUNT_TYPES",
    "ResourceUrlBuilder",
]
