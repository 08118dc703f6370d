"""Async client for Azure Resource Manager storage accounts and snapshots."""

from armrest.modules.resources.domain import (
    AggregatingLister,
    ResourceGroupService,
    SnapshotService,
    StorageAccountService,
)
from armrest.shared.adapters.factory import create_configuration, create_transport
from armrest.shared.adapters.transport import HttpxRestTransport, RestTransport
from armrest.shared.core.credentials import ArmrestConfiguration, AzureCredentials

__version__ = "0.1.0"

__all__ = [
    "AggregatingLister",
    "ArmrestConfiguration",
    "AzureCredentials",
    "HttpxRestTransport",
    "ResourceGroupService",
    "RestTransport",
    "SnapshotService",
    "StorageAccountService",
    "create_configuration",
    "create_transport",
]
