"""
Typed credential and configuration models.
Decouples the services from environment parsing and keeps the per-client
configuration immutable once constructed.
"""
from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator
from typing import Optional

from armrest.shared.core.config import ARM_COMMON_URI, Settings


class AzureCredentials(BaseModel):
    """Azure Service Principal Credentials."""
    tenant_id: str
    client_id: str
    subscription_id: str
    client_secret: Optional[SecretStr] = None


class ArmrestConfiguration(BaseModel):
    """
    Immutable per-client configuration shared read-only by every request,
    including the concurrent workers of a multi-group listing.
    """
    model_config = ConfigDict(frozen=True)

    subscription_id: str = Field(..., min_length=1)
    # Default group used only when a caller omits one.
    resource_group: Optional[str] = None
    base_url: str = ARM_COMMON_URI

    @field_validator("subscription_id")
    @classmethod
    def _strip_subscription(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("subscription_id must not be blank")
        return value

    @field_validator("resource_group")
    @classmethod
    def _blank_group_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        return value.strip()

    @classmethod
    def from_settings(cls, settings: Settings) -> "ArmrestConfiguration":
        return cls(
            subscription_id=settings.AZURE_SUBSCRIPTION_ID or "",
            resource_group=settings.AZURE_RESOURCE_GROUP,
            base_url=settings.ARM_BASE_URL,
        )
