from typing import Optional

import httpx
import structlog
from azure.identity.aio import ClientSecretCredential
from pydantic import ValidationError

from armrest.shared.adapters.transport import HttpxRestTransport
from armrest.shared.core.config import Settings, get_settings
from armrest.shared.core.credentials import ArmrestConfiguration, AzureCredentials
from armrest.shared.core.exceptions import ConfigurationError

logger = structlog.get_logger()


def build_credential(credentials: AzureCredentials) -> ClientSecretCredential:
    if not credentials.client_secret:
        raise ConfigurationError(
            "Azure client_secret is required for client secret auth"
        )
    return ClientSecretCredential(
        tenant_id=credentials.tenant_id,
        client_id=credentials.client_id,
        client_secret=credentials.client_secret.get_secret_value(),
    )


def credentials_from_settings(settings: Settings) -> AzureCredentials:
    missing = [
        name
        for name in ("AZURE_TENANT_ID", "AZURE_CLIENT_ID", "AZURE_SUBSCRIPTION_ID")
        if not getattr(settings, name)
    ]
    if missing:
        raise ConfigurationError(
            f"Missing Azure credential settings: {', '.join(missing)}",
            details={"missing": missing},
        )
    return AzureCredentials(
        tenant_id=settings.AZURE_TENANT_ID,
        client_id=settings.AZURE_CLIENT_ID,
        subscription_id=settings.AZURE_SUBSCRIPTION_ID,
        client_secret=settings.AZURE_CLIENT_SECRET,
    )


def create_configuration(settings: Optional[Settings] = None) -> ArmrestConfiguration:
    settings = settings or get_settings()
    try:
        return ArmrestConfiguration.from_settings(settings)
    except ValidationError as exc:
        raise ConfigurationError(
            "AZURE_SUBSCRIPTION_ID must be set to a non-empty value"
        ) from exc


def create_transport(
    settings: Optional[Settings] = None,
    *,
    client: Optional[httpx.AsyncClient] = None,
) -> HttpxRestTransport:
    """Build the authenticated ARM transport described by ``settings``."""
    settings = settings or get_settings()
    credential = build_credential(credentials_from_settings(settings))
    logger.info(
        "arm_transport_created",
        tenant_id=settings.AZURE_TENANT_ID,
        scope=settings.ARM_TOKEN_SCOPE,
    )
    return HttpxRestTransport(credential, client=client, scope=settings.ARM_TOKEN_SCOPE)
