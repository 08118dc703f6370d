"""
Global pytest fixtures for the armrest test suite.

Provides:
- Test environment variables (set before any armrest import)
- Immutable client configuration
- A fake REST transport whose verbs are AsyncMocks
"""
import os
from unittest.mock import AsyncMock, MagicMock

import pytest

# Set test environment BEFORE any armrest imports
os.environ["TESTING"] = "true"
os.environ["ENVIRONMENT"] = "local"
os.environ.pop("AZURE_RESOURCE_GROUP", None)

from armrest.shared.core.config import get_settings  # noqa: E402
from armrest.shared.core.credentials import ArmrestConfiguration  # noqa: E402

from tests.utils import arm_response  # noqa: E402


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def configuration() -> ArmrestConfiguration:
    return ArmrestConfiguration(subscription_id="sub-1")


@pytest.fixture
def configuration_with_default_group() -> ArmrestConfiguration:
    return ArmrestConfiguration(subscription_id="sub-1", resource_group="default-rg")


@pytest.fixture
def transport() -> MagicMock:
    fake = MagicMock()
    fake.rest_get = AsyncMock(return_value=arm_response(200, {}))
    fake.rest_put = AsyncMock(return_value=arm_response(200, {}, method="PUT"))
    fake.rest_post = AsyncMock(return_value=arm_response(200, {}, method="POST"))
    fake.rest_delete = AsyncMock(return_value=arm_response(200, content=b"", method="DELETE"))
    return fake
