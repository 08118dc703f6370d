import pytest

from armrest.modules.resources.domain.resource_groups import ResourceGroupService
from armrest.shared.core.credentials import ArmrestConfiguration
from armrest.shared.core.exceptions import DecodeError
from tests.utils import ARM_ROOT, arm_response


@pytest.mark.asyncio
async def test_list_resource_groups_returns_value_array(configuration, transport):
    transport.rest_get.return_value = arm_response(
        200, {"value": [{"name": "rg1", "location": "westus"}, {"name": "rg2"}]}
    )

    groups = await ResourceGroupService(configuration, transport).list_resource_groups()

    assert [g["name"] for g in groups] == ["rg1", "rg2"]
    assert transport.rest_get.await_args.args[0] == (
        f"{ARM_ROOT}/sub-1/resourcegroups?api-version=2015-01-01"
    )


@pytest.mark.asyncio
async def test_list_resource_groups_for_explicit_subscription(configuration, transport):
    service = ResourceGroupService(configuration, transport, api_version="2021-04-01")
    await service.list_resource_groups("sub-2")
    assert transport.rest_get.await_args.args[0] == (
        f"{ARM_ROOT}/sub-2/resourcegroups?api-version=2021-04-01"
    )


@pytest.mark.asyncio
async def test_empty_subscription_has_no_groups(transport):
    configuration = ArmrestConfiguration(subscription_id="sub-1")
    transport.rest_get.return_value = arm_response(200, {"value": []})
    assert await ResourceGroupService(configuration, transport).list_resource_groups() == []


@pytest.mark.asyncio
async def test_malformed_value_is_a_decode_error(configuration, transport):
    transport.rest_get.return_value = arm_response(200, {"value": {"name": "rg1"}})
    with pytest.raises(DecodeError):
        await ResourceGroupService(configuration, transport).list_resource_groups()
