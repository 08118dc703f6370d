import pytest

from armrest.modules.resources.domain.url_builder import ResourceUrlBuilder
from armrest.shared.core.exceptions import InvalidArgumentError, MissingResourceGroupError
from tests.utils import ARM_ROOT


def _storage_urls() -> ResourceUrlBuilder:
    return ResourceUrlBuilder(
        subscription_id="sub-1",
        provider_namespace="Microsoft.Storage",
        resource_type="storageAccounts",
        api_version="2015-05-01-preview",
    )


def test_build_account_url_exact():
    assert _storage_urls().build("rg1", "acct1") == (
        f"{ARM_ROOT}/sub-1/resourceGroups/rg1/providers/Microsoft.Storage/"
        "storageAccounts/acct1?api-version=2015-05-01-preview"
    )


def test_build_appends_segments_in_order():
    url = _storage_urls().build("rg1", "acct1", "listKeys")
    assert url.startswith(
        f"{ARM_ROOT}/sub-1/resourceGroups/rg1/providers/Microsoft.Storage/storageAccounts/acct1/listKeys?"
    )


def test_build_group_collection_url():
    assert _storage_urls().build("rg1") == (
        f"{ARM_ROOT}/sub-1/resourceGroups/rg1/providers/Microsoft.Storage/"
        "storageAccounts?api-version=2015-05-01-preview"
    )


def test_build_for_subscription_omits_resource_group():
    assert _storage_urls().build_for_subscription() == (
        f"{ARM_ROOT}/sub-1/providers/Microsoft.Storage/storageAccounts"
        "?api-version=2015-05-01-preview"
    )


def test_api_version_is_always_the_last_query_parameter():
    url = _storage_urls().build(
        "rg1", "acct1", query={"validating": "nameAvailability", "api-version": "bogus"}
    )
    assert url.endswith("?validating=nameAvailability&api-version=2015-05-01-preview")


@pytest.mark.parametrize("group", [None, "", "   "])
def test_build_rejects_missing_group(group):
    with pytest.raises(MissingResourceGroupError) as exc_info:
        _storage_urls().build(group, "acct1")
    assert isinstance(exc_info.value, InvalidArgumentError)


def test_build_rejects_blank_segment():
    with pytest.raises(InvalidArgumentError):
        _storage_urls().build("rg1", "")


def test_build_strips_whitespace_around_group_name():
    assert _storage_urls().build(" rg1 ", "acct1") == _storage_urls().build("rg1", "acct1")


def test_group_names_keep_parentheses_and_encode_spaces():
    url = _storage_urls().build("my group(1)")
    assert "/resourceGroups/my%20group(1)/providers/" in url


def test_custom_root_trailing_slash_is_normalised():
    urls = ResourceUrlBuilder(
        subscription_id="sub-1",
        provider_namespace="Microsoft.Compute",
        resource_type="snapshots",
        api_version="2017-03-30",
        common_root="https://arm.example.test/subscriptions/",
    )
    assert urls.build("rg1", "snap1") == (
        "https://arm.example.test/subscriptions/sub-1/resourceGroups/rg1/providers/"
        "Microsoft.Compute/snapshots/snap1?api-version=2017-03-30"
    )


@pytest.mark.parametrize(
    "field", ["subscription_id", "provider_namespace", "resource_type", "api_version"]
)
def test_construction_requires_every_field(field):
    kwargs = {
        "subscription_id": "sub-1",
        "provider_namespace": "Microsoft.Storage",
        "resource_type": "storageAccounts",
        "api_version": "2015-05-01-preview",
        field: " ",
    }
    with pytest.raises(InvalidArgumentError, match=field):
        ResourceUrlBuilder(**kwargs)
