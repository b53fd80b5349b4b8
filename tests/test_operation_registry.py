"""Tests for the operation registry and tool catalog."""

import pytest

from testingbot_mcp.registry.exceptions import (
    ConfigurationError,
    InvalidOperationDescriptor,
    OperationAlreadyRegistered,
    OperationNotFound,
)
from testingbot_mcp.registry.operation_registry import (
    OperationCategory,
    OperationDescriptor,
    OperationRegistry,
    OperationResult,
)
from testingbot_mcp.registry.operations import OPERATION_GROUPS
from testingbot_mcp.registry.schema import ArgumentSchema, ParamKind, ParamSpec

EXPECTED_OPERATIONS = [
    "getBrowsers", "getDevices",
    "getTests", "getTestDetails", "updateTest", "deleteTest", "stopTest",
    "getBuilds", "getTestsForBuild", "deleteBuild",
    "uploadFile", "uploadRemoteFile", "getStorageFiles", "deleteStorageFile",
    "takeScreenshot", "retrieveScreenshots", "getScreenshotList",
    "getUserInfo", "updateUserInfo",
    "startLiveSession", "startDesktopLiveSession", "startMobileLiveSession",
    "getTeam", "getUsersInTeam", "getUserFromTeam",
    "createCdpSession",
    "getTunnelList", "deleteTunnel",
]


async def _noop_handler(client, params):
    return OperationResult(message="ok")


def _descriptor(name, **overrides):
    values = dict(
        name=name,
        category=OperationCategory.BROWSERS,
        description=f"{name} description",
        input_schema=ArgumentSchema(ParamSpec("id", ParamKind.STRING, required=True)),
        handler=_noop_handler,
    )
    values.update(overrides)
    return OperationDescriptor(**values)


class TestRegistryConstruction:
    """Composition of operation groups."""

    def test_groups_merged_in_order(self):
        registry = OperationRegistry([[_descriptor("b"), _descriptor("a")], [_descriptor("c")]])
        assert registry.names() == ["b", "a", "c"]
        assert len(registry) == 3

    def test_duplicate_name_rejected(self):
        with pytest.raises(OperationAlreadyRegistered, match="'a' already registered"):
            OperationRegistry([[_descriptor("a")], [_descriptor("a")]])

    def test_duplicate_is_configuration_error(self):
        assert issubclass(OperationAlreadyRegistered, ConfigurationError)

    @pytest.mark.parametrize("overrides", [
        {"name": ""},
        {"name": "   "},
        {"description": ""},
        {"handler": None},
        {"input_schema": {"type": "object"}},
    ])
    def test_invalid_descriptor_rejected(self, overrides):
        with pytest.raises(InvalidOperationDescriptor):
            OperationRegistry([[_descriptor(**{"name": "a", **overrides})]])

    def test_non_descriptor_rejected(self):
        with pytest.raises(InvalidOperationDescriptor, match="Expected OperationDescriptor"):
            OperationRegistry([[{"name": "a"}]])

    def test_read_only_after_construction(self):
        registry = OperationRegistry([[_descriptor("a")]])
        with pytest.raises(TypeError):
            registry._operations["b"] = _descriptor("b")


class TestRegistryLookup:
    """Retrieval by name and category."""

    @pytest.fixture
    def small_registry(self):
        return OperationRegistry([
            [_descriptor("a"), _descriptor("b", category=OperationCategory.TESTS)],
        ])

    def test_get(self, small_registry):
        assert small_registry.get("a").name == "a"

    @pytest.mark.parametrize("name", ["missing", "", None])
    def test_get_unknown(self, small_registry, name):
        with pytest.raises(OperationNotFound):
            small_registry.get(name)

    def test_exists_and_contains(self, small_registry):
        assert small_registry.exists("a")
        assert "b" in small_registry
        assert not small_registry.exists("z")
        assert None not in small_registry

    def test_list_by_category(self, small_registry):
        assert [op.name for op in small_registry.list(OperationCategory.TESTS)] == ["b"]
        assert [op.name for op in small_registry.list()] == ["a", "b"]


class TestCatalog:
    """Projection of the registry into the tool catalog."""

    def test_full_registry_contents(self, registry):
        assert registry.names() == EXPECTED_OPERATIONS

    def test_every_category_populated(self, registry):
        for category in OperationCategory:
            assert registry.list(category), f"No operations in {category.value}"

    def test_group_order_fixed(self):
        assert len(OPERATION_GROUPS) == len(OperationCategory)

    def test_catalog_entry_shape(self, registry):
        for entry in registry.list_operations():
            assert set(entry) == {"name", "description", "parameters", "required"}
            assert entry["description"]
            for name in entry["required"]:
                assert name in entry["parameters"]

    def test_catalog_idempotent(self, registry):
        assert registry.list_operations() == registry.list_operations()

    def test_required_parameters_have_no_default(self, registry):
        for entry in registry.list_operations():
            for name in entry["required"]:
                assert "default" not in entry["parameters"][name], (entry["name"], name)

    def test_pagination_descriptor(self, registry):
        entry = next(e for e in registry.list_operations() if e["name"] == "getTests")
        assert entry["required"] == []
        assert entry["parameters"]["limit"] == {
            "type": "integer",
            "minimum": 1,
            "maximum": 100,
            "description": "Number of tests to retrieve (default: 10, max: 100)",
            "default": 10,
        }

    def test_get_input_schema(self, registry):
        schema = registry.get_input_schema("getTestDetails")
        assert schema["type"] == "object"
        assert schema["required"] == ["sessionId"]
