"""Tests for the admin tool catalogue and its executor."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from medusa_mcp.medusa.catalog import ADMIN_TOOLS
from medusa_mcp.medusa.tools import AdminTool, admin_tool_sources
from medusa_mcp.protocol.errors import InvalidParamsError


def spec_named(name: str):
    return next(spec for spec in ADMIN_TOOLS if spec.name == name)


@pytest.fixture
def client() -> MagicMock:
    client = MagicMock()
    client.request = AsyncMock(return_value={"ok": True})
    return client


class TestCatalog:
    def test_fourteen_unique_tools(self) -> None:
        names = [spec.name for spec in ADMIN_TOOLS]
        assert len(names) == 14
        assert len(set(names)) == 14
        assert all(name.startswith("manage_medusa_admin_") for name in names)

    def test_every_action_path_is_admin_scoped(self) -> None:
        for spec in ADMIN_TOOLS:
            for action in spec.actions.values():
                assert action.path.startswith("/admin/"), (spec.name, action.path)

    def test_crud_subset(self) -> None:
        actions = spec_named("manage_medusa_admin_draft_orders").actions
        assert {"list", "get", "create", "delete"} <= set(actions)
        assert "update" not in actions

    def test_path_params(self) -> None:
        action = spec_named("manage_medusa_admin_customers").actions["get_address"]
        assert action.path_params == ["id", "address_id"]


class TestAdminTool:
    async def test_get_sends_leftover_arguments_as_query(self, client: MagicMock) -> None:
        tool = AdminTool(spec_named("manage_medusa_admin_orders"), client)
        result = await tool({"action": "list", "limit": 5, "status": "pending"})
        assert result == {"ok": True}
        client.request.assert_awaited_once_with(
            "GET",
            "/admin/orders",
            params={"limit": 5, "status": "pending"},
            tool_name="manage_medusa_admin_orders",
        )

    async def test_path_arguments_are_substituted(self, client: MagicMock) -> None:
        tool = AdminTool(spec_named("manage_medusa_admin_orders"), client)
        await tool({"action": "cancel_fulfillment", "id": "order_1", "fulfillment_id": "ful_2"})
        client.request.assert_awaited_once_with(
            "POST",
            "/admin/orders/order_1/fulfillments/ful_2/cancel",
            body={},
            tool_name="manage_medusa_admin_orders",
        )

    async def test_post_sends_leftovers_as_body(self, client: MagicMock) -> None:
        tool = AdminTool(spec_named("manage_medusa_admin_orders"), client)
        await tool({"action": "transfer", "id": "order_1", "customer_id": "cus_9"})
        client.request.assert_awaited_once_with(
            "POST",
            "/admin/orders/order_1/transfer",
            body={"customer_id": "cus_9"},
            tool_name="manage_medusa_admin_orders",
        )

    async def test_body_param_is_unwrapped(self, client: MagicMock) -> None:
        tool = AdminTool(spec_named("manage_medusa_admin_customers"), client)
        await tool(
            {"action": "create_address", "id": "cus_1", "address_data": {"city": "Lisbon"}}
        )
        client.request.assert_awaited_once_with(
            "POST",
            "/admin/customers/cus_1/addresses",
            body={"city": "Lisbon"},
            tool_name="manage_medusa_admin_customers",
        )

    async def test_delete_sends_leftovers_as_query(self, client: MagicMock) -> None:
        tool = AdminTool(spec_named("manage_medusa_admin_products"), client)
        await tool({"action": "delete_variant", "id": "prod_1", "variant_id": "var_1"})
        client.request.assert_awaited_once_with(
            "DELETE",
            "/admin/products/prod_1/variants/var_1",
            params={},
            tool_name="manage_medusa_admin_products",
        )

    async def test_remove_products_sends_json_body(self, client: MagicMock) -> None:
        for name, path in (
            ("manage_medusa_admin_collections", "/admin/collections/c1/products"),
            ("manage_medusa_admin_sales_channels", "/admin/sales-channels/c1/products"),
        ):
            client.request.reset_mock()
            tool = AdminTool(spec_named(name), client)
            await tool({"action": "remove_products", "id": "c1", "product_ids": ["p1", "p2"]})
            client.request.assert_awaited_once_with(
                "DELETE", path, body={"product_ids": ["p1", "p2"]}, tool_name=name
            )

    async def test_customer_group_membership_wraps_id(self, client: MagicMock) -> None:
        tool = AdminTool(spec_named("manage_medusa_admin_customers"), client)
        for action, method in (("add_to_group", "POST"), ("remove_from_group", "DELETE")):
            client.request.reset_mock()
            await tool({"action": action, "id": "cus_1", "group_id": "grp_1"})
            client.request.assert_awaited_once_with(
                method,
                "/admin/customer-groups/grp_1/customers",
                body={"customer_ids": ["cus_1"]},
                tool_name="manage_medusa_admin_customers",
            )

    async def test_customer_group_membership_requires_customer(self, client: MagicMock) -> None:
        tool = AdminTool(spec_named("manage_medusa_admin_customers"), client)
        with pytest.raises(InvalidParamsError, match="remove_from_group: id"):
            await tool({"action": "remove_from_group", "group_id": "grp_1"})
        client.request.assert_not_awaited()

    async def test_unknown_action(self, client: MagicMock) -> None:
        tool = AdminTool(spec_named("manage_medusa_admin_orders"), client)
        with pytest.raises(InvalidParamsError, match="Unknown action: explode"):
            await tool({"action": "explode"})
        client.request.assert_not_awaited()

    async def test_missing_path_argument(self, client: MagicMock) -> None:
        tool = AdminTool(spec_named("manage_medusa_admin_orders"), client)
        with pytest.raises(InvalidParamsError, match="Missing required parameter for get: id"):
            await tool({"action": "get"})
        client.request.assert_not_awaited()

    async def test_missing_required_extra(self, client: MagicMock) -> None:
        tool = AdminTool(spec_named("manage_medusa_admin_orders"), client)
        with pytest.raises(InvalidParamsError, match="customer_id"):
            await tool({"action": "transfer", "id": "order_1"})


class TestDescriptor:
    def test_schema_requires_action(self, client: MagicMock) -> None:
        descriptor = AdminTool(spec_named("manage_medusa_admin_orders"), client).descriptor()
        schema = descriptor.parameter_schema
        assert schema.required == ["action"]
        assert schema.properties["action"]["enum"][:2] == ["list", "get"]
        assert "limit" in schema.properties
        assert "fulfillment_id" in schema.properties

    def test_sources_cover_catalog(self, client: MagicMock) -> None:
        sources = admin_tool_sources(client)
        assert [name for name, _ in sources] == [spec.name for spec in ADMIN_TOOLS]
        descriptor = sources[0][1]()
        assert descriptor.name == sources[0][0]
        assert isinstance(descriptor.invoke, AdminTool)
