"""Declarative catalogue of Medusa admin API tools.

Each tool groups the actions of one admin resource family. An action is a
single REST call: verb, path template with ``{placeholder}`` segments
filled from arguments, and any extra arguments the backend rejects the
call without.
"""

from __future__ import annotations

import string
from typing import Any, Literal

from pydantic import BaseModel, Field

HttpMethod = Literal["GET", "POST", "DELETE"]


class AdminAction(BaseModel):
    """One admin REST call."""

    method: HttpMethod
    path: str
    required: list[str] = Field(default_factory=list)
    body_param: str | None = None
    """When set, the JSON body is this argument's value instead of the leftovers."""
    body: bool | None = None
    """Send arguments as a JSON body rather than a query string; POST only when unset."""
    id_list_key: str | None = None
    """When set, the JSON body is ``{id_list_key: [id]}``."""

    @property
    def sends_body(self) -> bool:
        if self.body is not None:
            return self.body
        return self.method == "POST"

    @property
    def path_params(self) -> list[str]:
        return [field for _, field, _, _ in string.Formatter().parse(self.path) if field]


class AdminToolSpec(BaseModel):
    """A ``manage_medusa_admin_<resource>`` tool."""

    name: str
    description: str
    actions: dict[str, AdminAction]
    properties: dict[str, dict[str, Any]] = Field(default_factory=dict)


def _get(path: str, **kw: Any) -> AdminAction:
    return AdminAction(method="GET", path=path, **kw)


def _post(path: str, **kw: Any) -> AdminAction:
    return AdminAction(method="POST", path=path, **kw)


def _delete(path: str, **kw: Any) -> AdminAction:
    return AdminAction(method="DELETE", path=path, **kw)


def _crud(
    path: str,
    *,
    plural: str = "",
    singular: str = "",
    id_param: str = "id",
    body_param: str | None = None,
    only: tuple[str, ...] = ("list", "get", "create", "update", "delete"),
) -> dict[str, AdminAction]:
    """Build the usual list/get/create/update/delete action set for *path*."""
    item = f"{path}/{{{id_param}}}"
    actions = {
        f"list{plural}": _get(path),
        f"get{singular}": _get(item),
        f"create{singular}": _post(path, body_param=body_param),
        f"update{singular}": _post(item, body_param=body_param),
        f"delete{singular}": _delete(item),
    }
    return {name: action for name, action in actions.items() if name.split("_")[0] in only}


def _string(description: str) -> dict[str, Any]:
    return {"type": "string", "description": description}


def _array(description: str) -> dict[str, Any]:
    return {"type": "array", "items": {"type": "string"}, "description": description}


def _object(description: str) -> dict[str, Any]:
    return {"type": "object", "description": description}


ADMIN_TOOLS: list[AdminToolSpec] = [
    AdminToolSpec(
        name="manage_medusa_admin_collections",
        description=(
            "Comprehensive Medusa Admin collections management tool supporting collection "
            "operations (list, get, create, update, delete) and product association management."
        ),
        actions={
            **_crud("/admin/collections"),
            "add_products": _post("/admin/collections/{id}/products", required=["product_ids"]),
            "remove_products": _delete(
                "/admin/collections/{id}/products", required=["product_ids"], body=True
            ),
            "list_products": _get("/admin/collections/{id}/products"),
        },
        properties={
            "id": _string("Collection ID."),
            "title": _string("Collection title."),
            "handle": _string("Collection handle."),
            "product_ids": _array("Product IDs to add or remove."),
        },
    ),
    AdminToolSpec(
        name="manage_medusa_admin_customers",
        description=(
            "Comprehensive Medusa Admin customers management tool supporting customer "
            "operations (list, get, create, update, delete), address management, and customer "
            "group operations."
        ),
        actions={
            **_crud("/admin/customers"),
            "list_addresses": _get("/admin/customers/{id}/addresses"),
            "get_address": _get("/admin/customers/{id}/addresses/{address_id}"),
            "create_address": _post("/admin/customers/{id}/addresses", body_param="address_data"),
            "update_address": _post(
                "/admin/customers/{id}/addresses/{address_id}", body_param="address_data"
            ),
            "delete_address": _delete("/admin/customers/{id}/addresses/{address_id}"),
            **_crud("/admin/customer-groups", plural="_groups", singular="_group", id_param="group_id"),
            "add_to_group": _post(
                "/admin/customer-groups/{group_id}/customers",
                required=["id"],
                id_list_key="customer_ids",
            ),
            "remove_from_group": _delete(
                "/admin/customer-groups/{group_id}/customers",
                required=["id"],
                id_list_key="customer_ids",
                body=True,
            ),
        },
        properties={
            "id": _string("Customer ID (also the customer added to or removed from a group)."),
            "email": _string("Customer email."),
            "first_name": _string("Customer first name."),
            "last_name": _string("Customer last name."),
            "address_id": _string("Address ID."),
            "address_data": _object("Address payload for create_address and update_address."),
            "group_id": _string("Customer group ID."),
        },
    ),
    AdminToolSpec(
        name="manage_medusa_admin_draft_orders",
        description=(
            "Comprehensive Medusa Admin draft order management tool supporting cart-like "
            "functionality (create, list, get, delete, convert to order, and line item management)."
        ),
        actions={
            **_crud("/admin/draft-orders", only=("list", "get", "create", "delete")),
            "convert_to_order": _post("/admin/draft-orders/{id}/complete"),
            "add_line_item": _post("/admin/draft-orders/{id}/line-items"),
            "update_line_item": _post("/admin/draft-orders/{id}/line-items/{line_id}"),
            "remove_line_item": _delete("/admin/draft-orders/{id}/line-items/{line_id}"),
        },
        properties={
            "id": _string("Draft order ID."),
            "line_id": _string("Line item ID."),
            "email": _string("Customer email for the draft order."),
            "region_id": _string("Region ID."),
            "items": {"type": "array", "description": "Line items for the draft order."},
            "variant_id": _string("Variant ID for a line item."),
            "quantity": {"type": "number", "description": "Line item quantity."},
        },
    ),
    AdminToolSpec(
        name="manage_medusa_admin_gift_cards",
        description=(
            "Comprehensive Medusa Admin gift cards management tool supporting gift card "
            "operations (list, get, create, update, delete)."
        ),
        actions=_crud("/admin/gift-cards"),
        properties={
            "id": _string("Gift card ID."),
            "value": {"type": "number", "description": "Gift card value."},
            "region_id": _string("Region ID."),
            "is_disabled": {"type": "boolean", "description": "Whether the gift card is disabled."},
        },
    ),
    AdminToolSpec(
        name="manage_medusa_admin_inventory",
        description=(
            "Comprehensive Medusa Admin inventory management tool supporting inventory items, "
            "stock locations, levels, and reservations."
        ),
        actions={
            **_crud("/admin/inventory-items", plural="_items", singular="_item"),
            **_crud(
                "/admin/stock-locations",
                plural="_locations",
                singular="_location",
                id_param="location_id",
            ),
            "list_levels": _get("/admin/inventory-items/levels"),
            "update_level": _post(
                "/admin/inventory-items/{inventory_item_id}/location-levels/{location_id}"
            ),
            **_crud(
                "/admin/reservations",
                plural="_reservations",
                singular="_reservation",
                id_param="reservation_id",
                only=("list", "create", "update", "delete"),
            ),
        },
        properties={
            "id": _string("Inventory item ID."),
            "sku": _string("Inventory item SKU."),
            "location_id": _string("Stock location ID."),
            "inventory_item_id": _string("Inventory item ID for level updates."),
            "stocked_quantity": {"type": "number", "description": "Stocked quantity."},
            "reservation_id": _string("Reservation ID."),
            "line_item_id": _string("Line item ID for a reservation."),
            "quantity": {"type": "number", "description": "Reserved quantity."},
        },
    ),
    AdminToolSpec(
        name="manage_medusa_admin_orders",
        description=(
            "Comprehensive Medusa Admin order management tool supporting order operations "
            "(list, get, cancel, complete, archive, transfer, and fulfillment management)."
        ),
        actions={
            "list": _get("/admin/orders"),
            "get": _get("/admin/orders/{id}"),
            "cancel": _post("/admin/orders/{id}/cancel"),
            "complete": _post("/admin/orders/{id}/complete"),
            "archive": _post("/admin/orders/{id}/archive"),
            "transfer": _post("/admin/orders/{id}/transfer", required=["customer_id"]),
            "list_fulfillments": _get("/admin/orders/{id}?expand=fulfillments"),
            "cancel_fulfillment": _post("/admin/orders/{id}/fulfillments/{fulfillment_id}/cancel"),
        },
        properties={
            "id": _string(
                "Order ID (required for get, cancel, complete, archive, transfer, "
                "list_fulfillments, cancel_fulfillment actions)."
            ),
            "status": _string("Filter by order status."),
            "fulfillment_status": _string("Filter by fulfillment status."),
            "payment_status": _string("Filter by payment status."),
            "display_id": _string("Filter by display ID."),
            "customer_id": _string(
                "Filter by customer ID or customer ID to transfer to (for transfer action)."
            ),
            "email": _string("Filter by customer email."),
            "region_id": _string("Filter by region ID."),
            "fulfillment_id": _string("Fulfillment ID (required for cancel_fulfillment action)."),
        },
    ),
    AdminToolSpec(
        name="manage_medusa_admin_payments",
        description=(
            "Comprehensive Medusa Admin payments management tool supporting payment "
            "collections, payments, captures, cancellations, and refunds."
        ),
        actions={
            **_crud(
                "/admin/payment-collections",
                plural="_payment_collections",
                singular="_payment_collection",
                only=("list", "get", "update", "delete"),
            ),
            "list_payments": _get("/admin/payments"),
            "get_payment": _get("/admin/payments/{payment_id}"),
            "capture_payment": _post("/admin/payments/{payment_id}/capture"),
            "cancel_payment": _post("/admin/payments/{payment_id}/cancel"),
            "refund_payment": _post("/admin/payments/{payment_id}/refund"),
            "list_refunds": _get("/admin/refunds"),
            "get_refund": _get("/admin/refunds/{refund_id}"),
        },
        properties={
            "id": _string("Payment collection ID."),
            "payment_id": _string("Payment ID."),
            "refund_id": _string("Refund ID."),
            "amount": {"type": "number", "description": "Amount to capture or refund."},
            "note": _string("Refund note."),
        },
    ),
    AdminToolSpec(
        name="manage_medusa_admin_pricing",
        description=(
            "Comprehensive Medusa Admin pricing and promotions management tool supporting price "
            "lists, promotions, and campaigns."
        ),
        actions={
            **_crud("/admin/price-lists", plural="_price_lists", singular="_price_list"),
            **_crud(
                "/admin/promotions",
                plural="_promotions",
                singular="_promotion",
                id_param="promotion_id",
            ),
            **_crud(
                "/admin/campaigns",
                plural="_campaigns",
                singular="_campaign",
                id_param="campaign_id",
            ),
        },
        properties={
            "id": _string("Price list ID."),
            "promotion_id": _string("Promotion ID."),
            "campaign_id": _string("Campaign ID."),
            "title": _string("Price list title."),
            "code": _string("Promotion code."),
            "name": _string("Campaign name."),
            "prices": {"type": "array", "description": "Prices for the price list."},
        },
    ),
    AdminToolSpec(
        name="manage_medusa_admin_products",
        description=(
            "Comprehensive Medusa Admin products management tool supporting product operations "
            "(list, get, create, update, delete), variant management, and category operations."
        ),
        actions={
            **_crud("/admin/products"),
            "list_variants": _get("/admin/products/{id}/variants"),
            "get_variant": _get("/admin/products/{id}/variants/{variant_id}"),
            "create_variant": _post("/admin/products/{id}/variants", body_param="variant_data"),
            "update_variant": _post(
                "/admin/products/{id}/variants/{variant_id}", body_param="variant_data"
            ),
            "delete_variant": _delete("/admin/products/{id}/variants/{variant_id}"),
            **_crud("/admin/product-categories", plural="_categories", singular="_category"),
            "list_tags": _get("/admin/product-tags"),
            "list_types": _get("/admin/product-types"),
        },
        properties={
            "id": _string("Product ID (or category ID for category actions)."),
            "title": _string("Product title."),
            "handle": _string("Product handle."),
            "status": _string("Product status."),
            "variant_id": _string("Variant ID."),
            "variant_data": _object("Variant payload for create_variant and update_variant."),
            "name": _string("Category name."),
        },
    ),
    AdminToolSpec(
        name="manage_medusa_admin_regions",
        description=(
            "Comprehensive Medusa Admin regions and shipping management tool supporting regions, "
            "shipping options, profiles, and fulfillment operations."
        ),
        actions={
            **_crud("/admin/regions", plural="_regions", singular="_region"),
            **_crud(
                "/admin/shipping-options",
                plural="_shipping_options",
                singular="_shipping_option",
                id_param="shipping_option_id",
            ),
            **_crud(
                "/admin/shipping-profiles",
                plural="_shipping_profiles",
                singular="_shipping_profile",
                id_param="profile_id",
            ),
            "list_fulfillment_providers": _get("/admin/fulfillment-providers"),
            **_crud(
                "/admin/fulfillment-sets",
                plural="_fulfillment_sets",
                singular="_fulfillment_set",
                id_param="fulfillment_set_id",
                only=("list", "create", "update", "delete"),
            ),
        },
        properties={
            "id": _string("Region ID."),
            "name": _string("Region, option, profile or set name."),
            "currency_code": _string("Region currency code."),
            "countries": _array("Country codes for the region."),
            "shipping_option_id": _string("Shipping option ID."),
            "profile_id": _string("Shipping profile ID."),
            "fulfillment_set_id": _string("Fulfillment set ID."),
        },
    ),
    AdminToolSpec(
        name="manage_medusa_admin_returns",
        description=(
            "Comprehensive Medusa Admin returns and exchanges management tool supporting "
            "returns, swaps, claims, and order edits."
        ),
        actions={
            "list_returns": _get("/admin/returns"),
            "get_return": _get("/admin/returns/{id}"),
            "cancel_return": _post("/admin/returns/{id}/cancel"),
            "receive_return": _post("/admin/returns/{id}/receive"),
            "list_exchanges": _get("/admin/exchanges"),
            "get_exchange": _get("/admin/exchanges/{exchange_id}"),
            "cancel_exchange": _post("/admin/exchanges/{exchange_id}/cancel"),
            "list_claims": _get("/admin/claims"),
            "get_claim": _get("/admin/claims/{claim_id}"),
            "update_claim": _post("/admin/claims/{claim_id}"),
            "cancel_claim": _post("/admin/claims/{claim_id}/cancel"),
            **_crud(
                "/admin/order-edits",
                plural="_order_edits",
                singular="_order_edit",
                id_param="order_edit_id",
                only=("list", "get", "update", "delete"),
            ),
            "complete_order_edit": _post("/admin/order-edits/{order_edit_id}/complete"),
            "cancel_order_edit": _post("/admin/order-edits/{order_edit_id}/cancel"),
        },
        properties={
            "id": _string("Return ID."),
            "exchange_id": _string("Exchange ID."),
            "claim_id": _string("Claim ID."),
            "order_edit_id": _string("Order edit ID."),
            "items": {"type": "array", "description": "Items received for receive_return."},
        },
    ),
    AdminToolSpec(
        name="manage_medusa_admin_sales_channels",
        description=(
            "Comprehensive Medusa Admin sales channels management tool supporting channel "
            "operations and product associations."
        ),
        actions={
            **_crud("/admin/sales-channels"),
            "add_products": _post("/admin/sales-channels/{id}/products", required=["product_ids"]),
            "remove_products": _delete(
                "/admin/sales-channels/{id}/products", required=["product_ids"], body=True
            ),
            "list_products": _get("/admin/sales-channels/{id}/products"),
        },
        properties={
            "id": _string("Sales channel ID."),
            "name": _string("Sales channel name."),
            "description": _string("Sales channel description."),
            "is_disabled": {"type": "boolean", "description": "Whether the channel is disabled."},
            "product_ids": _array("Product IDs to add or remove."),
        },
    ),
    AdminToolSpec(
        name="manage_medusa_admin_taxes",
        description=(
            "Comprehensive Medusa Admin tax management tool supporting tax rates and tax regions."
        ),
        actions={
            **_crud("/admin/tax-rates", plural="_tax_rates", singular="_tax_rate"),
            **_crud(
                "/admin/tax-regions",
                plural="_tax_regions",
                singular="_tax_region",
                id_param="tax_region_id",
            ),
        },
        properties={
            "id": _string("Tax rate ID."),
            "tax_region_id": _string("Tax region ID."),
            "name": _string("Tax rate name."),
            "rate": {"type": "number", "description": "Tax rate percentage."},
            "code": _string("Tax rate code."),
            "country_code": _string("Tax region country code."),
        },
    ),
    AdminToolSpec(
        name="manage_medusa_admin_users",
        description=(
            "Comprehensive Medusa Admin users and authentication management tool supporting "
            "user operations, invites, and API key management."
        ),
        actions={
            **_crud("/admin/users", plural="_users", singular="_user"),
            **_crud(
                "/admin/invites",
                plural="_invites",
                singular="_invite",
                id_param="invite_id",
                only=("list", "get", "create", "delete"),
            ),
            "resend_invite": _post("/admin/invites/{invite_id}/resend"),
            **_crud(
                "/admin/api-keys",
                plural="_api_keys",
                singular="_api_key",
                id_param="api_key_id",
            ),
            "revoke_api_key": _post("/admin/api-keys/{api_key_id}/revoke"),
        },
        properties={
            "id": _string("User ID."),
            "email": _string("User or invite email."),
            "first_name": _string("User first name."),
            "last_name": _string("User last name."),
            "invite_id": _string("Invite ID."),
            "api_key_id": _string("API key ID."),
            "title": _string("API key title."),
            "type": _string("API key type (secret or publishable)."),
        },
    ),
]
