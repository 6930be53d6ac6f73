"""Turn admin catalogue entries into tool descriptors."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from medusa_mcp.medusa.catalog import ADMIN_TOOLS, AdminAction, AdminToolSpec
from medusa_mcp.protocol.errors import InvalidParamsError
from medusa_mcp.registry.models import ParameterSchema, ToolDescriptor, ToolSource

if TYPE_CHECKING:
    from medusa_mcp.medusa.client import MedusaClient


class AdminTool:
    """Executes the actions of one :class:`AdminToolSpec` against a client."""

    def __init__(self, spec: AdminToolSpec, client: MedusaClient) -> None:
        self.spec = spec
        self._client = client

    async def __call__(self, arguments: dict[str, Any]) -> Any:
        action_name = arguments.get("action")
        action = self.spec.actions.get(action_name) if isinstance(action_name, str) else None
        if action is None:
            raise InvalidParamsError(f"Unknown action: {action_name}")

        missing = [p for p in (*action.path_params, *action.required) if arguments.get(p) in (None, "")]
        if missing:
            raise InvalidParamsError(
                f"Missing required parameter for {action_name}: {', '.join(missing)}"
            )

        path = action.path.format(**{p: arguments[p] for p in action.path_params})
        rest = {
            key: value
            for key, value in arguments.items()
            if key != "action" and key not in action.path_params
        }
        return await self._send(action, path, rest)

    async def _send(self, action: AdminAction, path: str, rest: dict[str, Any]) -> Any:
        if not action.sends_body:
            return await self._client.request(
                action.method, path, params=rest, tool_name=self.spec.name
            )
        if action.id_list_key:
            body = {action.id_list_key: [rest["id"]]}
        elif action.body_param:
            body = rest.get(action.body_param)
        else:
            body = rest
        return await self._client.request(
            action.method, path, body=body or {}, tool_name=self.spec.name
        )

    def descriptor(self) -> ToolDescriptor:
        properties: dict[str, dict[str, Any]] = {
            "action": {
                "type": "string",
                "enum": list(self.spec.actions),
                "description": f"The action to perform ({self.spec.name}).",
            },
        }
        if any(action.method == "GET" for action in self.spec.actions.values()):
            properties.update(_LIST_PROPERTIES)
        properties.update(self.spec.properties)
        return ToolDescriptor(
            name=self.spec.name,
            description=self.spec.description,
            parameter_schema=ParameterSchema(properties=properties, required=["action"]),
            invoke=self,
        )


_LIST_PROPERTIES: dict[str, dict[str, Any]] = {
    "limit": {"type": "number", "description": "Maximum number of records to return (default: 20)."},
    "offset": {"type": "number", "description": "Number of records to skip (default: 0)."},
}


def admin_tool_sources(client: MedusaClient) -> list[ToolSource]:
    """Return the static ``(name, factory)`` list the registry discovers from."""
    return [
        (spec.name, AdminTool(spec, client).descriptor)
        for spec in ADMIN_TOOLS
    ]
