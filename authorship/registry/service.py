"""Registry service - invokable method surface over the content registry

The execution layer calls registry operations by name with a positional
argument list and the caller's principal ID. Every call returns a dict:
{"success": True, ...} on success, or the standardized error response
from errors.py on failure. RegistryError never escapes invoke().
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from ..config import get_validated_config
from ..config_schema import ServiceConfig
from .access import Role
from .content import ContentRegistry
from .errors import ErrorCode, RegistryError, validation_error

logger = logging.getLogger(__name__)

Handler = Callable[[list[Any], str], dict[str, Any]]


@dataclass
class RegistryMethod:
    """A method exposed by the registry service"""
    name: str
    handler: Handler
    arg_names: list[str]
    description: str


class RegistryService:
    """Named-method front end for a ContentRegistry."""

    id: str
    description: str
    registry: ContentRegistry
    methods: dict[str, RegistryMethod]

    def __init__(
        self,
        registry: ContentRegistry,
        service_config: ServiceConfig | None = None,
    ) -> None:
        cfg = service_config or get_validated_config().service
        method_cfg = cfg.methods
        self.id = cfg.id
        self.description = cfg.description
        self.registry = registry
        self.methods = {}

        self.register_method("register_content", self._register_content, ["content_hash"],
                             method_cfg.register_content.description)
        self.register_method("update_content", self._update_content, ["old_hash", "new_hash"],
                             method_cfg.update_content.description)
        self.register_method("approve_content", self._approve_content, ["content_hash"],
                             method_cfg.approve_content.description)
        self.register_method("get_content", self._get_content, ["content_hash"],
                             method_cfg.get_content.description)
        self.register_method("add_creator", self._add_creator, ["principal"],
                             method_cfg.add_creator.description)
        self.register_method("assign_admin_role", self._assign_admin_role, ["principal"],
                             method_cfg.assign_admin_role.description)
        self.register_method("has_role", self._has_role, ["principal", "role"],
                             method_cfg.has_role.description)
        self.register_method("set_reward_amount", self._set_reward_amount, ["amount"],
                             method_cfg.set_reward_amount.description)
        self.register_method("set_max_content_limit", self._set_max_content_limit, ["limit"],
                             method_cfg.set_max_content_limit.description)

    def register_method(
        self,
        name: str,
        handler: Handler,
        arg_names: list[str],
        description: str = "",
    ) -> None:
        """Register a callable method on this service"""
        self.methods[name] = RegistryMethod(
            name=name,
            handler=handler,
            arg_names=arg_names,
            description=description,
        )

    def get_method(self, method_name: str) -> RegistryMethod | None:
        return self.methods.get(method_name)

    def list_methods(self) -> list[dict[str, Any]]:
        return [
            {"name": m.name, "args": list(m.arg_names), "description": m.description}
            for m in self.methods.values()
        ]

    def get_interface(self) -> dict[str, Any]:
        """Describe every method with a JSON Schema for its arguments."""
        tools = []
        for method in self.methods.values():
            tools.append({
                "name": method.name,
                "description": method.description,
                "inputSchema": {
                    "type": "array",
                    "items": [{"title": arg} for arg in method.arg_names],
                    "minItems": len(method.arg_names),
                },
            })
        return {"id": self.id, "description": self.description, "tools": tools}

    def invoke(
        self,
        method_name: str,
        args: list[Any] | tuple[Any, ...] | None,
        caller: str,
    ) -> dict[str, Any]:
        """Run a method on behalf of caller and return its result dict."""
        method = self.get_method(method_name)
        if method is None:
            return validation_error(
                f"Unknown method '{method_name}'. Available: {sorted(self.methods)}",
                code=ErrorCode.UNKNOWN_METHOD,
            )
        if args is not None and not isinstance(args, (list, tuple)):
            return validation_error(
                f"{method_name} args must be a list, got {type(args).__name__}",
                code=ErrorCode.INVALID_ARGUMENT,
                provided=args,
            )
        args = list(args or [])
        if len(args) < len(method.arg_names):
            return validation_error(
                f"{method_name} requires {method.arg_names} ({len(method.arg_names)} args, got {len(args)})",
                code=ErrorCode.MISSING_ARGUMENT,
                required=list(method.arg_names),
            )
        try:
            return method.handler(args, caller)
        except RegistryError as exc:
            logger.debug("%s by %s failed: %s", method_name, caller, exc.message)
            return exc.to_response()

    # ===== HANDLERS =====

    def _register_content(self, args: list[Any], invoker_id: str) -> dict[str, Any]:
        record = self.registry.register_content(invoker_id, args[0])
        return {
            "success": True,
            "content": record.to_dict(),
            "reward": self.registry.reward_amount,
        }

    def _update_content(self, args: list[Any], invoker_id: str) -> dict[str, Any]:
        record = self.registry.update_content(invoker_id, args[0], args[1])
        return {"success": True, "content": record.to_dict(), "replaced": args[0]}

    def _approve_content(self, args: list[Any], invoker_id: str) -> dict[str, Any]:
        record = self.registry.approve_content(invoker_id, args[0])
        return {"success": True, "content": record.to_dict()}

    def _get_content(self, args: list[Any], invoker_id: str) -> dict[str, Any]:
        record = self.registry.get_content(args[0])
        return {"success": True, "found": record.exists, "content": record.to_dict()}

    def _add_creator(self, args: list[Any], invoker_id: str) -> dict[str, Any]:
        changed = self.registry.add_creator(invoker_id, args[0])
        return {"success": True, "principal": args[0], "role": Role.CREATOR.value, "changed": changed}

    def _assign_admin_role(self, args: list[Any], invoker_id: str) -> dict[str, Any]:
        changed = self.registry.assign_admin_role(invoker_id, args[0])
        return {"success": True, "principal": args[0], "role": Role.ADMIN.value, "changed": changed}

    def _has_role(self, args: list[Any], invoker_id: str) -> dict[str, Any]:
        principal, role = args[0], args[1]
        held = self.registry.has_role(principal, role)
        return {"success": True, "principal": principal, "role": role, "has_role": held}

    def _set_reward_amount(self, args: list[Any], invoker_id: str) -> dict[str, Any]:
        self.registry.set_reward_amount(invoker_id, args[0])
        return {"success": True, "reward_amount": self.registry.reward_amount}

    def _set_max_content_limit(self, args: list[Any], invoker_id: str) -> dict[str, Any]:
        self.registry.set_max_content_limit(invoker_id, args[0])
        return {"success": True, "max_content_limit": self.registry.max_content_limit}
