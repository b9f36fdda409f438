"""Builders for servers and server variables."""

from typing import Any, Callable

from asyncapi_kit.document.bindings import Binding, ServerBindings
from asyncapi_kit.document.models import Server, ServerVariable

from .base import EntityBuilder, require


class ServerVariableBuilder(EntityBuilder[ServerVariable]):
    entity_type = ServerVariable

    def with_default_value(self, value: str | None) -> "ServerVariableBuilder":
        self._entity.default = value
        return self

    def with_enum_values(self, values: list[str]) -> "ServerVariableBuilder":
        self._entity.enum = list(require(values, "values"))
        return self

    def with_description(self, description: str | None) -> "ServerVariableBuilder":
        self._entity.description = description
        return self

    def with_example(self, example: str) -> "ServerVariableBuilder":
        self._append("examples", require(example, "example"))
        return self


class ServerBuilder(EntityBuilder[Server]):
    entity_type = Server

    def with_host(self, host: str) -> "ServerBuilder":
        self._entity.host = require(host, "host")
        return self

    def with_pathname(self, pathname: str) -> "ServerBuilder":
        self._entity.pathname = pathname
        return self

    def with_protocol(self, protocol: str, version: str | None = None) -> "ServerBuilder":
        self._entity.protocol = require(protocol, "protocol")
        if version is not None:
            self._entity.protocol_version = version
        return self

    def with_protocol_version(self, version: str) -> "ServerBuilder":
        self._entity.protocol_version = require(version, "version")
        return self

    def with_description(self, description: str | None) -> "ServerBuilder":
        self._entity.description = description
        return self

    def with_variable(self, name: str, setup: Callable[[ServerVariableBuilder], Any]) -> "ServerBuilder":
        require(name, "name")
        self._set_item("variables", name, self._build_child(ServerVariableBuilder, setup))
        return self

    def with_security_requirement(self, scheme: str, scopes: list[str] | None = None) -> "ServerBuilder":
        self._append("security", {require(scheme, "scheme"): list(scopes or [])})
        return self

    def with_binding(self, binding: Binding) -> "ServerBuilder":
        self._add_binding(ServerBindings, binding)
        return self
