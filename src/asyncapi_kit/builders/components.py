"""Builder for the reusable components section."""

from typing import Any, Callable

from asyncapi_kit.document.models import Components, CorrelationId, OperationReplyAddress

from .base import EntityBuilder, require
from .channel import ChannelBuilder, ParameterBuilder
from .message import MessageBuilder, MessageTraitBuilder
from .operation import OperationReplyBuilder, OperationTraitBuilder
from .server import ServerBuilder, ServerVariableBuilder
from .tag import TagBuilder


class ComponentsBuilder(EntityBuilder[Components]):
    entity_type = Components

    def _with_child(self, field: str, name: str, builder_type: type[EntityBuilder], setup: Callable) -> "ComponentsBuilder":
        require(name, "name")
        self._set_item(field, name, self._build_child(builder_type, setup))
        return self

    def with_schema(self, name: str, schema: dict[str, Any]) -> "ComponentsBuilder":
        self._set_item("schemas", require(name, "name"), require(schema, "schema"))
        return self

    def with_server(self, name: str, setup: Callable[[ServerBuilder], Any]) -> "ComponentsBuilder":
        return self._with_child("servers", name, ServerBuilder, setup)

    def with_server_variable(self, name: str, setup: Callable[[ServerVariableBuilder], Any]) -> "ComponentsBuilder":
        return self._with_child("server_variables", name, ServerVariableBuilder, setup)

    def with_channel(self, name: str, setup: Callable[[ChannelBuilder], Any]) -> "ComponentsBuilder":
        return self._with_child("channels", name, ChannelBuilder, setup)

    def with_message(self, name: str, setup: Callable[[MessageBuilder], Any]) -> "ComponentsBuilder":
        return self._with_child("messages", name, MessageBuilder, setup)

    def with_parameter(self, name: str, setup: Callable[[ParameterBuilder], Any]) -> "ComponentsBuilder":
        return self._with_child("parameters", name, ParameterBuilder, setup)

    def with_reply(self, name: str, setup: Callable[[OperationReplyBuilder], Any]) -> "ComponentsBuilder":
        return self._with_child("replies", name, OperationReplyBuilder, setup)

    def with_tag(self, name: str, setup: Callable[[TagBuilder], Any]) -> "ComponentsBuilder":
        return self._with_child("tags", name, TagBuilder, setup)

    def with_operation_trait(self, name: str, setup: Callable[[OperationTraitBuilder], Any]) -> "ComponentsBuilder":
        return self._with_child("operation_traits", name, OperationTraitBuilder, setup)

    def with_message_trait(self, name: str, setup: Callable[[MessageTraitBuilder], Any]) -> "ComponentsBuilder":
        return self._with_child("message_traits", name, MessageTraitBuilder, setup)

    def with_reply_address(self, name: str, location: str, description: str | None = None) -> "ComponentsBuilder":
        address = OperationReplyAddress(location=require(location, "location"), description=description)
        self._set_item("reply_addresses", require(name, "name"), address)
        return self

    def with_correlation_id(self, name: str, location: str, description: str | None = None) -> "ComponentsBuilder":
        correlation_id = CorrelationId(location=require(location, "location"), description=description)
        self._set_item("correlation_ids", require(name, "name"), correlation_id)
        return self

    def with_security_scheme(self, name: str, scheme: dict[str, Any]) -> "ComponentsBuilder":
        self._set_item("security_schemes", require(name, "name"), require(scheme, "scheme"))
        return self

    def with_external_documentation(self, name: str, url: str, description: str | None = None) -> "ComponentsBuilder":
        self._set_item("external_docs", require(name, "name"), self._external_docs(url, description))
        return self
