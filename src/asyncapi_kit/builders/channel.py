"""Builders for channels and channel parameters."""

from typing import Any, Callable

from asyncapi_kit.document.bindings import Binding, ChannelBindings
from asyncapi_kit.document.models import Channel, Message, Parameter, Reference
from asyncapi_kit.document.references import component_reference

from .base import EntityBuilder, require
from .message import CloudEventMessageBuilder, MessageBuilder
from .tag import TagBuilder


class ParameterBuilder(EntityBuilder[Parameter]):
    entity_type = Parameter

    def with_location(self, location: str) -> "ParameterBuilder":
        self._entity.location = require(location, "location")
        return self

    def with_description(self, description: str | None) -> "ParameterBuilder":
        self._entity.description = description
        return self

    def with_enum_values(self, values: list[str]) -> "ParameterBuilder":
        self._entity.enum = list(require(values, "values"))
        return self

    def with_example(self, example: str) -> "ParameterBuilder":
        self._append("examples", require(example, "example"))
        return self

    def with_default_value(self, value: str | None) -> "ParameterBuilder":
        self._entity.default = value
        return self


class ChannelBuilder(EntityBuilder[Channel]):
    entity_type = Channel

    def with_address(self, address: str | None) -> "ChannelBuilder":
        self._entity.address = address
        return self

    def with_title(self, title: str | None) -> "ChannelBuilder":
        self._entity.title = title
        return self

    def with_summary(self, summary: str | None) -> "ChannelBuilder":
        self._entity.summary = summary
        return self

    def with_description(self, description: str | None) -> "ChannelBuilder":
        self._entity.description = description
        return self

    def with_server(self, server_name: str) -> "ChannelBuilder":
        self._append("servers", Reference(reference=f"#/servers/{require(server_name, 'server_name')}"))
        return self

    def with_parameter(self, name: str, setup: Callable[[ParameterBuilder], Any]) -> "ChannelBuilder":
        require(name, "name")
        self._set_item("parameters", name, self._build_child(ParameterBuilder, setup))
        return self

    def with_message(self, name: str | None, setup: Callable[[MessageBuilder], Any]) -> "ChannelBuilder":
        """Add a message keyed by ``name`` or, failing that, by the message's own name.

        The first message registered under a key wins; later ones are ignored.
        """
        return self._add_message(name, self._build_child(MessageBuilder, setup))

    def with_cloud_event_message(self, name: str | None, setup: Callable[[CloudEventMessageBuilder], Any]) -> "ChannelBuilder":
        """Add a message carrying a CloudEvent; keyed like ``with_message``."""
        return self._add_message(name, self._build_child(CloudEventMessageBuilder, setup))

    def _add_message(self, name: str | None, message: Message) -> "ChannelBuilder":
        key = name or message.name
        if not key:
            raise ValueError("name must not be empty when the message does not define one")
        if self._entity.messages is None:
            self._entity.messages = {}
        self._entity.messages.setdefault(key, message)
        return self

    def with_message_reference(self, name: str, component_name: str | None = None) -> "ChannelBuilder":
        """Add a message that points at ``#/components/messages/<component_name>``."""
        require(name, "name")
        ref = component_reference("messages", component_name or name)
        self._set_item("messages", name, Message(reference=ref))
        return self

    def with_tag(self, setup: Callable[[TagBuilder], Any]) -> "ChannelBuilder":
        self._append("tags", self._build_child(TagBuilder, setup))
        return self

    def with_external_documentation(self, url: str, description: str | None = None) -> "ChannelBuilder":
        self._entity.external_docs = self._external_docs(url, description)
        return self

    def with_binding(self, binding: Binding) -> "ChannelBuilder":
        self._add_binding(ChannelBindings, binding)
        return self
