"""Builders for operations, operation traits and replies."""

from typing import Any, Callable, TypeVar

from asyncapi_kit.document.bindings import Binding, OperationBindings
from asyncapi_kit.document.models import (
    ActionType,
    Operation,
    OperationReply,
    OperationReplyAddress,
    OperationTrait,
    Reference,
)
from asyncapi_kit.document.references import channel_reference, component_reference, message_reference

from .base import EntityBuilder, InvalidOperationError, require
from .tag import TagBuilder

OperationT = TypeVar("OperationT", Operation, OperationTrait)


class _OperationFieldsBuilder(EntityBuilder[OperationT]):
    """Setters shared by operations and operation traits."""

    def with_title(self, title: str | None):
        self._entity.title = title
        return self

    def with_summary(self, summary: str | None):
        self._entity.summary = summary
        return self

    def with_description(self, description: str | None):
        self._entity.description = description
        return self

    def with_security_requirement(self, scheme: str, scopes: list[str] | None = None):
        self._append("security", {require(scheme, "scheme"): list(scopes or [])})
        return self

    def with_tag(self, setup: Callable[[TagBuilder], Any]):
        self._append("tags", self._build_child(TagBuilder, setup))
        return self

    def with_external_documentation(self, url: str, description: str | None = None):
        self._entity.external_docs = self._external_docs(url, description)
        return self

    def with_binding(self, binding: Binding):
        self._add_binding(OperationBindings, binding)
        return self


class OperationTraitBuilder(_OperationFieldsBuilder[OperationTrait]):
    entity_type = OperationTrait


class OperationReplyBuilder(EntityBuilder[OperationReply]):
    entity_type = OperationReply

    def with_channel_reference(self, channel_id: str) -> "OperationReplyBuilder":
        self._entity.channel = Reference(reference=channel_reference(require(channel_id, "channel_id")))
        return self

    def with_message_reference(self, message_id: str, channel_id: str) -> "OperationReplyBuilder":
        require(message_id, "message_id")
        ref = message_reference(channel_reference(require(channel_id, "channel_id")), message_id)
        self._append("messages", Reference(reference=ref))
        return self

    def with_address_reference(self, address_id: str) -> "OperationReplyBuilder":
        ref = component_reference("replyAddresses", require(address_id, "address_id"))
        self._entity.address = OperationReplyAddress(reference=ref)
        return self

    def with_address(self, location: str, description: str | None = None) -> "OperationReplyBuilder":
        self._entity.address = OperationReplyAddress(location=require(location, "location"), description=description)
        return self

    def with_reference(self, reference: str) -> "OperationReplyBuilder":
        self._entity.reference = require(reference, "reference")
        return self


class OperationBuilder(_OperationFieldsBuilder[Operation]):
    entity_type = Operation

    def with_operation_id(self, operation_id: str) -> "OperationBuilder":
        self._entity.operation_id = require(operation_id, "operation_id")
        return self

    def with_action(self, action: ActionType | str) -> "OperationBuilder":
        self._entity.action = ActionType(require(action, "action"))
        return self

    def with_reference_to_channel(self, channel_id: str) -> "OperationBuilder":
        self._entity.channel = Reference(reference=channel_reference(require(channel_id, "channel_id")))
        return self

    def with_reference_to_message(self, message_id: str) -> "OperationBuilder":
        """Reference a message of the operation's channel; the channel must be set first."""
        require(message_id, "message_id")
        channel = self._entity.channel
        if channel is None or not channel.reference:
            raise InvalidOperationError("The operation's channel reference must be set before adding message references.")
        self._append("messages", Reference(reference=message_reference(channel.reference, message_id)))
        return self

    def with_trait(self, setup: Callable[[OperationTraitBuilder], Any]) -> "OperationBuilder":
        self._append("traits", self._build_child(OperationTraitBuilder, setup))
        return self

    def with_reply(self, setup: Callable[[OperationReplyBuilder], Any]) -> "OperationBuilder":
        self._entity.reply = self._build_child(OperationReplyBuilder, setup)
        return self
