"""AsyncAPI document model.

Every entity is a pydantic record. Builders stage and mutate instances until
``build()``; afterwards they are treated as immutable. Field names are
snake_case in Python and camelCase on the wire.
"""

import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from . import references
from .bindings import ChannelBindings, MessageBindings, OperationBindings, ServerBindings

DEFAULT_SPEC_VERSION = "3.0.0"
DEFAULT_CONTENT_TYPE = "application/json"

Schema = dict[str, Any]

_URL_TOKEN = re.compile(r"\{([^{}]+)\}")


class AsyncApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ActionType(str, Enum):
    SEND = "send"
    RECEIVE = "receive"


class Reference(AsyncApiModel):
    """A ``$ref``-style pointer to another entity of the same document."""

    reference: str | None = Field(default=None, alias="$ref")

    def __str__(self) -> str:
        return self.reference or ""


class ExternalDocumentation(AsyncApiModel):
    url: str | None = None
    description: str | None = None


class Tag(AsyncApiModel):
    name: str | None = None
    description: str | None = None
    external_docs: ExternalDocumentation | None = None


class Contact(AsyncApiModel):
    name: str | None = None
    url: str | None = None
    email: str | None = None


class License(AsyncApiModel):
    name: str | None = None
    url: str | None = None


class Info(AsyncApiModel):
    """Metadata about the API."""

    title: str | None = None
    version: str | None = None
    description: str | None = None
    terms_of_service: str | None = None
    contact: Contact | None = None
    license: License | None = None
    tags: list[Tag] | None = None
    external_docs: ExternalDocumentation | None = None


class ServerVariable(AsyncApiModel):
    """A variable substituted into a server's URL template."""

    default: str | None = None
    enum: list[str] | None = None
    description: str | None = None
    examples: list[str] | None = None


class Server(AsyncApiModel):
    """A message broker or endpoint the application connects to."""

    reference: str | None = Field(default=None, alias="$ref")
    host: str | None = None
    pathname: str | None = None
    protocol: str | None = None
    protocol_version: str | None = None
    description: str | None = None
    variables: dict[str, ServerVariable] | None = None
    security: list[dict[str, Any]] | None = None
    bindings: ServerBindings | None = None

    def interpolate_url_variables(self, template: str | None = None) -> str:
        """Substitute ``{name}`` tokens using each variable's default.

        Falls back to the variable's first enum value; tokens with neither
        (or with no matching variable) are left untouched.
        """
        url = template if template is not None else str(self)
        variables = self.variables or {}

        def substitute(match: re.Match) -> str:
            variable = variables.get(match.group(1))
            if variable is None:
                return match.group(0)
            value = variable.default
            if not value and variable.enum:
                value = variable.enum[0]
            return value or match.group(0)

        return _URL_TOKEN.sub(substitute, url)

    def __str__(self) -> str:
        return f"{self.protocol}://{self.host}{self.pathname or ''}"


class CorrelationId(AsyncApiModel):
    location: str | None = None
    description: str | None = None


class MultiFormatSchema(AsyncApiModel):
    """A payload schema expressed in a format other than plain JSON Schema."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    schema_format: str | None = None
    schema_: Any = Field(alias="schema")


class MessageExample(AsyncApiModel):
    name: str | None = None
    summary: str | None = None
    headers: dict[str, Any] | None = None
    payload: Any = None


class MessageTrait(AsyncApiModel):
    """A reusable, partial message definition."""

    reference: str | None = Field(default=None, alias="$ref")
    name: str | None = None
    title: str | None = None
    summary: str | None = None
    description: str | None = None
    content_type: str | None = None
    headers: Schema | None = None
    correlation_id: CorrelationId | None = None
    tags: list[Tag] | None = None
    external_docs: ExternalDocumentation | None = None
    bindings: MessageBindings | None = None
    examples: list[MessageExample] | None = None


class Message(AsyncApiModel):
    """A message exchanged on a channel."""

    reference: str | None = Field(default=None, alias="$ref")
    name: str | None = None
    title: str | None = None
    summary: str | None = None
    description: str | None = None
    content_type: str | None = None
    headers: Schema | None = None
    correlation_id: CorrelationId | None = None
    payload: MultiFormatSchema | Schema | None = Field(default=None, union_mode="left_to_right")
    tags: list[Tag] | None = None
    external_docs: ExternalDocumentation | None = None
    bindings: MessageBindings | None = None
    examples: list[MessageExample] | None = None
    traits: list[MessageTrait] | None = None

    def __str__(self) -> str:
        return self.name or self.title or ""


class Parameter(AsyncApiModel):
    """A channel address parameter."""

    reference: str | None = Field(default=None, alias="$ref")
    location: str | None = None  # runtime expression, e.g. $message.payload#/user/id
    description: str | None = None
    enum: list[str] | None = None
    examples: list[str] | None = None
    default: str | None = None

    def __str__(self) -> str:
        return self.location or ""


class Channel(AsyncApiModel):
    """A named communication path grouping related messages."""

    reference: str | None = Field(default=None, alias="$ref")
    address: str | None = None
    title: str | None = None
    summary: str | None = None
    description: str | None = None
    servers: list[Reference] | None = None
    messages: dict[str, Message] | None = None
    parameters: dict[str, Parameter] | None = None
    tags: list[Tag] | None = None
    external_docs: ExternalDocumentation | None = None
    bindings: ChannelBindings | None = None


class OperationReplyAddress(AsyncApiModel):
    reference: str | None = Field(default=None, alias="$ref")
    location: str | None = None
    description: str | None = None


class OperationReply(AsyncApiModel):
    """How a reply to a request/response operation is routed."""

    reference: str | None = Field(default=None, alias="$ref")
    address: OperationReplyAddress | None = None
    channel: Reference | None = None
    messages: list[Reference] | None = None


class OperationTrait(AsyncApiModel):
    """A reusable, partial operation definition."""

    reference: str | None = Field(default=None, alias="$ref")
    title: str | None = None
    summary: str | None = None
    description: str | None = None
    security: list[dict[str, Any]] | None = None
    tags: list[Tag] | None = None
    external_docs: ExternalDocumentation | None = None
    bindings: OperationBindings | None = None


class Operation(AsyncApiModel):
    """A send or receive action bound to a channel and its messages."""

    operation_id: str | None = None
    action: ActionType | None = None
    channel: Reference | None = None
    title: str | None = None
    summary: str | None = None
    description: str | None = None
    security: list[dict[str, Any]] | None = None
    tags: list[Tag] | None = None
    external_docs: ExternalDocumentation | None = None
    bindings: OperationBindings | None = None
    traits: list[OperationTrait] | None = None
    messages: list[Reference] | None = None
    reply: OperationReply | None = None


class Components(AsyncApiModel):
    """Reusable objects referenced through ``#/components/<section>/<name>``."""

    schemas: dict[str, Schema] | None = None
    servers: dict[str, Server] | None = None
    server_variables: dict[str, ServerVariable] | None = None
    channels: dict[str, Channel] | None = None
    operations: dict[str, Operation] | None = None
    messages: dict[str, Message] | None = None
    security_schemes: dict[str, dict[str, Any]] | None = None
    parameters: dict[str, Parameter] | None = None
    correlation_ids: dict[str, CorrelationId] | None = None
    replies: dict[str, OperationReply] | None = None
    reply_addresses: dict[str, OperationReplyAddress] | None = None
    external_docs: dict[str, ExternalDocumentation] | None = None
    tags: dict[str, Tag] | None = None
    operation_traits: dict[str, OperationTrait] | None = None
    message_traits: dict[str, MessageTrait] | None = None


class Document(AsyncApiModel):
    """An AsyncAPI document."""

    spec_version: str = Field(default=DEFAULT_SPEC_VERSION, alias="asyncapi")
    id: str | None = None
    info: Info | None = None
    servers: dict[str, Server] | None = None
    default_content_type: str | None = None
    channels: dict[str, Channel] | None = None
    operations: dict[str, Operation] | None = None
    components: Components | None = None

    def find_operation_by_id(self, operation_id: str) -> tuple[Operation | None, str | None]:
        """Return the operation with the given id and the name of its channel."""
        return references.find_operation_by_id(self, operation_id)

    def has_operation_with_id(self, operation_id: str) -> bool:
        return references.has_operation_with_id(self, operation_id)

    def resolve_channel_for_operation(self, operation: Operation) -> Channel | None:
        return references.resolve_channel_for_operation(self, operation)

    def resolve_messages_for_operation(self, operation: Operation) -> list[Message]:
        return references.resolve_messages_for_operation(self, operation)

    def resolve_reference(self, reference: str) -> Any:
        return references.resolve_reference(self, reference)

    def __str__(self) -> str:
        if self.info is not None and self.info.title:
            return self.info.title
        return self.id or ""
