"""Turns API descriptions into AsyncAPI documents.

A description lists channels and the operations bound to them. Each
operation contributes one message to its channel, whose payload schema is
either given, inferred from a Python type, or assembled from the operation's
parameters. The whole description is replayed through the fluent builders,
so the usual validation applies.
"""

import re
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field

from asyncapi_kit.builders.channel import ChannelBuilder
from asyncapi_kit.builders.document import DocumentBuilder
from asyncapi_kit.builders.message import MessageBuilder
from asyncapi_kit.builders.operation import OperationBuilder
from asyncapi_kit.document.models import DEFAULT_CONTENT_TYPE, ActionType, Document

from .example import ExampleGenerator
from .schema import schema_for_type


class ParameterDescription(BaseModel):
    """One parameter of an operation handler."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    schema_: dict[str, Any] = Field(default={"type": "string"}, alias="schema")
    type_name: str | None = None  # names the message when this is the only parameter
    required: bool = True
    exclude: bool = False


class MessageDescription(BaseModel):
    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    name: str | None = None
    title: str | None = None
    summary: str | None = None
    description: str | None = None
    content_type: str | None = None
    schema_: dict[str, Any] | None = Field(default=None, alias="schema")
    payload_type: Any = Field(default=None, exclude=True)  # Python type to infer the schema from
    tags: list[str] = []


class OperationDescription(BaseModel):
    channel: str
    action: ActionType
    operation_id: str | None = None
    handler: str | None = None  # e.g. "publish_light_measured_async"
    summary: str | None = None
    description: str | None = None
    tags: list[str] = []
    message: MessageDescription | None = None
    parameters: list[ParameterDescription] = []


class ChannelDescription(BaseModel):
    name: str
    address: str | None = None
    description: str | None = None


class ApiDescription(BaseModel):
    """Everything needed to generate one document."""

    id: str | None = None
    title: str
    version: str
    description: str | None = None
    license_name: str | None = None
    license_url: str | None = None
    terms_of_service_url: str | None = None
    contact_name: str | None = None
    contact_url: str | None = None
    contact_email: str | None = None
    channels: list[ChannelDescription] = []
    operations: list[OperationDescription] = []


class GenerationOptions(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    automatically_generate_examples: bool = True
    default_configuration: Callable[[DocumentBuilder], Any] | None = None


def camel_case(name: str) -> str:
    words = [w for w in re.split(r"[_\-\s]+", name) if w]
    if not words:
        return name
    first, rest = words[0], words[1:]
    return first[0].lower() + first[1:] + "".join(w[0].upper() + w[1:] for w in rest)


def split_camel_case(name: str) -> str:
    """``userSignedUp`` -> ``User Signed Up``."""
    spaced = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", " ", re.sub(r"[_\-]+", " ", name)).strip()
    return spaced[:1].upper() + spaced[1:]


def operation_id_for(operation: OperationDescription) -> str:
    if operation.operation_id:
        return operation.operation_id
    handler = operation.handler
    if not handler:
        raise ValueError(f"An operation on channel '{operation.channel}' needs an operation_id or a handler name")
    for suffix in ("_async", "Async"):
        if handler.endswith(suffix) and len(handler) > len(suffix):
            handler = handler[: -len(suffix)]
            break
    return camel_case(handler)


def _included_parameters(operation: OperationDescription) -> list[ParameterDescription]:
    return [p for p in operation.parameters if not p.exclude]


def message_name_for(operation: OperationDescription) -> str | None:
    message = operation.message
    if message is not None and message.name:
        return message.name
    if message is not None and message.payload_type is not None:
        return camel_case(getattr(message.payload_type, "__name__", str(message.payload_type)))
    parameters = _included_parameters(operation)
    if len(parameters) == 1:
        return parameters[0].type_name or parameters[0].schema_.get("title")
    return None


def message_schema_for(operation: OperationDescription) -> dict[str, Any]:
    message = operation.message
    if message is not None and message.schema_ is not None:
        return message.schema_
    if message is not None and message.payload_type is not None:
        return schema_for_type(message.payload_type)
    parameters = _included_parameters(operation)
    if len(parameters) == 1:
        return parameters[0].schema_
    schema: dict[str, Any] = {
        "type": "object",
        "properties": {p.name: p.schema_ for p in parameters},
    }
    required = [p.name for p in parameters if p.required]
    if required:
        schema["required"] = required
    return schema


class DocumentGenerator:
    """Generates documents from ApiDescription records."""

    def __init__(self, example_generator: ExampleGenerator | None = None):
        self.example_generator = example_generator or ExampleGenerator()

    def generate(self, descriptions: list[ApiDescription], options: GenerationOptions | None = None) -> list[Document]:
        if descriptions is None:
            raise ValueError("descriptions must not be None")
        return [self.generate_document(d, options) for d in descriptions]

    def generate_document(self, description: ApiDescription, options: GenerationOptions | None = None) -> Document:
        if description is None:
            raise ValueError("description must not be None")
        options = options or GenerationOptions()

        builder = DocumentBuilder()
        if options.default_configuration is not None:
            options.default_configuration(builder)
        self._configure_info(builder, description)

        channel_names = {c.name for c in description.channels}
        operation_ids: set[str] = set()
        for operation in description.operations:
            operation_id = operation_id_for(operation)
            if operation.channel not in channel_names:
                raise ValueError(f"The operation '{operation_id}' is not associated with a known channel.")
            if operation_id in operation_ids:
                raise ValueError(f"Duplicate operation id '{operation_id}'")
            if not message_name_for(operation):
                raise ValueError(f"Unable to infer a message name for operation '{operation_id}'")
            operation_ids.add(operation_id)

        for channel in description.channels:
            operations = [o for o in description.operations if o.channel == channel.name]
            builder.with_channel(
                channel.name,
                lambda b, channel=channel, operations=operations: self._configure_channel(b, channel, operations, options),
            )

        for operation in description.operations:
            builder.with_operation(
                operation_id_for(operation),
                lambda b, operation=operation: self._configure_operation(b, operation),
                operation.action,
            )

        return builder.build()

    def _configure_info(self, builder: DocumentBuilder, description: ApiDescription) -> None:
        builder.with_title(description.title).with_version(description.version)
        if description.id:
            builder.with_id(description.id)
        if description.description:
            builder.with_description(description.description)
        if description.license_name and description.license_url:
            builder.with_license(description.license_name, description.license_url)
        if description.terms_of_service_url:
            builder.with_terms_of_service(description.terms_of_service_url)
        if description.contact_name:
            builder.with_contact(description.contact_name, description.contact_url, description.contact_email)

    def _configure_channel(
        self,
        builder: ChannelBuilder,
        channel: ChannelDescription,
        operations: list[OperationDescription],
        options: GenerationOptions,
    ) -> None:
        builder.with_address(channel.address or channel.name).with_description(channel.description)
        for operation in operations:
            builder.with_message(
                message_name_for(operation),
                lambda b, operation=operation: self._configure_message(b, operation, options),
            )

    def _configure_message(self, builder: MessageBuilder, operation: OperationDescription, options: GenerationOptions) -> None:
        message = operation.message or MessageDescription()
        schema = message_schema_for(operation)
        name = message_name_for(operation)
        description = message.description
        builder.with_payload_schema(schema)
        builder.with_name(name)
        builder.with_title(message.title or split_camel_case(name))
        builder.with_summary(message.summary or description)
        builder.with_description(description)
        builder.with_content_type(message.content_type or DEFAULT_CONTENT_TYPE)
        for tag in message.tags:
            builder.with_tag(lambda t, tag=tag: t.with_name(tag))
        if options.automatically_generate_examples:
            for example in self.example_generator.generate_message_examples(schema):
                builder.with_example(example)

    def _configure_operation(self, builder: OperationBuilder, operation: OperationDescription) -> None:
        builder.with_description(operation.description)
        builder.with_summary(operation.summary or operation.description)
        builder.with_reference_to_channel(operation.channel)
        builder.with_reference_to_message(message_name_for(operation))
        for tag in operation.tags:
            builder.with_tag(lambda t, tag=tag: t.with_name(tag))
