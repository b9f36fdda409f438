"""Builders for messages and message traits."""

from typing import Any, Callable, TypeVar

from asyncapi_kit.document.bindings import Binding, MessageBindings
from asyncapi_kit.document.models import CorrelationId, Message, MessageExample, MessageTrait, MultiFormatSchema
from asyncapi_kit.generator.schema import schema_for_type

from .base import EntityBuilder, require
from .tag import TagBuilder

MessageT = TypeVar("MessageT", Message, MessageTrait)


class _MessageFieldsBuilder(EntityBuilder[MessageT]):
    """Setters shared by messages and message traits."""

    def with_name(self, name: str):
        self._entity.name = name
        return self

    def with_title(self, title: str | None):
        self._entity.title = title
        return self

    def with_summary(self, summary: str | None):
        self._entity.summary = summary
        return self

    def with_description(self, description: str | None):
        self._entity.description = description
        return self

    def with_content_type(self, content_type: str | None):
        self._entity.content_type = content_type
        return self

    def with_headers(self, schema: dict[str, Any]):
        self._entity.headers = require(schema, "schema")
        return self

    def with_headers_of_type(self, type_: Any):
        return self.with_headers(schema_for_type(type_))

    def with_correlation_id(self, location: str, description: str | None = None):
        self._entity.correlation_id = CorrelationId(location=require(location, "location"), description=description)
        return self

    def with_tag(self, setup: Callable[[TagBuilder], Any]):
        self._append("tags", self._build_child(TagBuilder, setup))
        return self

    def with_external_documentation(self, url: str, description: str | None = None):
        self._entity.external_docs = self._external_docs(url, description)
        return self

    def with_binding(self, binding: Binding):
        self._add_binding(MessageBindings, binding)
        return self

    def with_example(self, example: MessageExample):
        self._append("examples", require(example, "example"))
        return self


class MessageTraitBuilder(_MessageFieldsBuilder[MessageTrait]):
    entity_type = MessageTrait


class MessageBuilder(_MessageFieldsBuilder[Message]):
    entity_type = Message

    def with_payload_schema(self, schema: dict[str, Any]):
        self._entity.payload = require(schema, "schema")
        return self

    def with_payload_of_type(self, type_: Any):
        """Infer the payload schema from a Python type, e.g. a pydantic model."""
        return self.with_payload_schema(schema_for_type(type_))

    def with_multi_format_payload(self, schema_format: str, schema: Any):
        self._entity.payload = MultiFormatSchema(
            schema_format=require(schema_format, "schema_format"),
            schema_=require(schema, "schema"),
        )
        return self

    def with_trait(self, setup: Callable[[MessageTraitBuilder], Any]):
        self._append("traits", self._build_child(MessageTraitBuilder, setup))
        return self


CLOUD_EVENTS_CONTENT_TYPE = "application/cloudevents+json"
CLOUD_EVENTS_SPEC_VERSION = "1.0"


class CloudEventMessageBuilder(MessageBuilder):
    """Builds a message whose payload is a structured-mode CloudEvent envelope.

    The envelope schema is assembled at ``build()`` from the event type, the
    source and the schema of the ``data`` attribute.
    """

    def __init__(self, validators=None):
        super().__init__(validators)
        self._event_type = None
        self._source = None
        self._data_schema = None

    def with_event_type(self, event_type: str) -> "CloudEventMessageBuilder":
        self._event_type = require(event_type, "event_type")
        return self

    def with_source(self, source: str) -> "CloudEventMessageBuilder":
        self._source = require(source, "source")
        return self

    def with_data_schema(self, schema: dict[str, Any]) -> "CloudEventMessageBuilder":
        self._data_schema = require(schema, "schema")
        return self

    def with_data_of_type(self, type_: Any) -> "CloudEventMessageBuilder":
        return self.with_data_schema(schema_for_type(type_))

    def _envelope(self) -> dict[str, Any]:
        properties: dict[str, Any] = {
            "specversion": {"type": "string", "const": CLOUD_EVENTS_SPEC_VERSION},
            "id": {"type": "string"},
            "source": {"type": "string", "format": "uri-reference"},
            "type": {"type": "string"},
            "time": {"type": "string", "format": "date-time"},
            "datacontenttype": {"type": "string"},
        }
        if self._source is not None:
            properties["source"]["const"] = self._source
        if self._event_type is not None:
            properties["type"]["const"] = self._event_type
        if self._data_schema is not None:
            properties["data"] = self._data_schema
        return {
            "type": "object",
            "properties": properties,
            "required": ["specversion", "id", "source", "type"],
        }

    def build(self) -> Message:
        self._entity.payload = self._envelope()
        if self._entity.content_type is None:
            self._entity.content_type = CLOUD_EVENTS_CONTENT_TYPE
        return super().build()
