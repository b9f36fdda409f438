"""Synthesizes example values from JSON Schemas.

For every node the generator tries, in order: the declared ``const``, the
first ``enum`` value, the first of ``examples``, and finally a value built
from the declared type. Unknown or missing types produce no payload.
"""

import functools
import json
import random
import uuid
from datetime import datetime
from typing import Any

from asyncapi_kit.document.models import MessageExample

from .schema import SchemaNode

DEFAULT_ITEMS_COUNT = 3

STRING_FORMATS = {
    "duration": "PT1S",
    "email": "example@email.com",
    "hostname": "hostname.example.com",
    "ipv4": "192.168.0.1",
    "ipv6": "::ffff:192.168.0.1",
    "uri": "https://example-uri.com",
    "uri-reference": "/example/uri-reference",
    "uri-template": "/example/uri-{template}",
    "regex": "^[a-zA-Z0-9]",
    "regular-expression": "^[a-zA-Z0-9]",
    "uuid": str(uuid.UUID(int=0)),
}

_STRING_SCHEMA = SchemaNode({"type": "string"})


@functools.cache
def default_schema() -> SchemaNode:
    """Object schema used when an array or object declares nothing to work from."""
    return SchemaNode({
        "type": "object",
        "properties": {
            "property1": {"type": "string"},
            "property2": {"type": "integer"},
            "property3": {"type": "boolean"},
        },
    })


def _to_tree(value: Any) -> Any:
    """Normalize a generated value into plain JSON types."""
    return json.loads(json.dumps(value, default=str))


class ExampleGenerator:
    """Generates message examples from JSON Schemas.

    Pass a seeded ``random.Random`` for reproducible output.
    """

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def generate_example(
        self,
        schema: dict[str, Any] | SchemaNode,
        name: str | None = None,
        required_properties_only: bool = False,
        example_name: str | None = None,
        summary: str | None = None,
    ) -> MessageExample:
        """Generate one example whose payload conforms to ``schema``.

        ``example_name`` labels the example; ``name`` (the name of the schema
        being exemplified) is used when no label is given.
        """
        if schema is None:
            raise ValueError("schema must not be None")
        node = schema if isinstance(schema, SchemaNode) else SchemaNode(schema)
        return MessageExample(
            name=example_name or name,
            summary=summary,
            payload=self._generate(node, required_properties_only),
        )

    def generate_message_examples(self, schema: dict[str, Any] | SchemaNode) -> list[MessageExample]:
        """Return the ``Minimal`` (required properties only) and ``Extended`` examples."""
        return [
            self.generate_example(schema, required_properties_only=True, example_name="Minimal"),
            self.generate_example(schema, required_properties_only=False, example_name="Extended"),
        ]

    def _generate(self, node: SchemaNode, required_only: bool) -> Any:
        if node.has_const:
            return node.const
        if node.enum is not None:
            return node.enum[0] if node.enum else None
        if node.examples:
            return node.examples[0]

        handler = {
            "array": self._generate_array,
            "boolean": self._generate_boolean,
            "integer": self._generate_integer,
            "number": self._generate_number,
            "object": self._generate_object,
            "string": self._generate_string,
        }.get(node.type)
        if handler is None:
            return None
        return handler(node, required_only)

    def _generate_array(self, node: SchemaNode, required_only: bool) -> list:
        count = DEFAULT_ITEMS_COUNT
        if node.min_items is not None and node.min_items > 0:
            count = node.min_items
        # Only a small maximum lowers the count.
        if node.max_items is not None and node.max_items < 5:
            count = node.max_items
        item_schema = node.items or default_schema()
        return [self._generate(item_schema, required_only) for _ in range(count)]

    def _generate_boolean(self, node: SchemaNode, required_only: bool) -> bool:
        return self.rng.choice((True, False))

    def _generate_integer(self, node: SchemaNode, required_only: bool) -> int:
        return self.rng.randint(0, 100)

    def _generate_number(self, node: SchemaNode, required_only: bool) -> float:
        # Bounds come from minItems/maxItems, not minimum/maximum.
        low, high = 0, 10
        if node.min_items is not None and node.min_items > 0:
            low = node.min_items
        if node.max_items is not None and node.max_items < 5:
            high = node.max_items
        return round(self.rng.uniform(low, high), 2)

    def _generate_object(self, node: SchemaNode, required_only: bool) -> dict[str, Any]:
        properties = node.properties
        required = node.required
        if not properties:
            properties = default_schema().properties
            required = default_schema().required

        if required_only:
            properties = {key: schema for key, schema in properties.items() if key in required}
            if not properties:
                return {
                    f"property{i}": _to_tree(self._generate(_STRING_SCHEMA, False))
                    for i in range(1, 4)
                }

        example = {}
        for key, schema in properties.items():
            example[key] = _to_tree(self._generate(schema, required_only))
        return example

    def _generate_string(self, node: SchemaNode, required_only: bool) -> str:
        if node.format is None:
            return "string"
        if node.format == "date-time":
            return datetime.now().astimezone().isoformat()
        return STRING_FORMATS.get(node.format, "string")
