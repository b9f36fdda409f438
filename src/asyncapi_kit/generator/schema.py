"""Read-only accessor over JSON Schema nodes.

Local ``$ref`` pointers (``#/$defs/...``, ``#/definitions/...``) are followed
against the root schema. A pointer that is already being expanded higher up
the tree reads as an empty schema, which keeps recursive models finite.
"""

from typing import Any

from pydantic import TypeAdapter


def schema_for_type(type_: Any) -> dict[str, Any]:
    """Infer a JSON Schema from a Python type (pydantic models included)."""
    if type_ is None:
        raise ValueError("type_ must not be None")
    return TypeAdapter(type_).json_schema()


def _resolve_pointer(root: Any, pointer: str) -> Any:
    node = root
    for token in pointer[2:].split("/") if pointer != "#" else []:
        token = token.replace("~1", "/").replace("~0", "~")
        if isinstance(node, dict) and token in node:
            node = node[token]
        elif isinstance(node, list) and token.isdigit() and int(token) < len(node):
            node = node[int(token)]
        else:
            return {}
    return node


def _is_null(branch: Any) -> bool:
    return isinstance(branch, dict) and branch.get("type") == "null"


def _count(value: Any) -> int | None:
    """Read an item count; integral floats such as ``2.0`` count as integers."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


class SchemaNode:
    """Uniform view of one schema node."""

    def __init__(self, schema: dict[str, Any] | bool, root: Any = None, seen: frozenset[str] = frozenset()):
        if schema is None:
            raise ValueError("schema must not be None")
        self.root = schema if root is None else root
        self._seen = seen
        self._schema = self._unwrap(schema)

    def _unwrap(self, schema: Any) -> dict[str, Any]:
        while True:
            if not isinstance(schema, dict):
                return {}
            ref = schema.get("$ref")
            if isinstance(ref, str) and ref.startswith("#"):
                if ref in self._seen:
                    return {}
                self._seen = self._seen | {ref}
                schema = _resolve_pointer(self.root, ref)
                continue
            if "type" not in schema:
                for keyword in ("anyOf", "oneOf", "allOf"):
                    branches = [b for b in schema.get(keyword) or [] if not _is_null(b)]
                    if branches and (keyword != "allOf" or len(branches) == 1):
                        schema = branches[0]
                        break
                else:
                    return schema
                continue
            return schema

    def _child(self, schema: Any) -> "SchemaNode":
        return SchemaNode(schema, self.root, self._seen)

    @property
    def raw(self) -> dict[str, Any]:
        return self._schema

    @property
    def has_const(self) -> bool:
        return "const" in self._schema

    @property
    def const(self) -> Any:
        return self._schema.get("const")

    @property
    def enum(self) -> list | None:
        return self._schema.get("enum")

    @property
    def examples(self) -> list | None:
        return self._schema.get("examples")

    @property
    def type(self) -> str | None:
        """Declared type with ``null`` removed from nullable unions."""
        declared = self._schema.get("type")
        if isinstance(declared, list):
            declared = next((t for t in declared if t != "null"), None)
        return None if declared == "null" else declared

    @property
    def format(self) -> str | None:
        return self._schema.get("format")

    @property
    def min_items(self) -> int | None:
        return _count(self._schema.get("minItems"))

    @property
    def max_items(self) -> int | None:
        return _count(self._schema.get("maxItems"))

    @property
    def properties(self) -> dict[str, "SchemaNode"] | None:
        properties = self._schema.get("properties")
        if not properties:
            return None
        return {name: self._child(schema) for name, schema in properties.items()}

    @property
    def required(self) -> list[str]:
        return list(self._schema.get("required") or [])

    @property
    def items(self) -> "SchemaNode | None":
        items = self._schema.get("items")
        if isinstance(items, list):
            items = items[0] if items else None
        return None if items is None else self._child(items)
