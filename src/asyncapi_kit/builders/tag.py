"""Tag builder, shared by documents, channels, operations and messages."""

from asyncapi_kit.document.models import Tag

from .base import EntityBuilder


class TagBuilder(EntityBuilder[Tag]):
    entity_type = Tag

    def with_name(self, name: str) -> "TagBuilder":
        self._entity.name = name
        return self

    def with_description(self, description: str | None) -> "TagBuilder":
        self._entity.description = description
        return self

    def with_external_documentation(self, url: str, description: str | None = None) -> "TagBuilder":
        self._entity.external_docs = self._external_docs(url, description)
        return self
