"""Top-level builder for AsyncAPI documents."""

from typing import Any, Callable

from asyncapi_kit.document.models import ActionType, Contact, Document, Info, License

from .base import EntityBuilder, require
from .channel import ChannelBuilder
from .components import ComponentsBuilder
from .operation import OperationBuilder
from .server import ServerBuilder
from .tag import TagBuilder


class DocumentBuilder(EntityBuilder[Document]):
    """Builds a Document top-down: info, servers, channels, then operations."""

    entity_type = Document

    def __init__(self, validators=None):
        super().__init__(validators)
        self._entity.info = Info()

    # -- info -----------------------------------------------------------------

    def with_spec_version(self, version: str) -> "DocumentBuilder":
        self._entity.spec_version = require(version, "version")
        return self

    def with_id(self, document_id: str) -> "DocumentBuilder":
        self._entity.id = require(document_id, "document_id")
        return self

    def with_title(self, title: str) -> "DocumentBuilder":
        self._entity.info.title = require(title, "title")
        return self

    def with_version(self, version: str) -> "DocumentBuilder":
        self._entity.info.version = require(version, "version")
        return self

    def with_description(self, description: str | None) -> "DocumentBuilder":
        self._entity.info.description = description
        return self

    def with_terms_of_service(self, url: str) -> "DocumentBuilder":
        self._entity.info.terms_of_service = require(url, "url")
        return self

    def with_contact(self, name: str, url: str | None = None, email: str | None = None) -> "DocumentBuilder":
        self._entity.info.contact = Contact(name=require(name, "name"), url=url, email=email)
        return self

    def with_license(self, name: str, url: str | None = None) -> "DocumentBuilder":
        self._entity.info.license = License(name=require(name, "name"), url=url)
        return self

    def with_tag(self, setup: Callable[[TagBuilder], Any]) -> "DocumentBuilder":
        tag = self._build_child(TagBuilder, setup)
        if self._entity.info.tags is None:
            self._entity.info.tags = []
        self._entity.info.tags.append(tag)
        return self

    def with_external_documentation(self, url: str, description: str | None = None) -> "DocumentBuilder":
        self._entity.info.external_docs = self._external_docs(url, description)
        return self

    def with_default_content_type(self, content_type: str) -> "DocumentBuilder":
        self._entity.default_content_type = require(content_type, "content_type")
        return self

    # -- collections ----------------------------------------------------------

    def with_server(self, name: str, setup: Callable[[ServerBuilder], Any]) -> "DocumentBuilder":
        require(name, "name")
        self._set_item("servers", name, self._build_child(ServerBuilder, setup))
        return self

    def with_channel(self, name: str, setup: Callable[[ChannelBuilder], Any]) -> "DocumentBuilder":
        require(name, "name")
        self._set_item("channels", name, self._build_child(ChannelBuilder, setup))
        return self

    def with_operation(
        self,
        name: str,
        setup: Callable[[OperationBuilder], Any],
        action: ActionType | None = None,
    ) -> "DocumentBuilder":
        """Add an operation keyed by ``name``; its operation id defaults to ``name``."""
        require(name, "name")
        require(setup, "setup")

        def configure(builder: OperationBuilder) -> None:
            builder.with_operation_id(name)
            if action is not None:
                builder.with_action(action)
            setup(builder)

        self._set_item("operations", name, self._build_child(OperationBuilder, configure))
        return self

    def with_send_operation(self, name: str, setup: Callable[[OperationBuilder], Any]) -> "DocumentBuilder":
        return self.with_operation(name, setup, ActionType.SEND)

    def with_receive_operation(self, name: str, setup: Callable[[OperationBuilder], Any]) -> "DocumentBuilder":
        return self.with_operation(name, setup, ActionType.RECEIVE)

    def with_components(self, setup: Callable[[ComponentsBuilder], Any]) -> "DocumentBuilder":
        self._entity.components = self._build_child(ComponentsBuilder, setup)
        return self
