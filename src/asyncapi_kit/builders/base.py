"""Shared plumbing for the fluent builders.

A builder owns one staging instance of its entity. ``with_*`` setters write
into it and return the builder; ``build()`` runs every registered validator
and returns the staged instance, which callers must treat as immutable.
Builders are single-use and not thread-safe.
"""

from typing import Any, Callable, Generic, Iterable, TypeVar

from pydantic import BaseModel

from asyncapi_kit.document.bindings import Binding, BindingCollection
from asyncapi_kit.document.models import ExternalDocumentation
from asyncapi_kit.validation.validators import Validator, ensure_valid, validators_for

T = TypeVar("T", bound=BaseModel)


class InvalidOperationError(RuntimeError):
    """Raised when a builder call needs state that has not been set yet."""


def require(value: Any, name: str) -> Any:
    """Reject None and blank strings, naming the offending argument."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError(f"{name} must not be empty")
    return value


class EntityBuilder(Generic[T]):
    """Base class of every builder."""

    entity_type: type[T]

    def __init__(self, validators: Iterable[Validator] | None = None):
        self._validators = list(validators) if validators is not None else validators_for(self.entity_type)
        self._entity = self.entity_type()

    def build(self) -> T:
        return ensure_valid(self._entity, self._validators)

    # -- helpers --------------------------------------------------------------

    def _build_child(self, builder_type: type["EntityBuilder"], setup: Callable[[Any], Any]) -> Any:
        require(setup, "setup")
        builder = builder_type()
        setup(builder)
        return builder.build()

    def _set_item(self, field: str, key: str, value: Any) -> None:
        mapping = getattr(self._entity, field)
        if mapping is None:
            mapping = {}
            setattr(self._entity, field, mapping)
        mapping[key] = value

    def _append(self, field: str, value: Any) -> None:
        items = getattr(self._entity, field)
        if items is None:
            items = []
            setattr(self._entity, field, items)
        items.append(value)

    def _add_binding(self, collection_type: type[BindingCollection], binding: Binding) -> None:
        require(binding, "binding")
        if self._entity.bindings is None:
            self._entity.bindings = collection_type()
        self._entity.bindings.add(binding)

    def _external_docs(self, url: str, description: str | None) -> ExternalDocumentation:
        return ExternalDocumentation(url=require(url, "url"), description=description)
