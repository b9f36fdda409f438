"""Trait merging for operations and messages.

Traits are folded in list order with JSON merge patch semantics, so a later
trait overrides an earlier one. The entity's own fields are applied last and
therefore win over every trait. Unset (None) fields never delete anything.
"""

from typing import Any

from .models import Document, Message, MessageTrait, Operation, OperationTrait


def merge_patch(target: dict[str, Any], patch: dict[str, Any]) -> dict[str, Any]:
    """Return ``target`` with ``patch`` merged in. Nested dicts merge recursively."""
    result = dict(target)
    for key, value in patch.items():
        if value is None:
            continue
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = merge_patch(result[key], value)
        else:
            result[key] = value
    return result


def _resolve_trait(trait: OperationTrait | MessageTrait, document: Document | None) -> OperationTrait | MessageTrait:
    if trait.reference is None:
        return trait
    resolved = document.resolve_reference(trait.reference) if document is not None else None
    if not isinstance(resolved, type(trait)):
        raise LookupError(f"Trait reference '{trait.reference}' cannot be resolved")
    return resolved


def _fold(entity: Operation | Message, document: Document | None) -> dict[str, Any]:
    merged: dict[str, Any] = {}
    for trait in entity.traits or []:
        trait = _resolve_trait(trait, document)
        merged = merge_patch(merged, trait.model_dump(by_alias=True, exclude_none=True, exclude={"reference"}))
    own = entity.model_dump(by_alias=True, exclude_none=True, exclude={"traits"})
    return merge_patch(merged, own)


def apply_operation_traits(operation: Operation, document: Document | None = None) -> Operation:
    """Return a new operation with its traits merged in and ``traits`` cleared.

    Traits given as ``$ref`` are looked up in ``document``; one that cannot be
    resolved raises LookupError.
    """
    return Operation.model_validate(_fold(operation, document))


def apply_message_traits(message: Message, document: Document | None = None) -> Message:
    """Return a new message with its traits merged in and ``traits`` cleared."""
    return Message.model_validate(_fold(message, document))
