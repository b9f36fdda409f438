"""Structural validation rules for AsyncAPI entities.

Each ``validate_*`` function returns the list of failures found for one
entity, recursing into nested entities through their own validator. Nothing
short-circuits: every failing rule is reported.
"""

from collections import Counter
from typing import Any, Callable, Iterable

from pydantic import BaseModel

from asyncapi_kit.document.models import (
    Channel,
    Components,
    Document,
    Info,
    Message,
    MessageTrait,
    Operation,
    OperationReply,
    OperationTrait,
    Parameter,
    Server,
    ServerVariable,
    Tag,
)
from asyncapi_kit.document.references import reference_name

Validator = Callable[[Any], list["ValidationFailure"]]


class ValidationFailure(BaseModel):
    """A single failed rule, located by a dotted path."""

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}" if self.path else self.message


class DocumentValidationError(ValueError):
    """Raised at ``build()`` with every failure collected for the entity."""

    def __init__(self, failures: Iterable[ValidationFailure]):
        self.failures = list(failures)
        lines = "\n".join(f"  - {f}" for f in self.failures)
        super().__init__(f"Validation failed with {len(self.failures)} error(s):\n{lines}")


def _path(prefix: str, name: str) -> str:
    return f"{prefix}.{name}" if prefix else name


def _required(value: Any, path: str) -> list[ValidationFailure]:
    if value is None:
        return [ValidationFailure(path=path, message="is required")]
    return []


def _not_empty(value: Any, path: str) -> list[ValidationFailure]:
    if value is None:
        return _required(value, path)
    if isinstance(value, (str, dict, list)) and not value:
        return [ValidationFailure(path=path, message="must not be empty")]
    return []


def _each(items: dict | list | None, path: str, validator: Callable[..., list[ValidationFailure]]) -> list[ValidationFailure]:
    if not items:
        return []
    pairs = items.items() if isinstance(items, dict) else enumerate(items)
    failures = []
    for key, item in pairs:
        failures.extend(validator(item, _path(path, str(key))))
    return failures


def _reference_only(entity: BaseModel, path: str) -> list[ValidationFailure]:
    if entity.model_dump(exclude_none=True, exclude={"reference"}):
        return [ValidationFailure(path=_path(path, "$ref"), message="must not be combined with other fields")]
    return []


def validate_tag(tag: Tag, path: str = "") -> list[ValidationFailure]:
    return _not_empty(tag.name, _path(path, "name"))


def validate_info(info: Info, path: str = "") -> list[ValidationFailure]:
    failures = _not_empty(info.title, _path(path, "title"))
    failures += _not_empty(info.version, _path(path, "version"))
    failures += _each(info.tags, _path(path, "tags"), validate_tag)
    return failures


def validate_server_variable(variable: ServerVariable, path: str = "") -> list[ValidationFailure]:
    if variable.default is not None and variable.enum and variable.default not in variable.enum:
        return [ValidationFailure(path=_path(path, "default"), message=f"'{variable.default}' is not one of {variable.enum}")]
    return []


def validate_server(server: Server, path: str = "") -> list[ValidationFailure]:
    if server.reference is not None:
        return _reference_only(server, path)
    failures = _not_empty(server.host, _path(path, "host"))
    failures += _not_empty(server.protocol, _path(path, "protocol"))
    failures += _each(server.variables, _path(path, "variables"), validate_server_variable)
    return failures


def validate_parameter(parameter: Parameter, path: str = "") -> list[ValidationFailure]:
    if parameter.reference is not None:
        return _reference_only(parameter, path)
    return _not_empty(parameter.location, _path(path, "location"))


def validate_message_trait(trait: MessageTrait, path: str = "") -> list[ValidationFailure]:
    if trait.reference is not None:
        return _reference_only(trait, path)
    failures = []
    if trait.correlation_id is not None:
        failures += _not_empty(trait.correlation_id.location, _path(path, "correlationId.location"))
    failures += _each(trait.tags, _path(path, "tags"), validate_tag)
    return failures


def validate_message(message: Message, path: str = "") -> list[ValidationFailure]:
    if message.reference is not None:
        return _reference_only(message, path)
    failures = _required(message.payload, _path(path, "payload"))
    if message.correlation_id is not None:
        failures += _not_empty(message.correlation_id.location, _path(path, "correlationId.location"))
    failures += _each(message.tags, _path(path, "tags"), validate_tag)
    failures += _each(message.traits, _path(path, "traits"), validate_message_trait)
    return failures


def validate_channel(channel: Channel, path: str = "") -> list[ValidationFailure]:
    if channel.reference is not None:
        return _reference_only(channel, path)
    failures = _each(channel.messages, _path(path, "messages"), validate_message)
    failures += _each(channel.parameters, _path(path, "parameters"), validate_parameter)
    failures += _each(channel.tags, _path(path, "tags"), validate_tag)
    return failures


def _references(refs: list | None, path: str) -> list[ValidationFailure]:
    failures = []
    for index, ref in enumerate(refs or []):
        failures += _not_empty(ref.reference, _path(path, f"{index}.$ref"))
    return failures


def validate_operation_reply(reply: OperationReply, path: str = "") -> list[ValidationFailure]:
    failures = []
    if reply.reference is None and reply.channel is None:
        failures.append(ValidationFailure(path=_path(path, "channel"), message="is required"))
    if reply.reference is None and reply.address is not None and reply.address.reference is None:
        failures += _not_empty(reply.address.location, _path(path, "address.location"))
    if reply.reference is not None and (reply.channel is not None or reply.address is not None):
        failures.append(ValidationFailure(path=_path(path, "$ref"), message="must not be set together with channel or address"))
    failures += _references(reply.messages, _path(path, "messages"))
    return failures


def validate_operation_trait(trait: OperationTrait, path: str = "") -> list[ValidationFailure]:
    if trait.reference is not None:
        return _reference_only(trait, path)
    return _each(trait.tags, _path(path, "tags"), validate_tag)


def validate_operation(operation: Operation, path: str = "", top_level: bool = True) -> list[ValidationFailure]:
    failures = _required(operation.action, _path(path, "action"))
    if top_level:
        failures += _not_empty(operation.channel.reference if operation.channel else None, _path(path, "channel.$ref"))
    failures += _references(operation.messages, _path(path, "messages"))
    failures += _each(operation.tags, _path(path, "tags"), validate_tag)
    failures += _each(operation.traits, _path(path, "traits"), validate_operation_trait)
    if operation.reply is not None:
        failures += validate_operation_reply(operation.reply, _path(path, "reply"))
    return failures


def validate_components(components: Components, path: str = "") -> list[ValidationFailure]:
    failures = _each(components.servers, _path(path, "servers"), validate_server)
    failures += _each(components.server_variables, _path(path, "serverVariables"), validate_server_variable)
    failures += _each(components.channels, _path(path, "channels"), validate_channel)
    failures += _each(
        components.operations,
        _path(path, "operations"),
        lambda operation, p: validate_operation(operation, p, top_level=False),
    )
    failures += _each(components.messages, _path(path, "messages"), validate_message)
    failures += _each(components.parameters, _path(path, "parameters"), validate_parameter)
    failures += _each(components.replies, _path(path, "replies"), validate_operation_reply)
    failures += _each(components.tags, _path(path, "tags"), validate_tag)
    failures += _each(components.operation_traits, _path(path, "operationTraits"), validate_operation_trait)
    failures += _each(components.message_traits, _path(path, "messageTraits"), validate_message_trait)
    return failures


def validate_document(document: Document, path: str = "") -> list[ValidationFailure]:
    failures = _not_empty(document.spec_version, _path(path, "asyncapi"))
    if document.info is None:
        failures.append(ValidationFailure(path=_path(path, "info"), message="is required"))
    else:
        failures += validate_info(document.info, _path(path, "info"))

    failures += _not_empty(document.channels, _path(path, "channels"))
    failures += _each(document.channels, _path(path, "channels"), validate_channel)

    failures += _not_empty(document.operations, _path(path, "operations"))
    failures += _each(document.operations, _path(path, "operations"), validate_operation)

    channels = document.channels or {}
    for name, operation in (document.operations or {}).items():
        ref = operation.channel.reference if operation.channel else None
        if ref and reference_name(ref) not in channels:
            failures.append(ValidationFailure(
                path=_path(path, f"operations.{name}.channel.$ref"),
                message=f"'{ref}' does not resolve to a channel of the document",
            ))

    ids = Counter(o.operation_id for o in (document.operations or {}).values() if o.operation_id)
    for operation_id, count in ids.items():
        if count > 1:
            failures.append(ValidationFailure(
                path=_path(path, "operations"),
                message=f"operationId '{operation_id}' is used by {count} operations",
            ))

    failures += _each(document.servers, _path(path, "servers"), validate_server)
    failures += validate_components(document.components or Components(), _path(path, "components"))
    return failures


VALIDATORS: dict[type, list[Validator]] = {
    Document: [validate_document],
    Info: [validate_info],
    Tag: [validate_tag],
    Server: [validate_server],
    ServerVariable: [validate_server_variable],
    Channel: [validate_channel],
    Parameter: [validate_parameter],
    Message: [validate_message],
    MessageTrait: [validate_message_trait],
    Operation: [validate_operation],
    OperationTrait: [validate_operation_trait],
    OperationReply: [validate_operation_reply],
    Components: [validate_components],
}


def validators_for(entity_type: type) -> list[Validator]:
    """Return the validators registered for an entity type."""
    return list(VALIDATORS.get(entity_type, []))


def ensure_valid(entity: Any, validators: Iterable[Validator]) -> Any:
    """Run every validator; raise one DocumentValidationError with all failures."""
    failures: list[ValidationFailure] = []
    for validator in validators:
        failures.extend(validator(entity))
    if failures:
        raise DocumentValidationError(failures)
    return entity
