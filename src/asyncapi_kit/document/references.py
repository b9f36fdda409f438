"""Reference strings and their resolution against a document.

Grammar::

    #/channels/<channel>
    #/channels/<channel>/messages/<message>
    #/operations/<operation>
    #/components/<section>/<name>

Lookups always use the segment after the final ``/``.
"""

from typing import TYPE_CHECKING, Any

from pydantic.alias_generators import to_snake

if TYPE_CHECKING:
    from .models import Channel, Document, Message, Operation

CHANNELS_PREFIX = "#/channels/"
OPERATIONS_PREFIX = "#/operations/"
COMPONENTS_PREFIX = "#/components/"


class ChannelNotFoundError(LookupError):
    """Raised when an operation's channel cannot be found in the document."""

    def __init__(self, operation_id: str | None):
        super().__init__(f"Channel not found for operation {operation_id}.")
        self.operation_id = operation_id


def channel_reference(channel_name: str) -> str:
    return f"{CHANNELS_PREFIX}{channel_name}"


def message_reference(channel_ref: str, message_name: str) -> str:
    return f"{channel_ref}/messages/{message_name}"


def component_reference(section: str, name: str) -> str:
    return f"{COMPONENTS_PREFIX}{section}/{name}"


def reference_name(reference: str) -> str:
    """Return the substring strictly after the last ``/``."""
    return reference[reference.rfind("/") + 1:]


def find_operation_by_id(document: "Document", operation_id: str) -> tuple["Operation | None", str | None]:
    if not operation_id:
        raise ValueError("operation_id must not be empty")
    for operation in (document.operations or {}).values():
        if operation.operation_id == operation_id:
            channel_ref = operation.channel.reference if operation.channel else None
            return operation, reference_name(channel_ref) if channel_ref else None
    return None, None


def has_operation_with_id(document: "Document", operation_id: str) -> bool:
    if not operation_id:
        raise ValueError("operation_id must not be empty")
    return any(o.operation_id == operation_id for o in (document.operations or {}).values())


def resolve_channel_for_operation(document: "Document", operation: "Operation") -> "Channel | None":
    if operation is None:
        raise ValueError("operation must not be None")
    if operation.channel is None or operation.channel.reference is None:
        return None
    return (document.channels or {}).get(reference_name(operation.channel.reference))


def resolve_messages_for_operation(document: "Document", operation: "Operation") -> list["Message"]:
    """Resolve the operation's message references inside its channel.

    An unresolvable channel raises ChannelNotFoundError; message references
    that do not match a message of the channel are skipped.
    """
    if operation is None:
        raise ValueError("operation must not be None")
    channel = resolve_channel_for_operation(document, operation)
    if channel is None:
        raise ChannelNotFoundError(operation.operation_id)

    messages = []
    if not operation.messages or not channel.messages:
        return messages
    for ref in operation.messages:
        if ref.reference is None:
            continue
        message = channel.messages.get(reference_name(ref.reference))
        if message is not None:
            messages.append(message)
    return messages


def resolve_reference(document: "Document", reference: str) -> Any:
    """Resolve any supported reference string, or return None on a miss."""
    if not reference:
        raise ValueError("reference must not be empty")

    if reference.startswith(CHANNELS_PREFIX):
        segments = reference[len(CHANNELS_PREFIX):].split("/")
        channel = (document.channels or {}).get(segments[0])
        if len(segments) == 1 or channel is None:
            return channel
        if len(segments) == 3 and segments[1] == "messages":
            return (channel.messages or {}).get(segments[2])
        return None

    if reference.startswith(OPERATIONS_PREFIX):
        return (document.operations or {}).get(reference_name(reference))

    if reference.startswith(COMPONENTS_PREFIX):
        segments = reference[len(COMPONENTS_PREFIX):].split("/")
        if len(segments) != 2 or document.components is None:
            return None
        field = to_snake(segments[0])
        if field not in type(document.components).model_fields:
            return None
        return (getattr(document.components, field) or {}).get(segments[1])

    return None
