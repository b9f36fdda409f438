"""Protocol binding collections.

Bindings are opaque, protocol-tagged payloads attached to servers, channels,
operations and messages. A collection holds at most one binding per protocol
and always enumerates them in the fixed protocol order below.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, model_serializer, model_validator


class Protocol(str, Enum):
    """Protocols a binding may target, in enumeration order."""

    HTTP = "http"
    WS = "ws"
    KAFKA = "kafka"
    ANYPOINTMQ = "anypointmq"
    AMQP = "amqp"
    AMQP1 = "amqp1"
    MQTT = "mqtt"
    MQTT5 = "mqtt5"
    NATS = "nats"
    JMS = "jms"
    SNS = "sns"
    SOLACE = "solace"
    SQS = "sqs"
    STOMP = "stomp"
    REDIS = "redis"
    MERCURE = "mercure"
    IBMMQ = "ibmmq"
    GOOGLEPUBSUB = "googlepubsub"
    PULSAR = "pulsar"


PROTOCOL_ORDER = list(Protocol)


class Binding(BaseModel):
    """A single protocol-specific binding. Its properties are not interpreted."""

    protocol: Protocol
    binding_version: str | None = None
    properties: dict[str, Any] = {}


class BindingCollection(BaseModel):
    """At most one binding per protocol.

    Serialized as ``{protocol: {"bindingVersion": ..., **properties}}``.
    """

    bindings: dict[Protocol, Binding] = {}

    @model_validator(mode="before")
    @classmethod
    def _from_wire(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "bindings" in data:
            return data
        bindings = {}
        for key, value in data.items():
            protocol = Protocol(key)
            if isinstance(value, Binding):
                bindings[protocol] = value
                continue
            value = dict(value or {})
            version = value.pop("bindingVersion", None)
            bindings[protocol] = Binding(protocol=protocol, binding_version=version, properties=value)
        return {"bindings": bindings}

    @model_serializer
    def _to_wire(self) -> dict[str, Any]:
        result = {}
        for binding in self.as_enumerable():
            body = {}
            if binding.binding_version is not None:
                body["bindingVersion"] = binding.binding_version
            body.update(binding.properties)
            result[binding.protocol.value] = body
        return result

    def add(self, binding: Binding) -> None:
        """Store a binding, replacing any existing one for the same protocol."""
        if not isinstance(binding, Binding):
            raise TypeError(f"binding must be a Binding, got {type(binding).__name__}")
        self.bindings[binding.protocol] = binding

    def get(self, protocol: Protocol | str) -> Binding | None:
        return self.bindings.get(Protocol(protocol))

    def as_enumerable(self) -> list[Binding]:
        """Return the populated slots in protocol order."""
        return [self.bindings[p] for p in PROTOCOL_ORDER if p in self.bindings]

    def __len__(self) -> int:
        return len(self.bindings)


class ServerBindings(BindingCollection):
    """Bindings attached to a server."""


class ChannelBindings(BindingCollection):
    """Bindings attached to a channel."""


class OperationBindings(BindingCollection):
    """Bindings attached to an operation or operation trait."""


class MessageBindings(BindingCollection):
    """Bindings attached to a message or message trait."""
