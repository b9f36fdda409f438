import pytest
from pydantic import BaseModel

from asyncapi_kit.builders.base import InvalidOperationError
from asyncapi_kit.builders.channel import ChannelBuilder
from asyncapi_kit.builders.components import ComponentsBuilder
from asyncapi_kit.builders.document import DocumentBuilder
from asyncapi_kit.builders.message import MessageBuilder
from asyncapi_kit.builders.operation import OperationBuilder, OperationReplyBuilder
from asyncapi_kit.builders.server import ServerBuilder
from asyncapi_kit.document.bindings import Binding, Protocol
from asyncapi_kit.document.models import ActionType, Message, MessageExample, MultiFormatSchema
from asyncapi_kit.validation.validators import DocumentValidationError, ValidationFailure


class LightMeasured(BaseModel):
    id: int
    lumens: int
    sent_at: str | None = None


def _streetlights() -> DocumentBuilder:
    return (
        DocumentBuilder()
        .with_id("urn:example:streetlights")
        .with_title("Streetlights API")
        .with_version("1.0.0")
        .with_description("Remotely manage the city lights.")
        .with_license("Apache 2.0", "https://www.apache.org/licenses/LICENSE-2.0")
        .with_contact("Lights team", email="lights@example.com")
        .with_terms_of_service("https://example.com/terms")
        .with_tag(lambda t: t.with_name("lights").with_description("Streetlight operations"))
        .with_external_documentation("https://example.com/docs")
        .with_default_content_type("application/json")
        .with_server("production", lambda s: s
            .with_host("{region}.mqtt.example.com")
            .with_pathname("/v1")
            .with_protocol("mqtt", "5")
            .with_variable("region", lambda v: v.with_default_value("eu").with_enum_values(["eu", "us"]))
            .with_security_requirement("apiKey")
            .with_binding(Binding(protocol=Protocol.MQTT, binding_version="0.2.0", properties={"clientId": "guest"})))
        .with_channel("lightMeasured", lambda c: c
            .with_address("smartylighting/streetlights/{streetlightId}/lighting/measured")
            .with_title("Light measured")
            .with_server("production")
            .with_parameter("streetlightId", lambda p: p
                .with_location("$message.payload#/id")
                .with_description("The ID of the streetlight."))
            .with_message("lightMeasured", lambda m: m
                .with_payload_of_type(LightMeasured)
                .with_content_type("application/json")
                .with_correlation_id("$message.header#/correlationId")
                .with_example(MessageExample(name="Sample", payload={"id": 1, "lumens": 3}))))
        .with_receive_operation("receiveLightMeasurement", lambda o: o
            .with_summary("Inform about environmental lighting conditions.")
            .with_reference_to_channel("lightMeasured")
            .with_reference_to_message("lightMeasured")
            .with_tag(lambda t: t.with_name("measurement")))
    )


class TestDocumentBuilder:
    def test_full_document(self):
        document = _streetlights().build()

        assert document.id == "urn:example:streetlights"
        assert document.info.title == "Streetlights API"
        assert document.info.license.name == "Apache 2.0"
        assert document.info.contact.email == "lights@example.com"
        assert document.info.tags[0].name == "lights"
        assert document.default_content_type == "application/json"

        server = document.servers["production"]
        assert server.protocol_version == "5"
        assert server.interpolate_url_variables() == "mqtt://eu.mqtt.example.com/v1"
        assert server.bindings.get(Protocol.MQTT).properties == {"clientId": "guest"}

        channel = document.channels["lightMeasured"]
        assert channel.servers[0].reference == "#/servers/production"
        assert channel.parameters["streetlightId"].location == "$message.payload#/id"
        message = channel.messages["lightMeasured"]
        assert set(message.payload["properties"]) == {"id", "lumens", "sent_at"}
        assert message.examples[0].payload == {"id": 1, "lumens": 3}

        operation = document.operations["receiveLightMeasurement"]
        assert operation.operation_id == "receiveLightMeasurement"
        assert operation.action == ActionType.RECEIVE
        assert operation.channel.reference == "#/channels/lightMeasured"
        assert operation.messages[0].reference == "#/channels/lightMeasured/messages/lightMeasured"
        assert document.resolve_messages_for_operation(operation) == [message]

    def test_explicit_operation_id(self):
        document = (
            _streetlights()
            .with_send_operation("turnOn", lambda o: o
                .with_operation_id("turnOnStreetlight")
                .with_reference_to_channel("lightMeasured"))
            .build()
        )
        assert document.operations["turnOn"].operation_id == "turnOnStreetlight"
        assert document.operations["turnOn"].action == ActionType.SEND

    def test_missing_channels_fails_at_build(self):
        builder = DocumentBuilder().with_title("Empty").with_version("1.0.0")
        with pytest.raises(DocumentValidationError) as exc_info:
            builder.build()
        assert {"channels", "operations"} <= {f.path for f in exc_info.value.failures}

    def test_child_failures_surface_when_added(self):
        with pytest.raises(DocumentValidationError, match="payload"):
            DocumentBuilder().with_channel("lights", lambda c: c.with_message("m", lambda m: m.with_title("No payload")))

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_blank_names_rejected(self, name):
        with pytest.raises(ValueError):
            DocumentBuilder().with_channel(name, lambda c: c)

    def test_missing_setup_rejected(self):
        with pytest.raises(ValueError):
            DocumentBuilder().with_server("production", None)

    def test_blank_title_rejected(self):
        with pytest.raises(ValueError):
            DocumentBuilder().with_title("")

    def test_components(self):
        document = (
            _streetlights()
            .with_components(lambda c: c
                .with_schema("LightMeasured", {"type": "object"})
                .with_message("lightOff", lambda m: m.with_payload_schema({"type": "string"}))
                .with_reply_address("replyTo", "$message.header#/replyTo")
                .with_message_trait("commonHeaders", lambda t: t.with_headers({"type": "object"}))
                .with_operation_trait("kafka", lambda t: t.with_summary("Kafka defaults"))
                .with_security_scheme("apiKey", {"type": "apiKey", "in": "user"}))
            .build()
        )
        assert document.resolve_reference("#/components/schemas/LightMeasured") == {"type": "object"}
        assert document.resolve_reference("#/components/replyAddresses/replyTo").location == "$message.header#/replyTo"
        assert document.resolve_reference("#/components/messageTraits/commonHeaders").headers == {"type": "object"}
        assert document.resolve_reference("#/components/operationTraits/kafka").summary == "Kafka defaults"


class TestChannelBuilder:
    def test_first_message_per_name_wins(self):
        channel = (
            ChannelBuilder()
            .with_message("lightOn", lambda m: m.with_title("first").with_payload_schema({"type": "string"}))
            .with_message("lightOn", lambda m: m.with_title("second").with_payload_schema({"type": "string"}))
            .build()
        )
        assert len(channel.messages) == 1
        assert channel.messages["lightOn"].title == "first"

    def test_message_keyed_by_its_own_name(self):
        channel = ChannelBuilder().with_message(None, lambda m: m.with_name("lightOff").with_payload_schema({})).build()
        assert list(channel.messages) == ["lightOff"]

    def test_message_without_any_name(self):
        with pytest.raises(ValueError):
            ChannelBuilder().with_message(None, lambda m: m.with_payload_schema({}))

    def test_message_reference(self):
        channel = ChannelBuilder().with_message_reference("lightOff", "turnOff").build()
        assert channel.messages["lightOff"].reference == "#/components/messages/turnOff"

    def test_later_parameter_replaces_earlier(self):
        channel = (
            ChannelBuilder()
            .with_parameter("id", lambda p: p.with_location("$message.payload#/a"))
            .with_parameter("id", lambda p: p.with_location("$message.payload#/b"))
            .build()
        )
        assert channel.parameters["id"].location == "$message.payload#/b"

    def test_custom_validators(self):
        def no_address(channel):
            return [] if channel.address else [ValidationFailure(path="address", message="is required")]

        with pytest.raises(DocumentValidationError):
            ChannelBuilder(validators=[no_address]).build()
        assert ChannelBuilder(validators=[]).build().address is None


class TestCloudEventMessages:
    def test_envelope_payload(self):
        channel = (
            ChannelBuilder()
            .with_cloud_event_message("lightMeasured", lambda m: m
                .with_event_type("io.smartylighting.light.measured")
                .with_source("/streetlights/1")
                .with_data_of_type(LightMeasured))
            .build()
        )
        message = channel.messages["lightMeasured"]
        assert message.content_type == "application/cloudevents+json"
        assert message.payload["required"] == ["specversion", "id", "source", "type"]
        properties = message.payload["properties"]
        assert properties["type"]["const"] == "io.smartylighting.light.measured"
        assert properties["source"]["const"] == "/streetlights/1"
        assert set(properties["data"]["properties"]) == {"id", "lumens", "sent_at"}

    def test_explicit_content_type_kept(self):
        channel = (
            ChannelBuilder()
            .with_cloud_event_message(None, lambda m: m.with_name("lightOff").with_content_type("application/json"))
            .build()
        )
        message = channel.messages["lightOff"]
        assert message.content_type == "application/json"
        assert "data" not in message.payload["properties"]

    def test_first_message_wins(self):
        channel = (
            ChannelBuilder()
            .with_message("lightOn", lambda m: m.with_payload_schema({"type": "string"}))
            .with_cloud_event_message("lightOn", lambda m: m.with_event_type("ignored"))
            .build()
        )
        assert channel.messages["lightOn"].payload == {"type": "string"}

    def test_blank_event_type(self):
        with pytest.raises(ValueError):
            ChannelBuilder().with_cloud_event_message("m", lambda m: m.with_event_type(""))


class TestOperationBuilder:
    def test_message_reference_requires_channel(self):
        with pytest.raises(InvalidOperationError):
            OperationBuilder().with_reference_to_message("lightOn")

    def test_action_from_string(self):
        operation = OperationBuilder().with_action("send").with_reference_to_channel("lights").build()
        assert operation.action == ActionType.SEND

    def test_invalid_action(self):
        with pytest.raises(ValueError):
            OperationBuilder().with_action("publish")

    def test_traits_and_reply(self):
        operation = (
            OperationBuilder()
            .with_action(ActionType.SEND)
            .with_reference_to_channel("lights")
            .with_trait(lambda t: t.with_summary("shared").with_binding(Binding(protocol=Protocol.KAFKA)))
            .with_reply(lambda r: r
                .with_channel_reference("replies")
                .with_message_reference("ack", "replies")
                .with_address("$message.header#/replyTo"))
            .build()
        )
        assert operation.traits[0].summary == "shared"
        assert operation.traits[0].bindings.get(Protocol.KAFKA) is not None
        assert operation.reply.channel.reference == "#/channels/replies"
        assert operation.reply.messages[0].reference == "#/channels/replies/messages/ack"
        assert operation.reply.address.location == "$message.header#/replyTo"

    def test_invalid_reply_fails_operation_setup(self):
        with pytest.raises(DocumentValidationError):
            OperationBuilder().with_reply(lambda r: r.with_address("$message.header#/replyTo"))

    def test_reply_address_reference(self):
        reply = OperationReplyBuilder().with_channel_reference("replies").with_address_reference("replyTo").build()
        assert reply.address.reference == "#/components/replyAddresses/replyTo"

    def test_security_requirement(self):
        operation = (
            OperationBuilder()
            .with_action(ActionType.RECEIVE)
            .with_reference_to_channel("lights")
            .with_security_requirement("oauth", ["lights:read"])
            .build()
        )
        assert operation.security == [{"oauth": ["lights:read"]}]


class TestMessageBuilder:
    def test_multi_format_payload(self):
        message = (
            MessageBuilder()
            .with_name("lightMeasured")
            .with_multi_format_payload("application/vnd.apache.avro;version=1.9.0", {"type": "record"})
            .build()
        )
        assert isinstance(message.payload, MultiFormatSchema)
        data = message.model_dump(by_alias=True, exclude_none=True)
        assert data["payload"] == {"schemaFormat": "application/vnd.apache.avro;version=1.9.0", "schema": {"type": "record"}}

    def test_trait(self):
        message = (
            MessageBuilder()
            .with_payload_schema({"type": "string"})
            .with_trait(lambda t: t.with_content_type("text/plain"))
            .build()
        )
        assert message.traits[0].content_type == "text/plain"

    def test_missing_payload(self):
        with pytest.raises(DocumentValidationError):
            MessageBuilder().with_name("m").build()

    def test_headers_of_type(self):
        message = MessageBuilder().with_payload_schema({}).with_headers_of_type(LightMeasured).build()
        assert message.headers["type"] == "object"

    def test_builds_message_instance(self):
        assert isinstance(MessageBuilder().with_payload_schema({}).build(), Message)


class TestServerBuilder:
    def test_requires_host_and_protocol(self):
        with pytest.raises(DocumentValidationError) as exc_info:
            ServerBuilder().with_pathname("/v1").build()
        assert {f.path for f in exc_info.value.failures} == {"host", "protocol"}

    def test_invalid_variable_default(self):
        with pytest.raises(DocumentValidationError):
            ServerBuilder().with_variable("region", lambda v: v.with_default_value("asia").with_enum_values(["eu"]))


class TestComponentsBuilder:
    def test_blank_name(self):
        with pytest.raises(ValueError):
            ComponentsBuilder().with_message("", lambda m: m.with_payload_schema({}))
