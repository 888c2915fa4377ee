import pytest
from pydantic import ValidationError

from kii_things.schemas import (
    KiiUserLoginRequest,
    KiiUserRegisterRequest,
    MqttEndpoint,
    OnboardGatewayRequest,
    OnboardResponse,
    PostCommandRequest,
    RegisterThingRequest,
    RegisterThingResponse,
)


def test_optional_fields_are_omitted_when_unset():
    request = KiiUserRegisterRequest(login_name="alice", password="secret")

    assert request.to_wire() == {"loginName": "alice", "password": "secret"}


def test_login_request_uses_wire_names():
    request = KiiUserLoginRequest(username="alice", password="secret", expires_at="100", grant_type="password")

    assert request.to_wire() == {
        "username": "alice",
        "password": "secret",
        "expiresAt": "100",
        "grant_type": "password",
    }


def test_models_accept_wire_names():
    request = OnboardGatewayRequest.model_validate({
        "vendorThingID": "gw",
        "thingPassword": "pass",
        "thingType": "hub",
        "layoutPosition": "GATEWAY",
    })

    assert request.vendor_thing_id == "gw"
    assert request.to_wire()["thingProperties"] == {}


def test_register_thing_request_carries_custom_fields():
    request = RegisterThingRequest(
        vendor_thing_id="lamp-1",
        thing_password="pass",
        layout_position="END_NODE",
        number_field1=3,
        myCustomString="str",
        myObject={"a": "b"},
    )

    assert request.to_wire() == {
        "_vendorThingID": "lamp-1",
        "_password": "pass",
        "_layoutPosition": "END_NODE",
        "_numberField1": 3,
        "myCustomString": "str",
        "myObject": {"a": "b"},
    }


def test_register_thing_request_subclass_adds_typed_fields():
    class LampRegistration(RegisterThingRequest):
        brightness: int = 0

    request = LampRegistration(vendor_thing_id="lamp-1", thing_password="pass", brightness=80)

    assert request.to_wire() == {"_vendorThingID": "lamp-1", "_password": "pass", "brightness": 80}


def test_post_command_request_schema_alias():
    request = PostCommandRequest(
        issuer="user:u1",
        actions=[{"turnPower": {"power": True}}],
        schema_name="LED",
        schema_version=1,
        title="on",
    )

    assert request.to_wire() == {
        "issuer": "user:u1",
        "actions": [{"turnPower": {"power": True}}],
        "schema": "LED",
        "schemaVersion": 1,
        "title": "on",
    }


def test_required_request_fields_are_enforced():
    with pytest.raises(ValidationError):
        KiiUserRegisterRequest(login_name="alice")


def test_onboard_response_decodes_mqtt_endpoint():
    response = OnboardResponse.from_wire({
        "thingID": "th.1",
        "accessToken": "token",
        "mqttEndpoint": {
            "installationID": "inst",
            "host": "mqtt.kii.com",
            "mqttTopic": "topic",
            "userName": "user",
            "password": "pass",
            "portSSL": 8883,
            "portTCP": 1883,
        },
    })

    assert response.thing_id == "th.1"
    assert response.mqtt_endpoint.username == "user"
    assert response.mqtt_endpoint.port_ssl == 8883
    assert response.mqtt_endpoint.port_tcp == 1883


def test_responses_tolerate_missing_and_unknown_keys():
    response = RegisterThingResponse.from_wire({"_thingID": "th.1", "_unknown": 1})

    assert response.thing_id == "th.1"
    assert response.vendor_thing_id == ""
    assert response.disabled is False


@pytest.mark.parametrize("payload", [
    {"thingID": "th.1", "accessToken": "token", "mqttEndpoint": None},
    {"thingID": "th.1", "accessToken": "token"},
])
def test_onboard_response_without_mqtt_endpoint(payload):
    response = OnboardResponse.from_wire(payload)

    assert response.thing_id == "th.1"
    assert response.mqtt_endpoint == MqttEndpoint()


def test_package_exports_only_kii_names():
    import kii_things

    assert "OnboardResponse" in kii_things.__all__
    assert not hasattr(kii_things, "Field")
    assert not hasattr(kii_things, "BaseModel")
    assert not hasattr(kii_things, "ConfigDict")
