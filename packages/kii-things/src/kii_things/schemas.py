"""
Wire schemas for Kii Cloud and thing-if requests and responses.

Attribute names are snake_case; the JSON names used on the wire are declared
as aliases. Models can be built with either form.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = [
    "KiiModel",
    "AnonymousLoginRequest",
    "AnonymousLoginResponse",
    "KiiUserRegisterRequest",
    "KiiUserRegisterResponse",
    "KiiUserLoginRequest",
    "KiiUserLoginResponse",
    "MqttEndpoint",
    "OnboardGatewayRequest",
    "OnboardByOwnerRequest",
    "OnboardResponse",
    "EndNodeTokenRequest",
    "EndNodeTokenResponse",
    "RegisterThingRequest",
    "RegisterThingResponse",
    "PostCommandRequest",
    "PostCommandResponse",
    "UpdateCommandResultsRequest",
]


class KiiModel(BaseModel):
    """Base class for every request and response envelope."""

    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> Dict[str, Any]:
        """
        Dump the model using wire names.

        Optional fields left unset are omitted from the payload.
        """
        return self.model_dump(by_alias=True, exclude_none=True)

    @classmethod
    def from_wire(cls, data: Dict[str, Any]):
        """Create a model instance from a decoded JSON payload."""
        return cls.model_validate(data)


# Authentication

class AnonymousLoginRequest(KiiModel):
    client_id: str
    client_secret: str
    grant_type: str = "client_credentials"


class AnonymousLoginResponse(KiiModel):
    id: str = ""
    access_token: str = ""
    expires_in: int = 0
    token_type: str = ""


class KiiUserRegisterRequest(KiiModel):
    """
    Registration of a KiiUser.

    At least one of login_name, email_address or phone_number must be provided,
    otherwise the server rejects the request.
    """
    login_name: Optional[str] = Field(default=None, alias="loginName")
    display_name: Optional[str] = Field(default=None, alias="displayName")
    country: Optional[str] = None
    locale: Optional[str] = None
    email_address: Optional[str] = Field(default=None, alias="emailAddress")
    phone_number: Optional[str] = Field(default=None, alias="phoneNumber")
    phone_number_verified: Optional[bool] = Field(default=None, alias="phoneNumberVerified")
    password: str


class KiiUserRegisterResponse(KiiModel):
    user_id: str = Field(default="", alias="userID")
    login_name: str = Field(default="", alias="loginName")
    display_name: str = Field(default="", alias="displayName")
    country: str = ""
    locale: str = ""
    email_address: str = Field(default="", alias="emailAddress")
    phone_number: str = Field(default="", alias="phoneNumber")
    phone_number_verified: bool = Field(default=False, alias="phoneNumberVerified")
    has_password: bool = Field(default=False, alias="_hasPassword")


class KiiUserLoginRequest(KiiModel):
    username: str
    password: str
    expires_at: Optional[str] = Field(default=None, alias="expiresAt")
    refresh_token: Optional[str] = None
    grant_type: Optional[str] = None


class KiiUserLoginResponse(KiiModel):
    id: str = ""
    access_token: str = ""
    expires_in: int = 0
    token_type: str = ""
    refresh_token: str = ""


# Onboarding

class MqttEndpoint(KiiModel):
    """MQTT broker coordinates issued on onboarding. Returned as data only."""
    installation_id: str = Field(default="", alias="installationID")
    host: str = ""
    mqtt_topic: str = Field(default="", alias="mqttTopic")
    username: str = Field(default="", alias="userName")
    password: str = ""
    port_ssl: int = Field(default=0, alias="portSSL")
    port_tcp: int = Field(default=0, alias="portTCP")


class OnboardGatewayRequest(KiiModel):
    vendor_thing_id: str = Field(alias="vendorThingID")
    thing_password: str = Field(alias="thingPassword")
    thing_type: str = Field(alias="thingType")
    layout_position: str = Field(alias="layoutPosition")
    thing_properties: Dict[str, Any] = Field(default_factory=dict, alias="thingProperties")


class OnboardByOwnerRequest(KiiModel):
    thing_id: str = Field(alias="thingID")
    thing_password: str = Field(alias="thingPassword")
    owner: str
    # GATEWAY, STANDALONE or END_NODE; the server assumes STANDALONE when omitted
    layout_position: Optional[str] = Field(default=None, alias="layoutPosition")


class OnboardResponse(KiiModel):
    thing_id: str = Field(default="", alias="thingID")
    access_token: str = Field(default="", alias="accessToken")
    mqtt_endpoint: MqttEndpoint = Field(default_factory=MqttEndpoint, alias="mqttEndpoint")

    @field_validator("mqtt_endpoint", mode="before")
    @classmethod
    def null_endpoint_is_empty(cls, value):
        return MqttEndpoint() if value is None else value


# Things and end nodes

class EndNodeTokenRequest(KiiModel):
    expires_in: Optional[str] = None


class EndNodeTokenResponse(KiiModel):
    access_token: str = ""
    expires_in: int = 0
    thing_id: str = Field(default="", alias="id")
    refresh_token: str = ""


class RegisterThingRequest(KiiModel):
    """
    Predefined fields of a thing registration.

    Custom fields are accepted as extra keyword arguments and sent with the
    names they were given, e.g.::

        RegisterThingRequest(vendor_thing_id="lamp-1", thing_password="pass",
                             myCustomField="value")

    Subclasses can also declare typed custom fields of their own.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    vendor_thing_id: str = Field(alias="_vendorThingID")
    thing_password: str = Field(alias="_password")
    thing_type: Optional[str] = Field(default=None, alias="_thingType")
    layout_position: Optional[str] = Field(default=None, alias="_layoutPosition")
    vendor: Optional[str] = Field(default=None, alias="_vendor")
    firmware_version: Optional[str] = Field(default=None, alias="_firmwareVersion")
    lot: Optional[str] = Field(default=None, alias="_lot")
    string_field1: Optional[str] = Field(default=None, alias="_stringField1")
    string_field2: Optional[str] = Field(default=None, alias="_stringField2")
    string_field3: Optional[str] = Field(default=None, alias="_stringField3")
    string_field4: Optional[str] = Field(default=None, alias="_stringField4")
    string_field5: Optional[str] = Field(default=None, alias="_stringField5")
    number_field1: Optional[int] = Field(default=None, alias="_numberField1")
    number_field2: Optional[int] = Field(default=None, alias="_numberField2")
    number_field3: Optional[int] = Field(default=None, alias="_numberField3")
    number_field4: Optional[int] = Field(default=None, alias="_numberField4")
    number_field5: Optional[int] = Field(default=None, alias="_numberField5")


class RegisterThingResponse(KiiModel):
    thing_id: str = Field(default="", alias="_thingID")
    vendor_thing_id: str = Field(default="", alias="_vendorThingID")
    thing_type: str = Field(default="", alias="_thingType")
    layout_position: str = Field(default="", alias="_layoutPosition")
    created: int = Field(default=0, alias="_created")
    disabled: bool = Field(default=False, alias="_disabled")


# Commands

class PostCommandRequest(KiiModel):
    """
    Command sent to a thing.

    The issuer is either a group or a user; users are written as "user:<user-id>".
    """
    issuer: str
    actions: List[Dict[str, Any]]
    schema_name: str = Field(alias="schema")
    schema_version: int = Field(alias="schemaVersion")
    fired_by_trigger_id: Optional[str] = Field(default=None, alias="firedByTriggerID")
    title: Optional[str] = None
    description: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class PostCommandResponse(KiiModel):
    command_id: str = Field(default="", alias="commandID")


class UpdateCommandResultsRequest(KiiModel):
    action_results: List[Dict[str, Any]] = Field(alias="actionResults")
