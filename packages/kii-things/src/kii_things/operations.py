import logging
from typing import Any, Dict, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from kii_core import App, KiiClient, KiiSerializationError
from .schemas import (
    AnonymousLoginRequest,
    AnonymousLoginResponse,
    EndNodeTokenRequest,
    EndNodeTokenResponse,
    KiiModel,
    KiiUserLoginRequest,
    KiiUserLoginResponse,
    KiiUserRegisterRequest,
    KiiUserRegisterResponse,
    OnboardByOwnerRequest,
    OnboardGatewayRequest,
    OnboardResponse,
    PostCommandRequest,
    PostCommandResponse,
    RegisterThingRequest,
    RegisterThingResponse,
    UpdateCommandResultsRequest,
)

logger = logging.getLogger(__name__)

ONBOARDING_BY_THING_CONTENT_TYPE = "application/vnd.kii.onboardingWithVendorThingIDByThing+json"
ONBOARDING_BY_OWNER_CONTENT_TYPE = "application/vnd.kii.OnboardingWithThingIDByOwner+json"
THING_REGISTRATION_CONTENT_TYPE = "application/vnd.kii.ThingRegistrationRequest+json"

ResponseModel = TypeVar("ResponseModel", bound=KiiModel)

class APIAuthor:
    """
    Identity used to call Kii Cloud and thing-if.

    Depending on the token it holds, the author acts as an anonymous user, a
    gateway, an end node or a KiiUser. Login and gateway onboarding overwrite
    ``token`` and ``id`` on success and leave them untouched on failure.
    Instances are not thread safe.
    """

    def __init__(self, app: App, token: str = "", id: str = "", client: Optional[KiiClient] = None):
        self.app = app
        self.token = token
        self.id = id
        self.client = client if client is not None else KiiClient()

    def __repr__(self):
        return f"APIAuthor(app={self.app.app_id!r}, id={self.id!r})"

    def anonymous_login(self) -> AnonymousLoginResponse:
        """Login as an anonymous user and adopt the issued token."""
        request = AnonymousLoginRequest(client_id=self.app.app_id, client_secret=self.app.app_key)
        url = f"{self.app.kii_cloud_base_url}/oauth2/token"
        response = self._call("POST", url, request, AnonymousLoginResponse)
        self.token = response.access_token
        self.id = response.id
        logger.info(f"Anonymous login completed for {self.app}, id: {self.id}")
        return response

    def onboard_gateway(self, request: OnboardGatewayRequest) -> OnboardResponse:
        """
        Let a gateway onboard to the cloud.

        On success the author becomes the gateway: its token and id are
        replaced with the ones issued for the gateway thing.
        """
        url = f"{self.app.thing_if_base_url}/onboardings"
        response = self._call("POST", url, request, OnboardResponse,
                              headers=self._bearer_headers(ONBOARDING_BY_THING_CONTENT_TYPE))
        self.token = response.access_token
        self.id = response.thing_id
        logger.info(f"Gateway onboarded, thing id: {self.id}")
        return response

    def generate_end_node_token(self, end_node_id: str,
                                request: Optional[EndNodeTokenRequest] = None) -> EndNodeTokenResponse:
        """
        Request an access token for an end node of this gateway.

        The author must be an onboarded gateway.
        """
        if request is None:
            request = EndNodeTokenRequest()
        url = f"{self._gateway_url(end_node_id)}/token"
        return self._call("POST", url, request, EndNodeTokenResponse, headers=self._bearer_headers())

    def add_end_node(self, end_node_id: str) -> None:
        """
        Add a registered thing as an end node of this gateway.

        The author must be an onboarded gateway.
        """
        url = self._gateway_url(end_node_id)
        self.client.request("PUT", url, headers=self._bearer_headers())
        logger.info(f"End node {end_node_id} added to gateway {self.id}")

    def register_thing(self, request: RegisterThingRequest) -> RegisterThingResponse:
        """
        Register a thing.

        Custom fields travel along with the predefined ones; pass them as extra
        keyword arguments of RegisterThingRequest or declare them on a subclass.
        """
        url = f"{self.app.kii_cloud_base_url}/things"
        return self._call("POST", url, request, RegisterThingResponse,
                          headers=self._app_headers(THING_REGISTRATION_CONTENT_TYPE))

    def update_state(self, thing_id: str, state: Union[BaseModel, Mapping[str, Any]],
                     token: Optional[str] = None) -> None:
        """
        Update the state of a thing.

        Args:
            thing_id: Target thing
            state: Caller-defined state, either a pydantic model or a mapping
            token: Token to authorize with instead of the author's own, e.g. an
                end node token obtained by a gateway
        """
        url = f"{self.app.thing_if_base_url}/targets/thing:{thing_id}/states"
        self.client.request("PUT", url, headers=self._bearer_headers(token=token), body=_to_body(state))

    def register_kii_user(self, request: KiiUserRegisterRequest) -> KiiUserRegisterResponse:
        """Register a KiiUser. The author's token is not changed."""
        url = f"{self.app.kii_cloud_base_url}/users"
        return self._call("POST", url, request, KiiUserRegisterResponse, headers=self._app_headers())

    def login_as_kii_user(self, request: KiiUserLoginRequest) -> KiiUserLoginResponse:
        """Login as a KiiUser and adopt the issued token and user id."""
        url = f"https://{self.app.host_name}/api/oauth2/token"
        response = self._call("POST", url, request, KiiUserLoginResponse, headers=self._app_headers())
        self.token = response.access_token
        self.id = response.id
        logger.info(f"Logged in as KiiUser {self.id}")
        return response

    def post_command(self, thing_id: str, request: PostCommandRequest) -> PostCommandResponse:
        """Post a command to an onboarded thing."""
        # thing-if expects the upper case target prefix on this endpoint
        url = f"{self.app.thing_if_base_url}/targets/THING:{thing_id}/commands"
        response = self._call("POST", url, request, PostCommandResponse, headers=self._bearer_headers())
        logger.info(f"Command {response.command_id} posted to thing {thing_id}")
        return response

    def update_command_results(self, thing_id: str, command_id: str,
                               request: UpdateCommandResultsRequest) -> None:
        url = f"{self.app.thing_if_base_url}/targets/thing:{thing_id}/commands/{command_id}/action-results"
        self.client.request("PUT", url, headers=self._bearer_headers(), body=_to_body(request))

    def onboard_thing_by_owner(self, request: OnboardByOwnerRequest) -> OnboardResponse:
        """
        Onboard a registered thing on behalf of its owner.

        The author keeps the owner's token; the token issued for the thing is
        only returned in the response.
        """
        url = f"{self.app.thing_if_base_url}/onboardings"
        return self._call("POST", url, request, OnboardResponse,
                          headers=self._bearer_headers(ONBOARDING_BY_OWNER_CONTENT_TYPE))

    def _call(self, method: str, url: str, request: KiiModel, response_model: Type[ResponseModel],
              headers: Optional[Dict[str, str]] = None) -> ResponseModel:
        """Send a request envelope and decode the response into its model."""
        data = self.client.request_json(method, url, headers=headers, body=_to_body(request))
        try:
            return response_model.from_wire(data)
        except ValidationError as e:
            logger.error(f"Unexpected response shape from {url}: {data}")
            raise KiiSerializationError(f"Failed to decode {response_model.__name__}: {e}") from e

    def _gateway_url(self, end_node_id: str) -> str:
        if not self.id:
            raise ValueError("Author has no gateway id, onboard the gateway first")
        return f"{self.app.kii_cloud_base_url}/things/{self.id}/end-nodes/{end_node_id}"

    def _bearer_headers(self, content_type: str = "application/json",
                        token: Optional[str] = None) -> Dict[str, str]:
        return {
            "Content-Type": content_type,
            "Authorization": f"Bearer {token if token is not None else self.token}",
        }

    def _app_headers(self, content_type: str = "application/json") -> Dict[str, str]:
        return {
            "Content-Type": content_type,
            "X-Kii-AppID": self.app.app_id,
            "X-Kii-AppKey": self.app.app_key,
        }


def anonymous_login(app: App, client: Optional[KiiClient] = None) -> APIAuthor:
    """Create an author for the app and login anonymously."""
    author = APIAuthor(app, client=client)
    author.anonymous_login()
    return author


def _to_body(payload: Union[BaseModel, Mapping[str, Any]]) -> Any:
    if isinstance(payload, KiiModel):
        return payload.to_wire()
    if isinstance(payload, BaseModel):
        return payload.model_dump(by_alias=True)
    return dict(payload)
