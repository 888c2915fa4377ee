import json
from typing import Any, Optional
from unittest.mock import MagicMock

import pytest
import requests

from kii_core import App, KiiClient

TEST_APP = App(app_id="9ab34d8b", app_key="7a950d78956ed39f3b0815f0f001b43b", app_location="JP")


def make_response(status_code: int = 200, payload: Any = None, text: Optional[str] = None) -> requests.Response:
    """Build a requests.Response with the given status and body."""
    if payload is not None:
        text = json.dumps(payload)
    response = requests.Response()
    response.status_code = status_code
    response._content = (text or "").encode("utf-8")
    response.encoding = "utf-8"
    return response


@pytest.fixture
def kii_app() -> App:
    return TEST_APP


@pytest.fixture
def session() -> requests.Session:
    """Session whose request method is replaced by a mock."""
    session = requests.Session()
    session.request = MagicMock(return_value=make_response(200, {}))
    return session


@pytest.fixture
def client(session) -> KiiClient:
    return KiiClient(session=session)


def sent_body(session) -> Any:
    """Decode the JSON body of the last request sent through the session."""
    data = session.request.call_args.kwargs["data"]
    return None if data is None else json.loads(data)
