import json
from unittest.mock import MagicMock

import pytest
import requests

from kii_cli.main import main

from conftest import make_response


@pytest.fixture
def env(monkeypatch):
    monkeypatch.setenv("KII_APP_ID", "9ab34d8b")
    monkeypatch.setenv("KII_APP_KEY", "7a950d78956ed39f3b0815f0f001b43b")
    monkeypatch.setenv("KII_APP_LOCATION", "jp")
    monkeypatch.delenv("KII_TOKEN", raising=False)


@pytest.fixture
def http(monkeypatch):
    request = MagicMock(return_value=make_response(200, {}))
    monkeypatch.setattr(requests.Session, "request", request)
    return request


def test_anonymous_login_prints_response_and_token(env, http, capsys):
    http.return_value = make_response(200, {"id": "anon-1", "access_token": "token-1"})

    assert main(["anonymous-login"]) == 0

    out = capsys.readouterr().out
    assert '"access_token": "token-1"' in out
    assert "export KII_TOKEN=token-1" in out
    assert http.call_args.args == ("POST", "https://api-jp.kii.com/api/apps/9ab34d8b/oauth2/token")


def test_post_command_uses_token_from_environment(env, http, monkeypatch, capsys):
    monkeypatch.setenv("KII_TOKEN", "user-token")
    http.return_value = make_response(201, {"commandID": "cmd-1"})

    code = main(["post-command", "th.1", "user:u1", "LED", "1", '[{"turnPower": {"power": true}}]'])

    assert code == 0
    assert http.call_args.kwargs["headers"]["Authorization"] == "Bearer user-token"
    assert json.loads(http.call_args.kwargs["data"])["actions"] == [{"turnPower": {"power": True}}]
    assert '"commandID": "cmd-1"' in capsys.readouterr().out


def test_invalid_actions_json_fails(env, http, capsys):
    assert main(["post-command", "th.1", "user:u1", "LED", "1", "not json"]) == 1

    http.assert_not_called()
    assert "invalid arguments" in capsys.readouterr().out


def test_remote_error_returns_exit_code_1(env, http, capsys):
    http.return_value = make_response(401, text='{"errorCode":"invalid_grant"}')

    assert main(["login", "alice", "wrong"]) == 1

    assert "invalid_grant" in capsys.readouterr().out


def test_missing_configuration(monkeypatch, http, capsys):
    monkeypatch.delenv("KII_APP_ID", raising=False)
    monkeypatch.setenv("KII_APP_KEY", "key")
    monkeypatch.setenv("KII_APP_LOCATION", "jp")

    assert main(["anonymous-login"]) == 1

    http.assert_not_called()
    assert "KII_APP_ID" in capsys.readouterr().out


def test_missing_location(monkeypatch, http, capsys):
    monkeypatch.setenv("KII_APP_ID", "9ab34d8b")
    monkeypatch.setenv("KII_APP_KEY", "key")
    monkeypatch.delenv("KII_APP_LOCATION", raising=False)

    assert main(["anonymous-login"]) == 1

    http.assert_not_called()
    assert "KII_APP_LOCATION" in capsys.readouterr().out
