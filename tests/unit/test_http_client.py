"""Unit tests for the HTTP client adapter."""

import json
from unittest.mock import MagicMock, patch

import pytest
import requests

from knowledgehub.adapters.outbound.http_client import HttpClient
from knowledgehub.core.domain.exceptions import HttpError, InvalidResponseError, NetworkError

pytestmark = pytest.mark.unit


def make_response(status=200, body=None, reason="OK", raw=None):
    response = MagicMock()
    response.status_code = status
    response.ok = 200 <= status < 300
    response.reason = reason
    if raw is not None:
        response.content = raw.encode()
        response.json.side_effect = ValueError("not json")
    elif body is None:
        response.content = b""
        response.json.side_effect = ValueError("empty")
    else:
        response.content = json.dumps(body).encode()
        response.json.return_value = body
    return response


@pytest.fixture
def client():
    with HttpClient("http://api.test/", token_provider=lambda: None) as http:
        yield http


class TestRequest:
    def test_get_returns_parsed_body(self, client):
        with patch.object(client.session, "request", return_value=make_response(body=[1, 2])) as req:
            assert client.request("/api/documents") == [1, 2]

        args, kwargs = req.call_args
        assert args == ("GET", "http://api.test/api/documents")
        assert kwargs["data"] is None
        assert kwargs["headers"]["Content-Type"] == "application/json"
        assert "Authorization" not in kwargs["headers"]

    def test_body_is_json_encoded(self, client):
        with patch.object(client.session, "request", return_value=make_response(body={})) as req:
            client.request("/api/qa", method="POST", body={"question": "Why?"})

        assert json.loads(req.call_args.kwargs["data"]) == {"question": "Why?"}

    def test_bearer_token_read_on_every_call(self):
        tokens = iter(["t1", None])
        client = HttpClient("http://api.test", token_provider=lambda: next(tokens))
        with patch.object(client.session, "request", return_value=make_response(body={})) as req:
            client.request("/a")
            first = req.call_args.kwargs["headers"]
            client.request("/b")
            second = req.call_args.kwargs["headers"]

        assert first["Authorization"] == "Bearer t1"
        assert "Authorization" not in second

    def test_caller_headers_win(self, client):
        with patch.object(client.session, "request", return_value=make_response(body={})) as req:
            client.request("/a", headers={"Content-Type": "text/plain"})
        assert req.call_args.kwargs["headers"]["Content-Type"] == "text/plain"

    def test_empty_success_body_returns_none(self, client):
        with patch.object(client.session, "request", return_value=make_response(status=204)):
            assert client.request("/api/documents/1", method="DELETE") is None


class TestErrors:
    def test_transport_failure_is_network_error(self, client):
        with patch.object(
            client.session, "request", side_effect=requests.ConnectionError("refused")
        ):
            with pytest.raises(NetworkError) as exc_info:
                client.request("/api/documents")

        assert exc_info.value.message == "Network error. Please try again."
        assert isinstance(exc_info.value.cause, requests.ConnectionError)

    def test_timeout_is_network_error(self, client):
        with patch.object(client.session, "request", side_effect=requests.Timeout()):
            with pytest.raises(NetworkError):
                client.request("/api/documents")

    def test_non_2xx_is_http_error_with_detail(self, client):
        response = make_response(
            status=401, body={"message": "Invalid credentials"}, reason="Unauthorized"
        )
        with patch.object(client.session, "request", return_value=response):
            with pytest.raises(HttpError) as exc_info:
                client.request("/api/auth/login", method="POST", body={})

        exc = exc_info.value
        assert exc.status_code == 401
        assert exc.message == "API Error: Unauthorized"
        assert exc.detail == "Invalid credentials"

    def test_non_json_error_body_has_no_detail(self, client):
        response = make_response(status=500, raw="<html>oops</html>", reason="Internal Server Error")
        with patch.object(client.session, "request", return_value=response):
            with pytest.raises(HttpError) as exc_info:
                client.request("/api/documents")
        assert exc_info.value.detail is None

    def test_non_json_success_body(self, client):
        with patch.object(client.session, "request", return_value=make_response(raw="hello")):
            with pytest.raises(InvalidResponseError):
                client.request("/api/documents")
