from __future__ import annotations

import pytest
import requests

from address_pins.common.http import HttpClient, HttpRequestError, RetryConfig, RetryableHttpError


class FakeResponse:
    def __init__(self, status_code: int, payload=None, raises_json: bool = False):
        self.status_code = status_code
        self._payload = payload
        self._raises_json = raises_json

    def json(self):
        if self._raises_json:
            raise ValueError("bad json")
        return self._payload


def _client() -> HttpClient:
    return HttpClient(retry=RetryConfig(max_attempts=1), rate_per_sec=1000.0)


def test_http_get_json_success(monkeypatch):
    client = _client()

    monkeypatch.setattr(client.session, "request", lambda **_kwargs: FakeResponse(200, [{"lat": "1", "lon": "2"}]))
    payload = client.get_json("https://example.com/search")

    assert payload == [{"lat": "1", "lon": "2"}]


def test_http_sends_user_agent_and_params(monkeypatch):
    client = _client()
    seen = {}

    def fake_request(**kwargs):
        seen.update(kwargs)
        return FakeResponse(200, [])

    monkeypatch.setattr(client.session, "request", fake_request)
    client.get_json("https://example.com/search", params={"q": "x"})

    assert seen["method"] == "GET"
    assert seen["params"] == {"q": "x"}
    assert seen["headers"]["User-Agent"].startswith("address-pins/")


def test_http_retryable_status_raises_retryable_error(monkeypatch):
    client = _client()
    monkeypatch.setattr(client.session, "request", lambda **_kwargs: FakeResponse(503, {"x": 1}))

    with pytest.raises(RetryableHttpError):
        client.get_json("https://example.com")


def test_http_client_error_is_not_retryable(monkeypatch):
    client = _client()
    monkeypatch.setattr(client.session, "request", lambda **_kwargs: FakeResponse(403, {}))

    with pytest.raises(HttpRequestError) as excinfo:
        client.get_json("https://example.com")
    assert not isinstance(excinfo.value, RetryableHttpError)


def test_http_transport_failure_is_wrapped(monkeypatch):
    client = _client()

    def boom(**_kwargs):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(client.session, "request", boom)

    with pytest.raises(RetryableHttpError):
        client.get_json("https://example.com")


def test_http_retries_until_success(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=3, multiplier=0.0, max_wait=0.0), rate_per_sec=1000.0)
    responses = iter([FakeResponse(502), FakeResponse(200, [])])
    monkeypatch.setattr(client.session, "request", lambda **_kwargs: next(responses))

    assert client.get_json("https://example.com") == []


def test_http_invalid_json_raises(monkeypatch):
    client = _client()
    monkeypatch.setattr(client.session, "request", lambda **_kwargs: FakeResponse(200, raises_json=True))

    with pytest.raises(HttpRequestError):
        client.get_json("https://example.com")
