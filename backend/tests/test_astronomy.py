"""Tests for the APOD client."""
import pytest
import requests

import astronomy
from astronomy import ApodClient


class FakeResponse:
    def __init__(self, payload=None, status_code=200, bad_json=False):
        self.payload = payload
        self.status_code = status_code
        self.bad_json = bad_json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")

    def json(self):
        if self.bad_json:
            raise ValueError("Expecting value")
        return self.payload


@pytest.fixture
def fake_get(monkeypatch):
    """Replace requests.get and record the calls made."""
    calls = []
    responses = []

    def get(url, params=None, timeout=None):
        calls.append({"url": url, "params": params, "timeout": timeout})
        response = responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    monkeypatch.setattr(astronomy.requests, "get", get)
    return calls, responses


def test_lookup_returns_image_url(fake_get):
    calls, responses = fake_get
    responses.append(FakeResponse({"url": "https://apod.nasa.gov/apod/image/m31.jpg", "media_type": "image"}))

    client = ApodClient(api_key="secret", timeout=3)
    lookup = client.lookup("2024-03-01")

    assert lookup.ok
    assert lookup.url == "https://apod.nasa.gov/apod/image/m31.jpg"
    assert calls[0]["params"] == {"api_key": "secret", "date": "2024-03-01"}
    assert calls[0]["timeout"] == 3


def test_lookup_network_error(fake_get):
    _, responses = fake_get
    responses.append(requests.ConnectionError("no route to host"))

    lookup = ApodClient().lookup("2024-03-01")

    assert not lookup.ok
    assert lookup.url is None
    assert "no route to host" in lookup.error


def test_lookup_http_error(fake_get):
    _, responses = fake_get
    responses.append(FakeResponse({"msg": "bad date"}, status_code=400))

    lookup = ApodClient().lookup("1990-01-01")
    assert not lookup.ok


def test_lookup_invalid_json(fake_get):
    _, responses = fake_get
    responses.append(FakeResponse(bad_json=True))

    lookup = ApodClient().lookup("2024-03-01")
    assert not lookup.ok
    assert lookup.error == "invalid JSON response"


def test_lookup_missing_url(fake_get):
    _, responses = fake_get
    responses.append(FakeResponse({"title": "No picture today"}))

    lookup = ApodClient().lookup("2024-03-01")
    assert not lookup.ok
    assert lookup.error == "response has no url"


def test_from_env(monkeypatch):
    monkeypatch.setenv("NASA_KEY", "abc123")
    monkeypatch.setenv("APOD_TIMEOUT", "2.5")
    monkeypatch.delenv("APOD_URL", raising=False)

    client = ApodClient.from_env()
    assert client.api_key == "abc123"
    assert client.timeout == 2.5
    assert client.base_url == astronomy.DEFAULT_APOD_URL
