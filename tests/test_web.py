import json
from unittest import mock

import pytest
import requests
import responses

from bazaar.web import USER_AGENT, WebError, http_get, http_post_json

URL = "https://example.com/resource"


@pytest.fixture
def rsps():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as mocked:
        yield mocked


def test_get_returns_body_and_status(rsps):
    rsps.add(responses.GET, URL, body=b"hello", status=200)
    response = http_get(URL)
    assert response.status_code == 200
    assert response.content == b"hello"


def test_get_sends_user_agent_and_extra_headers(rsps):
    rsps.add(responses.GET, URL, body=b"", status=200)
    response = http_get(URL, headers={"Authorization": "Token token"})
    assert response.status_code == 200
    sent = rsps.calls[0].request.headers
    assert sent["User-Agent"] == USER_AGENT
    assert sent["Authorization"] == "Token token"


def test_client_error_is_not_retried(rsps):
    rsps.add(responses.GET, URL, status=404)
    response = http_get(URL, retries=3)
    assert response.status_code == 404
    assert len(rsps.calls) == 1


@mock.patch("time.sleep")
def test_server_error_is_retried(sleep, rsps):
    rsps.add(responses.GET, URL, status=502)
    rsps.add(responses.GET, URL, body=b"ok", status=200)
    response = http_get(URL, retries=1)
    assert response.content == b"ok"
    assert len(rsps.calls) == 2
    assert sleep.call_count == 1


@mock.patch("time.sleep")
def test_last_server_error_is_returned(sleep, rsps):
    rsps.add(responses.GET, URL, status=503)
    response = http_get(URL, retries=2)
    assert response.status_code == 503
    assert len(rsps.calls) == 3


@mock.patch("time.sleep")
def test_connection_error_retried_then_succeeds(sleep, rsps):
    rsps.add(responses.GET, URL, body=requests.ConnectionError("down"))
    rsps.add(responses.GET, URL, body=b"ok", status=200)
    assert http_get(URL, retries=1).content == b"ok"


@mock.patch("time.sleep")
def test_connection_error_exhausts_retries(sleep, rsps):
    rsps.add(responses.GET, URL, body=requests.ConnectionError("down"))
    with pytest.raises(WebError):
        http_get(URL, retries=2)
    assert len(rsps.calls) == 3


def test_post_json_sends_payload(rsps):
    rsps.add(responses.POST, URL, status=200)
    payload = {"token": "token", "hash": "abc"}
    response = http_post_json(URL, payload, retries=0)
    assert response.status_code == 200
    sent = rsps.calls[0].request
    assert json.loads(sent.body) == payload
    assert sent.headers["User-Agent"] == USER_AGENT