import json
import subprocess
from unittest import mock

import pytest
import requests
import responses

from bazaar.hash import HashError, git_head_hash, main, report_hash

ENDPOINT = "https://hash.example.com/api/hash"


@pytest.fixture
def rsps():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as mocked:
        yield mocked


@pytest.fixture
def endpoint(monkeypatch):
    monkeypatch.setenv("BAZAAR_HASH_URL", ENDPOINT)
    monkeypatch.setenv("RHYTHEM_TOKEN", "token")
    monkeypatch.setattr("time.sleep", lambda _seconds: None)


def _completed(output: bytes):
    return subprocess.CompletedProcess(["git", "rev-parse", "HEAD"], 0, stdout=output)


def test_git_head_hash_strips_output():
    with mock.patch("subprocess.run", return_value=_completed(b"abc123\n")) as run:
        assert git_head_hash() == "abc123"
    assert run.call_args.args[0] == ["git", "rev-parse", "HEAD"]


def test_git_head_hash_failure():
    error = subprocess.CalledProcessError(128, ["git"], output=b"fatal")
    with mock.patch("subprocess.run", side_effect=error):
        with pytest.raises(HashError):
            git_head_hash()


def test_git_missing():
    with mock.patch("subprocess.run", side_effect=FileNotFoundError("git")):
        with pytest.raises(HashError):
            git_head_hash()


def test_reported_payload_carries_token_and_hash(rsps, endpoint):
    rsps.add(responses.POST, ENDPOINT, status=200)
    with mock.patch("subprocess.run", return_value=_completed(b"abc123\n")):
        assert main([]) == 0
    assert len(rsps.calls) == 1
    request = rsps.calls[0].request
    assert json.loads(request.body) == {"token": "token", "hash": "abc123"}
    assert request.headers["User-Agent"].startswith("bazaar/")


def test_report_hash_bad_status(rsps, endpoint):
    rsps.add(responses.POST, ENDPOINT, status=403)
    with pytest.raises(HashError, match="403"):
        report_hash("abc123", "token")


def test_report_hash_transport_error_after_retries(rsps, endpoint):
    rsps.add(responses.POST, ENDPOINT, body=requests.ConnectionError("down"))
    with pytest.raises(HashError):
        report_hash("abc123", "token")
    assert len(rsps.calls) == 4


def test_report_hash_without_endpoint(monkeypatch):
    monkeypatch.delenv("BAZAAR_HASH_URL", raising=False)
    with pytest.raises(HashError):
        report_hash("abc123", "token")


def test_main_success(rsps, endpoint):
    rsps.add(responses.POST, ENDPOINT, status=200)
    with mock.patch("subprocess.run", return_value=_completed(b"deadbeef\n")):
        assert main([]) == 0
    assert json.loads(rsps.calls[0].request.body)["hash"] == "deadbeef"


def test_main_failure(rsps, endpoint):
    rsps.add(responses.POST, ENDPOINT, status=500)
    with mock.patch("subprocess.run", return_value=_completed(b"deadbeef\n")):
        assert main([]) == 1