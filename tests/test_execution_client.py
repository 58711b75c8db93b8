"""Tests for the remote execution client."""
import pytest
import requests

from conftest import FakeHTTP, FakeResponse
from execution_client import (
    CONNECTION_ERROR_MESSAGE,
    CONNECTION_FAILURE_RESULT,
    DEFAULT_ENDPOINT,
    ExecutionAPIError,
    ExecutionClient,
    ExecutionConnectionError,
    ExecutionResponseError,
    ExecutionResult,
)


def _client(http):
    return ExecutionClient(http=http)


# ---------------------------------------------------------------------------
# Request shape
# ---------------------------------------------------------------------------

def test_posts_code_and_input_as_json():
    http = FakeHTTP(FakeResponse(payload={"output": "", "error": None, "line_number": None}))
    _client(http).run("print(input())", "42")

    assert len(http.calls) == 1
    url, kwargs = http.calls[0]
    assert url == DEFAULT_ENDPOINT
    assert kwargs["json"] == {"code": "print(input())", "input": "42"}
    assert kwargs["timeout"] is None


def test_configured_timeout_is_forwarded():
    http = FakeHTTP(FakeResponse(payload={"output": "ok"}))
    ExecutionClient("http://localhost:9000/run", timeout=5.0, http=http).run("", "")
    url, kwargs = http.calls[0]
    assert url == "http://localhost:9000/run"
    assert kwargs["timeout"] == 5.0


# ---------------------------------------------------------------------------
# Success path
# ---------------------------------------------------------------------------

def test_plain_output():
    http = FakeHTTP(FakeResponse(payload={"output": "4\n", "error": None, "line_number": None}))
    result = _client(http).run("print(2 + 2)", "")
    assert result == ExecutionResult(output="4\n", error=None, error_line=None)
    assert not result.has_error
    assert result.display_error() == ""


def test_remote_error_with_line():
    http = FakeHTTP(FakeResponse(payload={
        "output": "", "error": "NameError: x is not defined", "line_number": 3,
    }))
    result = _client(http).run("a\nb\nx", "")
    assert result.error == "NameError: x is not defined"
    assert result.error_line == 3
    assert result.display_error() == "Line 3: NameError: x is not defined"


def test_partial_output_kept_with_error():
    http = FakeHTTP(FakeResponse(payload={
        "output": "started\n", "error": "ZeroDivisionError", "line_number": 2,
    }))
    result = _client(http).run("print('started')\n1/0", "")
    assert result.output == "started\n"
    assert result.has_error


def test_error_without_line_has_no_prefix():
    http = FakeHTTP(FakeResponse(payload={"output": "", "error": "Timed out"}))
    result = _client(http).run("while True: pass", "")
    assert result.error_line is None
    assert result.display_error() == "Timed out"


def test_empty_error_means_no_error():
    http = FakeHTTP(FakeResponse(payload={"output": "hi\n", "error": "", "line_number": None}))
    result = _client(http).run("print('hi')", "")
    assert result.error is None


def test_missing_output_becomes_empty():
    http = FakeHTTP(FakeResponse(payload={"error": None}))
    assert _client(http).run("", "").output == ""


# ---------------------------------------------------------------------------
# Failure path
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("http", [
    FakeHTTP(exc=requests.ConnectionError("refused")),
    FakeHTTP(exc=requests.Timeout("slow")),
    FakeHTTP(FakeResponse(status_code=500, payload={"detail": "boom"})),
    FakeHTTP(FakeResponse(status_code=404, payload=None, text="not found")),
    FakeHTTP(FakeResponse(payload=ValueError("Expecting value"))),
    FakeHTTP(FakeResponse(payload=["not", "an", "object"])),
])
def test_any_failure_collapses_to_connection_message(http):
    result = _client(http).run("print(1)", "")
    assert result == CONNECTION_FAILURE_RESULT
    assert result.output == ""
    assert result.error == CONNECTION_ERROR_MESSAGE
    assert result.error_line is None


def test_submit_raises_typed_errors():
    with pytest.raises(ExecutionConnectionError):
        _client(FakeHTTP(exc=requests.ConnectionError("x"))).submit("", "")
    with pytest.raises(ExecutionAPIError):
        _client(FakeHTTP(FakeResponse(status_code=503))).submit("", "")
    with pytest.raises(ExecutionResponseError):
        _client(FakeHTTP(FakeResponse(payload="text"))).submit("", "")


def test_single_attempt_no_retry():
    http = FakeHTTP(exc=requests.ConnectionError("refused"))
    _client(http).run("print(1)", "")
    assert len(http.calls) == 1


def test_default_posts_through_requests_per_call(monkeypatch):
    calls = []

    def fake_post(url, **kwargs):
        calls.append(url)
        return FakeResponse(payload={"output": "ok\n"})

    monkeypatch.setattr(requests, "post", fake_post)
    client = ExecutionClient("http://localhost:9000/run")
    assert client.run("print('ok')", "").output == "ok\n"
    assert client.run("print('ok')", "").output == "ok\n"
    assert calls == ["http://localhost:9000/run"] * 2
