"""
Shared test fixtures for the editor session tests.
"""
import asyncio
import sys
from pathlib import Path

import pytest

# Add src/ to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from document_store import MappingDocumentStore
from execution_client import ExecutionResult


class FakeResponse:
    """Stand-in for requests.Response with a canned status and body."""

    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else repr(payload)

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeHTTP:
    """Records posts and replays a response (or raises an exception)."""

    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.exc is not None:
            raise self.exc
        return self.response


class HeldSubmitter:
    """Async submitter whose replies are released by the test, in any order."""

    def __init__(self):
        self.submissions = []  # (code, input)
        self.replies = []      # futures, one per submission

    async def __call__(self, code, program_input):
        reply = asyncio.get_running_loop().create_future()
        self.submissions.append((code, program_input))
        self.replies.append(reply)
        return await reply

    async def wait_for(self, count):
        while len(self.replies) < count:
            await asyncio.sleep(0)


def fixed_submitter(result: ExecutionResult):
    async def submit(code, program_input):
        submit.calls.append((code, program_input))
        return result

    submit.calls = []
    return submit


@pytest.fixture
def slot():
    """Plain dict standing in for the browser storage."""
    return {}


@pytest.fixture
def memory_store(slot):
    return MappingDocumentStore(slot)


@pytest.fixture
def held_submitter():
    return HeldSubmitter()
