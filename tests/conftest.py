"""Shared fixtures: a stand-in for ``requests.Session`` so no test hits the network.

``StubSession`` answers GETs by their ``action`` parameter and POSTs with a
single configurable envelope, and records every call for assertions.
"""
import json
from typing import Any, Dict, List, Optional

import pytest
import requests

from salon.store import RecordStore
from salon.transport import ApiClient

API_URL = "https://example.test/exec"


class StubResponse:
    def __init__(self, body: Any, status_code: int = 200):
        self.status_code = status_code
        self.text = body if isinstance(body, str) else json.dumps(body)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self) -> Any:
        return json.loads(self.text)


class StubSession:
    def __init__(self, gets: Optional[Dict[str, Any]] = None, post: Any = None):
        # action -> body | StubResponse | Exception
        self.gets = gets or {}
        self.post_reply = post if post is not None else {"success": True}
        self.calls: List[Dict[str, Any]] = []

    def _reply(self, reply: Any) -> StubResponse:
        if isinstance(reply, BaseException):
            raise reply
        if isinstance(reply, StubResponse):
            return reply
        return StubResponse(reply)

    def get(self, url, params=None, timeout=None):
        self.calls.append({"method": "GET", "url": url, "params": params, "timeout": timeout})
        action = (params or {}).get("action")
        if action not in self.gets:
            return StubResponse({"success": False, "message": f"unknown action {action}"})
        return self._reply(self.gets[action])

    def post(self, url, data=None, headers=None, timeout=None):
        self.calls.append({"method": "POST", "url": url, "body": json.loads(data), "headers": headers})
        return self._reply(self.post_reply)

    def posts(self) -> List[Dict[str, Any]]:
        return [c for c in self.calls if c["method"] == "POST"]


@pytest.fixture
def store() -> RecordStore:
    return RecordStore()


@pytest.fixture
def make_api():
    def _make(gets=None, post=None):
        session = StubSession(gets=gets, post=post)
        return ApiClient(API_URL, timeout=5, session=session), session
    return _make


@pytest.fixture
def connection_error() -> requests.ConnectionError:
    return requests.ConnectionError("connection refused")
