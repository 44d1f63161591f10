"""Shared pytest configuration and fixtures."""

import copy
import json

import httpx
import pytest

from arangodb_monitor.config.models import ArangoDBConfig
from arangodb_monitor.utils.logger import setup_logger


# Trimmed /_admin/statistics response; unknown keys are kept on purpose
STATS_PAYLOAD = {
    "time": 1700000000.123,
    "enabled": True,
    "system": {
        "minorPageFaults": 123456,
        "majorPageFaults": 5,
        "userTime": 12.5,
        "systemTime": 3.25,
        "numberOfThreads": 42,
        "residentSize": 268435456,
        "residentSizePercent": 0.031,
        "virtualSize": 1073741824,
    },
    "client": {
        "httpConnections": 3,
        "requestTime": {
            "requestTime": 10,
            "counts": [1, 2, 3, 4, 5, 6, 0],
            "sum": 7.2,
        },
    },
    "server": {
        "uptime": 3.5,
        "physicalMemory": 1024,
        "threads": {"scheduler-threads": 4},
    },
    "error": False,
    "code": 200,
}


class FakeArangoDB:
    """
    Request handler emulating several ArangoDB servers, keyed by host.

    Unknown hosts fail with a connection error, wrong credentials get a 401
    and a statistics request without the issued token gets a 401.
    """

    def __init__(self, username: str = "root", password: str = "secret"):
        self.username = username
        self.password = password
        self.servers = {}
        self.requests = []

    def add(self, host, token="jwt-token", stats=None, login_body=None,
            stats_body=None, down=False):
        self.servers[host] = {
            "token": token,
            "stats": copy.deepcopy(STATS_PAYLOAD) if stats is None else stats,
            "login_body": login_body,
            "stats_body": stats_body,
            "down": down,
        }

    def requests_for(self, host, path=None):
        return [
            r for r in self.requests
            if r.url.host == host and (path is None or r.url.path == path)
        ]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        server = self.servers.get(request.url.host)
        if server is None or server["down"]:
            raise httpx.ConnectError("[Errno 111] Connection refused", request=request)

        if request.method == "POST" and request.url.path == "/_open/auth":
            if server["login_body"] is not None:
                return httpx.Response(200, content=server["login_body"])
            credentials = json.loads(request.content)
            if credentials != {"username": self.username, "password": self.password}:
                return httpx.Response(
                    401, json={"error": True, "errorMessage": "Wrong credentials", "code": 401}
                )
            return httpx.Response(200, json={"jwt": server["token"]})

        if request.method == "GET" and request.url.path == "/_admin/statistics":
            if request.headers.get("Authorization") != f"Bearer {server['token']}":
                return httpx.Response(401, json={"error": True, "code": 401})
            if server["stats_body"] is not None:
                return httpx.Response(200, content=server["stats_body"])
            return httpx.Response(200, json=server["stats"])

        return httpx.Response(404, json={"error": True, "code": 404})


@pytest.fixture
def logger():
    """Create logger for tests."""
    return setup_logger("test")


@pytest.fixture
def stats_payload():
    """Fresh copy of the sample statistics payload."""
    return copy.deepcopy(STATS_PAYLOAD)


@pytest.fixture
def fake_arangodb():
    """Fake ArangoDB servers with no hosts registered yet."""
    return FakeArangoDB()


@pytest.fixture
def transport(fake_arangodb):
    """httpx transport routing requests to the fake servers."""
    return httpx.MockTransport(fake_arangodb.handler)


@pytest.fixture
def make_config():
    """Build an ArangoDBConfig matching the fake servers' credentials."""
    def _make(urls, **overrides):
        values = {"urls": urls, "username": "root", "password": "secret"}
        values.update(overrides)
        return ArangoDBConfig(**values)
    return _make
