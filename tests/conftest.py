"""Shared fixtures for agreement tests."""

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pytest

from agreement import Agreement, LoopbackChannel, params
from agreement.utils.settings import get_settings

FIXTURES_DIR = Path(__file__).parent / "fixtures"

CLIENT_KEY = b"\xaa" * 32
SERVER_KEY = b"\xbb" * 32


class RecordingChannel:
    """Channel double: records outgoing calls and answers from a table."""

    def __init__(self, identity: Optional[bytes] = b"\x03" * 32):
        self.identity = identity
        self.methods: Dict[str, Any] = {}
        self.calls: List[Tuple[str, Any]] = []
        self.responses: Dict[str, Any] = {}

    def register_method(self, path, handler):
        self.methods[path] = handler

    async def invoke_remote(self, path, payload):
        self.calls.append((path, payload))
        return self.responses.get(path)

    def current_caller_identity(self):
        return self.identity


@pytest.fixture
def fresh_settings():
    """Settings are cached per process; tests that patch the env need a clean read."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fixtures_dir():
    return FIXTURES_DIR


@pytest.fixture
def calc_agreement():
    """The calc agreement: one ``add`` route over two numbers."""
    return Agreement(
        role="calc",
        version="1.0.0",
        routes={
            "add": params({"a": float, "b": float}).returns(float),
        },
    )


@pytest.fixture
def channels():
    """Connected (client, server) loopback ends."""
    return LoopbackChannel.pair(client_key=CLIENT_KEY, server_key=SERVER_KEY)


@pytest.fixture
def client_channel(channels):
    return channels[0]


@pytest.fixture
def server_channel(channels):
    return channels[1]


@pytest.fixture
def recording_channel():
    return RecordingChannel()
