"""In-process channel pair for local wiring and tests."""

import inspect
import json
from contextvars import ContextVar
from typing import Any, Dict, Optional, Tuple, Union

import structlog

from agreement.channel.protocol import Handler
from agreement.utils.exceptions import ChannelCapabilityError, MethodNotFoundError

logger = structlog.get_logger(__name__)

Identity = Optional[Union[str, bytes]]

_current_caller: ContextVar[Identity] = ContextVar("loopback_current_caller", default=None)


class LoopbackChannel:
    """
    One end of an in-process channel.

    Payloads and results pass through a JSON round trip, so anything that
    would not survive a real wire fails here too. The caller identity is
    kept in a context variable, so concurrent calls see their own caller.
    """

    def __init__(self, public_key: Identity = None):
        self.public_key = public_key
        self.peer: Optional["LoopbackChannel"] = None
        self.methods: Dict[str, Handler] = {}

    @classmethod
    def pair(
        cls,
        client_key: Identity = b"\x01" * 32,
        server_key: Identity = b"\x02" * 32,
    ) -> Tuple["LoopbackChannel", "LoopbackChannel"]:
        """Create connected (client, server) ends."""
        client = cls(client_key)
        server = cls(server_key)
        client.peer = server
        server.peer = client
        return client, server

    def register_method(self, path: str, handler: Handler) -> None:
        if path in self.methods:
            logger.warning("Replacing channel method", path=path)
        self.methods[path] = handler

    async def invoke_remote(self, path: str, payload: Any) -> Any:
        if self.peer is None:
            raise ChannelCapabilityError("Loopback channel is not connected")
        return await self.peer.dispatch(path, payload, caller=self.public_key)

    def current_caller_identity(self) -> Identity:
        return _current_caller.get()

    async def dispatch(self, path: str, payload: Any, caller: Identity = None) -> Any:
        """Run the handler registered under ``path`` as if called by ``caller``."""
        handler = self.methods.get(path)
        if handler is None:
            raise MethodNotFoundError(path)

        token = _current_caller.set(caller)
        try:
            result = handler(_over_wire(payload))
            if inspect.isawaitable(result):
                result = await result
        finally:
            _current_caller.reset(token)
        return _over_wire(result)


def _over_wire(value: Any) -> Any:
    return json.loads(json.dumps(value))
