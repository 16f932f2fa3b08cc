"""Channel capabilities the binders rely on. Transport is the host's choice."""

from typing import Any, Awaitable, Callable, Optional, Protocol, Union, runtime_checkable

from agreement.utils.exceptions import CallerIdentityError, ChannelCapabilityError

Handler = Callable[[Any], Awaitable[Any]]


@runtime_checkable
class Channel(Protocol):
    """Bidirectional multiplexed channel: register methods, call the peer's."""

    def register_method(self, path: str, handler: Handler) -> None:
        ...

    async def invoke_remote(self, path: str, payload: Any) -> Any:
        ...

    def current_caller_identity(self) -> Optional[Union[str, bytes]]:
        """Remote identity (eg public key) of the call being handled."""
        ...


def ensure_channel(channel: Any) -> Channel:
    if not isinstance(channel, Channel):
        raise ChannelCapabilityError(
            f"{type(channel).__name__} does not provide "
            "register_method, invoke_remote and current_caller_identity"
        )
    return channel


def caller_identity(channel: Channel) -> str:
    """Caller identity as a string; bytes identities are rendered as hex."""
    identity = channel.current_caller_identity()
    if identity is None or len(identity) == 0:
        raise CallerIdentityError("Channel connection exposes no remote identity")
    if isinstance(identity, (bytes, bytearray)):
        return identity.hex()
    return str(identity)
