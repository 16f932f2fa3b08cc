from agreement.channel.protocol import Channel, Handler, caller_identity, ensure_channel
from agreement.channel.loopback import LoopbackChannel

__all__ = [
    "Channel",
    "Handler",
    "LoopbackChannel",
    "caller_identity",
    "ensure_channel",
]
