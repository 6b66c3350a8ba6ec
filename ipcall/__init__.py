"""
Public API:
- call, receive, ignore: module-level surface over the channel set by bind()
- Channel, connect: the same surface on an explicit, independent channel
- Dispatcher: routes inbound envelopes; ReceiverRegistry, PendingCalls: its state
- Envelope, Kind, ErrorInfo: wire-level types; encode/decode: the envelope codec
- Transport: abstract class transports must implement
- InMemoryTransport, PipeTransport: bundled transports
- RemoteError: raised at the call site when the receiver failed
"""

# Module-level surface
from .api import bind, unbind, current, call, receive, ignore

# Explicit channels
from .channel import Channel, connect
from .dispatcher import Dispatcher
from .receivers import ReceiverRegistry
from .pending import PendingCalls, Ok, Err

# Wire types & codec
from .message import Envelope, ErrorInfo, Kind
from .wire import encode, decode, pack_frame, unpack_frame
from .codecs import Codecs, JSONCodec, MsgPackCodec

# Transports
from .transport import Transport
from .transports import InMemoryTransport, PipeTransport

from .exceptions import IpcallError, EncodeError, RemoteError, NotBoundError

__all__ = [
    "bind",
    "unbind",
    "current",
    "call",
    "receive",
    "ignore",
    "Channel",
    "connect",
    "Dispatcher",
    "ReceiverRegistry",
    "PendingCalls",
    "Ok",
    "Err",
    "Envelope",
    "ErrorInfo",
    "Kind",
    "encode",
    "decode",
    "pack_frame",
    "unpack_frame",
    "Codecs",
    "JSONCodec",
    "MsgPackCodec",
    "Transport",
    "InMemoryTransport",
    "PipeTransport",
    "IpcallError",
    "EncodeError",
    "RemoteError",
    "NotBoundError",
]

__version__ = "0.1.0"
