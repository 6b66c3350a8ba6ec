from __future__ import annotations
import asyncio
from typing import Any, Optional, Tuple, Union

from ..codecs import Codec, Codecs, dumps_strict
from ..transport import Receiver, Transport


class InMemoryTransport(Transport):
    """One end of a connected pair living on the same event loop.

    Values are copied through the codec on send, so whatever would not survive
    a real process boundary fails here too. Delivery is scheduled with
    loop.call_soon, never inline.
    """

    def __init__(self, codec: Union[str, Codec] = "json"):
        self.codec = Codecs.resolve(codec)
        self._peer: Optional[InMemoryTransport] = None
        self._cb: Optional[Receiver] = None
        self._closed = False

    @classmethod
    def pair(cls, codec: Union[str, Codec] = "json") -> Tuple["InMemoryTransport", "InMemoryTransport"]:
        a, b = cls(codec), cls(codec)
        a._peer, b._peer = b, a
        return a, b

    def send(self, value: Any) -> None:
        frame = dumps_strict(self.codec, value)
        peer = self._peer
        if self._closed or peer is None or peer._closed:
            return
        asyncio.get_running_loop().call_soon(peer._deliver, frame)

    def on_receive(self, cb: Receiver) -> None:
        self._cb = cb

    def close(self) -> None:
        self._closed = True
        self._cb = None

    def _deliver(self, frame: bytes) -> None:
        if self._closed or self._cb is None:
            return
        self._cb(self.codec.loads(frame))
