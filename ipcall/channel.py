from __future__ import annotations
from typing import Any, Callable, List, Mapping, Optional
import asyncio

from .dispatcher import Dispatcher
from .receivers import Handler
from .transport import Transport


class Channel:
    """
    call / receive / ignore for one execution context.

    A call to a name the other side does not receive never settles. Pair
    every call with a receiver; there is no timeout.
    """

    def __init__(self, dispatcher: Dispatcher):
        self.dispatcher = dispatcher

    def call(self, name: str, *data: Any) -> "asyncio.Future[Any]":
        """Invoke `name` on the other side; await the returned future for its result."""
        return self.dispatcher.call(name, *data)

    def receive(self, name: str, handler: Optional[Handler] = None):
        """
        Serve calls to `name` with handler(*args). Replaces any earlier handler.
        Without a handler, returns a decorator:

            @channel.receive("add")
            def add(x, y): return x + y
        """
        if handler is None:
            def _decorate(fn: Handler) -> Handler:
                self.dispatcher.receivers.register(name, fn)
                return fn
            return _decorate
        self.dispatcher.receivers.register(name, handler)
        return handler

    def ignore(self, name: str) -> None:
        self.dispatcher.receivers.unregister(name)

    @property
    def receivers(self) -> List[str]:
        return self.dispatcher.receivers.names()

    @property
    def pending(self) -> int:
        return len(self.dispatcher.pending)

    def close(self) -> None:
        self.dispatcher.close()
        self.dispatcher.t.close()


def connect(transport: Transport, *,
            receivers: Optional[Mapping[str, Callable[..., Any]]] = None) -> Channel:
    """
    One-liner factory:
      a, b = InMemoryTransport.pair()
      left = connect(a, receivers={"add": lambda x, y: x + y})
      right = connect(b)
      await right.call("add", 2, 3)   # -> 5

    - transport: any Transport; the channel subscribes to it immediately
    - receivers: optional name -> handler mapping registered up front
    """
    ch = Channel(Dispatcher(transport))
    for name, handler in (receivers or {}).items():
        ch.receive(name, handler)
    return ch
