from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Callable

Receiver = Callable[[Any], None]

class Transport(ABC):
    """
    Moves opaque values between the two contexts. Fire-and-forget; the
    values handed to send() arrive as copies on the other side.
    """

    @abstractmethod
    def send(self, value: Any) -> None:
        """Hand one value to the other context."""
        raise NotImplementedError

    @abstractmethod
    def on_receive(self, cb: Receiver) -> None:
        """cb is invoked once per arriving value, on the event loop thread."""
        raise NotImplementedError

    @abstractmethod
    def close(self) -> None:
        raise NotImplementedError
