from __future__ import annotations
from typing import Any, Optional
import asyncio

from .channel import Channel, connect
from .exceptions import NotBoundError
from .receivers import Handler
from .transport import Transport

# The channel of this process, set by bind()
_default: Optional[Channel] = None


def bind(transport: Transport) -> Channel:
    """Make `transport` this process's channel. Rebinding closes the previous one."""
    global _default
    if _default is not None:
        _default.close()
    _default = connect(transport)
    return _default


def unbind() -> None:
    global _default
    if _default is not None:
        _default.close()
    _default = None


def current() -> Channel:
    if _default is None:
        raise NotBoundError("ipcall is not bound to a transport; call ipcall.bind() first")
    return _default


def call(name: str, *data: Any) -> "asyncio.Future[Any]":
    return current().call(name, *data)


def receive(name: str, handler: Optional[Handler] = None):
    return current().receive(name, handler)


def ignore(name: str) -> None:
    current().ignore(name)
