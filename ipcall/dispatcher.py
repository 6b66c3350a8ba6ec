from __future__ import annotations
from typing import Any, Optional, Set
import asyncio
import inspect
import logging

from .exceptions import EncodeError, IpcallError
from .message import Envelope, ErrorInfo, Kind
from .pending import Err, Ok, PendingCalls
from .receivers import Handler, ReceiverRegistry
from .transport import Transport
from .wire import decode, encode

log = logging.getLogger(__name__)


class Dispatcher:

    # Notes:
    # - One instance per context; it owns the receivers and the pending table
    # - Replies are matched by id only, never by arrival order
    # - No reply is sent for a name nobody receives; that caller waits forever
    # - Unrecognized traffic and stray replies are dropped silently
    # Runs entirely on one event loop; no locking

    def __init__(self, transport: Transport,
                 receivers: Optional[ReceiverRegistry] = None,
                 pending: Optional[PendingCalls] = None):
        self.t = transport
        self.receivers = receivers if receivers is not None else ReceiverRegistry()
        self.pending = pending if pending is not None else PendingCalls()
        self._tasks: Set["asyncio.Task[None]"] = set()
        self._closed = False

        self.t.on_receive(self.handle_message)

    def call(self, name: str, *args: Any) -> "asyncio.Future[Any]":
        """
        Send an invoke for `name` and return a future for its single result.
        Raises EncodeError right away when the arguments cannot cross.
        """
        if self._closed:
            raise IpcallError(f"cannot call {name!r}: dispatcher is closed")
        call_id, fut = self.pending.create()
        try:
            self._send(Envelope.invoke(call_id, name, args))
        except BaseException:
            self.pending.discard(call_id)
            raise
        return fut

    def handle_message(self, value: Any) -> None:
        """Inbound path; the transport calls this once per arriving value."""
        if self._closed:
            return
        env = decode(value)
        if env is None:
            log.debug("ignoring foreign message of type %s", type(value).__name__)
            return

        if env.kind == Kind.REPLY_OK:
            self.pending.settle(env.id, Ok(env.payload))
            return

        if env.kind == Kind.REPLY_ERROR:
            self.pending.settle(env.id, Err(env.error))
            return

        handler = self.receivers.lookup(env.name)
        if handler is None:
            log.debug("no receiver for %r; call %s will not be answered", env.name, env.id)
            return
        self._invoke(env, handler)

    def close(self) -> None:
        """Stop handling inbound traffic and cancel handlers still running."""
        self._closed = True
        for task in list(self._tasks):
            task.cancel()

    # ---- receiving side ----
    def _invoke(self, env: Envelope, handler: Handler) -> None:
        try:
            result = handler(*env.payload)
        except asyncio.CancelledError:
            self._reply_error(env.id, RuntimeError("receiver was cancelled"))
            return
        except Exception as ex:
            self._reply_error(env.id, ex)
            return

        if not inspect.isawaitable(result):
            self._reply_ok(env.id, result)
            return

        task = asyncio.ensure_future(self._finish(env.id, result))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _finish(self, call_id: str, awaitable: Any) -> None:
        try:
            value = await awaitable
        except asyncio.CancelledError:
            if self._closed:
                raise
            # handler cancelled itself; report it like any other failure
            self._reply_error(call_id, RuntimeError("receiver was cancelled"))
            return
        except Exception as ex:
            self._reply_error(call_id, ex)
            return
        self._reply_ok(call_id, value)

    def _reply_ok(self, call_id: str, value: Any) -> None:
        try:
            self._send(Envelope.reply_ok(call_id, value))
        except EncodeError as ex:
            # the value cannot cross; the caller still gets an answer
            self._reply_error(call_id, ex)

    def _reply_error(self, call_id: str, ex: BaseException) -> None:
        self._send(Envelope.reply_error(call_id, ErrorInfo.from_exception(ex)))

    def _send(self, env: Envelope) -> None:
        self.t.send(encode(env))
