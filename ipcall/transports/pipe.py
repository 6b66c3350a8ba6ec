from __future__ import annotations
import asyncio
import logging
import multiprocessing
import threading
from multiprocessing.connection import Connection
from typing import Any, Optional, Tuple, Union

from ..codecs import Codec, Codecs, dumps_strict
from ..transport import Receiver, Transport

log = logging.getLogger(__name__)


class PipeTransport(Transport):
    """Transport over a multiprocessing Connection.

    Mapping:
    - send() -> codec bytes -> Connection.send_bytes
    - a daemon thread polls the connection and hands each frame to the
      event loop with call_soon_threadsafe; decoding happens on the loop

    Frames that fail to decode are dropped with a warning.
    """

    def __init__(self, conn: Connection, codec: Union[str, Codec] = "json", *,
                 loop: Optional[asyncio.AbstractEventLoop] = None,
                 poll_interval: float = 0.1):
        self.conn = conn
        self.codec = Codecs.resolve(codec)
        self._loop = loop
        self._poll = poll_interval
        self._cb: Optional[Receiver] = None
        self._running = False
        self._rx_thread: Optional[threading.Thread] = None
        self._send_lock = threading.Lock()

    @classmethod
    def pair(cls, codec: Union[str, Codec] = "json", **kwargs) -> Tuple["PipeTransport", "PipeTransport"]:
        a, b = multiprocessing.Pipe(duplex=True)
        return cls(a, codec, **kwargs), cls(b, codec, **kwargs)

    def send(self, value: Any) -> None:
        frame = dumps_strict(self.codec, value)
        if self.conn.closed:
            return
        with self._send_lock:
            try:
                self.conn.send_bytes(frame)
            except (BrokenPipeError, EOFError, OSError) as ex:
                # fire-and-forget: a dead peer is a lost message, not an error
                log.debug("pipe send dropped: %s", ex)

    def on_receive(self, cb: Receiver) -> None:
        """Subscribe and start the reader. Needs a loop (given or running)."""
        self._cb = cb
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        self.start()

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._rx_thread = threading.Thread(target=self._rx_loop, name="ipcall-pipe-rx", daemon=True)
        self._rx_thread.start()

    def close(self) -> None:
        self._running = False
        self._cb = None
        if self._rx_thread and self._rx_thread is not threading.current_thread():
            # blocks the loop for at most about one poll interval
            self._rx_thread.join(timeout=2 * self._poll)
        self.conn.close()

    def _rx_loop(self) -> None:
        while self._running:
            try:
                if not self.conn.poll(self._poll):
                    continue
                frame = self.conn.recv_bytes()
            except (EOFError, OSError):
                # peer hung up
                self._running = False
                break
            try:
                self._loop.call_soon_threadsafe(self._deliver, frame)
            except RuntimeError:
                # loop closed underneath us
                self._running = False
                break

    def _deliver(self, frame: bytes) -> None:
        cb = self._cb
        if cb is None:
            return
        try:
            value = self.codec.loads(frame)
        except Exception as ex:
            log.warning("undecodable %s frame dropped (%d bytes): %s", self.codec.name, len(frame), ex)
            return
        cb(value)
