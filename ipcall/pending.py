from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Tuple, Union
import asyncio
import logging
import uuid

from .exceptions import RemoteError
from .message import ErrorInfo

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Ok:
    value: Any

@dataclass(frozen=True)
class Err:
    reason: ErrorInfo

Outcome = Union[Ok, Err]


class PendingCalls:
    """
    Outstanding calls keyed by correlation id.

    An entry lives until its reply arrives. There is no expiry: a call whose
    reply never comes stays pending for the lifetime of the table.
    """

    def __init__(self) -> None:
        self._waiting: Dict[str, "asyncio.Future[Any]"] = {}
        self._issued = 0

    def create(self) -> Tuple[str, "asyncio.Future[Any]"]:
        """Allocate a fresh id and a future bound to the running loop."""
        loop = asyncio.get_running_loop()
        call_id = uuid.uuid4().hex
        while call_id in self._waiting:
            call_id = uuid.uuid4().hex
        fut: "asyncio.Future[Any]" = loop.create_future()
        self._waiting[call_id] = fut
        self._issued += 1
        return call_id, fut

    def discard(self, call_id: str) -> None:
        """Forget an entry without settling it (the call never left)."""
        self._waiting.pop(call_id, None)

    def settle(self, call_id: str, outcome: Outcome) -> bool:
        """Settle once. Unknown or already-settled ids are dropped; returns False."""
        fut = self._waiting.pop(call_id, None)
        if fut is None:
            log.debug("stray reply for %s dropped", call_id)
            return False
        if fut.done():
            # caller gave up on it (cancelled the future)
            return False
        if isinstance(outcome, Ok):
            fut.set_result(outcome.value)
        else:
            r = outcome.reason
            fut.set_exception(RemoteError(r.message, r.type, r.traceback))
        return True

    @property
    def issued(self) -> int:
        return self._issued

    def __contains__(self, call_id: object) -> bool:
        return call_id in self._waiting

    def __len__(self) -> int:
        return len(self._waiting)
