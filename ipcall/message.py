from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional
from enum import StrEnum
import traceback

# Allowed envelope kinds
class Kind(StrEnum):
    INVOKE      = "invoke"
    REPLY_OK    = "reply-ok"
    REPLY_ERROR = "reply-error"


@dataclass(frozen=True)
class ErrorInfo:
    """Serializable description of a failure raised inside a receiver."""
    message: str
    type: Optional[str] = None
    traceback: Optional[str] = None

    @staticmethod
    def from_exception(exc: BaseException) -> "ErrorInfo":
        name = type(exc).__name__
        try:
            message = str(exc) or name
        except Exception:
            message = name
        try:
            tb = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        except Exception:
            tb = None
        return ErrorInfo(message=message, type=name, traceback=tb)

    @staticmethod
    def from_wire(value: Any) -> "ErrorInfo":
        if value is None:
            raise ValueError("reply-error without an error")
        # Peers may only send text
        if isinstance(value, str):
            return ErrorInfo(message=value)
        if isinstance(value, Mapping):
            return ErrorInfo(
                message=str(value.get("message", "")),
                type=_opt_str(value.get("type")),
                traceback=_opt_str(value.get("traceback")),
            )
        return ErrorInfo(message=str(value))

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {"message": self.message, "type": self.type, "traceback": self.traceback}


@dataclass(frozen=True)
class Envelope:
    """
    The only thing that crosses the boundary.

    invoke      -> name + payload (tuple of positional args)
    reply-ok    -> payload (single return value)
    reply-error -> error
    """
    kind: Kind
    id: str                          # correlation id, chosen by the caller side
    name: Optional[str] = None       # call name, invoke only
    payload: Any = None              # args (invoke) or return value (reply-ok)
    error: Optional[ErrorInfo] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", Kind(self.kind))
        if not isinstance(self.id, str) or not self.id:
            raise ValueError("Envelope id must be a non-empty string")
        if self.kind == Kind.INVOKE:
            if not isinstance(self.name, str):
                raise ValueError("invoke requires a 'name'")
            if self.error is not None:
                raise ValueError("invoke cannot carry an error")
            if not isinstance(self.payload, (list, tuple)):
                raise ValueError("invoke payload must be a sequence of arguments")
            object.__setattr__(self, "payload", tuple(self.payload))
        elif self.kind == Kind.REPLY_OK:
            if self.name is not None or self.error is not None:
                raise ValueError("reply-ok carries only a payload")
        else:
            if self.name is not None or self.payload is not None:
                raise ValueError("reply-error carries only an error")
            if not isinstance(self.error, ErrorInfo):
                raise ValueError("reply-error requires an ErrorInfo")

    @staticmethod
    def invoke(id: str, name: str, args: Any) -> "Envelope":
        return Envelope(kind=Kind.INVOKE, id=id, name=name, payload=tuple(args))

    @staticmethod
    def reply_ok(id: str, value: Any) -> "Envelope":
        return Envelope(kind=Kind.REPLY_OK, id=id, payload=value)

    @staticmethod
    def reply_error(id: str, error: ErrorInfo) -> "Envelope":
        return Envelope(kind=Kind.REPLY_ERROR, id=id, error=error)


def _opt_str(v: Any) -> Optional[str]:
    return None if v is None else str(v)
