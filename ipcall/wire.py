from __future__ import annotations
from typing import Any, Dict, Mapping, Optional, Set
import logging

from .codecs import Codec, dumps_strict
from .exceptions import EncodeError
from .message import Envelope, ErrorInfo, Kind

log = logging.getLogger(__name__)

# Reserved marker separating our envelopes from foreign traffic on the same channel
MARKER = "__ipcall__"
MARKER_VERSION = 1

_SCALARS = (type(None), bool, int, float, str, bytes)


def encode(env: Envelope) -> Dict[str, Any]:
    """Envelope -> plain mapping the transport can copy. Raises EncodeError."""
    out: Dict[str, Any] = {MARKER: MARKER_VERSION, "kind": str(env.kind), "id": env.id}
    if env.kind == Kind.INVOKE:
        check_value(env.payload, what=f"arguments of {env.name!r}")
        out["name"] = env.name
        out["payload"] = list(env.payload)
    elif env.kind == Kind.REPLY_OK:
        check_value(env.payload, what="return value")
        out["payload"] = env.payload
    else:
        out["error"] = env.error.to_dict()
    return out


def decode(value: Any) -> Optional[Envelope]:
    """Mapping -> Envelope, or None when the value is not one of ours."""
    if not isinstance(value, Mapping) or value.get(MARKER) != MARKER_VERSION:
        return None
    try:
        kind = Kind(value.get("kind"))
        if kind == Kind.INVOKE:
            return Envelope.invoke(value.get("id"), value.get("name"), _as_args(value.get("payload")))
        if kind == Kind.REPLY_OK:
            return Envelope.reply_ok(value.get("id"), value.get("payload"))
        return Envelope.reply_error(value.get("id"), ErrorInfo.from_wire(value.get("error")))
    except (ValueError, TypeError) as ex:
        log.debug("malformed envelope dropped: %s", ex)
        return None


def pack_frame(env: Envelope, codec: Codec) -> bytes:
    return dumps_strict(codec, encode(env))


def unpack_frame(frame: bytes, codec: Codec) -> Optional[Envelope]:
    try:
        obj = codec.loads(frame)
    except Exception as ex:
        log.debug("undecodable %s frame dropped: %s", codec.name, ex)
        return None
    return decode(obj)


def check_value(value: Any, *, what: str = "value") -> None:
    """
    Reject anything the transports cannot carry: only None/bool/int/float/str/bytes,
    lists/tuples and str-keyed dicts, without cycles.
    """
    try:
        _check(value, what, set())
    except RecursionError:
        raise EncodeError(f"{what}: nested too deeply") from None


def _check(value: Any, what: str, seen: Set[int]) -> None:
    if isinstance(value, _SCALARS):
        return
    if isinstance(value, (list, tuple, dict)):
        if id(value) in seen:
            raise EncodeError(f"{what}: cyclic reference")
        seen.add(id(value))
        if isinstance(value, dict):
            for k, v in value.items():
                if not isinstance(k, str):
                    raise EncodeError(f"{what}: dict keys must be str, got {type(k).__name__}")
                _check(v, what, seen)
        else:
            for v in value:
                _check(v, what, seen)
        seen.discard(id(value))
        return
    raise EncodeError(f"{what}: unsupported type {type(value).__name__}")


def _as_args(payload: Any) -> Any:
    # None is tolerated as "no arguments"
    if payload is None:
        return ()
    if not isinstance(payload, (list, tuple)):
        raise ValueError("invoke payload must be a list")
    return payload
