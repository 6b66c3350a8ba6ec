from __future__ import annotations
from typing import Any, Dict, Protocol as TypingProtocol, Union

import json

import msgpack

from .exceptions import EncodeError

class Codec(TypingProtocol):
    name: str
    def dumps(self, obj: Any) -> bytes: ...
    def loads(self, data: bytes) -> Any: ...

class JSONCodec:
    """bytes values are not representable in JSON; use msgpack for those."""
    name = "json"
    def dumps(self, obj: Any) -> bytes:
        return json.dumps(obj, separators=(",", ":"), allow_nan=False).encode("utf-8")
    def loads(self, data: bytes) -> Any:
        return json.loads(data.decode("utf-8"))

class MsgPackCodec:
    name = "msgpack"
    def dumps(self, obj: Any) -> bytes:
        return msgpack.packb(obj, use_bin_type=True)
    def loads(self, data: bytes) -> Any:
        return msgpack.unpackb(data, raw=False)

class Codecs:
    _registry: Dict[str, Codec] = {"json": JSONCodec(), "msgpack": MsgPackCodec()}

    @classmethod
    def get(cls, name: str) -> Codec:
        if name not in cls._registry:
            raise ValueError(f"Unknown codec: {name}")
        return cls._registry[name]

    @classmethod
    def register(cls, codec: Codec) -> None:
        cls._registry[codec.name] = codec

    @classmethod
    def resolve(cls, codec: Union[str, Codec]) -> Codec:
        """Name or instance -> instance."""
        return cls.get(codec) if isinstance(codec, str) else codec

def dumps_strict(codec: Codec, obj: Any) -> bytes:
    """codec.dumps, with serialization failures reported as EncodeError."""
    try:
        return codec.dumps(obj)
    except (TypeError, ValueError, OverflowError, RecursionError) as ex:
        raise EncodeError(f"{codec.name} cannot serialize value: {ex}") from ex
