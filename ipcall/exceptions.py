from __future__ import annotations
from typing import Optional


class IpcallError(Exception):
    pass


class EncodeError(IpcallError, TypeError):
    """A value cannot be represented on the wire."""
    pass


class NotBoundError(IpcallError, RuntimeError):
    pass


class RemoteError(IpcallError):
    """
    Raised at the call site when the receiver on the other side failed.
    Exception identity does not cross the boundary, only its description.
    """

    def __init__(self, message: str, remote_type: Optional[str] = None,
                 remote_traceback: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.remote_type = remote_type
        self.remote_traceback = remote_traceback

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"RemoteError({self.message!r}, remote_type={self.remote_type!r})"
