from .inmemory import InMemoryTransport
from .pipe import PipeTransport

__all__ = ["InMemoryTransport", "PipeTransport"]
