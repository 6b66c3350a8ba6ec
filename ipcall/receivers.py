from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

Handler = Callable[..., Any]

@dataclass
class ReceiverRegistry:
    # call name -> the one active handler
    handlers: Dict[str, Handler] = field(default_factory=dict)

    def register(self, name: str, handler: Handler) -> None:
        """Store handler for name; an existing one is replaced silently."""
        if not callable(handler):
            raise TypeError(f"handler for {name!r} is not callable")
        self.handlers[name] = handler

    def unregister(self, name: str) -> None:
        self.handlers.pop(name, None)

    def lookup(self, name: str) -> Optional[Handler]:
        return self.handlers.get(name)

    def names(self) -> List[str]:
        return sorted(self.handlers)

    def __contains__(self, name: object) -> bool:
        return name in self.handlers

    def __len__(self) -> int:
        return len(self.handlers)
