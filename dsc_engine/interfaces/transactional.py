"""Transactional protocol — state that can be rolled back with an atomic step."""
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Transactional(Protocol):
    """Anything able to capture and restore its own mutable state."""

    def snapshot(self) -> Any: ...

    def restore(self, snapshot: Any) -> None: ...
