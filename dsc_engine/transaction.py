"""All-or-nothing execution of engine operations.

Each public operation runs inside ``StateJournal.atomic()``. Every participant
is snapshotted on entry and restored, newest first, if anything escapes the
block. Steps nest: an inner step entered by a re-entrant call rolls back on its
own failure and the outer step decides whether to propagate.

Snapshots are full copies of each participant's state, so a step costs time
proportional to everything the engine and its tokens hold, not to what the
step touches.
"""
from __future__ import annotations

import functools
import logging
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import Any, Callable, TypeVar

from .interfaces import Transactional

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


class StateJournal:
    """Snapshot/restore boundary around a set of mutable participants."""

    def __init__(self, participants: Iterable[Transactional] = ()) -> None:
        self._participants: list[Transactional] = []
        self.depth = 0
        for participant in participants:
            self.enlist(participant)

    def enlist(self, participant: object) -> None:
        """Track ``participant``; anything that cannot be rolled back is refused."""
        if not isinstance(participant, Transactional):
            raise TypeError(
                f"{participant!r} has no snapshot/restore and cannot join an atomic step"
            )
        if not any(p is participant for p in self._participants):
            self._participants.append(participant)

    @contextmanager
    def atomic(self, label: str = "step") -> Iterator[None]:
        snapshots = [(p, p.snapshot()) for p in self._participants]
        self.depth += 1
        try:
            yield
        except BaseException as e:
            for participant, snap in reversed(snapshots):
                participant.restore(snap)
            logger.debug("Reverted %s (depth %d): %s", label, self.depth, e)
            raise
        finally:
            self.depth -= 1


def atomic_operation(method: F) -> F:
    """Run an engine method inside its own ``self._journal.atomic()`` step."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._journal.atomic(method.__name__):
            return method(self, *args, **kwargs)

    return wrapper  # type: ignore[return-value]
