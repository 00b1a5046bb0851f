"""
Sequential interactive mapping.

A :class:`MappingSession` walks a queue of unmapped references and waits for
a grid target to be chosen for each one. It is an explicit state machine::

    IDLE --start()--> AWAITING_USER_CHOICE --resolve(target)--> RESOLVED
                              |                                   |
                              +--------skip()------> SKIPPED      |
                                                        |         |
                      AWAITING_USER_CHOICE <--advance()-+---------+
                      (or IDLE when the queue is exhausted)

``cancel()`` returns to IDLE from any state. How a user picks the target is
up to the caller; the session only records the choice in the store.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Iterable
from enum import Enum

from pycabinetwiring.exceptions import MappingSessionError
from pycabinetwiring.mapping.models import ComponentMapping
from pycabinetwiring.mapping.store import MappingStore
from pycabinetwiring.model.targets import GridTarget


class SessionState(Enum):
    IDLE = "idle"
    AWAITING_USER_CHOICE = "awaiting a choice"
    RESOLVED = "resolved"
    SKIPPED = "skipped"


class MappingSession:
    """
    Queue-driven mapping of references one at a time.

    Args:
        store: Store that receives the chosen mappings.
        on_completed: Called with ``(reference, state)`` after each
            :meth:`resolve` or :meth:`skip`.

    Example::

        session = MappingSession(store)
        ref = session.start(find_unmapped_references(source, store.resolver()))
        while ref is not None:
            session.resolve(pick_target_for(ref))
            ref = session.advance()
    """

    def __init__(
        self,
        store: MappingStore,
        on_completed: Callable[[str, SessionState], None] | None = None,
    ):
        self.store = store
        self.on_completed = on_completed
        self.state = SessionState.IDLE
        self.current: str | None = None
        self.resolved: list[str] = []
        self.skipped: list[str] = []
        self._queue: deque[str] = deque()

    @property
    def remaining(self) -> int:
        """References still queued after the current one."""
        return len(self._queue)

    @property
    def is_active(self) -> bool:
        return self.state is not SessionState.IDLE

    def start(self, references: Iterable[str]) -> str | None:
        """
        Queue *references* and move to the first one needing a mapping.

        Returns:
            The reference awaiting a choice, or None if all are covered.
        """
        if self.state is not SessionState.IDLE:
            raise MappingSessionError("start", self.state.value)
        self._queue = deque(r.strip() for r in references if r and r.strip())
        self.resolved = []
        self.skipped = []
        return self._next()

    def advance(self) -> str | None:
        """Move on after a resolve or skip."""
        if self.state not in (SessionState.RESOLVED, SessionState.SKIPPED):
            raise MappingSessionError("advance", self.state.value)
        return self._next()

    def resolve(self, target: GridTarget) -> ComponentMapping:
        """Map the current reference to *target*."""
        if self.state is not SessionState.AWAITING_USER_CHOICE:
            raise MappingSessionError("resolve", self.state.value)
        mapping = self.store.add_target(self.current, target)
        self.resolved.append(self.current)
        self._complete(SessionState.RESOLVED)
        return mapping

    def skip(self) -> None:
        """Leave the current reference unmapped."""
        if self.state is not SessionState.AWAITING_USER_CHOICE:
            raise MappingSessionError("skip", self.state.value)
        self.skipped.append(self.current)
        self._complete(SessionState.SKIPPED)

    def undo(self) -> str:
        """
        Remove the most recent mapping made in this session and ask for it
        again.

        Returns:
            The reference now awaiting a choice.
        """
        if self.state is SessionState.IDLE or not self.resolved:
            raise MappingSessionError("undo", self.state.value)
        reference = self.resolved.pop()
        self.store.remove_mapping(reference)
        if self.state is SessionState.AWAITING_USER_CHOICE:
            self._queue.appendleft(self.current)
        self.current = reference
        self.state = SessionState.AWAITING_USER_CHOICE
        return reference

    def cancel(self) -> None:
        self._queue.clear()
        self.current = None
        self.state = SessionState.IDLE

    def _complete(self, state: SessionState) -> None:
        self.state = state
        if self.on_completed is not None:
            self.on_completed(self.current, state)

    def _next(self) -> str | None:
        resolver = self.store.resolver()
        while self._queue:
            reference = self._queue.popleft()
            if resolver.has_any_mapping(reference):
                continue
            self.current = reference
            self.state = SessionState.AWAITING_USER_CHOICE
            return reference
        self.current = None
        self.state = SessionState.IDLE
        return None
