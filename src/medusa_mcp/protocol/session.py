"""In-memory session lifecycle for the HTTP transport.

Sessions are keyed by an opaque UUID4. The store is the sole owner of
session state; callers mutate fields on the returned :class:`Session`
but never keep it across requests.

The map lives in a single process. Multi-instance deployments need an
external shared store instead.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
import time
import uuid
from collections.abc import Callable
from enum import Enum
from typing import Any, NamedTuple

from pydantic import BaseModel

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL = 30 * 60.0
DEFAULT_SWEEP_INTERVAL = 5 * 60.0


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"


class Session(BaseModel):
    """Per-client protocol state.

    ``initialized`` only moves from False to True. No method refuses to run
    on an uninitialized session; the state is tracked for clients that
    inspect it.
    """

    id: str
    created_at: float
    last_activity: float
    initialized: bool = False
    client_info: dict[str, Any] | None = None

    @property
    def state(self) -> SessionState:
        return SessionState.INITIALIZED if self.initialized else SessionState.UNINITIALIZED


class SessionLookup(NamedTuple):
    id: str
    session: Session
    is_new: bool


class SessionStore:
    """Thread-safe session map with TTL eviction.

    Usage::

        store = SessionStore(ttl=1800)
        await store.start()                     # background sweep
        sid, session, is_new = store.get_or_create(header_value)
        ...
        await store.stop()
    """

    def __init__(
        self,
        *,
        ttl: float = DEFAULT_SESSION_TTL,
        sweep_interval: float = DEFAULT_SWEEP_INTERVAL,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._ttl = ttl
        self._sweep_interval = sweep_interval
        self._clock = clock
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()
        self._sweeper: asyncio.Task[None] | None = None

    @property
    def ttl(self) -> float:
        return self._ttl

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def get(self, session_id: str | None) -> Session | None:
        """Return the session for *session_id* without touching its activity."""
        if session_id is None:
            return None
        return self._sessions.get(session_id)

    def create(self) -> Session:
        """Mint a fresh session with a random id."""
        now = self._clock()
        session = Session(id=str(uuid.uuid4()), created_at=now, last_activity=now)
        with self._lock:
            self._sessions[session.id] = session
        logger.debug("Created session %s", session.id)
        return session

    def get_or_create(self, session_id: str | None = None) -> SessionLookup:
        """Resolve *session_id* to a live session, creating one when unknown.

        An unknown id is never adopted as a key; a new id is generated so a
        client cannot pin a session to an id of its choosing.
        """
        if session_id:
            with self._lock:
                session = self._sessions.get(session_id)
                if session is not None:
                    session.last_activity = self._clock()
                    return SessionLookup(session.id, session, False)
        session = self.create()
        return SessionLookup(session.id, session, True)

    def terminate(self, session_id: str) -> bool:
        """Delete a session; return whether it existed."""
        with self._lock:
            removed = self._sessions.pop(session_id, None)
        if removed is not None:
            logger.info("Terminated session %s", session_id)
        return removed is not None

    def sweep(self, now: float | None = None) -> int:
        """Remove every session idle for longer than the TTL.

        The surviving map is built first and swapped in as a whole.
        Returns the number of evicted sessions.
        """
        if now is None:
            now = self._clock()
        with self._lock:
            alive = {
                sid: session
                for sid, session in self._sessions.items()
                if now - session.last_activity <= self._ttl
            }
            evicted = len(self._sessions) - len(alive)
            self._sessions = alive
        if evicted:
            logger.info("Evicted %d expired session(s)", evicted)
        return evicted

    async def start(self) -> None:
        """Start the periodic sweep task on the running event loop."""
        if self._sweeper is None or self._sweeper.done():
            self._sweeper = asyncio.create_task(self._sweep_loop())

    async def stop(self) -> None:
        """Cancel the sweep task."""
        if self._sweeper is not None:
            self._sweeper.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._sweeper
            self._sweeper = None

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self._sweep_interval)
            self.sweep()
