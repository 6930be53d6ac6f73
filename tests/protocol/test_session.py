"""Tests for SessionStore."""

import asyncio

from medusa_mcp.protocol.session import Session, SessionState, SessionStore


class TestSession:
    def test_state_follows_initialized_flag(self) -> None:
        session = Session(id="s", created_at=0, last_activity=0)
        assert session.state is SessionState.UNINITIALIZED
        session.initialized = True
        assert session.state is SessionState.INITIALIZED


class TestSessionStore:
    def test_get_or_create_without_id_creates(self, sessions: SessionStore) -> None:
        sid, session, is_new = sessions.get_or_create(None)
        assert is_new is True
        assert session.id == sid
        assert sid in sessions
        assert len(sessions) == 1

    def test_known_id_is_reused_and_touched(self, sessions: SessionStore, clock) -> None:
        sid, session, _ = sessions.get_or_create()
        clock.advance(60)
        again = sessions.get_or_create(sid)
        assert again.is_new is False
        assert again.session is session
        assert session.last_activity == clock.now

    def test_unknown_id_is_not_adopted(self, sessions: SessionStore) -> None:
        sid, _, is_new = sessions.get_or_create("client-chosen-id")
        assert is_new is True
        assert sid != "client-chosen-id"
        assert "client-chosen-id" not in sessions

    def test_ids_are_unique(self, sessions: SessionStore) -> None:
        ids = {sessions.create().id for _ in range(50)}
        assert len(ids) == 50

    def test_get_does_not_touch(self, sessions: SessionStore, clock) -> None:
        session = sessions.create()
        clock.advance(10)
        assert sessions.get(session.id) is session
        assert session.last_activity == session.created_at
        assert sessions.get(None) is None
        assert sessions.get("missing") is None

    def test_terminate(self, sessions: SessionStore) -> None:
        session = sessions.create()
        assert sessions.terminate(session.id) is True
        assert session.id not in sessions
        assert sessions.terminate(session.id) is False

    def test_terminated_id_gets_fresh_session(self, sessions: SessionStore) -> None:
        session = sessions.create()
        sessions.terminate(session.id)
        sid, _, is_new = sessions.get_or_create(session.id)
        assert is_new is True
        assert sid != session.id

    def test_sweep_evicts_idle_sessions(self, sessions: SessionStore, clock) -> None:
        stale = sessions.create()
        clock.advance(1000)
        fresh = sessions.create()
        clock.advance(1000)
        assert sessions.sweep() == 1
        assert stale.id not in sessions
        assert fresh.id in sessions

    def test_sweep_keeps_session_at_exact_ttl(self, sessions: SessionStore, clock) -> None:
        session = sessions.create()
        assert sessions.sweep(now=clock.now + sessions.ttl) == 0
        assert session.id in sessions

    async def test_sweep_loop_runs_in_background(self) -> None:
        ticks = iter([0.0, 10.0, 10.0, 10.0, 10.0, 10.0])
        store = SessionStore(ttl=5, sweep_interval=0.01, clock=lambda: next(ticks, 10.0))
        session = store.create()
        await store.start()
        for _ in range(50):
            if session.id not in store:
                break
            await asyncio.sleep(0.01)
        await store.stop()
        assert session.id not in store

    async def test_stop_without_start_is_harmless(self, sessions: SessionStore) -> None:
        await sessions.stop()
