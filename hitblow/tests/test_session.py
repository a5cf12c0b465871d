"""
Tests for the in-memory session manager.
"""

import time

from ..engine_core import Action, ErrorCode, GamePhase
from ..session import SessionManager, SessionState
from .conftest import P1, P2, ScriptedRandom


class TestSessionManager:
    """Session lifecycle."""

    def test_create_and_get(self):
        manager = SessionManager()
        session = manager.create_session(digit_count=4, card_mode=True, seed=3)

        assert session.session_id == session.match.match_id
        assert manager.get_session(session.session_id) is session
        assert session.state == SessionState.ACTIVE
        assert session.match.digit_count == 4
        assert session.match.seed == 3

    def test_apply_commits_on_success(self):
        manager = SessionManager()
        session = manager.create_session()
        before = session.match

        result = manager.apply(session.session_id, Action.set_secret(P1, "123"))

        assert result.success
        assert session.match is result.new_state
        assert session.match.phase == GamePhase.SETTING_P2
        assert before.phase == GamePhase.SETTING_P1

    def test_apply_keeps_state_on_failure(self):
        manager = SessionManager()
        session = manager.create_session()
        before = session.match

        result = manager.apply(session.session_id, Action.set_secret(P2, "123"))

        assert not result.success
        assert result.error_code == ErrorCode.NOT_YOUR_TURN
        assert session.match is before

    def test_unknown_session(self):
        result = SessionManager().apply("missing", Action.set_secret(P1, "123"))
        assert not result.success
        assert result.error_code == ErrorCode.MATCH_NOT_FOUND

    def test_end_session(self):
        manager = SessionManager()
        session = manager.create_session()

        assert manager.end_session(session.session_id, reason="abandoned")
        assert session.state == SessionState.ABANDONED
        assert manager.get_session(session.session_id) is None
        assert not manager.end_session(session.session_id)

    def test_list_active_skips_finished(self):
        manager = SessionManager()
        active = manager.create_session()
        finished = manager.create_session()
        finished.match.phase = GamePhase.FINISHED

        assert manager.list_active_sessions() == [active.session_id]

    def test_cleanup_only_removes_idle_finished(self):
        manager = SessionManager()
        old_active = manager.create_session(rng=ScriptedRandom())
        old_finished = manager.create_session()
        fresh_finished = manager.create_session()

        old_active.last_active = time.time() - 7200
        old_finished.last_active = time.time() - 7200
        old_finished.match.phase = GamePhase.FINISHED
        fresh_finished.match.phase = GamePhase.FINISHED

        removed = manager.cleanup_stale_sessions(max_age_seconds=3600)

        assert removed == 1
        assert manager.get_session(old_finished.session_id) is None
        assert manager.get_session(old_active.session_id) is old_active
        assert manager.get_session(fresh_finished.session_id) is fresh_finished

    def test_create_evicts_expired_sessions(self):
        manager = SessionManager(session_ttl_seconds=60)
        expired = manager.create_session()
        expired.match.phase = GamePhase.FINISHED
        expired.last_active = time.time() - 120
        idle_active = manager.create_session()
        idle_active.last_active = time.time() - 120

        manager.create_session()

        assert manager.get_session(expired.session_id) is None
        assert manager.get_session(idle_active.session_id) is idle_active

    def test_cleanup_defaults_to_session_ttl(self):
        manager = SessionManager(session_ttl_seconds=60)
        finished = manager.create_session()
        finished.match.phase = GamePhase.FINISHED
        finished.last_active = time.time() - 30

        assert manager.cleanup_stale_sessions() == 0
        finished.last_active = time.time() - 90
        assert manager.cleanup_stale_sessions() == 1
