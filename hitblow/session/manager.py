"""
Session Manager - Creates and manages in-memory matches.

LIFECYCLE:
1. A presentation layer creates a session -> new MatchState
2. During the match, every operation goes through apply()
3. Match ends (or is abandoned) -> session destroyed, ALL state deleted

CONCURRENCY:
- One lock per match: operations on the same match are serialized
- Unrelated matches never contend
- The reducer returns a fresh state; the session swaps it in only on
  success, so a caller never observes a partial commit

PERSISTENCE:
- None. State lives only for the duration of one in-memory match.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
import logging
import threading
import time

from ..engine_core import Action, ActionResult, ErrorCode, MatchState, apply_action, new_match
from ..engine_core.rng import RandomSource

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a match session."""
    ACTIVE = "active"
    GAME_OVER = "game_over"
    ABANDONED = "abandoned"


@dataclass
class Session:
    """
    One ephemeral match.

    The session is destroyed when the match ends.
    State is NOT persisted.
    """
    session_id: str
    match: MatchState
    created_at: float
    last_active: float = 0.0
    state: SessionState = SessionState.ACTIVE
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def is_active(self) -> bool:
        """Check if session is still active."""
        return self.state == SessionState.ACTIVE and not self.match.is_finished


class SessionManager:
    """
    Manages match sessions.

    Responsibilities:
    - Create sessions
    - Serialize operations per match
    - Clean up finished or stale sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(self, session_ttl_seconds: int = 3600):
        self._sessions: dict[str, Session] = {}
        self._ttl = session_ttl_seconds
        self._registry_lock = threading.Lock()

    def create_session(
        self,
        digit_count: int = 3,
        card_mode: bool = False,
        seed: int | None = None,
        rng: RandomSource | None = None,
    ) -> Session:
        """
        Create a new match session.

        Args:
            digit_count: 3 or 4
            card_mode: Enable HP, buffs and support cards
            seed: Optional RNG seed for reproducible drafts
            rng: Optional RandomSource (overrides seed)

        Returns:
            New Session waiting for P1's secret
        """
        self.cleanup_stale_sessions()
        match = new_match(digit_count=digit_count, card_mode=card_mode, rng=rng, seed=seed)
        now = time.time()
        session = Session(
            session_id=match.match_id,
            match=match,
            created_at=now,
            last_active=now,
        )
        with self._registry_lock:
            self._sessions[session.session_id] = session
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def apply(self, session_id: str, action: Action) -> ActionResult:
        """
        Apply an action to a session's match under its lock.

        The committed state is replaced only when the action succeeds.
        """
        session = self.get_session(session_id)
        if session is None:
            return ActionResult.failure(
                f"Match {session_id} not found", ErrorCode.MATCH_NOT_FOUND
            )

        with session.lock:
            result = apply_action(session.match, action)
            if result.success and result.new_state is not None:
                session.match = result.new_state
                session.last_active = time.time()
        return result

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and forget its match.

        Returns False if the session did not exist.
        """
        with self._registry_lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            return False

        if reason == "completed":
            session.state = SessionState.GAME_OVER
        else:
            session.state = SessionState.ABANDONED
        logger.info("Session %s ended (%s)", session_id, reason)
        return True

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def cleanup_stale_sessions(self, max_age_seconds: int | None = None) -> int:
        """
        Remove finished sessions idle for longer than max_age
        (the manager's session TTL by default).

        Returns the number of sessions removed.
        """
        if max_age_seconds is None:
            max_age_seconds = self._ttl
        current_time = time.time()
        to_remove = [
            session_id
            for session_id, session in list(self._sessions.items())
            if current_time - session.last_active > max_age_seconds and not session.is_active()
        ]
        for session_id in to_remove:
            self.end_session(session_id, reason="stale")
        return len(to_remove)
