"""
Session management for generation state.

This module keeps one GenerationSession per user, expires idle sessions,
and exposes each session's generation history.
"""

from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional

import structlog

from printforge.models.model_record import ModelMeta

from .session import GenerationSession

logger = structlog.get_logger(__name__)


class SessionManager:
    """Manages user sessions and their in-flight generation state."""

    def __init__(
        self,
        session_timeout: timedelta = timedelta(hours=2),
        on_session_removed: Optional[Callable[[str], None]] = None,
    ):
        self.sessions: Dict[str, GenerationSession] = {}
        self.session_timeout = session_timeout
        self.on_session_removed = on_session_removed

    def create_session(self, session_id: Optional[str] = None) -> str:
        """Create a new session."""
        session = GenerationSession(session_id)
        self.sessions[session.session_id] = session
        logger.info("Session created", session_id=session.session_id)
        return session.session_id

    def _is_expired(self, session: GenerationSession, now: datetime) -> bool:
        # A session with a generation in flight never expires under it
        return not session.is_generating and now - session.last_activity > self.session_timeout

    def get_session(self, session_id: str) -> Optional[GenerationSession]:
        """Get a session if it exists and has not expired."""
        session = self.sessions.get(session_id)
        if session is None:
            return None

        if self._is_expired(session, datetime.utcnow()):
            self.cleanup_session(session_id)
            return None

        session.touch()
        return session

    def get_or_create_session(self, session_id: Optional[str] = None) -> GenerationSession:
        if session_id:
            session = self.get_session(session_id)
            if session is not None:
                return session
        return self.sessions[self.create_session(session_id)]

    def cleanup_session(self, session_id: str) -> None:
        """Forget a session."""
        if self.sessions.pop(session_id, None) is not None:
            logger.info(f"Session cleaned up: {session_id}")
            if self.on_session_removed is not None:
                self.on_session_removed(session_id)

    def cleanup_expired_sessions(self) -> None:
        """Clean up all expired sessions."""
        now = datetime.utcnow()
        expired_sessions = [
            session_id for session_id, session in self.sessions.items() if self._is_expired(session, now)
        ]

        for session_id in expired_sessions:
            self.cleanup_session(session_id)

        if expired_sessions:
            logger.info(f"Cleaned up {len(expired_sessions)} expired sessions")

    def get_session_history(self, session_id: str) -> List[ModelMeta]:
        """Get the generation history for a session."""
        session = self.get_session(session_id)
        if session:
            return list(session.generation_history)
        return []

    def get_active_session_count(self) -> int:
        """Get the number of active sessions."""
        return len(self.sessions)

    def get_session_info(self, session_id: str) -> Optional[Dict[str, Any]]:
        """Get basic session information."""
        session = self.get_session(session_id)
        if session:
            info = session.snapshot()
            info.update({
                "created_at": session.created_at,
                "last_activity": session.last_activity,
            })
            return info
        return None
