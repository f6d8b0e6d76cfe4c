# qrlink/core/state.py

import secrets
from threading import Lock
from datetime import datetime, timedelta, timezone


class SessionTable:
    """
    Server-side login sessions: session id -> (user id, expiry).
    Used by the session auth strategy; lost on restart.
    """

    def __init__(self):
        self._sessions: dict[str, tuple[str, datetime]] = {}
        self._lock = Lock()

    def open(self, user_id: str, ttl: timedelta) -> str:
        session_id = secrets.token_urlsafe(32)
        with self._lock:
            self._prune()
            self._sessions[session_id] = (user_id, datetime.now(timezone.utc) + ttl)
        return session_id

    def get_user_id(self, session_id: str) -> str | None:
        with self._lock:
            entry = self._sessions.get(session_id)
            if entry is None:
                return None
            user_id, expires_at = entry
            if expires_at <= datetime.now(timezone.utc):
                del self._sessions[session_id]
                return None
            return user_id

    def close(self, session_id: str):
        with self._lock:
            self._sessions.pop(session_id, None)

    def count(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _prune(self):
        now = datetime.now(timezone.utc)
        expired = [sid for sid, (_, expires_at) in self._sessions.items() if expires_at <= now]
        for sid in expired:
            del self._sessions[sid]
