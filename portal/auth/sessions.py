"""
Server-side session state.

The browser only holds a signed token naming a session key; the roll of
the signed-in user lives here and disappears with the process.
"""

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from threading import Lock

from portal.core import config


@dataclass
class SessionRecord:
    key: str
    roll: str
    expires_at: datetime

    def expired(self, now: datetime) -> bool:
        return self.expires_at <= now


class SessionStore:
    def __init__(self, max_age_minutes: int):
        self.max_age = timedelta(minutes=max_age_minutes)
        self._records: dict[str, SessionRecord] = {}
        self._lock = Lock()

    def _purge_expired(self, now: datetime) -> None:
        # Caller holds the lock.
        stale = [key for key, record in self._records.items() if record.expired(now)]
        for key in stale:
            del self._records[key]

    def create(self, roll: str) -> SessionRecord:
        now = datetime.now(timezone.utc)
        record = SessionRecord(key=secrets.token_urlsafe(32), roll=roll, expires_at=now + self.max_age)
        with self._lock:
            self._purge_expired(now)
            self._records[record.key] = record
        return record

    def get(self, session_key: str) -> str | None:
        with self._lock:
            record = self._records.get(session_key)
            if record is None:
                return None
            if record.expired(datetime.now(timezone.utc)):
                del self._records[session_key]
                return None
            return record.roll

    def purge_expired(self) -> None:
        with self._lock:
            self._purge_expired(datetime.now(timezone.utc))

    def destroy(self, session_key: str) -> None:
        with self._lock:
            self._records.pop(session_key, None)

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


sessions = SessionStore(max_age_minutes=config.SESSION_MAX_AGE_MINUTES)
