"""
Player sessions: signed tokens and the saved table each one owns.

The token signature only proves the server minted it. How long a session
lives is decided by the store: every save pushes the record's expiry
``session_ttl`` seconds ahead, so a table in use never times out.
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any
from uuid import uuid4

from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired

from config import config

logger = logging.getLogger(__name__)


class SessionSigner:
    """Sign and verify session IDs using itsdangerous."""

    def __init__(self, secret_key: str | None = None) -> None:
        self._serializer = URLSafeTimedSerializer(secret_key or config.security.secret_key)

    def sign(self, session_id: str) -> str:
        """Turn a raw session ID into a token safe to hand to the client."""
        return self._serializer.dumps(session_id)

    def unsign(self, token: str, max_age: int | None = None) -> str | None:
        """
        Verify a token and return the session ID inside it.

        Returns None for forged or malformed tokens, and for tokens older
        than ``max_age`` seconds when one is given.
        """
        try:
            return self._serializer.loads(token, max_age=max_age)
        except (BadSignature, SignatureExpired):
            return None


_session_signer: SessionSigner | None = None


def get_session_signer() -> SessionSigner:
    """Get or create the session signer."""
    global _session_signer
    if _session_signer is None:
        _session_signer = SessionSigner()
    return _session_signer


def extract_session_id(token: str) -> str | None:
    """Raw session ID from a signed token, or None if it does not verify."""
    return get_session_signer().unsign(token)


@dataclass
class SessionRecord:
    """What the server keeps for one session."""

    # Serialized GameState; None until the first table is saved
    table: dict[str, Any] | None = None
    created_at: float = field(default_factory=time.time)
    last_activity: float = field(default_factory=time.time)


class SessionStore(ABC):
    """Where session records live between requests."""

    @abstractmethod
    async def get(self, token: str) -> SessionRecord | None:
        ...

    @abstractmethod
    async def put(self, token: str, record: SessionRecord, ttl: int | None = None) -> None:
        ...

    @abstractmethod
    async def delete(self, token: str) -> None:
        ...

    @abstractmethod
    async def cleanup_expired(self) -> int:
        """Drop every expired record and return how many were dropped."""

    async def exists(self, token: str) -> bool:
        return await self.get(token) is not None

    def new_token(self, signed: bool = True) -> str:
        """Mint a session ID, signed for the client unless ``signed`` is False."""
        session_id = str(uuid4())
        return get_session_signer().sign(session_id) if signed else session_id


class InMemorySessionStore(SessionStore):
    """Process-local store; records expire ``ttl`` seconds after their last write."""

    def __init__(self) -> None:
        self._sessions: dict[str, tuple[SessionRecord, float]] = {}

    async def get(self, token: str) -> SessionRecord | None:
        entry = self._sessions.get(token)
        if entry is None:
            return None

        record, expires_at = entry
        if expires_at < time.time():
            del self._sessions[token]
            return None
        return record

    async def put(self, token: str, record: SessionRecord, ttl: int | None = None) -> None:
        self._sessions[token] = (record, time.time() + (ttl or config.session_ttl))

    async def delete(self, token: str) -> None:
        self._sessions.pop(token, None)

    async def cleanup_expired(self) -> int:
        now = time.time()
        expired = [token for token, (_, expires_at) in self._sessions.items() if expires_at < now]
        for token in expired:
            del self._sessions[token]
        if expired:
            logger.info("Removed %d expired sessions", len(expired))
        return len(expired)


_session_store: SessionStore | None = None


async def get_session_store() -> SessionStore:
    """Get or create the session store."""
    global _session_store
    if _session_store is None:
        _session_store = InMemorySessionStore()
    return _session_store


async def create_session() -> str:
    """Open an empty session and return its signed token."""
    store = await get_session_store()
    token = store.new_token()
    await store.put(token, SessionRecord())
    logger.info("Created session")
    return token


async def get_session(token: str) -> SessionRecord | None:
    """Live record for a session, or None once it was deleted or expired."""
    store = await get_session_store()
    return await store.get(token)


async def load_table(token: str) -> dict[str, Any] | None:
    """Saved table for a session, if there is one."""
    store = await get_session_store()
    record = await store.get(token)
    return record.table if record else None


async def save_table(token: str, table: dict[str, Any]) -> None:
    """Store a session's table and refresh its expiry."""
    store = await get_session_store()
    record = await store.get(token) or SessionRecord()
    record.table = table
    record.last_activity = time.time()
    await store.put(token, record)


async def delete_session(token: str) -> None:
    store = await get_session_store()
    await store.delete(token)


async def cleanup_sessions() -> int:
    store = await get_session_store()
    return await store.cleanup_expired()
