"""Signed session tokens and an in-memory session store for live trainers."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Annotated
from uuid import uuid4

from fastapi import Header, HTTPException
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from config import config
from core.counting import ShoeTracker
from core.game import Trainer

logger = logging.getLogger(__name__)


class SessionSigner:
    """Sign and verify session IDs using itsdangerous."""

    def __init__(self, secret_key: str | None = None) -> None:
        self._secret_key = secret_key or config.security.secret_key
        self._serializer = URLSafeTimedSerializer(self._secret_key)

    def sign(self, session_id: str) -> str:
        """Create a signed token from a session ID."""
        return self._serializer.dumps(session_id)

    def unsign(self, token: str, max_age: int | None = None) -> str | None:
        """
        Verify and extract session_id from a signed token.

        Args:
            token: The signed token to verify
            max_age: Maximum age in seconds (defaults to session_ttl)

        Returns:
            The session ID if valid, None otherwise
        """
        max_age = max_age or config.session_ttl
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


@dataclass
class TrainerSession:
    """Live objects owned by one client session."""

    trainer: Trainer = field(default_factory=Trainer)
    tracker: ShoeTracker = field(default_factory=ShoeTracker)
    created_at: datetime = field(default_factory=datetime.now)


class SessionStore(ABC):
    """Abstract session store."""

    @abstractmethod
    async def get(self, session_id: str) -> TrainerSession | None:
        """Get a session, or None if unknown or expired."""
        ...

    @abstractmethod
    async def set(self, session_id: str, session: TrainerSession, ttl: int | None = None) -> None:
        """Store a session and refresh its expiry."""
        ...

    @abstractmethod
    async def delete(self, session_id: str) -> None:
        """Delete session."""
        ...

    async def exists(self, session_id: str) -> bool:
        return await self.get(session_id) is not None

    def create_session_id(self) -> str:
        return str(uuid4())


class InMemorySessionStore(SessionStore):
    """
    In-memory session store.

    Trainers hold live engines and event subscriptions, so sessions stay in
    process memory and are lost on restart.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, tuple[TrainerSession, datetime]] = {}

    async def get(self, session_id: str) -> TrainerSession | None:
        if session_id not in self._sessions:
            return None

        session, expiry = self._sessions[session_id]
        if expiry < datetime.now():
            await self.delete(session_id)
            return None

        return session

    async def set(
        self,
        session_id: str,
        session: TrainerSession,
        ttl: int | None = None,
    ) -> None:
        ttl = ttl or config.session_ttl
        expiry = datetime.now() + timedelta(seconds=ttl)
        self._sessions[session_id] = (session, expiry)

    async def delete(self, session_id: str) -> None:
        session = self._sessions.pop(session_id, None)
        if session is not None:
            session[0].trainer.cancel_pending()

    async def cleanup_expired(self) -> int:
        """Remove expired sessions."""
        now = datetime.now()
        expired = [sid for sid, (_, expiry) in self._sessions.items() if expiry < now]
        for sid in expired:
            await self.delete(sid)
        if expired:
            logger.info("Removed %d expired sessions", len(expired))
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)


_session_store: SessionStore | None = None


def get_session_store() -> SessionStore:
    """Get or create the session store."""
    global _session_store
    if _session_store is None:
        _session_store = InMemorySessionStore()
    return _session_store


def reset_session_store() -> None:
    """Drop every session. Used by tests."""
    global _session_store
    _session_store = None


async def create_session() -> str:
    """Create a session and return its signed token."""
    store = get_session_store()
    session_id = store.create_session_id()
    trainer = Trainer(game_config=config.game)
    await store.set(session_id, TrainerSession(trainer=trainer))
    logger.info("Session created")
    return get_session_signer().sign(session_id)


async def get_session(token: str) -> TrainerSession | None:
    """Resolve a signed token to its live session, refreshing the expiry."""
    session_id = extract_session_id(token)
    if session_id is None:
        return None

    store = get_session_store()
    session = await store.get(session_id)
    if session is not None:
        await store.set(session_id, session)
    return session


async def delete_session(token: str) -> None:
    session_id = extract_session_id(token)
    if session_id is not None:
        await get_session_store().delete(session_id)


def extract_session_id(token: str) -> str | None:
    """Extract the raw session ID from a signed token, or None if invalid."""
    return get_session_signer().unsign(token)


async def require_session(
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> TrainerSession:
    """FastAPI dependency resolving the X-Session-ID header."""
    session = await get_session(session_id)
    if session is None:
        raise HTTPException(status_code=401, detail="Invalid or expired session")
    return session
