"""Tests for session management."""

from datetime import datetime, timedelta
from unittest.mock import patch

import pytest
import pytest_asyncio

import api.session as session_module
from api.session import (
    InMemorySessionStore,
    SessionSigner,
    TrainerSession,
    create_session,
    delete_session,
    extract_session_id,
    get_session,
    get_session_signer,
    get_session_store,
    reset_session_store,
)
from core.game import GameState


class TestSessionSigner:
    """Tests for SessionSigner class."""

    def test_sign_creates_token(self):
        signer = SessionSigner(secret_key="test-secret")
        token = signer.sign("test-session-123")
        assert token
        assert token != "test-session-123"

    def test_unsign_returns_original_id(self):
        signer = SessionSigner(secret_key="test-secret")
        token = signer.sign("test-session-456")
        assert signer.unsign(token, max_age=3600) == "test-session-456"

    def test_unsign_invalid_token_returns_none(self):
        signer = SessionSigner(secret_key="test-secret")
        assert signer.unsign("invalid-token-data", max_age=3600) is None

    def test_unsign_wrong_secret_returns_none(self):
        token = SessionSigner(secret_key="secret-one").sign("test-session")
        assert SessionSigner(secret_key="secret-two").unsign(token, max_age=3600) is None

    def test_unsign_expired_token_returns_none(self):
        import time as time_module

        signer = SessionSigner(secret_key="test-secret")
        token = signer.sign("test-session")

        original_time = time_module.time
        with patch("time.time", lambda: original_time() + 7200):
            assert signer.unsign(token, max_age=3600) is None

    def test_get_session_signer_returns_singleton(self):
        session_module._session_signer = None
        assert get_session_signer() is get_session_signer()


class TestInMemorySessionStore:
    """Tests for InMemorySessionStore class."""

    @pytest_asyncio.fixture
    async def store(self):
        return InMemorySessionStore()

    @pytest.mark.asyncio
    async def test_set_and_get(self, store):
        session = TrainerSession()
        await store.set("abc", session, ttl=3600)
        assert await store.get("abc") is session
        assert len(store) == 1

    @pytest.mark.asyncio
    async def test_get_unknown(self, store):
        assert await store.get("missing") is None
        assert await store.exists("missing") is False

    @pytest.mark.asyncio
    async def test_delete(self, store):
        await store.set("abc", TrainerSession(), ttl=3600)
        await store.delete("abc")
        assert await store.get("abc") is None
        await store.delete("abc")

    @pytest.mark.asyncio
    async def test_delete_cancels_pending_steps(self, store, rng, game_config):
        from conftest import cards
        from core.cards import Shoe
        from core.game import Trainer

        trainer = Trainer(game_config=game_config, rng=rng, auto_advance=False)
        trainer.select_mode("strategy", shoe=Shoe.stacked(cards("10S", "5H", "8D", "10C", "AS")))
        trainer.deal_new_game()
        trainer.player_action("S")
        assert trainer.engine.pending

        await store.set("abc", TrainerSession(trainer=trainer), ttl=3600)
        await store.delete("abc")
        assert not trainer.engine.pending

    @pytest.mark.asyncio
    async def test_expiry(self, store):
        await store.set("abc", TrainerSession(), ttl=60)
        later = datetime.now() + timedelta(seconds=120)
        with patch.object(session_module, "datetime") as mock_datetime:
            mock_datetime.now.return_value = later
            assert await store.get("abc") is None
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_cleanup_expired(self, store):
        await store.set("short-1", TrainerSession(), ttl=60)
        await store.set("short-2", TrainerSession(), ttl=60)
        await store.set("long", TrainerSession(), ttl=3600)

        later = datetime.now() + timedelta(seconds=120)
        with patch.object(session_module, "datetime") as mock_datetime:
            mock_datetime.now.return_value = later
            assert await store.cleanup_expired() == 2

        assert await store.exists("long")
        assert not await store.exists("short-1")

    def test_create_session_id(self, store):
        session_id = store.create_session_id()
        assert len(session_id) == 36
        assert session_id != store.create_session_id()


class TestModuleFunctions:
    """Tests for module-level session functions."""

    @pytest.fixture(autouse=True)
    def fresh_store(self):
        reset_session_store()
        yield
        reset_session_store()

    @pytest.mark.asyncio
    async def test_create_and_resolve(self):
        token = await create_session()
        session = await get_session(token)

        assert session is not None
        assert not session.trainer.has_session
        assert session.tracker.cards_played == 0
        assert len(get_session_store()) == 1

    @pytest.mark.asyncio
    async def test_sessions_are_isolated(self):
        first = await get_session(await create_session())
        second = await get_session(await create_session())

        first.trainer.select_mode("strategy")
        assert first.trainer.state == GameState.PRE_DEAL
        assert not second.trainer.has_session

    @pytest.mark.asyncio
    async def test_forged_token(self):
        assert await get_session("not-a-token") is None

    @pytest.mark.asyncio
    async def test_delete_session(self):
        token = await create_session()
        await delete_session(token)
        assert await get_session(token) is None

    def test_extract_session_id(self):
        signer = SessionSigner(secret_key="test-secret")
        token = signer.sign("test-session-123")
        with patch("api.session.get_session_signer", return_value=signer):
            assert extract_session_id(token) == "test-session-123"
