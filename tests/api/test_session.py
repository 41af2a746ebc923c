"""Tests for session tokens and the session store."""

import time
from unittest.mock import patch

import pytest

import api.session as session_module
from api.session import (
    SessionRecord,
    SessionSigner,
    InMemorySessionStore,
    create_session,
    delete_session,
    extract_session_id,
    get_session_signer,
    load_table,
    save_table,
)
from config import config


class TestSessionSigner:
    """Tests for SessionSigner."""

    def test_sign_and_unsign(self):
        """A signed token verifies back to its session ID."""
        signer = SessionSigner(secret_key="test-secret")

        token = signer.sign("table-123")

        assert token != "table-123"
        assert signer.unsign(token, max_age=3600) == "table-123"

    def test_tampered_token_rejected(self):
        """Test that a malformed token does not verify."""
        signer = SessionSigner(secret_key="test-secret")
        assert signer.unsign("not-a-token", max_age=3600) is None

    def test_foreign_secret_rejected(self):
        """A token signed with another key does not verify."""
        token = SessionSigner(secret_key="secret-one").sign("table")
        assert SessionSigner(secret_key="secret-two").unsign(token, max_age=3600) is None

    def test_expired_token_rejected(self):
        """Tokens older than max_age are refused."""
        signer = SessionSigner(secret_key="test-secret")
        token = signer.sign("table")
        later = time.time() + 7200

        with patch("time.time", return_value=later):
            assert signer.unsign(token, max_age=3600) is None

    def test_get_session_signer_returns_singleton(self):
        session_module._session_signer = None

        assert get_session_signer() is get_session_signer()


class TestInMemorySessionStore:
    """Tests for InMemorySessionStore."""

    @pytest.fixture
    def store(self):
        """Create a fresh session store."""
        return InMemorySessionStore()

    @pytest.mark.asyncio
    async def test_put_get_delete(self, store):
        """Test the basic store lifecycle."""
        record = SessionRecord(table={"chips": 1000})
        await store.put("s1", record, ttl=3600)

        assert await store.get("s1") is record
        assert await store.exists("s1") is True

        await store.delete("s1")

        assert await store.get("s1") is None
        # Deleting twice is harmless
        await store.delete("s1")

    @pytest.mark.asyncio
    async def test_expired_session_is_dropped(self, store):
        """An expired entry reads as missing."""
        store._sessions["old"] = (SessionRecord(), time.time() - 1)

        assert await store.get("old") is None
        assert "old" not in store._sessions

    @pytest.mark.asyncio
    async def test_cleanup_expired(self, store):
        """Test removing only the expired entries."""
        past = time.time() - 1
        store._sessions["a"] = (SessionRecord(), past)
        store._sessions["b"] = (SessionRecord(), past)
        await store.put("c", SessionRecord(), ttl=3600)

        assert await store.cleanup_expired() == 2
        assert await store.exists("c") is True

    def test_new_token(self, store):
        """Session IDs are signed UUIDs unless asked otherwise."""
        unsigned = store.new_token(signed=False)
        signed = store.new_token()

        assert len(unsigned) == 36
        assert unsigned.count("-") == 4
        assert len(signed) > 36
        assert extract_session_id(signed) is not None


class TestTablePersistence:
    """Tests for the module-level table helpers."""

    @pytest.mark.asyncio
    async def test_table_round_trip(self):
        """A new session has no table until one is saved."""
        session_module._session_store = None

        token = await create_session()
        assert await load_table(token) is None

        await save_table(token, {"chips": 5})
        assert await load_table(token) == {"chips": 5}

        await delete_session(token)
        assert await load_table(token) is None

    @pytest.mark.asyncio
    async def test_save_refreshes_activity(self):
        session_module._session_store = None
        token = await create_session()
        store = await session_module.get_session_store()
        created = (await store.get(token)).last_activity

        with patch("time.time", return_value=created + 60):
            await save_table(token, {"chips": 1})
            assert (await store.get(token)).last_activity == created + 60

    @pytest.mark.asyncio
    async def test_active_session_outlives_ttl(self):
        """Regular saves keep a session valid past session_ttl from creation."""
        session_module._session_store = None
        start = time.time()
        with patch("time.time", return_value=start):
            token = await create_session()

        step = config.session_ttl // 2
        for n in range(1, 5):
            with patch("time.time", return_value=start + n * step):
                await save_table(token, {"chips": n})

        with patch("time.time", return_value=start + 4 * step + 1):
            assert extract_session_id(token) is not None
            assert await load_table(token) == {"chips": 4}

    @pytest.mark.asyncio
    async def test_idle_session_expires(self):
        session_module._session_store = None
        token = await create_session()
        await save_table(token, {"chips": 1})

        with patch("time.time", return_value=time.time() + config.session_ttl + 1):
            assert await load_table(token) is None

    def test_extract_session_id_uses_global_signer(self):
        """Test extracting a session ID with a patched signer."""
        signer = SessionSigner(secret_key="test-secret")
        token = signer.sign("table-42")

        with patch("api.session.get_session_signer", return_value=signer):
            assert extract_session_id(token) == "table-42"

    def test_extract_session_id_invalid(self):
        assert extract_session_id("invalid-token") is None
