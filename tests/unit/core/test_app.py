"""Tests for the App facade and core lifecycle."""

from datetime import timedelta
from uuid import uuid4

import pytest

from magicauth.app import App
from magicauth.config import Config
from magicauth.core.modules.user.models import Team, UserUpdate
from magicauth.errors import AuthenticationError, ExpiredMagicLinkError, SessionExpiredError

EMAIL = "kody@example.com"


class TestLifespan:
    async def test_indexes_created_and_client_closed(self, app, mongo_client, database):
        """Test that startup creates indexes and shutdown closes the client."""
        async with app.lifespan():
            assert database.get_collection("users").indexes == [[("email", 1)]]
            assert database.get_collection("sessions").indexes == [[("user_id", 1)]]
            assert database.get_collection("post_reads").indexes == [[("user_id", 1), ("post_slug", 1), ("created_at", -1)]]
            assert not mongo_client.closed
        assert mongo_client.closed

    def test_database_name_from_url(self, mongo_client, config):
        """Test that the database name is taken from the URL path."""
        App(config, mongo_client)
        assert list(mongo_client.databases) == ["magicauth_test"]


class TestLoginFlow:
    """End-to-end flow: link, validation, session, lookups."""

    async def test_full_flow(self, app, clock):
        user = await app.create_user(EMAIL, "Kody", Team.BLUE)

        link = app.get_magic_link(EMAIL, "https://kentcdodds.com")
        clock.advance(timedelta(minutes=5))
        app.validate_magic_link(EMAIL, link)

        found = await app.get_user_by_email(EMAIL)
        assert found == user
        session = await app.create_session(found.id)

        clock.advance(timedelta(days=29))
        assert (await app.get_user_from_session_id(str(session.id))).id == user.id

        clock.advance(timedelta(days=2))
        with pytest.raises(SessionExpiredError):
            await app.get_user_from_session_id(str(session.id))

    async def test_expired_link_is_authentication_error(self, app, clock):
        """Test that link errors can be handled as AuthenticationError."""
        link = app.get_magic_link(EMAIL, "https://kentcdodds.com")
        clock.advance(timedelta(hours=1))
        with pytest.raises(AuthenticationError) as exc_info:
            app.validate_magic_link(EMAIL, link)
        assert isinstance(exc_info.value, ExpiredMagicLinkError)

    async def test_update_user(self, app):
        user = await app.create_user(EMAIL, "Kody", Team.YELLOW)
        updated = await app.update_user(user.id, UserUpdate(first_name="Kent"))
        assert updated.first_name == "Kent"

    async def test_add_post_read(self, app):
        user_id = uuid4()
        assert await app.add_post_read("react-hooks", user_id) is not None
        assert await app.add_post_read("react-hooks", user_id) is None


class TestConfig:
    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("MAGICAUTH_DATABASE_URL", "mongodb://localhost/from_env")
        monkeypatch.setenv("MAGICAUTH_MAGIC_LINK_SECRET", "env-secret")
        config = Config()
        assert config.database_url == "mongodb://localhost/from_env"
        assert config.magic_link_secret == "env-secret"
        assert config.debug is False
        assert not config.is_production

    def test_is_production(self):
        config = Config(database_url="mongodb://localhost/x", magic_link_secret="s", environment="production")
        assert config.is_production
