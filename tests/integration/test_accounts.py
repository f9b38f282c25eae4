"""
Integration Tests - Account Creation
"""
import pytest
from argon2 import PasswordHasher
from argon2.exceptions import VerifyMismatchError

from marketplace.accounts import create_user, hash_password, resolve_role
from marketplace.config.settings import SecuritySettings
from marketplace.database.models import Role
from marketplace.errors import DataAccessError, InvalidArgument, PolicyViolation


class TestResolveRole:
    """Tests for elevation phrase handling"""

    def test_no_phrase_is_user(self, test_settings):
        assert resolve_role(None, test_settings.security) == Role.USER
        assert resolve_role("", test_settings.security) == Role.USER

    def test_admin_and_moderator_phrases(self, test_settings):
        assert resolve_role("open-sesame", test_settings.security) == Role.ADMIN
        assert resolve_role("keep-it-civil", test_settings.security) == Role.MODERATOR

    def test_wrong_phrase_rejected(self, test_settings):
        with pytest.raises(PolicyViolation):
            resolve_role("let-me-in", test_settings.security)

    def test_unset_phrase_never_matches(self):
        security = SecuritySettings(admin_phrase=None, moderator_phrase=None)
        with pytest.raises(PolicyViolation):
            resolve_role("anything", security)


class TestPasswordHashing:
    """Tests for argon2 password hashing"""

    def test_hash_is_argon2id(self):
        hashed = hash_password("hunter2")

        assert hashed != "hunter2"
        assert hashed.startswith("$argon2id$")
        assert PasswordHasher().verify(hashed, "hunter2")

    def test_hash_rejects_wrong_password(self):
        with pytest.raises(VerifyMismatchError):
            PasswordHasher().verify(hash_password("hunter2"), "hunter3")


class TestCreateUser:
    """Tests for the account creation path"""

    async def test_creates_regular_user(self, session, test_settings):
        user = await create_user(session, test_settings.security, "erin@example.com", "erin", "s3cret")

        assert user.id is not None
        assert user.role == Role.USER
        assert PasswordHasher().verify(user.password, "s3cret")

    async def test_creates_admin_with_phrase(self, session, test_settings):
        user = await create_user(
            session, test_settings.security, "root@example.com", "root", "s3cret", phrase="open-sesame"
        )
        assert user.role == Role.ADMIN

    async def test_rejects_blank_fields(self, session, test_settings):
        with pytest.raises(InvalidArgument):
            await create_user(session, test_settings.security, " ", "erin", "s3cret")

    async def test_rejects_bad_phrase(self, session, test_settings):
        with pytest.raises(PolicyViolation):
            await create_user(session, test_settings.security, "x@example.com", "x", "pw", phrase="nope")

    async def test_duplicate_username_is_data_access_error(self, seeded, test_settings):
        with pytest.raises(DataAccessError):
            async with seeded.session() as s:
                await create_user(s, test_settings.security, "other@example.com", "alice", "pw")
