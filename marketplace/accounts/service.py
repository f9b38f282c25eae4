"""
Account Creation

Resolves the role requested by an optional elevation phrase, hashes the
password with Argon2id and inserts the user.
"""

import hmac
from typing import Optional

import structlog
from argon2 import PasswordHasher
from pydantic import SecretStr
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.config.settings import SecuritySettings
from marketplace.database.models import Role, User
from marketplace.errors import DataAccessError, InvalidArgument, PolicyViolation

logger = structlog.get_logger(__name__)

_hasher = PasswordHasher()


def _matches(phrase: str, secret: Optional[SecretStr]) -> bool:
    if secret is None or not secret.get_secret_value():
        return False
    return hmac.compare_digest(phrase.encode(), secret.get_secret_value().encode())


def resolve_role(phrase: Optional[str], security: SecuritySettings) -> Role:
    """
    Map an elevation phrase to a role.

    No phrase means USER. A phrase that matches neither configured secret
    is rejected rather than downgraded to USER.
    """
    if not phrase:
        return Role.USER
    if _matches(phrase, security.admin_phrase):
        return Role.ADMIN
    if _matches(phrase, security.moderator_phrase):
        return Role.MODERATOR
    raise PolicyViolation("Invalid phrase for admin or moderator role.")


def hash_password(password: str) -> str:
    return _hasher.hash(password)


async def create_user(
    session: AsyncSession,
    security: SecuritySettings,
    email: str,
    username: str,
    password: str,
    phrase: Optional[str] = None,
) -> User:
    """
    Create a user account.

    Raises:
        PolicyViolation: phrase given but matches no configured secret
        InvalidArgument: email, username or password is blank
        DataAccessError: the insert failed (e.g. duplicate email or username)
    """
    role = resolve_role(phrase, security)

    if not email.strip() or not username.strip() or not password:
        raise InvalidArgument("Email, username, and password are required.")

    user = User(
        email=email.strip(),
        username=username.strip(),
        password=hash_password(password),
        role=role,
    )
    session.add(user)
    try:
        await session.flush()
    except IntegrityError as e:
        logger.warning("User creation rejected by store", username=username, error=str(e.orig))
        raise DataAccessError("Failed to create user. Please try again.") from e

    await session.refresh(user)
    logger.info("User created", user_id=user.id, role=role.value)
    return user
