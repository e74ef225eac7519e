"""
CloudNote Backend — Account Service
=====================================

What:  Signup, login and profile lookup.
Why:   Keeps credential handling (hashing, comparison, token issuance) out of
       the route handlers.
How:   Built once in create_app() with the password hasher, password policy
       and token codec; each call receives the request's database session.

Signup Flow:
    validate strength → reject duplicate email (409) → bcrypt hash → insert

Login Flow:
    look up email → compare with stored hash → issue bearer token
    Unknown email and wrong password both raise AuthenticationFailedError
    with the same message, so the response does not reveal which emails
    are registered.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cloudnote.exceptions import (
    AuthenticationFailedError,
    ConflictError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from cloudnote.models.user import User
from cloudnote.schemas.auth import SignupRequest, TokenResponse, UserProfile
from cloudnote.services.passwords import PasswordHasher, PasswordPolicy
from cloudnote.services.token_codec import TokenCodec

logger = logging.getLogger(__name__)


async def find_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    """Returns the user registered under `email`, or None."""
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


class AccountService:
    """
    Business logic for user accounts.

    Error Handling Strategy:
        Domain failures raise CloudNoteError subclasses. Unexpected
        SQLAlchemy errors are logged with their detail and re-raised as a
        generic DatabaseError.
    """

    def __init__(
        self,
        token_codec: TokenCodec,
        password_hasher: PasswordHasher,
        password_policy: Optional[PasswordPolicy] = None,
    ):
        self.token_codec = token_codec
        self.password_hasher = password_hasher
        self.password_policy = password_policy or PasswordPolicy()

    async def signup(self, db: AsyncSession, data: SignupRequest) -> None:
        """
        Register a new user.

        Raises:
            ValidationError: password does not satisfy the policy
            ConflictError:   a user with this email already exists
            DatabaseError:   unexpected persistence failure
        """
        failed = self.password_policy.violations(data.password)
        if failed:
            raise ValidationError(
                message="Please use a strong password!",
                field="password",
                context={"rules": failed},
            )

        try:
            if await find_user_by_email(db, data.email) is not None:
                raise ConflictError()

            password_hash = await self.password_hasher.hash_async(data.password)
            user = User(
                email=data.email,
                password_hash=password_hash,
                first_name=data.first_name,
                last_name=data.last_name,
                gender=data.gender.value,
                birth_date=data.birth_date,
            )
            db.add(user)
            # Flush so a concurrent signup for the same email fails here
            await db.flush()
        except IntegrityError:
            await db.rollback()
            raise ConflictError()
        except SQLAlchemyError as e:
            logger.error("Database error during signup: %s", str(e), exc_info=True)
            raise DatabaseError(context={"operation": "signup"})

        logger.info("User account created: %s", user.id)

    async def login(self, db: AsyncSession, email: str, password: str) -> TokenResponse:
        """
        Exchange email + password for a bearer token.

        Raises:
            AuthenticationFailedError: unknown email or wrong password
            DatabaseError:             unexpected persistence failure
        """
        try:
            user = await find_user_by_email(db, email)
        except SQLAlchemyError as e:
            logger.error("Database error during login: %s", str(e), exc_info=True)
            raise DatabaseError(context={"operation": "login"})

        if user is None:
            logger.info("Login rejected: unknown email")
            raise AuthenticationFailedError()

        if not await self.password_hasher.verify_async(password, user.password_hash):
            logger.info("Login rejected: wrong password for user %s", user.id)
            raise AuthenticationFailedError()

        token = self.token_codec.issue(user.email)
        logger.info("User %s logged in", user.id)
        return TokenResponse(token=token, expires_in=self.token_codec.ttl_seconds)

    async def get_profile(self, db: AsyncSession, identity: str) -> UserProfile:
        """
        Public profile of the authenticated user.

        Raises:
            NotFoundError: the token's identity has no backing user
        """
        try:
            user = await find_user_by_email(db, identity)
        except SQLAlchemyError as e:
            logger.error("Database error fetching profile: %s", str(e), exc_info=True)
            raise DatabaseError(context={"operation": "get_profile"})

        if user is None:
            raise NotFoundError(resource="user")
        return UserProfile.model_validate(user)
