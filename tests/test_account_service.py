"""
CloudNote Backend — Account Service Unit Tests
================================================

What:  Tests for AccountService signup, login and profile lookup.
How:   Uses mock DB sessions and a real (low-cost) bcrypt hasher.

What we test:
    ✅ Signup stores a bcrypt hash, never the plaintext
    ✅ Duplicate email (pre-check or unique violation) → ConflictError
    ✅ Weak password → ValidationError before touching the database
    ✅ Login issues a token for the right identity
    ✅ Unknown email and wrong password fail identically
"""

from datetime import date

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from cloudnote.exceptions import (
    AuthenticationFailedError,
    ConflictError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from cloudnote.models.user import Gender, User
from cloudnote.schemas.auth import SignupRequest

STRONG_PASSWORD = "Str0ng!Passw0rd"


def _signup_request(**overrides) -> SignupRequest:
    data = {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "gender": Gender.FEMALE,
        "birth_date": date(1990, 5, 17),
        "email": "ada@example.com",
        "password": STRONG_PASSWORD,
    }
    data.update(overrides)
    return SignupRequest(**data)


def _stored_user(password_hasher, password: str = STRONG_PASSWORD) -> User:
    return User(
        email="ada@example.com",
        password_hash=password_hasher.hash(password),
        first_name="Ada",
        last_name="Lovelace",
        gender="F",
        birth_date=date(1990, 5, 17),
    )


class TestSignup:

    @pytest.mark.asyncio
    async def test_signup_persists_hashed_password(
        self, account_service, password_hasher, mock_db_session, make_result
    ):
        mock_db_session.execute.return_value = make_result(scalar=None)

        await account_service.signup(mock_db_session, _signup_request())

        mock_db_session.add.assert_called_once()
        user = mock_db_session.add.call_args.args[0]
        assert isinstance(user, User)
        assert user.email == "ada@example.com"
        assert user.gender == "F"
        assert user.password_hash != STRONG_PASSWORD
        assert password_hasher.verify(STRONG_PASSWORD, user.password_hash)
        mock_db_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_signup_existing_email_conflicts(
        self, account_service, password_hasher, mock_db_session, make_result
    ):
        mock_db_session.execute.return_value = make_result(scalar=_stored_user(password_hasher))

        with pytest.raises(ConflictError) as exc_info:
            await account_service.signup(mock_db_session, _signup_request())

        assert exc_info.value.status_code == 409
        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_concurrent_duplicate_reported_as_conflict(
        self, account_service, mock_db_session, make_result
    ):
        mock_db_session.execute.return_value = make_result(scalar=None)
        mock_db_session.flush.side_effect = IntegrityError(
            "INSERT INTO users", {}, Exception("duplicate key")
        )

        with pytest.raises(ConflictError):
            await account_service.signup(mock_db_session, _signup_request())

    @pytest.mark.asyncio
    async def test_weak_password_rejected_before_lookup(self, account_service, mock_db_session):
        with pytest.raises(ValidationError) as exc_info:
            await account_service.signup(mock_db_session, _signup_request(password="password"))

        assert exc_info.value.field == "password"
        assert exc_info.value.message == "Please use a strong password!"
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_database_failure_is_sanitized(self, account_service, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError(
            "SELECT", {}, Exception("connection refused to 10.0.0.5")
        )

        with pytest.raises(DatabaseError) as exc_info:
            await account_service.signup(mock_db_session, _signup_request())

        assert "10.0.0.5" not in exc_info.value.message


class TestLogin:

    @pytest.mark.asyncio
    async def test_login_issues_token_for_email(
        self, account_service, password_hasher, token_codec, mock_db_session, make_result
    ):
        mock_db_session.execute.return_value = make_result(scalar=_stored_user(password_hasher))

        result = await account_service.login(mock_db_session, "ada@example.com", STRONG_PASSWORD)

        assert result.token_type == "bearer"
        assert result.expires_in == 3600
        assert token_codec.verify(result.token) == "ada@example.com"

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_email_look_the_same(
        self, account_service, password_hasher, mock_db_session, make_result
    ):
        mock_db_session.execute.return_value = make_result(scalar=_stored_user(password_hasher))
        with pytest.raises(AuthenticationFailedError) as wrong_password:
            await account_service.login(mock_db_session, "ada@example.com", "Wr0ng!Password")

        mock_db_session.execute.return_value = make_result(scalar=None)
        with pytest.raises(AuthenticationFailedError) as unknown_email:
            await account_service.login(mock_db_session, "nobody@example.com", STRONG_PASSWORD)

        assert wrong_password.value.message == unknown_email.value.message
        assert wrong_password.value.status_code == unknown_email.value.status_code == 401


class TestProfile:

    @pytest.mark.asyncio
    async def test_profile_has_no_password_fields(
        self, account_service, password_hasher, mock_db_session, make_result
    ):
        mock_db_session.execute.return_value = make_result(scalar=_stored_user(password_hasher))

        profile = await account_service.get_profile(mock_db_session, "ada@example.com")

        dumped = profile.model_dump(by_alias=True)
        assert dumped["firstName"] == "Ada"
        assert dumped["birthDate"] == date(1990, 5, 17)
        assert "password" not in dumped
        assert "passwordHash" not in dumped

    @pytest.mark.asyncio
    async def test_profile_for_missing_user(self, account_service, mock_db_session, make_result):
        mock_db_session.execute.return_value = make_result(scalar=None)

        with pytest.raises(NotFoundError):
            await account_service.get_profile(mock_db_session, "ghost@example.com")
