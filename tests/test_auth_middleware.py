"""
CloudNote Backend — Bearer Authentication Dependency Tests
============================================================

What we test:
    ✅ Missing header / missing token part → AuthenticationRequiredError
    ✅ Verification failures surface the codec's exception (401, not 500)
    ✅ Success stores the identity on request.state and returns it
"""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from cloudnote.config import settings
from cloudnote.exceptions import (
    AuthenticationRequiredError,
    InvalidTokenError,
    TokenExpiredError,
)
from cloudnote.middleware.auth import extract_bearer_token, require_identity
from cloudnote.services.token_codec import TokenCodec


def _request(token_codec, authorization=None):
    headers = {} if authorization is None else {"Authorization": authorization}
    return SimpleNamespace(
        headers=headers,
        app=SimpleNamespace(state=SimpleNamespace(token_codec=token_codec)),
        state=SimpleNamespace(),
    )


class TestExtractBearerToken:

    def test_two_part_header(self):
        assert extract_bearer_token("Bearer abc.def.ghi") == "abc.def.ghi"

    @pytest.mark.parametrize("value", [None, "", "Bearer", "Bearer ", "abc.def.ghi"])
    def test_missing_token_part(self, value):
        with pytest.raises(AuthenticationRequiredError):
            extract_bearer_token(value)


class TestRequireIdentity:

    @pytest.mark.asyncio
    async def test_valid_token_sets_identity(self, token_codec):
        request = _request(token_codec, f"Bearer {token_codec.issue('ada@example.com')}")

        identity = await require_identity(request)

        assert identity == "ada@example.com"
        assert request.state.identity == "ada@example.com"

    @pytest.mark.asyncio
    async def test_missing_header(self, token_codec):
        with pytest.raises(AuthenticationRequiredError) as exc_info:
            await require_identity(_request(token_codec))
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_invalid_token_is_client_error(self, token_codec):
        with pytest.raises(InvalidTokenError) as exc_info:
            await require_identity(_request(token_codec, "Bearer not-a-token"))
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_expired_token(self, token_codec):
        stale = TokenCodec(
            secret_key=settings.jwt_secret_key,
            clock=lambda: datetime.now(timezone.utc) - timedelta(hours=2),
        ).issue("ada@example.com")

        with pytest.raises(TokenExpiredError) as exc_info:
            await require_identity(_request(token_codec, f"Bearer {stale}"))
        assert exc_info.value.message == "jwt expired"
