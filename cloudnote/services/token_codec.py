"""
CloudNote Backend — Bearer Token Codec
========================================

What:  Issues and verifies signed, time-limited bearer tokens (JWT).
Why:   Authentication is stateless: a token is valid purely by signature and
       expiry, so there is no session table to consult or clean up.
How:   PyJWT with an HMAC algorithm (HS256 by default). The payload carries
       the user's email as `sub`, plus `iat` and `exp`.
Who:   AccountService.login issues tokens; the auth dependency verifies them.

The codec is built once in create_app() from Settings. Changing the secret
invalidates every token issued with the previous one.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import jwt

from cloudnote.exceptions import InvalidTokenError, TokenExpiredError

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenCodec:
    """
    Signs and verifies bearer tokens for a single secret.

    Args:
        secret_key:  HMAC secret shared by issue() and verify()
        algorithm:   JWT signing algorithm
        ttl_seconds: Lifetime of an issued token
        clock:       Source of "now" for issuance; injectable for tests
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        ttl_seconds: int = 3600,
        clock: Optional[Clock] = None,
    ):
        if not secret_key:
            raise ValueError("TokenCodec requires a non-empty secret key")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self.ttl_seconds = ttl_seconds
        self._clock = clock or _utcnow

    def issue(self, identity: str) -> str:
        """Returns a token for `identity` that expires ttl_seconds from now."""
        issued_at = self._clock()
        payload = {
            "sub": identity,
            "iat": issued_at,
            "exp": issued_at + timedelta(seconds=self.ttl_seconds),
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: str) -> str:
        """
        Returns the identity embedded in `token`.

        Raises:
            TokenExpiredError: signature valid but `exp` has passed
            InvalidTokenError: bad signature, malformed token, or no subject
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            raise TokenExpiredError()
        except jwt.InvalidSignatureError:
            raise InvalidTokenError("invalid signature")
        except jwt.InvalidTokenError as e:
            logger.debug("Rejected bearer token: %s", str(e))
            raise InvalidTokenError("jwt malformed")

        identity = payload.get("sub")
        if not isinstance(identity, str) or not identity:
            raise InvalidTokenError("token carries no identity")
        return identity
