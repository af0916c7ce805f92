"""
Identity resolution from the signed auth cookie.

The cookie carries an HMAC-signed JWT whose claims embed the user:
{ "id", "name", "email", "exp"? }. Verification is pure: no store access.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence

import jwt

from ..config import HMAC_ALGORITHMS
from ..errors import (
    ConfigurationError,
    InvalidSignature,
    MalformedToken,
    MissingCredential,
    TokenExpired,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserIdentity:
    """Verified caller. Only id is guaranteed; name/email come from the token claims."""

    id: str
    name: str = ""
    email: str = ""

    def to_author(self) -> Dict[str, str]:
        """Author snapshot stored on each comment."""
        return {"id": self.id, "name": self.name, "email": self.email}


class IdentityResolver:
    """Verifies the signed credential and turns its claims into a UserIdentity."""

    def __init__(
        self,
        key: Optional[str],
        cookie_name: str = "ka_auth",
        algorithms: Sequence[str] = HMAC_ALGORITHMS,
    ):
        self._key = key
        self.cookie_name = cookie_name
        # Pin the accepted algorithms to the HMAC family so an "alg" header
        # naming anything else (none, RS256, ...) never reaches verification.
        self._algorithms = [a for a in algorithms if a in HMAC_ALGORITHMS]

    def resolve(self, token: Optional[str]) -> UserIdentity:
        if not self._key:
            raise ConfigurationError("JWT_KEY not set")
        if not token:
            raise MissingCredential("missing credential")
        try:
            claims = jwt.decode(token, self._key, algorithms=self._algorithms)
        except jwt.ExpiredSignatureError:
            raise TokenExpired("token has expired")
        except (jwt.InvalidSignatureError, jwt.InvalidAlgorithmError) as exc:
            raise InvalidSignature(f"invalid token signature: {exc}") from exc
        except jwt.PyJWTError as exc:
            raise MalformedToken(f"invalid token: {exc}") from exc
        return self._identity_from_claims(claims)

    def resolve_cookies(self, cookies: Mapping[str, str]) -> UserIdentity:
        """Resolve from request cookies (looks up the configured cookie name)."""
        return self.resolve(cookies.get(self.cookie_name))

    @staticmethod
    def _identity_from_claims(claims: Dict[str, Any]) -> UserIdentity:
        user_id = claims.get("id")
        if user_id is None or not str(user_id).strip():
            raise MalformedToken("token has no user id")
        return UserIdentity(
            id=str(user_id),
            name=str(claims.get("name") or ""),
            email=str(claims.get("email") or ""),
        )
