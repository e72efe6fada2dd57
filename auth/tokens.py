"""
auth/tokens.py -- Access token issuance and verification.

Security design decisions:
  JWT: python-jose with HS256. Tokens are signed with SECRET_KEY and carry
       sub (user id), name, email, iat and exp. Nothing is stored server-side;
       a short expiry stands in for revocation.

  Expiry is checked here, against an injectable clock, instead of inside
       jose.jwt.decode(). A token is valid while now < exp and invalid from
       the instant now == exp onwards. iat/exp keep sub-second precision so two
       tokens minted for the same user moments apart never collide.

  Canonical encoding: base64url leaves a few unused bits in the last
       character of a segment, so two spellings can decode to the same bytes.
       verify() re-encodes every segment and rejects any token whose text is
       not the canonical form -- a modified character is always an invalid
       token, even when the decoded bytes would still match.

  The secret is passed in by the caller (built from Settings at startup),
  never read from module state.

Layer rule: no imports from api/ or notes/. Import from core/ is allowed.
"""

from __future__ import annotations

import logging
import time
from typing import Optional

from jose import JWTError, jwt
from jose.utils import base64url_decode, base64url_encode

from auth.models import TokenClaims
from core.exceptions import TokenInvalidError, TokenMissingError

logger = logging.getLogger("notekeeper.auth.tokens")

_ALGORITHM = "HS256"


def _is_canonical(token: str) -> bool:
    """Return True if token is three canonical base64url segments."""
    parts = token.split(".")
    if len(parts) != 3:
        return False
    for part in parts:
        raw = part.encode("ascii", errors="replace")
        try:
            if base64url_encode(base64url_decode(raw)) != raw:
                return False
        except ValueError:
            return False
    return True


class TokenService:
    """Signs and validates expiring HS256 access tokens.

    Usage:
        tokens = TokenService(settings.secret_key, settings.token_expire_seconds)
        token = tokens.issue(user.id, user.name, user.email)
        claims = tokens.verify(token)        # TokenClaims
        claims.user_id
    """

    def __init__(self, secret_key: str, expire_seconds: int) -> None:
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        if expire_seconds <= 0:
            raise ValueError("expire_seconds must be positive")
        self._secret_key = secret_key
        self.expire_seconds = expire_seconds

    def issue(self, user_id: str, name: str = "", email: str = "", now: Optional[float] = None) -> str:
        """Return a signed token for the given identity.

        Deterministic for identical claims, timestamp and secret. `now` is a
        Unix timestamp and defaults to the current time.
        """
        issued_at = time.time() if now is None else now
        payload = {
            "sub": str(user_id),
            "name": name,
            "email": email,
            "iat": issued_at,
            "exp": issued_at + self.expire_seconds,
        }
        return jwt.encode(payload, self._secret_key, algorithm=_ALGORITHM)

    def verify(self, token: Optional[str], now: Optional[float] = None) -> TokenClaims:
        """Validate a token and return the identity it carries.

        Raises:
            TokenMissingError: token is None or empty.
            TokenInvalidError: malformed, tampered, signed with another
                secret, missing sub/exp, or expired.
        """
        if not token:
            raise TokenMissingError()
        if not _is_canonical(token):
            raise TokenInvalidError("malformed token")
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[_ALGORITHM],
                options={"verify_exp": False},
            )
        except JWTError as exc:
            raise TokenInvalidError(str(exc)) from exc

        user_id = payload.get("sub")
        expires_at = payload.get("exp")
        if not user_id or not isinstance(expires_at, (int, float)) or isinstance(expires_at, bool):
            raise TokenInvalidError("missing sub or exp claim")

        current = time.time() if now is None else now
        if current >= expires_at:
            raise TokenInvalidError("token expired")

        return TokenClaims(
            user_id=str(user_id),
            name=str(payload.get("name") or ""),
            email=str(payload.get("email") or ""),
            issued_at=float(payload.get("iat") or 0.0),
            expires_at=float(expires_at),
        )
