"""
auth/tokens.py -- Access token issuance (JWT, HS256).

Tokens are signed per tenant: the key is the requesting App's secret, so a
token minted for one app never verifies under another app's key. Claims:

    userId  -- User.id
    email   -- User.email (subject identity)
    exp     -- absolute expiry, unix seconds (now + ttl)
    app_id  -- App.id

Verification is the consuming app's job; nothing here decodes tokens.

Layer rule: no imports from storage/, core/, or main.py.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from jose import JOSEError, jwt

from auth.models import App, User

_ALGORITHM = "HS256"


class TokenSigningError(Exception):
    """The token could not be signed (missing or unusable app secret)."""


def new_token(user: User, app: App, ttl: timedelta) -> str:
    """Build and sign an access token for user, scoped to app.

    Raises TokenSigningError if the app secret is empty or not usable as an
    HMAC key. The underlying jose/type error is chained.
    """
    if not app.secret:
        raise TokenSigningError(f"app {app.id} has no signing secret")

    expire = datetime.now(timezone.utc) + ttl
    claims = {
        "userId": user.id,
        "email": user.email,
        "exp": int(expire.timestamp()),
        "app_id": app.id,
    }
    try:
        return jwt.encode(claims, app.secret, algorithm=_ALGORITHM)
    except (JOSEError, TypeError, ValueError) as exc:
        raise TokenSigningError(f"failed to sign token for app {app.id}") from exc
