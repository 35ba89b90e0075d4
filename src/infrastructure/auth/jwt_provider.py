"""JWT authentication provider implementation.

Supports ID tokens issued by the identity provider (RS256/ES256, verified
against its JWKS endpoint) and locally-created tokens (HS256 for tests).

ID token payload structure:
    {
        "sub": "opaque-user-id",
        "email": "user@example.com",
        "email_verified": true,
        "name": "Asha Rao",
        "iss": "https://issuer.example.com/project",
        "aud": "project",
        "exp": 1234567890
    }
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Optional

import httpx
from jose import JWTError, jwk, jwt

from core.config import settings
from infrastructure.auth.provider import TokenUser

logger = logging.getLogger(__name__)

ASYMMETRIC_ALGORITHMS = ("RS256", "ES256")

# Module-level JWKS cache (fetched once, reused across requests)
_jwks_cache: dict[str, Any] | None = None


async def _get_jwks_keys() -> dict[str, Any]:
    """Fetch and cache the identity provider's signing keys."""
    global _jwks_cache
    if _jwks_cache is not None:
        return _jwks_cache

    jwks_url = settings.auth_jwks_url
    if not jwks_url:
        return {}

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(jwks_url, timeout=10.0)
            response.raise_for_status()
            jwks_data = response.json()
            # Build a kid -> key mapping
            _jwks_cache = {}
            for key_data in jwks_data.get("keys", []):
                kid = key_data.get("kid")
                if kid:
                    _jwks_cache[kid] = key_data
            logger.info("Fetched %d JWKS keys from %s", len(_jwks_cache), jwks_url)
            return _jwks_cache
    except Exception:
        logger.exception("Failed to fetch JWKS from %s", jwks_url)
        return {}


class JWTAuthProvider:
    """JWT-based authentication provider.

    Handles validation of both identity-provider ID tokens (RS256/ES256)
    and locally-created (HS256) JWTs.
    """

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        expire_minutes: int = settings.jwt_expire_minutes,
        issuer: str = settings.auth_issuer,
        audience: str = settings.auth_audience,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes
        self._issuer = issuer
        self._audience = audience

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """
        Validate a JWT and extract user info.

        Detects the signing algorithm from the token header:
        - RS256/ES256 (identity provider): validates via JWKS public key
        - HS256 (local/test): validates via shared secret

        Args:
            token: The JWT to validate

        Returns:
            TokenUser if valid, None if invalid or expired
        """
        try:
            header = jwt.get_unverified_header(token)
            alg = header.get("alg", self._algorithm)

            if alg in ASYMMETRIC_ALGORITHMS:
                payload = await self._validate_asymmetric(token, header, alg)
            else:
                payload = jwt.decode(
                    token,
                    self._secret_key,
                    algorithms=[self._algorithm],
                    options={"verify_aud": False},
                )

            if payload is None:
                return None

            user_id = payload.get("sub")
            email = payload.get("email")

            if not user_id or not email:
                return None

            user_metadata = payload.get("user_metadata") or {}
            display_name = payload.get("name") or user_metadata.get("display_name")

            return TokenUser(
                id=str(user_id),
                email=email,
                email_verified=bool(payload.get("email_verified", False)),
                display_name=display_name,
            )

        except JWTError:
            return None

    async def _validate_asymmetric(
        self, token: str, header: dict, alg: str
    ) -> Optional[dict]:
        """Validate an RS256/ES256-signed ID token using JWKS public keys."""
        kid = header.get("kid")
        if not kid:
            return None

        jwks_keys = await _get_jwks_keys()
        key_data = jwks_keys.get(kid)
        if not key_data:
            # Unknown kid: refetch once in case the keys rotated
            global _jwks_cache
            _jwks_cache = None
            jwks_keys = await _get_jwks_keys()
            key_data = jwks_keys.get(kid)
            if not key_data:
                logger.warning("JWKS key not found for kid=%s", kid)
                return None

        public_key = jwk.construct(key_data, algorithm=alg)
        return jwt.decode(
            token,
            public_key,
            algorithms=[alg],
            audience=self._audience or None,
            issuer=self._issuer or None,
            options={"verify_aud": bool(self._audience)},
        )

    def create_token(self, user: TokenUser) -> str:
        """
        Create a JWT for a user (HS256, used for tests).

        Args:
            user: The user to create a token for

        Returns:
            The generated JWT string
        """
        expire = datetime.utcnow() + timedelta(minutes=self._expire_minutes)

        payload: dict = {
            "sub": user.id,
            "email": user.email,
            "email_verified": user.email_verified,
            "name": user.display_name,
            "exp": expire,
        }

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
