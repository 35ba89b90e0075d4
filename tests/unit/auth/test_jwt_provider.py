"""Unit tests for JWTAuthProvider.

Covers:
- HS256 tokens created and validated locally
- _get_jwks_keys() fetching, caching, and error handling
- _validate_asymmetric() with a mocked JWKS endpoint, incl. key rotation
- validate_token returning None when payload lacks sub or email
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from jose import jwt as jose_jwt

from infrastructure.auth import jwt_provider as jwt_provider_module
from infrastructure.auth.jwt_provider import JWTAuthProvider, _get_jwks_keys
from infrastructure.auth.provider import TokenUser

JWKS_URL = "https://auth.example.com/.well-known/jwks.json"

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_hs256_token(payload: dict, secret: str = "test-secret") -> str:
    """Create an HS256-signed JWT with a given payload."""
    return jose_jwt.encode(payload, secret, algorithm="HS256")


def _mock_jwks_client(response_json: dict | None = None, error: Exception | None = None):
    mock_response = MagicMock()
    mock_response.json.return_value = response_json or {}
    mock_response.raise_for_status = MagicMock()

    client = AsyncMock()
    if error:
        client.get.side_effect = error
    else:
        client.get.return_value = mock_response
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=False)
    return client


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _clear_jwks_cache():
    """Reset the module-level JWKS cache before and after every test."""
    jwt_provider_module._jwks_cache = None
    yield
    jwt_provider_module._jwks_cache = None


@pytest.fixture
def hs256_provider() -> JWTAuthProvider:
    """JWTAuthProvider configured for HS256 (local/test tokens)."""
    return JWTAuthProvider(secret_key="test-secret", algorithm="HS256", expire_minutes=30)


# ---------------------------------------------------------------------------
# Tests: HS256 tokens
# ---------------------------------------------------------------------------


class TestHs256Tokens:
    async def test_should_round_trip_identity_claims(self, hs256_provider: JWTAuthProvider):
        user = TokenUser(
            id="uid-asha-0001",
            email="asha.rao@example.com",
            email_verified=True,
            display_name="Asha Rao",
        )

        result = await hs256_provider.validate_token(hs256_provider.create_token(user))

        assert result == user

    async def test_should_default_email_verified_to_false(
        self, hs256_provider: JWTAuthProvider
    ):
        token = _make_hs256_token({"sub": "uid-1", "email": "a@example.com", "exp": 9999999999})

        result = await hs256_provider.validate_token(token)

        assert result is not None
        assert result.email_verified is False

    async def test_should_reject_wrong_secret(self, hs256_provider: JWTAuthProvider):
        token = _make_hs256_token(
            {"sub": "uid-1", "email": "a@example.com", "exp": 9999999999}, secret="other"
        )

        assert await hs256_provider.validate_token(token) is None


class TestValidateTokenMissingClaims:
    """validate_token should return None when the decoded payload is missing
    the required 'sub' or 'email' claims."""

    @pytest.mark.parametrize(
        "payload",
        [
            {"email": "user@example.com"},
            {"sub": "uid-1"},
            {"sub": "", "email": "user@example.com"},
            {"sub": "uid-1", "email": ""},
        ],
    )
    async def test_should_return_none(self, hs256_provider: JWTAuthProvider, payload: dict):
        token = _make_hs256_token({**payload, "exp": 9999999999})

        assert await hs256_provider.validate_token(token) is None


# ---------------------------------------------------------------------------
# Tests: _get_jwks_keys
# ---------------------------------------------------------------------------


class TestGetJwksKeys:
    """Tests for the module-level _get_jwks_keys() helper."""

    async def test_should_return_empty_dict_when_no_jwks_url(self):
        with patch.object(jwt_provider_module, "settings") as mock_settings:
            mock_settings.auth_jwks_url = ""

            assert await _get_jwks_keys() == {}

    async def test_should_fetch_and_cache_jwks_keys(self):
        client = _mock_jwks_client(
            {
                "keys": [
                    {"kid": "key-1", "kty": "RSA", "n": "aa", "e": "AQAB"},
                    {"kid": "key-2", "kty": "RSA", "n": "bb", "e": "AQAB"},
                ]
            }
        )

        with (
            patch.object(jwt_provider_module, "settings") as mock_settings,
            patch.object(jwt_provider_module, "httpx") as mock_httpx,
        ):
            mock_settings.auth_jwks_url = JWKS_URL
            mock_httpx.AsyncClient.return_value = client

            result = await _get_jwks_keys()

            assert set(result) == {"key-1", "key-2"}
            assert result["key-1"]["kty"] == "RSA"

            # Second call is served from the cache
            client.get.reset_mock()
            assert await _get_jwks_keys() == result
            client.get.assert_not_called()

    async def test_should_return_empty_dict_on_http_error(self):
        client = _mock_jwks_client(error=Exception("Connection refused"))

        with (
            patch.object(jwt_provider_module, "settings") as mock_settings,
            patch.object(jwt_provider_module, "httpx") as mock_httpx,
        ):
            mock_settings.auth_jwks_url = JWKS_URL
            mock_httpx.AsyncClient.return_value = client

            assert await _get_jwks_keys() == {}

    async def test_should_skip_keys_without_kid(self):
        client = _mock_jwks_client(
            {
                "keys": [
                    {"kty": "RSA", "n": "aa", "e": "AQAB"},
                    {"kid": "good-key", "kty": "RSA", "n": "bb", "e": "AQAB"},
                ]
            }
        )

        with (
            patch.object(jwt_provider_module, "settings") as mock_settings,
            patch.object(jwt_provider_module, "httpx") as mock_httpx,
        ):
            mock_settings.auth_jwks_url = JWKS_URL
            mock_httpx.AsyncClient.return_value = client

            assert list(await _get_jwks_keys()) == ["good-key"]


# ---------------------------------------------------------------------------
# Tests: _validate_asymmetric
# ---------------------------------------------------------------------------


class TestValidateAsymmetric:
    """Tests for the RS256/ES256 validation path inside JWTAuthProvider."""

    async def test_should_return_none_when_header_has_no_kid(
        self, hs256_provider: JWTAuthProvider
    ):
        result = await hs256_provider._validate_asymmetric(
            "dummy.token.value", {"alg": "RS256"}, "RS256"
        )

        assert result is None

    async def test_should_return_none_when_kid_not_found_after_refetch(
        self, hs256_provider: JWTAuthProvider
    ):
        with patch.object(
            jwt_provider_module, "_get_jwks_keys", new_callable=AsyncMock
        ) as mock_get_jwks:
            mock_get_jwks.return_value = {"other-kid": {"kty": "RSA"}}

            result = await hs256_provider._validate_asymmetric(
                "dummy.token.value", {"alg": "RS256", "kid": "missing-kid"}, "RS256"
            )

            assert result is None
            # Initial lookup + refetch after the cache is cleared
            assert mock_get_jwks.call_count == 2

    async def test_should_verify_issuer_and_audience(self):
        provider = JWTAuthProvider(
            secret_key="unused",
            algorithm="HS256",
            expire_minutes=30,
            issuer="https://auth.example.com/aquagen",
            audience="aquagen",
        )
        key_data = {"kid": "k1", "kty": "RSA", "n": "aa", "e": "AQAB"}
        payload = {"sub": "uid-1", "email": "a@example.com"}

        with (
            patch.object(
                jwt_provider_module, "_get_jwks_keys", new_callable=AsyncMock
            ) as mock_get_jwks,
            patch.object(jwt_provider_module, "jwk") as mock_jwk,
            patch.object(jwt_provider_module, "jwt") as mock_jwt,
        ):
            mock_get_jwks.return_value = {"k1": key_data}
            public_key = MagicMock()
            mock_jwk.construct.return_value = public_key
            mock_jwt.decode.return_value = payload

            result = await provider._validate_asymmetric(
                "rs256.token.value", {"alg": "RS256", "kid": "k1"}, "RS256"
            )

            assert result == payload
            mock_jwk.construct.assert_called_once_with(key_data, algorithm="RS256")
            mock_jwt.decode.assert_called_once_with(
                "rs256.token.value",
                public_key,
                algorithms=["RS256"],
                audience="aquagen",
                issuer="https://auth.example.com/aquagen",
                options={"verify_aud": True},
            )

    async def test_should_refetch_jwks_on_key_rotation(self, hs256_provider: JWTAuthProvider):
        key_data = {"kid": "rotated-kid", "kty": "EC", "crv": "P-256"}
        payload = {"sub": "uid-1", "email": "rotated@example.com"}

        with (
            patch.object(
                jwt_provider_module,
                "_get_jwks_keys",
                new_callable=AsyncMock,
                side_effect=[{}, {"rotated-kid": key_data}],
            ) as mock_get_jwks,
            patch.object(jwt_provider_module, "jwk"),
            patch.object(jwt_provider_module, "jwt") as mock_jwt,
        ):
            mock_jwt.decode.return_value = payload

            result = await hs256_provider._validate_asymmetric(
                "es256.token.value", {"alg": "ES256", "kid": "rotated-kid"}, "ES256"
            )

            assert result == payload
            assert mock_get_jwks.call_count == 2


class TestValidateTokenAsymmetricPath:
    """validate_token delegates to _validate_asymmetric for RS256/ES256 headers."""

    async def test_should_build_user_from_id_token_claims(
        self, hs256_provider: JWTAuthProvider
    ):
        payload = {
            "sub": "Jd8kPq2mWfY1",
            "email": "asha.rao@example.com",
            "email_verified": True,
            "name": "Asha Rao",
        }

        with (
            patch.object(jwt_provider_module, "jwt") as mock_jwt,
            patch.object(
                hs256_provider, "_validate_asymmetric", new_callable=AsyncMock
            ) as mock_validate,
        ):
            mock_jwt.get_unverified_header.return_value = {"alg": "RS256", "kid": "k1"}
            mock_validate.return_value = payload

            result = await hs256_provider.validate_token("rs256.token.here")

            mock_validate.assert_called_once_with(
                "rs256.token.here", {"alg": "RS256", "kid": "k1"}, "RS256"
            )
            assert result == TokenUser(
                id="Jd8kPq2mWfY1",
                email="asha.rao@example.com",
                email_verified=True,
                display_name="Asha Rao",
            )

    async def test_should_return_none_when_validation_fails(
        self, hs256_provider: JWTAuthProvider
    ):
        with (
            patch.object(jwt_provider_module, "jwt") as mock_jwt,
            patch.object(
                hs256_provider, "_validate_asymmetric", new_callable=AsyncMock
            ) as mock_validate,
        ):
            mock_jwt.get_unverified_header.return_value = {"alg": "ES256", "kid": "k1"}
            mock_validate.return_value = None

            assert await hs256_provider.validate_token("es256.token.here") is None
