import pytest
from jose import jwt

from storefront.identity import build_identity_provider
from storefront.identity.principal import Principal
from storefront.identity.providers import JWTIdentityProvider, StaticIdentityProvider
from storefront.settings import Settings

SECRET = "test-secret"


class TestJWTIdentityProvider:
    @pytest.fixture()
    def provider(self):
        return JWTIdentityProvider(SECRET)

    def test_resolves_claims_into_principal(self, provider):
        token = jwt.encode({"id": "user-9", "email": "nine@example.com", "role": "admin", "name": "Nia"}, SECRET)
        assert provider.resolve(token) == Principal(id="user-9", email="nine@example.com", role="admin", name="Nia")

    def test_falls_back_to_subject_claim(self, provider):
        principal = provider.resolve(jwt.encode({"sub": "user-3"}, SECRET))
        assert principal.id == "user-3"
        assert principal.role == "user"
        assert principal.is_admin is False

    def test_wrong_signature_is_rejected(self, provider):
        assert provider.resolve(jwt.encode({"id": "user-9"}, "another-secret")) is None

    def test_garbage_is_rejected(self, provider):
        assert provider.resolve("not-a-token") is None

    def test_token_without_identity_is_rejected(self, provider):
        assert provider.resolve(jwt.encode({"email": "x@example.com"}, SECRET)) is None


class TestStaticIdentityProvider:
    def test_registered_tokens_resolve(self):
        provider = StaticIdentityProvider()
        provider.register("t", Principal(id="u"))
        assert provider.resolve("t").id == "u"
        assert provider.resolve("other") is None


class TestBuildIdentityProvider:
    def test_jwt_when_secret_configured(self):
        assert isinstance(build_identity_provider(Settings(jwt_secret=SECRET)), JWTIdentityProvider)

    def test_static_without_secret(self):
        provider = build_identity_provider(Settings())
        assert isinstance(provider, StaticIdentityProvider)
        assert provider.resolve("anything") is None
