import pytest
from datetime import timedelta
from jose import jwt

from clinica.core.config import Settings, settings
from clinica.core.exceptions import NotFound, Unauthenticated
from clinica.core.security import (
    InvalidToken, UserRole, create_access_token, get_password_hash,
    verify_password, verify_token
)

class TestPasswordHashing:

    def test_hash_is_not_plaintext(self):
        hashed = get_password_hash("pw123")
        assert hashed != "pw123"
        assert verify_password("pw123", hashed)
        assert not verify_password("wrong", hashed)

    def test_hash_is_salted(self):
        """Hashing the same password twice yields different hashes."""
        assert get_password_hash("pw123") != get_password_hash("pw123")

class TestAccessToken:

    def test_round_trip_carries_identity_and_role(self):
        token = create_access_token(7, UserRole.DOCTOR)
        payload = verify_token(token)
        assert payload.sub == 7
        assert payload.role == UserRole.DOCTOR

    def test_token_expires_after_eight_hours(self):
        payload = verify_token(create_access_token(1, UserRole.USER))
        assert payload.exp - payload.iat == 8 * 60 * 60

    def test_expired_token_is_rejected(self):
        token = create_access_token(1, UserRole.USER, expires_delta=timedelta(seconds=-1))
        with pytest.raises(InvalidToken):
            verify_token(token)

    def test_tampered_signature_is_rejected(self):
        token = create_access_token(1, UserRole.USER)
        forged = jwt.encode(
            {"sub": "1", "role": "admin", "token_type": "access"},
            "some-other-secret",
            algorithm=settings.ALGORITHM,
        )
        assert forged != token
        with pytest.raises(InvalidToken):
            verify_token(forged)

    def test_malformed_token_is_rejected(self):
        with pytest.raises(InvalidToken):
            verify_token("not-a-jwt")

    def test_non_access_token_is_rejected(self):
        token = jwt.encode(
            {"sub": "1", "role": "user", "token_type": "refresh"},
            settings.SECRET_KEY,
            algorithm=settings.ALGORITHM,
        )
        with pytest.raises(InvalidToken):
            verify_token(token)

    def test_unknown_role_is_rejected(self):
        token = jwt.encode(
            {"sub": "1", "role": "superuser", "token_type": "access"},
            settings.SECRET_KEY,
            algorithm=settings.ALGORITHM,
        )
        with pytest.raises(InvalidToken):
            verify_token(token)

class TestErrorTaxonomy:

    def test_default_messages(self):
        error = Unauthenticated()
        assert error.status_code == 401
        assert error.detail == "Token inválido o expirado"
        assert error.headers == {"WWW-Authenticate": "Bearer"}

        assert NotFound().detail == "Recurso no encontrado"

    def test_custom_message(self):
        error = NotFound("Usuario no encontrado")
        assert error.status_code == 404
        assert error.detail == "Usuario no encontrado"
        assert error.headers is None

class TestCorsOrigins:

    def test_default_origins_are_the_frontend_dev_servers(self):
        default = Settings.model_fields["ALLOWED_ORIGINS"].default
        assert default == ["http://localhost:5173", "http://localhost:3000"]

    def test_origins_are_read_from_environment(self, client):
        assert settings.ALLOWED_ORIGINS == ["http://testserver"]

        response = client.get("/health", headers={"Origin": "http://testserver"})
        assert response.headers["access-control-allow-origin"] == "http://testserver"

        response = client.get("/health", headers={"Origin": "http://evil.example"})
        assert "access-control-allow-origin" not in response.headers
