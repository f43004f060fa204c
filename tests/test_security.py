from securepass.server.config import settings
from securepass.server.security import (
    RESET_TOKEN,
    create_access_token,
    decode_token,
    get_password_hash,
    verify_password,
)


class TestPasswordHash:
    def test_verify(self, monkeypatch):
        monkeypatch.setattr(settings, "PASSWORD_HASH_ITERATIONS", 1000)
        hashed = get_password_hash("hunter22")
        assert hashed.startswith("pbkdf2_sha256$1000$")
        assert verify_password("hunter22", hashed)
        assert not verify_password("hunter23", hashed)

    def test_salted(self, monkeypatch):
        monkeypatch.setattr(settings, "PASSWORD_HASH_ITERATIONS", 1000)
        assert get_password_hash("same") != get_password_hash("same")

    def test_malformed_hash(self):
        assert not verify_password("x", "not-a-hash")
        assert not verify_password("x", "bcrypt$1$a$b")


class TestTokens:
    def test_round_trip(self):
        assert decode_token(create_access_token("uid-1")) == "uid-1"

    def test_purpose_must_match(self):
        reset = create_access_token("uid-1", purpose=RESET_TOKEN)
        assert decode_token(reset) is None
        assert decode_token(reset, purpose=RESET_TOKEN) == "uid-1"

    def test_expired(self):
        assert decode_token(create_access_token("uid-1", expires_minutes=-1)) is None

    def test_garbage(self):
        assert decode_token("abc.def.ghi") is None
