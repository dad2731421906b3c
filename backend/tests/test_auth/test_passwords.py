"""Unit tests for bcrypt password hashing."""

from rentora.auth.passwords import hash_password, verify_password


class TestPasswords:
    def test_round_trip(self):
        hashed = hash_password("s3cret-pass")
        assert hashed != "s3cret-pass"
        assert verify_password("s3cret-pass", hashed)

    def test_wrong_password(self):
        assert not verify_password("wrong", hash_password("right-password"))

    def test_hashes_are_salted(self):
        assert hash_password("same-password") != hash_password("same-password")

    def test_malformed_hash_is_rejected(self):
        assert not verify_password("anything", "not-a-bcrypt-hash")

    def test_long_password_truncated_consistently(self):
        long_password = "x" * 100
        assert verify_password(long_password, hash_password(long_password))
