"""Password hashing tests."""

from voxai.auth.password import hash_password, verify_password
from voxai.config import Settings


def test_hash_and_verify():
    h = hash_password("secret1")
    assert h != "secret1"
    assert verify_password("secret1", h)
    assert not verify_password("secret2", h)


def test_hashes_are_salted():
    assert hash_password("same") != hash_password("same")


def test_cost_factor_is_encoded_in_hash():
    assert Settings.model_fields["bcrypt_rounds"].default == 10
    assert hash_password("secret1", rounds=10).startswith("$2b$10$")


def test_verify_against_garbage_hash_is_false():
    assert not verify_password("secret1", "not-a-bcrypt-hash")
