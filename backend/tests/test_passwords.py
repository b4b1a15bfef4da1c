import pytest

from tasktrack.utils.passwords import hash_password, verify_password


def test_hash_is_not_plaintext_and_is_salted():
    first = hash_password("secret1")
    second = hash_password("secret1")

    assert first != "secret1"
    assert first.startswith("$argon2")
    assert first != second


def test_verify_roundtrip_and_mismatch():
    digest = hash_password("secret1")

    assert verify_password("secret1", digest) is True
    assert verify_password("secret2", digest) is False


@pytest.mark.parametrize("digest", ["", "not-a-hash", "$argon2id$v=19$garbage"])
def test_malformed_digest_returns_false(digest):
    assert verify_password("secret1", digest) is False


def test_empty_password_rejected():
    with pytest.raises(ValueError):
        hash_password("")
    assert verify_password("", hash_password("secret1")) is False
