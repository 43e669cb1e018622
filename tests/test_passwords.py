from user_access_platform.utils.passwords import hash_password, verify_password


def test_hash_is_salted_and_verifiable():
    first = hash_password("secret123", rounds=4)
    second = hash_password("secret123", rounds=4)

    assert first != "secret123"
    assert first != second
    assert first.startswith("$2b$04$")
    assert verify_password("secret123", first)
    assert verify_password("secret123", second)


def test_wrong_password_does_not_verify():
    hashed = hash_password("secret123", rounds=4)

    assert not verify_password("secret124", hashed)
    assert not verify_password("", hashed)


def test_malformed_hash_does_not_verify():
    assert not verify_password("secret123", "not-a-bcrypt-hash")
