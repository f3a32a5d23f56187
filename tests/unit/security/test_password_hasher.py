"""Unit tests for security/password.py"""

from notevault.security.password import PasswordHasher

hasher = PasswordHasher(rounds=4)


def test_hash_and_verify_roundtrip():
    pwd = "StrongPassw0rd!"
    h = hasher.hash(pwd)
    assert h != pwd
    assert hasher.verify(pwd, h) is True
    assert hasher.verify("wrong", h) is False


def test_same_password_hashes_differently():
    assert hasher.hash("secret1") != hasher.hash("secret1")


def test_long_passwords_are_not_truncated():
    base = "x" * 80
    h = hasher.hash(base + "a")
    assert hasher.verify(base + "a", h) is True
    assert hasher.verify(base + "b", h) is False


def test_verify_rejects_corrupt_hash():
    assert hasher.verify("secret1", "not-a-hash") is False

