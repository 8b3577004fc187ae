"""Tests for the login password encryption."""

import base64

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, padding, rsa

from yuque_sdk.utils.crypto import encrypt_password


@pytest.fixture(scope="module")
def key_pair():
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=1024)
    public_pem = private_key.public_key().public_bytes(
        serialization.Encoding.PEM, serialization.PublicFormat.SubjectPublicKeyInfo
    )
    return private_key, public_pem.decode("ascii")


def test_encrypts_timestamp_and_password(key_pair):
    private_key, public_pem = key_pair

    encrypted = encrypt_password("secret", public_pem, now_ms=123)

    plaintext = private_key.decrypt(base64.b64decode(encrypted), padding.PKCS1v15())
    assert plaintext == b"123:secret"


def test_rejects_non_rsa_key():
    ec_key = ec.generate_private_key(ec.SECP256R1())
    public_pem = ec_key.public_key().public_bytes(
        serialization.Encoding.PEM, serialization.PublicFormat.SubjectPublicKeyInfo
    )

    with pytest.raises(ValueError, match="not an RSA key"):
        encrypt_password("secret", public_pem.decode("ascii"))
