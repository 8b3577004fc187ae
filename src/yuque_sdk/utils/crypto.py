"""Password encryption for the Yuque account login."""

import base64
import time

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa


def encrypt_password(password: str, public_key_pem: str, now_ms: int | None = None) -> str:
    """RSA (PKCS#1 v1.5) encrypt ``"<epoch ms>:<password>"`` and base64 it."""
    key = serialization.load_pem_public_key(public_key_pem.encode("ascii"))
    if not isinstance(key, rsa.RSAPublicKey):
        raise ValueError("Login public key is not an RSA key")
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    ciphertext = key.encrypt(f"{stamp}:{password}".encode("utf-8"), padding.PKCS1v15())
    return base64.b64encode(ciphertext).decode("ascii")
