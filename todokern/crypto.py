"""
Owner-keyed encryption for stored records.

Provides the seal/open pair used to protect record blobs:
- Key derivation from an owner identifier (HKDF-SHA256)
- Authenticated encryption (AES-256-GCM)

This layer only transforms bytes. It knows nothing about records; callers
run the codec over what ``open_sealed`` returns.

Sealed layout: [version: 1][nonce: 12][ciphertext || tag: 16]
"""

import logging
import os
from functools import lru_cache

from todokern.protocols import AuthenticationFailedError, CryptoError, MalformedCiphertextError

logger = logging.getLogger(__name__)

SEAL_VERSION = 0x01
NONCE_SIZE = 12
TAG_SIZE = 16
KEY_SIZE = 32
HEADER_SIZE = 1 + NONCE_SIZE

# Fixed derivation labels. Changing either orphans every sealed record.
_KDF_SALT = b"todokern.record-key.v1"
_KDF_INFO = b"todokern seal"


@lru_cache(maxsize=256)
def derive_key(key_material: str) -> bytes:
    """Expand a key string into a 256-bit symmetric key.

    Same material always yields the same key; different material yields
    an unrelated key.

    Raises:
        CryptoError: If the cryptography package is missing
    """
    if not isinstance(key_material, str):
        raise TypeError("key_material must be a string")
    try:
        from cryptography.hazmat.primitives import hashes
        from cryptography.hazmat.primitives.kdf.hkdf import HKDF
    except ImportError:
        raise CryptoError(
            "cryptography package not installed. Install with: pip install cryptography"
        )

    hkdf = HKDF(algorithm=hashes.SHA256(), length=KEY_SIZE, salt=_KDF_SALT, info=_KDF_INFO)
    return hkdf.derive(key_material.encode("utf-8"))


def _cipher(key_material: str):
    try:
        from cryptography.hazmat.primitives.ciphers.aead import AESGCM
    except ImportError:
        raise CryptoError("cryptography package not installed")
    return AESGCM(derive_key(key_material))


def seal(plaintext: bytes, key_material: str) -> bytes:
    """Encrypt ``plaintext`` under a key derived from ``key_material``.

    Args:
        plaintext: Bytes to protect
        key_material: Owner identifier the key is derived from

    Returns:
        Sealed bytes (version, nonce, ciphertext and tag)
    """
    nonce = os.urandom(NONCE_SIZE)
    ciphertext = _cipher(key_material).encrypt(nonce, bytes(plaintext), None)
    return bytes([SEAL_VERSION]) + nonce + ciphertext


def open_sealed(sealed: bytes, key_material: str) -> bytes:
    """Decrypt bytes produced by ``seal``.

    Never returns partially decrypted data.

    Raises:
        MalformedCiphertextError: If the buffer is structurally invalid
        AuthenticationFailedError: If the key material is wrong or the
            data was tampered with
    """
    sealed = bytes(sealed)
    if len(sealed) < HEADER_SIZE + TAG_SIZE:
        raise MalformedCiphertextError(
            f"Sealed data too short: {len(sealed)} bytes (minimum {HEADER_SIZE + TAG_SIZE})"
        )
    if sealed[0] != SEAL_VERSION:
        raise MalformedCiphertextError(f"Unknown seal version: 0x{sealed[0]:02x}")

    cipher = _cipher(key_material)
    from cryptography.exceptions import InvalidTag

    nonce = sealed[1:HEADER_SIZE]
    try:
        return cipher.decrypt(nonce, sealed[HEADER_SIZE:], None)
    except InvalidTag:
        logger.debug("Seal authentication failed")
        raise AuthenticationFailedError("Sealed data did not authenticate under this key") from None
