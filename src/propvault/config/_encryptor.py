"""Password-based string encryption compatible with Jasypt's PBE encryptors.

Two algorithm families are supported, matching what Jasypt produces with its
default salt and IV generators:

``PBEWithMD5AndDES``
    Jasypt's ``BasicTextEncryptor``. PBKDF1 with MD5 derives both the DES key
    and the IV from an 8-byte random salt. Output is ``base64(salt || ct)``.

``PBEWithHMACSHA512AndAES_256``
    ``StandardPBEStringEncryptor`` with a ``RandomIvGenerator``. PBKDF2 with
    HMAC-SHA512 derives a 256-bit AES key from a 16-byte salt; the IV is random.
    Output is ``base64(salt || iv || ct)``.

Both use CBC mode with PKCS#5 padding and encode text as UTF-8.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable

from cryptography.hazmat.decrepit.ciphers.algorithms import TripleDES
from cryptography.hazmat.primitives import hashes, padding
from cryptography.hazmat.primitives.ciphers import BlockCipherAlgorithm, Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from ._casters import Choices
from ._types import DecryptionError, Secret

PBE_MD5_DES = "PBEWithMD5AndDES"
PBE_HMAC_SHA512_AES_256 = "PBEWithHMACSHA512AndAES_256"

ALGORITHMS = (PBE_MD5_DES, PBE_HMAC_SHA512_AES_256)
DEFAULT_ALGORITHM = PBE_MD5_DES
DEFAULT_ITERATIONS = 1000

_ENC_PREFIX = "ENC("
_ENC_SUFFIX = ")"


# ---------------------------------------------------------------------------
# ENC(...) wrapper
# ---------------------------------------------------------------------------


def wrap_encrypted(ciphertext: str) -> str:
    """Mark a ciphertext for storage in a property file.

    >>> wrap_encrypted("abc=")
    'ENC(abc=)'
    """
    return f"{_ENC_PREFIX}{ciphertext}{_ENC_SUFFIX}"


def unwrap_encrypted(value: str) -> str | None:
    """Return the ciphertext inside ``ENC(...)``, or ``None`` if not wrapped.

    >>> unwrap_encrypted(" ENC(abc=) ")
    'abc='
    >>> unwrap_encrypted("plain") is None
    True
    """
    trimmed = value.strip()
    if trimmed.startswith(_ENC_PREFIX) and trimmed.endswith(_ENC_SUFFIX):
        return trimmed[len(_ENC_PREFIX) : -len(_ENC_SUFFIX)]
    return None


# ---------------------------------------------------------------------------
# Encryptor interface
# ---------------------------------------------------------------------------


class Encryptor(ABC):
    """Encrypts and decrypts single string values."""

    @abstractmethod
    def encrypt(self, plaintext: str) -> str:
        """Return the encoded ciphertext for *plaintext*."""

    @abstractmethod
    def decrypt(self, ciphertext: str) -> str:
        """Return the plaintext, or raise ``DecryptionError``."""


# ---------------------------------------------------------------------------
# Algorithm schemes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _Scheme:
    salt_size: int
    iv_size: int  # 0 when the IV is derived from the password
    block_size: int
    derive: Callable[[bytes, bytes, int], tuple[bytes, bytes]]
    cipher: Callable[[bytes], BlockCipherAlgorithm]


def _derive_pbkdf1_md5(password: bytes, salt: bytes, iterations: int) -> tuple[bytes, bytes]:
    digest = hashlib.md5(password + salt).digest()
    for _ in range(iterations - 1):
        digest = hashlib.md5(digest).digest()
    return digest[:8], digest[8:16]


def _derive_pbkdf2_sha512(password: bytes, salt: bytes, iterations: int) -> tuple[bytes, bytes]:
    kdf = PBKDF2HMAC(algorithm=hashes.SHA512(), length=32, salt=salt, iterations=iterations)
    return kdf.derive(password), b""


_SCHEMES: dict[str, _Scheme] = {
    PBE_MD5_DES: _Scheme(
        salt_size=8,
        iv_size=0,
        block_size=8,
        derive=_derive_pbkdf1_md5,
        cipher=TripleDES,
    ),
    PBE_HMAC_SHA512_AES_256: _Scheme(
        salt_size=16,
        iv_size=16,
        block_size=16,
        derive=_derive_pbkdf2_sha512,
        cipher=algorithms.AES,
    ),
}


# ---------------------------------------------------------------------------
# PBE implementation
# ---------------------------------------------------------------------------


class PBEStringEncryptor(Encryptor):
    """Jasypt-compatible password-based string encryptor.

    The password is fixed at construction; instances hold no other state and
    are safe to share between threads.

    >>> encryptor = PBEStringEncryptor("SecretKey")
    >>> encryptor.decrypt(encryptor.encrypt("TextToEncrypt"))
    'TextToEncrypt'
    """

    def __init__(
        self,
        password: str | Secret[str],
        *,
        algorithm: str = DEFAULT_ALGORITHM,
        iterations: int = DEFAULT_ITERATIONS,
    ) -> None:
        if isinstance(password, Secret):
            password = password.secret_value
        if not password:
            raise ValueError("Encryption password must not be empty")
        if iterations < 1:
            raise ValueError(f"Iteration count must be positive, got {iterations}")

        self.algorithm = Choices(ALGORITHMS)(algorithm)
        self.iterations = iterations
        self._password = password.encode("utf-8")
        self._scheme = _SCHEMES[self.algorithm]

    def __repr__(self) -> str:
        return f"PBEStringEncryptor(algorithm={self.algorithm!r}, iterations={self.iterations})"

    def _cipher(self, salt: bytes, iv: bytes) -> Cipher:
        key, derived_iv = self._scheme.derive(self._password, salt, self.iterations)
        return Cipher(self._scheme.cipher(key), modes.CBC(iv or derived_iv))

    def encrypt(self, plaintext: str) -> str:
        scheme = self._scheme
        salt = os.urandom(scheme.salt_size)
        iv = os.urandom(scheme.iv_size)

        padder = padding.PKCS7(scheme.block_size * 8).padder()
        padded = padder.update(plaintext.encode("utf-8")) + padder.finalize()

        encryptor = self._cipher(salt, iv).encryptor()
        body = encryptor.update(padded) + encryptor.finalize()
        return base64.b64encode(salt + iv + body).decode("ascii")

    def decrypt(self, ciphertext: str) -> str:
        scheme = self._scheme
        try:
            raw = base64.b64decode(ciphertext.strip(), validate=True)
        except (binascii.Error, ValueError) as exc:
            raise DecryptionError("Value is not valid base64") from exc

        header = scheme.salt_size + scheme.iv_size
        body = raw[header:]
        if not body or len(body) % scheme.block_size:
            raise DecryptionError("Value is too short or not aligned to the cipher block size")

        salt = raw[: scheme.salt_size]
        iv = raw[scheme.salt_size : header]
        decryptor = self._cipher(salt, iv).decryptor()
        padded = decryptor.update(body) + decryptor.finalize()

        unpadder = padding.PKCS7(scheme.block_size * 8).unpadder()
        try:
            data = unpadder.update(padded) + unpadder.finalize()
        except ValueError as exc:
            raise DecryptionError("Invalid padding; wrong password or corrupted value") from exc

        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecryptionError("Decrypted bytes are not valid UTF-8") from exc
