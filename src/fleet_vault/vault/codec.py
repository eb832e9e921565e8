"""Vault Codec - password-based encryption of the vault document.

Uses the OpenSSL ``enc`` salted container so an encrypted vault stays readable
with stock tooling::

    openssl enc -d -aes-256-cbc -pbkdf2 -iter 100000 -in vault.json.enc

Artifact layout: ``b"Salted__"`` + salt(8) + AES-256-CBC ciphertext (PKCS#7).
Key (32 bytes) and IV (16 bytes) are split from one 48-byte PBKDF2-HMAC-SHA256
output. Cipher, digest and iteration count are constants of format version 1;
they are not stored in the artifact.
"""

import logging
import os
from typing import Tuple

from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import hashes, padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from .bundle import parse
from .errors import DecryptionFailed, ParseError, PasswordError

logger = logging.getLogger(__name__)


class VaultCodec:
    """Encrypt/decrypt vault bytes with a password.

    CBC has no authentication tag, so ``decrypt`` substitutes a structural check:
    the plaintext must unpad cleanly AND parse as a Bundle Model. Anything else
    is reported as ``DecryptionFailed``, never as garbage plaintext.
    """

    FORMAT_VERSION = 1
    CIPHER_NAME = "aes-256-cbc"
    MAGIC = b"Salted__"
    PBKDF2_ITERATIONS = 100_000  # Changing this is a format version bump
    SALT_LENGTH = 8
    KEY_LENGTH = 32
    IV_LENGTH = 16
    BLOCK_SIZE = 128  # bits

    _HEADER_SIZE = len(MAGIC) + SALT_LENGTH

    @classmethod
    def derive_key_iv(cls, password: str, salt: bytes) -> Tuple[bytes, bytes]:
        """Derive (key, iv) from password + salt via PBKDF2-SHA256."""
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=cls.KEY_LENGTH + cls.IV_LENGTH,
            salt=salt,
            iterations=cls.PBKDF2_ITERATIONS,
            backend=default_backend(),
        )
        material = kdf.derive(password.encode("utf-8"))
        return material[: cls.KEY_LENGTH], material[cls.KEY_LENGTH :]

    @staticmethod
    def _require_password(password: str) -> None:
        if not password:
            raise PasswordError("A vault password is required.")

    @classmethod
    def encrypt(cls, plaintext: bytes, password: str) -> bytes:
        """Encrypt plaintext bytes with a fresh random salt.

        Returns: b"Salted__" + salt(8) + ciphertext
        """
        cls._require_password(password)
        salt = os.urandom(cls.SALT_LENGTH)
        key, iv = cls.derive_key_iv(password, salt)

        padder = padding.PKCS7(cls.BLOCK_SIZE).padder()
        padded = padder.update(plaintext) + padder.finalize()
        encryptor = Cipher(algorithms.AES(key), modes.CBC(iv), backend=default_backend()).encryptor()
        ciphertext = encryptor.update(padded) + encryptor.finalize()
        return cls.MAGIC + salt + ciphertext

    @classmethod
    def decrypt(cls, blob: bytes, password: str) -> bytes:
        """Decrypt an encrypted vault blob and verify its structure.

        Raises:
            DecryptionFailed: Wrong password, different KDF parameters, truncated
                or foreign-format input.
            PasswordError: Empty password.
        """
        cls._require_password(password)
        if len(blob) < cls._HEADER_SIZE or not blob.startswith(cls.MAGIC):
            raise DecryptionFailed("Not an encrypted vault (missing salted header).")
        ciphertext = blob[cls._HEADER_SIZE :]
        if not ciphertext or len(ciphertext) % (cls.BLOCK_SIZE // 8):
            raise DecryptionFailed("Encrypted vault is truncated or corrupt.")

        salt = blob[len(cls.MAGIC) : cls._HEADER_SIZE]
        key, iv = cls.derive_key_iv(password, salt)
        decryptor = Cipher(algorithms.AES(key), modes.CBC(iv), backend=default_backend()).decryptor()
        padded = decryptor.update(ciphertext) + decryptor.finalize()
        try:
            unpadder = padding.PKCS7(cls.BLOCK_SIZE).unpadder()
            plaintext = unpadder.update(padded) + unpadder.finalize()
        except ValueError as exc:
            raise DecryptionFailed("Wrong password or corrupt vault.") from exc

        try:
            parse(plaintext)
        except ParseError as exc:
            # Padding happened to validate; the structure check catches the rest
            logger.debug("Decrypted bytes failed structural check: %s", exc)
            raise DecryptionFailed("Wrong password or corrupt vault.") from exc
        return plaintext


def encrypt(plaintext: bytes, password: str) -> bytes:
    """Module-level shortcut for ``VaultCodec.encrypt``."""
    return VaultCodec.encrypt(plaintext, password)


def decrypt(blob: bytes, password: str) -> bytes:
    """Module-level shortcut for ``VaultCodec.decrypt``."""
    return VaultCodec.decrypt(blob, password)
