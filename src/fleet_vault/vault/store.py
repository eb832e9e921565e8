"""Vault file operations: encrypt, decrypt and load.

Works on a vault directory holding ``vault.json`` (plaintext) and/or
``vault.json.enc`` (encrypted). Both may exist at the same time. No locking is
performed; one operator runs one command at a time.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..core import EventType, log_event
from ..fsutil import atomic_write_bytes
from .bundle import Vault, parse
from .codec import VaultCodec
from .errors import DecryptionFailed, MissingInput
from .password import PasswordSource

logger = logging.getLogger(__name__)


@dataclass
class VaultFiles:
    """On-disk presence of the two vault forms."""

    plaintext_path: Path
    encrypted_path: Path
    plaintext_exists: bool
    encrypted_exists: bool
    encrypted_size: Optional[int] = None


class VaultStore:
    """Encrypts/decrypts the vault files in one directory."""

    def __init__(self, plaintext_path: Path, encrypted_path: Path, codec=VaultCodec):
        self.plaintext_path = Path(plaintext_path)
        self.encrypted_path = Path(encrypted_path)
        self.codec = codec

    @classmethod
    def from_settings(cls, settings) -> "VaultStore":
        return cls(settings.plaintext_path, settings.encrypted_path)

    def files(self) -> VaultFiles:
        encrypted_exists = self.encrypted_path.is_file()
        return VaultFiles(
            plaintext_path=self.plaintext_path,
            encrypted_path=self.encrypted_path,
            plaintext_exists=self.plaintext_path.is_file(),
            encrypted_exists=encrypted_exists,
            encrypted_size=self.encrypted_path.stat().st_size if encrypted_exists else None,
        )

    def encrypt(self, passwords: PasswordSource) -> int:
        """Encrypt vault.json -> vault.json.enc.

        The plaintext must parse as a vault; a malformed plaintext would produce
        an artifact that can never be decrypted again.

        Returns:
            Size of the encrypted file in bytes.

        Raises:
            MissingInput: vault.json does not exist.
            ParseError: vault.json is not a valid vault.
        """
        if not self.plaintext_path.is_file():
            raise MissingInput(f"{self.plaintext_path.name} not found. Nothing to encrypt.")

        plaintext = self.plaintext_path.read_bytes()
        vault = parse(plaintext)
        password = passwords.get_password(confirm=True)

        blob = self.codec.encrypt(plaintext, password)
        atomic_write_bytes(self.encrypted_path, blob, mode=0o600)

        log_event(
            EventType.VAULT_ENCRYPTED,
            "Vault encrypted",
            path=str(self.encrypted_path),
            bundles=len(vault),
            size_bytes=len(blob),
        )
        return len(blob)

    def decrypt(self, passwords: PasswordSource) -> Vault:
        """Decrypt vault.json.enc -> vault.json (mode 0600).

        Raises:
            MissingInput: vault.json.enc does not exist.
            DecryptionFailed: Wrong password or corrupt ciphertext. vault.json
                is left untouched.
        """
        if not self.encrypted_path.is_file():
            raise MissingInput(f"{self.encrypted_path.name} not found. Nothing to decrypt.")

        blob = self.encrypted_path.read_bytes()
        password = passwords.get_password(confirm=False)
        try:
            plaintext = self.codec.decrypt(blob, password)
        except DecryptionFailed:
            log_event(EventType.VAULT_DECRYPT_FAILED, "Vault decryption failed", path=str(self.encrypted_path))
            raise

        atomic_write_bytes(self.plaintext_path, plaintext, mode=0o600)
        vault = parse(plaintext)
        log_event(
            EventType.VAULT_DECRYPTED,
            "Vault decrypted",
            path=str(self.plaintext_path),
            bundles=len(vault),
        )
        return vault

    def read_plaintext(self) -> Vault:
        if not self.plaintext_path.is_file():
            raise MissingInput(f"{self.plaintext_path.name} not found.")
        return parse(self.plaintext_path.read_bytes())

    def load(self, passwords: PasswordSource) -> Vault:
        """Return the vault, decrypting to vault.json first if needed.

        Raises:
            MissingInput: Neither vault.json nor vault.json.enc exists.
        """
        if self.plaintext_path.is_file():
            logger.debug("Using plaintext vault %s", self.plaintext_path)
            return self.read_plaintext()
        if not self.encrypted_path.is_file():
            raise MissingInput(
                f"Neither {self.plaintext_path.name} nor {self.encrypted_path.name} found."
            )
        logger.info("Decrypting vault %s", self.encrypted_path)
        return self.decrypt(passwords)
