"""Vault: encrypted credential bundles.

- codec: OpenSSL-compatible AES-256-CBC + PBKDF2 encryption
- bundle: plaintext data model (bundles, placeholders, readiness)
- password: password sources (pre-supplied or interactive)
- store: encrypt/decrypt/load the vault files
"""

from .bundle import META_BUNDLE, PLACEHOLDER_PREFIX, Vault, is_placeholder, is_ready, parse, serialize
from .codec import VaultCodec
from .errors import (
    DecryptionFailed,
    MissingInput,
    ParseError,
    PasswordError,
    TargetUnavailable,
    VaultError,
)
from .password import (
    InteractivePasswordSource,
    PasswordSource,
    StaticPasswordSource,
    password_source_from_settings,
)
from .store import VaultFiles, VaultStore

__all__ = [
    "META_BUNDLE",
    "PLACEHOLDER_PREFIX",
    "Vault",
    "is_placeholder",
    "is_ready",
    "parse",
    "serialize",
    "VaultCodec",
    "VaultError",
    "MissingInput",
    "DecryptionFailed",
    "ParseError",
    "PasswordError",
    "TargetUnavailable",
    "PasswordSource",
    "StaticPasswordSource",
    "InteractivePasswordSource",
    "password_source_from_settings",
    "VaultFiles",
    "VaultStore",
]
