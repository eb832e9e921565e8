"""Error taxonomy for vault and deployment operations.

Every fatal condition raised by this package derives from ``VaultError`` so the
CLI can report it with a single handler. Placeholder skips are not errors and
live in the deployment report instead.
"""


class VaultError(Exception):
    """Base class for all vault failures."""


class MissingInput(VaultError):
    """A vault or target file the operation needs does not exist."""


class DecryptionFailed(VaultError):
    """Wrong password, wrong key-derivation parameters, or foreign ciphertext."""


class ParseError(VaultError):
    """A plaintext vault or target document is not well-formed."""


class TargetUnavailable(VaultError):
    """None of a Deployment Target's candidate paths exist."""

    def __init__(self, target: str, tried):
        self.target = target
        self.tried = [str(p) for p in tried]
        super().__init__(f"{target} not found (tried: {', '.join(self.tried)})")


class PasswordError(VaultError):
    """Password missing, empty, or confirmation mismatch."""
