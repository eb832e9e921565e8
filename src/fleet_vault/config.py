"""Runtime settings, resolved once per invocation.

Precedence: explicit argument > environment variable > ``.env`` file in the
vault directory > default.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from dotenv import dotenv_values

ENV_VAULT_DIR = "FLEET_VAULT_DIR"
ENV_HOME = "FLEET_VAULT_HOME"
ENV_PASSWORD = "VAULT_PASS"

PLAINTEXT_NAME = "vault.json"
ENCRYPTED_NAME = "vault.json.enc"


@dataclass
class VaultSettings:
    vault_dir: Path
    home: Path
    password: Optional[str] = field(default=None, repr=False)
    plaintext_name: str = PLAINTEXT_NAME
    encrypted_name: str = ENCRYPTED_NAME

    @property
    def plaintext_path(self) -> Path:
        return self.vault_dir / self.plaintext_name

    @property
    def encrypted_path(self) -> Path:
        return self.vault_dir / self.encrypted_name

    @classmethod
    def load(
        cls,
        vault_dir: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "VaultSettings":
        """Build settings from arguments, the environment and an optional ``.env``.

        Args:
            vault_dir: Directory holding vault.json / vault.json.enc. Overrides
                FLEET_VAULT_DIR.
            environ: Environment mapping (defaults to os.environ).
        """
        env = dict(os.environ if environ is None else environ)

        if vault_dir is None:
            vault_dir = Path(env.get(ENV_VAULT_DIR) or Path.cwd())
        vault_dir = Path(vault_dir).expanduser()

        dotenv_file = vault_dir / ".env"
        if dotenv_file.is_file():
            file_values = {k: v for k, v in dotenv_values(dotenv_file).items() if v is not None}
            env = {**file_values, **env}

        home = Path(env.get(ENV_HOME) or Path.home()).expanduser()
        return cls(
            vault_dir=vault_dir,
            home=home,
            password=env.get(ENV_PASSWORD) or None,
        )
