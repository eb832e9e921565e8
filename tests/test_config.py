"""Tests for VaultSettings resolution."""

from pathlib import Path

from fleet_vault.config import VaultSettings


class TestVaultSettings:
    def test_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        settings = VaultSettings.load(environ={})
        assert settings.vault_dir == tmp_path
        assert settings.home == Path.home()
        assert settings.password is None
        assert settings.plaintext_path == tmp_path / "vault.json"
        assert settings.encrypted_path == tmp_path / "vault.json.enc"

    def test_environment(self, tmp_path):
        settings = VaultSettings.load(environ={
            "FLEET_VAULT_DIR": str(tmp_path / "secrets"),
            "FLEET_VAULT_HOME": str(tmp_path / "home"),
            "VAULT_PASS": "pw",
        })
        assert settings.vault_dir == tmp_path / "secrets"
        assert settings.home == tmp_path / "home"
        assert settings.password == "pw"

    def test_argument_beats_environment(self, tmp_path):
        settings = VaultSettings.load(vault_dir=tmp_path / "arg", environ={"FLEET_VAULT_DIR": "/elsewhere"})
        assert settings.vault_dir == tmp_path / "arg"

    def test_dotenv_file(self, vault_dir, tmp_path):
        (vault_dir / ".env").write_text(f"VAULT_PASS=from-file\nFLEET_VAULT_HOME={tmp_path}/h\n")
        settings = VaultSettings.load(vault_dir=vault_dir, environ={})
        assert settings.password == "from-file"
        assert settings.home == tmp_path / "h"

    def test_environment_beats_dotenv(self, vault_dir):
        (vault_dir / ".env").write_text("VAULT_PASS=from-file\n")
        settings = VaultSettings.load(vault_dir=vault_dir, environ={"VAULT_PASS": "from-env"})
        assert settings.password == "from-env"

    def test_password_hidden_in_repr(self, tmp_path):
        settings = VaultSettings.load(vault_dir=tmp_path, environ={"VAULT_PASS": "s3cret"})
        assert "s3cret" not in repr(settings)
