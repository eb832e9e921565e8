"""
Shared pytest fixtures for the fleet-vault test suite.

Autouse fixtures below isolate tests from the operator's environment:
  - VAULT_PASS / FLEET_VAULT_*  -> unset  (no real password or paths leak in)
  - Root logging handler        -> removed after each test
"""

import logging

import pytest


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch):
    """Never read the real vault password or vault location from the shell."""
    for var in ("VAULT_PASS", "FLEET_VAULT_DIR", "FLEET_VAULT_HOME"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def _reset_logging():
    """Drop the stderr handler the CLI installs, so later tests start clean.

    The handler binds to whatever sys.stderr was when it was created, which
    under capsys is a per-test capture stream.
    """
    import fleet_vault.core.events as events_mod

    root = logging.getLogger()
    handlers_before = list(root.handlers)
    level_before = root.level

    yield

    for handler in list(root.handlers):
        if handler not in handlers_before:
            root.removeHandler(handler)
    root.setLevel(level_before)
    events_mod._handler_installed = False


@pytest.fixture
def home(tmp_path):
    """Fake home directory for Deployment Target resolution."""
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def vault_dir(tmp_path):
    """Directory holding vault.json / vault.json.enc."""
    path = tmp_path / "secrets"
    path.mkdir()
    return path
