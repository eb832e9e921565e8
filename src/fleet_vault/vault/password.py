"""Password sources.

The codec never prompts. Callers pick one ``PasswordSource`` per invocation:
a pre-supplied password (``VAULT_PASS``) or an interactive prompt that asks
for confirmation before encrypting.
"""

import getpass
from typing import Callable, Optional, Protocol, runtime_checkable

from .errors import PasswordError


@runtime_checkable
class PasswordSource(Protocol):
    def get_password(self, confirm: bool = False) -> str: ...


class StaticPasswordSource:
    """Pre-supplied password. Confirmation is the supplier's responsibility."""

    def __init__(self, password: str):
        self._password = password

    def get_password(self, confirm: bool = False) -> str:
        if not self._password:
            raise PasswordError("A vault password is required.")
        return self._password

    def __repr__(self) -> str:
        return "StaticPasswordSource(<hidden>)"


class InteractivePasswordSource:
    """Prompts on the terminal; asks twice when ``confirm`` is set."""

    def __init__(self, prompt: Optional[Callable[[str], str]] = None):
        self._prompt = prompt or getpass.getpass
        self._cached: Optional[str] = None
        self._confirmed = False

    def get_password(self, confirm: bool = False) -> str:
        if self._cached is not None and (self._confirmed or not confirm):
            return self._cached
        password = self._prompt("Password: ")
        if not password:
            raise PasswordError("A vault password is required.")
        if confirm and self._prompt("Confirm: ") != password:
            raise PasswordError("Passwords don't match.")
        self._cached = password
        self._confirmed = confirm
        return password


def password_source_from_settings(settings) -> PasswordSource:
    """Static source when the settings carry a password, interactive otherwise."""
    if settings.password:
        return StaticPasswordSource(settings.password)
    return InteractivePasswordSource()
