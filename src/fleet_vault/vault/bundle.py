"""Bundle Model - the plaintext vault's data shape.

A vault is a JSON mapping of bundle name -> bundle, where each bundle maps field
names to string values. The reserved ``_meta`` bundle carries vault metadata
and is excluded from enumeration and deployment.
"""

import json
from typing import Dict, Iterator, Mapping, Optional, Tuple, Union

from .errors import ParseError

META_BUNDLE = "_meta"
PLACEHOLDER_PREFIX = "PASTE"

Bundle = Dict[str, str]


class Vault:
    """Decrypted vault contents, in document order."""

    def __init__(self, data: Optional[Dict[str, dict]] = None):
        self._data: Dict[str, dict] = dict(data or {})

    def bundles(self) -> Iterator[Tuple[str, Bundle]]:
        """Yield (name, bundle) pairs, skipping the metadata bundle."""
        for name, bundle in self._data.items():
            if name != META_BUNDLE:
                yield name, bundle

    def names(self) -> list:
        return [name for name, _ in self.bundles()]

    def get(self, name: str) -> Optional[Bundle]:
        if name == META_BUNDLE:
            return None
        return self._data.get(name)

    def __contains__(self, name: str) -> bool:
        return name != META_BUNDLE and name in self._data

    def __len__(self) -> int:
        return len(self.names())

    def __eq__(self, other) -> bool:
        if not isinstance(other, Vault):
            return NotImplemented
        return self._data == other._data

    def __repr__(self) -> str:
        # Names only, never values
        return f"Vault(bundles={self.names()!r})"

    def to_dict(self) -> Dict[str, dict]:
        return {name: dict(bundle) for name, bundle in self._data.items()}


def parse(plaintext: Union[bytes, str]) -> Vault:
    """Parse plaintext vault bytes into a ``Vault``.

    Raises:
        ParseError: Not JSON, not a mapping of mappings, or a non-string field value.
    """
    try:
        data = json.loads(plaintext)
    except ValueError as exc:
        # JSONDecodeError and UnicodeDecodeError are both ValueErrors
        raise ParseError(f"Vault is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise ParseError(f"Vault must be a JSON object, got {type(data).__name__}.")

    for name, bundle in data.items():
        if not isinstance(bundle, dict):
            raise ParseError(f"Bundle '{name}' must be an object, got {type(bundle).__name__}.")
        if name == META_BUNDLE:
            continue
        for field, value in bundle.items():
            if not isinstance(value, str):
                raise ParseError(
                    f"Field '{name}.{field}' must be a string, got {type(value).__name__}."
                )
    return Vault(data)


def serialize(vault: Vault) -> bytes:
    """Canonical plaintext form: 2-space indented JSON, document order, trailing newline."""
    return (json.dumps(vault.to_dict(), indent=2, ensure_ascii=False) + "\n").encode("utf-8")


def is_placeholder(value: Optional[str]) -> bool:
    return isinstance(value, str) and value.startswith(PLACEHOLDER_PREFIX)


def not_ready_reason(bundle: Optional[Mapping[str, str]], primary_field: str) -> Optional[str]:
    """Return why a bundle cannot be deployed, or None when it is ready."""
    if bundle is None:
        return "not in vault"
    value = bundle.get(primary_field)
    if not value:
        return f"missing {primary_field}"
    if is_placeholder(value):
        return "placeholder"
    return None


def is_ready(bundle: Optional[Mapping[str, str]], primary_field: str) -> bool:
    """True iff the bundle exists and its primary field is provisioned."""
    return not_ready_reason(bundle, primary_field) is None
