"""Target documents: JSON configuration files patched by the merger.

A document is kept as the parsed JSON tree (dicts preserve key order) and is
addressed with key paths such as ``("mcpServers", "github", "env", "TOKEN")``.
Only the leaf at a path is ever written; siblings are left as they are.
"""

import json
from pathlib import Path
from typing import Any, Optional, Sequence, Tuple

from ..vault.errors import ParseError

KeyPath = Tuple[str, ...]

_MISSING = object()


def format_path(path: Sequence[str]) -> str:
    return ".".join(path)


class TargetDocument:
    """Mutable JSON object tree with path accessors."""

    def __init__(self, data: Optional[dict] = None, source: Optional[Path] = None):
        self.data = data if data is not None else {}
        self.source = source

    @classmethod
    def load(cls, path: Path) -> "TargetDocument":
        """Parse an existing target file.

        Raises:
            ParseError: Not JSON, or the top level is not an object.
        """
        path = Path(path)
        raw = path.read_bytes()
        try:
            data = json.loads(raw)
        except ValueError as exc:
            raise ParseError(f"{path} is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise ParseError(f"{path} must contain a JSON object, got {type(data).__name__}.")
        return cls(data, source=path)

    def get(self, path: Sequence[str], default: Any = None) -> Any:
        node: Any = self.data
        for key in path:
            if not isinstance(node, dict) or key not in node:
                return default
            node = node[key]
        return node

    def has_mapping(self, path: Sequence[str]) -> bool:
        """True when every key along ``path`` exists and ends at an object."""
        return isinstance(self.get(path, _MISSING), dict)

    def set(self, path: Sequence[str], value: Any) -> bool:
        """Set the leaf at ``path``, creating missing intermediate objects.

        Returns:
            True if the stored value changed.

        Raises:
            ParseError: An intermediate key holds a non-object value.
        """
        if not path:
            raise ValueError("Cannot assign to the document root.")
        node = self.data
        for depth, key in enumerate(path[:-1]):
            child = node.get(key, _MISSING)
            if child is _MISSING:
                child = node[key] = {}
            elif not isinstance(child, dict):
                raise ParseError(
                    f"Expected an object at '{format_path(path[: depth + 1])}', "
                    f"found {type(child).__name__}."
                )
            node = child
        leaf = path[-1]
        changed = node.get(leaf, _MISSING) != value
        node[leaf] = value
        return changed

    def to_bytes(self) -> bytes:
        return (json.dumps(self.data, indent=2) + "\n").encode("utf-8")
