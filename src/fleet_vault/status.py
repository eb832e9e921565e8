"""Status Reporter - what is in the vault, without any values."""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .vault.bundle import Vault
from .vault.errors import ParseError
from .vault.store import VaultFiles, VaultStore


@dataclass(frozen=True)
class BundleStatus:
    name: str
    fields: Tuple[str, ...]


@dataclass
class StatusReport:
    files: VaultFiles
    bundles: Optional[List[BundleStatus]] = None
    error: Optional[str] = None

    def lines(self) -> List[str]:
        out = []
        if self.files.plaintext_exists:
            out.append("Vault (plaintext): EXISTS")
            if self.error:
                out.append(f"  unreadable: {self.error}")
            for bundle in self.bundles or []:
                out.append(f"  {bundle.name}: {list(bundle.fields)}")
        else:
            out.append("Vault (plaintext): not present")
        if self.files.encrypted_exists:
            out.append(f"Vault (encrypted): EXISTS ({self.files.encrypted_size} bytes)")
        else:
            out.append("Vault (encrypted): not present")
        return out


def status(vault: Vault) -> List[BundleStatus]:
    """Bundle names and field names in document order, ``_meta`` excluded."""
    return [BundleStatus(name, tuple(bundle)) for name, bundle in vault.bundles()]


def collect_status(store: VaultStore) -> StatusReport:
    """Report file presence, plus bundle fields when the plaintext vault exists."""
    report = StatusReport(files=store.files())
    if report.files.plaintext_exists:
        try:
            report.bundles = status(store.read_plaintext())
        except ParseError as exc:
            report.error = str(exc)
    return report
