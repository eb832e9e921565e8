"""Command line entry point.

    fleet-vault encrypt   # vault.json -> vault.json.enc (password prompt)
    fleet-vault decrypt   # vault.json.enc -> vault.json (password prompt)
    fleet-vault deploy    # decrypt if needed + write tokens to their targets
    fleet-vault status    # show what's in the vault (keys only, no values)

Set VAULT_PASS for non-interactive use.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import VaultSettings
from .core import EventType, configure_logging, log_event
from .deploy import DeploymentMerger
from .status import collect_status
from .vault import VaultError, VaultStore, password_source_from_settings


def cmd_encrypt(settings: VaultSettings, store: VaultStore) -> int:
    size = store.encrypt(password_source_from_settings(settings))
    print(f"Encrypted: {store.encrypted_path.name} ({size} bytes)")
    print(f"You can now safely delete {store.plaintext_path.name}.")
    return 0


def cmd_decrypt(settings: VaultSettings, store: VaultStore) -> int:
    store.decrypt(password_source_from_settings(settings))
    print(f"Decrypted: {store.plaintext_path.name}")
    return 0


def cmd_deploy(settings: VaultSettings, store: VaultStore) -> int:
    if not store.plaintext_path.is_file() and store.encrypted_path.is_file():
        print("Decrypting vault...")
    vault = store.load(password_source_from_settings(settings))

    print("Deploying tokens to their target locations...")
    report = DeploymentMerger(settings.home).deploy(vault)
    for line in report.lines():
        print(f"  {line}")

    print()
    if report.ok:
        print(f"Tokens deployed. Consider removing {store.plaintext_path.name}:")
    else:
        print("Deployment incomplete; see [FAIL] lines above.")
        print(f"Failed targets were left unchanged. Consider removing {store.plaintext_path.name}:")
    print(f"  rm {store.plaintext_path}")
    if report.ok:
        print("Restart the MCP clients to pick up new tokens.")
    return 0 if report.ok else 1


def cmd_status(settings: VaultSettings, store: VaultStore) -> int:
    report = collect_status(store)
    for line in report.lines():
        print(line)
    log_event(
        EventType.STATUS_REPORTED,
        "Vault status",
        plaintext=report.files.plaintext_exists,
        encrypted=report.files.encrypted_exists,
    )
    return 0


COMMANDS = {
    "encrypt": (cmd_encrypt, "Encrypt vault.json -> vault.json.enc (password prompt)"),
    "decrypt": (cmd_decrypt, "Decrypt vault.json.enc -> vault.json (password prompt)"),
    "deploy": (cmd_deploy, "Decrypt (if needed) + write tokens to MCP configs"),
    "status": (cmd_status, "Show vault contents (keys only)"),
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fleet-vault",
        description="Encrypted token vault with deployment into MCP configuration files",
        epilog="Set VAULT_PASS for non-interactive use.",
    )
    parser.add_argument(
        "--vault-dir",
        type=Path,
        default=None,
        help="Directory holding vault.json / vault.json.enc (default: $FLEET_VAULT_DIR or cwd)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Emit structured events on stderr (-v info, -vv debug)",
    )
    parser.add_argument("--version", action="version", version=f"fleet-vault {__version__}")

    subparsers = parser.add_subparsers(dest="command", metavar="{encrypt,decrypt,deploy,status}")
    for name, (_, help_text) in COMMANDS.items():
        subparsers.add_parser(name, help=help_text)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 2

    configure_logging(args.verbose)
    settings = VaultSettings.load(vault_dir=args.vault_dir)
    store = VaultStore.from_settings(settings)
    handler, _ = COMMANDS[args.command]

    try:
        return handler(settings, store)
    except VaultError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nAborted.", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
