"""File helpers shared by the vault store and the deployment merger.

Writes go to a temp file in the destination directory and are moved into place
with ``os.replace`` so an interrupted write never leaves a half-written file.
There is no locking: concurrent invocations must be serialized by the caller.
"""

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

BACKUP_SUFFIX = ".bak"


def atomic_write_bytes(path: Path, data: bytes, mode: Optional[int] = None) -> None:
    """Replace ``path`` with ``data`` atomically.

    Args:
        path: Destination file.
        data: Full new content.
        mode: Permission bits for the new file. Defaults to the existing file's
            mode, or 0600 when the file is new.
    """
    path = Path(path)
    if mode is None:
        mode = path.stat().st_mode & 0o777 if path.exists() else 0o600

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except Exception:
        # Clean up temp file on failure
        if os.path.exists(tmp_name):
            os.remove(tmp_name)
        raise
    logger.debug("Wrote %d bytes to %s", len(data), path)


def backup_path_for(path: Path) -> Path:
    path = Path(path)
    return path.with_name(path.name + BACKUP_SUFFIX)


def backup_file(path: Path) -> Optional[Path]:
    """Copy ``path`` to its ``.bak`` sibling, replacing any previous backup.

    Returns the backup path, or None when there was nothing to back up.
    """
    path = Path(path)
    if not path.exists():
        return None
    backup = backup_path_for(path)
    shutil.copy2(path, backup)
    logger.debug("Backed up %s -> %s", path, backup)
    return backup
