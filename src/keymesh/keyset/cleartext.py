"""
Cleartext Keyset I/O

Reads and writes keysets as unencrypted JSON. The output contains secret key
material; only use it where the storage itself is trusted (tests, local
development, or material already protected by other means). Files written by
:func:`write` are readable by the owner only.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Union

from pydantic import ValidationError

from keymesh.exceptions import InvalidArgumentError
from keymesh.keyset.handle import KeysetHandle
from keymesh.models import Keyset

logger = logging.getLogger(__name__)

SECRET_FILE_MODE = 0o600


def to_json(handle: KeysetHandle) -> str:
    """Serialize the keyset of *handle* to JSON."""
    return handle.keyset.model_dump_json(indent=2)


def from_json(data: Union[str, bytes]) -> KeysetHandle:
    """Parse a keyset from JSON.

    Raises:
        InvalidArgumentError: If *data* is not a valid keyset.
    """
    try:
        keyset = Keyset.model_validate_json(data)
    except ValidationError as exc:
        raise InvalidArgumentError(f"invalid keyset: {exc.error_count()} error(s)") from exc
    return KeysetHandle(keyset)


def from_keyset(keyset: Keyset) -> KeysetHandle:
    """Wrap an in-memory keyset in a handle."""
    return KeysetHandle(keyset)


def write(handle: KeysetHandle, path: Union[str, Path]) -> None:
    """Persist the keyset of *handle* to a JSON file.

    Args:
        handle: Keyset to write.
        path: Destination file, created or reset to mode 0600; parent
            directories are created.
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    fd = os.open(target, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, SECRET_FILE_MODE)
    with os.fdopen(fd, "w") as f:
        f.write(to_json(handle))
    # O_CREAT's mode only applies to new files
    os.chmod(target, SECRET_FILE_MODE)
    logger.info("Wrote cleartext keyset with %d keys to %s", len(handle.keyset.keys), target)


def read(path: Union[str, Path]) -> KeysetHandle:
    """Load a keyset from a JSON file.

    Raises:
        InvalidArgumentError: If the file does not hold a valid keyset.
    """
    handle = from_json(Path(path).read_text())
    logger.debug("Read cleartext keyset from %s", path)
    return handle
