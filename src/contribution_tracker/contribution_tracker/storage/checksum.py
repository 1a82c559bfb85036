from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import Union

from ..core.constants import CHECKSUM_ALGORITHM, CHECKSUM_CHUNK_SIZE
from ..core.exceptions import io_failure, not_found

logger = logging.getLogger(__name__)


def file_checksum(path: Union[str, Path], algorithm: str = CHECKSUM_ALGORITHM) -> str:
    """Hex digest of a file's content, read in chunks.

    Meant for spotting accidental corruption of backups, not for tamper
    resistance, hence MD5 by default.
    """
    path = Path(path)
    digest = hashlib.new(algorithm)
    try:
        with path.open("rb") as f:
            for chunk in iter(lambda: f.read(CHECKSUM_CHUNK_SIZE), b""):
                digest.update(chunk)
    except FileNotFoundError as e:
        raise not_found(f"File does not exist: {path}", path=str(path)) from e
    except OSError as e:
        logger.error("Failed to calculate checksum for %s: %s", path, e)
        raise io_failure(f"Failed to calculate checksum for {path}: {e}", path=str(path)) from e
    return digest.hexdigest()
