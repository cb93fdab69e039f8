"""File writing helpers shared by exports and file-backed storage."""

import os
from pathlib import Path
from typing import Union

from mdexport.utils.logging import get_logger

logger = get_logger(__name__)


def atomic_write(path: Path, content: Union[str, bytes]) -> None:
    """
    Atomically write content to file with temp-file-rename pattern.

    1. Write to a temporary file beside the target
    2. fsync to ensure data is on disk
    3. Atomic rename to replace the original file

    Readers therefore see either the old file or the complete new one.

    Args:
        path: Target file path (parent directory must exist)
        content: Text (written as UTF-8) or bytes

    Raises:
        OSError: On file I/O errors
        PermissionError: On permission errors
    """
    data = content.encode("utf-8") if isinstance(content, str) else content

    # Same directory keeps the rename on one filesystem
    temp_path = path.parent / f".{path.name}.tmp.{os.getpid()}"

    try:
        with open(temp_path, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())

        temp_path.replace(path)

        logger.debug(
            "atomic_write_success",
            path=str(path),
            size=len(data)
        )

    except Exception as e:
        if temp_path.exists():
            temp_path.unlink()
        logger.error(
            "atomic_write_failed",
            path=str(path),
            error=str(e)
        )
        raise
