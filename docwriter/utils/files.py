"""Source file discovery and safe write-back.

Collects the Java files of a source tree in a stable order and
persists rewritten files through a temporary file that is atomically
renamed over the original.
"""

import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)


class PersistError(OSError):
    """Raised when a rewritten file cannot be written back."""


def collect_source_files(
    root: str,
    extensions: Iterable[str] = (".java",),
    exclude_patterns: Iterable[str] = (),
) -> list[Path]:
    """Collect all source files below a directory.

    Files are returned sorted by path. Any file with a path component
    listed in ``exclude_patterns`` is skipped.

    Args:
        root: Directory to scan recursively, or a single file.
        extensions: File suffixes to include.
        exclude_patterns: Directory or file names to skip.

    Returns:
        List of source file paths.

    Raises:
        FileNotFoundError: If the root does not exist.
    """
    root_path = Path(root)
    if not root_path.exists():
        raise FileNotFoundError(f"Source root not found: {root}")
    if root_path.is_file():
        return [root_path]

    exclude = set(exclude_patterns)
    files = []
    for ext in extensions:
        for f in root_path.rglob(f"*{ext}"):
            if not f.is_file():
                continue
            if any(part in exclude for part in f.relative_to(root_path).parts):
                continue
            files.append(f)

    files.sort()
    logger.debug("Collected %d source files under %s", len(files), root)
    return files


def write_atomic(path: Path, text: str) -> None:
    """Replace a file's content without leaving a partial write behind.

    The text is written to a temporary file in the same directory,
    flushed to disk and renamed over the target. Permissions of the
    original file are preserved.

    Args:
        path: File to overwrite.
        text: New content, encoded as UTF-8 with newlines kept as is.

    Raises:
        PersistError: If any step of the write fails.
    """
    path = Path(path)
    tmp_name = None
    try:
        mode = stat.S_IMODE(path.stat().st_mode) if path.exists() else None
        with tempfile.NamedTemporaryFile(
            "wb", dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(text.encode("utf-8"))
            tmp.flush()
            os.fsync(tmp.fileno())
        if mode is not None:
            os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise PersistError(f"Failed to write {path}: {e}") from e

    logger.debug("Wrote %d characters to %s", len(text), path)
