"""
Directory walking for the duplicate sweeper
"""

import logging
import os
import stat
from pathlib import Path
from typing import Iterator, Union

logger = logging.getLogger(__name__)


class InvalidRootError(ValueError):
    """Raised when the scan root is missing or is not a directory"""


def _log_walk_error(error: OSError) -> None:
    logger.debug("Cannot list %s: %s", error.filename, error)


def _iter_regular_files(root: Path, min_size: int) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root, onerror=_log_walk_error):
        # sorted in place so os.walk descends in the same order every run
        dirnames.sort()
        for filename in sorted(filenames):
            filepath = Path(dirpath) / filename
            try:
                info = os.lstat(filepath)
            except OSError as e:
                logger.debug("Cannot stat %s: %s", filepath, e)
                continue

            if not stat.S_ISREG(info.st_mode):
                logger.debug("Skipping non-regular entry %s", filepath)
                continue
            if info.st_size < min_size:
                continue

            yield filepath


def walk_files(root: Union[str, Path], min_size: int = 0) -> Iterator[Path]:
    """
    Enumerate regular files under a directory, recursively

    Symbolic links are neither followed nor yielded. Entries that cannot
    be classified are skipped.

    Args:
        root: Directory to walk
        min_size: Minimum file size in bytes to yield

    Returns:
        Lazy iterator of file paths in discovery order

    Raises:
        InvalidRootError: root does not exist or is not a directory
    """
    root_path = Path(root)
    if not root_path.is_dir():
        raise InvalidRootError(f"'{root}' is not a valid directory")

    return _iter_regular_files(root_path, min_size)
