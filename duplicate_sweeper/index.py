"""
Content fingerprinting and grouping of files by hash
"""

import hashlib
import logging
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

from tqdm import tqdm

from .walker import walk_files

logger = logging.getLogger(__name__)


def calculate_file_hash(filepath: Path, chunk_size: int = 8192) -> Optional[str]:
    """
    Calculate SHA-256 hash of a file

    Args:
        filepath: Path to the file
        chunk_size: Size of chunks to read at once

    Returns:
        SHA-256 hex digest or None if file cannot be read
    """
    hash_sha256 = hashlib.sha256()
    try:
        with open(filepath, 'rb') as f:
            for chunk in iter(lambda: f.read(chunk_size), b''):
                hash_sha256.update(chunk)
        return hash_sha256.hexdigest()
    except OSError as e:
        logger.debug("Skipping unreadable file %s: %s", filepath, e)
        return None


def _hash_entry(filepath: Path) -> Tuple[Path, Optional[str]]:
    return filepath, calculate_file_hash(filepath)


def build_index(
        paths: Iterable[Path],
        workers: int = 1,
        show_progress: bool = False
) -> Tuple[Dict[str, List[Path]], List[Path]]:
    """
    Hash every path and group the paths by content hash

    With more than one worker, files are hashed in a thread pool while
    the calling thread remains the only writer of the mapping. Results
    are consumed in submission order, so discovery order is preserved
    either way.

    Args:
        paths: File paths in discovery order
        workers: Number of hashing threads
        show_progress: Whether to draw a progress bar on stderr

    Returns:
        Tuple of (hash -> paths mapping, paths that could not be read)
    """
    if workers < 1:
        raise ValueError("Number of workers must be at least 1")

    buckets: Dict[str, List[Path]] = defaultdict(list)
    skipped: List[Path] = []

    def collect(results):
        for filepath, file_hash in tqdm(results, desc="Hashing", unit=" files",
                                        disable=not show_progress, leave=False):
            if file_hash is None:
                skipped.append(filepath)
                continue
            buckets[file_hash].append(filepath)

    if workers == 1:
        collect(map(_hash_entry, paths))
    else:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            collect(executor.map(_hash_entry, paths))

    logger.info("Hashed %d files into %d buckets, skipped %d",
                sum(len(p) for p in buckets.values()), len(buckets), len(skipped))
    return dict(buckets), skipped


def find_duplicate_groups(buckets: Dict[str, List[Path]]) -> Dict[str, List[Path]]:
    """Keep only buckets with more than one file"""
    return {h: paths for h, paths in buckets.items() if len(paths) > 1}


def find_duplicates(
        directory: Union[str, Path],
        min_size: int = 0,
        workers: int = 1,
        show_progress: bool = False
) -> Dict[str, List[Path]]:
    """
    Find duplicate files in a directory tree

    Args:
        directory: Path to search
        min_size: Minimum file size in bytes to consider
        workers: Number of hashing threads
        show_progress: Whether to draw a progress bar on stderr

    Returns:
        Dictionary with file hashes as keys and lists of file paths as values
    """
    buckets, _ = build_index(
        walk_files(directory, min_size=min_size),
        workers=workers,
        show_progress=show_progress,
    )
    return find_duplicate_groups(buckets)
