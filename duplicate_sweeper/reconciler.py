"""
Reporting, confirmation and deletion of duplicate groups
"""

import filecmp
import logging
import sys
from pathlib import Path
from typing import Dict, List, NamedTuple, Optional, TextIO, Tuple

from .index import find_duplicate_groups

logger = logging.getLogger(__name__)

MODE_INTERACTIVE = "interactive"
MODE_AUTO = "auto"
MODE_DRY_RUN = "dry-run"
MODES = (MODE_INTERACTIVE, MODE_AUTO, MODE_DRY_RUN)

CONFIRM_PROMPT = "Do you want to delete these files? (y/n): "


class ReconcileResult(NamedTuple):
    groups: int
    confirmed: int
    deleted: int
    failed: List[Tuple[Path, str]]
    freed: int


def format_size(size_bytes: int) -> str:
    """
    Convert bytes to human-readable format

    Args:
        size_bytes: Size in bytes

    Returns:
        Human readable size string
    """
    for unit in ['B', 'KB', 'MB', 'GB']:
        if size_bytes < 1024.0:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024.0
    return f"{size_bytes:.1f} TB"


def analyze_duplicates(duplicates: Dict[str, List[Path]]) -> Tuple[int, int, int]:
    """
    Count what deleting every redundant copy would remove

    Args:
        duplicates: Duplicate groups, kept file first

    Returns:
        Tuple of (group_count, redundant_file_count, reclaimable_space)
    """
    redundant = sum(len(filepaths) - 1 for filepaths in duplicates.values())
    reclaimable = 0

    for filepaths in duplicates.values():
        try:
            reclaimable += filepaths[0].stat().st_size * (len(filepaths) - 1)
        except OSError:
            logger.debug("Cannot size group of %s", filepaths[0])

    return len(duplicates), redundant, reclaimable


def format_group(number: int, file_hash: str, filepaths: List[Path], show_size: bool = False) -> str:
    """Render one duplicate group, marking the file that will be kept"""
    size_info = ""
    if show_size:
        try:
            size_info = f" ({format_size(filepaths[0].stat().st_size)})"
        except OSError:
            size_info = " (size unknown)"

    lines = [f"\nSet {number} - Hash: {file_hash[:8]}...{size_info}", "Files:"]
    for i, filepath in enumerate(filepaths):
        prefix = "[KEEP]     " if i == 0 else "[DUPLICATE]"
        lines.append(f"  {prefix} {filepath}")
    return "\n".join(lines)


def ask_for_confirmation(stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> bool:
    """
    Prompt the operator and read one line of response

    Only "y" (case-insensitive, surrounding whitespace ignored) confirms.

    Raises:
        EOFError: the input stream is closed
    """
    stdin = sys.stdin if stdin is None else stdin
    stdout = sys.stdout if stdout is None else stdout

    print(CONFIRM_PROMPT, end="", file=stdout, flush=True)
    line = stdin.readline()
    if not line:
        raise EOFError("no response on standard input")
    return line.strip().lower() == "y"


def delete_duplicate_group(
        filepaths: List[Path],
        verify: bool = False,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None
) -> Tuple[int, int, List[Tuple[Path, str]]]:
    """
    Delete every file of a group except the first

    Each outcome is reported as soon as it happens. A failure on one file
    does not stop the rest of the group.

    Args:
        filepaths: Group members in discovery order
        verify: Compare each file byte for byte with the kept one first

    Returns:
        Tuple of (deleted_count, freed_space, failures)
    """
    stdout = sys.stdout if stdout is None else stdout
    stderr = sys.stderr if stderr is None else stderr

    deleted_count = 0
    freed_space = 0
    failures: List[Tuple[Path, str]] = []

    def report_failure(filepath: Path, reason: str) -> None:
        logger.debug("Failed to delete %s: %s", filepath, reason)
        print(f"Failed to delete {filepath}: {reason}", file=stderr)
        failures.append((filepath, reason))

    keep = filepaths[0]
    for filepath in filepaths[1:]:
        if verify:
            try:
                identical = filecmp.cmp(keep, filepath, shallow=False)
            except OSError as e:
                report_failure(filepath, str(e))
                continue
            if not identical:
                report_failure(filepath, f"content differs from {keep}")
                continue

        try:
            file_size = filepath.stat().st_size
            filepath.unlink()
        except OSError as e:
            report_failure(filepath, str(e))
            continue

        deleted_count += 1
        freed_space += file_size
        print(f"Deleted: {filepath}", file=stdout)

    return deleted_count, freed_space, failures


def reconcile(
        buckets: Dict[str, List[Path]],
        mode: str = MODE_INTERACTIVE,
        verify: bool = False,
        show_size: bool = False,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None
) -> ReconcileResult:
    """
    Walk through every duplicate group and resolve it

    In interactive mode each group waits for the operator's answer. Auto
    mode deletes without asking and dry-run only reports.

    Args:
        buckets: Hash to paths mapping from the index
        mode: One of MODES
        verify: Byte-compare files before deleting them
        show_size: Include group file size in the report

    Returns:
        ReconcileResult summarising what happened
    """
    if mode not in MODES:
        raise ValueError(f"Unknown mode '{mode}'")

    stdout = sys.stdout if stdout is None else stdout
    stderr = sys.stderr if stderr is None else stderr

    duplicates = find_duplicate_groups(buckets)
    if not duplicates:
        print("No duplicate files found.", file=stdout)
        return ReconcileResult(0, 0, 0, [], 0)

    print(f"Found {len(duplicates)} sets of duplicates:", file=stdout)

    confirmed = 0
    deleted = 0
    freed = 0
    failed: List[Tuple[Path, str]] = []

    for number, (file_hash, filepaths) in enumerate(duplicates.items(), 1):
        print(format_group(number, file_hash, filepaths, show_size), file=stdout)

        if mode == MODE_DRY_RUN:
            for filepath in filepaths[1:]:
                print(f"Would delete: {filepath}", file=stdout)
            continue

        if mode == MODE_INTERACTIVE and not ask_for_confirmation(stdin, stdout):
            print("Skipped deleting duplicates in this group.", file=stdout)
            continue

        confirmed += 1
        group_deleted, group_freed, group_failed = delete_duplicate_group(
            filepaths, verify=verify, stdout=stdout, stderr=stderr
        )
        deleted += group_deleted
        freed += group_freed
        failed.extend(group_failed)

    if mode == MODE_DRY_RUN:
        total_sets, total_files, total_space = analyze_duplicates(duplicates)
        print(f"\nDry run: Would delete {total_files} files from {total_sets} duplicate sets", file=stdout)
        print(f"Would free approximately {format_size(total_space)}", file=stdout)

    logger.info("Processed %d groups, deleted %d files, %d failures",
                len(duplicates), deleted, len(failed))
    return ReconcileResult(len(duplicates), confirmed, deleted, failed, freed)
