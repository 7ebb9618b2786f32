"""
Duplicate Sweeper - A CLI utility to find and delete duplicate files in a directory tree
"""

__version__ = "1.0.0"
__author__ = "Ilya Boyarnikov"
__description__ = "A tool to find duplicate files by content and remove redundant copies"

from .walker import InvalidRootError, walk_files
from .index import (
    calculate_file_hash,
    build_index,
    find_duplicate_groups,
    find_duplicates,
)
from .reconciler import (
    ReconcileResult,
    format_size,
    analyze_duplicates,
    ask_for_confirmation,
    delete_duplicate_group,
    reconcile,
)
