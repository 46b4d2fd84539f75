# Copyright (c) 2020-2022, Adam Karpierz
# Licensed under the BSD license
# https://opensource.org/licenses/BSD-3-Clause

"""
discover

  Selection of the binaries whose coverage is exported.

"""

from typing import List, Iterator
import os
from pathlib import Path

from .types  import PathLike
from .errors import UnrecoverableError


def is_binary_candidate(path: PathLike) -> bool:
    """Return True if PATH is a non-empty executable regular file."""
    return (os.path.isfile(path) and os.access(path, os.X_OK)
            and os.path.getsize(path) > 0)


def walk_files(directory: Path) -> Iterator[Path]:
    """Yield every file below DIRECTORY, depth-first."""

    def onerror(exc: OSError):
        raise UnrecoverableError(f"Failed to open directory '{directory}'.\n{exc}") from exc

    for root, dirs, files in os.walk(directory, onerror=onerror):
        for name in files:
            yield Path(root)/name


def find_binaries(binary_path: PathLike) -> List[Path]:
    """Return the binaries to export for BINARY_PATH.

    A file is returned as is, without any check. A directory is searched
    recursively for non-empty executable files; an entry which cannot be
    read raises UnrecoverableError.
    """
    binary_path = Path(binary_path)
    if binary_path.is_file():
        return [binary_path]

    binaries = []
    for path in walk_files(binary_path):
        try:
            if is_binary_candidate(path):
                binaries.append(path)
        except OSError as exc:
            raise UnrecoverableError(f"Failed to open directory '{binary_path}'.\n{exc}") from exc
    return binaries
