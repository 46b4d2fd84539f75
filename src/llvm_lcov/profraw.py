# Copyright (c) 2020-2022, Adam Karpierz
# Licensed under the BSD license
# https://opensource.org/licenses/BSD-3-Clause

"""
profraw

  Conversion of the raw profiles (.profraw) written by LLVM-instrumented
  programs into lcov coverage reports:

    1. all profraw files are merged once into a sparse indexed profile
       placed in the working directory,
    2. the binaries to report on are discovered,
    3. llvm-cov exports an lcov report of every binary against the
       merged profile.

  A binary llvm-cov fails on (typically one built without coverage
  instrumentation or not covered by the profile) yields no report.
  Every other failure aborts the conversion.

"""

from typing import List, Iterable, NamedTuple
from pathlib import Path

from . import __config__ as config
from .types    import PathLike, LcovReport, ExportFailure
from .errors   import LlvmLcovError
from .runner   import run
from .tools    import get_profdata_path, get_cov_path
from .discover import find_binaries
from .util     import warn

__all__ = ("ExportResult", "profdata_path_for", "merge_profraws",
           "export_lcov", "profraws_to_lcov")

LCOV_FORMAT = "lcov"


class ExportResult(NamedTuple):
    reports:  List[LcovReport]
    failures: List[ExportFailure]


def profdata_path_for(working_dir: PathLike) -> Path:
    """Return the location of the merged profile in WORKING_DIR."""
    return Path(working_dir)/config.profdata_filename


def merge_profraws(profraw_paths: Iterable[PathLike], profdata_path: PathLike) -> Path:
    """Merge PROFRAW_PATHS into the sparse indexed profile PROFDATA_PATH.

    The list of profraw files is handed to llvm-profdata as is, even
    when empty.
    """
    args = ["merge", "-sparse", "-o", profdata_path]
    args.extend(profraw_paths)
    run(get_profdata_path(), args)
    return Path(profdata_path)


def export_lcov(binaries: Iterable[PathLike], profdata_path: PathLike,
                cov_tool_path: PathLike) -> ExportResult:
    """Export an lcov report of each of BINARIES, in order.

    Binaries llvm-cov fails on are collected in the failures of the
    result together with the error message, they get no report.
    """
    reports:  List[LcovReport]    = []
    failures: List[ExportFailure] = []
    for binary in binaries:
        args = ["export", binary,
                "--instr-profile", profdata_path,
                "--format", LCOV_FORMAT]
        try:
            reports.append(run(cov_tool_path, args))
        except LlvmLcovError as exc:
            failures.append((Path(binary), str(exc)))
    return ExportResult(reports, failures)


def profraws_to_lcov(profraw_paths: Iterable[PathLike], binary_path: PathLike,
                     working_dir: PathLike) -> List[LcovReport]:
    """Return the lcov reports of the binaries at BINARY_PATH (a binary
    or a directory of binaries) for the coverage recorded in
    PROFRAW_PATHS.

    The merged profile is left in WORKING_DIR. Export failures of
    single binaries are reported as warnings.
    """
    profdata_path = merge_profraws(profraw_paths, profdata_path_for(working_dir))

    binaries = find_binaries(binary_path)
    cov_tool_path = get_cov_path()

    result = export_lcov(binaries, profdata_path, cov_tool_path)
    for binary, err_str in result.failures:
        warn(f"WARNING: Suppressing error returned by llvm-cov tool "
             f"for binary {binary}\n{err_str}")
    return result.reports
