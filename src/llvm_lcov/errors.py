# Copyright (c) 2020-2022, Adam Karpierz
# Licensed under the BSD license
# https://opensource.org/licenses/BSD-3-Clause

"""
errors

  Exceptions raised while merging profraw files and exporting lcov
  reports.

  Everything derived from LlvmLcovError is a reportable error carrying
  a descriptive message. UnrecoverableError signals a broken environment
  (unreadable binary directory, no llvm-cov in the toolchain) and is
  never expected to be caught by library code.

"""

from typing import Sequence, Optional
import shlex

from .types import PathLike

__all__ = ("LlvmLcovError", "LaunchError", "ToolExitError",
           "ToolchainError", "MissingComponentError", "UnrecoverableError")


def format_command(cmd: Sequence[PathLike]) -> str:
    """Return CMD as a shell-quoted command line."""
    return shlex.join(str(arg) for arg in cmd)


class LlvmLcovError(OSError):
    """Base class of all reportable llvm_lcov errors."""


class LaunchError(LlvmLcovError):
    """The external command could not be started."""

    def __init__(self, cmd: Sequence[PathLike], reason: BaseException):
        super().__init__(f"Failed to execute {format_command(cmd)}\n{reason}")
        self.cmd    = list(cmd)
        self.reason = reason


class ToolExitError(LlvmLcovError):
    """The external command ran but exited with a non-zero status."""

    def __init__(self, cmd: Sequence[PathLike], returncode: int,
                 stderr: Optional[bytes] = None):
        self.cmd        = list(cmd)
        self.returncode = returncode
        self.stderr     = stderr or b""
        super().__init__(f"Failure while running {format_command(cmd)}\n"
                         f"{self.stderr.decode('utf-8', errors='replace')}")


class ToolchainError(LlvmLcovError):
    """The toolchain could not tell where a tool lives."""


class MissingComponentError(ToolchainError):
    """A required toolchain component is not installed."""


class UnrecoverableError(BaseException):
    """Environment misconfiguration aborting the whole invocation.

    Derives from BaseException so that it passes through any
    'except Exception' clause up to the outermost caller.
    """
