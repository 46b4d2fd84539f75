# Copyright (c) 2020-2022, Adam Karpierz
# Licensed under the BSD license
# https://opensource.org/licenses/BSD-3-Clause

"""
runner

  Execution of the external LLVM and rust tools.

"""

from typing import Sequence
import os
import subprocess

from .types  import PathLike, Command
from .errors import LaunchError, ToolExitError


def run(cmd: PathLike, args: Sequence[PathLike]) -> bytes:
    """Run CMD with ARGS, wait for it and return its standard output
    verbatim.

    Raise LaunchError if the command cannot be started and
    ToolExitError, carrying the captured standard error, if it exits
    with a non-zero status. There is no retry and no timeout.
    """
    command: Command = [os.fspath(cmd)] + [os.fspath(arg) for arg in args]
    try:
        proc = subprocess.run(command, stdin=subprocess.DEVNULL,
                              stdout=subprocess.PIPE, stderr=subprocess.PIPE)
    except OSError as exc:
        raise LaunchError(command, exc) from exc
    if proc.returncode != 0:
        raise ToolExitError(command, proc.returncode, proc.stderr)
    return proc.stdout
