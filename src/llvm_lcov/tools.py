# Copyright (c) 2020-2022, Adam Karpierz
# Licensed under the BSD license
# https://opensource.org/licenses/BSD-3-Clause

"""
tools

  Location of llvm-profdata and llvm-cov.

  Unless configured explicitly (llvm_profdata_tool, llvm_cov_tool) the
  tools are taken from the llvm-tools component of the active rust
  toolchain:

    <rustc --print sysroot>/lib/rustlib/<host triple>/bin/<tool>

"""

import enum
import os
import shutil
import sys
from pathlib import Path

from . import __config__ as config
from .runner import run
from .errors import (LlvmLcovError, ToolchainError, MissingComponentError,
                     UnrecoverableError)


class Tool(enum.Enum):

    PROFDATA = "llvm-profdata"
    COV      = "llvm-cov"

    @property
    def config_key(self) -> str:
        return self.value.replace("-", "_") + "_tool"

    @property
    def exe_name(self) -> str:
        return self.value + (".exe" if sys.platform == "win32" else "")

    def path(self) -> Path:
        """Return the path of the tool, which is not checked for existence.

        Raise ToolchainError if the toolchain cannot be queried.
        """
        override = getattr(config, self.config_key, None)
        if override:
            # A bare command name is looked up on PATH
            if not os.path.dirname(override):
                override = shutil.which(override) or override
            return Path(override)
        return rustlib_bin_dir()/self.exe_name


DEFAULT_RUSTC = "rustc"


def rustc_cmd() -> str:
    """Return the rust compiler; $RUSTC applies only when no rustc is
    configured explicitly."""
    if config.rustc == DEFAULT_RUSTC:
        return os.environ.get("RUSTC") or DEFAULT_RUSTC
    return config.rustc


def rustc_sysroot() -> Path:
    try:
        output = run(rustc_cmd(), ["--print", "sysroot"])
    except LlvmLcovError as exc:
        raise ToolchainError(f"Unable to determine the rust sysroot\n{exc}") from exc
    return Path(output.decode("utf-8").strip())


def rustc_host() -> str:
    """Return the host target triple of the rust compiler."""
    try:
        output = run(rustc_cmd(), ["-vV"])
    except LlvmLcovError as exc:
        raise ToolchainError(f"Unable to determine the rust host triple\n{exc}") from exc
    for line in output.decode("utf-8").splitlines():
        if line.startswith("host:"):
            return line[len("host:"):].strip()
    raise ToolchainError("Unable to determine the rust host triple\n"
                         "'rustc -vV' reports no host")


def rustlib_bin_dir() -> Path:
    return rustc_sysroot()/"lib"/"rustlib"/rustc_host()/"bin"


def get_profdata_path() -> Path:
    """Return the path of an existing llvm-profdata.

    Raise MissingComponentError with installation instructions if it
    cannot be found.
    """
    message = ("We couldn't find llvm-profdata. Try installing the "
               f"llvm-tools component with `rustup component add {config.llvm_tools_component}`.")
    try:
        path = Tool.PROFDATA.path()
    except ToolchainError as exc:
        raise MissingComponentError(f"{message}\n{exc}") from exc
    if not path.exists():
        raise MissingComponentError(message)
    return path


def get_cov_path() -> Path:
    """Return the path of llvm-cov.

    Failure is a broken toolchain and raises UnrecoverableError.
    """
    try:
        return Tool.COV.path()
    except ToolchainError as exc:
        raise UnrecoverableError(f"Unable to locate llvm-cov\n{exc}") from exc
