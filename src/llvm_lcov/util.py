# Copyright (c) 2020-2022, Adam Karpierz
# Licensed under the BSD license
# https://opensource.org/licenses/BSD-3-Clause

"""
util

"""

from typing import List, Dict, Iterable, Optional
import os
import re
import sys
from pathlib import Path

from natsort import natsorted, ns

from .types import PathLike

quiet = False


def unique(iterable: Iterable) -> List:
    """Return list without duplicate entries."""
    result = []
    known  = set()
    for item in iterable:
        if item not in known:
            known.add(item)
            result.append(item)
    return result


def sort_unique_paths(iterable: Iterable[PathLike]) -> List[Path]:
    """Return list of paths in natural ascending order (run2 before
    run10) and without duplicate entries."""
    unique = {str(path) for path in iterable}
    return [Path(path) for path in natsorted(unique, alg=ns.PATH)]


def read_llvm_lcov_config_file(config_file: Optional[Path] = None) -> Optional[Dict[str, str]]:
    """Read llvm_lcov configuration file"""
    if config_file is not None:
        return read_config(config_file)
    HOME = os.environ.get("HOME")
    if HOME is not None:
        rc_file = Path(HOME)/".llvm_lcovrc"
        if os.access(rc_file, os.R_OK):
            return read_config(rc_file)
    rc_file = Path("/etc/llvm_lcovrc")
    if os.access(rc_file, os.R_OK):
        return read_config(rc_file)
    return None


def read_config(filename: Path) -> Optional[Dict[str, str]]:
    """Read configuration file FILENAME and return a dict containing
    all valid key=value pairs found.
    """
    try:
        file = filename.open("rt")
    except OSError:
        warn(f"WARNING: cannot read configuration file {filename}")
        return None

    result = {}
    with file:
        for idx, line in enumerate(file):
            line = line.rstrip("\n")
            # Skip comments
            line = re.sub(r"#.*", "", line)
            # Remove leading and trailing blanks
            line = line.strip()
            if not line:
                continue
            key, sep, val = line.partition("=")
            key, val = key.strip(), val.strip()
            if sep and key and val:
                result[key] = val
            else:
                warn(f"WARNING: malformed statement in line {idx + 1} "
                     f"of configuration file {filename}")

    return result


def apply_config(config, opt_rc: Optional[Dict[str, str]]) -> List[str]:
    """Overlay the settings of OPT_RC onto the CONFIG module.

    Only keywords already known to CONFIG (its __all__) are applied,
    unknown ones are reported. Return the list of applied keywords.
    """
    applied = []
    if not opt_rc: return applied

    for key, val in opt_rc.items():
        if key in config.__all__:
            setattr(config, key, val)
            applied.append(key)
        else:
            warn(f"WARNING: unknown configuration keyword: {key}")
    return applied


def parse_rc_options(rc_options: Optional[List[str]]) -> Dict[str, str]:
    """Parse --rc KEY=VALUE command line settings."""
    result = {}
    for item in rc_options or ():
        key, sep, val = item.partition("=")
        if not sep:
            die(f"ERROR: malformed --rc option: {item}")
        result[key] = val
    return strip_spaces_in_options(result)


def strip_spaces_in_options(opt_dict: Dict[str, str]):
    """Remove spaces around options"""
    return {key.strip(): value.strip() for key, value in opt_dict.items()}


def set_quiet(flag: bool):
    global quiet
    quiet = flag


def info(message, *, end="\n"):
    """Write MESSAGE to stderr unless quiet mode is set."""
    if quiet: return
    print(message, end=end, file=sys.stderr)


def warn(message, *, end="\n"):
    """ """
    import warnings
    warnings.warn(message + end)


def die(message, *, end="\n"):
    """ """
    sys.exit(message + end)
