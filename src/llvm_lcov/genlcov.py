# Copyright (c) 2020-2022, Adam Karpierz
# Licensed under the BSD license
# https://opensource.org/licenses/BSD-3-Clause

"""
genlcov

  This script merges the .profraw files written by programs built with
  LLVM source-based coverage instrumentation and creates lcov coverage
  data for the instrumented binaries. Call it with --help to get
  information on usage and available options.

"""

from typing import List, Optional
import argparse
import sys
import tempfile
import warnings
from pathlib import Path

from . import __config__ as config
from . import util
from .types   import PathLike, LcovReport
from .profraw import profraws_to_lcov
from .util    import (unique, sort_unique_paths, set_quiet, info, warn,
                      read_llvm_lcov_config_file, apply_config,
                      parse_rc_options)

# Constants
tool_name    = Path(__file__).stem
lcov_version = f"{config.tool_name} version {config.lcov_version}"


def collect_profraws(entries: List[str]) -> List[Path]:
    """Return the profraw files named by ENTRIES.

    A directory entry stands for all of its *.profraw files, in natural
    order. Duplicates are dropped.
    """
    profraw_paths = []
    for entry in entries:
        path = Path(entry)
        if path.is_dir():
            found = sort_unique_paths(path.glob("*.profraw"))
            if found:
                info(f"Found {len(found)} .profraw files in {path}")
            else:
                warn(f"WARNING: no .profraw files found in {path} - skipping!")
            profraw_paths.extend(found)
        else:
            profraw_paths.append(path)
    return unique(profraw_paths)


def write_reports(reports: List[LcovReport], output_filename: Optional[Path]):
    """Write the concatenated REPORTS to OUTPUT_FILENAME or to stdout."""
    if output_filename is None or str(output_filename) == "-":
        out = sys.stdout.buffer
        for report in reports:
            out.write(report)
        out.flush()
    else:
        try:
            with output_filename.open("wb") as file:
                for report in reports:
                    file.write(report)
        except OSError as exc:
            raise OSError(f"ERROR: cannot write to {output_filename}: {exc}") from exc


def gen_lcov(profraw_paths: List[Path], binary_path: PathLike,
             working_dir: Optional[Path], output_filename: Optional[Path]) -> int:
    """Merge PROFRAW_PATHS, export the lcov data of BINARY_PATH and write
    it to OUTPUT_FILENAME.

    Without WORKING_DIR the merged profile lives in a temporary directory
    removed afterwards. Return the number of reports written.
    """
    if working_dir is None:
        with tempfile.TemporaryDirectory(prefix=f"{tool_name}-") as tmp_dir:
            return gen_lcov(profraw_paths, binary_path, Path(tmp_dir),
                            output_filename)

    info(f"Merging {len(profraw_paths)} .profraw files into {working_dir}")
    reports = profraws_to_lcov(profraw_paths, binary_path, working_dir)
    write_reports(reports, output_filename)
    info(f"Finished lcov creation: {len(reports)} reports for {binary_path}")
    return len(reports)


def main(argv=sys.argv[1:]):
    """\
    Merge LLVM .profraw files and create lcov coverage data for the
    instrumented binaries.
    """
    global tool_name, lcov_version

    def warn_handler(message, category, filename, lineno, file=None, line=None):
        print(f"{tool_name}: {message}", end="", file=sys.stderr)

    # Parse command line options
    parser = argparse.ArgumentParser(prog=tool_name, description=main.__doc__,
                                     add_help=False)
    parser.add_argument("profraws", type=str, nargs="+",
        metavar="PROFRAW", help="PROFRAW file or directory of PROFRAW files")
    parser.add_argument("-h", "-?", "--help", action="help",
        help="Print this help, then exit")
    parser.add_argument("-v", "--version", action="version",
        version=f"%(prog)s: {lcov_version}",
        help="Print version number, then exit")
    parser.add_argument("-q", "--quiet", action="store_true", default=False,
        help="Do not print progress messages")
    parser.add_argument("-b", "--binary-path", type=str, required=True,
        metavar="PATH", help="Instrumented binary or directory of binaries")
    parser.add_argument("-w", "--working-dir", type=str,
        metavar="DIR", help="Write the merged profile to DIR")
    parser.add_argument("-o", "--output-filename", type=str,
        metavar="FILENAME", help="Write lcov data to FILENAME")
    parser.add_argument("--llvm-profdata", type=str,
        metavar="TOOL", help="Use TOOL as llvm-profdata")
    parser.add_argument("--llvm-cov", type=str,
        metavar="TOOL", help="Use TOOL as llvm-cov")
    parser.add_argument("--config-file", type=str,
        metavar="FILENAME", help="Specify configuration file location")
    parser.add_argument("--rc", type=str, action="append", default=[],
        metavar="SETTING=VALUE", help="Override configuration file setting")

    args = parser.parse_args(argv)

    # Settings of this run are undone on return
    saved_config = {key: getattr(config, key) for key in config.__all__}
    saved_quiet  = util.quiet

    with warnings.catch_warnings():
        warnings.simplefilter("always")
        warnings.showwarning = warn_handler
        try:
            set_quiet(args.quiet)

            # Read configuration file if available
            config_file = Path(args.config_file) if args.config_file else None
            apply_config(config, read_llvm_lcov_config_file(config_file))
            apply_config(config, parse_rc_options(args.rc))
            if args.llvm_profdata:
                config.llvm_profdata_tool = args.llvm_profdata
            if args.llvm_cov:
                config.llvm_cov_tool = args.llvm_cov

            gen_lcov(collect_profraws(args.profraws), Path(args.binary_path),
                     Path(args.working_dir) if args.working_dir else None,
                     Path(args.output_filename) if args.output_filename else None)
        except BaseException as exc:
            return f"{tool_name}: {exc}"
        finally:
            for key, val in saved_config.items():
                setattr(config, key, val)
            set_quiet(saved_quiet)


if __name__.rpartition(".")[-1] == "__main__":
    sys.exit(main())
