# Copyright (c) 2020-2022, Adam Karpierz
# Licensed under the BSD license
# https://opensource.org/licenses/BSD-3-Clause

from typing import Union, List, Tuple
import os
from pathlib import Path

PathLike = Union[str, os.PathLike]

Command = List[str]

# lcov text exactly as emitted by llvm-cov
LcovReport = bytes

#             (binary, error message)
ExportFailure = Tuple[Path, str]
