# Copyright (c) 2020-2022, Adam Karpierz
# Licensed under the BSD license
# https://opensource.org/licenses/BSD-3-Clause


def make_config(cfg_name, env_prefix):
    import sys
    import os
    from pathlib import Path
    from runpy import run_path
    module = sys.modules[__name__]
    mglobals = module.__dict__
    mglobals.pop("make_config", None)
    cfg_path = Path(module.__file__).parent/cfg_name
    cfg_dict = ({key: val for key, val in run_path(str(cfg_path)).items()
                 if not key.startswith("__")} if cfg_path.is_file() else {})
    # Environment overrides, e.g. LLVM_LCOV_LLVM_COV_TOOL=/usr/bin/llvm-cov-15
    for key in cfg_dict:
        env_val = os.environ.get(env_prefix + key.upper())
        if env_val:
            cfg_dict[key] = env_val
    mglobals.update(cfg_dict)
    mglobals.pop("__cached__", None)
    module.__all__ = tuple(cfg_dict.keys())


make_config("llvm_lcov.cfg", "LLVM_LCOV_")
