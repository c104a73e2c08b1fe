"""
Build script for prettyhtml.

    pip install .                          # pure Python
    PRETTYHTML_USE_MYPYC=1 pip install .   # tokenizer and formatter compiled with mypyc
"""

import os
import sys

from setuptools import setup

USE_MYPYC = os.environ.get("PRETTYHTML_USE_MYPYC", "0") == "1"

MYPYC_MODULES = [
    "src/prettyhtml/tokenizer.py",
    "src/prettyhtml/formatter.py",
]


def build_with_mypyc() -> list:
    try:
        from mypyc.build import mypycify
    except ImportError:
        print("ERROR: mypyc is not installed. Install with: pip install prettyhtml[mypyc]", file=sys.stderr)
        sys.exit(1)

    return mypycify(
        MYPYC_MODULES,
        opt_level=os.environ.get("MYPYC_OPT_LEVEL", "3"),
        separate=False,
        multi_file=False,
    )


if __name__ == "__main__":
    setup(ext_modules=build_with_mypyc() if USE_MYPYC else [])
