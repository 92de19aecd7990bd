"""
Build script for outputsafe with optional mypyc compilation.

Usage:
    # Pure Python build (default)
    python -m build

    # Compiled with mypyc
    OUTPUTSAFE_USE_MYPYC=1 pip install .
"""

import os
import sys
from pathlib import Path

from setuptools import find_packages, setup

# Determine if we should use mypyc
USE_MYPYC = os.environ.get("OUTPUTSAFE_USE_MYPYC", "0") == "1"

# Hot paths: the tag stripper loop and the CSS and name filters.
# Note: escaping.py is excluded because mypyc cannot compile the dict
# subclass str.translate() relies on.
MYPYC_MODULES = [
    "src/outputsafe/stripper.py",
    "src/outputsafe/filters.py",
]


def build_with_mypyc() -> list:
    """Build extension modules using mypyc."""
    try:
        from mypyc.build import mypycify
    except ImportError:
        print(
            "ERROR: mypyc is not installed. Install with: pip install mypy",
            file=sys.stderr,
        )
        print("Or install with mypyc support: pip install outputsafe[mypyc]", file=sys.stderr)
        sys.exit(1)

    for module_path in MYPYC_MODULES:
        if not Path(module_path).exists():
            print(f"ERROR: Module not found: {module_path}", file=sys.stderr)
            sys.exit(1)

    print("=" * 70)
    print("Building outputsafe with mypyc compilation")
    print("=" * 70)
    print(f"Compiling {len(MYPYC_MODULES)} modules:")
    for module in MYPYC_MODULES:
        print(f"  - {module}")
    print("=" * 70)

    opt_level = os.environ.get("MYPYC_OPT_LEVEL", "3")
    debug_level = os.environ.get("MYPYC_DEBUG_LEVEL", "0")

    return mypycify(
        MYPYC_MODULES,
        opt_level=opt_level,
        debug_level=debug_level,
        verbose=True,
        separate=False,
        multi_file=False,
    )


if __name__ == "__main__":
    ext_modules = []

    if USE_MYPYC:
        ext_modules = build_with_mypyc()
    else:
        print("Building outputsafe in pure Python mode (no mypyc compilation)")
        print("To enable mypyc: OUTPUTSAFE_USE_MYPYC=1 pip install .")

    setup(
        name="outputsafe",
        version="0.1.0",
        description="Contextual output escaping and whitelist HTML tag stripping",
        python_requires=">=3.10",
        package_dir={"": "src"},
        packages=find_packages("src"),
        install_requires=[],
        extras_require={
            "test": ["pytest"],
            "mypyc": ["mypy"],
        },
        ext_modules=ext_modules,
    )
