#!/usr/bin/env python3
"""
Media cache test runner

Usage:
    python tests/run_tests.py              # run all tests
    python tests/run_tests.py -v           # verbose output
    python tests/run_tests.py -k cache     # only tests matching "cache"

Quick start:
    pip install -e ".[test]"
    cd backend
    python tests/run_tests.py
"""

import subprocess
import sys
import os
from pathlib import Path

# Run from the backend directory
backend_dir = Path(__file__).parent.parent
os.chdir(backend_dir)


def main():
    """Run the test suite."""
    cmd = [sys.executable, "-m", "pytest", "tests/"]

    args = sys.argv[1:]

    if not any(arg.startswith("-v") for arg in args):
        cmd.append("-v")

    cmd.extend(args)

    print(f"\n{'='*60}")
    print("Media cache tests")
    print(f"{'='*60}")
    print(f"Command: {' '.join(cmd)}")
    print(f"{'='*60}\n")

    result = subprocess.run(cmd)
    sys.exit(result.returncode)


if __name__ == "__main__":
    main()
