"""
Run the ledger test suite.

Usage:
  python run_tests.py
  python run_tests.py -k settlement
"""

import subprocess
import sys

if __name__ == "__main__":
    result = subprocess.run(
        [sys.executable, "-m", "pytest", "--tb=short", "tests/", *sys.argv[1:]],
        cwd=".",
    )
    sys.exit(result.returncode)
