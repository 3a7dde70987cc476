#!/usr/bin/env python
"""
Coverage runner for the stellarpdf project.

Runs each test suite in its own pytest process and appends the coverage
data, so numba-compiled modules are instrumented consistently.

Usage:
    python run_coverage.py              # Run all test suites
    python run_coverage.py --utils      # Only utils tests
    python run_coverage.py --core       # Only core module tests
    python run_coverage.py --analysis   # Only analysis module tests
    python run_coverage.py --data       # Only data module tests
    python run_coverage.py --priors     # Only priors module tests
    python run_coverage.py --dust       # Only dust module tests
    python run_coverage.py --report-only # Generate reports from existing data
"""

import argparse
import os
import subprocess
import sys
import time
from pathlib import Path

# Suite name -> (test paths, description)
SUITES = {
    "utils": (["tests/test_utils/"], "Utils Tests"),
    "core": (["tests/test_core/", "tests/test_package.py"], "Core Tests"),
    "analysis": (["tests/test_analysis/"], "Analysis Tests"),
    "data": (["tests/test_data/"], "Data Tests"),
    "priors": (["tests/test_priors/"], "Priors Tests"),
    "dust": (["tests/test_dust/"], "Dust Tests"),
}


def run_command(cmd, description, timeout=300):
    """Run a command and return whether it succeeded, with a short summary."""
    print(f"\n{'='*60}")
    print(f"RUNNING: {description}")
    print(f"Command: {' '.join(cmd)}")
    print(f"{'='*60}")

    start_time = time.time()

    try:
        result = subprocess.run(
            cmd,
            text=True,
            timeout=timeout,
            cwd=Path(__file__).parent,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
    except subprocess.TimeoutExpired:
        elapsed_time = time.time() - start_time
        print(f"TIMEOUT after {elapsed_time:.1f}s (limit: {timeout}s)")
        return False

    elapsed_time = time.time() - start_time
    lines = result.stdout.split("\n")

    if result.returncode == 0:
        print(f"SUCCESS (took {elapsed_time:.2f}s)")
        for line in lines:
            if "passed" in line and "==" in line:
                print(f"   {line.strip()}")
            if "TOTAL" in line and "%" in line:
                print(f"   Coverage: {line}")
        if elapsed_time > 60:
            print(f"   SLOW SUITE: {description} took {elapsed_time:.1f}s")
        return True

    print(f"FAILED (took {elapsed_time:.2f}s)")
    if result.stdout:
        print("\nSTDOUT (last 800 chars):")
        print(result.stdout[-800:])
    if result.stderr:
        print("\nSTDERR (last 500 chars):")
        print(result.stderr[-500:])

    return False


def pytest_command(paths):
    return (
        [sys.executable, "-m", "pytest"]
        + paths
        + [
            "--cov=stellarpdf",
            "--cov-append",
            "--cov-report=term-missing",
            "-v",
        ]
    )


def main():
    """Run coverage analysis one suite at a time."""
    parser = argparse.ArgumentParser(
        description="Run stellarpdf coverage analysis one suite at a time"
    )
    for name, (_, description) in SUITES.items():
        parser.add_argument(
            f"--{name}", action="store_true", help=f"Only run {description.lower()}"
        )
    parser.add_argument(
        "--report-only",
        action="store_true",
        help="Only generate reports from existing coverage data",
    )
    args = parser.parse_args()

    print("STELLARPDF COVERAGE ANALYSIS")
    print("=" * 60)

    if args.report_only:
        run_command(
            [sys.executable, "-m", "coverage", "report", "--show-missing"],
            "Coverage Report",
            30,
        )
        run_command([sys.executable, "-m", "coverage", "html"], "HTML Report", 30)
        return True

    # Remove existing coverage data for a clean slate
    for f in [".coverage", "coverage.xml"]:
        if os.path.exists(f):
            os.remove(f)
            print(f"Removed existing {f}")

    selected = [name for name in SUITES if getattr(args, name)]
    if not selected:
        selected = list(SUITES)

    success_count = 0
    for name in selected:
        paths, description = SUITES[name]
        if run_command(pytest_command(paths), description):
            success_count += 1

    print(f"\n{'='*60}")
    print(f"SUMMARY: {success_count}/{len(selected)} test suites passed")
    print(f"{'='*60}")

    if success_count > 0:
        run_command(
            [sys.executable, "-m", "coverage", "report", "--show-missing"],
            "Final Coverage Report",
            30,
        )

    return success_count == len(selected)


if __name__ == "__main__":
    sys.exit(0 if main() else 1)
