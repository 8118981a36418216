#!/usr/bin/env python3

"""
Test runner for the elastic-query package.

Usage:
    python run_tests.py [test_type] [options]

Test types:
    unit        - Run unit tests only
    integration - Run MCP tool tests only
    all         - Run all tests (default)

Examples:
    python run_tests.py unit
    python run_tests.py integration -v
    python run_tests.py all --no-cov
"""

import sys
import subprocess
from pathlib import Path


def run_command(cmd, description):
    """Run a command and report how it went."""
    print(f"\n🔍 {description}")
    print(f"Running: {' '.join(cmd)}")

    result = subprocess.run(cmd, capture_output=True, text=True)

    if result.returncode == 0:
        print(f"✅ {description} completed successfully")
        if result.stdout:
            print(result.stdout)
    else:
        print(f"❌ {description} failed")
        if result.stderr:
            print("STDERR:", result.stderr)
        if result.stdout:
            print("STDOUT:", result.stdout)
        return False

    return True


def install_test_dependencies():
    """Install the package with its test extra."""
    root = Path(__file__).parent
    cmd = [sys.executable, "-m", "pip", "install", "-e", f"{root}[test]"]
    return run_command(cmd, "Installing test dependencies")


def run_tests(test_type="all", extra_args=None):
    """Run tests based on type."""
    if extra_args is None:
        extra_args = []

    cmd = [sys.executable, "-m", "pytest"]

    # Coverage by default (unless --no-cov specified)
    if "--no-cov" in extra_args:
        extra_args = [arg for arg in extra_args if arg != "--no-cov"]
    else:
        cmd.extend(["--cov=elastic_query", "--cov-report=term-missing"])

    tests_dir = Path(__file__).parent / "tests"

    if test_type == "unit":
        cmd.append(str(tests_dir / "unit"))
    elif test_type == "integration":
        cmd.append(str(tests_dir / "integration"))
    elif test_type == "all":
        cmd.append(str(tests_dir))
    else:
        print(f"❌ Unknown test type: {test_type}")
        return False

    cmd.extend(extra_args)

    return run_command(cmd, f"Running {test_type} tests")


def main():
    """Main test runner function."""
    args = sys.argv[1:]
    test_type = "all"
    extra_args = []

    if args:
        if args[0] in ["unit", "integration", "all"]:
            test_type = args[0]
            extra_args = args[1:]
        else:
            extra_args = args

    print("🧪 elastic-query Test Runner")
    print(f"Test Type: {test_type}")
    print(f"Extra Args: {extra_args}")

    if not install_test_dependencies():
        return 1

    if not run_tests(test_type, extra_args):
        return 1

    print(f"\n🎉 All {test_type} tests completed successfully!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
