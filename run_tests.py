#!/usr/bin/env python3
"""
Convenience script to run the delivery client test suite.
Run this from the project root directory.

    python run_tests.py          # unit tests
    python run_tests.py --live   # also the live smoke tests (needs .env.local credentials)
"""

import subprocess
import sys
from pathlib import Path


def run_test_suite(include_live: bool = False) -> bool:
    """Run pytest over the tests directory."""
    project_root = Path(__file__).parent
    tests_path = project_root / "tests"

    if not tests_path.exists():
        print(f"❌ Tests directory not found at: {tests_path}")
        return False

    command = [sys.executable, "-m", "pytest", str(tests_path)]
    if not include_live:
        command += ["--ignore", str(tests_path / "live_testing")]

    print("🚀 Running delivery client tests...")
    print(f"📍 Tests: {tests_path}")
    print("="*60)

    try:
        subprocess.run(command, cwd=project_root, check=True)
        print("="*60)
        print("✅ Test suite passed!")
        return True
    except subprocess.CalledProcessError as e:
        print("="*60)
        print(f"❌ Test suite failed with exit code: {e.returncode}")
        return False


def main():
    """Main entry point."""
    include_live = "--live" in sys.argv[1:]
    print("🔬 Delivery Client Test Runner")
    print("="*60)

    success = run_test_suite(include_live)

    if not success and include_live:
        print("\n🔧 Check your environment variables and dependencies")
        print("📋 Ensure .env.local contains CONTENT_DELIVERY_SPACE and CONTENT_DELIVERY_ACCESS_TOKEN")

    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
