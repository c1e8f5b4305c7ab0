#!/usr/bin/env python3
"""
Test runner script for medreport.
Runs every test suite with proper configuration and reporting.
"""

import os
import subprocess
import sys
from pathlib import Path


def run_command(cmd, description):
    """Run a command and return success status."""
    print(f"\n{'='*60}")
    print(f"Running: {description}")
    print(f"Command: {' '.join(cmd)}")
    print(f"{'='*60}")

    result = subprocess.run(cmd, capture_output=False)
    return result.returncode == 0


def main():
    """Main test runner."""
    print(" medreport Test Runner")
    print("=" * 60)

    project_root = Path(__file__).parent
    os.chdir(project_root)

    suites = [
        ("tests/test_retry_policy.py", "Retry Policy Tests"),
        ("tests/test_payload_extractor.py", "Payload Extractor Tests"),
        ("tests/test_generation_client.py", "Generation Client Tests"),
        ("tests/test_lifecycle.py", "Request Lifecycle Tests"),
        ("tests/test_report_renderer.py", "Report Renderer Tests"),
        ("tests/test_reports_router.py", "Reports API Tests"),
        ("tests/test_config.py", "Configuration Tests"),
    ]
    test_commands = [
        {
            "cmd": [sys.executable, "-m", "pytest", path, "-v", "--tb=short"],
            "description": description,
        }
        for path, description in suites
    ]

    success_count = 0
    total_count = len(test_commands)

    for test_cmd in test_commands:
        if run_command(test_cmd["cmd"], test_cmd["description"]):
            success_count += 1
            print(f"[OK] {test_cmd['description']} - PASSED")
        else:
            print(f"[ERROR] {test_cmd['description']} - FAILED")

    print(f"\n{'='*60}")
    print(f"Test Summary: {success_count}/{total_count} test suites passed")
    print(f"{'='*60}")

    if success_count == total_count:
        print(" All tests passed!")
        return 0
    print(" Some tests failed!")
    return 1


if __name__ == "__main__":
    sys.exit(main())
