"""
Shared test harness.

Each test module runs two ways:
  - pytest             (the `r` fixture hands every test a TestResult)
  - python test_x.py   (run_suite() prints PASS/SKIP/FAIL lines)
"""

import time

import pytest


class TestResult:
    __test__ = False

    def __init__(self, name):
        self.name = name
        self.passed = False
        self.skipped = False
        self.message = ""
        self.elapsed = 0.0

    def __repr__(self):
        status = "PASS" if self.passed else "SKIP" if self.skipped else "FAIL"
        return f"  [{status}] {self.name} ({self.elapsed:.1f}ms){': ' + self.message if self.message else ''}"


def run_test(name, func):
    """Run a single test, catching exceptions."""
    result = TestResult(name)
    start = time.time()
    try:
        func(result)
        result.passed = True
    except AssertionError as e:
        result.message = str(e) or "Assertion failed"
    except pytest.skip.Exception as e:
        result.skipped = True
        result.message = str(e)
    except Exception as e:
        result.message = f"{type(e).__name__}: {e}"
    result.elapsed = (time.time() - start) * 1000
    return result


def run_suite(title, tests):
    """Run (name, func) pairs, print a report, return a process exit code."""
    print("=" * 72)
    print(f"  {title}")
    print("=" * 72)
    print()

    results = []
    for name, func in tests:
        result = run_test(name, func)
        results.append(result)
        print(result)

    print()
    print("-" * 72)
    passed = sum(1 for r in results if r.passed)
    skipped = sum(1 for r in results if r.skipped)
    failed = len(results) - passed - skipped
    total_ms = sum(r.elapsed for r in results)
    print(f"  Results: {passed} passed, {skipped} skipped, {failed} failed, "
          f"{len(results)} total ({total_ms:.0f}ms)")

    if failed > 0:
        print()
        print("  FAILED TESTS:")
        for r in results:
            if not r.passed and not r.skipped:
                print(f"    • {r.name}: {r.message}")

    print("=" * 72)
    return 0 if failed == 0 else 1


@pytest.fixture
def r(request):
    return TestResult(request.node.name)
