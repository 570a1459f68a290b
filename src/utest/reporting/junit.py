from __future__ import annotations

from pathlib import Path
from typing import Sequence, TYPE_CHECKING

from junitparser import Error, Failure, JUnitXml, Skipped, TestCase, TestSuite

if TYPE_CHECKING:
    from utest.runner import ContextResult


def _step_case(context_name: str, step: str, message: str) -> TestCase:
    case = TestCase(f"<{step}>")
    case.classname = context_name
    case.result = [Error(message)]
    return case


def write_junit(path: Path, results: Sequence[ContextResult]) -> Path:
    """Write junit.xml for a finished run, return path."""
    xml = JUnitXml("utest")

    for context_result in results:
        suite = TestSuite(context_result.name)

        if not context_result.found:
            suite.add_testcase(
                _step_case(context_result.name, "context", "context not found")
            )
            xml.add_testsuite(suite)
            continue

        for step in ("init", "cleanup"):
            diagnostics = context_result.step_diagnostics.get(step)
            if diagnostics is not None:
                message = "; ".join(d.render() for d in diagnostics) or f"{step} failed"
                suite.add_testcase(_step_case(context_result.name, step, message))

        for test_result in context_result.tests:
            case = TestCase(test_result.name)
            case.classname = context_result.name
            if not test_result.passed:
                rendered = [d.render() for d in test_result.diagnostics]
                failure = Failure(rendered[0] if rendered else "test returned false")
                failure.text = "\n".join(rendered)
                case.result = [failure]
            suite.add_testcase(case)

        for name in context_result.skipped:
            case = TestCase(name)
            case.classname = context_result.name
            case.result = [Skipped("not run: context aborted")]
            suite.add_testcase(case)

        xml.add_testsuite(suite)

    path.parent.mkdir(parents=True, exist_ok=True)
    xml.write(str(path), pretty=True)
    return path
