from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from utest.assertions.base import Diagnostic
from utest.registry import Context, ContextRegistry, Predicate, TestCase, get_registry
from utest.reporting.console import ConsoleReporter


@dataclass
class TestResult:
    __test__ = False

    name: str
    passed: bool
    must_pass: bool = False
    assert_count: int = 0
    diagnostics: list[Diagnostic] = field(default_factory=list)


@dataclass
class ContextResult:
    """Outcome of one context, or of a requested name that was not found."""

    name: str
    found: bool = True
    init_passed: bool = True
    cleanup_passed: bool = True
    tests: list[TestResult] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    step_diagnostics: dict[str, list[Diagnostic]] = field(default_factory=dict)

    @property
    def tests_passed(self) -> bool:
        return all(t.passed for t in self.tests)

    @property
    def passed(self) -> bool:
        return (
            self.found
            and self.init_passed
            and self.tests_passed
            and self.cleanup_passed
        )


def exit_code(results: Sequence[ContextResult]) -> int:
    return 0 if all(r.passed for r in results) else 1


class Runner:
    """Executes registered contexts in order and reports as it goes.

    The registry is passed in explicitly; the process-wide one is used only
    when none is given.
    """

    def __init__(
        self,
        registry: ContextRegistry | None = None,
        reporter: ConsoleReporter | None = None,
        logger: logging.Logger | None = None,
    ):
        self.registry = registry if registry is not None else get_registry()
        self.reporter = reporter or ConsoleReporter()
        self.logger = logger or logging.getLogger("utest.runner")
        self.results: list[ContextResult] = []

    def run_all(self) -> int:
        """Run every context in registration order. Returns 0 or 1."""
        self.results = []
        self.logger.debug(f"Running all {len(self.registry)} context(s)")
        for context in self.registry:
            self.results.append(self.run_context(context))
        return self._finish()

    def run_named(self, names: Sequence[str], count: int | None = None) -> int:
        """Run the named contexts in the order given. Returns 0 or 1.

        A name with no matching context is reported and counts as a failure;
        the remaining names still run.
        """
        if count is not None:
            names = names[:count]
        self.results = []
        self.logger.debug(f"Running {len(names)} requested context(s)")
        for name in names:
            context = self.registry.find_context(name)
            if context is None:
                self.logger.warning(f"Context '{name}' not found")
                self.reporter.context_not_found(name)
                self.results.append(ContextResult(name=name, found=False))
                continue
            self.results.append(self.run_context(context))
        return self._finish()

    def run_context(self, context: Context) -> ContextResult:
        """Run init, the tests, then cleanup, which always runs."""
        result = ContextResult(name=context.name)
        self.reporter.context_started(context)

        if context.init is not None:
            result.init_passed = self._run_step(context, "init", context.init, result)

        if result.init_passed:
            self.run_tests(context, result)
        else:
            result.skipped = [case.name for case in context.tests]

        if context.cleanup is not None:
            result.cleanup_passed = self._run_step(
                context, "cleanup", context.cleanup, result
            )

        self.logger.debug(
            f"Context '{context.name}' {'passed' if result.passed else 'failed'}: "
            f"{sum(1 for t in result.tests if t.passed)}/{len(result.tests)} tests passed, "
            f"{len(result.skipped)} skipped"
        )
        self.reporter.context_finished(result)
        return result

    def run_tests(self, context: Context, result: ContextResult) -> bool:
        """Run the tests of ``context`` in order into ``result``.

        A failing must-pass test stops the remaining tests of this context.
        """
        for index, case in enumerate(context.tests):
            self.reporter.test_started(context, case)
            test_result = self._run_case(case)
            result.tests.append(test_result)
            self.reporter.test_finished(test_result)
            if not test_result.passed and case.must_pass:
                result.skipped = [c.name for c in context.tests[index + 1 :]]
                self.logger.info(
                    f"Must-pass test '{case.name}' failed, aborting context "
                    f"'{context.name}' ({len(result.skipped)} test(s) not run)"
                )
                break
        return result.tests_passed

    def _run_case(self, case: TestCase) -> TestResult:
        tracker = case.execute()
        if tracker.failed():
            self.logger.debug(f"Test '{case.name}' failed")
        return TestResult(
            name=case.name,
            passed=tracker.succeeded(),
            must_pass=case.must_pass,
            assert_count=tracker.assert_count,
            diagnostics=list(tracker.diagnostics),
        )

    def _run_step(
        self, context: Context, step: str, fn: Predicate, result: ContextResult
    ) -> bool:
        tracker = TestCase(name=step, body=fn).execute()
        if tracker.failed():
            self.logger.warning(f"{step} of context '{context.name}' failed")
            result.step_diagnostics[step] = list(tracker.diagnostics)
            self.reporter.step_failed(step, tracker.diagnostics)
        return tracker.succeeded()

    def _finish(self) -> int:
        code = exit_code(self.results)
        failed = [r.name for r in self.results if not r.passed]
        if failed:
            self.logger.debug(f"Run failed in context(s): {', '.join(failed)}")
        else:
            self.logger.debug("Run succeeded")
        return code


def run_all(
    registry: ContextRegistry | None = None, reporter: ConsoleReporter | None = None
) -> int:
    return Runner(registry=registry, reporter=reporter).run_all()


def run_named(
    names: Sequence[str],
    count: int | None = None,
    registry: ContextRegistry | None = None,
    reporter: ConsoleReporter | None = None,
) -> int:
    return Runner(registry=registry, reporter=reporter).run_named(names, count)
