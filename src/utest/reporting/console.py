"""Line-oriented console transcript of a run."""

from __future__ import annotations

import sys
from typing import TextIO, TYPE_CHECKING

if TYPE_CHECKING:
    from utest.assertions.base import Diagnostic
    from utest.registry import Context, TestCase
    from utest.runner import ContextResult, TestResult

OK_MARKER = "ok"
FAIL_MARKER = "fail"
ABORT_MARKER = "[abort]"


class ConsoleReporter:
    """Write the human-readable transcript in execution order.

    Test names are padded with ``fill`` up to the ``display_width`` of their
    context so the ok/fail markers line up.
    """

    def __init__(self, stream: TextIO | None = None, fill: str = "."):
        if len(fill) != 1:
            raise ValueError(f"fill must be a single character, got {fill!r}")
        self.stream = stream if stream is not None else sys.stdout
        self.fill = fill

    def _write(self, text: str) -> None:
        self.stream.write(text)
        self.stream.flush()

    def _write_diagnostics(self, diagnostics: list[Diagnostic]) -> None:
        for diagnostic in diagnostics:
            self._write(f"    {diagnostic.render()}\n")

    def context_started(self, context: Context) -> None:
        self._write(f"{context.name}\n")

    def test_started(self, context: Context, case: TestCase) -> None:
        self._write(f"  {case.display_name} ".ljust(context.display_width + 3, self.fill))

    def test_finished(self, result: TestResult) -> None:
        if result.passed:
            self._write(f"{OK_MARKER}\n")
            return
        self._write(f"{FAIL_MARKER}\n")
        self._write_diagnostics(result.diagnostics)
        if result.must_pass:
            self._write(f"    {ABORT_MARKER}\n")

    def step_failed(self, step: str, diagnostics: list[Diagnostic]) -> None:
        self._write(f"  {step} {FAIL_MARKER}\n")
        self._write_diagnostics(diagnostics)

    def context_finished(self, result: ContextResult) -> None:
        self._write(f"[{OK_MARKER if result.passed else FAIL_MARKER}]\n")

    def context_not_found(self, name: str) -> None:
        self._write(f"{name}...not found\n")
