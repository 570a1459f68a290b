"""Per-test assertion tracking."""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from utest.assertions.comparisons import render_comparison, resolve_operator


class AssertionAborted(BaseException):
    """Raised by a failing assertion to end the current test body.

    Derives from BaseException so that `except Exception` blocks in a test
    body, or in code it calls, cannot swallow it. Only the test case wrapper
    catches it, so a failure never leaves the test that produced it.
    """

    def __init__(self, diagnostic: Diagnostic):
        super().__init__(diagnostic.render())
        self.diagnostic = diagnostic


@dataclass(frozen=True)
class Diagnostic:
    """Details of a failed assertion.

    Attributes:
        index: 1-based position of the assertion within the test execution.
        location: "file:line" of the assertion call site.
        description: Textual rendering of the failing expression.
    """

    index: int
    location: str
    description: str

    def render(self) -> str:
        return f"#{self.index} @{self.location}: {self.description} is false"


def _caller_location() -> str:
    # First frame outside this module is the assertion call site.
    frame = inspect.currentframe()
    try:
        while frame is not None and frame.f_globals.get("__name__") == __name__:
            frame = frame.f_back
        if frame is None:
            return "<unknown>"
        return f"{Path(frame.f_code.co_filename).name}:{frame.f_lineno}"
    finally:
        del frame


class AssertionTracker:
    """Assertion count and success flag for one test execution.

    A tracker starts successful and can only move to failed. Every
    evaluated assertion, passing or not, bumps the count.
    """

    def __init__(self) -> None:
        self._assert_count = 0
        self._success = True
        self.diagnostics: list[Diagnostic] = []

    @property
    def assert_count(self) -> int:
        return self._assert_count

    def increment_assert_count(self) -> None:
        self._assert_count += 1

    def fail(self) -> None:
        self._success = False

    def succeeded(self) -> bool:
        return self._success

    def failed(self) -> bool:
        return not self._success

    def record_failure(self, description: str, location: str | None = None) -> Diagnostic:
        """Mark the tracker failed and keep a diagnostic without aborting."""
        self.fail()
        diagnostic = Diagnostic(
            index=self._assert_count,
            location=location or _caller_location(),
            description=description,
        )
        self.diagnostics.append(diagnostic)
        return diagnostic

    def ensure(self, condition: bool | Callable[[], bool], description: str) -> None:
        """Evaluate one assertion.

        On a false condition the tracker fails, a diagnostic is recorded and
        the rest of the test body is skipped by raising AssertionAborted.
        """
        self.increment_assert_count()
        value = condition() if callable(condition) else condition
        if not value:
            raise AssertionAborted(self.record_failure(description))

    def compare(self, left: Any, op: str, right: Any) -> None:
        """Assert ``left <op> right`` for one of the supported operators."""
        fn = resolve_operator(op)
        self.ensure(lambda: fn(left, right), render_comparison(left, op, right))

    def equal(self, left: Any, right: Any) -> None:
        self.compare(left, "==", right)

    def not_equal(self, left: Any, right: Any) -> None:
        self.compare(left, "!=", right)

    def less(self, left: Any, right: Any) -> None:
        self.compare(left, "<", right)

    def less_equal(self, left: Any, right: Any) -> None:
        self.compare(left, "<=", right)

    def greater(self, left: Any, right: Any) -> None:
        self.compare(left, ">", right)

    def greater_equal(self, left: Any, right: Any) -> None:
        self.compare(left, ">=", right)

    def contains(self, container: Any, item: Any) -> None:
        self.compare(item, "in", container)

    def is_true(self, value: Any, description: str | None = None) -> None:
        self.ensure(bool(value), description or f"<<{value!r}>>")

    def is_false(self, value: Any, description: str | None = None) -> None:
        self.ensure(not value, description or f"<<not {value!r}>>")

    def raises(
        self, exc_type: type[BaseException], fn: Callable[..., Any], *args: Any, **kwargs: Any
    ) -> None:
        """Assert that calling ``fn(*args, **kwargs)`` raises ``exc_type``."""
        name = getattr(fn, "__name__", repr(fn))
        try:
            fn(*args, **kwargs)
        except exc_type:
            raised = True
        else:
            raised = False
        self.ensure(raised, f"<<{name}() raises {exc_type.__name__}>>")
