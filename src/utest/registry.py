"""Process-wide registry of test contexts.

Registration happens at import time (decorators) or through explicit
``add_test`` calls made before the runner starts. Tests registered from one
module keep their source order; the order in which separate modules register
is whatever order they happen to be imported in and is not normalized here.
"""

from __future__ import annotations

import logging
import re
import traceback
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterator

from utest.assertions.base import AssertionAborted, AssertionTracker

logger = logging.getLogger("utest.registry")

# Added to the longest display name of a context to align the result column.
DISPLAY_PADDING = 3

# Module attribute that overrides __name__ as the default context of the
# module's registrations. Set for files loaded by path.
CONTEXT_ATTR = "__utest_context__"

Predicate = Callable[[], Any]

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def display_name(name: str) -> str:
    """Human-readable form of a test identifier.

    >>> display_name("sub_test_fails")
    'sub test fails'
    >>> display_name("AddTestPasses")
    'Add Test Passes'
    """
    words = [w for w in name.split("_") if w]
    return " ".join(_CAMEL_BOUNDARY.sub(" ", w) for w in words)


def _exception_location(exc: BaseException) -> str:
    frames = traceback.extract_tb(exc.__traceback__)
    if not frames:
        return "<unknown>"
    last = frames[-1]
    return f"{Path(last.filename).name}:{last.lineno}"


def describe_exception(exc: BaseException) -> str:
    return f"<<raised {type(exc).__name__}: {exc}>>"


@dataclass(frozen=True)
class TestCase:
    """A named test body.

    ``body`` is a zero-argument predicate. When ``tracked`` is set the body
    instead takes the ``AssertionTracker`` of the current execution and
    fails through its assertions (or by returning ``False``).
    """

    __test__ = False

    name: str
    body: Callable[..., Any]
    must_pass: bool = False
    tracked: bool = False

    @property
    def display_name(self) -> str:
        return display_name(self.name)

    def execute(self) -> AssertionTracker:
        """Run the body once with a fresh tracker and return the tracker."""
        tracker = AssertionTracker()
        try:
            outcome = self.body(tracker) if self.tracked else self.body()
        except AssertionAborted:
            return tracker
        except Exception as e:
            tracker.record_failure(describe_exception(e), _exception_location(e))
            return tracker
        if self.tracked:
            if outcome is False:
                tracker.fail()
        elif not outcome:
            tracker.fail()
        return tracker


@dataclass
class Context:
    """A named, ordered group of test cases sharing an init/cleanup pair."""

    name: str
    init: Predicate | None = None
    cleanup: Predicate | None = None
    tests: list[TestCase] = field(default_factory=list)
    name_width: int = 0
    padding: int = DISPLAY_PADDING

    @property
    def display_width(self) -> int:
        return self.name_width + self.padding

    def add(self, case: TestCase) -> None:
        self.tests.append(case)
        self.name_width = max(self.name_width, len(case.display_name))


class ContextRegistry:
    """Contexts in first-registration order, with a last-found lookup cache.

    ``last_found`` only speeds up runs of lookups for the same name. It holds
    the last resolved context, or ``None`` after a miss, so repeated misses
    always rescan.
    """

    def __init__(self, padding: int = DISPLAY_PADDING) -> None:
        self.contexts: list[Context] = []
        self.last_found: Context | None = None
        self.padding = padding

    def __len__(self) -> int:
        return len(self.contexts)

    def __iter__(self) -> Iterator[Context]:
        return iter(self.contexts)

    def find_context(self, name: str) -> Context | None:
        if self.last_found is None or self.last_found.name != name:
            self.last_found = next(
                (c for c in self.contexts if c.name == name), None
            )
        return self.last_found

    def find_or_add_context(self, name: str) -> Context:
        context = self.find_context(name)
        if context is None:
            context = Context(name=name, padding=self.padding)
            self.contexts.append(context)
            self.last_found = context
            logger.debug(f"Created context '{name}'")
        return context

    def add_test(
        self,
        body: Callable[..., Any],
        name: str,
        context: str,
        must_pass: bool = False,
        tracked: bool = False,
    ) -> bool:
        """Append a test to ``context``, creating the context if needed.

        Always returns True so the call can be used as an initializer
        expression.
        """
        target = self.find_or_add_context(context)
        target.add(TestCase(name=name, body=body, must_pass=must_pass, tracked=tracked))
        logger.debug(
            f"Registered test '{name}' in context '{context}' (must_pass={must_pass})"
        )
        return True

    def set_init(self, context: str, fn: Predicate | None) -> None:
        self.find_or_add_context(context).init = fn

    def set_cleanup(self, context: str, fn: Predicate | None) -> None:
        self.find_or_add_context(context).cleanup = fn

    def set_padding(self, padding: int) -> None:
        """Change the alignment padding of existing and future contexts."""
        self.padding = padding
        for context in self.contexts:
            context.padding = padding


_registry: ContextRegistry | None = None


def get_registry() -> ContextRegistry:
    """Return the process-wide registry, creating it on first use."""
    global _registry
    if _registry is None:
        _registry = ContextRegistry()
    return _registry


def reset_registry() -> None:
    global _registry
    _registry = None


def _resolve(registry: ContextRegistry | None) -> ContextRegistry:
    return registry if registry is not None else get_registry()


def default_context(fn: Callable[..., Any]) -> str:
    """Context name for a decorated function registered without one."""
    return getattr(fn, "__globals__", {}).get(CONTEXT_ATTR, fn.__module__)


def add_test(
    body: Predicate,
    name: str,
    context: str,
    must_pass: bool = False,
    registry: ContextRegistry | None = None,
) -> bool:
    return _resolve(registry).add_test(body, name, context, must_pass)


def set_init(context: str, fn: Predicate | None, registry: ContextRegistry | None = None) -> None:
    _resolve(registry).set_init(context, fn)


def set_cleanup(
    context: str, fn: Predicate | None, registry: ContextRegistry | None = None
) -> None:
    _resolve(registry).set_cleanup(context, fn)


def case(
    name: str | None = None,
    context: str | None = None,
    must_pass: bool = False,
    registry: ContextRegistry | None = None,
) -> Callable[[Callable[[AssertionTracker], Any]], Callable[[AssertionTracker], Any]]:
    """Register the decorated function as a test at import time.

    The function receives the ``AssertionTracker`` of each execution. The
    context defaults to the defining module, or to the file stem for files
    loaded by path, so every test module forms its own context unless told
    otherwise.
    """

    def decorator(fn: Callable[[AssertionTracker], Any]) -> Callable[[AssertionTracker], Any]:
        _resolve(registry).add_test(
            fn,
            name or fn.__name__,
            context or default_context(fn),
            must_pass=must_pass,
            tracked=True,
        )
        return fn

    return decorator


def init(
    context: str | None = None, registry: ContextRegistry | None = None
) -> Callable[[Predicate], Predicate]:
    """Attach the decorated predicate as the init step of a context."""

    def decorator(fn: Predicate) -> Predicate:
        _resolve(registry).set_init(context or default_context(fn), fn)
        return fn

    return decorator


def cleanup(
    context: str | None = None, registry: ContextRegistry | None = None
) -> Callable[[Predicate], Predicate]:
    """Attach the decorated predicate as the cleanup step of a context."""

    def decorator(fn: Predicate) -> Predicate:
        _resolve(registry).set_cleanup(context or default_context(fn), fn)
        return fn

    return decorator
