"""Lightweight in-source unit tests: register contexts, run them, get 0 or 1."""

from utest.assertions.base import AssertionTracker
from utest.registry import (
    Context,
    ContextRegistry,
    TestCase,
    add_test,
    case,
    cleanup,
    get_registry,
    init,
    set_cleanup,
    set_init,
)
from utest.reporting.console import ConsoleReporter
from utest.runner import ContextResult, Runner, TestResult, run_all, run_named

__all__ = [
    "AssertionTracker",
    "ConsoleReporter",
    "Context",
    "ContextRegistry",
    "ContextResult",
    "Runner",
    "TestCase",
    "TestResult",
    "add_test",
    "case",
    "cleanup",
    "get_registry",
    "init",
    "run_all",
    "run_named",
    "set_cleanup",
    "set_init",
]
