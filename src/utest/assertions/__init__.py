"""Assertion system for test bodies."""

from utest.assertions.base import AssertionAborted, AssertionTracker, Diagnostic

__all__ = ["AssertionAborted", "AssertionTracker", "Diagnostic"]
