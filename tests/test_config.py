"""Tests for config loading and validation."""

import textwrap
from pathlib import Path

import pytest
from pydantic import ValidationError

from utest.config import RunConfig, load_config


@pytest.fixture()
def tmp_yaml(tmp_path):
    """Helper that writes YAML content to a temp file and returns its path."""

    def _write(content: str) -> Path:
        p = tmp_path / "utest.yaml"
        p.write_text(textwrap.dedent(content))
        return p

    return _write


def test_load_minimal_config(tmp_yaml, tmp_path):
    path = tmp_yaml("""\
        modules:
          - tests_math
    """)
    cfg = load_config(path)
    assert cfg.modules == ["tests_math"]
    assert cfg.contexts == []
    assert cfg.junit is None
    assert cfg.fill == "."
    assert cfg.padding == 3
    assert cfg.debug_log == str((tmp_path / ".utest" / "debug.log").resolve())


def test_relative_paths_resolve_against_config_dir(tmp_yaml, tmp_path):
    path = tmp_yaml("""\
        modules:
          - ./checks/strings.py
          - /abs/other.py
          - pkg.tests
        junit: reports/utest.xml
    """)
    cfg = load_config(path)
    assert cfg.modules == [
        str((tmp_path / "checks" / "strings.py").resolve()),
        "/abs/other.py",
        "pkg.tests",
    ]
    assert cfg.junit == str((tmp_path / "reports" / "utest.xml").resolve())


def test_contexts_keep_given_order(tmp_yaml):
    path = tmp_yaml("""\
        modules: [tests_math]
        contexts: [Strings, Math]
    """)
    assert load_config(path).contexts == ["Strings", "Math"]


def test_environment_variables_expand(tmp_yaml, monkeypatch):
    monkeypatch.setenv("UTEST_REPORTS", "/var/reports")
    path = tmp_yaml("""\
        modules: [tests_math]
        junit: ${UTEST_REPORTS}/utest.xml
        debug_log: ${UTEST_LOGS:-/tmp/utest}/debug.log
    """)
    cfg = load_config(path)
    assert cfg.junit == "/var/reports/utest.xml"
    assert cfg.debug_log == "/tmp/utest/debug.log"


def test_unset_environment_variable_is_rejected(tmp_yaml, monkeypatch):
    monkeypatch.delenv("UTEST_MISSING_VAR", raising=False)
    path = tmp_yaml("""\
        modules: [tests_math]
        junit: ${UTEST_MISSING_VAR}/utest.xml
    """)
    with pytest.raises(ValidationError, match="UTEST_MISSING_VAR"):
        load_config(path)


def test_empty_modules_rejected(tmp_yaml):
    path = tmp_yaml("""\
        modules: []
    """)
    with pytest.raises(ValidationError, match="modules must not be empty"):
        load_config(path)


def test_missing_modules_rejected(tmp_yaml):
    path = tmp_yaml("""\
        contexts: [Math]
    """)
    with pytest.raises(ValidationError):
        load_config(path)


def test_unknown_keys_rejected(tmp_yaml):
    path = tmp_yaml("""\
        modules: [tests_math]
        parallel: 4
    """)
    with pytest.raises(ValidationError):
        load_config(path)


def test_non_mapping_config_rejected(tmp_yaml):
    path = tmp_yaml("""\
        - tests_math
    """)
    with pytest.raises(ValueError, match="mapping"):
        load_config(path)


@pytest.mark.parametrize(
    "field,value,message",
    [
        ("fill", "..", "single character"),
        ("padding", 0, "at least 1"),
    ],
)
def test_formatting_fields_validated(field, value, message):
    with pytest.raises(ValidationError, match=message):
        RunConfig(modules=["m"], **{field: value})
