import sys
import textwrap

import pytest

from utest.loader import load_modules
from utest.registry import get_registry


def _write_module(path, body: str):
    path.write_text(textwrap.dedent(body))
    return path


def test_load_file_registers_tests(tmp_path):
    _write_module(
        tmp_path / "checks_math.py",
        """\
        import utest

        @utest.case(context="Math")
        def adds(t):
            t.equal(1 + 1, 2)

        @utest.case(context="Math")
        def subtracts(t):
            t.equal(2 - 1, 1)
        """,
    )
    modules = load_modules(["checks_math.py"], base_dir=tmp_path)

    assert len(modules) == 1
    context = get_registry().find_context("Math")
    assert [c.name for c in context.tests] == ["adds", "subtracts"]


def test_modules_register_in_listed_order(tmp_path):
    for name in ("first", "second"):
        _write_module(
            tmp_path / f"{name}.py",
            """\
            import utest

            @utest.case()
            def only(t):
                pass
            """,
        )

    load_modules([str(tmp_path / "second.py"), str(tmp_path / "first.py")])
    assert [c.name for c in get_registry()] == ["second", "first"]


def test_dotted_module_is_imported_and_reloaded(tmp_path, monkeypatch):
    _write_module(
        tmp_path / "dotted_checks.py",
        """\
        import utest

        utest.add_test(lambda: True, "registered", "Dotted")
        """,
    )
    monkeypatch.syspath_prepend(str(tmp_path))
    monkeypatch.delitem(sys.modules, "dotted_checks", raising=False)

    load_modules(["dotted_checks"])
    assert len(get_registry().find_context("Dotted").tests) == 1

    from utest.registry import reset_registry

    reset_registry()
    load_modules(["dotted_checks"])
    assert len(get_registry().find_context("Dotted").tests) == 1


def test_missing_file_raises_value_error(tmp_path):
    with pytest.raises(ValueError, match="not found"):
        load_modules(["nope.py"], base_dir=tmp_path)


def test_unimportable_module_raises_value_error():
    with pytest.raises(ValueError, match="cannot import test module 'no_such_module_xyz'"):
        load_modules(["no_such_module_xyz"])


def test_file_context_defaults_to_stem(tmp_path):
    _write_module(
        tmp_path / "checks.py",
        """\
        import utest

        @utest.init()
        def prepare():
            return True

        @utest.case()
        def works(t):
            pass
        """,
    )
    load_modules(["checks.py"], base_dir=tmp_path)

    context = get_registry().find_context("checks")
    assert context is not None
    assert context.init is not None
    assert [c.name for c in context.tests] == ["works"]


@pytest.mark.parametrize(
    "source,cause",
    [
        ("def (:\n", SyntaxError),
        ("raise RuntimeError('boom')\n", RuntimeError),
    ],
)
def test_broken_file_raises_value_error(tmp_path, source, cause):
    (tmp_path / "broken.py").write_text(source)

    with pytest.raises(ValueError, match="cannot import test module") as exc_info:
        load_modules(["broken.py"], base_dir=tmp_path)

    assert isinstance(exc_info.value.__cause__, cause)
    assert "utest_loaded_broken" not in sys.modules


def test_dotted_module_raising_on_import_raises_value_error(tmp_path, monkeypatch):
    _write_module(tmp_path / "explodes_on_import.py", "raise RuntimeError('boom')\n")
    monkeypatch.syspath_prepend(str(tmp_path))
    monkeypatch.delitem(sys.modules, "explodes_on_import", raising=False)

    with pytest.raises(ValueError, match="cannot import test module 'explodes_on_import'"):
        load_modules(["explodes_on_import"])
