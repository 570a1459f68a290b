from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import typer

if TYPE_CHECKING:
    from utest.config import RunConfig

app = typer.Typer(name="utest", help="Run lightweight in-source unit tests")


def _resolve_run_inputs(
    config: str | None, module: list[str] | None
) -> tuple[list[str], Path, RunConfig | None]:
    """Return the bootstrap list, its base directory and the loaded config."""
    from utest.config import DEFAULT_CONFIG, load_config

    config_path = Path(config) if config is not None else Path(DEFAULT_CONFIG)
    if config is not None and not config_path.exists():
        typer.echo(f"Error: config file not found: {config}", err=True)
        raise typer.Exit(1)

    run_config = None
    modules: list[str] = []
    if config_path.exists() and (config is not None or not module):
        try:
            run_config = load_config(config_path)
        except ValueError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1)
        modules.extend(run_config.modules)

    modules.extend(module or [])
    if not modules:
        typer.echo(
            f"Error: no test modules given (use --module or create {DEFAULT_CONFIG})",
            err=True,
        )
        raise typer.Exit(1)
    return modules, Path.cwd(), run_config


def _load_registry(modules: list[str], base_dir: Path):
    from utest.loader import load_modules
    from utest.registry import get_registry, reset_registry

    reset_registry()
    try:
        load_modules(modules, base_dir=base_dir)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    return get_registry()


@app.command()
def run(
    contexts: list[str] | None = typer.Argument(
        None, help="Contexts to run, in this order (default: all)"
    ),
    config: str | None = typer.Option(
        None, "--config", "-c", help="Path to run YAML config (default: utest.yaml)"
    ),
    module: list[str] | None = typer.Option(
        None, "--module", "-m", help="Test module or .py file to load (repeatable)"
    ),
    junit: str | None = typer.Option(None, help="Also write a JUnit XML report here"),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output to stderr"
    ),
):
    """Run registered contexts and exit 0 if all succeeded, 1 otherwise."""
    from utest.reporting.console import ConsoleReporter
    from utest.runner import Runner
    from utest.verbose import setup_logger

    modules, base_dir, run_config = _resolve_run_inputs(config, module)

    debug_log = Path(run_config.debug_log if run_config else ".utest/debug.log")
    logger = setup_logger(debug_log, verbose=verbose, logger_name="utest")
    logger.debug(f"Loading {len(modules)} test module(s)")

    registry = _load_registry(modules, base_dir)

    reporter = ConsoleReporter()
    if run_config is not None:
        registry.set_padding(run_config.padding)
        reporter = ConsoleReporter(fill=run_config.fill)

    runner = Runner(registry=registry, reporter=reporter, logger=logger.getChild("runner"))
    requested = contexts or (run_config.contexts if run_config else [])
    if requested:
        code = runner.run_named(requested)
    else:
        code = runner.run_all()

    junit_path = junit or (run_config.junit if run_config else None)
    if junit_path:
        from utest.reporting.junit import write_junit

        write_junit(Path(junit_path), runner.results)
        logger.debug(f"Wrote JUnit report: {junit_path}")

    if code:
        raise typer.Exit(code)


@app.command("list")
def list_tests(
    config: str | None = typer.Option(
        None, "--config", "-c", help="Path to run YAML config (default: utest.yaml)"
    ),
    module: list[str] | None = typer.Option(
        None, "--module", "-m", help="Test module or .py file to load (repeatable)"
    ),
):
    """List registered contexts and their tests in run order."""
    modules, base_dir, _ = _resolve_run_inputs(config, module)
    registry = _load_registry(modules, base_dir)

    for context in registry:
        steps = [s for s in ("init", "cleanup") if getattr(context, s) is not None]
        suffix = f" ({', '.join(steps)})" if steps else ""
        typer.echo(f"{context.name}{suffix}")
        for case in context.tests:
            flag = " [must pass]" if case.must_pass else ""
            typer.echo(f"  {case.display_name}{flag}")


@app.command()
def init(
    dir: str = typer.Option(".", "--dir", help="Directory to initialize"),
):
    """Create an example utest.yaml and test module."""
    project_dir = Path(dir)
    project_dir.mkdir(parents=True, exist_ok=True)

    config_file = project_dir / "utest.yaml"
    if config_file.exists():
        typer.echo(f"utest.yaml already exists in {dir}, skipping.")
        return

    config_file.write_text("""\
modules:
  - ./example_tests.py

# contexts: [Math]          # run only these, in this order
# junit: reports/utest.xml  # also write a JUnit XML report
""")

    (project_dir / "example_tests.py").write_text('''\
import utest


@utest.init(context="Math")
def prepare():
    return True


@utest.case(context="Math", must_pass=True)
def addition_works(t):
    t.equal(1 + 1, 2)


@utest.case(context="Math")
def ordering_holds(t):
    t.less(1, 2)
    t.ensure(sorted([3, 1, 2]) == [1, 2, 3], "sorted([3, 1, 2]) == [1, 2, 3]")
''')

    typer.echo(f"Initialized utest project in {dir}:")
    typer.echo("  utest.yaml        - run config")
    typer.echo("  example_tests.py  - example test module")
