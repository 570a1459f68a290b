"""Import the bootstrap list so module-level registrations run."""

from __future__ import annotations

import importlib
import importlib.util
import logging
import sys
from pathlib import Path
from types import ModuleType

from utest.registry import CONTEXT_ATTR

logger = logging.getLogger("utest.loader")


def _load_file(path: Path) -> ModuleType:
    if not path.is_file():
        raise ValueError(f"test module not found: {path}")

    # never shadows an importable module such as string.py -> string
    module_name = f"utest_loaded_{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ValueError(f"cannot import test module: {path}")

    module = importlib.util.module_from_spec(spec)
    setattr(module, CONTEXT_ATTR, path.stem)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        sys.modules.pop(module_name, None)
        raise ValueError(f"cannot import test module '{path}': {e}") from e
    return module


def load_modules(entries: list[str], base_dir: Path | None = None) -> list[ModuleType]:
    """Import each entry in order.

    Entries ending in ``.py`` are file paths (relative ones resolved against
    ``base_dir``); anything else is a dotted module name. Modules are imported
    in the order listed, which fixes the relative order of their contexts.
    """
    modules = []
    for entry in entries:
        if entry.endswith(".py"):
            path = Path(entry)
            if not path.is_absolute() and base_dir is not None:
                path = base_dir / path
            logger.debug(f"Loading test file {path}")
            modules.append(_load_file(path))
            continue

        logger.debug(f"Importing test module {entry}")
        try:
            if entry in sys.modules:
                # registrations only run on execution of the module body
                modules.append(importlib.reload(sys.modules[entry]))
            else:
                modules.append(importlib.import_module(entry))
        except Exception as e:
            raise ValueError(f"cannot import test module '{entry}': {e}") from e
    return modules
