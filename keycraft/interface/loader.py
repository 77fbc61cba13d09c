#!/usr/bin/env python3
# keycraft/interface/loader.py
from __future__ import annotations

"""
Dynamic command loader.

Each subpackage of the plugins package with an 'entrypoint.py' is imported;
its @command decorators register the commands. The category description
comes from the subpackage's CATEGORY_DESCRIPTION (or its docstring).
"""

import importlib
import logging
import pkgutil
from pathlib import Path

from keycraft.commands import REGISTRY

logger = logging.getLogger(__name__)

PLUGINS_PACKAGE = "keycraft.plugins"


def load_commands(commands_package: str = PLUGINS_PACKAGE) -> int:
    """
    Import `<package>.<name>.entrypoint` for every plugin subpackage.

    Returns:
        Number of entrypoints imported.

    Raises:
        RuntimeError: `commands_package` is not a package.
    """
    package = importlib.import_module(commands_package)
    package_paths = [str(p) for p in getattr(package, "__path__", [])]
    if not package_paths:
        raise RuntimeError(f"'{commands_package}' must be a package (folder) with modules.")

    loaded_count = 0
    for base_path in package_paths:
        for modinfo in pkgutil.iter_modules([base_path]):
            if not modinfo.ispkg or modinfo.name.startswith("_"):
                continue
            if not (Path(base_path) / modinfo.name / "entrypoint.py").exists():
                continue

            importlib.import_module(f"{commands_package}.{modinfo.name}.entrypoint")
            _collect_category_description(f"{commands_package}.{modinfo.name}", modinfo.name)
            loaded_count += 1
            logger.debug("Loaded plugin %s", modinfo.name)

    return loaded_count


def _collect_category_description(module_name: str, category: str) -> None:
    module = importlib.import_module(module_name)
    value = getattr(module, "CATEGORY_DESCRIPTION", None)
    description_text = value if isinstance(value, str) else (module.__doc__ or "")
    REGISTRY.set_category_description(category, description_text)
