"""Loading of node registries from scripts and module paths."""

from __future__ import annotations

import importlib
import logging
import sys
from typing import TYPE_CHECKING

from probdag._registry import NodeRegistry

from .config import ConfigError, ModuleSource, ScriptSource

if TYPE_CHECKING:
    from pathlib import Path
    from types import ModuleType

    from .config import RegistrySource

logger = logging.getLogger(__name__)


def import_name_from_path(path: Path) -> tuple[str, Path]:
    """Work out how a script is imported.

    Parent directories holding an ``__init__.py`` are treated as packages.

    Args:
        path: Path to a Python file or package directory.

    Returns:
        The dotted module name and the directory it is importable from.

    """
    module_path = path.resolve()
    if module_path.stem == "__init__":
        module_path = module_path.parent
    parts = [module_path.stem]
    root = module_path.parent
    while (root / "__init__.py").is_file():
        parts.insert(0, root.name)
        root = root.parent
    return ".".join(parts), root


def _registry_attribute(module: ModuleType, name: str) -> NodeRegistry:
    if not hasattr(module, name):
        msg = f"Could not find registry '{name}' in {module.__name__}"
        raise ValueError(msg)
    registry = getattr(module, name)
    if not isinstance(registry, NodeRegistry):
        msg = f"'{name}' in {module.__name__} is not a NodeRegistry instance"
        raise TypeError(msg)
    return registry


def load_registry_from_script(script_path: Path, registry_name: str | None = None) -> NodeRegistry:
    """Load a node registry from a Python script path.

    Args:
        script_path: Path to the Python script defining the registry
        registry_name: Name of the registry variable. If None, the first
            NodeRegistry found in the script is used

    Raises:
        ImportError: If the module cannot be imported
        ValueError: If no registry is found or the named one doesn't exist
        TypeError: If the named variable is not a NodeRegistry instance

    """
    module_name, import_root = import_name_from_path(script_path)
    if str(import_root) not in sys.path:
        sys.path.insert(0, str(import_root))

    try:
        module = importlib.import_module(module_name)
    except (ImportError, ValueError):
        logger.exception("Import error")
        logger.warning("Ensure all the package directories have an __init__.py file")
        raise

    if registry_name:
        return _registry_attribute(module, registry_name)

    for name, obj in vars(module).items():
        if isinstance(obj, NodeRegistry):
            logger.debug("Found registry: %s", name)
            return obj

    msg = "Could not find a NodeRegistry in module, try using --registry"
    raise ValueError(msg)


def load_registry_from_module_path(module_path: str) -> NodeRegistry:
    """Load a node registry from a module path (e.g., 'examples.regression:registry').

    Raises:
        ValueError: If the path is not 'module.path:variable_name' or the variable doesn't exist
        TypeError: If the variable is not a NodeRegistry instance

    """
    if ":" not in module_path:
        msg = "Module path must be in format 'module.path:variable_name'"
        raise ValueError(msg)

    module_name, registry_name = module_path.split(":", 1)
    return _registry_attribute(importlib.import_module(module_name), registry_name)


def load_registry_from_source(source: RegistrySource) -> NodeRegistry:
    """Load a node registry from a RegistrySource (script or module)."""
    match source:
        case ScriptSource(script=script, name=name):
            return load_registry_from_script(script, name)
        case ModuleSource(module_path=module_path):
            return load_registry_from_module_path(module_path)
    msg = "Invalid [tool.probdag].model configuration. Expected string or table with 'script' key."
    raise ConfigError(msg)
