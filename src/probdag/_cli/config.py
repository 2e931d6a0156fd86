"""Configuration loading from pyproject.toml."""

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import cast

from probdag._config import Precision


class ConfigError(Exception):
    """Error in probdag configuration."""


@dataclass(slots=True, frozen=True)
class ScriptSource:
    """Script path with optional variable name."""

    script: Path
    name: str | None = None


@dataclass(slots=True, frozen=True)
class ModuleSource:
    """Module path with variable name (e.g., 'examples.regression:registry')."""

    module_path: str


RegistrySource = ScriptSource | ModuleSource


@dataclass(slots=True, frozen=True)
class ProbdagConfig:
    """Configuration loaded from pyproject.toml.

    All relative paths are resolved from the project root (directory containing pyproject.toml).
    Unset settings are None and fall back to the defaults of `probdag.model`.
    """

    model: RegistrySource | None = None
    precision: Precision | None = None
    n_cores: int | None = None
    compile: bool | None = None
    project_root: Path | None = None


def find_pyproject_toml(start_dir: Path | None = None) -> Path | None:
    """Find pyproject.toml by walking up from start_dir.

    Args:
        start_dir: Starting directory. Defaults to current working directory.

    Returns:
        Path to pyproject.toml if found, None otherwise.

    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()

    while True:
        candidate = current / "pyproject.toml"
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            # Reached filesystem root
            return None
        current = parent


def _parse_registry_source(value: object, project_root: Path) -> RegistrySource:
    """Parse the model field from config.

    Args:
        value: The raw value from TOML (string or dict)
        project_root: Project root directory for resolving relative paths

    Returns:
        Parsed RegistrySource

    Raises:
        ConfigError: If the value format is invalid

    """
    if isinstance(value, str):
        # Module path format: "module.path:variable"
        if ":" not in value:
            msg = f"Invalid module path '{value}'. Expected format: 'module.path:variable_name'"
            raise ConfigError(msg)
        return ModuleSource(module_path=value)

    if isinstance(value, dict):
        # Script path format: { script = "path.py", name = "registry" }
        value_dict = cast("dict[str, object]", value)
        if "script" not in value_dict:
            msg = "Invalid [tool.probdag].model configuration. Expected string or table with 'script' key."
            raise ConfigError(msg)

        script_value = value_dict["script"]
        if not isinstance(script_value, str):
            msg = "Invalid [tool.probdag].model.script: expected string path"
            raise ConfigError(msg)
        script_path = Path(script_value)
        if not script_path.is_absolute():
            script_path = project_root / script_path

        name = value_dict.get("name")
        if name is not None and not isinstance(name, str):
            msg = "Invalid [tool.probdag].model.name: expected string"
            raise ConfigError(msg)

        return ScriptSource(script=script_path, name=name)

    msg = "Invalid [tool.probdag].model configuration. Expected string or table with 'script' key."
    raise ConfigError(msg)


def _parse_precision(value: object) -> Precision:
    try:
        return Precision(value)
    except ValueError:
        choices = ", ".join(f"'{p}'" for p in Precision)
        msg = f"Invalid [tool.probdag].precision: expected one of {choices}, got {value!r}"
        raise ConfigError(msg) from None


def load_config(pyproject_path: Path) -> ProbdagConfig:
    """Load and validate [tool.probdag] config from pyproject.toml.

    Args:
        pyproject_path: Path to pyproject.toml

    Returns:
        Parsed ProbdagConfig

    Raises:
        ConfigError: If the configuration is invalid

    """
    project_root = pyproject_path.parent

    with pyproject_path.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML in {pyproject_path}: {e}"
            raise ConfigError(msg) from e

    section = data.get("tool", {}).get("probdag", {})
    if not section:
        return ProbdagConfig(project_root=project_root)

    model_source: RegistrySource | None = None
    if "model" in section:
        model_source = _parse_registry_source(section["model"], project_root)

    precision: Precision | None = None
    if "precision" in section:
        precision = _parse_precision(section["precision"])

    n_cores: int | None = None
    if "n_cores" in section:
        n_cores_value = section["n_cores"]
        # bool is a subclass of int; reject it explicitly
        if not isinstance(n_cores_value, int) or isinstance(n_cores_value, bool):
            msg = "Invalid [tool.probdag].n_cores: expected integer"
            raise ConfigError(msg)
        n_cores = n_cores_value

    compile_flag: bool | None = None
    if "compile" in section:
        compile_value = section["compile"]
        if not isinstance(compile_value, bool):
            msg = "Invalid [tool.probdag].compile: expected boolean"
            raise ConfigError(msg)
        compile_flag = compile_value

    return ProbdagConfig(
        model=model_source,
        precision=precision,
        n_cores=n_cores,
        compile=compile_flag,
        project_root=project_root,
    )


def get_config() -> ProbdagConfig:
    """Get config from pyproject.toml in current directory or parents.

    Returns:
        ProbdagConfig (may be empty if no pyproject.toml or no [tool.probdag] section)

    """
    pyproject_path = find_pyproject_toml()
    if pyproject_path is None:
        return ProbdagConfig()
    return load_config(pyproject_path)
