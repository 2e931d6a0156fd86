"""Tests for the configuration module."""

from pathlib import Path

import pytest

from probdag._cli.config import (
    ConfigError,
    ModuleSource,
    ProbdagConfig,
    ScriptSource,
    find_pyproject_toml,
    load_config,
)
from probdag._config import Precision


def _write_pyproject(tmp_path: Path, content: str) -> Path:
    pyproject = tmp_path / "pyproject.toml"
    pyproject.write_text(content)
    return pyproject


class TestFindPyprojectToml:
    """Tests for find_pyproject_toml function."""

    def test_finds_in_current_directory(self, tmp_path: Path) -> None:
        """Should find pyproject.toml in current directory."""
        pyproject = _write_pyproject(tmp_path, "[project]\nname = 'test'\n")

        assert find_pyproject_toml(tmp_path) == pyproject

    def test_finds_in_parent_directory(self, tmp_path: Path) -> None:
        """Should find pyproject.toml in parent directory."""
        pyproject = _write_pyproject(tmp_path, "[project]\nname = 'test'\n")
        subdir = tmp_path / "src" / "pkg"
        subdir.mkdir(parents=True)

        assert find_pyproject_toml(subdir) == pyproject

    def test_returns_none_when_not_found(self, tmp_path: Path) -> None:
        assert find_pyproject_toml(tmp_path) is None


class TestLoadConfigModel:
    """Tests for loading the model source."""

    def test_module_path_string(self, tmp_path: Path) -> None:
        pyproject = _write_pyproject(
            tmp_path,
            """
[tool.probdag]
model = "examples.regression:registry"
""",
        )

        config = load_config(pyproject)

        assert config.model == ModuleSource(module_path="examples.regression:registry")
        assert config.project_root == tmp_path

    def test_module_path_without_colon_raises_error(self, tmp_path: Path) -> None:
        pyproject = _write_pyproject(
            tmp_path,
            """
[tool.probdag]
model = "examples.regression"
""",
        )

        with pytest.raises(ConfigError, match="Invalid module path"):
            load_config(pyproject)

    def test_script_path_inline_table(self, tmp_path: Path) -> None:
        pyproject = _write_pyproject(
            tmp_path,
            """
[tool.probdag]
model = { script = "examples/regression.py" }
""",
        )

        config = load_config(pyproject)

        assert isinstance(config.model, ScriptSource)
        assert config.model.script == tmp_path / "examples/regression.py"
        assert config.model.name is None

    def test_script_path_with_name(self, tmp_path: Path) -> None:
        pyproject = _write_pyproject(
            tmp_path,
            """
[tool.probdag]
model = { script = "examples/regression.py", name = "my_registry" }
""",
        )

        config = load_config(pyproject)

        assert isinstance(config.model, ScriptSource)
        assert config.model.name == "my_registry"

    def test_script_path_missing_script_key_raises_error(self, tmp_path: Path) -> None:
        pyproject = _write_pyproject(
            tmp_path,
            """
[tool.probdag]
model = { name = "my_registry" }
""",
        )

        with pytest.raises(ConfigError, match="'script' key"):
            load_config(pyproject)

    def test_invalid_model_type_raises_error(self, tmp_path: Path) -> None:
        pyproject = _write_pyproject(
            tmp_path,
            """
[tool.probdag]
model = 123
""",
        )

        with pytest.raises(ConfigError, match=r"Invalid.*model configuration"):
            load_config(pyproject)


class TestLoadConfigModelOptions:
    """Tests for loading the options passed to `model()`."""

    def test_full_configuration(self, tmp_path: Path) -> None:
        pyproject = _write_pyproject(
            tmp_path,
            """
[tool.probdag]
model = { script = "examples/regression.py", name = "registry" }
precision = "double"
n_cores = 2
compile = false
""",
        )

        config = load_config(pyproject)

        assert config.precision == Precision.DOUBLE
        assert config.n_cores == 2
        assert config.compile is False
        assert config.project_root == tmp_path

    def test_invalid_precision(self, tmp_path: Path) -> None:
        pyproject = _write_pyproject(
            tmp_path,
            """
[tool.probdag]
precision = "half"
""",
        )

        with pytest.raises(ConfigError, match="precision"):
            load_config(pyproject)

    @pytest.mark.parametrize("value", ["true", "'4'", "1.5"])
    def test_invalid_n_cores(self, tmp_path: Path, value: str) -> None:
        pyproject = _write_pyproject(tmp_path, f"[tool.probdag]\nn_cores = {value}\n")

        with pytest.raises(ConfigError, match="n_cores"):
            load_config(pyproject)

    def test_invalid_compile(self, tmp_path: Path) -> None:
        pyproject = _write_pyproject(tmp_path, "[tool.probdag]\ncompile = 1\n")

        with pytest.raises(ConfigError, match="compile"):
            load_config(pyproject)


class TestLoadConfigEmptySection:
    def test_no_tool_probdag_section(self, tmp_path: Path) -> None:
        pyproject = _write_pyproject(tmp_path, "[project]\nname = 'test'\n")

        config = load_config(pyproject)

        assert config == ProbdagConfig(project_root=tmp_path)

    def test_invalid_toml_raises_error(self, tmp_path: Path) -> None:
        pyproject = _write_pyproject(tmp_path, "invalid toml [[[")

        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_config(pyproject)


class TestProbdagConfigDataclass:
    def test_default_values(self) -> None:
        config = ProbdagConfig()

        assert config.model is None
        assert config.precision is None
        assert config.n_cores is None
        assert config.compile is None
        assert config.project_root is None

    def test_frozen(self) -> None:
        config = ProbdagConfig()

        with pytest.raises(AttributeError):
            config.model = ModuleSource("pkg:registry")  # type: ignore[misc]
