"""Tests for the CLI commands and the graph queries behind them."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

import probdag as pg
from probdag._cli.discover import import_name_from_path, load_registry_from_module_path, load_registry_from_script
from probdag._cli.graph_query import ComponentSummary, get_component_summaries, list_nodes
from probdag._cli.main import app
from probdag._dag import build_dag

runner = CliRunner()

VALID_SCRIPT = """
import probdag as pg

registry = pg.NodeRegistry()
with registry:
    mu = pg.variable(name="mu")
    pg.distribution(pg.data([0.2, 0.4], name="y"), "normal", mean=mu, sd=1.0, name="likelihood")
"""

DISJOINT_SCRIPT = """
import probdag as pg

registry = pg.NodeRegistry()
with registry:
    mu = pg.variable(name="mu")
    pg.distribution(pg.data([0.2, 0.4]), "normal", mean=mu, sd=1.0)
    tau = pg.variable(name="tau")
"""

NO_REGISTRY_SCRIPT = """
value = 1
"""


@pytest.fixture
def project_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """An empty working directory without a [tool.probdag] section."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / "pyproject.toml").write_text("[project]\nname = 'test'\n")
    return tmp_path


def _write_script(directory: Path, name: str, content: str) -> Path:
    # Module names are cached on import, so every test uses its own file name
    script = directory / f"{name}.py"
    script.write_text(content)
    return script


@pytest.fixture
def disjoint_registry() -> pg.NodeRegistry:
    registry = pg.NodeRegistry()
    with registry:
        mu = pg.variable(name="mu")
        pg.distribution(pg.data([0.2, 0.4]), "normal", mean=mu, sd=1.0)
        pg.operation(abs, pg.variable(name="tau"), name="abs_tau")
    return registry


# --- graph queries ---


class TestGetComponentSummaries:
    def test_one_component(self, simple_registry: pg.NodeRegistry) -> None:
        dag = build_dag(simple_registry.tracked(), simple_registry)
        assert get_component_summaries(dag) == [
            ComponentSummary(component=0, data_count=1, variable_count=2, distribution_count=1, operation_count=0),
        ]

    def test_disjoint_components(self, disjoint_registry: pg.NodeRegistry) -> None:
        dag = build_dag(disjoint_registry.tracked(), disjoint_registry)
        summaries = get_component_summaries(dag)
        assert [s.component for s in summaries] == [0, 1]
        assert summaries[0].distribution_count == 1
        assert summaries[0].node_count == 4
        assert summaries[1].distribution_count == 0
        assert summaries[1].operation_count == 1


class TestListNodes:
    def test_lists_all_nodes(self, simple_registry: pg.NodeRegistry) -> None:
        dag = build_dag(simple_registry.tracked(), simple_registry)
        nodes = list_nodes(dag)
        assert [n.name for n in nodes] == ["mu", "sigma", "y", "likelihood"]
        likelihood = nodes[-1]
        assert likelihood.role == pg.Role.DISTRIBUTION
        assert likelihood.parent_count == 2

    def test_data_node_counts_its_distribution_as_parent(self, simple_registry: pg.NodeRegistry) -> None:
        dag = build_dag(simple_registry.tracked(), simple_registry)
        y = next(n for n in list_nodes(dag) if n.name == "y")
        assert y.parent_count == 1

    def test_filter_by_role(self, disjoint_registry: pg.NodeRegistry) -> None:
        dag = build_dag(disjoint_registry.tracked(), disjoint_registry)
        variables = list_nodes(dag, role=pg.Role.VARIABLE)
        assert [(n.name, n.component) for n in variables] == [("mu", 0), ("tau", 1)]


# --- script discovery ---


class TestLoadRegistryFromScript:
    def test_infers_registry(self, tmp_path: Path) -> None:
        script = _write_script(tmp_path, "discover_infer", VALID_SCRIPT)
        registry = load_registry_from_script(script)
        assert set(registry.visible()) == {"mu", "y", "likelihood"}

    def test_named_registry(self, tmp_path: Path) -> None:
        script = _write_script(tmp_path, "discover_named", VALID_SCRIPT)
        assert isinstance(load_registry_from_script(script, "registry"), pg.NodeRegistry)

    def test_missing_name(self, tmp_path: Path) -> None:
        script = _write_script(tmp_path, "discover_missing_name", VALID_SCRIPT)
        with pytest.raises(ValueError, match="Could not find registry 'other'"):
            load_registry_from_script(script, "other")

    def test_wrong_type(self, tmp_path: Path) -> None:
        script = _write_script(tmp_path, "discover_wrong_type", VALID_SCRIPT)
        with pytest.raises(TypeError, match="not a NodeRegistry"):
            load_registry_from_script(script, "mu")

    def test_no_registry(self, tmp_path: Path) -> None:
        script = _write_script(tmp_path, "discover_none", NO_REGISTRY_SCRIPT)
        with pytest.raises(ValueError, match="Could not find a NodeRegistry"):
            load_registry_from_script(script)

    def test_script_inside_package(self, tmp_path: Path) -> None:
        package = tmp_path / "models_pkg"
        package.mkdir()
        (package / "__init__.py").write_text("")
        script = _write_script(package, "discover_in_package", VALID_SCRIPT)
        assert import_name_from_path(script) == ("models_pkg.discover_in_package", tmp_path.resolve())
        assert "mu" in load_registry_from_script(script).visible()


class TestLoadRegistryFromModulePath:
    def test_loads_registry(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.syspath_prepend(str(tmp_path))
        _write_script(tmp_path, "module_valid", VALID_SCRIPT)
        registry = load_registry_from_module_path("module_valid:registry")
        assert set(registry.visible()) == {"mu", "y", "likelihood"}

    def test_wrong_type(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.syspath_prepend(str(tmp_path))
        _write_script(tmp_path, "module_wrong_type", VALID_SCRIPT)
        with pytest.raises(TypeError, match="not a NodeRegistry"):
            load_registry_from_module_path("module_wrong_type:mu")

    def test_missing_name(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.syspath_prepend(str(tmp_path))
        _write_script(tmp_path, "module_missing_name", VALID_SCRIPT)
        with pytest.raises(ValueError, match="Could not find registry 'other'"):
            load_registry_from_module_path("module_missing_name:other")

    def test_needs_variable_name(self) -> None:
        with pytest.raises(ValueError, match="module.path:variable_name"):
            load_registry_from_module_path("module_valid")


# --- commands ---


class TestCheckCommand:
    def test_valid_model(self, project_dir: Path) -> None:
        script = _write_script(project_dir, "check_valid", VALID_SCRIPT)
        result = runner.invoke(app, ["check", str(script), "--precision", "double", "--n-cores", "1"])
        assert result.exit_code == 0, result.output
        assert "Model is valid" in result.output
        assert "precision=double" in result.output

    def test_disjoint_model(self, project_dir: Path) -> None:
        script = _write_script(project_dir, "check_disjoint", DISJOINT_SCRIPT)
        result = runner.invoke(app, ["check", str(script)])
        assert result.exit_code == 1
        assert "2 disjoint graphs" in result.output

    def test_model_from_pyproject(self, project_dir: Path) -> None:
        _write_script(project_dir, "check_configured", VALID_SCRIPT)
        (project_dir / "pyproject.toml").write_text(
            """
[tool.probdag]
model = { script = "check_configured.py" }
compile = false
""",
        )
        result = runner.invoke(app, ["check"])
        assert result.exit_code == 0, result.output
        assert "compile=False" in result.output

    def test_no_model_given(self, project_dir: Path) -> None:
        result = runner.invoke(app, ["check"])
        assert result.exit_code == 1
        assert "No model given" in result.output

    def test_invalid_configuration(self, project_dir: Path) -> None:
        (project_dir / "pyproject.toml").write_text("[tool.probdag]\nprecision = 'half'\n")
        result = runner.invoke(app, ["check"])
        assert result.exit_code == 1
        assert "Configuration error" in result.output


class TestNodesCommand:
    def test_lists_nodes(self, project_dir: Path) -> None:
        script = _write_script(project_dir, "nodes_all", VALID_SCRIPT)
        result = runner.invoke(app, ["nodes", str(script)])
        assert result.exit_code == 0, result.output
        assert "likelihood" in result.output
        assert "Total: 4 nodes" in result.output

    def test_lists_nodes_of_invalid_model(self, project_dir: Path) -> None:
        script = _write_script(project_dir, "nodes_disjoint", DISJOINT_SCRIPT)
        result = runner.invoke(app, ["nodes", str(script), "--role", "variable"])
        assert result.exit_code == 0, result.output
        assert "tau" in result.output
        assert "Total: 2 nodes" in result.output
