import pytest

from charts_live.errors import UnsupportedLibraryError
from charts_live.workspace import SUPPORTED_LIBRARIES, WorkspaceProvisioner
from charts_live.workspace.templates import render_chart_js, render_index_html


@pytest.fixture
def provisioner(tmp_path):
    return WorkspaceProvisioner(tmp_path / "workspaces", server_url="http://localhost:3000")


class TestLibraries:
    """Test supported library metadata."""

    def test_list_supported_order_and_fields(self, provisioner):
        """Test that libraries are listed in a stable order with all metadata."""
        libs = provisioner.list_supported()

        assert [lib["id"] for lib in libs] == ["amcharts", "chartjs"]
        for lib in libs:
            assert set(lib) == {"id", "name", "instructions", "cdn_links"}
            assert lib["instructions"]
            assert lib["cdn_links"]

    def test_get_unknown_library(self, provisioner):
        """Test that unknown ids list the valid ones."""
        with pytest.raises(UnsupportedLibraryError) as exc_info:
            provisioner.get_library("unknown-lib")

        assert exc_info.value.supported == ["amcharts", "chartjs"]
        assert "amcharts, chartjs" in str(exc_info.value)


class TestProvision:
    """Test workspace creation."""

    @pytest.mark.asyncio
    async def test_provision_chartjs(self, provisioner, tmp_path):
        """Test that a Chart.js workspace gets all starter files."""
        workspace = await provisioner.provision("chartjs")

        assert workspace.is_absolute()
        assert workspace.parent == (tmp_path / "workspaces").resolve()
        assert workspace.name.startswith("chartjs-")
        assert sorted(p.name for p in workspace.iterdir()) == ["README.md", "chart.js", "index.html"]
        assert provisioner.current_workspace == workspace

        html = (workspace / "index.html").read_text()
        assert '<canvas id="chartCanvas"></canvas>' in html
        assert '<script src="https://cdn.jsdelivr.net/npm/chart.js"></script>' in html
        assert "new EventSource('/events')" in html
        assert '<script src="chart.js"></script>' in html

        assert "new Chart(ctx" in (workspace / "chart.js").read_text()

        readme = (workspace / "README.md").read_text()
        assert readme.startswith("# Chart.js Workspace")
        assert f"`{workspace}`" in readme
        assert "served at http://localhost:3000" in readme

    @pytest.mark.asyncio
    async def test_provision_amcharts(self, provisioner):
        """Test that an amCharts workspace loads all of its scripts in order."""
        workspace = await provisioner.provision("amcharts")

        html = (workspace / "index.html").read_text()
        positions = [html.index(link) for link in SUPPORTED_LIBRARIES["amcharts"].cdn_links]
        assert positions == sorted(positions)
        assert 'id="chartdiv"' in html
        assert "am5.Root.new" in (workspace / "chart.js").read_text()

    @pytest.mark.asyncio
    async def test_provision_unknown_library(self, provisioner, tmp_path):
        """Test that an unknown id fails before touching the filesystem."""
        with pytest.raises(UnsupportedLibraryError) as exc_info:
            await provisioner.provision("unknown-lib")

        assert exc_info.value.supported == ["amcharts", "chartjs"]
        assert not (tmp_path / "workspaces").exists()
        assert provisioner.current_workspace is None


def test_templates_have_no_unfilled_placeholders():
    """Test that rendered HTML has CSS braces but no leftover format fields."""
    for library in SUPPORTED_LIBRARIES.values():
        html = render_index_html(library)
        assert "{name}" not in html and "{container}" not in html
        assert "box-sizing: border-box;" in html
        assert render_chart_js(library).strip()
