"""Tests for the loopmesh command line."""

import pytest
from click.testing import CliRunner

from loopmesh.cli import main
from loopmesh.io import load_mesh, save_mesh


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def tetra_obj(tetrahedron, tmp_path):
    path = tmp_path / "tetra.obj"
    save_mesh(tetrahedron, path)
    return path


class TestSubdivide:
    def test_writes_refined_mesh(self, runner, tetra_obj, tmp_path):
        out = tmp_path / "tetra_loop.obj"
        result = runner.invoke(main, ["subdivide", str(tetra_obj), str(out)])

        assert result.exit_code == 0, result.output
        assert "Loop Subdivision" in result.output
        assert "DONE" in result.output
        refined = load_mesh(out)
        assert refined.n_vertices == 10
        assert refined.n_faces == 16

    def test_quality_flag(self, runner, tetra_obj, tmp_path):
        out = tmp_path / "tetra_loop.obj"
        result = runner.invoke(main, ["subdivide", str(tetra_obj), str(out), "--quality"])
        assert result.exit_code == 0, result.output
        assert "Input Quality" in result.output
        assert "Mesh Quality Report (16 Faces)" in result.output

    def test_refuses_to_overwrite(self, runner, tetra_obj, tmp_path):
        out = tmp_path / "exists.obj"
        out.write_text("")
        result = runner.invoke(main, ["subdivide", str(tetra_obj), str(out)])
        assert result.exit_code == 1
        assert "Output file exists" in result.output

    def test_non_manifold_input(self, runner, tmp_path):
        bad = tmp_path / "fan.obj"
        bad.write_text(
            "v 0 0 0\nv 1 0 0\nv 0 1 0\nv 0 -1 0\nv 0 0 1\n"
            "f 1 2 3\nf 1 2 4\nf 1 2 5\n"
        )
        result = runner.invoke(main, ["subdivide", str(bad), str(tmp_path / "out.obj")])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_bowtie_reports_vertex(self, runner, tmp_path):
        src = tmp_path / "bowtie.obj"
        src.write_text(
            "v 0 0 0\nv 1 0 0\nv 0 1 0\nv -1 0 0\nv 0 -1 0\n"
            "f 1 2 3\nf 1 4 5\n"
        )
        out = tmp_path / "out.obj"
        result = runner.invoke(main, ["subdivide", str(src), str(out)])
        assert result.exit_code == 1
        assert "vertex 1" in result.output
        assert not out.exists()

    def test_low_valence_reports_vertex(self, runner, tmp_path):
        src = tmp_path / "pillow.obj"
        src.write_text("v 0 0 0\nv 1 0 0\nv 0 1 0\nf 1 2 3\nf 1 3 2\n")
        out = tmp_path / "out.obj"
        result = runner.invoke(main, ["subdivide", str(src), str(out)])
        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert "vertex 1" in result.output
        assert "valence 2" in result.output
        assert not out.exists()


class TestInfo:
    def test_prints_counts(self, runner, tetra_obj):
        result = runner.invoke(main, ["info", str(tetra_obj)])
        assert result.exit_code == 0, result.output
        assert "Faces:          4" in result.output
        assert "Closed:         yes" in result.output

    def test_plot(self, runner, tetra_obj, tmp_path):
        png = tmp_path / "hist.png"
        result = runner.invoke(main, ["info", str(tetra_obj), "--plot", str(png)])
        assert result.exit_code == 0, result.output
        assert png.exists()


def test_version(runner):
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "loopmesh" in result.output
