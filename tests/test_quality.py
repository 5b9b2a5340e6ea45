"""Tests for MeshQuality."""

import math

import pytest
from matplotlib.figure import Figure

from loopmesh import Mesh, refine_loop
from loopmesh.quality import MeshQuality


@pytest.fixture
def equilateral():
    h = math.sqrt(3.0) / 2.0
    return Mesh.from_arrays([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.5, h, 0.0]], [[0, 1, 2]])


def test_equilateral_metrics(equilateral):
    stats = MeshQuality(equilateral).summary()
    assert stats["faces"] == 1
    assert stats["total_area"] == pytest.approx(math.sqrt(3.0) / 4.0)
    assert stats["min_angle"] == pytest.approx(60.0)
    assert stats["max_aspect_ratio"] == pytest.approx(1.0)


def test_refined_center_face_is_equilateral(equilateral):
    refine_loop(equilateral)
    inspector = MeshQuality(equilateral).analyze()
    assert len(inspector.ids) == 4

    center = next(f for f in equilateral.faces.values() if min(f.vertex_ids) > 3)
    area, min_angle, aspect_ratio = inspector._compute_single_face(center)
    assert area == pytest.approx(math.sqrt(3.0) / 16.0)
    assert min_angle == pytest.approx(60.0)
    assert aspect_ratio == pytest.approx(1.0)


def test_empty_mesh_summary():
    assert MeshQuality(Mesh()).summary() == {"faces": 0}


def test_print_report(tetrahedron, capsys):
    MeshQuality(tetrahedron).print_report()
    out = capsys.readouterr().out
    assert "Mesh Quality Report (4 Faces)" in out
    assert "Min Angle" in out


def test_plot_histograms_returns_figure(icosahedron):
    fig = MeshQuality(icosahedron).plot_histograms()
    assert isinstance(fig, Figure)
    assert len(fig.axes) >= 3
