"""Shared mesh fixtures."""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest
import trimesh

from loopmesh import Mesh
from loopmesh.io import mesh_from_trimesh

TETRA_POINTS = np.array([
    [0.0, 0.0, 0.0],
    [1.0, 0.0, 0.0],
    [0.0, 1.0, 0.0],
    [0.0, 0.0, 1.0],
])
# Outward (counter-clockwise seen from outside) winding
TETRA_FACES = np.array([
    [0, 2, 1],
    [0, 1, 3],
    [0, 3, 2],
    [1, 2, 3],
])


@pytest.fixture
def single_triangle():
    """One face, three boundary vertices and edges."""
    points = [[0.0, 0.0, 0.0], [2.0, 0.0, 0.0], [0.0, 2.0, 0.0]]
    return Mesh.from_arrays(points, [[0, 1, 2]])


@pytest.fixture
def unit_square():
    """Two triangles sharing the diagonal 1-3; four boundary edges."""
    points = [[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [1.0, 1.0, 0.0], [0.0, 1.0, 0.0]]
    return Mesh.from_arrays(points, [[0, 1, 2], [0, 2, 3]])


@pytest.fixture
def tetrahedron():
    return Mesh.from_arrays(TETRA_POINTS, TETRA_FACES)


@pytest.fixture
def icosahedron():
    return mesh_from_trimesh(trimesh.creation.icosahedron())


@pytest.fixture
def box():
    return mesh_from_trimesh(trimesh.creation.box())
