"""
loopmesh/io.py
--------------
Exchange between Mesh and files on disk, through trimesh.

Vertex order is preserved in both directions, so vertex ids map to file rows
(id 1 is the first 'v' record of an OBJ file). Texture coordinates travel as
the per-vertex 'uv' trait.
"""
import logging
from pathlib import Path

import trimesh
from trimesh.exchange.obj import export_obj

from .mesh import Mesh

logger = logging.getLogger(__name__)

# Formats that store no shared vertex indices
UNINDEXED_SUFFIXES = (".stl",)


def mesh_from_trimesh(tm):
    ''' Builds a Mesh from a trimesh.Trimesh, keeping vertex and face order. '''
    uvs = getattr(tm.visual, 'uv', None)
    if uvs is not None and len(uvs) != len(tm.vertices):
        logger.warning('Ignoring %d uv coordinates for %d vertices', len(uvs), len(tm.vertices))
        uvs = None
    return Mesh.from_arrays(tm.vertices, tm.faces, uvs=uvs)


def mesh_to_trimesh(mesh):
    ''' Converts a Mesh to a trimesh.Trimesh without merging or reordering. '''
    points, faces, uvs = mesh.to_arrays()
    visual = None
    if uvs is not None:
        visual = trimesh.visual.TextureVisuals(uv=uvs)
    return trimesh.Trimesh(vertices=points, faces=faces, visual=visual, process=False)


def load_mesh(path):
    """
    Load a triangle mesh from any format trimesh can read.

    STL files repeat the corners of every triangle, so their vertices are
    welded by position; other formats keep the file's vertex order.

    Args:
        path: Path to the mesh file

    Returns:
        Mesh with vertex ids 1..N in file order (welded order for STL).
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Mesh file not found: {path}")

    logger.info("Loading mesh: %s", path)
    tm = trimesh.load_mesh(str(path), process=False, maintain_order=True)
    if path.suffix.lower() in UNINDEXED_SUFFIXES:
        n_raw = len(tm.vertices)
        tm.merge_vertices()
        logger.debug("Welded %d corners into %d vertices", n_raw, len(tm.vertices))
    mesh = mesh_from_trimesh(tm)
    logger.info("  Loaded %d vertices, %d faces", mesh.n_vertices, mesh.n_faces)
    return mesh


def save_mesh(mesh, path):
    """
    Save a Mesh; the format follows the file extension.

    Args:
        mesh: Mesh to save
        path: Output file path
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tm = mesh_to_trimesh(mesh)
    if path.suffix.lower() == '.obj':
        text = export_obj(
            tm, include_normals=False, include_texture=tm.visual.kind == 'texture',
            write_texture=False)
        path.write_text(text)
    else:
        tm.export(str(path))
    logger.info("Saved mesh: %s (%d vertices, %d faces)", path, mesh.n_vertices, mesh.n_faces)
