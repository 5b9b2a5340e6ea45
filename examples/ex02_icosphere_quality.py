"""
ex02_icosphere_quality.py
-------------------------
Goal: Refine an icosahedron twice, one step at a time, and compare quality.
      - Loop subdivision is approximating: the surface shrinks toward the hull centre.
"""
import numpy as np
import trimesh

from loopmesh import refine_loop
from loopmesh.io import mesh_from_trimesh, mesh_to_trimesh
from loopmesh.quality import MeshQuality


def radius_range(mesh):
    points, _, _ = mesh.to_arrays()
    r = np.linalg.norm(points, axis=1)
    return r.min(), r.max()


def run():
    mesh = mesh_from_trimesh(trimesh.creation.icosahedron())

    for step in range(3):
        r_min, r_max = radius_range(mesh)
        print(f"Step {step}: {mesh}  radius [{r_min:.4f}, {r_max:.4f}]")
        MeshQuality(mesh).print_report()
        print("")
        if step < 2:
            refine_loop(mesh)

    tm = mesh_to_trimesh(mesh)
    print(f"Watertight: {tm.is_watertight}, volume = {tm.volume:.4f}")

    MeshQuality(mesh).plot_histograms(show=True)


if __name__ == "__main__":
    run()
