"""
ex01_single_triangle.py
-----------------------
Goal: Refine one triangle and watch the 1 -> 4 pattern appear.
Every edge is a boundary edge, so each new vertex lands on an exact midpoint.
"""
from loopmesh import Mesh, refine_loop


def run_triangle_demo():
    print("--- 1. Building the Triangle ---")
    mesh = Mesh.from_arrays([[0.0, 0.0, 0.0], [2.0, 0.0, 0.0], [0.0, 2.0, 0.0]], [[0, 1, 2]])
    print(mesh)
    for v in mesh.vertices.values():
        print(f"  {v}")

    print("\n--- 2. One Loop Step ---")
    refine_loop(mesh)
    print(mesh)

    print("\n--- 3. Result ---")
    for v in mesh.vertices.values():
        tag = "even" if v.id <= 3 else "odd "
        print(f"  [{tag}] {v}")
    for f in mesh.faces.values():
        print(f"  {f}")


if __name__ == "__main__":
    run_triangle_demo()
