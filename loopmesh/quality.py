"""
loopmesh/quality.py
-------------------
Tools for inspecting surface mesh fidelity before and after refinement.
Calculates metrics like Aspect Ratio, Minimum Angle, and Area per triangle.
"""
import numpy as np
import matplotlib.pyplot as plt

from .topology import GEOM_TOL


class MeshQuality:
    """
    Inspector class for a Mesh object.

    Usage:
        inspector = MeshQuality(mesh)
        inspector.analyze()
        inspector.print_report()
        inspector.plot_histograms()
    """
    def __init__(self, mesh):
        self.mesh = mesh
        # Metric Storage
        self.areas = np.array([])
        self.min_angles = np.array([])
        self.aspect_ratios = np.array([])
        self.ids = np.array([], dtype=np.int64)

        self._analyzed = False

    def analyze(self):
        """
        Iterates through all faces and computes metrics.
        """
        areas, min_angles, aspect_ratios, ids = [], [], [], []

        for face_id, face in self.mesh.faces.items():
            area, min_ang, ar = self._compute_single_face(face)

            ids.append(face_id)
            areas.append(area)
            min_angles.append(min_ang)
            aspect_ratios.append(ar)

        # Convert to numpy for easy stats
        self.areas = np.array(areas, dtype=np.float64)
        self.min_angles = np.array(min_angles, dtype=np.float64)
        self.aspect_ratios = np.array(aspect_ratios, dtype=np.float64)
        self.ids = np.array(ids, dtype=np.int64)

        self._analyzed = True
        return self

    def _compute_single_face(self, face):
        """ Helper: Returns (area, min_angle_deg, aspect_ratio) for one triangle. """
        p1, p2, p3 = (v.to_array() for v in face.vertices)

        # Edge lengths
        a = np.linalg.norm(p2 - p1)
        b = np.linalg.norm(p3 - p2)
        c = np.linalg.norm(p1 - p3)

        area = face.area
        s = (a + b + c) / 2.0

        # Aspect Ratio: circumradius over twice the inradius (1.0 for equilateral)
        if area > GEOM_TOL:
            r_in = area / s
            R_circ = (a * b * c) / (4 * area)
            ar = R_circ / (2 * r_in)
        else:
            ar = np.inf  # Degenerate

        # Angles (Cosine Rule)
        angles = []
        for edge_len, adj1, adj2 in [(a, b, c), (b, a, c), (c, a, b)]:
            denom = 2 * adj1 * adj2
            if denom > GEOM_TOL:
                cos_theta = (adj1**2 + adj2**2 - edge_len**2) / denom
                cos_theta = np.clip(cos_theta, -1.0, 1.0)
                angles.append(np.degrees(np.arccos(cos_theta)))
            else:
                angles.append(0.0)

        return area, min(angles), ar

    def summary(self):
        """ Returns the headline numbers as a dict. """
        if not self._analyzed: self.analyze()
        if len(self.ids) == 0:
            return {'faces': 0}
        return {
            'faces': int(len(self.ids)),
            'total_area': float(self.areas.sum()),
            'min_area': float(self.areas.min()),
            'max_area': float(self.areas.max()),
            'min_angle': float(self.min_angles.min()),
            'mean_min_angle': float(self.min_angles.mean()),
            'max_aspect_ratio': float(self.aspect_ratios.max()),
        }

    def print_report(self):
        """ Prints a summary to stdout. """
        stats = self.summary()

        print(f"--- Mesh Quality Report ({stats['faces']} Faces) ---")
        if stats['faces'] == 0:
            return

        print("Area:")
        print(f"  Total: {stats['total_area']:.4e}")
        print(f"  Min:   {stats['min_area']:.2e}")
        print(f"  Max:   {stats['max_area']:.2e}")

        min_ang = stats['min_angle']
        print(f"Min Angle: {min_ang:.2f} deg  ", end="")
        if min_ang < 10.0: print("[!] WARNING: Slivers Detected")
        elif min_ang < 20.0: print("[~] CAUTION: Low Quality")
        else: print("[OK] Good")

        max_ar = stats['max_aspect_ratio']
        print(f"Max Aspect Ratio: {max_ar:.2f}  ", end="")
        if max_ar > 10.0: print("[!] WARNING: Highly Stretched")
        elif max_ar > 3.0: print("[~] CAUTION")
        else: print("[OK]")

    def plot_histograms(self, show=False):
        """ Visualizes the distribution of quality metrics. Returns the Figure. """
        if not self._analyzed: self.analyze()

        fig, ax = plt.subplots(1, 3, figsize=(15, 4))

        # --- ROBUST HISTOGRAM HELPER ---
        def safe_hist(axis, data, color, title, xlabel, limit_line=None):
            data = data[np.isfinite(data)]
            if len(data) == 0: return

            # If all values are identical (Variance = 0), fixed bins crash.
            dmin, dmax = data.min(), data.max()
            if np.isclose(dmin, dmax):
                padding = max(1e-6, abs(dmin)*0.1)
                bins = np.linspace(dmin - padding, dmax + padding, 10)
                axis.hist(data, bins=bins, color=color, edgecolor='black')
            else:
                axis.hist(data, bins=20, color=color, edgecolor='black')

            axis.set_title(title)
            axis.set_xlabel(xlabel)
            if limit_line:
                axis.axvline(limit_line, color='red', linestyle='--', label='Limit')
                axis.legend()

        # 1. Min Angle
        safe_hist(ax[0], self.min_angles, 'skyblue',
                 "Minimum Angle (Target > 20°)", "Degrees", limit_line=20)

        # 2. Aspect Ratio
        safe_hist(ax[1], self.aspect_ratios, 'lightgreen',
                 "Aspect Ratio (Target < 3.0)", "Ratio", limit_line=3.0)

        # 3. Area
        safe_hist(ax[2], self.areas, 'salmon',
                 "Face Areas", "Area")

        fig.tight_layout()
        if show:
            plt.show()
        return fig
