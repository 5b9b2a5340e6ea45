# loopmesh/__init__.py

__version__ = "0.1.0"

# Import Primitives
from .topology import Vertex, HalfEdge, Edge, Face

# Import the Mesh class
from .mesh import Mesh

from .errors import MeshTopologyError, MissingPositionError, StageOrderError
from .refine import refine_loop, LoopSubdivider, Stage
from .io import load_mesh, save_mesh
