import re

import numpy as np

# Establish a tolerance for avoiding floating point errors in equality checks
GEOM_TOL = 1e-12

# Trait key holding per-vertex texture coordinates
UV_TRAIT_KEY = 'uv'


class Vertex:
    ''' Represents a topological vertex of a triangulated surface with 3D coordinates.

    This class uses `__slots__` for memory optimization, as surface meshes often
    hold hundreds of thousands of vertex instances. A vertex knows every edge
    incident to it (keyed by the sorted vertex-id pair of the edge), which is
    enough to recover its half-edges and its boundary status without storing
    a separate flag that could go stale while the mesh is edited.

    Attributes:
        id (int):  Unique, stable integer identifier for the vertex
        x (float): The global X-coordinate
        y (float): The global Y-coordinate
        z (float): The global Z-coordinate
        trait (str): Free-form attribute string, e.g. 'uv=(0.5 0.25)'.
            Not interpreted by the refinement itself.
        edges (dict): Edge key -> Edge for every edge touching this vertex.
    '''
    __slots__ = ['id', 'x', 'y', 'z', 'trait', 'edges']

    def __init__(self, vid, x, y, z, trait=''):
        self.id = int(vid)
        self.x  = float(x)
        self.y  = float(y)
        self.z  = float(z)
        self.trait = trait
        self.edges = {}

    @property
    def is_boundary(self):
        ''' True if any incident edge has only one incident face. '''
        return any(e.is_boundary for e in self.edges.values())

    @property
    def valence(self):
        return len(self.edges)

    def to_array(self):
        ''' Returns specific coordinates as a numpy array for calculation. '''
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    def update_from_array(self, arr):
        ''' Updates coordinates from a numpy array result. '''
        self.x = float(arr[0])
        self.y = float(arr[1])
        self.z = float(arr[2])

    def __repr__(self):
        return (f'Vertex(id = {self.id:4d}: x = {self.x:10.4f}, '
                f'y = {self.y:10.4f}, z = {self.z:10.4f})')


class HalfEdge:
    ''' One directed side of an edge, bound to exactly one face.

    Faces are wound counter-clockwise, so walking `next` from any half-edge
    visits the three sides of its face in order.
    '''
    __slots__ = ['source', 'target', 'face', 'next', 'prev', 'twin', 'edge']

    def __init__(self, source, target, face):
        self.source = source
        self.target = target
        self.face = face
        self.next = None
        self.prev = None
        self.twin = None
        self.edge = None

    @property
    def key(self):
        return (self.source.id, self.target.id)

    def rotate_about_target(self):
        ''' Next incoming half-edge of the target, turning clockwise.
            Returns None when the walk runs off a boundary. '''
        return self.next.twin

    def ccw_rotate_about_target(self):
        ''' Next incoming half-edge of the target, turning counter-clockwise. '''
        if self.twin is None:
            return None
        return self.twin.prev

    def rotate_about_source(self):
        ''' Next outgoing half-edge of the source, turning clockwise. '''
        if self.twin is None:
            return None
        return self.twin.next

    def __repr__(self):
        return f'HalfEdge({self.source.id} -> {self.target.id}, face = {self.face.id})'


class Edge:
    ''' Represents an undirected connection between two Vertices.

    Attributes:
        key (tuple): Sorted (id_a, id_b) pair, the stable identity of the edge.
        vertex_a (Vertex): Endpoint with the smaller id.
        vertex_b (Vertex): Endpoint with the larger id.
        halfedges (list): The 0-2 half-edges currently bound to this edge.
    '''
    __slots__ = ['key', 'vertex_a', 'vertex_b', 'halfedges']

    def __init__(self, key, vertex_a, vertex_b):
        self.key = key
        self.vertex_a = vertex_a
        self.vertex_b = vertex_b
        self.halfedges = []

    @property
    def is_boundary(self):
        return len(self.halfedges) == 1

    def halfedge(self, i):
        ''' Returns half-edge i (0 or 1) or None if that side has no face. '''
        if i < len(self.halfedges):
            return self.halfedges[i]
        return None

    @property
    def vertices(self):
        ''' Endpoints ordered along halfedge(0): (source, target). '''
        if self.halfedges:
            he = self.halfedges[0]
            return he.source, he.target
        return self.vertex_a, self.vertex_b

    @property
    def midpoint(self):
        ''' Returns the (x, y, z) midpoint as a numpy array. '''
        return 0.5 * (self.vertex_a.to_array() + self.vertex_b.to_array())

    def __repr__(self):
        return (f'Edge(Vertex A ID: {self.vertex_a.id:3d}, '
                f'Vertex B ID: {self.vertex_b.id:3d}, '
                f'faces = {len(self.halfedges)})')


class Face:
    ''' Represents a triangular face of the surface.

    The face owns three half-edges linked in a counter-clockwise cycle;
    `halfedge` is the one leaving the first vertex.

    Attributes:
        id (int): Unique, stable integer identifier for the face.
        halfedge (HalfEdge): Entry point into the face's half-edge cycle.
    '''
    __slots__ = ['id', 'halfedge']

    def __init__(self, fid):
        self.id = int(fid)
        self.halfedge = None

    @property
    def halfedges(self):
        he = self.halfedge
        return (he, he.next, he.next.next)

    @property
    def vertices(self):
        return tuple(he.source for he in self.halfedges)

    @property
    def vertex_ids(self):
        return tuple(he.source.id for he in self.halfedges)

    @property
    def area(self):
        p1, p2, p3 = (v.to_array() for v in self.vertices)
        return 0.5 * np.linalg.norm(np.cross(p2 - p1, p3 - p1))

    def __repr__(self):
        return f"Face(id={self.id}, vertices={self.vertex_ids})"


_TRAIT_PATTERN = r'\b{}=\(([^)]*)\)'


def get_trait_value(trait, key):
    ''' Returns the text stored under `key` in a 'key=(value) key2=(value2)'
        trait string, or '' if the key is absent. '''
    if not trait:
        return ''
    match = re.search(_TRAIT_PATTERN.format(re.escape(key)), trait)
    return match.group(1) if match else ''


def set_trait_value(trait, key, value):
    ''' Returns a copy of `trait` with `key` set to `value`. '''
    entry = f'{key}=({value})'
    pattern = _TRAIT_PATTERN.format(re.escape(key))
    if trait and re.search(pattern, trait):
        return re.sub(pattern, lambda _: entry, trait)
    return f'{trait} {entry}'.strip() if trait else entry


def get_uv(vertex):
    ''' Parses the vertex's uv trait into a numpy array, or None. '''
    text = get_trait_value(vertex.trait, UV_TRAIT_KEY)
    if not text:
        return None
    return np.array([float(s) for s in text.split()], dtype=np.float64)


def set_uv(vertex, uv):
    vertex.trait = set_trait_value(vertex.trait, UV_TRAIT_KEY,
                                   ' '.join(repr(float(c)) for c in uv))
