"""
loopmesh/refine.py
------------------
One step of Loop subdivision, performed in place on a half-edge Mesh.

The step runs in four strictly ordered phases:
    1. Even positions: new location for every original vertex.
    2. Odd positions:  new location for the split point of every original edge.
    3. Commit & split: write even positions, split every original edge and
       place the odd vertex; collect the spokes that need flipping.
    4. Flip:           rebuild the two faces around each collected spoke with
       the other diagonal, giving the canonical 1-to-4 triangle pattern.

Phases 1 and 2 only read the mesh and store their results in id-keyed maps,
so every new position is a function of the original mesh alone.
"""
import logging
import math
from collections import deque
from enum import Enum

from .errors import MeshTopologyError, MissingPositionError, StageOrderError

logger = logging.getLogger(__name__)

# Odd vertex stencil weights
ODD_EDGE_WEIGHT = 0.375
ODD_WING_WEIGHT = 0.125
ODD_BOUNDARY_WEIGHT = 0.5

# Even boundary vertex stencil weights
EVEN_BOUNDARY_NEIGHBOR_WEIGHT = 0.125
EVEN_BOUNDARY_SELF_WEIGHT = 0.75


def loop_beta(n):
    ''' Loop's per-neighbor weight for an interior vertex of valence n. '''
    if n < 3:
        raise ValueError(f'Interior valence must be at least 3, got {n}')
    c = 0.375 + 0.25 * math.cos(2.0 * math.pi / n)
    return (0.625 - c * c) / n


def even_weights(n):
    ''' Returns (total neighbor weight, self weight) for valence n. Sums to 1. '''
    beta = loop_beta(n)
    return n * beta, 1.0 - n * beta


# --- Phase 1: Even Positions ---
def _interior_even_position(mesh, vertex):
    start = mesh.incoming_halfedge(vertex)
    total = 0.0
    n = 0
    he = start
    while True:
        total = total + he.source.to_array()
        n += 1
        he = he.rotate_about_target()
        if he is None:
            raise MeshTopologyError('one-ring of interior vertex is open', 'vertex', vertex.id)
        if he is start:
            break
        if n > len(vertex.edges):
            raise MeshTopologyError('one-ring does not close (non-manifold vertex)',
                                    'vertex', vertex.id)
    if n != len(vertex.edges):
        raise MeshTopologyError(f'one-ring visits {n} of {len(vertex.edges)} neighbours '
                                '(non-manifold vertex)', 'vertex', vertex.id)
    if n < 3:
        raise MeshTopologyError(f'interior valence {n} < 3', 'vertex', vertex.id)

    beta = loop_beta(n)
    return beta * total + (1.0 - n * beta) * vertex.to_array()


def _boundary_even_position(mesh, vertex):
    n_boundary = sum(1 for e in vertex.edges.values() if e.is_boundary)
    if n_boundary != 2:
        raise MeshTopologyError(f'boundary vertex has {n_boundary} boundary edges, expected 2',
                                'vertex', vertex.id)
    neighbor_1 = mesh.most_ccw_in_halfedge(vertex).source
    neighbor_2 = mesh.most_clw_out_halfedge(vertex).target
    return (EVEN_BOUNDARY_NEIGHBOR_WEIGHT * (neighbor_1.to_array() + neighbor_2.to_array())
            + EVEN_BOUNDARY_SELF_WEIGHT * vertex.to_array())


def compute_even_positions(mesh):
    ''' Returns {vertex_id: new position} for every vertex. Read-only. '''
    logger.info('Calculating even vertex positions...')
    even = {}
    for vid, vertex in mesh.vertices.items():
        if not vertex.edges:
            raise MeshTopologyError('vertex is not used by any face', 'vertex', vid)
        if vertex.is_boundary:
            even[vid] = _boundary_even_position(mesh, vertex)
        else:
            even[vid] = _interior_even_position(mesh, vertex)
    return even


# --- Phase 2: Odd Positions ---
def compute_odd_positions(mesh):
    ''' Returns {edge_key: split point position} for every edge. Read-only. '''
    logger.info('Calculating odd vertex positions...')
    odd = {}
    for key, edge in mesh.edges.items():
        a, b = edge.vertices
        n_faces = len(edge.halfedges)
        if n_faces == 2:
            c = edge.halfedge(0).next.target
            d = edge.halfedge(1).next.target
            odd[key] = (ODD_EDGE_WEIGHT * (a.to_array() + b.to_array())
                        + ODD_WING_WEIGHT * (c.to_array() + d.to_array()))
        elif n_faces == 1:
            odd[key] = ODD_BOUNDARY_WEIGHT * (a.to_array() + b.to_array())
        else:
            raise MeshTopologyError(f'edge has {n_faces} incident faces', 'edge', key)
    return odd


# --- Phase 3: Commit & Split ---
def commit_even_positions(mesh, even):
    ''' Moves every vertex to its even position, draining `even`. '''
    logger.info('Updating even vertices...')
    for vid, vertex in mesh.vertices.items():
        try:
            pos = even.pop(vid)
        except KeyError:
            raise MissingPositionError('vertex', vid) from None
        vertex.update_from_array(pos)


def split_edges(mesh, odd, max_original_id):
    ''' Splits every edge present on entry and places the odd vertices.

    `odd` is drained as edges are split. Returns the keys of the spoke
    edges (new vertex to pre-existing wing vertex) that must be flipped.
    Wings with an id above `max_original_id` were created by this pass and
    their spokes are already correct.
    '''
    logger.info('Splitting edges and creating odd vertices...')
    # Snapshot by key: splitting re-creates neighbouring boundary edges
    to_split = deque(mesh.edges)
    to_flip = []

    while to_split:
        key = to_split.popleft()
        edge = mesh.edges.get(key)
        if edge is None:
            raise MeshTopologyError('edge vanished before it was split', 'edge', key)
        wings = []
        for i in (0, 1):
            he = edge.halfedge(i)
            wings.append(he.next.target if he is not None else None)

        new_v = mesh.split_edge(edge)
        try:
            pos = odd.pop(key)
        except KeyError:
            raise MissingPositionError('edge', key) from None
        new_v.update_from_array(pos)

        for wing in wings:
            if wing is not None and wing.id <= max_original_id:
                to_flip.append(mesh.lookup_edge(new_v.id, wing.id).key)

    return to_flip


# --- Phase 4: Flip ---
def flip_edge(mesh, edge):
    ''' Replaces the diagonal `edge` of its two triangles by the other one.
        Both face ids are kept. Returns the new Edge. '''
    if len(edge.halfedges) != 2:
        raise MeshTopologyError('only interior edges can be flipped', 'edge', edge.key)
    he_0, he_1 = edge.halfedges
    a, b = he_0.source, he_0.target
    c = he_0.next.target
    d = he_1.next.target
    f1_id, f2_id = he_0.face.id, he_1.face.id

    mesh.remove_face(he_0.face)
    mesh.remove_face(he_1.face)
    mesh.create_face((a.id, d.id, c.id), f1_id)
    mesh.create_face((b.id, c.id, d.id), f2_id)
    return mesh.lookup_edge(c.id, d.id)


def flip_edges(mesh, candidates):
    logger.info('Correcting select edges by flipping...')
    for key in candidates:
        edge = mesh.edges.get(key)
        if edge is None:
            raise MeshTopologyError('flip candidate no longer exists', 'edge', key)
        flip_edge(mesh, edge)


# --- Orchestration ---
class Stage(Enum):
    INITIAL = 0
    EVEN_COMPUTED = 1
    ODD_COMPUTED = 2
    COMMITTED = 3
    SPLIT = 4
    FLIP_CORRECTED = 5
    DONE = 6


class LoopSubdivider:
    """
    Drives one Loop subdivision step over a mesh, phase by phase.

    Usage:
        sub = LoopSubdivider(mesh)
        sub.run()

    The individual phases can also be called one at a time (compute_even,
    compute_odd, commit, split, flip, finish); each must follow the previous
    one, otherwise StageOrderError is raised.
    """
    def __init__(self, mesh):
        self.mesh = mesh
        self.stage = Stage.INITIAL
        # Frozen before any topology change: ids above this belong to odd vertices
        self.max_original_id = mesh.max_vertex_id

        self._even = None
        self._odd = None
        self._to_flip = None

    def _advance(self, expected, new_stage):
        if self.stage is not expected:
            raise StageOrderError(f'Cannot enter {new_stage.name} from {self.stage.name} '
                                  f'(expected {expected.name})')
        self.stage = new_stage

    def compute_even(self):
        self._advance(Stage.INITIAL, Stage.EVEN_COMPUTED)
        self._even = compute_even_positions(self.mesh)

    def compute_odd(self):
        self._advance(Stage.EVEN_COMPUTED, Stage.ODD_COMPUTED)
        self._odd = compute_odd_positions(self.mesh)

    def commit(self):
        self._advance(Stage.ODD_COMPUTED, Stage.COMMITTED)
        commit_even_positions(self.mesh, self._even)
        self._even = None

    def split(self):
        self._advance(Stage.COMMITTED, Stage.SPLIT)
        self._to_flip = split_edges(self.mesh, self._odd, self.max_original_id)
        self._odd = None
        logger.debug('%d spoke edges queued for flipping', len(self._to_flip))

    def flip(self):
        self._advance(Stage.SPLIT, Stage.FLIP_CORRECTED)
        flip_edges(self.mesh, self._to_flip)
        self._to_flip = None

    def finish(self):
        self._advance(Stage.FLIP_CORRECTED, Stage.DONE)
        return self.mesh

    def run(self):
        self.compute_even()
        self.compute_odd()
        self.commit()
        self.split()
        self.flip()
        return self.finish()


def refine_loop(mesh):
    """
    Performs one step of Loop subdivision on `mesh` in place.
    Every triangle becomes four; returns the same Mesh object.
    """
    n_v, n_e, n_f = mesh.n_vertices, mesh.n_edges, mesh.n_faces
    LoopSubdivider(mesh).run()
    logger.info('Loop subdivision: %d/%d/%d -> %d/%d/%d (vertices/edges/faces)',
                n_v, n_e, n_f, mesh.n_vertices, mesh.n_edges, mesh.n_faces)
    return mesh
