import logging

import numpy as np

from .errors import MeshTopologyError
from .topology import Vertex, HalfEdge, Edge, Face, get_uv, set_uv

logger = logging.getLogger(__name__)


def edge_key(vid_a, vid_b):
    ''' Order-independent identity of the edge between two vertex ids. '''
    return (vid_a, vid_b) if vid_a < vid_b else (vid_b, vid_a)


# --- The Mesh Class ---
class Mesh:
    ''' Half-edge triangle mesh with id-keyed storage.

    Vertices and faces are stored by integer id, edges by their sorted
    vertex-id pair and half-edges by their directed (source, target) pair.
    Ids are handed out by monotonically increasing counters, so a vertex
    created after `max_vertex_id` was read always has a larger id.
    '''

    def __init__(self):
        self.vertices = {}
        self.edges = {}
        self.halfedges = {}
        self.faces = {}
        self.vertex_counter = 0
        self.face_counter = 0

    # --- Construction ---
    def add_vertex(self, x, y, z, vid=None, trait=''):
        """Creates a vertex and returns the object."""
        if vid is None:
            self.vertex_counter += 1
            vid = self.vertex_counter
        else:
            vid = int(vid)
            if vid in self.vertices:
                raise MeshTopologyError('duplicate vertex id', 'vertex', vid)
            self.vertex_counter = max(self.vertex_counter, vid)
        v = Vertex(vid, x, y, z, trait)
        self.vertices[v.id] = v
        return v

    def create_face(self, vertex_ids, fid=None):
        ''' Creates a triangle from three vertex ids listed counter-clockwise.

        Raises MeshTopologyError if the triangle would break the manifold:
        a directed half-edge that is already used (inconsistent orientation
        or a third face on an edge) or an edge that already has two faces.
        '''
        ids = tuple(int(v) for v in vertex_ids)
        if len(ids) != 3:
            raise MeshTopologyError(f'only triangles are supported, got {len(ids)} vertices',
                                    'face', fid)
        if len(set(ids)) != 3:
            raise MeshTopologyError(f'repeated vertex in {ids}', 'face', fid)
        for vid in ids:
            if vid not in self.vertices:
                raise MeshTopologyError(f'unknown vertex {vid}', 'face', fid)

        pairs = [(ids[i], ids[(i + 1) % 3]) for i in range(3)]
        for s, t in pairs:
            if (s, t) in self.halfedges:
                raise MeshTopologyError(
                    f'half-edge {s}->{t} already in use '
                    '(non-manifold edge or inconsistent orientation)',
                    'edge', edge_key(s, t))
            edge = self.edges.get(edge_key(s, t))
            if edge is not None and len(edge.halfedges) >= 2:
                raise MeshTopologyError('edge already has two faces', 'edge', edge.key)

        if fid is None:
            self.face_counter += 1
            fid = self.face_counter
        else:
            fid = int(fid)
            if fid in self.faces:
                raise MeshTopologyError('duplicate face id', 'face', fid)
            self.face_counter = max(self.face_counter, fid)

        face = Face(fid)
        hes = [HalfEdge(self.vertices[s], self.vertices[t], face) for s, t in pairs]
        for i, he in enumerate(hes):
            he.next = hes[(i + 1) % 3]
            he.prev = hes[(i - 1) % 3]

            edge = self._register_edge(he.source.id, he.target.id)
            edge.halfedges.append(he)
            he.edge = edge

            twin = self.halfedges.get((he.target.id, he.source.id))
            if twin is not None:
                he.twin = twin
                twin.twin = he
            self.halfedges[he.key] = he

        face.halfedge = hes[0]
        self.faces[face.id] = face
        return face

    def _register_edge(self, vid_a, vid_b):
        """
        Internal helper to track edges.
        Ensures every unique vertex pair maps to exactly one Edge object.
        """
        key = edge_key(vid_a, vid_b)

        if key not in self.edges:
            v_a = self.vertices[key[0]]
            v_b = self.vertices[key[1]]
            edge = Edge(key, v_a, v_b)
            self.edges[key] = edge
            v_a.edges[key] = edge
            v_b.edges[key] = edge

        return self.edges[key]

    def remove_face(self, face):
        ''' Deletes a face and its half-edges. Edges left without any
            half-edge are deleted too; vertices are always kept. '''
        for he in face.halfedges:
            del self.halfedges[he.key]
            if he.twin is not None:
                he.twin.twin = None
            edge = he.edge
            edge.halfedges.remove(he)
            if not edge.halfedges:
                del self.edges[edge.key]
                del edge.vertex_a.edges[edge.key]
                del edge.vertex_b.edges[edge.key]
        del self.faces[face.id]

    # --- Queries ---
    def lookup_edge(self, vid_a, vid_b):
        ''' Returns the Edge between two vertex ids, or None. '''
        return self.edges.get(edge_key(vid_a, vid_b))

    def incoming_halfedge(self, vertex):
        ''' Any half-edge that ends at `vertex`. '''
        for key in vertex.edges:
            other = key[0] if key[1] == vertex.id else key[1]
            he = self.halfedges.get((other, vertex.id))
            if he is not None:
                return he
        raise MeshTopologyError('vertex is not used by any face', 'vertex', vertex.id)

    def outgoing_halfedge(self, vertex):
        return self.incoming_halfedge(vertex).next

    def most_ccw_in_halfedge(self, vertex):
        ''' For a boundary vertex, the incoming half-edge lying on the boundary. '''
        he = self.incoming_halfedge(vertex)
        for _ in range(len(vertex.edges)):
            nxt = he.ccw_rotate_about_target()
            if nxt is None:
                return he
            he = nxt
        raise MeshTopologyError('no incoming boundary half-edge', 'vertex', vertex.id)

    def most_clw_out_halfedge(self, vertex):
        ''' For a boundary vertex, the outgoing half-edge lying on the boundary. '''
        he = self.outgoing_halfedge(vertex)
        for _ in range(len(vertex.edges)):
            nxt = he.rotate_about_source()
            if nxt is None:
                return he
            he = nxt
        raise MeshTopologyError('no outgoing boundary half-edge', 'vertex', vertex.id)

    @property
    def max_vertex_id(self):
        return max(self.vertices, default=0)

    @property
    def n_vertices(self):
        return len(self.vertices)

    @property
    def n_edges(self):
        return len(self.edges)

    @property
    def n_faces(self):
        return len(self.faces)

    @property
    def n_boundary_edges(self):
        return sum(1 for e in self.edges.values() if e.is_boundary)

    @property
    def is_closed(self):
        return self.n_boundary_edges == 0

    @property
    def euler_characteristic(self):
        return self.n_vertices - self.n_edges + self.n_faces

    # --- Editing ---
    def split_edge(self, edge):
        ''' Inserts a vertex at the midpoint of `edge` and returns it.

        Each incident triangle (s, t, w), with s->t the half-edge on `edge`,
        is replaced by (s, m, w), keeping the original face id, and (m, t, w)
        under a new id. Works for boundary edges (one incident face).
        '''
        a, b = edge.vertices
        wings = [(he.face.id, he.source.id, he.target.id, he.next.target.id)
                 for he in edge.halfedges]

        m = self.add_vertex(*edge.midpoint)
        uv_a, uv_b = get_uv(a), get_uv(b)
        if uv_a is not None and uv_b is not None and uv_a.shape == uv_b.shape:
            set_uv(m, 0.5 * (uv_a + uv_b))

        for fid, *_ in wings:
            self.remove_face(self.faces[fid])
        for fid, s, t, w in wings:
            self.create_face((s, m.id, w), fid)
            self.create_face((m.id, t, w))

        logger.debug('Split edge %s -> vertex %d', edge.key, m.id)
        return m

    # --- Array Bridge ---
    @classmethod
    def from_arrays(cls, points, faces, uvs=None):
        ''' Builds a mesh from an (N, 3) point array and an (M, 3) array of
            0-based vertex indices. Vertex and face ids start at 1. '''
        points = np.asarray(points, dtype=np.float64)
        faces = np.asarray(faces)
        if points.ndim != 2 or points.shape[1] != 3:
            raise ValueError(f'points must have shape (N, 3), got {points.shape}')
        if faces.ndim != 2 or faces.shape[1] != 3:
            raise MeshTopologyError(f'faces must have shape (M, 3), got {faces.shape}')

        mesh = cls()
        for i, p in enumerate(points):
            v = mesh.add_vertex(p[0], p[1], p[2])
            if uvs is not None:
                set_uv(v, uvs[i])
        for tri in faces:
            mesh.create_face([int(i) + 1 for i in tri])
        return mesh

    def to_arrays(self):
        ''' Returns (points, faces, uvs). Faces index rows of `points`, which
            follow the vertex insertion order; uvs is None unless every
            vertex carries one. '''
        index = {vid: i for i, vid in enumerate(self.vertices)}
        points = np.array([v.to_array() for v in self.vertices.values()],
                          dtype=np.float64).reshape(-1, 3)
        faces = np.array([[index[vid] for vid in f.vertex_ids] for f in self.faces.values()],
                         dtype=np.int64).reshape(-1, 3)

        uvs = [get_uv(v) for v in self.vertices.values()]
        if uvs and all(uv is not None for uv in uvs):
            uvs = np.array(uvs, dtype=np.float64)
        else:
            uvs = None
        return points, faces, uvs

    def __repr__(self):
        return (f'Mesh(vertices={self.n_vertices}, edges={self.n_edges}, '
                f'faces={self.n_faces})')
