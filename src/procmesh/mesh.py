"""
Mesh Container
==============
Owns the live faces and the tracked vertices of a procedural mesh.

Every face is created and destroyed here, so the vertex/edge/face
back-references stay consistent between operator calls. The operators
themselves live in :mod:`procmesh.operators` and are reachable both as free
functions and as methods of :class:`Mesh`.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import TYPE_CHECKING

import numpy as np

from procmesh.config import ALL_UV_CHANNELS, COLOR_COMPONENTS, DEFAULT_AUTO_SMOOTH_ANGLE, DEFAULT_ISLAND_VALUE
from procmesh.export import MeshBuffers, export
from procmesh.operators.extrude import extrude, extrude_along_normals
from procmesh.operators.marching_triangles import IsoSplitResult, split_by_scalar_field
from procmesh.operators.smoothing import auto_smooth, set_smooth
from procmesh.operators.subdivide import subdivide
from procmesh.operators.triangulate import triangulate
from procmesh.topology import Edge, Face, TriangulationMode, Vertex

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


class Mesh:
    """
    Topologically consistent polygon mesh.

    Faces and vertices are kept in insertion-ordered arenas so that every
    traversal (operators, export) is deterministic.
    """
    def __init__(self) -> None:
        """Initialize an empty mesh."""
        self._faces: dict[Face, None] = {}
        self._vertices: dict[Vertex, None] = {}

    def __repr__(self) -> str:
        """String representation of the mesh."""
        return f"{self.__class__.__name__}(faces={self.number_of_faces}, vertices={self.number_of_vertices})"

    def __contains__(self, item: object) -> bool:
        return item in self._faces or item in self._vertices

    @property
    def faces(self) -> list[Face]:
        """Live faces, in creation order."""
        return list(self._faces)

    @property
    def vertices(self) -> list[Vertex]:
        """Tracked vertices, in the order they were first used."""
        return list(self._vertices)

    @property
    def edges(self) -> list[Edge]:
        """Unique edges used by the live faces."""
        result: dict[Edge, None] = {}
        for face in self._faces:
            for edge in face.edges:
                result[edge] = None
        return list(result)

    @property
    def number_of_faces(self) -> int:
        return len(self._faces)

    @property
    def number_of_vertices(self) -> int:
        return len(self._vertices)

    # ------------------------------------------------------------------
    # Face creation / removal
    # ------------------------------------------------------------------
    def add_face(
        self,
        vertices: Iterable[Vertex],
        *,
        submesh: int = 0,
        triangulation: TriangulationMode = TriangulationMode.FAN,
    ) -> Face:
        """
        Create a face from existing vertices and add it to the mesh.

        Edges already joining a pair of the given vertices are reused, so
        adjacent faces share the same edge objects.

        Args:
            vertices: Boundary of the polygon, in winding order.
            submesh: Submesh the face is exported to.
            triangulation: How the face is split into triangles.

        Returns:
            The new face.
        """
        vertices = list(vertices)
        for vertex in vertices:
            if not isinstance(vertex, Vertex):
                raise TypeError(f"Faces are built from Vertex instances, got {type(vertex).__name__}.")

        face = Face(vertices)
        face.submesh = submesh
        face.triangulation = TriangulationMode(triangulation)
        self._faces[face] = None
        self._track(face)
        return face

    def add_polygon(self, positions: Iterable[npt.ArrayLike], **kwargs) -> Face:
        """Create a face on fresh vertices placed at ``positions``."""
        return self.add_face([Vertex(position) for position in positions], **kwargs)

    def rewire_face(self, face: Face, mapping: Mapping[Vertex, Vertex]) -> None:
        """
        Swap some vertices of a live face, carrying its corner data along.

        Args:
            face: Face of this mesh.
            mapping: Old vertex -> new vertex. Vertices not in the mapping are kept.
        """
        self._require_face(face)
        face.replace_vertices(mapping)
        self._track(face)

    def remove_face(self, face: Face) -> None:
        """
        Remove a face and detach it from its vertices and edges.

        Vertices left without faces stay tracked.
        """
        self._require_face(face)
        del self._faces[face]
        face.release()

    def remove_vertex(self, vertex: Vertex) -> None:
        """Remove every face using ``vertex``, then stop tracking it."""
        for face in list(vertex.faces):
            self.remove_face(face)
        self._vertices.pop(vertex, None)

    def _track(self, face: Face) -> None:
        for vertex in face.vertices:
            self._vertices[vertex] = None

    def _require_face(self, face: Face) -> None:
        if face not in self._faces:
            raise ValueError(f"{face} is not part of this mesh.")

    # ------------------------------------------------------------------
    # Whole-mesh operations
    # ------------------------------------------------------------------
    def merge_from(self, other: Mesh) -> dict[Vertex, Vertex]:
        """
        Deep-clone the geometry of another mesh into this one.

        Vertices, faces and edges are fresh objects; smooth flags, corner UVs
        and colors, attributes, submesh tags and triangulation modes are copied.

        Returns:
            Mapping from the vertices of ``other`` to their clones.
        """
        clones: dict[Vertex, Vertex] = {v: Vertex(v.position) for v in other.vertices}

        for face in other.faces:
            clone = self.add_face(
                [clones[v] for v in face.vertices],
                submesh=face.submesh,
                triangulation=face.triangulation,
            )
            for vertex in face.vertices:
                clone.copy_corner_from(face, vertex, target=clones[vertex])
            clone.attributes.update(face.attributes)

            for edge in face.edges:
                cloned_edge = clones[edge.vertex0].edge_with(clones[edge.vertex1])
                cloned_edge.smooth = edge.smooth

        for vertex in clones.values():
            self._vertices[vertex] = None

        logger.debug(f"Merged {other.number_of_faces} faces and {len(clones)} vertices.")
        return clones

    def copy(self) -> Mesh:
        """Independent deep copy of the mesh."""
        mesh = Mesh()
        mesh.merge_from(self)
        return mesh

    @classmethod
    def from_arrays(
        cls,
        positions: npt.ArrayLike,
        submeshes: Mapping[int, npt.ArrayLike] | Sequence[npt.ArrayLike],
        uvs: Mapping[int, npt.ArrayLike] | None = None,
        colors: npt.ArrayLike | None = None,
    ) -> Mesh:
        """
        Rebuild the topology of a flat triangle buffer.

        Identical positions are merged into shared vertices. An edge is smooth
        only if every face using it refers to its endpoints through the same
        buffer indices, so seams baked into the buffer stay sharp.

        Args:
            positions: (N, 3) vertex positions.
            submeshes: Triangle index lists, keyed (or ordered) by submesh id.
            uvs: Optional per-channel (N, 2) UV arrays.
            colors: Optional (N, 4) RGBA colors.

        Raises:
            ValueError: If the arrays are inconsistent.

        Returns:
            The new mesh.
        """
        positions = np.asarray(positions, dtype=np.float64).reshape(-1, 3)
        n = positions.shape[0]
        if not isinstance(submeshes, Mapping):
            submeshes = dict(enumerate(submeshes))

        uv_arrays: dict[int, npt.NDArray[np.float64]] = {}
        for channel, values in (uvs or {}).items():
            values = np.asarray(values, dtype=np.float64)
            if values.size == 0:
                continue
            values = values.reshape(-1, 2)
            if values.shape[0] != n:
                raise ValueError(f"UV channel {channel} has {values.shape[0]} entries, expected {n}.")
            uv_arrays[channel] = values

        color_array = None
        if colors is not None:
            color_array = np.asarray(colors, dtype=np.float64)
            if color_array.size == 0:
                color_array = None
            else:
                color_array = color_array.reshape(-1, COLOR_COMPONENTS)
                if color_array.shape[0] != n:
                    raise ValueError(f"Color array has {color_array.shape[0]} entries, expected {n}.")

        shared: dict[tuple[float, ...], Vertex] = {}
        vertices: list[Vertex] = []
        for position in positions:
            key = tuple(float(c) for c in position)
            if key not in shared:
                shared[key] = Vertex(position)
            vertices.append(shared[key])

        mesh = cls()
        corner_indices: dict[tuple[Face, Vertex], int] = {}
        skipped = 0

        for submesh, indices in submeshes.items():
            indices = np.asarray(indices, dtype=np.int64).reshape(-1)
            if indices.size % 3 != 0:
                raise ValueError(f"Submesh {submesh} has {indices.size} indices, not a multiple of 3.")
            if indices.size and (indices.min() < 0 or indices.max() >= n):
                raise ValueError(f"Submesh {submesh} references vertices outside [0, {n - 1}].")

            for triangle in indices.reshape(-1, 3):
                corners = [vertices[i] for i in triangle]
                if len({id(v) for v in corners}) != 3:
                    skipped += 1
                    continue

                face = mesh.add_face(corners, submesh=int(submesh))
                for index, vertex in zip(triangle, corners):
                    corner_indices[(face, vertex)] = int(index)
                    for channel, values in uv_arrays.items():
                        face.set_uv(vertex, values[index], channel)
                    if color_array is not None:
                        face.set_color(vertex, color_array[index])

                for edge in face.edges:
                    edge.smooth = all(
                        corner_indices[(other, edge.vertex0)] == corner_indices[(face, edge.vertex0)]
                        and corner_indices[(other, edge.vertex1)] == corner_indices[(face, edge.vertex1)]
                        for other in edge.faces
                        if other is not face
                    )

        if skipped:
            logger.warning(f"Skipped {skipped} degenerate triangles while rebuilding the mesh.")
        logger.debug(f"Rebuilt {mesh.number_of_faces} faces on {mesh.number_of_vertices} vertices from {n} buffer vertices.")
        return mesh

    @classmethod
    def from_buffers(cls, buffers: MeshBuffers) -> Mesh:
        """Rebuild a mesh from the result of :meth:`export`."""
        return cls.from_arrays(buffers.positions, buffers.submeshes, buffers.uvs, buffers.colors)

    def check_integrity(self) -> None:
        """
        Verify the adjacency invariants of the mesh.

        Raises:
            ValueError: On the first violation found.
        """
        for face in self._faces:
            n = len(face.vertices)
            if n < 3 or len(face.edges) != n:
                raise ValueError(f"{face} has {n} vertices and {len(face.edges)} edges.")
            for i, vertex in enumerate(face.vertices):
                edge = face.edges[i]
                if not edge.connects(vertex, face.vertices[(i + 1) % n]):
                    raise ValueError(f"{face}: edge {i} ({edge}) does not join corners {i} and {(i + 1) % n}.")
                if face not in vertex.faces:
                    raise ValueError(f"{vertex} is missing the back-reference to {face}.")
                if face not in edge.faces:
                    raise ValueError(f"{edge} is missing the back-reference to {face}.")
                if vertex not in self._vertices:
                    raise ValueError(f"{vertex} of {face} is not tracked by the mesh.")
                for endpoint in edge.vertices:
                    if edge not in endpoint.edges:
                        raise ValueError(f"{endpoint} is missing the back-reference to {edge}.")

        for vertex in self._vertices:
            for face in vertex.faces:
                if face not in self._faces or face.index_of(vertex) < 0:
                    raise ValueError(f"{vertex} references {face}, which does not use it.")
            others: set[int] = set()
            for edge in vertex.edges:
                if vertex not in edge.vertices:
                    raise ValueError(f"{vertex} references {edge}, which does not use it.")
                if not edge.faces:
                    raise ValueError(f"{edge} has no faces but is still attached to {vertex}.")
                for face in edge.faces:
                    if face not in self._faces or edge not in face.edges:
                        raise ValueError(f"{edge} references {face}, which does not use it.")
                other = edge.other(vertex)
                if id(other) in others:
                    raise ValueError(f"{vertex} has two edges towards {other}.")
                others.add(id(other))

    # ------------------------------------------------------------------
    # Operators
    # ------------------------------------------------------------------
    def triangulate(self) -> None:
        triangulate(self)

    def extrude(self, faces: Iterable[Face], direction: npt.ArrayLike) -> list[Face]:
        return extrude(self, faces, direction)

    def extrude_along_normals(self, faces: Iterable[Face], distance: float) -> list[Face]:
        return extrude_along_normals(self, faces, distance)

    def split_by_scalar_field(
        self,
        value: Callable[[Vertex], float],
        *,
        smooth_edges: bool = False,
        min_island_vertices: int = 0,
        small_value: float = DEFAULT_ISLAND_VALUE,
    ) -> IsoSplitResult:
        return split_by_scalar_field(
            self,
            value,
            smooth_edges=smooth_edges,
            min_island_vertices=min_island_vertices,
            small_value=small_value,
        )

    def subdivide(self, levels: int = 1) -> None:
        subdivide(self, levels)

    def set_smooth(self, faces: Iterable[Face] | None = None, smooth: bool = True) -> None:
        set_smooth(self, self._faces if faces is None else faces, smooth)

    def set_sharp(self, faces: Iterable[Face] | None = None) -> None:
        self.set_smooth(faces, smooth=False)

    def auto_smooth(self, angle: float = DEFAULT_AUTO_SMOOTH_ANGLE) -> None:
        auto_smooth(self, angle)

    def export(self, uv_channels: Iterable[int] | None = None) -> MeshBuffers:
        return export(self, ALL_UV_CHANNELS if uv_channels is None else uv_channels)
