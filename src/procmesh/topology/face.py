from __future__ import annotations

import itertools
from enum import StrEnum
from typing import TYPE_CHECKING, NamedTuple, Iterable, Mapping

import numpy as np

from procmesh.config import COLOR_COMPONENTS, UV_CHANNEL_COUNT
from procmesh.geometry_utils import as_vector, normalize
from procmesh.topology.edge import Edge
from procmesh.topology.vertex import Vertex

if TYPE_CHECKING:
    import numpy.typing as npt

_face_ids = itertools.count()


class TriangulationMode(StrEnum):
    FAN = "fan"
    RADIAL = "radial"


class Triangles(NamedTuple):
    """Triangles of a face and the UVs of the corners synthesized for them."""
    corners: list[tuple[Vertex, Vertex, Vertex]]
    synthesized_uvs: dict[tuple[Vertex, int], npt.NDArray[np.float64]]


def check_uv_channel(channel: int) -> None:
    if not 0 <= channel < UV_CHANNEL_COUNT:
        raise ValueError(f"Unsupported UV channel: {channel}. "
                         f"'channel' must be in the range [0, {UV_CHANNEL_COUNT - 1}].")


class Face:
    """
    Polygon of the mesh.

    A face is a cyclic, winding-significant sequence of at least three distinct
    vertices. ``edges[i]`` joins ``vertices[i]`` and ``vertices[(i + 1) % n]``.
    UVs and colors are stored per face corner, so two faces sharing a vertex
    may carry different values for it.

    Faces are created and destroyed through :class:`procmesh.mesh.Mesh`, which
    keeps the back-references of vertices and edges consistent.
    """
    def __init__(self, vertices: Iterable[Vertex]) -> None:
        """
        Initialize the face and wire it into the vertices and edges it uses.

        Args:
            vertices: Boundary of the polygon, in winding order.
        """
        self.uid = next(_face_ids)
        self.vertices: list[Vertex] = []
        self.edges: list[Edge] = []
        self.uvs: dict[tuple[Vertex, int], npt.NDArray[np.float64]] = {}
        self.colors: dict[Vertex, npt.NDArray[np.float64]] = {}
        self.attributes: dict[int | str, float] = {}
        self.submesh: int = 0
        self.triangulation: TriangulationMode = TriangulationMode.FAN
        self.set_vertices(vertices)

    def __repr__(self) -> str:
        """String representation of the face."""
        return (f"{self.__class__.__name__}(id={self.uid}, "
                f"vertices={[v.uid for v in self.vertices]}, submesh={self.submesh})")

    @property
    def number_of_vertices(self) -> int:
        return len(self.vertices)

    @property
    def is_triangle(self) -> bool:
        return len(self.vertices) == 3

    # ------------------------------------------------------------------
    # Adjacency
    # ------------------------------------------------------------------
    def set_vertices(self, vertices: Iterable[Vertex]) -> None:
        """
        Replace the boundary of the face.

        Old references are detached before the new ones are attached. Edges are
        looked up on the vertices first, so an existing edge (and its smooth
        flag) is reused; edges left without any face are released afterwards.

        Raises:
            ValueError: If fewer than three vertices are given or a vertex repeats.
        """
        vertices = list(vertices)
        if len(vertices) < 3:
            raise ValueError(f"A face needs at least 3 vertices, got {len(vertices)}.")
        if len({id(v) for v in vertices}) != len(vertices):
            raise ValueError(f"A face cannot use the same vertex twice: {[v.uid for v in vertices]}.")

        old_edges = self.edges
        self.detach()

        self.vertices = vertices
        self.edges = []
        n = len(vertices)
        for i, v0 in enumerate(vertices):
            v1 = vertices[(i + 1) % n]
            edge = v0.edge_with(v1)
            if edge is None:
                edge = Edge(v0, v1, smooth=False)
            self.edges.append(edge)

        self.attach()

        for edge in old_edges:
            if not edge.faces:
                edge.release()

    def replace_vertices(self, mapping: Mapping[Vertex, Vertex]) -> None:
        """
        Swap vertices according to ``mapping`` and carry the corner data along.

        Vertices missing from the mapping are kept.
        """
        self.set_vertices([mapping.get(v, v) for v in self.vertices])
        self.uvs = {(mapping.get(v, v), channel): uv for (v, channel), uv in self.uvs.items()}
        self.colors = {mapping.get(v, v): color for v, color in self.colors.items()}

    def attach(self) -> None:
        """Register this face on its vertices and edges."""
        for vertex in self.vertices:
            vertex.faces.append(self)
        for edge in self.edges:
            edge.faces.append(self)

    def detach(self) -> None:
        """Remove this face from the back-references of its vertices and edges."""
        for vertex in self.vertices:
            if self in vertex.faces:
                vertex.faces.remove(self)
        for edge in self.edges:
            if self in edge.faces:
                edge.faces.remove(self)

    def release(self) -> None:
        """Detach the face and release the edges no other face uses."""
        self.detach()
        for edge in self.edges:
            if not edge.faces:
                edge.release()

    def neighbours(self) -> list[Face]:
        """Faces sharing at least one edge with this one."""
        result: dict[Face, None] = {}
        for edge in self.edges:
            for face in edge.faces:
                if face is not self:
                    result[face] = None
        return list(result)

    def index_of(self, vertex: Vertex) -> int:
        """Position of ``vertex`` in the boundary, -1 if the face does not use it."""
        for i, v in enumerate(self.vertices):
            if v is vertex:
                return i
        return -1

    # ------------------------------------------------------------------
    # Corner data
    # ------------------------------------------------------------------
    def uv(self, vertex: Vertex, channel: int = 0) -> npt.NDArray[np.float64]:
        """UV of a corner, zero if it was never set."""
        uv = self.uvs.get((vertex, channel))
        if uv is None:
            return np.zeros(2, dtype=np.float64)
        return uv.copy()

    def set_uv(self, vertex: Vertex, uv: npt.ArrayLike, channel: int = 0) -> None:
        check_uv_channel(channel)
        self.uvs[(vertex, channel)] = as_vector(uv, 2)

    def fill_uv(self, uv: npt.ArrayLike, channel: int = 0) -> None:
        """Set the same UV on every corner of the face."""
        for vertex in self.vertices:
            self.set_uv(vertex, uv, channel)

    def uv_channels(self, vertex: Vertex) -> list[int]:
        """Channels with a UV set for this corner."""
        return sorted(channel for (v, channel) in self.uvs if v is vertex)

    def color(self, vertex: Vertex) -> npt.NDArray[np.float64]:
        """RGBA color of a corner, zero if it was never set."""
        color = self.colors.get(vertex)
        if color is None:
            return np.zeros(COLOR_COMPONENTS, dtype=np.float64)
        return color.copy()

    def set_color(self, vertex: Vertex, color: npt.ArrayLike) -> None:
        self.colors[vertex] = as_vector(color, COLOR_COMPONENTS)

    def fill_color(self, color: npt.ArrayLike) -> None:
        """Set the same color on every corner of the face."""
        for vertex in self.vertices:
            self.set_color(vertex, color)

    def copy_corner_from(self, source: Face, vertex: Vertex, target: Vertex | None = None) -> None:
        """
        Copy the UVs (all channels) and color of a corner of ``source``.

        Args:
            source: Face to read from.
            vertex: Corner of ``source``.
            target: Corner of this face receiving the data; defaults to ``vertex``.
        """
        target = vertex if target is None else target
        for channel in source.uv_channels(vertex):
            self.uvs[(target, channel)] = source.uvs[(vertex, channel)].copy()
        if vertex in source.colors:
            self.colors[target] = source.colors[vertex].copy()

    def copy_attributes_from(self, other: Face) -> None:
        """Copy the attribute map and the submesh tag of another face."""
        self.attributes.update(other.attributes)
        self.submesh = other.submesh

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------
    @property
    def centroid(self) -> npt.NDArray[np.float64]:
        """Mean position of the vertices."""
        return np.mean([v.position for v in self.vertices], axis=0)

    @property
    def raw_normal(self) -> npt.NDArray[np.float64]:
        """
        Normal vector with a magnitude of twice the area of the face.

        Triangles use a single cross product; larger polygons sum the cross
        products of consecutive corners around the centroid (Newell-style).
        """
        if len(self.vertices) == 3:
            p0, p1, p2 = (v.position for v in self.vertices)
            return np.cross(p1 - p0, p2 - p0)

        centroid = self.centroid
        normal = np.zeros(3, dtype=np.float64)
        n = len(self.vertices)
        for i in range(n):
            p0 = self.vertices[i].position
            p1 = self.vertices[(i + 1) % n].position
            normal += np.cross(p0 - centroid, p1 - centroid)
        return normal

    @property
    def normal(self) -> npt.NDArray[np.float64]:
        """Unit normal, zero for a degenerate face."""
        return normalize(self.raw_normal)

    @property
    def area(self) -> float:
        return 0.5 * float(np.linalg.norm(self.raw_normal))

    # ------------------------------------------------------------------
    # Triangulation
    # ------------------------------------------------------------------
    def triangles(self) -> Triangles:
        """
        Split the face into triangles according to its triangulation mode.

        Radial mode synthesizes a centroid vertex that is not yet part of any
        mesh; its UVs are returned in ``synthesized_uvs``.
        """
        if self.triangulation == TriangulationMode.RADIAL:
            return self._triangles_radial()
        return self._triangles_fan()

    def _triangles_fan(self) -> Triangles:
        n = len(self.vertices)
        origin = 0

        if n == 4:
            # Start the fan on the shortest diagonal
            d0 = np.sum((self.vertices[0].position - self.vertices[2].position) ** 2)
            d1 = np.sum((self.vertices[1].position - self.vertices[3].position) ** 2)
            if d0 > d1:
                origin = 1

        corners = [
            (self.vertices[origin], self.vertices[(origin + i) % n], self.vertices[(origin + i + 1) % n])
            for i in range(1, n - 1)
        ]
        return Triangles(corners=corners, synthesized_uvs={})

    def _triangles_radial(self) -> Triangles:
        n = len(self.vertices)
        centre = Vertex(self.centroid)

        channels = sorted({channel for (_, channel) in self.uvs})
        synthesized_uvs = {
            (centre, channel): np.sum([self.uv(v, channel) for v in self.vertices], axis=0) / n
            for channel in channels
        }

        corners = [(centre, self.vertices[i], self.vertices[(i + 1) % n]) for i in range(n)]
        return Triangles(corners=corners, synthesized_uvs=synthesized_uvs)
