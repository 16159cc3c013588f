"""
Marching Triangles
==================
Splits a triangulated mesh along the zero isoline of a scalar field.

Each vertex gets a value from the field. Triangles whose corners are all
negative, or all non-negative, are kept as they are. A mixed triangle has one
corner whose sign differs from the two others: it is cut into a corner
triangle (around that lone corner) and a quad, through two new vertices placed
where the field crosses zero on the triangle sides.

Small regions of a single sign can be suppressed beforehand: their values are
replaced by a small value of the opposite sign so they merge into the
surrounding region instead of producing slivers.
"""
from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from procmesh.config import DEFAULT_ISLAND_VALUE
from procmesh.geometry_utils import lerp
from procmesh.operators.triangulate import triangulate
from procmesh.topology import Face, Vertex

if TYPE_CHECKING:
    from procmesh.mesh import Mesh

logger = logging.getLogger(__name__)

# Triangle sides crossed by the isoline, indexed by the sign pattern
# sum(2**i for non-negative corner i). Side i joins corners i and (i + 1) % 3.
MARCHING_TRIANGLES_EDGES: tuple[tuple[int, ...], ...] = (
    (),
    (0, 2),
    (1, 0),
    (2, 1),
    (2, 1),
    (1, 0),
    (0, 2),
    (),
)


@dataclass
class IsoSplitResult:
    """Faces on each side of the isoline and the vertices created on it."""
    negative_faces: list[Face] = field(default_factory=list)
    positive_faces: list[Face] = field(default_factory=list)
    new_vertices: list[Vertex] = field(default_factory=list)


def crossing_parameter(h0: float, h1: float) -> float:
    """
    Position of the zero crossing between two values of opposite signs.

    Returns:
        t in [0, 1] such that h0 + t * (h1 - h0) == 0.
    """
    if h0 < h1:
        return -h0 / (h1 - h0)
    return 1.0 + h1 / (h0 - h1)


def sign_islands(values: dict[Vertex, float]) -> list[list[Vertex]]:
    """
    Group the vertices into connected regions of the same sign.

    Two vertices are connected when an edge joins them and both values are
    negative, or both are non-negative.
    """
    remaining: dict[Vertex, None] = dict.fromkeys(values)
    islands: list[list[Vertex]] = []

    while remaining:
        seed = next(iter(remaining))
        del remaining[seed]
        positive = values[seed] >= 0.0

        island: list[Vertex] = []
        border = [seed]
        while border:
            vertex = border.pop()
            island.append(vertex)
            for neighbour in vertex.neighbours():
                if neighbour not in remaining:
                    continue
                if (values[neighbour] >= 0.0) != positive:
                    continue
                del remaining[neighbour]
                border.append(neighbour)

        islands.append(island)

    return islands


def suppress_small_islands(
    values: dict[Vertex, float],
    min_island_vertices: int,
    small_value: float,
) -> int:
    """
    Flip the sign of every region with fewer than ``min_island_vertices`` vertices.

    Flipped values become ``-small_value`` or ``+small_value``.

    Returns:
        The number of vertices whose value was replaced.
    """
    if min_island_vertices <= 0:
        return 0

    ignored: list[Vertex] = []
    for island in sign_islands(values):
        if len(island) < min_island_vertices:
            ignored.extend(island)

    for vertex in ignored:
        values[vertex] = -small_value if values[vertex] >= 0.0 else small_value
    return len(ignored)


def _crossing_vertex(
    face: Face,
    side: int,
    values: dict[Vertex, float],
    crossings: dict[frozenset[Vertex], Vertex],
    result: IsoSplitResult,
) -> tuple[Vertex, float]:
    """
    Vertex where the isoline crosses one side of a triangle.

    The vertex is created once per pair of corners and reused by the
    neighbouring triangle.

    Returns:
        The crossing vertex and its parameter along the side, seen from ``face``.
    """
    corner0 = face.vertices[side]
    corner1 = face.vertices[(side + 1) % 3]
    t = crossing_parameter(values[corner0], values[corner1])

    key = frozenset((corner0, corner1))
    vertex = crossings.get(key)
    if vertex is None:
        vertex = Vertex(lerp(corner0.position, corner1.position, t))
        crossings[key] = vertex
        result.new_vertices.append(vertex)

    return vertex, t


def _copy_interpolated(target: Face, source: Face, vertex: Vertex, corner0: Vertex, corner1: Vertex, t: float) -> None:
    channels = set(source.uv_channels(corner0)) | set(source.uv_channels(corner1))
    for channel in channels:
        target.set_uv(vertex, lerp(source.uv(corner0, channel), source.uv(corner1, channel), t), channel)
    if corner0 in source.colors or corner1 in source.colors:
        target.set_color(vertex, lerp(source.color(corner0), source.color(corner1), t))


def split_by_scalar_field(
    mesh: Mesh,
    value: Callable[[Vertex], float],
    *,
    smooth_edges: bool = False,
    min_island_vertices: int = 0,
    small_value: float = DEFAULT_ISLAND_VALUE,
) -> IsoSplitResult:
    """
    Triangulate the mesh, then split it along the zero isoline of ``value``.

    Args:
        mesh: Mesh to split in place.
        value: Scalar field, evaluated once per vertex.
        smooth_edges: Mark the new edges lying on the isoline as smooth.
        min_island_vertices: If > 0, regions of the same sign with fewer
            vertices than this are merged into their surroundings. Only the
            vertices present before the split are counted.
        small_value: Magnitude of the values given to suppressed vertices.

    Raises:
        ValueError: If a face is still not a triangle after triangulation.

    Returns:
        Faces tagged negative, faces tagged positive (values >= 0), and the
        vertices created on the isoline.
    """
    triangulate(mesh)

    values: dict[Vertex, float] = {vertex: float(value(vertex)) for vertex in mesh.vertices}
    suppressed = suppress_small_islands(values, min_island_vertices, small_value)

    result = IsoSplitResult()
    crossings: dict[frozenset[Vertex], Vertex] = {}
    split = 0

    for face in mesh.faces:
        if not face.is_triangle:
            raise ValueError(f"{face} is not a triangle; the mesh wasn't correctly triangulated.")

        positive = [values[v] >= 0.0 for v in face.vertices]
        if not any(positive):
            result.negative_faces.append(face)
            continue
        if all(positive):
            result.positive_faces.append(face)
            continue

        pattern = sum(1 << i for i in range(3) if positive[i])
        lone = next(i for i in range(3) if positive[(i + 1) % 3] == positive[(i + 2) % 3])

        edge_vertices: list[Vertex] = []
        parameters: list[tuple[Vertex, Vertex, float]] = []
        for side in MARCHING_TRIANGLES_EDGES[pattern]:
            vertex, t = _crossing_vertex(face, side, values, crossings, result)
            edge_vertices.append(vertex)
            parameters.append((face.vertices[side], face.vertices[(side + 1) % 3], t))

        # Corner triangle around the lone corner
        corner = face.vertices[lone]
        triangle = mesh.add_face([corner, edge_vertices[0], edge_vertices[1]])
        triangle.copy_corner_from(face, corner)
        for vertex, (c0, c1, t) in zip(edge_vertices, parameters):
            _copy_interpolated(triangle, face, vertex, c0, c1, t)
        triangle.copy_attributes_from(face)
        (result.positive_faces if positive[lone] else result.negative_faces).append(triangle)

        # Quad on the two other corners
        i0 = (lone + 1) % 3
        i1 = (lone + 2) % 3
        corner_a = face.vertices[i0]
        corner_b = face.vertices[i1]
        quad = mesh.add_face([corner_a, corner_b, edge_vertices[1], edge_vertices[0]])
        quad.copy_corner_from(face, corner_a)
        quad.copy_corner_from(face, corner_b)
        for vertex, (c0, c1, t) in zip(edge_vertices, parameters):
            _copy_interpolated(quad, face, vertex, c0, c1, t)
        quad.copy_attributes_from(face)
        (result.positive_faces if positive[i0] else result.negative_faces).append(quad)

        if smooth_edges:
            edge_vertices[0].edge_with(edge_vertices[1]).smooth = True

        mesh.remove_face(face)
        split += 1

    logger.debug(
        f"Marching triangles: {split} faces split, {len(result.new_vertices)} vertices created, "
        f"{suppressed} vertices suppressed, {len(result.negative_faces)} negative / "
        f"{len(result.positive_faces)} positive faces."
    )
    return result
