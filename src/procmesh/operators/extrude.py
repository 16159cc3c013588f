"""
Extrusion
=========
Moves a set of faces and stitches the gap to the rest of the mesh with quads.

Steps:
    1. Find the outside edges of the selection (edges of the selection with at
       least one face outside it, or no other face at all).
    2. Duplicate every vertex touched by an outside edge.
    3. Rewire the selected faces onto the duplicates.
    4. Move the vertices of the selected faces.
    5. Bridge each outside edge to its duplicated counterpart with a quad.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

import numpy as np

from procmesh.geometry_utils import as_vector, normalize
from procmesh.topology import Edge, Face, Vertex

if TYPE_CHECKING:
    import numpy.typing as npt
    from procmesh.mesh import Mesh

logger = logging.getLogger(__name__)


def find_outside_edges(selection: dict[Face, None]) -> tuple[list[Edge], set[Edge]]:
    """
    Collect the edges on the border of a face selection.

    An edge is "inverted" when its stored direction runs against the winding
    of the selected face owning it.

    Args:
        selection: Selected faces (used as an ordered set).

    Returns:
        The outside edges, in discovery order, and the subset of inverted ones.
    """
    outside: dict[Edge, None] = {}
    inverted: set[Edge] = set()

    for face in selection:
        n = len(face.vertices)
        for edge in face.edges:
            if edge in outside:
                continue
            on_border = len(edge.faces) == 1 or any(other not in selection for other in edge.faces)
            if not on_border:
                continue

            outside[edge] = None
            i = face.index_of(edge.vertex0)
            if face.vertices[(i + 1) % n] is not edge.vertex1:
                inverted.add(edge)

    return list(outside), inverted


def split_vertices(outside_edges: Iterable[Edge]) -> dict[Vertex, Vertex]:
    """Create one duplicate, at the same position, of every vertex of the outside edges."""
    duplicates: dict[Vertex, Vertex] = {}
    for edge in outside_edges:
        for vertex in edge.vertices:
            if vertex not in duplicates:
                duplicates[vertex] = Vertex(vertex.position)
    return duplicates


def selection_vertices(selection: Iterable[Face]) -> list[Vertex]:
    """Unique vertices of the selected faces."""
    result: dict[Vertex, None] = {}
    for face in selection:
        for vertex in face.vertices:
            result[vertex] = None
    return list(result)


def bridge_outside_edges(
    mesh: Mesh,
    outside_edges: Iterable[Edge],
    inverted: set[Edge],
    duplicates: dict[Vertex, Vertex],
) -> list[Face]:
    """
    Create the side quads joining each outside edge to its duplicate.

    The quad follows the winding of the selected face the edge belonged to.
    Its base edge keeps the smooth flag of the outside edge, which has
    already been released when it lay on an open boundary.
    """
    bridges: list[Face] = []
    for edge in outside_edges:
        if edge in inverted:
            v0, v1 = edge.vertex1, edge.vertex0
        else:
            v0, v1 = edge.vertex0, edge.vertex1
        v2 = duplicates[v1]
        v3 = duplicates[v0]
        quad = mesh.add_face([v0, v1, v2, v3])
        quad.edges[0].smooth = edge.smooth
        bridges.append(quad)
    return bridges


def vertex_normals(selection: Iterable[Face], vertices: Iterable[Vertex]) -> dict[Vertex, npt.NDArray[np.float64]]:
    """
    Unit normal of each vertex, averaged over the selected faces using it.

    Raw (area-weighted) face normals are summed before normalizing.
    """
    accumulated = {v: np.zeros(3, dtype=np.float64) for v in vertices}
    for face in selection:
        normal = face.raw_normal
        for vertex in face.vertices:
            if vertex in accumulated:
                accumulated[vertex] += normal
    return {v: normalize(total) for v, total in accumulated.items()}


def _extrude(
    mesh: Mesh,
    faces: Iterable[Face],
    direction: npt.NDArray[np.float64] | None,
    distance: float | None,
) -> list[Face]:
    selection: dict[Face, None] = {}
    for face in faces:
        if face not in mesh:
            raise ValueError(f"Cannot extrude {face}: it is not part of the mesh.")
        selection[face] = None

    if not selection:
        return []

    outside_edges, inverted = find_outside_edges(selection)
    duplicates = split_vertices(outside_edges)

    outside = set(outside_edges)
    for face in selection:
        old_edges = list(face.edges)
        mesh.rewire_face(face, duplicates)
        # Edges inside the selection keep their flag even when both ends were split
        for old_edge, new_edge in zip(old_edges, face.edges):
            if old_edge not in outside:
                new_edge.smooth = old_edge.smooth

    moved = selection_vertices(selection)
    if direction is not None:
        for vertex in moved:
            vertex.position = vertex.position + direction
    else:
        normals = vertex_normals(selection, moved)
        for vertex in moved:
            vertex.position = vertex.position + normals[vertex] * distance

    bridges = bridge_outside_edges(mesh, outside_edges, inverted, duplicates)

    logger.debug(
        f"Extruded {len(selection)} faces: {len(duplicates)} vertices split, "
        f"{len(moved)} moved, {len(bridges)} side faces created."
    )
    return bridges


def extrude(mesh: Mesh, faces: Iterable[Face], direction: npt.ArrayLike) -> list[Face]:
    """
    Extrude faces by translating them along a vector.

    Args:
        mesh: Mesh owning the faces.
        faces: Faces to extrude.
        direction: Translation applied to every vertex of the faces.

    Raises:
        ValueError: If a face is not part of the mesh.

    Returns:
        The side faces created by the extrusion.
    """
    return _extrude(mesh, faces, direction=as_vector(direction, 3), distance=None)


def extrude_along_normals(mesh: Mesh, faces: Iterable[Face], distance: float) -> list[Face]:
    """
    Extrude faces by moving each vertex along its averaged normal.

    Args:
        mesh: Mesh owning the faces.
        faces: Faces to extrude.
        distance: Signed offset along the vertex normals.

    Returns:
        The side faces created by the extrusion.
    """
    return _extrude(mesh, faces, direction=None, distance=float(distance))
