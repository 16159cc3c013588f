from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from procmesh.operators.triangulate import triangulate
from procmesh.topology import Edge, Face, Vertex

if TYPE_CHECKING:
    import numpy.typing as npt
    from procmesh.mesh import Mesh

logger = logging.getLogger(__name__)


def _midpoint(edge: Edge, midpoints: dict[Edge, Vertex]) -> Vertex:
    vertex = midpoints.get(edge)
    if vertex is None:
        vertex = Vertex(0.5 * (edge.vertex0.position + edge.vertex1.position))
        midpoints[edge] = vertex
    return vertex


def _average_corner(face: Face, a: Vertex, b: Vertex) -> tuple[dict[int, npt.NDArray[np.float64]], npt.NDArray[np.float64] | None]:
    """Mean UVs (per channel set on either corner) and mean color of two corners of a face."""
    channels = set(face.uv_channels(a)) | set(face.uv_channels(b))
    uvs = {channel: 0.5 * (face.uv(a, channel) + face.uv(b, channel)) for channel in channels}
    color = None
    if a in face.colors or b in face.colors:
        color = 0.5 * (face.color(a) + face.color(b))
    return uvs, color


def _fill_corner(
    target: Face,
    vertex: Vertex,
    uvs: dict[int, npt.NDArray[np.float64]],
    color: npt.NDArray[np.float64] | None,
) -> None:
    for channel, uv in uvs.items():
        target.set_uv(vertex, uv, channel)
    if color is not None:
        target.set_color(vertex, color)


def subdivide_face(mesh: Mesh, face: Face, midpoints: dict[Edge, Vertex]) -> list[Face]:
    """
    Split a triangle into four: a centre triangle and three corner triangles.

    Midpoints are shared with the neighbouring triangles through ``midpoints``.
    Half-edges keep the smooth flag of the edge they come from; the three edges
    inside the original triangle are smooth.

    Raises:
        ValueError: If the face is not a triangle.

    Returns:
        The four new triangles.
    """
    if not face.is_triangle:
        raise ValueError(f"{face} has {face.number_of_vertices} vertices; the mesh wasn't correctly triangulated.")

    centre_vertices: list[Vertex] = []
    centre_data: list[tuple[dict[int, npt.NDArray[np.float64]], npt.NDArray[np.float64] | None]] = []
    for i, edge in enumerate(face.edges):
        centre_vertices.append(_midpoint(edge, midpoints))
        centre_data.append(_average_corner(face, face.vertices[i], face.vertices[(i + 1) % 3]))

    centre = mesh.add_face(centre_vertices)
    for vertex, (uvs, color) in zip(centre_vertices, centre_data):
        _fill_corner(centre, vertex, uvs, color)
    centre.copy_attributes_from(face)
    new_faces = [centre]

    for i in range(3):
        a = centre_vertices[i]
        corner = face.vertices[(i + 1) % 3]
        c = centre_vertices[(i + 1) % 3]

        triangle = mesh.add_face([a, corner, c])
        _fill_corner(triangle, a, *centre_data[i])
        triangle.copy_corner_from(face, corner)
        _fill_corner(triangle, c, *centre_data[(i + 1) % 3])
        triangle.copy_attributes_from(face)
        new_faces.append(triangle)

    for edge in centre.edges:
        edge.smooth = True
    for i, edge in enumerate(face.edges):
        middle = centre_vertices[i]
        for end in edge.vertices:
            middle.edge_with(end).smooth = edge.smooth

    mesh.remove_face(face)
    return new_faces


def subdivide(mesh: Mesh, levels: int = 1) -> None:
    """
    Triangulate, then split every triangle into four, ``levels`` times.

    New vertices lie on the edge midpoints, in the plane of the triangles.
    UVs and colors of the midpoints are averaged per face.

    Raises:
        ValueError: If ``levels`` is negative or a face is not a triangle.
    """
    if levels < 0:
        raise ValueError(f"Subdivision levels must be non-negative, got {levels}.")

    triangulate(mesh)

    for level in range(levels):
        midpoints: dict[Edge, Vertex] = {}
        faces = mesh.faces
        for face in faces:
            subdivide_face(mesh, face, midpoints)
        logger.debug(f"Subdivision level {level + 1}: {len(faces)} triangles split, {len(midpoints)} vertices created.")
