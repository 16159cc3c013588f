from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from procmesh.topology import Face

if TYPE_CHECKING:
    from procmesh.mesh import Mesh

logger = logging.getLogger(__name__)


def triangulate_face(mesh: Mesh, face: Face) -> list[Face]:
    """
    Replace one polygon by triangles, following its triangulation mode.

    The triangles inherit the corner UVs and colors, the attributes and the
    submesh of the polygon. Edges used only by the new triangles are marked
    smooth; the polygon's own boundary edges are shared with the triangles and
    keep their flag.

    Args:
        mesh: Mesh owning ``face``.
        face: Polygon with more than three vertices.

    Returns:
        The new triangles.
    """
    triangles = face.triangles()
    new_faces: list[Face] = []

    for corners in triangles.corners:
        triangle = mesh.add_face(corners)
        for vertex in corners:
            triangle.copy_corner_from(face, vertex)
        for (vertex, channel), uv in triangles.synthesized_uvs.items():
            if vertex in corners:
                triangle.uvs[(vertex, channel)] = uv.copy()
        triangle.copy_attributes_from(face)
        new_faces.append(triangle)

    new_set = set(new_faces)
    for triangle in new_faces:
        for edge in triangle.edges:
            if all(adjacent in new_set for adjacent in edge.faces):
                edge.smooth = True

    mesh.remove_face(face)
    return new_faces


def triangulate(mesh: Mesh) -> None:
    """
    Split every face with more than three vertices into triangles.

    Triangles are left untouched, so triangulating a triangle mesh is a no-op.
    """
    polygons = [face for face in mesh.faces if not face.is_triangle]
    created = 0
    for face in polygons:
        created += len(triangulate_face(mesh, face))

    if polygons:
        logger.debug(f"Triangulated {len(polygons)} faces into {created} triangles.")
