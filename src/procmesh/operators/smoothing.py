from __future__ import annotations

import itertools
import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from procmesh.config import DEFAULT_AUTO_SMOOTH_ANGLE
from procmesh.geometry_utils import angle_between
from procmesh.topology import Edge, Face

if TYPE_CHECKING:
    from procmesh.mesh import Mesh

logger = logging.getLogger(__name__)


def set_smooth(mesh: Mesh, faces: Iterable[Face], smooth: bool = True) -> int:
    """
    Set the smooth flag of the edges lying entirely inside a set of faces.

    An edge is changed only when every face using it belongs to ``faces``,
    so the border of the selection keeps its flag.

    Raises:
        ValueError: If a face is not part of the mesh.

    Returns:
        The number of edges changed.
    """
    selection: dict[Face, None] = {}
    for face in faces:
        if face not in mesh:
            raise ValueError(f"{face} is not part of this mesh.")
        selection[face] = None

    edges: dict[Edge, None] = {}
    for face in selection:
        for edge in face.edges:
            if all(other in selection for other in edge.faces):
                edges[edge] = None

    for edge in edges:
        edge.smooth = smooth
    return len(edges)


def auto_smooth(mesh: Mesh, angle: float = DEFAULT_AUTO_SMOOTH_ANGLE) -> None:
    """
    Flag edges smooth or sharp from the angle between the faces they join.

    An edge shared by two faces is smooth when the angle between their normals
    is less than ``angle`` degrees. An edge shared by more faces is smooth only
    if every pair of them satisfies the same test. Edges on the boundary are
    left unchanged.

    Args:
        mesh: Mesh to update.
        angle: Threshold in degrees.

    Raises:
        ValueError: If ``angle`` is negative.
    """
    if angle < 0.0:
        raise ValueError(f"Auto smooth angle must be non-negative, got {angle}.")

    normals = {face: face.normal for face in mesh.faces}
    smooth = 0
    sharp = 0

    for edge in mesh.edges:
        if len(edge.faces) < 2:
            continue
        edge.smooth = all(
            angle_between(normals[a], normals[b]) < angle
            for a, b in itertools.combinations(edge.faces, 2)
        )
        if edge.smooth:
            smooth += 1
        else:
            sharp += 1

    logger.debug(f"Auto smooth at {angle} degrees: {smooth} smooth, {sharp} sharp edges.")
