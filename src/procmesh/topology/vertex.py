from __future__ import annotations

import itertools
from typing import TYPE_CHECKING

import numpy as np

from procmesh.geometry_utils import as_vector

if TYPE_CHECKING:
    import numpy.typing as npt
    from procmesh.topology.edge import Edge
    from procmesh.topology.face import Face

_vertex_ids = itertools.count()


class Vertex:
    """
    A point of the mesh, shared by every face and edge touching it.

    The vertex does not own its faces or edges: ``faces`` and ``edges`` are
    back-references maintained by :class:`~procmesh.topology.face.Face` and
    :class:`~procmesh.topology.edge.Edge`.
    """
    def __init__(self, position: npt.ArrayLike) -> None:
        """
        Initialize the vertex at a position.

        Args:
            position: Coordinates of the vertex [X, Y, Z].
        """
        self.position: npt.NDArray[np.float64] = as_vector(position, 3)
        self.uid = next(_vertex_ids)
        self.edges: list[Edge] = []
        self.faces: list[Face] = []

    def __repr__(self) -> str:
        """String representation of the vertex."""
        return f"{self.__class__.__name__}(id={self.uid}, position={self.position})"

    @property
    def x(self) -> float:
        """X-coordinate of the vertex."""
        return float(self.position[0])

    @property
    def y(self) -> float:
        """Y-coordinate of the vertex."""
        return float(self.position[1])

    @property
    def z(self) -> float:
        """Z-coordinate of the vertex."""
        return float(self.position[2])

    def edge_with(self, other: Vertex) -> Edge | None:
        """
        Find the edge connecting this vertex with another one.

        Returns:
            The existing edge, or None if the two vertices are not connected.
        """
        for edge in self.edges:
            if edge.vertex0 is other or edge.vertex1 is other:
                return edge
        return None

    def neighbours(self) -> list[Vertex]:
        """Vertices connected to this one by an edge, in edge order."""
        result: dict[Vertex, None] = {}
        for edge in self.edges:
            result[edge.other(self)] = None
        return list(result)

    def set_uv(self, uv: npt.ArrayLike, channel: int = 0) -> None:
        """Set the UV of this vertex on every incident face."""
        for face in self.faces:
            face.set_uv(self, uv, channel)

    def set_color(self, color: npt.ArrayLike) -> None:
        """Set the color of this vertex on every incident face."""
        for face in self.faces:
            face.set_color(self, color)
