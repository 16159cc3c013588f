from __future__ import annotations

import itertools
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from procmesh.topology.face import Face
    from procmesh.topology.vertex import Vertex

_edge_ids = itertools.count()


class Edge:
    """
    Connection between two vertices, shared by all the faces using it.

    The stored vertex order is the order of creation; identity is the unordered
    vertex pair. A new edge registers itself on both endpoints so the next face
    built across the same pair finds and reuses it.
    """
    def __init__(self, vertex0: Vertex, vertex1: Vertex, smooth: bool = False) -> None:
        """
        Initialize the edge and attach it to its two vertices.

        Args:
            vertex0: First endpoint.
            vertex1: Second endpoint.
            smooth: Whether shading is continuous across the edge.
        """
        if vertex0 is vertex1:
            raise ValueError(f"An edge needs two distinct vertices, got {vertex0} twice.")
        self.uid = next(_edge_ids)
        self.vertices: tuple[Vertex, Vertex] = (vertex0, vertex1)
        self.smooth = smooth
        self.faces: list[Face] = []
        vertex0.edges.append(self)
        vertex1.edges.append(self)

    def __repr__(self) -> str:
        """String representation of the edge."""
        return (f"{self.__class__.__name__}(id={self.uid}, "
                f"vertices=({self.vertex0.uid}, {self.vertex1.uid}), smooth={self.smooth})")

    @property
    def vertex0(self) -> Vertex:
        return self.vertices[0]

    @property
    def vertex1(self) -> Vertex:
        return self.vertices[1]

    def connects(self, a: Vertex, b: Vertex) -> bool:
        """Whether the edge joins ``a`` and ``b``, in either direction."""
        return (self.vertex0 is a and self.vertex1 is b) or (self.vertex0 is b and self.vertex1 is a)

    def other(self, vertex: Vertex) -> Vertex:
        """The endpoint opposite to ``vertex``."""
        if vertex is self.vertex0:
            return self.vertex1
        if vertex is self.vertex1:
            return self.vertex0
        raise ValueError(f"{vertex} is not an endpoint of {self}.")

    def shared_vertex_with(self, other: Edge) -> Vertex | None:
        """The vertex this edge has in common with another one, if any."""
        for vertex in self.vertices:
            if vertex is other.vertex0 or vertex is other.vertex1:
                return vertex
        return None

    def release(self) -> None:
        """
        Detach the edge from its vertices.

        Called once no face uses the edge anymore; afterwards the edge is no
        longer found by :meth:`Vertex.edge_with`.
        """
        for vertex in self.vertices:
            if self in vertex.edges:
                vertex.edges.remove(self)
