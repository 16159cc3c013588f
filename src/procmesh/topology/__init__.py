"""
The TOPOLOGY layer holds the vertex, edge and face records of the mesh.

Records reference each other both ways (vertex <-> edge <-> face). The
back-references are only ever written by ``Face.attach``/``Face.detach`` and
``Edge.__init__``/``Edge.release``; the mesh container is the single caller
allowed to create or destroy faces.
"""
from procmesh.topology.vertex import Vertex
from procmesh.topology.edge import Edge
from procmesh.topology.face import Face, TriangulationMode, Triangles

__all__ = [
    "Vertex",
    "Edge",
    "Face",
    "TriangulationMode",
    "Triangles",
]
