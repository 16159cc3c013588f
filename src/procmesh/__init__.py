"""
Procedural B-rep mesh kernel.

Build polygons on shared vertices, edit them with topological operators
(extrusion, iso-splitting, triangulation, subdivision), set the smoothing of
the edges and export flat render buffers.
"""
import logging

from procmesh.config import LOGGER_NAME
from procmesh.topology import Edge, Face, TriangulationMode, Vertex
from procmesh.mesh import Mesh
from procmesh.export import IndexFormat, MeshBuffers, export
from procmesh.operators import IsoSplitResult

logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())

__all__ = [
    "Vertex",
    "Edge",
    "Face",
    "TriangulationMode",
    "Mesh",
    "MeshBuffers",
    "IndexFormat",
    "IsoSplitResult",
    "export",
]
