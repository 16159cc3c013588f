"""
The OPERATORS layer rewrites the topology of a mesh in place.

Each operator is a plain function taking the mesh as first argument; the same
operations are exposed as methods of :class:`procmesh.mesh.Mesh`. Operators
only create and destroy faces through the mesh, so the adjacency invariants
hold again when they return.
"""
from procmesh.operators.triangulate import triangulate, triangulate_face
from procmesh.operators.extrude import extrude, extrude_along_normals
from procmesh.operators.marching_triangles import IsoSplitResult, split_by_scalar_field
from procmesh.operators.subdivide import subdivide
from procmesh.operators.smoothing import auto_smooth, set_smooth

__all__ = [
    "triangulate",
    "triangulate_face",
    "extrude",
    "extrude_along_normals",
    "IsoSplitResult",
    "split_by_scalar_field",
    "subdivide",
    "auto_smooth",
    "set_smooth",
]
