"""Test configuration and fixtures."""

import pytest

from procmesh import primitives
from procmesh.mesh import Mesh
from procmesh.topology import Vertex


def edge_pairs(mesh: Mesh) -> set[frozenset[Vertex]]:
    """Unordered vertex pairs of every live edge."""
    return {frozenset(edge.vertices) for edge in mesh.edges}


@pytest.fixture
def unit_quad() -> Mesh:
    """Unit square on the XZ plane, facing +Y."""
    return primitives.quad(1.0)


@pytest.fixture
def unit_cube() -> Mesh:
    """Unit cube centred on the origin, all edges sharp."""
    return primitives.cube(1.0)


@pytest.fixture
def two_triangles() -> Mesh:
    """Two triangles sharing the diagonal of the unit square."""
    mesh = Mesh()
    v0 = Vertex((0.0, 0.0, 0.0))
    v1 = Vertex((0.0, 0.0, 1.0))
    v2 = Vertex((1.0, 0.0, 1.0))
    v3 = Vertex((1.0, 0.0, 0.0))
    mesh.add_face([v0, v1, v2])
    mesh.add_face([v0, v2, v3])
    return mesh


@pytest.fixture
def hexagon_fan() -> Mesh:
    """Six triangles around a centre vertex at height 0."""
    import math

    mesh = Mesh()
    centre = Vertex((0.0, 0.0, 0.0))
    ring = [Vertex((math.cos(i * math.pi / 3), 0.0, math.sin(i * math.pi / 3))) for i in range(6)]
    for i in range(6):
        mesh.add_face([centre, ring[(i + 1) % 6], ring[i]])
    return mesh
