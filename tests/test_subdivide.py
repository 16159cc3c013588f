"""Tests for the subdivision operator."""

import numpy as np
import pytest

from procmesh.mesh import Mesh
from procmesh.operators.subdivide import subdivide_face
from procmesh.topology import Vertex


class TestSubdivide:

    def test_two_triangles(self, two_triangles: Mesh):
        """Each triangle becomes four; the shared edge gets a single midpoint."""
        two_triangles.subdivide()
        assert two_triangles.number_of_faces == 8
        assert two_triangles.number_of_vertices == 9
        assert all(face.is_triangle for face in two_triangles.faces)
        two_triangles.check_integrity()

    @pytest.mark.parametrize("levels, faces, vertices", [(0, 12, 8), (1, 48, 26), (2, 192, 98)])
    def test_cube_levels(self, unit_cube: Mesh, levels: int, faces: int, vertices: int):
        unit_cube.subdivide(levels)
        assert unit_cube.number_of_faces == faces
        assert unit_cube.number_of_vertices == vertices
        assert all(len(edge.faces) == 2 for edge in unit_cube.edges)
        unit_cube.check_integrity()

    def test_negative_levels(self, unit_cube: Mesh):
        with pytest.raises(ValueError, match="non-negative"):
            unit_cube.subdivide(-1)

    def test_non_triangle_rejected(self, unit_quad: Mesh):
        with pytest.raises(ValueError, match="wasn't correctly triangulated"):
            subdivide_face(unit_quad, unit_quad.faces[0], {})
        assert unit_quad.number_of_faces == 1

    def test_midpoints_and_corner_data(self):
        mesh = Mesh()
        v0 = Vertex((0.0, 0.0, 0.0))
        v1 = Vertex((0.0, 0.0, 2.0))
        v2 = Vertex((2.0, 0.0, 0.0))
        face = mesh.add_face([v0, v1, v2])
        face.set_uv(v0, (0.0, 0.0))
        face.set_uv(v1, (0.0, 1.0))
        face.set_uv(v2, (1.0, 0.0))
        face.set_color(v0, (1.0, 1.0, 1.0, 1.0))
        face.attributes["moisture"] = 0.5

        mesh.subdivide()

        positions = {tuple(v.position) for v in mesh.vertices}
        assert {(0.0, 0.0, 1.0), (1.0, 0.0, 1.0), (1.0, 0.0, 0.0)} <= positions
        for child in mesh.faces:
            assert child.attributes == {"moisture": 0.5}
            np.testing.assert_allclose(child.normal, face.normal)
            for v in child.vertices:
                if v.x == 0.0 and v.z == 1.0:
                    np.testing.assert_allclose(child.uv(v), [0.0, 0.5])
                    np.testing.assert_allclose(child.color(v), [0.5, 0.5, 0.5, 0.5])
                if v.x == 1.0 and v.z == 1.0:
                    np.testing.assert_allclose(child.uv(v), [0.5, 0.5])
                    np.testing.assert_allclose(child.color(v), [0.0, 0.0, 0.0, 0.0])
        mesh.check_integrity()

    def test_smoothness_is_kept(self, unit_cube: Mesh):
        """Cube edges stay sharp once split; everything inside a cube side is smooth."""
        unit_cube.subdivide()
        sharp = [edge for edge in unit_cube.edges if not edge.smooth]
        assert len(sharp) == 24
        for edge in sharp:
            # Both ends lie on a cube edge: at least two coordinates at +-0.5
            for v in edge.vertices:
                assert np.sum(np.isclose(np.abs(v.position), 0.5)) >= 2
