"""Tests for the triangulation operator."""

import numpy as np

from procmesh import primitives
from procmesh.mesh import Mesh
from procmesh.topology import TriangulationMode


class TestFanTriangulation:

    def test_triangulated_mesh_is_unchanged(self, two_triangles: Mesh):
        """Triangulating a triangle mesh is a no-op."""
        faces = two_triangles.faces
        positions = [v.position.copy() for v in two_triangles.vertices]

        two_triangles.triangulate()

        assert two_triangles.faces == faces
        for v, position in zip(two_triangles.vertices, positions):
            np.testing.assert_array_equal(v.position, position)

    def test_cube_becomes_twelve_triangles(self, unit_cube: Mesh):
        unit_cube.triangulate()
        assert unit_cube.number_of_faces == 12
        assert all(face.is_triangle for face in unit_cube.faces)
        assert unit_cube.number_of_vertices == 8
        unit_cube.check_integrity()

    def test_diagonal_smooth_border_kept(self, unit_cube: Mesh):
        """Only the new diagonals are smooth; the cube edges stay sharp."""
        unit_cube.triangulate()
        smooth = [edge for edge in unit_cube.edges if edge.smooth]
        assert len(smooth) == 6
        assert len(unit_cube.edges) == 18

    def test_pentagon_fan(self):
        mesh = Mesh()
        mesh.add_polygon([(np.cos(a), 0.0, np.sin(a)) for a in np.linspace(0, 2 * np.pi, 5, endpoint=False)])
        mesh.triangulate()
        assert mesh.number_of_faces == 3
        mesh.check_integrity()

    def test_corner_data_and_attributes_copied(self, unit_quad: Mesh):
        face = unit_quad.faces[0]
        for i, v in enumerate(face.vertices):
            face.set_uv(v, (float(i), 0.0))
            face.set_uv(v, (0.0, float(i)), channel=4)
            face.set_color(v, (1.0, 0.0, 0.0, 1.0))
        face.attributes[7] = 3.5
        face.submesh = 2
        corners = {v: i for i, v in enumerate(face.vertices)}

        unit_quad.triangulate()

        for triangle in unit_quad.faces:
            assert triangle.attributes == {7: 3.5}
            assert triangle.submesh == 2
            for v in triangle.vertices:
                np.testing.assert_allclose(triangle.uv(v), [corners[v], 0.0])
                np.testing.assert_allclose(triangle.uv(v, 4), [0.0, corners[v]])
                np.testing.assert_allclose(triangle.color(v), [1.0, 0.0, 0.0, 1.0])


class TestRadialTriangulation:

    def test_radial_adds_centre_vertex(self):
        mesh = Mesh()
        face = mesh.add_polygon(
            [(1.0, 0.0, 1.0), (1.0, 0.0, -1.0), (-1.0, 0.0, -1.0), (-1.0, 0.0, 1.0)],
            triangulation=TriangulationMode.RADIAL,
        )
        face.fill_uv((0.5, 0.5))

        mesh.triangulate()

        assert mesh.number_of_faces == 4
        assert mesh.number_of_vertices == 5
        centre = mesh.vertices[-1]
        np.testing.assert_allclose(centre.position, [0.0, 0.0, 0.0], atol=1e-12)
        assert len(centre.faces) == 4
        for triangle in centre.faces:
            np.testing.assert_allclose(triangle.uv(centre), [0.5, 0.5])
        # The four spokes are smooth, the border is not
        assert all(edge.smooth for edge in centre.edges)
        assert sum(edge.smooth for edge in mesh.edges) == 4
        mesh.check_integrity()

    def test_radial_centre_gets_no_color(self):
        """Only UVs are synthesized for the centre; the ring corners keep their color."""
        mesh = Mesh()
        face = mesh.add_polygon(
            [(1.0, 0.0, 1.0), (1.0, 0.0, -1.0), (-1.0, 0.0, -1.0), (-1.0, 0.0, 1.0)],
            triangulation=TriangulationMode.RADIAL,
        )
        ring = list(face.vertices)
        face.fill_color((1.0, 0.5, 0.0, 1.0))

        mesh.triangulate()

        centre = mesh.vertices[-1]
        for triangle in centre.faces:
            assert centre not in triangle.colors
            np.testing.assert_allclose(triangle.color(centre), [0.0, 0.0, 0.0, 0.0])
            for v in triangle.vertices:
                if v in ring:
                    np.testing.assert_allclose(triangle.color(v), [1.0, 0.5, 0.0, 1.0])

    def test_cylinder_caps(self):
        mesh = primitives.cylinder(1.0, 2.0, 8)
        mesh.triangulate()
        # 8 sides -> 16 triangles, two caps of 8 triangles each
        assert mesh.number_of_faces == 32
        assert mesh.number_of_vertices == 18
        mesh.check_integrity()
