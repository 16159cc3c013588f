"""Tests for smooth/sharp edge control."""

import pytest

from procmesh import primitives
from procmesh.mesh import Mesh
from procmesh.operators.smoothing import set_smooth
from procmesh.topology import Vertex


class TestSetSmooth:

    def test_only_edges_inside_selection(self):
        """The edge shared with an unselected face keeps its flag."""
        mesh = primitives.square_grid(2, 1)
        first, second = mesh.faces
        changed = set_smooth(mesh, [first])
        assert changed == 3
        shared = next(edge for edge in first.edges if second in edge.faces)
        assert not shared.smooth
        assert sum(edge.smooth for edge in mesh.edges) == 3

    def test_whole_mesh_then_sharp(self, unit_cube: Mesh):
        unit_cube.set_smooth()
        assert all(edge.smooth for edge in unit_cube.edges)
        unit_cube.set_sharp()
        assert not any(edge.smooth for edge in unit_cube.edges)

    def test_face_not_in_mesh(self, unit_cube: Mesh):
        with pytest.raises(ValueError, match="not part of this mesh"):
            unit_cube.set_smooth(primitives.quad().faces)


class TestAutoSmooth:

    def test_cube_is_sharp(self, unit_cube: Mesh):
        unit_cube.set_smooth()
        unit_cube.auto_smooth(30.0)
        assert not any(edge.smooth for edge in unit_cube.edges)

    def test_wide_threshold(self, unit_cube: Mesh):
        unit_cube.auto_smooth(91.0)
        assert all(edge.smooth for edge in unit_cube.edges)

    def test_coplanar_diagonals(self, unit_cube: Mesh):
        unit_cube.triangulate()
        unit_cube.set_sharp()
        unit_cube.auto_smooth()
        assert sum(edge.smooth for edge in unit_cube.edges) == 6

    def test_boundary_edges_unchanged(self, unit_quad: Mesh):
        unit_quad.set_smooth()
        unit_quad.auto_smooth(0.0)
        assert all(edge.smooth for edge in unit_quad.edges)

    def test_sphere_is_smooth(self):
        mesh = primitives.uv_sphere(1.0, 12, 24)
        mesh.set_sharp()
        mesh.auto_smooth(30.0)
        assert all(edge.smooth for edge in mesh.edges)

    def test_non_manifold_edge_checks_every_pair(self):
        """An edge shared by three faces is smooth only if all of them agree."""
        mesh = Mesh()
        a = Vertex((0.0, 0.0, 0.0))
        b = Vertex((1.0, 0.0, 0.0))
        left = Vertex((0.5, 0.0, 1.0))
        right = Vertex((0.5, 0.0, -1.0))
        up = Vertex((0.5, 1.0, 0.0))
        mesh.add_face([a, b, left])
        mesh.add_face([b, a, right])
        mesh.add_face([a, b, up])
        spine = a.edge_with(b)
        assert len(spine.faces) == 3

        mesh.auto_smooth(30.0)
        assert not spine.smooth

        mesh.auto_smooth(180.0)
        assert spine.smooth

    def test_negative_angle(self, unit_cube: Mesh):
        with pytest.raises(ValueError, match="non-negative"):
            unit_cube.auto_smooth(-1.0)
