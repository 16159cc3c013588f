"""
Primitive Shapes
================
Constructors for common starting meshes. Each one only places vertices and
calls :meth:`procmesh.mesh.Mesh.add_face`; faces are wound counter-clockwise
seen from outside, so :attr:`Face.normal` points outwards.

Quad, cube and grids lie on (or are aligned with) the XZ plane, Y up.
"""
from __future__ import annotations

import logging
import math

import numpy as np

from procmesh.mesh import Mesh
from procmesh.topology import TriangulationMode, Vertex

logger = logging.getLogger(__name__)


def quad(size: float = 1.0) -> Mesh:
    """Single square face of side ``size`` centred on the origin, facing +Y."""
    hs = 0.5 * size
    mesh = Mesh()
    mesh.add_polygon([(hs, 0.0, hs), (hs, 0.0, -hs), (-hs, 0.0, -hs), (-hs, 0.0, hs)])
    return mesh


def cube(size: float = 1.0) -> Mesh:
    """Axis-aligned cube of side ``size`` centred on the origin. All edges are sharp."""
    hs = 0.5 * size
    v0 = Vertex((hs, hs, hs))
    v1 = Vertex((hs, hs, -hs))
    v2 = Vertex((-hs, hs, -hs))
    v3 = Vertex((-hs, hs, hs))
    v4 = Vertex((hs, -hs, hs))
    v5 = Vertex((hs, -hs, -hs))
    v6 = Vertex((-hs, -hs, -hs))
    v7 = Vertex((-hs, -hs, hs))

    mesh = Mesh()
    mesh.add_face([v0, v1, v2, v3])  # top
    mesh.add_face([v7, v6, v5, v4])  # bottom
    mesh.add_face([v4, v5, v1, v0])  # +X
    mesh.add_face([v5, v6, v2, v1])  # -Z
    mesh.add_face([v6, v7, v3, v2])  # -X
    mesh.add_face([v7, v4, v0, v3])  # +Z
    return mesh


def square_grid(width: int, height: int, cell_size: float = 1.0) -> Mesh:
    """
    Grid of ``width`` x ``height`` square cells on the XZ plane, starting at the origin.

    Raises:
        ValueError: If ``width`` or ``height`` is smaller than 1.
    """
    if width < 1 or height < 1:
        raise ValueError(f"A grid needs at least one cell in each direction, got {width}x{height}.")

    vertices = [[Vertex((x * cell_size, 0.0, y * cell_size)) for y in range(height + 1)] for x in range(width + 1)]

    mesh = Mesh()
    for x in range(width):
        for y in range(height):
            mesh.add_face([vertices[x][y], vertices[x][y + 1], vertices[x + 1][y + 1], vertices[x + 1][y]])
    return mesh


def triangle_grid(width: int, height: int, side_size: float = 1.0) -> Mesh:
    """
    Grid of near-equilateral triangles on the XZ plane, centred on the origin.

    Every other row is shifted by half a side. Each cell holds two triangles.

    Raises:
        ValueError: If ``width`` or ``height`` is smaller than 1.
    """
    if width < 1 or height < 1:
        raise ValueError(f"A grid needs at least one cell in each direction, got {width}x{height}.")

    h = side_size * math.sqrt(3.0) / 2.0
    offset = -0.5 * np.array([width * side_size, 0.0, height * h])

    vertices = [
        [Vertex(np.array([(x + (y % 2) * 0.5) * side_size, 0.0, y * h]) + offset) for y in range(height + 1)]
        for x in range(width + 1)
    ]

    mesh = Mesh()
    for x in range(width):
        for y in range(height):
            v0 = vertices[x][y]
            v1 = vertices[x][y + 1]
            v2 = vertices[x + 1][y + 1]
            v3 = vertices[x + 1][y]
            if y % 2 == 0:
                mesh.add_face([v0, v1, v3])
                mesh.add_face([v1, v2, v3])
            else:
                mesh.add_face([v0, v1, v2])
                mesh.add_face([v0, v2, v3])
    return mesh


def cylinder(radius: float, height: float, sides: int) -> Mesh:
    """
    Closed cylinder along Y, centred on the origin.

    The side quads are smooth between each other; the two caps are n-gons
    triangulated radially and meet the sides on sharp edges.

    Raises:
        ValueError: If ``sides`` is smaller than 3.
    """
    if sides < 3:
        raise ValueError(f"A cylinder can't have less than 3 sides, got {sides}.")

    top: list[Vertex] = []
    bottom: list[Vertex] = []
    for i in range(sides):
        angle = 2.0 * math.pi * i / sides
        x = radius * math.cos(angle)
        z = radius * math.sin(angle)
        top.append(Vertex((x, 0.5 * height, z)))
        bottom.append(Vertex((x, -0.5 * height, z)))

    mesh = Mesh()
    side_faces = [
        mesh.add_face([top[i], top[(i + 1) % sides], bottom[(i + 1) % sides], bottom[i]])
        for i in range(sides)
    ]
    mesh.add_face(reversed(top), triangulation=TriangulationMode.RADIAL)
    mesh.add_face(bottom, triangulation=TriangulationMode.RADIAL)

    mesh.set_smooth(side_faces)
    return mesh


def _cube_sphere_vertex(
    vertices: dict[tuple[int, int, int], Vertex],
    index: np.ndarray,
    radius: float,
    resolution: int,
) -> Vertex:
    """Vertex of lattice point ``index`` projected onto the sphere, created once per point."""
    key = (int(index[0]), int(index[1]), int(index[2]))
    vertex = vertices.get(key)
    if vertex is None:
        position = index / resolution - 0.5
        vertex = Vertex(radius * position / np.linalg.norm(position))
        vertices[key] = vertex
    return vertex


def _uv_sphere_vertex(
    vertices: dict[tuple[int, int], Vertex],
    ring: int,
    segment: int,
    rings: int,
    segments: int,
    radius: float,
) -> Vertex:
    """Vertex at a ring/segment crossing; each pole is a single vertex."""
    if ring == 0 or ring == rings:
        key = (ring, 0)
    else:
        key = (ring, segment % segments)
    vertex = vertices.get(key)
    if vertex is None:
        theta = math.pi * ring / rings
        phi = 2.0 * math.pi * key[1] / segments
        vertex = Vertex(radius * np.array([
            math.sin(theta) * math.cos(phi),
            math.cos(theta),
            math.sin(theta) * math.sin(phi),
        ]))
        vertices[key] = vertex
    return vertex


def cube_sphere(radius: float, resolution: int) -> Mesh:
    """
    Sphere built by projecting a subdivided cube, ``resolution`` quads per cube edge.

    All edges are smooth.

    Raises:
        ValueError: If ``resolution`` is smaller than 1.
    """
    if resolution < 1:
        raise ValueError(f"Resolution should be at least 1, got {resolution}.")

    vertices: dict[tuple[int, int, int], Vertex] = {}
    mesh = Mesh()
    for side in range(6):
        front = side % 2 == 0
        origin = np.zeros(3, dtype=int) if front else np.full(3, resolution, dtype=int)

        x_axis = np.zeros(3, dtype=int)
        x_axis[side // 2] = 1 if front else -1
        y_axis = np.zeros(3, dtype=int)
        y_axis[(side // 2 + 1) % 3] = 1 if front else -1
        if front:
            x_axis, y_axis = y_axis, x_axis

        for i in range(resolution):
            for j in range(resolution):
                corner = origin + i * x_axis + j * y_axis
                mesh.add_face([
                    _cube_sphere_vertex(vertices, index, radius, resolution)
                    for index in (corner, corner + x_axis, corner + x_axis + y_axis, corner + y_axis)
                ])

    mesh.set_smooth()
    return mesh


def uv_sphere(radius: float, rings: int, segments: int) -> Mesh:
    """
    Latitude/longitude sphere around Y, with triangles at the poles.

    All edges are smooth.

    Raises:
        ValueError: If ``rings`` is smaller than 2 or ``segments`` smaller than 3.
    """
    if rings < 2 or segments < 3:
        raise ValueError(f"Rings must be at least 2 and segments at least 3, got {rings} and {segments}.")

    vertices: dict[tuple[int, int], Vertex] = {}
    mesh = Mesh()
    for ring in range(rings):
        for segment in range(segments):
            v0 = _uv_sphere_vertex(vertices, ring, segment, rings, segments, radius)
            v1 = _uv_sphere_vertex(vertices, ring, segment + 1, rings, segments, radius)
            v2 = _uv_sphere_vertex(vertices, ring + 1, segment + 1, rings, segments, radius)
            v3 = _uv_sphere_vertex(vertices, ring + 1, segment, rings, segments, radius)
            if v0 is v1:
                mesh.add_face([v0, v2, v3])  # north pole
            elif v2 is v3:
                mesh.add_face([v0, v1, v2])  # south pole
            else:
                mesh.add_face([v0, v1, v2, v3])

    mesh.set_smooth()
    logger.debug(f"UV sphere: {mesh.number_of_vertices} vertices, {mesh.number_of_faces} faces.")
    return mesh
