"""
Export
======
Flattens the shared-vertex topology of a mesh into render buffers.

Faces around a vertex that are connected through smooth edges share one output
vertex, whose UVs and color are averaged over those faces. Faces separated by
sharp edges (or touching the vertex only through boundary edges) get their own
copy of the vertex, producing a seam in the shading.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

import numpy as np

from procmesh.config import ALL_UV_CHANNELS, COLOR_COMPONENTS, MAX_UINT16_VERTEX_COUNT
from procmesh.topology import Face, Vertex
from procmesh.topology.face import check_uv_channel

if TYPE_CHECKING:
    import numpy.typing as npt
    from procmesh.mesh import Mesh

logger = logging.getLogger(__name__)


class IndexFormat(StrEnum):
    UINT16 = "uint16"
    UINT32 = "uint32"


def index_format_for(vertex_count: int) -> IndexFormat:
    """Narrowest index format able to address ``vertex_count`` vertices."""
    if vertex_count > MAX_UINT16_VERTEX_COUNT:
        return IndexFormat.UINT32
    return IndexFormat.UINT16


@dataclass
class MeshBuffers:
    """
    Flat, render-ready arrays produced by :func:`export`.

    Attributes:
        positions: (N, 3) vertex positions.
        uvs: Requested UV channel -> (N, 2) UVs.
        colors: (N, 4) RGBA colors.
        submeshes: Submesh id -> flat triangle index array.
    """
    positions: npt.NDArray[np.float64]
    uvs: dict[int, npt.NDArray[np.float64]] = field(default_factory=dict)
    colors: npt.NDArray[np.float64] = field(default_factory=lambda: np.zeros((0, COLOR_COMPONENTS), dtype=np.float64))
    submeshes: dict[int, npt.NDArray[np.integer]] = field(default_factory=dict)

    @property
    def vertex_count(self) -> int:
        return int(self.positions.shape[0])

    @property
    def index_format(self) -> IndexFormat:
        return index_format_for(self.vertex_count)

    @property
    def submesh_count(self) -> int:
        """One more than the highest submesh id, 0 without any submesh."""
        if not self.submeshes:
            return 0
        return max(self.submeshes) + 1

    @property
    def triangle_count(self) -> int:
        return sum(int(indices.size) for indices in self.submeshes.values()) // 3


def vertex_surfaces(vertex: Vertex) -> list[list[Face]]:
    """
    Group the faces around a vertex into smooth surfaces.

    Two faces are in the same surface when a smooth edge touching ``vertex``
    is shared by both. Every face of the vertex ends up in exactly one
    surface; a face without smooth neighbours forms a surface on its own.

    Returns:
        The surfaces, in the order of ``vertex.faces``.
    """
    adjacency: dict[Face, list[Face]] = {face: [] for face in vertex.faces}
    for edge in vertex.edges:
        if not edge.smooth or len(edge.faces) < 2:
            continue
        for i, f0 in enumerate(edge.faces):
            for f1 in edge.faces[i + 1:]:
                adjacency[f0].append(f1)
                adjacency[f1].append(f0)

    visited: set[Face] = set()
    surfaces: list[list[Face]] = []
    for seed in adjacency:
        if seed in visited:
            continue
        visited.add(seed)
        surface: list[Face] = []
        stack = [seed]
        while stack:
            face = stack.pop()
            surface.append(face)
            for neighbour in adjacency[face]:
                if neighbour not in visited:
                    visited.add(neighbour)
                    stack.append(neighbour)
        surfaces.append(surface)

    return surfaces


class _BufferBuilder:
    """Growing output arrays and the (vertex, face) -> index lookup."""
    def __init__(self, uv_channels: tuple[int, ...]) -> None:
        self.uv_channels = uv_channels
        self.positions: list[npt.NDArray[np.float64]] = []
        self.uvs: dict[int, list[npt.NDArray[np.float64]]] = {channel: [] for channel in uv_channels}
        self.colors: list[npt.NDArray[np.float64]] = []
        self.indices: dict[tuple[Vertex, Face], int] = {}

    def add(
        self,
        position: npt.NDArray[np.float64],
        uvs: dict[int, npt.NDArray[np.float64]],
        color: npt.NDArray[np.float64],
    ) -> int:
        index = len(self.positions)
        self.positions.append(position)
        for channel in self.uv_channels:
            self.uvs[channel].append(uvs[channel])
        self.colors.append(color)
        return index

    def add_surface(self, vertex: Vertex, surface: list[Face]) -> None:
        count = len(surface)
        uvs = {
            channel: np.sum([face.uv(vertex, channel) for face in surface], axis=0) / count
            for channel in self.uv_channels
        }
        color = np.sum([face.color(vertex) for face in surface], axis=0) / count

        index = self.add(vertex.position.copy(), uvs, color)
        for face in surface:
            self.indices[(vertex, face)] = index

    def index_of(
        self,
        vertex: Vertex,
        face: Face,
        synthesized_uvs: dict[tuple[Vertex, int], npt.NDArray[np.float64]],
    ) -> int:
        """Index of a corner, allocating a fresh vertex for corners no surface covers."""
        index = self.indices.get((vertex, face))
        if index is None:
            uvs = {}
            for channel in self.uv_channels:
                uv = synthesized_uvs.get((vertex, channel))
                uvs[channel] = face.uv(vertex, channel) if uv is None else uv.copy()
            index = self.add(vertex.position.copy(), uvs, face.color(vertex))
            self.indices[(vertex, face)] = index
        return index


def export(mesh: Mesh, uv_channels: Iterable[int] = ALL_UV_CHANNELS) -> MeshBuffers:
    """
    Build render buffers from a mesh.

    Faces are triangulated on the fly following their triangulation mode; the
    mesh itself is not modified.

    Args:
        mesh: Mesh to export.
        uv_channels: UV channels to write out.

    Raises:
        ValueError: If a requested UV channel is out of range.

    Returns:
        Positions, per-channel UVs, colors, and per-submesh index arrays.
        Index arrays are uint32 when the vertex count does not fit in uint16.
    """
    channels = tuple(dict.fromkeys(int(channel) for channel in uv_channels))
    for channel in channels:
        check_uv_channel(channel)

    builder = _BufferBuilder(channels)
    for vertex in mesh.vertices:
        for surface in vertex_surfaces(vertex):
            builder.add_surface(vertex, surface)
    shared = len(builder.positions)

    triangles: dict[int, list[int]] = {}
    for face in mesh.faces:
        result = face.triangles()
        indices = triangles.setdefault(face.submesh, [])
        for corners in result.corners:
            for vertex in corners:
                indices.append(builder.index_of(vertex, face, result.synthesized_uvs))

    vertex_count = len(builder.positions)
    dtype = np.uint32 if index_format_for(vertex_count) == IndexFormat.UINT32 else np.uint16

    if vertex_count:
        positions = np.array(builder.positions, dtype=np.float64)
        colors = np.array(builder.colors, dtype=np.float64)
        uvs = {channel: np.array(values, dtype=np.float64) for channel, values in builder.uvs.items()}
    else:
        positions = np.zeros((0, 3), dtype=np.float64)
        colors = np.zeros((0, COLOR_COMPONENTS), dtype=np.float64)
        uvs = {channel: np.zeros((0, 2), dtype=np.float64) for channel in channels}

    buffers = MeshBuffers(
        positions=positions,
        uvs=uvs,
        colors=colors,
        submeshes={submesh: np.array(indices, dtype=dtype) for submesh, indices in sorted(triangles.items())},
    )

    logger.debug(
        f"Exported {mesh.number_of_faces} faces: {vertex_count} vertices "
        f"({vertex_count - shared} synthesized), {buffers.triangle_count} triangles, "
        f"{len(buffers.submeshes)} submeshes, {buffers.index_format} indices."
    )
    return buffers
