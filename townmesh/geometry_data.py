"""Indexed triangle geometry with tangent-space computation."""

from __future__ import annotations

import os
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace
from pathlib import Path

import numpy as np

from townmesh.vertex import Vec3, Vertex, _normalize, _to_vec3


def _triples(indices: Sequence[int]):
    it = iter(indices)
    return zip(it, it, it)


def triangle_tangent_space(triangle: Sequence[Vertex]) -> tuple[Vec3, Vec3]:
    """Return (tangent, bitangent) of a triangle given as three vertices."""
    if len(triangle) != 3:
        raise ValueError(f"a triangle has 3 vertices, got {len(triangle)}")
    a, b, c = triangle

    edge1 = np.subtract(b.position, a.position)
    edge2 = np.subtract(c.position, a.position)
    d_uv1 = np.subtract(b.tex_coord, a.tex_coord)
    d_uv2 = np.subtract(c.tex_coord, a.tex_coord)

    with np.errstate(divide="ignore", invalid="ignore"):
        f = np.float64(1.0) / (d_uv1[0] * d_uv2[1] - d_uv1[1] * d_uv2[0])
        tangent = _normalize(f * (d_uv2[1] * edge1 - d_uv1[1] * edge2))
        bitangent = _normalize(f * (-d_uv2[0] * edge1 + d_uv1[0] * edge2))

    return _to_vec3(tangent), _to_vec3(bitangent)


def apply_tangent_space(v1: Vertex, v2: Vertex, v3: Vertex) -> None:
    """Set the tangent and bitangent of all three vertices from their triangle."""
    tangent, bitangent = triangle_tangent_space((v1, v2, v3))
    for vertex in (v1, v2, v3):
        vertex.tangent = tangent
        vertex.bitangent = bitangent


@dataclass
class GeometryData:
    """Vertices with triangle indices and a face-culling flag.

    Creating an instance copies the vertices and computes their tangent space.
    """

    vertices: list[Vertex] = field(default_factory=list)
    indices: list[int] = field(default_factory=list)
    culling: bool = True

    def __post_init__(self) -> None:
        self.vertices = [replace(v) for v in self.vertices]
        self.indices = [int(i) for i in self.indices]
        self.calculate_tangent_space()

    @classmethod
    def _assemble(cls, vertices: list[Vertex], indices: list[int], culling: bool) -> GeometryData:
        data = cls.__new__(cls)
        data.vertices = vertices
        data.indices = indices
        data.culling = culling
        return data

    @staticmethod
    def merge(first: GeometryData, second: GeometryData) -> GeometryData:
        """Return a new geometry holding both inputs; their culling must match."""
        if first.culling != second.culling:
            raise ValueError("cannot merge geometries with different culling modes")
        offset = len(first.vertices)
        return GeometryData._assemble(
            [replace(v) for v in (*first.vertices, *second.vertices)],
            [*first.indices, *(offset + i for i in second.indices)],
            first.culling,
        )

    def add_data(self, data: GeometryData) -> None:
        """Append another geometry's vertices and offset indices to this one."""
        offset = len(self.vertices)
        self.vertices.extend(replace(v) for v in data.vertices)
        self.indices.extend(offset + i for i in data.indices)

    def map_vertices(self, function: Callable[[Vertex], Vertex]) -> GeometryData:
        """Return a copy whose vertices are the results of ``function``."""
        return GeometryData._assemble(
            [function(replace(v)) for v in self.vertices],
            list(self.indices),
            self.culling,
        )

    def transform_vertices(self, transform) -> GeometryData:
        """Return a copy transformed by a 4x4 matrix.

        Positions are transformed as points; normals, tangents and bitangents
        by the inverse transpose of the upper-left 3x3 block.
        """
        matrix = np.asarray(transform, dtype=float)
        if matrix.shape != (4, 4):
            raise ValueError(f"expected a 4x4 matrix, got shape {matrix.shape}")
        normal_matrix = np.linalg.inv(matrix).T[:3, :3]

        def transformed(v: Vertex) -> Vertex:
            position = (matrix @ np.append(np.asarray(v.position), 1.0))[:3]
            return Vertex(
                _to_vec3(position),
                v.tex_coord,
                _to_vec3(normal_matrix @ np.asarray(v.normal)),
                _to_vec3(normal_matrix @ np.asarray(v.tangent)),
                _to_vec3(normal_matrix @ np.asarray(v.bitangent)),
            )

        return GeometryData._assemble(
            [transformed(v) for v in self.vertices],
            list(self.indices),
            self.culling,
        )

    def calculate_tangent_space(self) -> None:
        """Compute tangents and bitangents for every triangle in place."""
        for a, b, c in _triples(self.indices):
            apply_tangent_space(self.vertices[a], self.vertices[b], self.vertices[c])

    def save_obj(self, path: str | os.PathLike) -> None:
        """Write the geometry as a Wavefront OBJ file."""
        lines = [f"v {x:g} {y:g} {z:g}" for x, y, z in (v.position for v in self.vertices)]
        lines += [f"vt {u:g} {w:g}" for u, w in (v.tex_coord for v in self.vertices)]
        lines += [f"vn {x:g} {y:g} {z:g}" for x, y, z in (v.normal for v in self.vertices)]
        for triangle in _triples(self.indices):
            corners = "".join(f"{i + 1}/{i + 1}/{i + 1} " for i in triangle)
            lines.append(f"f {corners}")
        Path(path).write_text("".join(line + "\n" for line in lines))