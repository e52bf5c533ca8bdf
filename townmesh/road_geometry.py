"""Primitive shapes from which road tiles are assembled."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from townmesh.geometry_data import GeometryData
from townmesh.vertex import Vertex, _normalize, _to_vec3

_UP = (0.0, 1.0, 0.0)


@dataclass(frozen=True)
class UVArea:
    """A rectangle in texture space: origin (u, v) and extent (size_u, size_v)."""

    u: float
    v: float
    size_u: float
    size_v: float


def _vec3(values: Sequence[float]) -> np.ndarray:
    array = np.asarray(values, dtype=float)
    if array.shape != (3,):
        raise ValueError(f"expected a vector of 3 components, got shape {array.shape}")
    return array


def _check_count(vertices_count: int) -> None:
    if vertices_count <= 2:
        raise ValueError("at least three vertices are required")


def _circle_point(center: np.ndarray, radius: float, angle: float) -> np.ndarray:
    return center + np.array([radius * math.cos(angle), 0.0, radius * math.sin(angle)])


def generate_quad(position, first, second, area: UVArea) -> GeometryData:
    """A parallelogram spanned by two edge vectors from ``position``.

    The face normal is the normalised cross product of the two edges.
    """
    origin = _vec3(position)
    a = _vec3(first)
    b = _vec3(second)
    normal = _to_vec3(_normalize(np.cross(a, b)))

    vertices = [
        Vertex(_to_vec3(origin), (area.u, area.v), normal),
        Vertex(_to_vec3(origin + a), (area.u + area.size_u, area.v), normal),
        Vertex(_to_vec3(origin + b), (area.u, area.v + area.size_v), normal),
        Vertex(
            _to_vec3(origin + a + b),
            (area.u + area.size_u, area.v + area.size_v),
            normal,
        ),
    ]
    return GeometryData(vertices, [0, 1, 2, 1, 3, 2])


def generate_annulus(
    center, outer_radius: float, inner_radius: float, vertices_count: int, uvs: UVArea
) -> GeometryData:
    """A flat ring in the xz plane facing up; an inner radius of 0 gives a disc."""
    _check_count(vertices_count)
    origin = _vec3(center)
    step = math.radians(360.0) / vertices_count
    vertices: list[Vertex] = []
    indices: list[int] = []

    if inner_radius == 0:
        u_radius = uvs.size_u / 2.0
        v_radius = uvs.size_v / 2.0
        uv_center = (uvs.u + u_radius, uvs.v + v_radius)

        vertices.append(Vertex(_to_vec3(origin), uv_center, _UP))
        for i in range(vertices_count + 1):
            angle = i * step
            uv = (
                uv_center[0] + u_radius * math.cos(angle),
                uv_center[1] + v_radius * math.sin(angle),
            )
            vertices.append(Vertex(_to_vec3(_circle_point(origin, outer_radius, angle)), uv, _UP))

        for i in range(1, vertices_count + 1):
            indices.extend((0, i, i + 1))
    else:
        v_step = uvs.size_v / vertices_count
        for radius, u in ((inner_radius, uvs.u), (outer_radius, uvs.u + uvs.size_u)):
            for i in range(vertices_count + 1):
                point = _circle_point(origin, radius, i * step)
                vertices.append(Vertex(_to_vec3(point), (u, uvs.v + i * v_step), _UP))

        n = vertices_count
        for i in range(n):
            indices.extend((n + i, i, n + i + 1, i, i + 1, n + i + 1))

    return GeometryData(vertices, indices)


def generate_quad_circle(
    center,
    height: float,
    radius: float,
    vertices_count: int,
    uvs: UVArea,
    normals_inside: bool = False,
) -> GeometryData:
    """A vertical cylinder wall of the given height around ``center``."""
    _check_count(vertices_count)
    if radius <= 0:
        raise ValueError("radius must be positive")
    origin = _vec3(center)
    height_vec = np.array([0.0, height, 0.0])
    v_step = uvs.size_v / vertices_count
    step = math.radians(360.0) / vertices_count

    data = GeometryData()
    for i in range(vertices_count):
        p1 = _circle_point(np.zeros(3), radius, i * step)
        p2 = _circle_point(np.zeros(3), radius, (i + 1) * step)
        area = UVArea(uvs.u, uvs.v + i * v_step, uvs.size_u, v_step)
        if normals_inside:
            data.add_data(generate_quad(origin + p1, p2 - p1, height_vec, area))
        else:
            data.add_data(generate_quad(origin + p1, height_vec, p2 - p1, area))
    return data


def generate_annulus_sector(
    center,
    outer_radius: float,
    inner_radius: float,
    vertices_count: int,
    start_angle_deg: float,
    end_angle_deg: float,
    uvs: UVArea,
) -> GeometryData:
    """Part of a flat ring between two angles; an inner radius of 0 gives a pie slice."""
    _check_count(vertices_count)
    origin = _vec3(center)
    start = math.radians(start_angle_deg)
    step = math.radians(end_angle_deg - start_angle_deg) / (vertices_count - 1)
    vertices: list[Vertex] = []
    indices: list[int] = []

    if inner_radius == 0:
        u_radius = uvs.size_u / 2.0
        v_radius = uvs.size_v / 2.0
        uv_center = (uvs.u + u_radius, uvs.v + v_radius)

        def rim(angle: float) -> Vertex:
            uv = (
                uv_center[0] + u_radius * math.cos(angle),
                uv_center[1] + v_radius * math.sin(angle),
            )
            return Vertex(_to_vec3(_circle_point(origin, outer_radius, angle)), uv, _UP)

        for i in range(vertices_count - 1):
            vertices.append(Vertex(_to_vec3(origin), uv_center, _UP))
            vertices.append(rim(start + (i + 1) * step))
            vertices.append(rim(start + i * step))
        indices = list(range(len(vertices)))
    else:
        v_step = uvs.size_v / (vertices_count - 1)
        for radius, u in ((inner_radius, uvs.u), (outer_radius, uvs.u + uvs.size_u)):
            for i in range(vertices_count):
                point = _circle_point(origin, radius, start + i * step)
                vertices.append(Vertex(_to_vec3(point), (u, uvs.v + i * v_step), _UP))

        n = vertices_count
        for i in range(n - 1):
            indices.extend((n + i, i, n + i + 1, i, i + 1, n + i + 1))

    return GeometryData(vertices, indices)


def generate_quad_circle_sector(
    center,
    height: float,
    radius: float,
    vertices_count: int,
    start_angle_deg: float,
    end_angle_deg: float,
    uvs: UVArea,
    normals_inside: bool = False,
) -> GeometryData:
    """A vertical cylinder wall between two angles around ``center``."""
    _check_count(vertices_count)
    if radius <= 0:
        raise ValueError("radius must be positive")
    origin = _vec3(center)
    height_vec = np.array([0.0, height, 0.0])
    v_step = uvs.size_v / (vertices_count - 1)
    start = math.radians(start_angle_deg)
    step = math.radians(end_angle_deg - start_angle_deg) / (vertices_count - 1)

    data = GeometryData()
    for i in range(vertices_count - 1):
        p1 = _circle_point(np.zeros(3), radius, start + i * step)
        p2 = _circle_point(np.zeros(3), radius, start + (i + 1) * step)
        area = UVArea(uvs.u, uvs.v + i * v_step, uvs.size_u, v_step)
        if normals_inside:
            data.add_data(generate_quad(origin + p1, p2 - p1, height_vec, area))
        else:
            data.add_data(generate_quad(origin + p1, height_vec, p2 - p1, area))
    return data