"""Mesh vertex with position, texture coordinate and tangent space."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

import numpy as np

Vec2 = tuple[float, float]
Vec3 = tuple[float, float, float]

_ZERO2: Vec2 = (0.0, 0.0)
_ZERO3: Vec3 = (0.0, 0.0, 0.0)


def _as_tuple(values: Iterable[float], size: int) -> tuple[float, ...]:
    result = tuple(float(x) for x in values)
    if len(result) != size:
        raise ValueError(f"expected a vector of {size} components, got {len(result)}")
    return result


def _normalize(vector: np.ndarray) -> np.ndarray:
    """Scale a vector to unit length; a zero vector yields NaN components."""
    with np.errstate(divide="ignore", invalid="ignore"):
        return vector / np.linalg.norm(vector)


def _to_vec3(vector: np.ndarray) -> Vec3:
    return (float(vector[0]), float(vector[1]), float(vector[2]))


@dataclass
class Vertex:
    """A single mesh vertex.

    The texture coordinate defaults to the origin and the tangent and
    bitangent default to zero vectors.
    """

    position: Vec3
    tex_coord: Vec2 = _ZERO2
    normal: Vec3 = _ZERO3
    tangent: Vec3 = _ZERO3
    bitangent: Vec3 = _ZERO3

    def __post_init__(self) -> None:
        self.position = _as_tuple(self.position, 3)
        self.tex_coord = _as_tuple(self.tex_coord, 2)
        self.normal = _as_tuple(self.normal, 3)
        self.tangent = _as_tuple(self.tangent, 3)
        self.bitangent = _as_tuple(self.bitangent, 3)

    @staticmethod
    def calculate_tangent_space(p0, p1, p2, t0, t1, t2) -> tuple[Vec3, Vec3, Vec3]:
        """Return (tangent, bitangent, normal) of a textured triangle.

        The normal points against the cross product of the two edges and the
        tangent is made orthogonal to it. Degenerate texture coordinates
        produce NaN components rather than an error.
        """
        a, b, c = (np.asarray(_as_tuple(p, 3)) for p in (p0, p1, p2))
        u0, u1, u2 = (np.asarray(_as_tuple(t, 2)) for t in (t0, t1, t2))

        e1 = b - a
        e2 = c - a
        normal = -_normalize(np.cross(e1, e2))

        d_uv1 = u1 - u0
        d_uv2 = u2 - u0

        with np.errstate(divide="ignore", invalid="ignore"):
            f = np.float64(1.0) / (d_uv1[0] * d_uv2[1] - d_uv1[1] * d_uv2[0])
            tangent = _normalize(f * (d_uv2[1] * e1 - d_uv1[1] * e2))
            tangent = _normalize(tangent - np.dot(tangent, normal) * normal)
            bitangent = _normalize(np.cross(normal, tangent))

        return _to_vec3(tangent), _to_vec3(bitangent), _to_vec3(normal)