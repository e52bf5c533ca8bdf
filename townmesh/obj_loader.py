"""Wavefront OBJ and MTL loading into per-object, per-material geometry."""

from __future__ import annotations

import logging
import os
from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np

from townmesh.geometry_data import GeometryData
from townmesh.material import Material
from townmesh.texture import PixelFormat, Texture
from townmesh.vertex import Vec2, Vec3, Vertex

_log = logging.getLogger(__name__)

DEFAULT_MODEL_DIR = Path("res/models")
DEFAULT_NORMAL_MAP = Path("res/textures/default_normal.png")


@dataclass(frozen=True)
class VertexIndices:
    """Zero-based position, texture-coordinate and normal indices of a face corner."""

    position_index: int
    tex_coord_index: int
    normal_index: int

    def __add__(self, other: VertexIndices) -> VertexIndices:
        return VertexIndices(
            self.position_index + other.position_index,
            self.tex_coord_index + other.tex_coord_index,
            self.normal_index + other.normal_index,
        )

    def __sub__(self, other: VertexIndices) -> VertexIndices:
        return VertexIndices(
            self.position_index - other.position_index,
            self.tex_coord_index - other.tex_coord_index,
            self.normal_index - other.normal_index,
        )


FaceIndices = list[VertexIndices]


@dataclass
class VertexData:
    """Vertex attributes declared by one object."""

    positions: list[Vec3] = field(default_factory=list)
    tex_coords: list[Vec2] = field(default_factory=list)
    normals: list[Vec3] = field(default_factory=list)


@dataclass
class MaterialFaces:
    """Triangles of one material, split by whether back faces are culled."""

    indices_culling: list[FaceIndices] = field(default_factory=list)
    indices_non_culling: list[FaceIndices] = field(default_factory=list)


FaceData = dict[str, MaterialFaces]


@dataclass
class Mesh:
    """Geometry of every object, as (material, geometry) pairs."""

    geometries: dict[str, list[tuple[Material, GeometryData]]] = field(default_factory=dict)


def _parse_floats(text: str, count: int) -> tuple[float, ...]:
    tokens = text.split()
    if len(tokens) < count:
        raise ValueError(f"expected {count} numbers in {text!r}")
    return tuple(float(token) for token in tokens[:count])


def parse_vec2(text: str) -> Vec2:
    """Read two numbers separated by whitespace."""
    x, y = _parse_floats(text, 2)
    return (x, y)


def parse_vec3(text: str) -> Vec3:
    """Read three numbers separated by whitespace."""
    x, y, z = _parse_floats(text, 3)
    return (x, y, z)


def _queue(lines: Iterable[str]) -> deque[str]:
    return lines if isinstance(lines, deque) else deque(lines)


def _peek(lines: deque[str]) -> str:
    return lines[0][:1] if lines else ""


def _split(line: str) -> tuple[str, str]:
    parts = line.split(maxsplit=1)
    return parts[0], parts[1] if len(parts) > 1 else ""


def parse_vertex_data(lines: Iterable[str]) -> VertexData:
    """Read the v, vt, vn and comment lines at the front of ``lines``.

    A deque passed in is consumed in place up to the first other line.
    """
    queue = _queue(lines)
    data = VertexData()
    while _peek(queue) in ("v", "#"):
        prefix, rest = _split(queue.popleft())
        if prefix == "v":
            data.positions.append(parse_vec3(rest))
        elif prefix == "vt":
            data.tex_coords.append(parse_vec2(rest))
        elif prefix == "vn":
            data.normals.append(parse_vec3(rest))
    return data


def _parse_corner(token: str) -> VertexIndices:
    parts = token.split("/")
    try:
        if len(parts) < 3:
            raise ValueError
        return VertexIndices(int(parts[0]) - 1, int(parts[1]) - 1, int(parts[2]) - 1)
    except ValueError:
        raise ValueError(f"face corner {token!r} is not of the form v/vt/vn") from None


def parse_face_data(lines: Iterable[str], index_offsets: VertexIndices) -> FaceData:
    """Read faces grouped by material until the next object or the end.

    Only the first three corners of each face are used. ``c off`` and
    ``c on`` switch back-face culling for the faces that follow. A deque
    passed in is consumed in place.
    """
    queue = _queue(lines)
    faces: FaceData = {}
    material_name = ""
    culling = True
    while queue and _peek(queue) != "o":
        line = queue.popleft()
        if not line.strip():
            continue
        prefix, rest = _split(line)
        if prefix == "usemtl":
            tokens = rest.split()
            if tokens:
                material_name = tokens[0]
        elif prefix == "f":
            corners = rest.split()
            if len(corners) < 3:
                raise ValueError(f"face {line!r} has fewer than three corners")
            face = [_parse_corner(token) - index_offsets for token in corners[:3]]
            entry = faces.setdefault(material_name, MaterialFaces())
            (entry.indices_culling if culling else entry.indices_non_culling).append(face)
        elif prefix == "c":
            value = rest.split()[0] if rest.split() else ""
            if value == "on":
                culling = True
            elif value == "off":
                culling = False
    return faces


def correct_winding_order(vertices: VertexData, faces: FaceData) -> None:
    """Make culled faces counter-clockwise with respect to their first corner's normal."""
    for entry in faces.values():
        for face in entry.indices_culling:
            p0, p1, p2 = (np.asarray(vertices.positions[c.position_index]) for c in face)
            normal = np.asarray(vertices.normals[face[0].normal_index])
            if np.dot(np.cross(p1 - p0, p2 - p0), normal) < 0:
                face[0], face[1] = face[1], face[0]


def process_faces(indices: Iterable[FaceIndices], vertex_data: VertexData) -> GeometryData:
    """Build indexed geometry, sharing vertices whose attribute indices are equal."""
    slots: dict[VertexIndices, int] = {}
    triangle_indices = [slots.setdefault(corner, len(slots)) for face in indices for corner in face]
    vertices = [
        Vertex(
            vertex_data.positions[corner.position_index],
            vertex_data.tex_coords[corner.tex_coord_index],
            vertex_data.normals[corner.normal_index],
        )
        for corner in slots
    ]
    return GeometryData(vertices, triangle_indices)


def _require(material: Material | None, path: Path, prefix: str) -> Material:
    if material is None:
        raise ValueError(f"{path}: {prefix!r} appears before any newmtl")
    return material


def _first(args: list[str], path: Path, prefix: str) -> str:
    if not args:
        raise ValueError(f"{path}: {prefix!r} needs a value")
    return args[0]


def _give_default_normal_map(material: Material, path: Path) -> None:
    if material.normal_map is None:
        _log.info("No normal map loaded for: %s using default normal map", path)
        material.normal_map = Texture.from_file(DEFAULT_NORMAL_MAP, PixelFormat.RGB)


def load_materials(
    path: str | os.PathLike, model_dir: str | os.PathLike = DEFAULT_MODEL_DIR
) -> dict[str, Material]:
    """Read an MTL file; texture file names are resolved against ``model_dir``.

    Materials without a normal map get the default one. Colours are carried
    over between materials, and only the last material gets solid-colour
    textures in place of missing ambient, diffuse and specular maps. When a
    name repeats, the first material keeps it.
    """
    path = Path(path)
    model_dir = Path(model_dir)
    materials: dict[str, Material] = {}
    current: Material | None = None
    name = ""
    ambient: Vec3 = (1.0, 1.0, 1.0)
    diffuse: Vec3 = (1.0, 1.0, 1.0)
    specular: Vec3 = (1.0, 1.0, 1.0)

    for line in path.read_text().splitlines():
        tokens = line.split()
        if not tokens:
            continue
        prefix, args = tokens[0], tokens[1:]
        rest = " ".join(args)
        if prefix == "newmtl":
            if current is not None:
                _give_default_normal_map(current, path)
                materials.setdefault(name, current)
            current = Material()
            if args:
                name = args[0]
        elif prefix == "Ka":
            ambient = parse_vec3(rest)
        elif prefix == "Kd":
            diffuse = parse_vec3(rest)
        elif prefix == "Ks":
            specular = parse_vec3(rest)
        elif prefix == "Ns":
            _require(current, path, prefix).shininess = float(_first(args, path, prefix))
        elif prefix == "Ni":
            ior = float(_first(args, path, prefix))
            _require(current, path, prefix).specular_strength = ((ior - 1) / (ior + 1)) ** 2 / 0.08
        elif prefix == "d":
            _require(current, path, prefix).dissolve = float(_first(args, path, prefix))
        elif prefix == "map_Ka":
            texture = Texture.from_file(model_dir / _first(args, path, prefix))
            _require(current, path, prefix).ambient_texture = texture
        elif prefix in ("map_Kd", "map_Ke"):
            texture = Texture.from_file(model_dir / _first(args, path, prefix))
            _require(current, path, prefix).diffuse_texture = texture
        elif prefix == "map_Ks":
            texture = Texture.from_file(model_dir / _first(args, path, prefix))
            _require(current, path, prefix).specular_texture = texture
        elif prefix == "map_Bump":
            remaining = iter(args)
            filename = next(remaining, "")
            while filename.startswith("-"):
                next(remaining, "")
                filename = next(remaining, "")
            if not filename:
                raise ValueError(f"{path}: map_Bump needs a file name")
            _require(current, path, prefix).normal_map = Texture.from_file(
                model_dir / filename, PixelFormat.RGB
            )

    if current is None:
        raise ValueError(f"{path}: no materials defined")
    _give_default_normal_map(current, path)
    if current.ambient_texture is None:
        current.ambient_texture = Texture.solid(ambient, 1, 1)
    if current.diffuse_texture is None:
        current.diffuse_texture = Texture.solid(diffuse, 1, 1)
    if current.specular_texture is None:
        current.specular_texture = Texture.solid(specular, 1, 1)
    materials.setdefault(name, current)
    return materials


def load_mesh(path: str | os.PathLike, model_dir: str | os.PathLike = DEFAULT_MODEL_DIR) -> Mesh:
    """Read an OBJ file; material libraries are resolved against ``model_dir``.

    Each object yields, per material, a culled and a non-culled geometry.
    """
    model_dir = Path(model_dir)
    queue = deque(Path(path).read_text().splitlines())
    mesh = Mesh()
    materials: dict[str, Material] = {}
    offsets = VertexIndices(0, 0, 0)

    while queue:
        tokens = queue.popleft().split()
        if not tokens:
            continue
        if tokens[0] == "mtllib":
            if len(tokens) < 2:
                raise ValueError("mtllib needs a file name")
            for name, material in load_materials(model_dir / tokens[1], model_dir).items():
                materials.setdefault(name, material)
        elif tokens[0] == "o":
            object_name = tokens[1] if len(tokens) > 1 else ""
            vertex_data = parse_vertex_data(queue)
            face_data = parse_face_data(queue, offsets)
            correct_winding_order(vertex_data, face_data)

            for material_name, faces in face_data.items():
                if material_name not in materials:
                    raise KeyError(f"material {material_name!r} is not defined")
                material = materials[material_name]

                culled = process_faces(faces.indices_culling, vertex_data)
                culled.culling = True
                double_sided = process_faces(faces.indices_non_culling, vertex_data)
                double_sided.culling = False

                mesh.geometries.setdefault(object_name, []).extend(
                    [(material, culled), (material, double_sided)]
                )

            offsets = offsets + VertexIndices(
                len(vertex_data.positions), len(vertex_data.tex_coords), len(vertex_data.normals)
            )
    return mesh