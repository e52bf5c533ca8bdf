from collections import deque

import numpy as np
import pytest

from townmesh.obj_loader import (
    DEFAULT_NORMAL_MAP,
    MaterialFaces,
    VertexData,
    VertexIndices,
    correct_winding_order,
    load_materials,
    load_mesh,
    parse_face_data,
    parse_vec2,
    parse_vec3,
    parse_vertex_data,
    process_faces,
)
from townmesh.texture import PixelFormat

MTL = """newmtl First
Kd 0.1 0.2 0.3
Ns 32
map_Kd first.png

newmtl Second
Ka 0.5 0.5 0.5
Kd 0.25 0.5 0.75
Ni 1.5
d 0.5
map_Bump -bm 1.0 bump.png
"""

OBJ = """mtllib scene.mtl
o Tri
v 0 0 0
v 1 0 0
v 0 0 1
vt 0 0
vt 1 0
vt 0 1
vn 0 1 0
usemtl First
f 1/1/1 3/3/1 2/2/1
c off
f 1/1/1 2/2/1 3/3/1
o Other
v 0 0 0
v 1 0 0
v 0 1 0
vt 0 0
vt 1 0
vt 0 1
vn 0 0 1
usemtl Second
f 4/4/2 5/5/2 6/6/2
"""


@pytest.fixture
def model_dir(tmp_path):
    (tmp_path / "scene.mtl").write_text(MTL)
    (tmp_path / "scene.obj").write_text(OBJ)
    return tmp_path


def test_parse_vectors():
    assert parse_vec3("1 2 3") == (1.0, 2.0, 3.0)
    assert parse_vec2("0.5 0.25") == (0.5, 0.25)
    with pytest.raises(ValueError):
        parse_vec2("1")


def test_vertex_indices_arithmetic():
    a = VertexIndices(3, 4, 5)
    b = VertexIndices(1, 2, 3)
    assert a - b + b == a
    assert (a - a) == VertexIndices(0, 0, 0)


def test_parse_vertex_data_consumes_only_vertex_lines():
    lines = deque(["v 1 2 3", "# comment", "vt 0.5 0.25", "vn 0 1 0", "usemtl X"])
    data = parse_vertex_data(lines)
    assert data.positions == [(1.0, 2.0, 3.0)]
    assert data.tex_coords == [(0.5, 0.25)]
    assert data.normals == [(0.0, 1.0, 0.0)]
    assert lines == deque(["usemtl X"])


def test_parse_face_data_offsets_materials_and_culling():
    lines = deque(
        ["usemtl A", "f 2/2/2 3/3/3 4/4/4", "", "c off", "usemtl B", "f 2/2/2 3/3/3 4/4/4", "o Next"]
    )
    faces = parse_face_data(lines, VertexIndices(1, 1, 1))
    expected = [VertexIndices(i, i, i) for i in range(3)]
    assert faces["A"].indices_culling == [expected]
    assert faces["A"].indices_non_culling == []
    assert faces["B"].indices_non_culling == [expected]
    assert lines == deque(["o Next"])


def test_parse_face_data_rejects_missing_texture_index():
    with pytest.raises(ValueError):
        parse_face_data(["f 1//1 2//2 3//3"], VertexIndices(0, 0, 0))


def test_parse_face_data_rejects_short_face():
    with pytest.raises(ValueError):
        parse_face_data(["f 1/1/1 2/2/2"], VertexIndices(0, 0, 0))


def _triangle_data(normal):
    return VertexData(
        positions=[(0.0, 0.0, 0.0), (0.0, 0.0, 1.0), (1.0, 0.0, 0.0)],
        tex_coords=[(0.0, 0.0), (0.0, 1.0), (1.0, 0.0)],
        normals=[normal],
    )


def test_correct_winding_order_swaps_opposed_face():
    corners = [VertexIndices(i, i, 0) for i in range(3)]
    faces = {"": MaterialFaces(indices_culling=[list(corners)], indices_non_culling=[list(corners)])}
    correct_winding_order(_triangle_data((0.0, -1.0, 0.0)), faces)
    assert faces[""].indices_culling[0] == [corners[1], corners[0], corners[2]]
    assert faces[""].indices_non_culling[0] == corners


def test_correct_winding_order_keeps_matching_face():
    corners = [VertexIndices(i, i, 0) for i in range(3)]
    faces = {"": MaterialFaces(indices_culling=[list(corners)])}
    correct_winding_order(_triangle_data((0.0, 1.0, 0.0)), faces)
    assert faces[""].indices_culling[0] == corners


def test_process_faces_shares_equal_corners():
    data = VertexData(
        positions=[(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 0.0, 1.0), (1.0, 0.0, 1.0)],
        tex_coords=[(0.0, 0.0), (1.0, 0.0), (0.0, 1.0), (1.0, 1.0)],
        normals=[(0.0, 1.0, 0.0)],
    )
    a, b, c, d = (VertexIndices(i, i, 0) for i in range(4))
    geometry = process_faces([[a, b, c], [b, d, c]], data)
    assert geometry.indices == [0, 1, 2, 1, 3, 2]
    assert [v.position for v in geometry.vertices] == data.positions
    tangent = np.asarray(geometry.vertices[0].tangent)
    assert np.linalg.norm(tangent) == pytest.approx(1.0)


def test_load_materials(model_dir):
    materials = load_materials(model_dir / "scene.mtl", model_dir)
    first, second = materials["First"], materials["Second"]

    assert first.shininess == 32.0
    assert first.diffuse_texture.path == model_dir / "first.png"
    assert first.normal_map.path == DEFAULT_NORMAL_MAP
    assert first.normal_map.pixel_format is PixelFormat.RGB
    assert first.ambient_texture is None

    assert second.normal_map.path == model_dir / "bump.png"
    assert second.normal_map.pixel_format is PixelFormat.RGB
    assert second.dissolve == 0.5
    assert second.specular_strength == pytest.approx(0.5)
    np.testing.assert_allclose(second.diffuse_texture.pixels[0, 0], [0.25, 0.5, 0.75])
    np.testing.assert_allclose(second.ambient_texture.pixels[0, 0], [0.5, 0.5, 0.5])


def test_load_materials_property_before_newmtl(tmp_path):
    path = tmp_path / "bad.mtl"
    path.write_text("Ns 10\n")
    with pytest.raises(ValueError):
        load_materials(path, tmp_path)


def test_load_materials_empty_file(tmp_path):
    path = tmp_path / "empty.mtl"
    path.write_text("\n")
    with pytest.raises(ValueError):
        load_materials(path, tmp_path)


def test_load_mesh(model_dir):
    mesh = load_mesh(model_dir / "scene.obj", model_dir)
    assert set(mesh.geometries) == {"Tri", "Other"}

    tri = mesh.geometries["Tri"]
    assert len(tri) == 2
    (material, culled), (_, double_sided) = tri
    assert material.shininess == 32.0
    assert culled.culling is True and double_sided.culling is False
    assert [v.position for v in culled.vertices] == [(0.0, 0.0, 0.0), (0.0, 0.0, 1.0), (1.0, 0.0, 0.0)]
    assert [v.position for v in double_sided.vertices] == [
        (0.0, 0.0, 0.0),
        (1.0, 0.0, 0.0),
        (0.0, 0.0, 1.0),
    ]

    (other_material, other), _ = mesh.geometries["Other"]
    assert other_material.dissolve == 0.5
    assert [v.position for v in other.vertices] == [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0)]
    assert all(v.normal == (0.0, 0.0, 1.0) for v in other.vertices)


def test_load_mesh_unknown_material(model_dir):
    path = model_dir / "missing.obj"
    path.write_text(OBJ.replace("usemtl Second", "usemtl Missing"))
    with pytest.raises(KeyError):
        load_mesh(path, model_dir)