# townmesh

Geometry building blocks for a grid-based town builder. None of it needs a
graphics context: everything works on plain Python data and numpy arrays.

## What is in it

- `townmesh.vertex`: the `Vertex` dataclass, which holds a position,
  texture coordinate, normal, tangent and bitangent.
  `Vertex.calculate_tangent_space(p0, p1, p2, t0, t1, t2)` returns
  `(tangent, bitangent, normal)` for a textured triangle. When the texture
  coordinates are degenerate it returns NaN components and does not raise.
- `townmesh.geometry_data`: `GeometryData`, which holds vertices, triangle
  indices and a `culling` flag. Creating one copies the vertices and
  computes their tangent space.
  - `GeometryData.merge(first, second)` combines two geometries. It raises
    `ValueError` when their culling flags differ.
  - `add_data` appends another geometry and offsets its indices.
  - `map_vertices` applies a function to every vertex.
  - `transform_vertices` applies a 4x4 matrix. Normals, tangents and
    bitangents go through the inverse transpose of that matrix.
  - `calculate_tangent_space` recomputes the tangent space.
  - `save_obj(path)` writes the geometry as a Wavefront OBJ file.
  - The helpers `triangle_tangent_space` and `apply_tangent_space` work on a
    single triangle.
- `townmesh.texture_atlas`: `TextureAtlas(width, height, rows, cols)`.
  `quad_texture_coords(row, col)` gives the four corners of a cell, inset by
  eight texels. `mipmaps_count()` gives the number of mipmap levels.
- `townmesh.texture`: `Texture`, with `PixelFormat.RGB` and
  `PixelFormat.RGBA`.
  - `Texture.from_file(filename, pixel_format)` refers to a PNG file. The
    file is decoded the first time `pixels` is read. Only non-interlaced
    8- and 16-bit images are decoded; 16-bit samples are reduced to 8 bits.
  - `Texture.solid(color, width, height)` fills a texture with one colour.
  - Pixels are stored bottom row first, as an array of shape
    `(height, width, channels)`.
- `townmesh.material`: `Material`, which holds texture maps, `shininess`,
  `specular_strength` and `dissolve`. `uniforms()` returns the
  shader-uniform values as a dict. It raises `ValueError` when the ambient,
  diffuse or specular texture is missing.
- `townmesh.obj_loader`: readers for OBJ and MTL files.
  - `load_mesh(path, model_dir)` returns a `Mesh` that maps each object
    name to a list of `(material, geometry)` pairs. Each material gets one
    culled and one non-culled geometry. The command `c off` in a file
    switches culling off for the faces after it, and `c on` switches it back
    on.
  - `load_materials(path, model_dir)` reads an MTL file. Texture file names
    are resolved against `model_dir`, which defaults to `res/models`.
  - A material without a normal map gets `res/textures/default_normal.png`.
  - Only the first three corners of each face are read, and each corner must
    be written as `v/vt/vn`.
  - Lower-level steps are also available: `parse_vec2`, `parse_vec3`,
    `parse_vertex_data`, `parse_face_data`, `correct_winding_order` and
    `process_faces`. `process_faces` removes duplicate vertices and computes
    tangent space.
- `townmesh.road_geometry`: `UVArea` and the shape generators
  `generate_quad`, `generate_annulus`, `generate_quad_circle`,
  `generate_annulus_sector` and `generate_quad_circle_sector`. An inner
  radius of 0 gives a disc or a pie slice. `vertices_count` must be at least
  3, and the circle walls need a positive radius.
- `townmesh.screen_layout`:
  - `quad_vertices(x_min, y_min, width, height)` returns two triangles as
    `(x, y, u, v)` tuples.
  - `shadow_map_tiles(cascade_count)` lays out `ShadowMapTile`s in a
    near-square grid over normalised device coordinates.
- `townmesh.events`: event dataclasses. These are `Event`, `EntityEvent`,
  `BuildEvent` (with `BuildAction` and `BuildShape`), `CameraUpdateEvent`,
  `ChunkCreatedEvent`, `ChunkUpdatedEvent`, `ChunkDestroyedEvent`,
  `EntityMoveEvent`, `FramebufferSizeEvent`, `KeyEvent`, `MouseMoveEvent`,
  `MouseButtonEvent`, `MouseScrollEvent` and `TerrainChangedEvent`.
  `BuildEvent.inside_area(pos, cell_size)` tells whether a world position
  falls on a grid cell that the build covers.

## Install

```
pip install townmesh
```

## Example

```python
import numpy as np
from townmesh.road_geometry import UVArea, generate_quad

quad = generate_quad(
    np.zeros(3),
    np.array([1.0, 0.0, 0.0]),
    np.array([0.0, 0.0, 1.0]),
    UVArea(0.0, 0.0, 1.0, 1.0),
)
print(len(quad.vertices), quad.indices)  # 4 [0, 1, 2, 1, 3, 2]
quad.save_obj("quad.obj")
```

## What it does not do

This is a data library. It does not include:

- anything that draws on screen: no window, rendering, shader compilation,
  GPU buffer upload or text rendering;
- a game loop, entity registry or resource manager. Events are plain
  dataclasses, and nothing dispatches them;
- complete road tiles. Only the primitive shapes they are built from are
  provided.

## Tests

```
pip install "townmesh[test]"
pytest
```