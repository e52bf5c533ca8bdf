"""Screen-space layouts for textured quads and shadow-map debug tiles."""

from __future__ import annotations

import math
from dataclasses import dataclass

QuadVertex = tuple[float, float, float, float]


def quad_vertices(x_min: float, y_min: float, width: float, height: float) -> list[QuadVertex]:
    """Return two triangles as (x, y, u, v) covering a rectangle.

    The texture's v axis runs opposite to y, so the top edge of the texture
    lands at ``y_min``.
    """
    x_max = x_min + width
    y_max = y_min + height
    return [
        (x_min, y_max, 0.0, 0.0),
        (x_max, y_min, 1.0, 1.0),
        (x_min, y_min, 0.0, 1.0),
        (x_min, y_max, 0.0, 0.0),
        (x_max, y_max, 1.0, 0.0),
        (x_max, y_min, 1.0, 1.0),
    ]


@dataclass(frozen=True)
class ShadowMapTile:
    """Where one shadow cascade layer is drawn in normalised device coordinates."""

    layer_id: int
    x: float
    y: float
    width: float
    height: float


def shadow_map_tiles(cascade_count: int) -> list[ShadowMapTile]:
    """Lay out the cascade layers in a near-square grid filling [-1, 1]²."""
    if cascade_count < 1:
        raise ValueError("at least one shadow cascade is required")
    columns = math.ceil(math.sqrt(cascade_count))
    rows = math.ceil(cascade_count / columns)
    stride_x = 2.0 / columns
    stride_y = 2.0 / rows

    tiles = []
    for layer_id in range(cascade_count):
        iy, ix = divmod(layer_id, columns)
        tiles.append(
            ShadowMapTile(layer_id, ix * stride_x - 1.0, iy * stride_y - 1.0, stride_x, stride_y)
        )
    return tiles