"""Texture atlas cell lookup."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from townmesh.vertex import Vec2


@dataclass(frozen=True)
class TextureAtlas:
    """A texture split into a grid of equally sized cells.

    Cell texture coordinates are inset by a fixed margin of eight texels to
    avoid bleeding between neighbouring cells.
    """

    width: float
    height: float
    rows: int
    cols: int
    half_texel_size_u: float = field(init=False, repr=False)
    half_texel_size_v: float = field(init=False, repr=False)
    cell_size_u: float = field(init=False, repr=False)
    cell_size_v: float = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "half_texel_size_u", 8.0 / self.width)
        object.__setattr__(self, "half_texel_size_v", 8.0 / self.height)
        object.__setattr__(self, "cell_size_u", 1.0 / self.cols)
        object.__setattr__(self, "cell_size_v", 1.0 / self.rows)

    def mipmaps_count(self) -> int:
        """Number of mipmap levels for the atlas size."""
        return 1 + math.floor(math.log2(max(self.width, self.height)))

    def quad_texture_coords(self, row: int, col: int) -> tuple[Vec2, Vec2, Vec2, Vec2]:
        """Return the inset corners of a cell: (u0,v0), (u1,v0), (u0,v1), (u1,v1)."""
        u0 = col * self.cell_size_u + self.half_texel_size_u
        u1 = (col + 1) * self.cell_size_u - self.half_texel_size_u
        v0 = row * self.cell_size_v + self.half_texel_size_v
        v1 = (row + 1) * self.cell_size_v - self.half_texel_size_v
        return (u0, v0), (u1, v0), (u0, v1), (u1, v1)