"""Surface material: texture maps and lighting properties."""

from __future__ import annotations

from dataclasses import dataclass

from townmesh.texture import Texture


@dataclass(eq=False)
class Material:
    """Textures and shading properties of a surface.

    ``specular_strength`` is ((ior - 1) / (ior + 1))^2 / 0.08 for a given
    index of refraction.
    """

    diffuse_texture: Texture | None = None
    specular_texture: Texture | None = None
    specular_strength: float = 0.8
    shininess: float = 8.0
    ambient_texture: Texture | None = None
    normal_map: Texture | None = None
    dissolve: float = 1.0

    def uniforms(self) -> dict[str, int | float]:
        """Shader uniform values; texture maps are given as texture unit numbers."""
        missing = [
            name
            for name, texture in (
                ("ambient", self.ambient_texture),
                ("diffuse", self.diffuse_texture),
                ("specular", self.specular_texture),
            )
            if texture is None
        ]
        if missing:
            raise ValueError(f"material has no {', '.join(missing)} texture")

        values: dict[str, int | float] = {
            "material.ambientTexture": 0,
            "material.diffuseTexture": 1,
            "material.specularTexture": 2,
        }
        if self.normal_map is not None:
            values["material.normalMap"] = 3
        values["material.shiniess"] = self.shininess
        values["material.specularStrength"] = self.specular_strength
        values["material.dissolve"] = self.dissolve
        return values