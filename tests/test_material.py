import pytest

from townmesh.material import Material
from townmesh.texture import Texture


def _textured(**kwargs):
    return Material(
        diffuse_texture=Texture.solid((1, 1, 1), 1, 1),
        specular_texture=Texture.solid((1, 1, 1), 1, 1),
        ambient_texture=Texture.solid((1, 1, 1), 1, 1),
        **kwargs,
    )


def test_defaults():
    material = Material()
    assert material.specular_strength == pytest.approx(0.8)
    assert material.shininess == 8.0
    assert material.dissolve == 1.0


def test_positional_construction():
    diffuse = Texture.solid((1, 0, 0), 1, 1)
    specular = Texture.solid((0, 1, 0), 1, 1)
    material = Material(diffuse, specular, 0.3, 16.0)
    assert material.diffuse_texture is diffuse
    assert material.specular_texture is specular
    assert (material.specular_strength, material.shininess) == (0.3, 16.0)


def test_uniforms_without_normal_map():
    values = _textured(shininess=12.0, dissolve=0.25).uniforms()
    assert values["material.ambientTexture"] == 0
    assert values["material.diffuseTexture"] == 1
    assert values["material.specularTexture"] == 2
    assert "material.normalMap" not in values
    assert values["material.shiniess"] == 12.0
    assert values["material.dissolve"] == 0.25


def test_uniforms_with_normal_map():
    material = _textured(normal_map=Texture.solid((0.5, 0.5, 1.0), 1, 1), specular_strength=0.4)
    values = material.uniforms()
    assert values["material.normalMap"] == 3
    assert values["material.specularStrength"] == 0.4


def test_uniforms_require_textures():
    with pytest.raises(ValueError):
        Material(diffuse_texture=Texture.solid((1, 1, 1), 1, 1)).uniforms()