"""Mesh data, OBJ/MTL loading, road shape geometry, textures and event types for a town builder."""

__version__ = "0.1.0"