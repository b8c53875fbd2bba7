"""Core entities and derived wall geometry."""

from .footprint import WallFootprint, resolve_footprint, speculative_footprint
from .model import Component, Level, Wall, World
from .topology import build_junction_graph, joined_walls, junctions

__all__ = [
    "Component",
    "Level",
    "Wall",
    "WallFootprint",
    "World",
    "build_junction_graph",
    "joined_walls",
    "junctions",
    "resolve_footprint",
    "speculative_footprint",
]
