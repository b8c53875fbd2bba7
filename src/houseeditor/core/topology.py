"""Topology of walls on a level.

This module builds a graph of wall endpoints so junctions, where two or more
walls meet, can be found without scanning every pair of walls.
"""

from __future__ import annotations

from typing import Dict, List, Set

import networkx as nx

from ..geom.primitives import Point


def build_junction_graph(level) -> nx.MultiGraph:
    """Build a graph whose nodes are wall endpoints and whose edges are walls.

    Args:
        level: The level whose walls are used.

    Returns:
        NetworkX MultiGraph; each edge is keyed by its wall id and carries the
        wall's angle and width.
    """
    graph = nx.MultiGraph()
    for wall in level.walls.values():
        graph.add_edge(wall.start, wall.end, key=wall.id, angle=wall.angle, width=wall.width)
    return graph


def junctions(level) -> Dict[Point, List[str]]:
    """Map every point where two or more walls meet to the ids of those walls."""
    graph = build_junction_graph(level)
    result = {}
    for node in graph.nodes:
        if graph.degree(node) >= 2:
            result[node] = sorted(key for _, _, key in graph.edges(node, keys=True))
    return result


def joined_walls(level, *points: Point) -> Set[str]:
    """Ids of walls having an endpoint at any of ``points``."""
    graph = build_junction_graph(level)
    joined: Set[str] = set()
    for point in points:
        if point in graph:
            joined.update(key for _, _, key in graph.edges(point, keys=True))
    return joined
