"""Tests for core/topology.py: junctions between walls."""
from houseeditor.core.topology import build_junction_graph, joined_walls, junctions

from conftest import P, build


class TestJunctionGraph:
    def test_walls_are_edges(self, world, level):
        w1, w2, w3 = build(world, ((0, 0), (4, 0)), ((4, 0), (4, 4)), ((10, 0), (12, 0)))
        graph = build_junction_graph(level)
        assert graph.number_of_edges() == 3
        assert graph.number_of_nodes() == 5
        assert graph.has_edge(P(0, 0), P(4, 0), key=w1.id)
        assert graph.edges[P(4, 0), P(4, 4), w2.id]["angle"] == 90

    def test_junctions(self, world, level):
        w1, w2, w3 = build(world, ((0, 0), (4, 0)), ((4, 0), (4, 4)), ((10, 0), (12, 0)))
        assert junctions(level) == {P(4, 0): sorted([w1.id, w2.id])}

    def test_joined_walls(self, world, level):
        w1, w2, w3 = build(world, ((0, 0), (4, 0)), ((4, 0), (4, 4)), ((10, 0), (12, 0)))
        assert joined_walls(level, P(4, 0)) == {w1.id, w2.id}
        assert joined_walls(level, P(0, 0), P(12, 0)) == {w1.id, w3.id}
        assert joined_walls(level, P(7, 7)) == set()

    def test_parallel_walls_between_same_points(self, world, level):
        w1, w2 = build(world, ((0, 0), (4, 0)), ((4, 0), (0, 0)))
        graph = build_junction_graph(level)
        assert graph.number_of_edges() == 2
        assert junctions(level)[P(0, 0)] == sorted([w1.id, w2.id])
