import sys

import pytest

from pathfinder.collector import PathCollector
from pathfinder.config import SearchConfig
from pathfinder.explorer import explore, find_min_paths, run_search
from pathfinder.graph import WeightMatrix
from pathfinder.state import SearchState


class TestFindMinPaths:
    def test_triangle(self, triangle):
        result = find_min_paths(triangle, 0, 2)
        assert result.min_len == 2
        assert result.paths == ((0, 1, 2),)

    def test_tie(self, tie):
        result = find_min_paths(tie, 0, 3)
        assert result.min_len == 2
        assert len(result.paths) == 2
        assert set(result.paths) == {(0, 1, 3), (0, 2, 3)}

    def test_unreachable(self, with_isolated):
        result = find_min_paths(with_isolated, 0, 4)
        assert result.min_len is None
        assert result.paths == ()
        assert not result.reachable

    def test_unreachable_against_edge_direction(self, triangle):
        result = find_min_paths(triangle, 2, 0)
        assert not result.reachable

    def test_source_equals_destination(self, triangle):
        result = find_min_paths(triangle, 1, 1)
        assert result.min_len == 0
        assert result.paths == ((1,),)

    def test_discards_heavier_paths_found_first(self, late_shortcut):
        result = find_min_paths(late_shortcut, 0, 4)
        assert result.min_len == 3
        assert set(result.paths) == {(0, 3, 4), (0, 5, 4)}

    def test_zero_weight_ties(self, zero_weights):
        result = find_min_paths(zero_weights, 0, 2)
        assert result.min_len == 0
        assert set(result.paths) == {(0, 1, 2), (0, 2), (0, 1, 3, 2)}

    def test_bidirectional_square(self, square_bidir):
        result = find_min_paths(square_bidir, 0, 2)
        assert result.min_len == 2
        assert set(result.paths) == {(0, 1, 2), (0, 3, 2)}

    def test_float_weights(self):
        g = WeightMatrix.from_edges(3, [(0, 1, 0.1), (1, 2, 0.2), (0, 2, 0.3)])
        result = find_min_paths(g, 0, 2)
        # 0.1 + 0.2 > 0.3 in binary floating point
        assert result.min_len == 0.3
        assert result.paths == ((0, 2),)

    def test_destination_is_never_an_intermediate_node(self):
        # 0 -> 1 -> 2 -> 1 would revisit 1; 0 -> 1 stops at the destination
        g = WeightMatrix.from_edges(3, [(0, 1, 1), (1, 2, 0), (2, 1, 0)])
        result = find_min_paths(g, 0, 1)
        assert result.paths == ((0, 1),)

    def test_paths_are_simple_in_cyclic_graph(self):
        g = WeightMatrix.from_edges(
            4,
            [(0, 1, 1), (1, 0, 1), (1, 2, 1), (2, 1, 1), (2, 3, 1), (3, 0, 1)],
        )
        result = find_min_paths(g, 0, 3)
        assert result.paths == ((0, 1, 2, 3),)
        for path in result.paths:
            assert len(path) == len(set(path))

    def test_out_of_range_nodes(self, triangle):
        with pytest.raises(ValueError, match="Source"):
            find_min_paths(triangle, 3, 0)
        with pytest.raises(ValueError, match="Destination"):
            find_min_paths(triangle, 0, -1)

    def test_rerun_is_identical(self, late_shortcut):
        first = find_min_paths(late_shortcut, 0, 4)
        second = find_min_paths(late_shortcut, 0, 4)
        assert first == second

    def test_negative_weights_are_not_checked(self):
        # 0 -> 2 -> 1 weighs -5, but the bound prunes it once 0 -> 1 is found
        graph = WeightMatrix.from_edges(3, [(0, 1, 1), (0, 2, 5), (2, 1, -10)])
        result = find_min_paths(graph, 0, 1)
        assert result.min_len == 1
        assert result.paths == ((0, 1),)
        with pytest.raises(ValueError, match="negative weight"):
            graph.validate_non_negative()


class TestExplore:
    def test_state_restored_after_search(self, tie):
        state = SearchState(tie.size())
        collector = PathCollector(0, 3)
        explore(tie, 0, 3, state, collector)
        assert state.path == []
        assert state.visited == [False] * 4
        assert state.weight == 0

    def test_state_restored_inside_a_partial_path(self, tie):
        state = SearchState(tie.size())
        collector = PathCollector(0, 3)
        state.push(0)
        explore(tie, 1, 3, state, collector, edge_weight=1)
        assert state.path == [0]
        assert state.visited == [True, False, False, False]
        assert state.weight == 0
        assert collector.paths == [(0, 1, 3)]

    def test_pruning_skips_dominated_branches(self, tie):
        visits = []

        class RecordingState(SearchState):
            def push(self, node, edge_weight=0):
                visits.append(node)
                super().push(node, edge_weight)

        collector = PathCollector(0, 3)
        explore(tie, 0, 3, RecordingState(tie.size()), collector)
        # The direct 0 -> 3 edge (weight 5) exceeds the bound of 2
        assert visits == [0, 1, 3, 2, 3]

    def test_state_restored_when_collector_fails(self, triangle):
        class FailingCollector(PathCollector):
            def consider(self, state):
                raise RuntimeError("storage failed")

        state = SearchState(triangle.size())
        with pytest.raises(RuntimeError):
            explore(triangle, 0, 2, state, FailingCollector(0, 2))
        assert state.path == []
        assert state.visited == [False, False, False]


class TestRecursionLimit:
    def test_long_chain_raises_and_restores_limit(self):
        size = sys.getrecursionlimit() + 200
        g = WeightMatrix.from_edges(size, [(i, i + 1, 1) for i in range(size - 1)])
        before = sys.getrecursionlimit()

        result = find_min_paths(g, 0, size - 1)

        assert result.min_len == size - 1
        assert len(result.paths[0]) == size
        assert sys.getrecursionlimit() == before

    def test_ceiling_enforced(self):
        size = sys.getrecursionlimit() + 10
        g = WeightMatrix.from_edges(size, [])
        config = SearchConfig(max_recursion_limit=size // 2)
        with pytest.raises(ValueError, match="recursion limit"):
            run_search(g, SearchState(size), PathCollector(0, 1), config)
