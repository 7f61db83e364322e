#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
    CrazyCPM
    Copyright (C) 2025 anonimous

    This program is free software: you can redistribute it and/or modify
    it under the terms of the GNU General Public License as published by
    the Free Software Foundation, either version 3 of the License, or
    (at your option) any later version.

    This program is distributed in the hope that it will be useful,
    but WITHOUT ANY WARRANTY; without even the implied warranty of
    MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
    GNU General Public License for more details.

    You should have received a copy of the GNU General Public License
    along with this program.  If not, see <http://www.gnu.org/licenses/>.

    Please contact with me by E-mail: shkolnick.kun@gmail.com
"""
import networkx as nx
import pytest

from crazy_aoa import (Activity, ActivityDependency, CyclicDependencyError,
                       NetworkInputError)
from crazy_aoa.net_deps import (build_dependency_graph, full_dependency_map,
                                transitive_reduction)

from conftest import dag_deps, make_deps


#==============================================================================
class TestBuildDependencyGraph:

    def test_edges_and_lookup(self):
        g, acts = build_dependency_graph(make_deps({1: [], 2: [1], 3: [1, 2]}, critical={2}))
        assert list(g.nodes) == [1, 2, 3]
        assert set(g.edges) == {(1, 2), (1, 3), (2, 3)}
        assert acts[2].is_critical and not acts[1].is_critical

    def test_isolated_activities_are_kept(self):
        g, _ = build_dependency_graph(make_deps({1: [], 2: []}))
        assert list(g.nodes) == [1, 2]
        assert g.number_of_edges() == 0

    def test_unknown_predecessor(self):
        with pytest.raises(NetworkInputError, match='unknown activity 9'):
            build_dependency_graph(make_deps({1: [], 2: [9]}))

    def test_duplicate_activity(self):
        deps = [ActivityDependency(Activity(1)), ActivityDependency(Activity(1), [])]
        with pytest.raises(NetworkInputError):
            build_dependency_graph(deps)

    def test_self_dependency(self):
        with pytest.raises(CyclicDependencyError):
            build_dependency_graph(make_deps({1: [1]}))


class TestTransitiveReduction:

    def test_redundant_dependency_is_removed(self):
        g, _ = build_dependency_graph(make_deps({1: [], 2: [1], 3: [1, 2]}))
        r = transitive_reduction(g)
        assert set(r.edges) == {(1, 2), (2, 3)}
        assert list(r.nodes) == [1, 2, 3]

    def test_isolated_nodes_survive(self):
        g, _ = build_dependency_graph(make_deps({1: [], 2: [], 3: [2]}))
        r = transitive_reduction(g)
        assert list(r.nodes) == [1, 2, 3]
        assert set(r.edges) == {(2, 3)}

    def test_cycle_fails_fast(self):
        g, _ = build_dependency_graph(make_deps({1: [3], 2: [1], 3: [2]}))
        with pytest.raises(CyclicDependencyError) as exc:
            transitive_reduction(g)
        assert len(exc.value.cycle) == 3
        assert isinstance(exc.value, NetworkInputError)

    def test_matches_networkx(self, dag):
        g, _ = build_dependency_graph(dag_deps(dag, 0))
        r = transitive_reduction(g)
        assert set(r.edges) == set(nx.transitive_reduction(g).edges)

    def test_keeps_reachability(self, dag):
        g, _ = build_dependency_graph(dag_deps(dag, 0))
        r = transitive_reduction(g)
        for u in g.nodes:
            assert nx.descendants(g, u) == nx.descendants(r, u)

    def test_idempotent(self, dag):
        g, _ = build_dependency_graph(dag_deps(dag, 0))
        r = transitive_reduction(g)
        assert list(transitive_reduction(r).edges) == list(r.edges)


class TestFullDependencyMap:

    def test_chain(self):
        g = nx.DiGraph([(1, 2), (2, 3)])
        order, m = full_dependency_map(g)
        assert order == [1, 2, 3]
        assert m.tolist() == [[False, True, True],
                              [False, False, True],
                              [False, False, False]]
