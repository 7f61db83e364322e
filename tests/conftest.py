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
import os
import sys

import networkx as nx
import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), '..', 'src'))

from crazy_aoa import Activity, ActivityDependency


#==============================================================================
def make_deps(preds, critical=()):
    """Build dependencies from {activity_id: [predecessor ids]}."""
    return [ActivityDependency(Activity(a, is_critical=a in critical), p)
            for a, p in preds.items()]


def random_dag(n, p, seed):
    """Random DAG the way the benchmarks build it: keep only u < v edges."""
    g = nx.gnp_random_graph(n, p, seed=seed, directed=True)
    dag = nx.DiGraph()
    dag.add_nodes_from(range(1, n + 1))
    dag.add_edges_from((u + 1, v + 1) for u, v in g.edges() if u < v)
    return dag


def dag_deps(dag, seed):
    rng = np.random.default_rng(seed)
    critical = {a for a in dag.nodes if rng.random() < 0.3}
    return make_deps({a: list(dag.predecessors(a)) for a in dag.nodes}, critical)


@pytest.fixture(params=[(n, p, s) for n, p in [(6, 0.4), (12, 0.25), (20, 0.15), (25, 0.3)]
                        for s in range(5)],
                ids=lambda x: 'n%d-p%.2f-s%d' % x)
def dag(request):
    n, p, seed = request.param
    return random_dag(n, p, seed)
