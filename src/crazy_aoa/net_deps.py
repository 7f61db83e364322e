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

#==============================================================================
import logging

import networkx as nx
import numpy as np

from .activity import ActivityDependency
from .errors import CyclicDependencyError, NetworkInputError

logger = logging.getLogger(__name__)

#==============================================================================
def build_dependency_graph(dependencies):
    """
    Build activity-on-node dependency graph.

    Parameters
    ----------
    dependencies : iterable of ActivityDependency
        Activities with their predecessor ids

    Returns
    -------
    tuple
        (graph, activities) where graph is a networkx.DiGraph over activity
        ids with an edge ``p -> a`` for every predecessor ``p`` of ``a`` and
        activities is a dict mapping activity ids to Activity objects

    Raises
    ------
    NetworkInputError
        On duplicate activity ids and on predecessors absent from the
        dependencies
    CyclicDependencyError
        If an activity depends on itself
    """
    dependencies = list(dependencies)

    activities = {}
    for dep in dependencies:
        assert isinstance(dep, ActivityDependency)
        if dep.activity.id in activities:
            raise NetworkInputError(f"Duplicate activity id: {dep.activity.id}")
        activities[dep.activity.id] = dep.activity

    graph = nx.DiGraph()
    # Activities without any links must be in the network too
    graph.add_nodes_from(activities)

    for dep in dependencies:
        a = dep.activity.id
        for p in dep.predecessors:
            if p not in activities:
                raise NetworkInputError(f"Activity {a} depends on unknown activity {p}")
            if p == a:
                raise CyclicDependencyError([(a, a)])
            graph.add_edge(p, a)

    return graph, activities

#==============================================================================
def _topological_order(graph):
    try:
        return list(nx.topological_sort(graph))
    except nx.NetworkXUnfeasible as e:
        raise CyclicDependencyError(nx.find_cycle(graph)) from e

#==============================================================================
def full_dependency_map(graph, order=None):
    """
    Compute full dependency (reachability) map of a DAG.

    Returns
    -------
    tuple
        (order, full_dep_map) where order is a topological order of graph
        nodes and ``full_dep_map[i, j]`` is True when ``order[j]`` can be
        reached from ``order[i]`` through one or more edges
    """
    if order is None:
        order = _topological_order(graph)

    pos = {u: i for i, u in enumerate(order)}
    full_dep_map = np.zeros((len(order), len(order)), dtype=bool)

    # Successors go later in topological order, so walk it backwards
    for i in range(len(order) - 1, -1, -1):
        for v in graph.successors(order[i]):
            j = pos[v]
            full_dep_map[i, j] = True
            full_dep_map[i] |= full_dep_map[j]

    return order, full_dep_map

#==============================================================================
def transitive_reduction(graph):
    """
    Remove dependencies implied by longer dependency chains.

    An edge ``u -> v`` is removed iff ``v`` is reachable from some other
    direct successor of ``u``. The result has the same nodes (in the same
    order) and the same reachability as the input.

    Parameters
    ----------
    graph : networkx.DiGraph
        Acyclic dependency graph

    Returns
    -------
    networkx.DiGraph
        Minimal dependency graph

    Raises
    ------
    CyclicDependencyError
        If the graph has a cycle
    """
    order, full_dep_map = full_dependency_map(graph)
    pos = {u: i for i, u in enumerate(order)}

    reduced = nx.DiGraph()
    reduced.add_nodes_from(graph.nodes)

    for u in graph.nodes:
        succ = [pos[v] for v in graph.successors(u)]
        if not succ:
            continue
        # Whatever is reachable from any direct successor is implied
        implied = full_dep_map[succ].any(axis=0)
        for v in graph.successors(u):
            if not implied[pos[v]]:
                reduced.add_edge(u, v)

    logger.debug("Transitive reduction removed %d of %d dependencies",
                 graph.number_of_edges() - reduced.number_of_edges(),
                 graph.number_of_edges())
    return reduced
