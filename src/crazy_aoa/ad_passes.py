#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Activity diagram construction and minimization passes.

- :func:`expand` turns a reduced activity-on-node graph into an activity
  diagram: every activity becomes an arrow between its start and end
  vertices, every dependency becomes a dummy arrow.
- :func:`redirect` factors out dummy arrows shared by all successors of an
  activity end vertex.
- :func:`merge` contracts dummy arrows which carry no information.

All passes mutate the graph in place and keep its reachability.
"""

#==============================================================================
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
import heapq
import logging

from .ad_graph import ACTIVITY_END, ACTIVITY_START, ADGraph
from .errors import NetworkInvariantError

logger = logging.getLogger(__name__)

# Contraction cases
_FOLD_SRC = 1
_FOLD_DST = 2

#==============================================================================
def default_dummy_critical(pred, activity):
    """Dummy arrow is critical when both activities it links are."""
    return pred.is_critical and activity.is_critical

#==============================================================================
def expand(dep_graph, activities, dummy_critical=default_dummy_critical):
    """
    Build activity diagram from a reduced dependency graph.

    Parameters
    ----------
    dep_graph : networkx.DiGraph
        Dependency graph over activity ids
    activities : dict
        Activity id to Activity mapping
    dummy_critical : callable
        ``dummy_critical(pred, activity) -> bool`` gives the critical path
        flag of the dummy arrow for the dependency ``pred -> activity``

    Returns
    -------
    ADGraph
    """
    g = ADGraph()

    for a in dep_graph.nodes:
        crit = activities[a].is_critical
        start = g.vertex(a, ACTIVITY_START, crit)
        end   = g.vertex(a, ACTIVITY_END, crit)
        g.add_edge(start, end, activity_id=a, is_critical=crit)

    for p, a in dep_graph.edges:
        pred, act = activities[p], activities[a]
        g.add_edge(g.vertex(p, ACTIVITY_END, pred.is_critical),
                   g.vertex(a, ACTIVITY_START, act.is_critical),
                   is_critical=bool(dummy_critical(pred, act)))

    logger.debug("Expanded %d activities and %d dependencies into %r",
                 dep_graph.number_of_nodes(), dep_graph.number_of_edges(), g)
    return g

#==============================================================================
def redirect(g):
    """
    Factor out dependencies shared by all successors of activity end vertices.

    When a vertex ``d`` has dummy arrows to every successor of some activity
    end vertex ``pivot``, these arrows are replaced by a single dummy arrow
    ``d -> pivot``. The new arrow is critical if any of the replaced ones was.

    Returns
    -------
    int
        Number of factored dependencies
    """
    n_factored = 0
    n_removed  = 0
    n_added    = 0

    # Only arrows change here, so a vertex snapshot is enough
    for pivot in g.vertices():
        if ACTIVITY_END != pivot.role:
            continue

        successors = [e.dst for e in g.out_edges(pivot)]
        if not successors:
            continue

        # Activity arrows can not be redirected, watch only dummies
        common = None
        for s in successors:
            deps = {e.src.id for e in g.in_edges(s) if e.is_dummy}
            common = deps if common is None else (common & deps)
            if not common:
                break

        common.discard(pivot.id)
        if not common:
            continue

        targets = {s.id for s in successors}
        for d in sorted(common):
            d = g.vertex_by_id(d)

            forced = False
            for e in g.out_edges(d):
                if e.dst.id in targets:
                    forced = forced or e.is_critical
                    g.remove_edge(e)
                    n_removed += 1

            e = g.find_edge(d, pivot)
            if e is None:
                g.add_edge(d, pivot, is_critical=forced)
                n_added += 1
            else:
                e.is_critical = e.is_critical or forced
            n_factored += 1

    logger.debug("Redirect factored %d dependencies, %d dummy arrows saved",
                 n_factored, n_removed - n_added)
    return n_factored

#==============================================================================
def _contraction_case(g, e):
    """
    Check whether dummy arrow e can be contracted.

    Returns _FOLD_SRC when the source vertex of e can be folded into its
    destination, _FOLD_DST for the opposite and None when e must stay.
    """
    u, v = e.src, e.dst

    if 1 == g.out_degree(u):
        # Don't make parallel arrows
        for i in g.in_edges(u):
            if g.find_edge(i.src, v) is not None:
                return None
        return _FOLD_SRC

    if 1 == g.in_degree(v):
        for o in g.out_edges(v):
            if g.find_edge(u, o.dst) is not None:
                return None
        return _FOLD_DST

    return None

#==============================================================================
def _contract(g, e, case):
    """Contract dummy arrow e, return the vertices whose arrows have changed."""
    u, v = e.src, e.dst
    g.remove_edge(e)

    if _FOLD_SRC == case:
        touched = [v]
        for i in g.in_edges(u):
            g.move_edge(i, dst=v)
            touched.append(i.src)
        g.remove_vertex(u)
    else:
        touched = [u]
        for o in g.out_edges(v):
            g.move_edge(o, src=u)
            touched.append(o.dst)
        g.remove_vertex(v)

    return touched

#==============================================================================
def merge(g):
    """
    Contract dummy arrows until none of them can be contracted.

    A dummy arrow ``u -> v`` is contracted when it is the only arrow out of
    ``u`` (``u`` is folded into ``v``, preferred) or the only arrow into
    ``v`` (``v`` is folded into ``u``), unless the contraction would make
    parallel arrows.

    Arrows are tried in creation order and the first contractible one is
    contracted, then the order is restarted. A contraction only changes
    the state of arrows around the vertices it touched, so those are put
    back into the worklist instead of rescanning the whole graph.

    Returns
    -------
    int
        Number of contractions
    """
    # Every contraction removes a vertex
    limit = g.n_vertices
    n_merged = 0

    work = [e.id for e in g.dummy_edges()]
    queued = set(work)
    heapq.heapify(work)

    while work:
        while work:
            i = heapq.heappop(work)
            queued.discard(i)

            e = g.edge_by_id(i)
            if not e.alive or not e.is_dummy:
                continue

            case = _contraction_case(g, e)
            if case is None:
                continue

            for v in _contract(g, e, case):
                for a in g.in_edges(v) + g.out_edges(v):
                    if a.is_dummy and a.id not in queued:
                        queued.add(a.id)
                        heapq.heappush(work, a.id)

            n_merged += 1
            if n_merged > limit:
                raise NetworkInvariantError("Dummy arrow contraction does not converge")

        # Make sure that the fixed point is reached
        for e in g.dummy_edges():
            if _contraction_case(g, e) is not None:
                queued.add(e.id)
                heapq.heappush(work, e.id)

    logger.debug("Merge contracted %d dummy arrows, %r left", n_merged, g)
    return n_merged
