#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Activity diagram graph
======================

Mutable bidirectional graph used while an activity-on-node network is turned
into an activity-on-arrow one.

Vertices and arrows live in arenas (plain lists) and are addressed by their
position there. Removed items are tombstoned (``alive = False``) and never
reused, so a handle kept by a pass stays valid however the graph changes.

Vertex identity is the ``(activity_id, role)`` pair: :meth:`ADGraph.vertex`
returns the already existing vertex for a known pair.
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
from .errors import NetworkInvariantError

# Vertex roles
ACTIVITY_START = 'activity_start'
ACTIVITY_END   = 'activity_end'
MILESTONE      = 'milestone'

ROLES = (ACTIVITY_START, ACTIVITY_END, MILESTONE)

#==============================================================================
class _ADVertex:
    def __init__(self, id, activity_id, role, is_critical):
        """
        Activity diagram vertex

        Parameters:
        -----------
        id : int
            Position in the vertex arena
        activity_id : int
            Owner activity
        role : str
            One of ROLES
        is_critical : bool
            Critical path flag of the owner activity
        """
        self.id          = id
        self.activity_id = activity_id
        self.role        = role
        self.is_critical = is_critical
        self.alive       = True

    @property
    def key(self):
        return (self.activity_id, self.role)

    def __repr__(self):
        return f'_ADVertex({self.id}: {self.activity_id}/{self.role})'

#==============================================================================
class _ADEdge:
    def __init__(self, id, src, dst, activity_id=None, is_critical=False):
        """
        Activity diagram arrow

        Parameters:
        -----------
        id : int
            Position in the arrow arena, also the creation order
        src : _ADVertex
            Source vertex
        dst : _ADVertex
            Destination vertex
        activity_id : int or None
            Activity of the arrow, None for dummies
        is_critical : bool
            Critical path flag
        """
        self.id          = id
        self.src         = src
        self.dst         = dst
        self.activity_id = activity_id
        self.is_critical = is_critical
        self.alive       = True

    @property
    def is_dummy(self):
        return self.activity_id is None

    def __repr__(self):
        lbl = '~' if self.is_dummy else str(self.activity_id)
        return f'_ADEdge({self.id}: {self.src.id} -{lbl}-> {self.dst.id})'

#==============================================================================
class ADGraph:
    def __init__(self):
        self._vertices = []
        self._edges    = []
        self._keys     = {}  # (activity_id, role) -> vertex
        self._pairs    = {}  # (src.id, dst.id) -> arrow
        # Ordered sets of arrow ids, indexed by vertex id
        self._out      = []
        self._in       = []

        self.n_vertices = 0
        self.n_edges    = 0

    #--------------------------------------------------------------------------
    def _check(self, v):
        if not (0 <= v.id < len(self._vertices)) or self._vertices[v.id] is not v:
            raise NetworkInvariantError(f"{v} does not belong to this graph")
        if not v.alive:
            raise NetworkInvariantError(f"{v} has been removed from the graph")

    #--------------------------------------------------------------------------
    def vertex(self, activity_id, role, is_critical=False):
        """
        Get the vertex of activity_id with the given role, create it if needed.

        is_critical is used only when the vertex is created.
        """
        assert role in ROLES

        key = (activity_id, role)
        v = self._keys.get(key)
        if v is None:
            v = _ADVertex(len(self._vertices), activity_id, role, bool(is_critical))
            self._vertices.append(v)
            self._out.append({})
            self._in.append({})
            self._keys[key] = v
            self.n_vertices += 1
        elif not v.alive:
            raise NetworkInvariantError(f"{v} has been merged away and can not be reused")
        return v

    def find_vertex(self, activity_id, role):
        v = self._keys.get((activity_id, role))
        return v if v is not None and v.alive else None

    def vertex_by_id(self, i):
        return self._vertices[i]

    def vertices(self):
        """Alive vertices in creation order."""
        return [v for v in self._vertices if v.alive]

    def remove_vertex(self, v):
        self._check(v)
        if self._out[v.id] or self._in[v.id]:
            raise NetworkInvariantError(f"{v} still has arrows attached")
        v.alive = False
        self.n_vertices -= 1

    #--------------------------------------------------------------------------
    def add_edge(self, src, dst, activity_id=None, is_critical=False):
        self._check(src)
        self._check(dst)
        if src is dst:
            raise NetworkInvariantError(f"Loop arrow on {src}")
        if (src.id, dst.id) in self._pairs:
            raise NetworkInvariantError(f"Parallel arrow {src} -> {dst}")

        e = _ADEdge(len(self._edges), src, dst, activity_id, bool(is_critical))
        self._edges.append(e)
        self._link(e)
        self.n_edges += 1
        return e

    def move_edge(self, e, src=None, dst=None):
        """Reattach an alive arrow to other end vertices keeping its identity."""
        src = src if src is not None else e.src
        dst = dst if dst is not None else e.dst
        self._check(src)
        self._check(dst)
        if (src.id, dst.id) in self._pairs:
            raise NetworkInvariantError(f"Parallel arrow {src} -> {dst}")

        self._unlink(e)
        e.src = src
        e.dst = dst
        self._link(e)

    def remove_edge(self, e):
        self._unlink(e)
        e.alive = False
        self.n_edges -= 1

    def _link(self, e):
        self._out[e.src.id][e.id] = None
        self._in[e.dst.id][e.id]  = None
        self._pairs[(e.src.id, e.dst.id)] = e

    def _unlink(self, e):
        if not e.alive or self._pairs.get((e.src.id, e.dst.id)) is not e:
            raise NetworkInvariantError(f"{e} is not in the graph")
        try:
            del self._out[e.src.id][e.id]
            del self._in[e.dst.id][e.id]
        except KeyError as exc:
            raise NetworkInvariantError(f"Adjacency of {e} is broken") from exc
        del self._pairs[(e.src.id, e.dst.id)]

    #--------------------------------------------------------------------------
    def find_edge(self, src, dst):
        return self._pairs.get((src.id, dst.id))

    def edge_by_id(self, i):
        return self._edges[i]

    def edges(self):
        """Alive arrows in creation order."""
        return [e for e in self._edges if e.alive]

    def dummy_edges(self):
        return [e for e in self._edges if e.alive and e.is_dummy]

    def out_edges(self, v):
        """Arrows leaving v, a snapshot list safe to mutate the graph over."""
        self._check(v)
        return [self._edges[i] for i in self._out[v.id]]

    def in_edges(self, v):
        self._check(v)
        return [self._edges[i] for i in self._in[v.id]]

    def out_degree(self, v):
        self._check(v)
        return len(self._out[v.id])

    def in_degree(self, v):
        self._check(v)
        return len(self._in[v.id])

    #--------------------------------------------------------------------------
    def __repr__(self):
        return f'ADGraph(vertices={self.n_vertices}, edges={self.n_edges})'
