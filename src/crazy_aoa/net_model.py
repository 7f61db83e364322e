#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CrazyAOA - Activity-on-arrow network generator
==============================================

This module turns a project dependency network given as activities with
predecessor lists (activity-on-node) into a minimized activity-on-arrow
network suitable for drawing a classical arrow diagram.

Pipeline
--------
1. Build a dependency graph over activity ids.
2. Remove dependencies implied by longer dependency chains.
3. Split each activity into start and end vertices linked by the activity
   arrow, turn dependencies into dummy arrows.
4. Factor out dummy arrows shared by all successors of an activity.
5. Contract dummy arrows which carry no information.
6. Number events and arrows.

Classes
-------
- :class:`ActivityArrowGraphGenerator`: The generator
- :class:`ActivityArrowGraph`: Generated network
- :class:`ActivityEdge`: Arrow of the network, an activity or a dummy
- :class:`EventVertex`: Event of the network

Usage Example
-------------
>>> wbs = {
...     1: {'letter': 'A', 'critical': True},
...     2: {'letter': 'B'},
...     3: {'letter': 'C', 'critical': True},
... }
>>> deps = dependencies_from_wbs(wbs, links=[[1, 1], [2, 3]])
>>> net = generate_graph(deps)
>>> edges_df, events_df = net.to_dataframe()

Critical path flags are not computed here, they are passed through from
the activities.
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
import logging

import networkx as nx
import pandas as pd

from .activity import Activity, dependencies_from_wbs
from .ad_graph import MILESTONE
from .ad_passes import default_dummy_critical, expand, merge, redirect
from .net_deps import build_dependency_graph, transitive_reduction

logger = logging.getLogger(__name__)

# Event kinds
EVENT_START        = 'start'
EVENT_END          = 'end'
EVENT_MILESTONE    = 'milestone'
EVENT_INTERMEDIATE = 'intermediate'

#==============================================================================
class EventVertex:
    def __init__(self, id, kind, activity=None, key=None):
        """
        Event of activity-on-arrow network

        Parameters:
        -----------
        id : int
            Sequential event identifier
        kind : str
            One of 'start', 'end', 'milestone', 'intermediate'
        activity : Activity
            Milestone activity, None for other events
        key : tuple
            Internal (activity_id, role) vertex identity, for debugging
        """
        assert isinstance(id, int)
        assert kind in (EVENT_START, EVENT_END, EVENT_MILESTONE, EVENT_INTERMEDIATE)
        assert activity is None or isinstance(activity, Activity)

        self.id       = id
        self.kind     = kind
        self.activity = activity
        self.key      = key

    #--------------------------------------------------------------------------
    def __repr__(self):
        return str(self.to_dict())

    #--------------------------------------------------------------------------
    def to_dict(self, debug=False):
        ret = {
            'id'         : self.id,
            'kind'       : self.kind,
            'activity_id': self.activity.id if self.activity is not None else None,
        }
        if debug:
            ret['key'] = self.key
        return ret

#==============================================================================
class ActivityEdge:
    def __init__(self, id, src, dst, activity=None, is_critical=False):
        """
        Arrow of activity-on-arrow network

        Parameters:
        -----------
        id : int
            Sequential arrow identifier
        src : EventVertex
            Source event
        dst : EventVertex
            Destination event
        activity : Activity
            Activity of the arrow, None for dummy arrows
        is_critical : bool
            Critical path flag
        """
        assert isinstance(id, int)
        assert isinstance(src, EventVertex)
        assert isinstance(dst, EventVertex)
        assert activity is None or isinstance(activity, Activity)

        self.id          = id
        self.src         = src
        self.dst         = dst
        self.activity    = activity
        self.is_critical = bool(is_critical)

    @property
    def is_dummy(self):
        return self.activity is None

    #--------------------------------------------------------------------------
    def __repr__(self):
        return str(self.to_dict())

    #--------------------------------------------------------------------------
    def to_dict(self):
        """
        Convert arrow to dictionary representation

        Returns:
        --------
        dict
            Arrow data, activity data are copied into 'data'
        """
        act = self.activity
        return {
            'id'         : self.id,
            'src_id'     : self.src.id,
            'dst_id'     : self.dst.id,
            'activity_id': act.id if act is not None else None,
            'letter'     : act.letter if act is not None else '',
            'is_dummy'   : self.is_dummy,
            'is_critical': self.is_critical,
            'data'       : act.data.copy() if act is not None else {},
        }

#==============================================================================
class ActivityArrowGraph:
    """
    Activity-on-arrow network.

    Attributes
    ----------
    edges : list
        ActivityEdge objects in id order
    debug : bool
        Add internal vertex identities to exported events
    """

    def __init__(self, debug=False):
        self.edges = []
        self.debug = debug

    def add_edge(self, edge):
        assert isinstance(edge, ActivityEdge)
        self.edges.append(edge)

    @property
    def events(self):
        """Distinct arrow end events in first-seen order."""
        seen = {}
        for e in self.edges:
            seen.setdefault(e.src.id, e.src)
            seen.setdefault(e.dst.id, e.dst)
        return list(seen.values())

    @property
    def activity_edges(self):
        return [e for e in self.edges if not e.is_dummy]

    @property
    def dummy_edges(self):
        return [e for e in self.edges if e.is_dummy]

    def edge_of(self, activity_id):
        """Get the arrow of an activity."""
        for e in self.edges:
            if e.activity is not None and e.activity.id == activity_id:
                return e
        raise KeyError(activity_id)

    #--------------------------------------------------------------------------
    def __repr__(self):
        _repr = 'Events:{\n'
        for e in self.events:
            _repr += '        ' + str(e.to_dict(self.debug)) + '\n'
        _repr += '}\n'

        _repr += 'Arrows:{\n'
        for a in self.edges:
            _repr += '        ' + str(a) + '\n'
        _repr += '}\n'

        return _repr

    #--------------------------------------------------------------------------
    def to_dict(self):
        """
        Convert network to dictionary representation.

        Returns
        -------
        dict
            Dictionary with structure:

            .. code-block:: python

                {
                    'edges': [
                        {edge1_data},
                        ...
                    ],
                    'events': [
                        {event1_data},
                        ...
                    ]
                }
        """
        return {
            'edges' : [e.to_dict() for e in self.edges],
            'events': [v.to_dict(self.debug) for v in self.events],
        }

    def to_dataframe(self):
        """
        Convert network to pandas DataFrames.

        Returns
        -------
        tuple
            (edges_df, events_df) - pandas DataFrames for arrows and events

        Notes
        -----
        Activity data fields are expanded into separate columns of
        the arrows DataFrame.
        """
        model_dict = self.to_dict()

        events_df = pd.DataFrame(model_dict['events'],
                                 columns=['id', 'kind', 'activity_id'] + (['key'] if self.debug else []))

        expanded_edges = []
        for edge in model_dict['edges']:
            edge_data = {k: v for k, v in edge.items() if k != 'data'}
            if edge['data']:
                edge_data.update(edge['data'])
            expanded_edges.append(edge_data)

        edges_df = pd.DataFrame(expanded_edges,
                                columns=None if expanded_edges else
                                ['id', 'src_id', 'dst_id', 'activity_id',
                                 'letter', 'is_dummy', 'is_critical'])

        return edges_df, events_df

    def to_networkx(self):
        """
        Convert network to networkx.DiGraph over event ids.

        Arrow attributes: 'id', 'activity_id', 'is_critical'.
        """
        g = nx.DiGraph()
        for v in self.events:
            g.add_node(v.id, kind=v.kind)
        for e in self.edges:
            g.add_edge(e.src.id, e.dst.id,
                       id=e.id,
                       activity_id=e.activity.id if e.activity is not None else None,
                       is_critical=e.is_critical)
        return g

#==============================================================================
class ActivityArrowGraphGenerator:
    """
    Activity-on-arrow network generator.

    Parameters
    ----------
    activity_dependencies : iterable of ActivityDependency
        Activities with their predecessors. Activity ids must be unique,
        predecessors must reference activities of the same collection and
        the dependencies must not be cyclic.
    dummy_critical : callable, default=default_dummy_critical
        Critical path flag of dummy arrows made from dependencies.
        Signature: dummy_critical(pred, activity) -> bool, where pred and
        activity are Activity objects. By default a dummy arrow is critical
        when both activities are critical.
    debug : bool, default=False
        Add internal vertex identities to exported events

    Raises
    ------
    NetworkInputError
        On duplicate activity ids or unknown predecessors
    CyclicDependencyError
        On cyclic dependencies
    NetworkInvariantError
        If a minimization pass breaks the graph (a bug)
    """

    def __init__(self, activity_dependencies, dummy_critical=default_dummy_critical, debug=False):
        assert callable(dummy_critical)

        self.activity_dependencies = list(activity_dependencies)
        self.dummy_critical = dummy_critical
        self.debug = debug
        self.activities = {}

        self._init_maps()

    def _init_maps(self):
        self._edge_ids   = {}
        self._vertex_ids = {}
        self._events     = {}

    #--------------------------------------------------------------------------
    def generate_graph(self):
        """
        Generate activity-on-arrow network.

        Returns
        -------
        ActivityArrowGraph
        """
        self._init_maps()

        dep_graph, self.activities = build_dependency_graph(self.activity_dependencies)
        reduced = transitive_reduction(dep_graph)

        g = expand(reduced, self.activities, self.dummy_critical)
        redirect(g)
        merge(g)

        net = self._map_output(g)
        logger.info("Generated arrow network: %d activities, %d events, %d dummy arrows",
                    len(self.activities), len(net.events), len(net.dummy_edges))
        return net

    #--------------------------------------------------------------------------
    def _map_output(self, g):
        net = ActivityArrowGraph(self.debug)

        for e in g.edges():
            src = self._event(g, e.src)
            dst = self._event(g, e.dst)
            net.add_edge(self._edge(src, dst, self._activity(e.activity_id), e.is_critical))

        return net

    def _edge(self, src, dst, activity, is_critical):
        key = (src.id, dst.id)
        edge_id = self._edge_ids.get(key)
        if edge_id is None:
            edge_id = self._edge_ids[key] = len(self._edge_ids)
        return ActivityEdge(edge_id, src, dst, activity, is_critical)

    def _event(self, g, v):
        ev = self._events.get(v.key)
        if ev is not None:
            return ev

        vertex_id = self._vertex_ids.get(v.key)
        if vertex_id is None:
            vertex_id = self._vertex_ids[v.key] = len(self._vertex_ids)

        activity = self._activity(v.activity_id)
        if MILESTONE == v.role and activity is not None:
            kind = EVENT_MILESTONE
        elif 0 == g.in_degree(v):
            kind, activity = EVENT_START, None
        elif 0 == g.out_degree(v):
            kind, activity = EVENT_END, None
        else:
            kind, activity = EVENT_INTERMEDIATE, None

        ev = self._events[v.key] = EventVertex(vertex_id, kind, activity, v.key)
        return ev

    def _activity(self, activity_id):
        if activity_id is None:
            return None
        return self.activities.get(activity_id)

#==============================================================================
def generate_graph(activity_dependencies, **kwargs):
    """
    Generate activity-on-arrow network, see :class:`ActivityArrowGraphGenerator`.
    """
    return ActivityArrowGraphGenerator(activity_dependencies, **kwargs).generate_graph()

#==============================================================================
if __name__ == '__main__':
    logging.basicConfig(level=logging.DEBUG)

    wbs = {
         1: {'letter': 'A', 'critical': True},
         2: {'letter': 'B'},
         3: {'letter': 'C'},
         4: {'letter': 'D', 'critical': True},
         5: {'letter': 'E', 'critical': True},
         6: {'letter': 'F'},
         7: {'letter': 'G'},
         8: {'letter': 'H', 'critical': True},
         9: {'letter': 'J'},
        10: {'letter': 'K'},
        11: {'letter': 'L', 'critical': True},
        12: {'letter': 'M'},
    }

    src = [1, 1, 1,  2, 3, 4,  5, 5, 5,  6, 7, 8,  9,  9,  9, ]
    dst = [2, 3, 4,  5, 5, 5,  6, 7, 8,  9, 9, 9,  10, 11, 12 ]

    net = generate_graph(dependencies_from_wbs(wbs, src, dst), debug=True)
    print(net)

    edges_df, events_df = net.to_dataframe()
    print(edges_df)
    print(events_df)
