#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Input data of the activity-on-arrow network generator.

Activities are owned by the caller: the generator only reads their ids and
critical path flags and passes them through to the resulting arrows.
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
import numpy as np

from .errors import NetworkInputError

#==============================================================================
def _as_id(val):
    assert isinstance(val, (int, np.integer)) and not isinstance(val, bool), \
        f"Activity id must be an integer, got {val!r}"
    return int(val)

#==============================================================================
class Activity:
    def __init__(self, id, is_critical=False, letter='', data=None):
        """
        Activity of a project

        Parameters:
        -----------
        id : int
            Unique activity identifier
        is_critical : bool
            Critical path flag, computed by the caller
        letter : str
            Activity letter/code for visualization
        data : dict
            Any other activity data, passed through untouched
        """
        assert isinstance(is_critical, (bool, np.bool_))
        assert isinstance(letter, str)
        assert data is None or isinstance(data, dict)

        self.id          = _as_id(id)
        self.is_critical = bool(is_critical)
        self.letter      = letter
        self.data        = data if data is not None else {}

    #--------------------------------------------------------------------------
    def __repr__(self):
        return str(self.to_dict())

    #--------------------------------------------------------------------------
    def to_dict(self):
        return {
            'id'         : self.id,
            'letter'     : self.letter,
            'is_critical': self.is_critical,
            'data'       : self.data.copy(),
        }

#==============================================================================
class ActivityDependency:
    def __init__(self, activity, predecessors=None):
        """
        Activity with the ids of activities it depends on

        Parameters:
        -----------
        activity : Activity
            Dependent activity
        predecessors : iterable of int
            Ids of activities which must be finished before this one starts.
            Declaration order is kept, repeated ids are dropped.
        """
        assert isinstance(activity, Activity)

        self.activity     = activity
        self.predecessors = []
        for p in (predecessors if predecessors is not None else []):
            p = _as_id(p)
            if p not in self.predecessors:
                self.predecessors.append(p)

    def __repr__(self):
        return f'ActivityDependency({self.activity.id} <- {self.predecessors})'

#==============================================================================
def _parse_links(lnk_src, lnk_dst, links):
    """
    Parse links from various formats into standard lnk_src, lnk_dst lists.

    Parameters
    ----------
    lnk_src : array-like, optional
        Source (predecessor) activity IDs
    lnk_dst : array-like, optional
        Destination (dependent) activity IDs
    links : various, optional
        Links in one of the formats:

        - Two rows: ``[[src1, src2, ...], [dst1, dst2, ...]]``
        - Two columns: ``[[src1, dst1], [src2, dst2], ...]``
        - Dictionary: ``{'src': [src1, src2, ...], 'dst': [dst1, dst2, ...]}``

    Returns
    -------
    tuple
        (lnk_src, lnk_dst) as lists

    Raises
    ------
    ValueError
        If links format is invalid
    """
    if lnk_src is not None and lnk_dst is not None:
        lnk_src, lnk_dst = list(lnk_src), list(lnk_dst)

    elif links is None:
        # A project without any links
        return [], []

    # Two rows [[src...], [dst...]]
    elif (isinstance(links, (list, tuple)) and len(links) == 2 and
            isinstance(links[0], (list, tuple, np.ndarray)) and
            isinstance(links[1], (list, tuple, np.ndarray))):
        lnk_src, lnk_dst = list(links[0]), list(links[1])

    # Two columns [[src, dst], [src, dst], ...]
    elif (isinstance(links, (list, tuple, np.ndarray)) and
          len(links) > 0 and
          isinstance(links[0], (list, tuple, np.ndarray)) and
          len(links[0]) == 2):
        lnk_src = [item[0] for item in links]
        lnk_dst = [item[1] for item in links]

    elif isinstance(links, dict):
        if 'src' not in links or 'dst' not in links:
            raise ValueError("Dictionary links must contain 'src' and 'dst' keys")
        lnk_src, lnk_dst = list(links['src']), list(links['dst'])

    else:
        raise ValueError(f"Unsupported links format: {type(links)}")

    if len(lnk_src) != len(lnk_dst):
        raise ValueError(f"Link sources and destinations differ in length: "
                         f"{len(lnk_src)} != {len(lnk_dst)}")
    return lnk_src, lnk_dst

#==============================================================================
def dependencies_from_wbs(wbs_dict, lnk_src=None, lnk_dst=None, links=None):
    """
    Build activity dependencies from a WBS dictionary and a list of links.

    Parameters
    ----------
    wbs_dict : dict
        Work Breakdown Structure dictionary. Each key is an activity ID and
        value is a dictionary with optional ``letter`` and ``critical``
        entries; all other entries go to ``Activity.data``.
    lnk_src, lnk_dst, links :
        Dependency links, see :func:`_parse_links`. A ``links`` value made of
        exactly two sequences is read as two rows.

    Returns
    -------
    list
        ActivityDependency objects in WBS order

    Raises
    ------
    NetworkInputError
        If a link references an activity absent from the WBS
    """
    assert isinstance(wbs_dict, dict)

    lnk_src, lnk_dst = _parse_links(lnk_src, lnk_dst, links)

    activities = {}
    for act_id, wbs_data in wbs_dict.items():
        wbs_data = wbs_data if wbs_data is not None else {}
        data = {k: v for k, v in wbs_data.items() if k not in ('letter', 'critical')}
        act = Activity(act_id,
                       is_critical=bool(wbs_data.get('critical', False)),
                       letter=wbs_data.get('letter', ''),
                       data=data)
        activities[act.id] = act

    preds = {i: [] for i in activities}
    for src, dst in zip(lnk_src, lnk_dst):
        src, dst = _as_id(src), _as_id(dst)
        for i in (src, dst):
            if i not in activities:
                raise NetworkInputError(f"Link {src} -> {dst} references unknown activity {i}")
        preds[dst].append(src)

    return [ActivityDependency(a, preds[i]) for i, a in activities.items()]
