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
class NetworkInputError(ValueError):
    """Activity data can not be turned into a network (unknown ids etc)."""

#==============================================================================
class CyclicDependencyError(NetworkInputError):
    """Activity dependencies contain a cycle."""

    def __init__(self, cycle):
        self.cycle = list(cycle)
        path = ' -> '.join(str(u) for u, _ in self.cycle)
        if self.cycle:
            path += ' -> ' + str(self.cycle[-1][1])
        super().__init__("Activity dependencies must not be cyclic: " + path)

#==============================================================================
class NetworkInvariantError(RuntimeError):
    """Activity diagram graph got into a state its construction forbids."""
