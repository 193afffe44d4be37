# Copyright (C) 2023-2025 The pdenlp developers
#
# This file is part of pdenlp.
#
# pdenlp is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# pdenlp is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with pdenlp.  If not, see <https://www.gnu.org/licenses/>.

"""Type hints for pdenlp."""

from __future__ import annotations

from typing import Callable

import fenics

try:
    import ufl_legacy as ufl
except ImportError:
    import ufl

MeshTuple = tuple[
    fenics.Mesh,
    fenics.MeshFunction,
    fenics.MeshFunction,
    ufl.Measure,
    ufl.Measure,
    ufl.Measure,
]
CostFunction = Callable[[fenics.Function, fenics.Function], ufl.Form]
ResidualFunction = Callable[
    [fenics.Function, fenics.Function, fenics.Function], ufl.Form
]
