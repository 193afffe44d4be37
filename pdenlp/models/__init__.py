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

"""Nonlinear programming models.

Includes the abstract model interface, the finite element model of PDE-constrained
problems and the feasibility residual used to find initial guesses.
"""

from pdenlp.models.counters import Counters
from pdenlp.models.counters import NLSCounters
from pdenlp.models.feasibility import FeasibilityResidual
from pdenlp.models.meta import NLPModelMeta
from pdenlp.models.nlp_model import NLPModel
from pdenlp.models.pde_model import PDENLPModel

__all__ = [
    "Counters",
    "NLSCounters",
    "FeasibilityResidual",
    "NLPModelMeta",
    "NLPModel",
    "PDENLPModel",
]
