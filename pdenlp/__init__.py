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

r"""pdenlp solves discretized PDE-constrained optimization problems with NLP solvers.

pdenlp is based on the finite element package `FEniCS <https://fenicsproject.org>`_.
It turns a PDE-constrained optimization problem, given by a cost functional and the
weak form of the PDE in UFL, into a nonlinear program with sparse derivatives. The
nonlinear program can be solved with general-purpose solvers, such as the interior
point method Ipopt or the trust-region SQP method of SciPy, and the results of
several solvers can be compared.
"""

from pdenlp import comparison
from pdenlp import geometry
from pdenlp import io
from pdenlp import log
from pdenlp import models
from pdenlp import mpi
from pdenlp import problems
from pdenlp import solvers
from pdenlp import verification
from pdenlp import workflow
from pdenlp._utils import create_dirichlet_bcs
from pdenlp._utils import number_of_free_dofs
from pdenlp.comparison import check_agreement
from pdenlp.comparison import compare
from pdenlp.comparison import Comparison
from pdenlp.comparison import verify_convergence
from pdenlp.geometry import regular_box_mesh
from pdenlp.geometry import regular_mesh
from pdenlp.io import load_config
from pdenlp.log import LogLevel
from pdenlp.log import set_log_level
from pdenlp.models import FeasibilityResidual
from pdenlp.models import PDENLPModel
from pdenlp.problems import poisson_control_model
from pdenlp.solvers import ExecutionStats
from pdenlp.solvers import feasibility_solve
from pdenlp.solvers import solve
from pdenlp.workflow import ExperimentResult
from pdenlp.workflow import run_experiment

__version__ = "0.1.0"

__all__ = [
    "comparison",
    "geometry",
    "io",
    "log",
    "models",
    "mpi",
    "problems",
    "solvers",
    "verification",
    "workflow",
    "create_dirichlet_bcs",
    "number_of_free_dofs",
    "check_agreement",
    "compare",
    "Comparison",
    "verify_convergence",
    "regular_box_mesh",
    "regular_mesh",
    "load_config",
    "LogLevel",
    "set_log_level",
    "FeasibilityResidual",
    "PDENLPModel",
    "poisson_control_model",
    "ExecutionStats",
    "feasibility_solve",
    "solve",
    "ExperimentResult",
    "run_experiment",
]
