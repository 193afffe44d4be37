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

"""Solvers for nonlinear programming models.

The feasibility initializer :py:func:`feasibility_solve` computes a starting point
with a small constraint violation, and :py:func:`solve` runs one of the backends
:py:func:`ipopt` or :py:func:`sqp` on a model.
"""

from __future__ import annotations

from typing import Callable

import numpy as np

from pdenlp import _exceptions
from pdenlp import io
from pdenlp import log
from pdenlp.models import nlp_model
from pdenlp.solvers.ipopt import ipopt
from pdenlp.solvers.least_squares import feasibility_solve
from pdenlp.solvers.sqp import sqp
from pdenlp.solvers.stats import ExecutionStats

_backends: dict[str, Callable[..., ExecutionStats]] = {
    "ipopt": ipopt,
    "interior_point": ipopt,
    "sqp": sqp,
    "trust_constr": sqp,
}


def available_solvers() -> list[str]:
    """Returns the names under which the backends can be selected."""
    return list(_backends.keys())


def solve(
    model: nlp_model.NLPModel,
    solver: str,
    x0: np.ndarray | None = None,
    tol: float | None = None,
    config: io.Config | None = None,
) -> ExecutionStats:
    """Solves a model with one of the available backends.

    The evaluation counters of the model are reset before the backend is run, so
    that the returned statistics only contain the evaluations of this run. Unless
    ``[Solvers] verbose`` is set in the config, the iteration output of the
    backend is discarded. A backend that does not converge is not an error, the
    statistics are returned as they are.

    Args:
        model: The model to be solved.
        solver: The name of the backend, one of ``"ipopt"``, ``"interior_point"``,
            ``"sqp"`` or ``"trust_constr"``.
        x0: The starting point. Defaults to the initial guess of the model.
        tol: The convergence tolerance. Defaults to ``[Solvers] tol``.
        config: The configuration.

    Returns:
        The statistics of the run.

    """
    key = solver.casefold()
    if key not in _backends:
        raise _exceptions.InputError(
            "pdenlp.solvers.solve",
            "solver",
            f"Unknown solver {solver}. Possible options are {available_solvers()}.",
        )

    if config is None:
        config = io.Config()

    model.reset()
    log.info(f"Running {solver} on {model.meta.name}.")
    if config.getboolean("Solvers", "verbose"):
        stats = _backends[key](model, x0=x0, tol=tol, config=config)
    else:
        with log.silenced():
            stats = _backends[key](model, x0=x0, tol=tol, config=config)

    log.info(
        f"{solver} finished with status {stats.status} after "
        f"{stats.elapsed_time:.2f} s: objective {stats.objective:.6e}, "
        f"primal feasibility {stats.primal_feas:.3e}."
    )
    return stats


__all__ = [
    "ExecutionStats",
    "available_solvers",
    "feasibility_solve",
    "ipopt",
    "solve",
    "sqp",
]
