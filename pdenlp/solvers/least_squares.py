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

"""Feasibility initialization by nonlinear least squares."""

from __future__ import annotations

import time

import numpy as np
from scipy import optimize

from pdenlp import io
from pdenlp import log
from pdenlp.models import feasibility
from pdenlp.models import nlp_model
from pdenlp.solvers import stats as stats_module

_status_names = {
    -1: "exception",
    0: "max_eval",
    1: "first_order",
    2: "acceptable",
    3: "small_step",
    4: "acceptable",
}


def feasibility_solve(
    model: nlp_model.NLPModel,
    x0: np.ndarray | None = None,
    config: io.Config | None = None,
) -> stats_module.ExecutionStats:
    r"""Computes a point with a small constraint violation.

    The constraints of ``model`` are treated as the residual of the nonlinear
    least-squares problem :math:`\min_x \frac{1}{2} \lVert c(x) - c_0 \rVert^2`,
    which is solved matrix-free with a trust-region reflective method whose
    subproblems are solved with LSMR. Only the residual and its Jacobian are
    evaluated, the objective of ``model`` is never touched.

    The result is not checked against a threshold. Callers decide whether the
    returned point is feasible enough.

    Args:
        model: The equality constrained model.
        x0: The starting point. Defaults to the initial guess of ``model``.
        config: The configuration, its ``[Feasibility]`` section is used.

    Returns:
        The statistics of the run. ``primal_feas`` is the euclidean norm of the
        residual at the returned point and ``solver_specific`` contains the norm
        of the residual at the starting point.

    """
    if config is None:
        config = io.Config()

    nls = feasibility.FeasibilityResidual(model)
    if x0 is None:
        x0 = nls.meta.x0
    x0 = np.array(x0, dtype=float).ravel()

    initial_residual_norm = float(np.linalg.norm(nls.residual(x0)))
    nls.reset()

    max_nfev = config.getint("Feasibility", "max_nfev")
    log.begin("Solving the feasibility problem.", level=log.DEBUG)
    log.debug(f"Initial residual norm: {initial_residual_norm:.3e}")

    start_time = time.perf_counter()
    result = optimize.least_squares(
        nls.residual,
        x0,
        jac=nls.jac_op_residual,
        method="trf",
        tr_solver="lsmr",
        x_scale=1.0,
        ftol=config.getfloat("Feasibility", "ftol"),
        xtol=config.getfloat("Feasibility", "xtol"),
        gtol=config.getfloat("Feasibility", "gtol"),
        max_nfev=max_nfev if max_nfev > 0 else None,
    )
    elapsed_time = time.perf_counter() - start_time
    counters = nls.counters.copy()

    residual_norm = float(np.linalg.norm(result.fun))
    log.debug(
        f"Final residual norm: {residual_norm:.3e} after {result.nfev} residual "
        f"evaluations ({result.message})"
    )
    log.end()

    return stats_module.ExecutionStats(
        "feasibility",
        _status_names.get(result.status, "unknown"),
        result.x,
        objective=float(result.cost),
        primal_feas=residual_norm,
        dual_feas=float(result.optimality),
        iterations=int(result.njev) if result.njev is not None else int(result.nfev),
        elapsed_time=elapsed_time,
        counters=counters,
        message=str(result.message),
        solver_specific={
            "initial_residual_norm": initial_residual_norm,
            "nfev": int(result.nfev),
            "njev": int(result.njev) if result.njev is not None else 0,
        },
    )
