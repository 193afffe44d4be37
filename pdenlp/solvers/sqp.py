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

"""Sequential quadratic programming backend based on SciPy."""

from __future__ import annotations

import time

import numpy as np
from scipy import optimize

from pdenlp import io
from pdenlp import log
from pdenlp.models import nlp_model
from pdenlp.solvers import stats as stats_module

_status_names = {
    0: "max_iter",
    1: "first_order",
    2: "small_step",
    3: "user",
    -1: "exception",
}

_factorization_methods = {
    "auto": None,
    "augmentedsystem": "AugmentedSystem",
    "normalequation": "NormalEquation",
    "qrfactorization": "QRFactorization",
    "svdfactorization": "SVDFactorization",
}


def sqp(
    model: nlp_model.NLPModel,
    x0: np.ndarray | None = None,
    tol: float | None = None,
    config: io.Config | None = None,
) -> stats_module.ExecutionStats:
    """Solves an equality constrained model with a trust-region SQP method.

    The model is passed to the ``trust-constr`` method of
    :py:func:`scipy.optimize.minimize`. For purely equality constrained problems
    without bounds this is the Byrd-Omojokun trust-region SQP method, which uses
    the exact Hessians of the objective and of the constraints.

    The gradient tolerance is ``tol + rtol * ||grad(x0)||_inf``, where ``rtol``
    is taken from the ``[SQP]`` section of the config.

    Args:
        model: The model to be solved.
        x0: The starting point. Defaults to the initial guess of the model.
        tol: The absolute convergence tolerance. Defaults to ``[Solvers] tol``.
        config: The configuration, its ``[SQP]`` section is used.

    Returns:
        The statistics of the run.

    """
    if config is None:
        config = io.Config()
    if x0 is None:
        x0 = model.meta.x0
    if tol is None:
        tol = config.getfloat("Solvers", "tol")
    x0 = np.array(x0, dtype=float).ravel()

    rtol = config.getfloat("SQP", "rtol")
    gtol = float(tol)
    if rtol > 0.0:
        # pylint: disable=protected-access
        gtol += rtol * float(np.max(np.abs(model._grad(x0)), initial=0.0))

    constraints = []
    if model.ncon > 0:
        constraints.append(
            optimize.NonlinearConstraint(
                model.cons,
                model.meta.lcon,
                model.meta.ucon,
                jac=model.jac,
                hess=lambda x, v: model.hess(x, v, obj_weight=0.0),
            )
        )
    bounds = None
    if model.meta.has_bounds:
        bounds = optimize.Bounds(model.meta.lvar, model.meta.uvar)

    def callback(intermediate_result: optimize.OptimizeResult) -> None:
        log.trace(
            f"Iteration {intermediate_result.nit:4d} - "
            f"Objective: {intermediate_result.fun:.6e}  "
            f"Constraint violation: {intermediate_result.constr_violation:.3e}  "
            f"Optimality: {intermediate_result.optimality:.3e}  "
            f"Trust radius: {intermediate_result.tr_radius:.3e}"
        )

    options = {
        "gtol": gtol,
        "xtol": config.getfloat("SQP", "xtol"),
        "maxiter": config.getint("SQP", "max_iter"),
        "initial_tr_radius": config.getfloat("SQP", "initial_tr_radius"),
        "verbose": 0,
    }
    factorization_method = _factorization_methods[
        config.get("SQP", "factorization_method").casefold()
    ]
    if factorization_method is not None:
        options["factorization_method"] = factorization_method

    log.begin(f"Solving {model.meta.name} with SQP.", level=log.DEBUG)
    start_time = time.perf_counter()
    result = optimize.minimize(
        model.obj,
        x0,
        method="trust-constr",
        jac=model.grad,
        hess=lambda x: model.hess(x, None, obj_weight=1.0),
        constraints=constraints,
        bounds=bounds,
        callback=callback,
        options=options,
    )
    elapsed_time = time.perf_counter() - start_time
    counters = model.counters.copy()
    log.end()

    multipliers = np.asarray(result.v[0], dtype=float) if constraints else None
    primal_feas, _ = model.kkt_residuals(
        result.x, multipliers if multipliers is not None else np.zeros(0)
    )
    dual_feas = float(np.max(np.abs(result.lagrangian_grad), initial=0.0))

    return stats_module.ExecutionStats(
        "sqp",
        _status_names.get(int(result.status), "unknown"),
        result.x,
        objective=float(result.fun),
        primal_feas=primal_feas,
        dual_feas=dual_feas,
        iterations=int(result.nit),
        elapsed_time=elapsed_time,
        counters=counters,
        multipliers=multipliers,
        message=str(result.message),
        solver_specific={
            "method": str(result.method),
            "gtol": gtol,
            "tr_radius": float(result.tr_radius),
            "cg_niter": int(result.cg_niter),
        },
    )
