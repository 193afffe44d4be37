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

"""Interior point backend based on Ipopt."""

from __future__ import annotations

import time

import cyipopt
import numpy as np

from pdenlp import io
from pdenlp import log
from pdenlp.models import nlp_model
from pdenlp.solvers import stats as stats_module

_IPOPT_INFINITY = 2.0e19

_status_names = {
    0: "first_order",
    1: "acceptable",
    2: "infeasible",
    3: "small_step",
    4: "unbounded",
    5: "user",
    6: "feasible_point",
    -1: "max_iter",
    -2: "exception",
    -3: "exception",
    -4: "max_time",
    -10: "exception",
    -11: "exception",
    -12: "exception",
    -13: "exception",
    -100: "exception",
    -101: "exception",
    -102: "exception",
    -199: "exception",
}


def _ipopt_bounds(bounds: np.ndarray) -> np.ndarray:
    return np.clip(bounds, -_IPOPT_INFINITY, _IPOPT_INFINITY)


class _IpoptProblem:
    """Exposes a model with the callback interface of cyipopt."""

    def __init__(self, model: nlp_model.NLPModel) -> None:
        self.model = model
        self.iterations = 0

    def objective(self, x: np.ndarray) -> float:
        return self.model.obj(x)

    def gradient(self, x: np.ndarray) -> np.ndarray:
        return self.model.grad(x)

    def constraints(self, x: np.ndarray) -> np.ndarray:
        return self.model.cons(x)

    def jacobianstructure(self) -> tuple[np.ndarray, np.ndarray]:
        return self.model.jac_structure()

    def jacobian(self, x: np.ndarray) -> np.ndarray:
        return self.model.jac_coord(x)

    def hessianstructure(self) -> tuple[np.ndarray, np.ndarray]:
        return self.model.hess_structure()

    def hessian(
        self, x: np.ndarray, lagrange: np.ndarray, obj_factor: float
    ) -> np.ndarray:
        return self.model.hess_coord(x, lagrange, obj_factor)

    def intermediate(
        self,
        alg_mod: int,
        iter_count: int,
        obj_value: float,
        inf_pr: float,
        inf_du: float,
        mu: float,
        d_norm: float,
        regularization_size: float,
        alpha_du: float,
        alpha_pr: float,
        ls_trials: int,
    ) -> bool:
        self.iterations = iter_count
        log.trace(
            f"Iteration {iter_count:4d} - Objective: {obj_value:.6e}  "
            f"Primal infeasibility: {inf_pr:.3e}  Dual infeasibility: {inf_du:.3e}  "
            f"mu: {mu:.3e}"
        )
        return True


def ipopt(
    model: nlp_model.NLPModel,
    x0: np.ndarray | None = None,
    tol: float | None = None,
    config: io.Config | None = None,
) -> stats_module.ExecutionStats:
    """Solves a model with the interior point method Ipopt.

    Exact first and second derivatives of the model are used. The output of Ipopt
    itself is switched off, iterations are reported with the trace log level.

    Args:
        model: The model to be solved.
        x0: The starting point. Defaults to the initial guess of the model.
        tol: The convergence tolerance. Defaults to ``[Solvers] tol``.
        config: The configuration, its ``[Ipopt]`` section is used.

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

    adapter = _IpoptProblem(model)
    problem = cyipopt.Problem(
        n=model.nvar,
        m=model.ncon,
        problem_obj=adapter,
        lb=_ipopt_bounds(model.meta.lvar),
        ub=_ipopt_bounds(model.meta.uvar),
        cl=_ipopt_bounds(model.meta.lcon),
        cu=_ipopt_bounds(model.meta.ucon),
    )
    problem.add_option("tol", float(tol))
    problem.add_option("print_level", config.getint("Ipopt", "print_level"))
    problem.add_option("sb", "yes")
    problem.add_option("max_iter", config.getint("Ipopt", "max_iter"))
    problem.add_option("mu_strategy", config.get("Ipopt", "mu_strategy").casefold())
    problem.add_option(
        "hessian_approximation",
        config.get("Ipopt", "hessian_approximation").casefold(),
    )

    log.begin(f"Solving {model.meta.name} with Ipopt.", level=log.DEBUG)
    start_time = time.perf_counter()
    x, info = problem.solve(x0)
    elapsed_time = time.perf_counter() - start_time
    counters = model.counters.copy()
    log.end()

    multipliers = np.asarray(info["mult_g"], dtype=float)
    bound_multipliers = np.asarray(info["mult_x_L"]) - np.asarray(info["mult_x_U"])
    primal_feas, dual_feas = model.kkt_residuals(x, multipliers, z=bound_multipliers)

    message = info["status_msg"]
    if isinstance(message, bytes):
        message = message.decode()

    return stats_module.ExecutionStats(
        "ipopt",
        _status_names.get(int(info["status"]), "unknown"),
        x,
        objective=float(info["obj_val"]),
        primal_feas=primal_feas,
        dual_feas=dual_feas,
        iterations=adapter.iterations,
        elapsed_time=elapsed_time,
        counters=counters,
        multipliers=multipliers,
        message=str(message),
        solver_specific={
            "return_code": int(info["status"]),
            "mult_x_L": np.asarray(info["mult_x_L"]),
            "mult_x_U": np.asarray(info["mult_x_U"]),
        },
    )
