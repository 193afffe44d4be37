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

"""The complete comparison experiment.

An experiment builds the model, computes a starting point with the feasibility
initializer, solves the model with each configured backend from that point and
compares the results.
"""

from __future__ import annotations

import numpy as np

from pdenlp import comparison as comparison_module
from pdenlp import io
from pdenlp import log
from pdenlp import problems
from pdenlp import solvers
from pdenlp.models import pde_model


class ExperimentResult:
    """The outcome of :py:func:`run_experiment`."""

    def __init__(
        self,
        model: pde_model.PDENLPModel,
        feasibility: solvers.ExecutionStats | None,
        records: list[solvers.ExecutionStats],
        comparison: comparison_module.Comparison | None,
    ) -> None:
        """Initializes self.

        Args:
            model: The model that was solved.
            feasibility: The statistics of the feasibility initialization, or
                ``None`` if it was disabled.
            records: The statistics of the solver runs, in the configured order.
            comparison: The comparison of the runs, or ``None`` if fewer than two
                solvers were run.

        """
        self.model = model
        self.feasibility = feasibility
        self.records = records
        self.comparison = comparison

    @property
    def initial_point(self) -> np.ndarray:
        """The point from which all solvers were started."""
        if self.feasibility is not None:
            return self.feasibility.solution
        return self.model.meta.x0

    def record(self, solver: str) -> solvers.ExecutionStats:
        """Returns the statistics of a solver by its name."""
        for record in self.records:
            if record.solver == solver:
                return record
        raise KeyError(solver)


def run_experiment(
    config: io.Config | None = None,
    model: pde_model.PDENLPModel | None = None,
) -> ExperimentResult:
    """Runs the solver comparison.

    Args:
        config: The configuration. If this is ``None``, the default configuration is
            used.
        model: The model to be solved. If this is ``None``, the Poisson control
            problem is built from the config.

    Returns:
        The model, the feasibility statistics, the statistics of each solver and
        their comparison.

    """
    if config is None:
        config = io.Config()
    config.validate_config()

    output_manager = io.OutputManager(config)

    if model is None:
        model = problems.poisson_control_model(config)

    feasibility = None
    x0 = model.meta.x0
    if config.getboolean("Feasibility", "enabled"):
        log.begin("Computing a feasible starting point.", level=log.INFO)
        feasibility = solvers.feasibility_solve(model, config=config)
        x0 = feasibility.solution
        log.info(
            "Constraint violation reduced from "
            f"{feasibility.solver_specific['initial_residual_norm']:.3e} to "
            f"{feasibility.primal_feas:.3e}."
        )
        log.end()

    tol = config.getfloat("Solvers", "tol")
    records = []
    log.begin("Solving the problem.", level=log.INFO)
    for solver in config.getlist("Solvers", "backends"):
        record = solvers.solve(model, solver, x0=x0, tol=tol, config=config)
        records.append(record)
        output_manager.write_solution(model, record)
    log.end()

    comparison = None
    if len(records) >= 2:
        comparison = comparison_module.compare(records)
        if config.getboolean("Output", "verbose"):
            precision = config.getint("Output", "precision")
            log.info("Comparison of the solvers:\n" + comparison.format(precision))
        output_manager.write_comparison(comparison, feasibility)

    return ExperimentResult(model, feasibility, records, comparison)
