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

"""Comparison of the statistics of several solvers.

The functions in this module only read the statistics records, they never modify
them. Whether solvers agree or converged is not decided implicitly, callers can
check this with :py:func:`check_agreement` and :py:func:`verify_convergence`.
"""

from __future__ import annotations

from typing import Any, Sequence

import numpy as np

from pdenlp import _exceptions
from pdenlp.solvers import stats as stats_module

_columns = (
    ("solver", "Solver"),
    ("status", "Status"),
    ("elapsed_time", "Time [s]"),
    ("objective", "Objective"),
    ("primal_feas", "Primal feas."),
    ("dual_feas", "Dual feas."),
    ("iterations", "Iterations"),
    ("evaluations", "Evaluations"),
)


def _relative_spread(objectives: np.ndarray) -> float:
    scale = max(float(np.max(np.abs(objectives))), np.finfo(float).tiny)
    return float(np.max(objectives) - np.min(objectives)) / scale


class Comparison:
    """Side-by-side comparison of solver runs on the same model."""

    def __init__(self, records: Sequence[stats_module.ExecutionStats]) -> None:
        """Initializes self.

        Args:
            records: The statistics of at least two solver runs.

        """
        if len(records) < 2:
            raise _exceptions.InputError(
                "pdenlp.comparison.Comparison",
                "records",
                "At least two records are needed for a comparison.",
            )
        self.records = tuple(records)

    @property
    def rows(self) -> list[dict[str, Any]]:
        """One row of key figures per solver run."""
        return [
            {
                "solver": record.solver,
                "status": record.status,
                "elapsed_time": record.elapsed_time,
                "objective": record.objective,
                "primal_feas": record.primal_feas,
                "dual_feas": record.dual_feas,
                "iterations": record.iterations,
                "evaluations": record.counters.total(),
            }
            for record in self.records
        ]

    def objective_spread(self) -> float:
        """Returns the relative difference of the largest and smallest objective."""
        objectives = np.array([record.objective for record in self.records])
        if not np.all(np.isfinite(objectives)):
            return float("inf")
        return _relative_spread(objectives)

    def fastest(self) -> stats_module.ExecutionStats:
        """Returns the record with the smallest elapsed time."""
        return min(self.records, key=lambda record: record.elapsed_time)

    def to_dict(self) -> dict[str, Any]:
        """Returns the comparison as dictionary, e.g., for json output."""
        return {
            "rows": self.rows,
            "objective_spread": self.objective_spread(),
            "fastest": self.fastest().solver,
            "records": [record.to_dict() for record in self.records],
        }

    def format(self, precision: int = 3) -> str:
        """Formats the comparison as a text table.

        Args:
            precision: The number of significant digits of floating point values.

        Returns:
            The table, with one line per solver run.

        """
        lines = [[header for _, header in _columns]]
        for row in self.rows:
            line = []
            for key, _ in _columns:
                value = row[key]
                if isinstance(value, float):
                    if key == "elapsed_time":
                        line.append(f"{value:.{precision}f}")
                    else:
                        line.append(f"{value:.{precision}e}")
                else:
                    line.append(str(value))
            lines.append(line)

        widths = [max(len(line[i]) for line in lines) for i in range(len(_columns))]
        formatted = [
            "  ".join(
                entry.ljust(width) if i < 2 else entry.rjust(width)
                for i, (entry, width) in enumerate(zip(line, widths))
            )
            for line in lines
        ]
        formatted.insert(1, "-" * len(formatted[0]))
        return "\n".join(formatted)

    def __str__(self) -> str:
        return self.format()


def compare(records: Sequence[stats_module.ExecutionStats]) -> Comparison:
    """Compares the statistics of several solver runs.

    Args:
        records: The statistics of at least two solver runs.

    Returns:
        The comparison.

    """
    return Comparison(records)


def check_agreement(
    records: Sequence[stats_module.ExecutionStats], rtol: float = 1e-2
) -> bool:
    """Checks whether the objectives of several runs agree.

    Args:
        records: The statistics of the solver runs.
        rtol: The relative tolerance for the difference of the objectives.

    Returns:
        ``True`` if the objectives differ by at most ``rtol``, relative to the
        largest objective in absolute value.

    """
    return Comparison(records).objective_spread() <= rtol


def verify_convergence(
    record: stats_module.ExecutionStats,
    primal_tol: float,
    dual_tol: float = float("inf"),
) -> None:
    """Raises an exception if a run is not converged.

    Args:
        record: The statistics of the solver run.
        primal_tol: The tolerance for the primal feasibility.
        dual_tol: The tolerance for the dual feasibility.

    Raises:
        NotConvergedError: If the run did not reach the tolerances.

    """
    if not record.is_converged(primal_tol, dual_tol):
        raise _exceptions.NotConvergedError(
            record.solver,
            f"Status: {record.status}, primal feasibility {record.primal_feas:.3e} "
            f"(tolerance {primal_tol:.3e}), dual feasibility "
            f"{record.dual_feas:.3e} (tolerance {dual_tol:.3e}).",
        )
