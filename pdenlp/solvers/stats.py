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

"""Statistics of a single solver run."""

from __future__ import annotations

from typing import Any

import numpy as np

from pdenlp.models import counters as counters_module


def _frozen(array: np.ndarray | None) -> np.ndarray | None:
    if array is None:
        return None
    frozen = np.array(array, dtype=float, copy=True)
    frozen.setflags(write=False)
    return frozen


class ExecutionStats:
    """The record returned by every solver of pdenlp.

    The record is read-only. The evaluation counters are a snapshot taken right
    after the solver finished, so that later evaluations of the model do not
    alter them.
    """

    def __init__(
        self,
        solver: str,
        status: str,
        solution: np.ndarray,
        objective: float,
        primal_feas: float,
        dual_feas: float,
        iterations: int,
        elapsed_time: float,
        counters: counters_module.Counters,
        multipliers: np.ndarray | None = None,
        message: str = "",
        solver_specific: dict[str, Any] | None = None,
    ) -> None:
        """Initializes self.

        Args:
            solver: The name of the solver.
            status: The termination status, e.g., ``"first_order"``.
            solution: The returned point.
            objective: The objective value at the returned point.
            primal_feas: The primal feasibility at the returned point.
            dual_feas: The dual feasibility at the returned point.
            iterations: The number of iterations.
            elapsed_time: The wall clock time of the solver in seconds.
            counters: The evaluation counters. A copy is stored.
            multipliers: The Lagrange multipliers of the constraints, if available.
            message: The message of the solver.
            solver_specific: Additional, solver specific information.

        """
        self._solver = solver
        self._status = status
        self._solution = _frozen(solution)
        self._objective = float(objective)
        self._primal_feas = float(primal_feas)
        self._dual_feas = float(dual_feas)
        self._iterations = int(iterations)
        self._elapsed_time = float(elapsed_time)
        self._counters = counters.copy()
        self._multipliers = _frozen(multipliers)
        self._message = message
        self._solver_specific = dict(solver_specific or {})

    @property
    def solver(self) -> str:
        """The name of the solver."""
        return self._solver

    @property
    def status(self) -> str:
        """The termination status."""
        return self._status

    @property
    def message(self) -> str:
        """The message of the solver."""
        return self._message

    @property
    def solution(self) -> np.ndarray:
        """The returned point (read-only)."""
        return self._solution

    @property
    def objective(self) -> float:
        """The objective value at the returned point."""
        return self._objective

    @property
    def primal_feas(self) -> float:
        """The primal feasibility at the returned point."""
        return self._primal_feas

    @property
    def dual_feas(self) -> float:
        """The dual feasibility at the returned point."""
        return self._dual_feas

    @property
    def multipliers(self) -> np.ndarray | None:
        """The Lagrange multipliers (read-only), if available."""
        return self._multipliers

    @property
    def iterations(self) -> int:
        """The number of iterations."""
        return self._iterations

    @property
    def elapsed_time(self) -> float:
        """The elapsed wall clock time in seconds."""
        return self._elapsed_time

    @property
    def counters(self) -> counters_module.Counters:
        """A copy of the evaluation counters of the run."""
        return self._counters.copy()

    @property
    def solver_specific(self) -> dict[str, Any]:
        """A copy of the solver specific information."""
        return dict(self._solver_specific)

    @property
    def success(self) -> bool:
        """Whether the solver reported an optimal or acceptable point."""
        return self._status in ("first_order", "acceptable")

    def is_converged(
        self, primal_tol: float, dual_tol: float = float("inf")
    ) -> bool:
        """Checks the returned point against feasibility tolerances.

        Args:
            primal_tol: The tolerance for the primal feasibility.
            dual_tol: The tolerance for the dual feasibility. Defaults to infinity,
                so that only the primal feasibility is checked.

        Returns:
            ``True`` if both feasibilities are below their tolerances.

        """
        return bool(
            np.isfinite(self._primal_feas)
            and self._primal_feas < primal_tol
            and self._dual_feas < dual_tol
        )

    def to_dict(self) -> dict[str, Any]:
        """Returns the scalar statistics as dictionary, e.g., for json output."""
        return {
            "solver": self._solver,
            "status": self._status,
            "message": self._message,
            "objective": self._objective,
            "primal_feas": self._primal_feas,
            "dual_feas": self._dual_feas,
            "iterations": self._iterations,
            "elapsed_time": self._elapsed_time,
            "counters": self._counters.to_dict(),
            "solver_specific": {
                key: value
                for key, value in self._solver_specific.items()
                if isinstance(value, (bool, int, float, str))
            },
        }

    def __repr__(self) -> str:
        """Returns the string representation of the record."""
        return (
            f"ExecutionStats(solver={self._solver!r}, status={self._status!r}, "
            f"objective={self._objective:.6e}, primal_feas={self._primal_feas:.2e}, "
            f"dual_feas={self._dual_feas:.2e}, elapsed_time={self._elapsed_time:.2f})"
        )
