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

"""Problem data of nonlinear programming models."""

from __future__ import annotations

import numpy as np

from pdenlp import _exceptions


def _as_array(
    values: np.ndarray | list[float] | float | None,
    size: int,
    default: float,
    name: str,
) -> np.ndarray:
    if values is None:
        return np.full(size, default, dtype=float)

    array = np.array(values, dtype=float).ravel()
    if array.size == 1 and size != 1:
        array = np.full(size, array[0], dtype=float)
    if array.size != size:
        raise _exceptions.InputError(
            "pdenlp.models.NLPModelMeta",
            name,
            f"{name} has {array.size} entries, but {size} are expected.",
        )
    return array


class NLPModelMeta:
    r"""Stores the dimensions, bounds and initial guesses of a model.

    The underlying problem reads

    .. math::
        \min_x f(x) \quad \text{s.t.} \quad
        \text{lcon} \leq c(x) \leq \text{ucon}, \quad
        \text{lvar} \leq x \leq \text{uvar}.

    """

    def __init__(
        self,
        nvar: int,
        x0: np.ndarray | list[float] | None = None,
        lvar: np.ndarray | list[float] | float | None = None,
        uvar: np.ndarray | list[float] | float | None = None,
        ncon: int = 0,
        y0: np.ndarray | list[float] | None = None,
        lcon: np.ndarray | list[float] | float | None = None,
        ucon: np.ndarray | list[float] | float | None = None,
        name: str = "Generic",
    ) -> None:
        """Initializes self.

        Args:
            nvar: The number of variables.
            x0: The initial guess. Defaults to zero.
            lvar: The lower bounds of the variables. Defaults to ``-inf``.
            uvar: The upper bounds of the variables. Defaults to ``inf``.
            ncon: The number of constraints.
            y0: The initial guess of the Lagrange multipliers. Defaults to zero.
            lcon: The lower bounds of the constraints. Defaults to zero.
            ucon: The upper bounds of the constraints. Defaults to zero.
            name: The name of the model.

        """
        if nvar < 0 or ncon < 0:
            raise _exceptions.InputError(
                "pdenlp.models.NLPModelMeta",
                "nvar",
                "The number of variables and constraints must not be negative.",
            )

        self.nvar = int(nvar)
        self.ncon = int(ncon)
        self.name = name

        self.x0 = _as_array(x0, self.nvar, 0.0, "x0")
        self.lvar = _as_array(lvar, self.nvar, -np.inf, "lvar")
        self.uvar = _as_array(uvar, self.nvar, np.inf, "uvar")
        self.y0 = _as_array(y0, self.ncon, 0.0, "y0")
        self.lcon = _as_array(lcon, self.ncon, 0.0, "lcon")
        self.ucon = _as_array(ucon, self.ncon, 0.0, "ucon")

        if np.any(self.lvar > self.uvar) or np.any(self.lcon > self.ucon):
            raise _exceptions.InputError(
                "pdenlp.models.NLPModelMeta",
                "lvar",
                "The lower bounds must not exceed the upper bounds.",
            )

    @property
    def equality_indices(self) -> np.ndarray:
        """The indices of the equality constraints."""
        return np.flatnonzero(self.lcon == self.ucon)

    @property
    def is_equality_constrained(self) -> bool:
        """Whether all constraints are equality constraints."""
        return self.ncon > 0 and len(self.equality_indices) == self.ncon

    @property
    def has_bounds(self) -> bool:
        """Whether any variable has a finite bound."""
        return bool(np.any(np.isfinite(self.lvar)) or np.any(np.isfinite(self.uvar)))

    def __repr__(self) -> str:
        """Returns the string representation of the meta data."""
        return (
            f"NLPModelMeta(name={self.name!r}, nvar={self.nvar}, ncon={self.ncon})"
        )
