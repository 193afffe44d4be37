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

"""Evaluation counters of nonlinear programming models."""

from __future__ import annotations

from typing import Any


class Counters:
    """Counts the evaluations of a model's functions and derivatives.

    The counters are reset explicitly by the owner of the model. They are never
    meant to be accumulated over several solver runs, so a solver run has to be
    preceded by a call to :py:meth:`reset`.
    """

    fields: tuple[str, ...] = (
        "neval_obj",
        "neval_grad",
        "neval_cons",
        "neval_jac",
        "neval_jprod",
        "neval_jtprod",
        "neval_hess",
        "neval_hprod",
    )

    def __init__(self) -> None:
        """Initializes self with all counters set to zero."""
        for name in self.fields:
            setattr(self, name, 0)

    def reset(self) -> None:
        """Sets all counters to zero."""
        for name in self.fields:
            setattr(self, name, 0)

    def increment(self, name: str, amount: int = 1) -> None:
        """Increments a single counter.

        Args:
            name: The name of the counter, e.g., ``"neval_obj"``.
            amount: The increment. Defaults to 1.

        """
        setattr(self, name, getattr(self, name) + amount)

    def copy(self) -> Counters:
        """Returns an independent snapshot of the counters."""
        snapshot = self.__class__()
        for name in self.fields:
            setattr(snapshot, name, getattr(self, name))
        return snapshot

    def total(self) -> int:
        """Returns the total number of evaluations."""
        return int(sum(getattr(self, name) for name in self.fields))

    def to_dict(self) -> dict[str, int]:
        """Returns the counters as a dictionary."""
        return {name: int(getattr(self, name)) for name in self.fields}

    def __eq__(self, other: Any) -> bool:
        """Compares two sets of counters entry by entry."""
        if not isinstance(other, Counters):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        """Returns the string representation of the counters."""
        entries = ", ".join(f"{key}={value}" for key, value in self.to_dict().items())
        return f"{self.__class__.__name__}({entries})"


class NLSCounters(Counters):
    """Counters of a nonlinear least-squares model."""

    fields: tuple[str, ...] = Counters.fields + (
        "neval_residual",
        "neval_jac_residual",
        "neval_jprod_residual",
        "neval_jtprod_residual",
    )
