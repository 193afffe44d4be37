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

r"""Feasibility residual of a constrained model.

The equality constraints :math:`c(x) = c_0` of a model are reinterpreted as the
residual :math:`F(x) = c(x) - c_0` of a nonlinear least-squares problem. Minimizing
:math:`\frac{1}{2} \lVert F(x) \rVert^2` yields a point close to being feasible.
"""

from __future__ import annotations

import numpy as np
from scipy import sparse
from scipy.sparse import linalg as sparse_linalg

from pdenlp import _exceptions
from pdenlp.models import counters as counters_module
from pdenlp.models import meta as meta_module
from pdenlp.models import nlp_model


class FeasibilityResidual(nlp_model.NLPModel):
    """A nonlinear least-squares view on the constraints of a model.

    The view only reads the residual of the parent model, it has its own counters
    and never modifies the counters of the parent.
    """

    def __init__(self, model: nlp_model.NLPModel, name: str | None = None) -> None:
        """Initializes self.

        Args:
            model: The constrained model. All of its constraints have to be
                equality constraints.
            name: The name of the least-squares model. Defaults to the name of the
                parent model with a ``"-feasres"`` suffix.

        """
        if not model.meta.is_equality_constrained:
            raise _exceptions.InputError(
                "pdenlp.FeasibilityResidual",
                "model",
                "The model has to be constrained by equality constraints only.",
            )

        self.model = model
        self.nequ = model.ncon
        super().__init__(
            meta_module.NLPModelMeta(
                model.nvar,
                x0=model.meta.x0,
                lvar=model.meta.lvar,
                uvar=model.meta.uvar,
                name=name if name is not None else f"{model.meta.name}-feasres",
            )
        )
        self.counters: counters_module.NLSCounters = counters_module.NLSCounters()

    # pylint: disable=protected-access
    def _residual(self, x: np.ndarray) -> np.ndarray:
        return self.model._cons(x) - self.model.meta.lcon

    def _jac_residual(self, x: np.ndarray) -> sparse.csr_matrix:
        return self.model._jac(x)

    def residual(self, x: np.ndarray) -> np.ndarray:
        """Evaluates the residual, i.e., the violation of the constraints.

        Args:
            x: The point of evaluation.

        Returns:
            The residual of size ``nequ``.

        """
        self.counters.increment("neval_residual")
        return self._residual(x)

    def jac_residual(self, x: np.ndarray) -> sparse.csr_matrix:
        """Evaluates the Jacobian of the residual.

        Args:
            x: The point of evaluation.

        Returns:
            The sparse Jacobian of shape ``(nequ, nvar)``.

        """
        self.counters.increment("neval_jac_residual")
        return self._jac_residual(x)

    def jprod_residual(self, x: np.ndarray, v: np.ndarray) -> np.ndarray:
        """Computes the product of the residual's Jacobian with a vector."""
        self.counters.increment("neval_jprod_residual")
        return np.asarray(self._jac_residual(x) @ v)

    def jtprod_residual(self, x: np.ndarray, w: np.ndarray) -> np.ndarray:
        """Computes the product of the transposed residual's Jacobian with a vector."""
        self.counters.increment("neval_jtprod_residual")
        return np.asarray(self._jac_residual(x).T @ w)

    def jac_op_residual(self, x: np.ndarray) -> sparse_linalg.LinearOperator:
        """Returns the Jacobian of the residual as a linear operator.

        The Jacobian is evaluated once, which counts as a Jacobian evaluation of the
        residual. Each application of the operator or its adjoint counts as a
        (transposed) Jacobian-vector product.

        Args:
            x: The point of evaluation.

        Returns:
            The Jacobian as :py:class:`scipy.sparse.linalg.LinearOperator`.

        """
        self.counters.increment("neval_jac_residual")
        jacobian = self._jac_residual(x)

        def matvec(v: np.ndarray) -> np.ndarray:
            self.counters.increment("neval_jprod_residual")
            return np.asarray(jacobian @ np.ravel(v))

        def rmatvec(w: np.ndarray) -> np.ndarray:
            self.counters.increment("neval_jtprod_residual")
            return np.asarray(jacobian.T @ np.ravel(w))

        return sparse_linalg.LinearOperator(
            (self.nequ, self.nvar), matvec=matvec, rmatvec=rmatvec, dtype=float
        )

    def _obj(self, x: np.ndarray) -> float:
        residual = self._residual(x)
        return 0.5 * float(np.dot(residual, residual))

    def _grad(self, x: np.ndarray) -> np.ndarray:
        return np.asarray(self._jac_residual(x).T @ self._residual(x))

    def _cons(self, x: np.ndarray) -> np.ndarray:
        return np.zeros(0)

    def _jac(self, x: np.ndarray) -> sparse.csr_matrix:
        return sparse.csr_matrix((0, self.nvar))

    def _hess(
        self, x: np.ndarray, y: np.ndarray, obj_weight: float
    ) -> sparse.csr_matrix:
        jacobian = self._jac_residual(x)
        gauss_newton = jacobian.T @ jacobian
        second_order = self.model._hess(x, self._residual(x), 0.0)
        return sparse.csr_matrix(obj_weight * (gauss_newton + second_order))

    def _jac_sparsity(self) -> tuple[np.ndarray, np.ndarray]:
        return np.zeros(0, dtype=np.int64), np.zeros(0, dtype=np.int64)

    def _hess_sparsity(self) -> tuple[np.ndarray, np.ndarray]:
        jac_rows, jac_cols = self.model.jac_structure()
        jacobian = sparse.csr_matrix(
            (np.ones(len(jac_rows)), (jac_rows, jac_cols)),
            shape=(self.nequ, self.nvar),
        )
        hess_rows, hess_cols = self.model.hess_structure()
        hessian = sparse.csr_matrix(
            (np.ones(len(hess_rows)), (hess_rows, hess_cols)),
            shape=(self.nvar, self.nvar),
        )
        pattern = sparse.tril(jacobian.T @ jacobian + hessian, format="coo")
        pattern.sum_duplicates()
        return pattern.row, pattern.col
