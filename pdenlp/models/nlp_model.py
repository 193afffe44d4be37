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

"""Abstract nonlinear programming models.

A model evaluates the objective, the constraints and their derivatives at points
given as numpy arrays. Every public evaluation increments the corresponding entry
of :py:attr:`NLPModel.counters`, whereas the private hooks implemented by
subclasses do not count.
"""

from __future__ import annotations

import abc

import numpy as np
from scipy import sparse
from scipy.sparse import linalg as sparse_linalg

from pdenlp.models import counters as counters_module
from pdenlp.models import meta as meta_module


class NLPModel(abc.ABC):
    """Base class for nonlinear programming models."""

    def __init__(self, meta: meta_module.NLPModelMeta) -> None:
        """Initializes self.

        Args:
            meta: The dimensions, bounds and initial guesses of the model.

        """
        self.meta = meta
        self.counters = counters_module.Counters()

        self._jac_pattern: tuple[np.ndarray, np.ndarray] | None = None
        self._hess_pattern: tuple[np.ndarray, np.ndarray] | None = None

    @property
    def nvar(self) -> int:
        """The number of variables."""
        return self.meta.nvar

    @property
    def ncon(self) -> int:
        """The number of constraints."""
        return self.meta.ncon

    @property
    def nnzj(self) -> int:
        """The number of nonzero entries of the constraint Jacobian."""
        return len(self.jac_structure()[0])

    @property
    def nnzh(self) -> int:
        """The number of nonzero entries in the lower triangle of the Hessian."""
        return len(self.hess_structure()[0])

    def reset(self) -> None:
        """Resets the evaluation counters.

        After a reset, counters read before must not be combined with the new
        ones, they refer to a different run.

        """
        self.counters.reset()

    @abc.abstractmethod
    def _obj(self, x: np.ndarray) -> float:
        pass

    @abc.abstractmethod
    def _grad(self, x: np.ndarray) -> np.ndarray:
        pass

    @abc.abstractmethod
    def _cons(self, x: np.ndarray) -> np.ndarray:
        pass

    @abc.abstractmethod
    def _jac(self, x: np.ndarray) -> sparse.csr_matrix:
        pass

    @abc.abstractmethod
    def _hess(
        self, x: np.ndarray, y: np.ndarray, obj_weight: float
    ) -> sparse.csr_matrix:
        pass

    @abc.abstractmethod
    def _jac_sparsity(self) -> tuple[np.ndarray, np.ndarray]:
        """Returns the rows and columns of all entries of the Jacobian.

        The pattern has to contain every entry which can be nonzero at any point,
        not only those which are nonzero at the initial guess.

        """
        pass

    @abc.abstractmethod
    def _hess_sparsity(self) -> tuple[np.ndarray, np.ndarray]:
        """Returns the rows and columns of the lower triangle of the Hessian.

        As for :py:meth:`_jac_sparsity`, the pattern has to be valid at all points
        and for all multipliers.

        """
        pass

    def obj(self, x: np.ndarray) -> float:
        """Evaluates the objective function.

        Args:
            x: The point of evaluation.

        Returns:
            The value of the objective.

        """
        self.counters.increment("neval_obj")
        return self._obj(x)

    def grad(self, x: np.ndarray) -> np.ndarray:
        """Evaluates the gradient of the objective function.

        Args:
            x: The point of evaluation.

        Returns:
            The gradient of the objective.

        """
        self.counters.increment("neval_grad")
        return self._grad(x)

    def cons(self, x: np.ndarray) -> np.ndarray:
        """Evaluates the constraint function.

        Args:
            x: The point of evaluation.

        Returns:
            The values of the constraints.

        """
        self.counters.increment("neval_cons")
        return self._cons(x)

    def jac(self, x: np.ndarray) -> sparse.csr_matrix:
        """Evaluates the Jacobian of the constraints.

        Args:
            x: The point of evaluation.

        Returns:
            The sparse Jacobian of shape ``(ncon, nvar)``.

        """
        self.counters.increment("neval_jac")
        return self._jac(x)

    def jac_structure(self) -> tuple[np.ndarray, np.ndarray]:
        """Returns the sparsity structure of the Jacobian in coordinate format.

        The structure is requested once from the model and then reused.

        Returns:
            A tuple (rows, cols) of the nonzero entries.

        """
        if self._jac_pattern is None:
            rows, cols = self._jac_sparsity()
            self._jac_pattern = (
                np.asarray(rows, dtype=np.int64),
                np.asarray(cols, dtype=np.int64),
            )

        return self._jac_pattern

    def jac_coord(self, x: np.ndarray) -> np.ndarray:
        """Evaluates the Jacobian at the entries of :py:meth:`jac_structure`.

        Args:
            x: The point of evaluation.

        Returns:
            The values of the Jacobian in coordinate format.

        """
        rows, cols = self.jac_structure()
        self.counters.increment("neval_jac")
        return np.asarray(self._jac(x)[rows, cols]).ravel()

    def jprod(self, x: np.ndarray, v: np.ndarray) -> np.ndarray:
        """Computes the Jacobian-vector product.

        Args:
            x: The point of evaluation.
            v: The direction, of size ``nvar``.

        Returns:
            The product ``J(x) v``.

        """
        self.counters.increment("neval_jprod")
        return np.asarray(self._jac(x) @ v)

    def jtprod(self, x: np.ndarray, w: np.ndarray) -> np.ndarray:
        """Computes the transposed Jacobian-vector product.

        Args:
            x: The point of evaluation.
            w: The vector, of size ``ncon``.

        Returns:
            The product ``J(x)^T w``.

        """
        self.counters.increment("neval_jtprod")
        return np.asarray(self._jac(x).T @ w)

    def jac_op(self, x: np.ndarray) -> sparse_linalg.LinearOperator:
        """Returns the Jacobian at x as a linear operator.

        The Jacobian is evaluated once, which counts as a Jacobian evaluation, and
        every application of the operator or of its adjoint counts as a
        Jacobian-vector product.

        Args:
            x: The point of evaluation.

        Returns:
            The Jacobian as :py:class:`scipy.sparse.linalg.LinearOperator`.

        """
        self.counters.increment("neval_jac")
        jacobian = self._jac(x)

        def matvec(v: np.ndarray) -> np.ndarray:
            self.counters.increment("neval_jprod")
            return np.asarray(jacobian @ np.ravel(v))

        def rmatvec(w: np.ndarray) -> np.ndarray:
            self.counters.increment("neval_jtprod")
            return np.asarray(jacobian.T @ np.ravel(w))

        return sparse_linalg.LinearOperator(
            (self.ncon, self.nvar), matvec=matvec, rmatvec=rmatvec, dtype=float
        )

    def hess(
        self, x: np.ndarray, y: np.ndarray | None = None, obj_weight: float = 1.0
    ) -> sparse.csr_matrix:
        r"""Evaluates the Hessian of the Lagrangian.

        The Lagrangian is :math:`\sigma f(x) + y^T c(x)`, where :math:`\sigma` is
        the objective weight.

        Args:
            x: The point of evaluation.
            y: The Lagrange multipliers. Defaults to zero.
            obj_weight: The weight of the objective. Defaults to 1.

        Returns:
            The (full, symmetric) sparse Hessian of shape ``(nvar, nvar)``.

        """
        if y is None:
            y = np.zeros(self.ncon)
        self.counters.increment("neval_hess")
        return self._hess(x, y, obj_weight)

    def hess_structure(self) -> tuple[np.ndarray, np.ndarray]:
        """Returns the structure of the lower triangle of the Lagrangian's Hessian.

        Returns:
            A tuple (rows, cols) of the nonzero entries.

        """
        if self._hess_pattern is None:
            rows, cols = self._hess_sparsity()
            self._hess_pattern = (
                np.asarray(rows, dtype=np.int64),
                np.asarray(cols, dtype=np.int64),
            )

        return self._hess_pattern

    def hess_coord(
        self, x: np.ndarray, y: np.ndarray | None = None, obj_weight: float = 1.0
    ) -> np.ndarray:
        """Evaluates the Hessian at the entries of :py:meth:`hess_structure`.

        Args:
            x: The point of evaluation.
            y: The Lagrange multipliers. Defaults to zero.
            obj_weight: The weight of the objective. Defaults to 1.

        Returns:
            The values of the lower triangle of the Hessian.

        """
        rows, cols = self.hess_structure()
        return np.asarray(self.hess(x, y, obj_weight)[rows, cols]).ravel()

    def hprod(
        self,
        x: np.ndarray,
        v: np.ndarray,
        y: np.ndarray | None = None,
        obj_weight: float = 1.0,
    ) -> np.ndarray:
        """Computes the product of the Lagrangian's Hessian with a vector.

        Args:
            x: The point of evaluation.
            v: The direction.
            y: The Lagrange multipliers. Defaults to zero.
            obj_weight: The weight of the objective. Defaults to 1.

        Returns:
            The Hessian-vector product.

        """
        if y is None:
            y = np.zeros(self.ncon)
        self.counters.increment("neval_hprod")
        return np.asarray(self._hess(x, y, obj_weight) @ v)

    def kkt_residuals(
        self, x: np.ndarray, y: np.ndarray, z: np.ndarray | None = None
    ) -> tuple[float, float]:
        r"""Computes the primal and dual feasibility at a primal-dual point.

        The primal feasibility is the maximal violation of the constraints and
        bounds, the dual feasibility is the maximum norm of
        :math:`\nabla f(x) + J(x)^T y - z`. The evaluations are not counted.

        Args:
            x: The primal point.
            y: The multipliers of the constraints.
            z: The multipliers of the bounds. Defaults to zero.

        Returns:
            A tuple (primal_feas, dual_feas).

        """
        violation = [
            np.maximum(self.meta.lvar - x, 0.0),
            np.maximum(x - self.meta.uvar, 0.0),
        ]
        if self.ncon > 0:
            c = self._cons(x)
            violation.append(np.maximum(self.meta.lcon - c, 0.0))
            violation.append(np.maximum(c - self.meta.ucon, 0.0))
        primal_feas = float(np.max(np.concatenate(violation), initial=0.0))

        dual_residual = self._grad(x)
        if self.ncon > 0:
            dual_residual = dual_residual + self._jac(x).T @ y
        if z is not None:
            dual_residual = dual_residual - z
        dual_feas = float(np.max(np.abs(dual_residual), initial=0.0))

        return primal_feas, dual_feas

    def __repr__(self) -> str:
        """Returns the string representation of the model."""
        return (
            f"{self.__class__.__name__}(name={self.meta.name!r}, "
            f"nvar={self.nvar}, ncon={self.ncon})"
        )
