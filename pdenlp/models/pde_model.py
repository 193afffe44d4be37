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

"""Nonlinear programming models of discretized PDE-constrained problems."""

from __future__ import annotations

from typing import TYPE_CHECKING

import fenics
import numpy as np
from scipy import sparse

try:
    import ufl_legacy as ufl
except ImportError:
    import ufl

from pdenlp import _exceptions
from pdenlp import _utils
from pdenlp import log
from pdenlp import mpi
from pdenlp.models import meta as meta_module
from pdenlp.models import nlp_model

if TYPE_CHECKING:
    from pdenlp import _typing


class PDENLPModel(nlp_model.NLPModel):
    r"""A PDE-constrained optimization problem discretized with finite elements.

    The problem reads

    .. math::
        \min_{y, u} J(y, u) \quad \text{s.t.} \quad e(y, u, v) = 0
        \quad \text{for all } v,

    where :math:`y` is the state, :math:`u` the control and :math:`e` the weak form
    of the PDE. After discretization, the vector of variables consists of the free
    (i.e. not Dirichlet constrained) degrees of freedom of the state, followed by
    all degrees of freedom of the control. The constraints are the rows of the
    discretized PDE corresponding to the free state degrees of freedom.
    """

    def __init__(
        self,
        x0: np.ndarray,
        cost: _typing.CostFunction,
        residual: _typing.ResidualFunction,
        state_space: fenics.FunctionSpace,
        control_space: fenics.FunctionSpace,
        bcs: fenics.DirichletBC | list[fenics.DirichletBC] | None = None,
        name: str = "Generic",
    ) -> None:
        """Initializes self.

        Args:
            x0: The initial guess, of size ``n_state_free + n_control``.
            cost: A callable ``cost(y, u)`` returning the UFL form of the objective.
            residual: A callable ``residual(y, u, v)`` returning the weak form of the
                PDE constraint, tested with ``v`` from the state space.
            state_space: The function space of the state variable.
            control_space: The function space of the control variable.
            bcs: The Dirichlet boundary conditions of the state. Their values are
                fixed and the constrained degrees of freedom are eliminated.
            name: The name of the model.

        """
        _utils.check_callable_arity(cost, 2, "pdenlp.PDENLPModel", "cost")
        _utils.check_callable_arity(residual, 3, "pdenlp.PDENLPModel", "residual")

        if not mpi.is_serial(state_space.mesh().mpi_comm()):
            raise _exceptions.InputError(
                "pdenlp.PDENLPModel",
                "state_space",
                "PDENLPModel only supports serial execution.",
            )

        self.state_space = state_space
        self.control_space = control_space
        self.bcs: list[fenics.DirichletBC] = (
            _utils.enlist(bcs) if bcs is not None else []
        )

        self.state_dim = self.state_space.dim()
        self.control_dim = self.control_space.dim()
        self.dirichlet_dofs, self.dirichlet_values = self._collect_dirichlet_dofs()
        self.free_dofs = np.setdiff1d(
            np.arange(self.state_dim, dtype=np.int64), self.dirichlet_dofs
        )
        self.npde = len(self.free_dofs)
        self.ncontrol = self.control_dim

        x0 = np.array(x0, dtype=float).ravel()
        if x0.size != self.npde + self.ncontrol:
            raise _exceptions.InputError(
                "pdenlp.PDENLPModel",
                "x0",
                f"The initial guess has {x0.size} entries, but the state and control "
                f"spaces have {self.npde} + {self.ncontrol} = "
                f"{self.npde + self.ncontrol} degrees of freedom.",
            )

        super().__init__(
            meta_module.NLPModelMeta(
                self.npde + self.ncontrol,
                x0=x0,
                ncon=self.npde,
                lcon=np.zeros(self.npde),
                ucon=np.zeros(self.npde),
                name=name,
            )
        )

        self.state = fenics.Function(self.state_space)
        self.control = fenics.Function(self.control_space)
        self.multiplier = fenics.Function(self.state_space)
        self.test_function = fenics.TestFunction(self.state_space)
        self.obj_weight = fenics.Constant(1.0)
        self._current_x: np.ndarray | None = None

        self.cost_form = cost(self.state, self.control)
        self.residual_form = residual(self.state, self.control, self.test_function)
        for form, param in [(self.cost_form, "cost"), (self.residual_form, "residual")]:
            if not isinstance(form, ufl.Form):
                raise _exceptions.InputError(
                    "pdenlp.PDENLPModel", param, f"{param} has to return a UFL form."
                )

        log.begin(f"Building the model {name}.", level=log.INFO)
        self._setup_derivative_forms(residual)

        log.info(
            f"Number of variables: {self.nvar:,} "
            f"({self.npde:,} state, {self.ncontrol:,} control)."
        )
        log.info(f"Number of constraints: {self.ncon:,}.")
        log.info(f"Nonzeros in the constraint Jacobian: {self.nnzj:,}.")
        log.end()

    def _collect_dirichlet_dofs(self) -> tuple[np.ndarray, np.ndarray]:
        """Collects the degrees of freedom fixed by the boundary conditions.

        Returns:
            A tuple (dofs, values) of the constrained degrees of freedom and their
            prescribed values.

        """
        boundary_values: dict[int, float] = {}
        for bc in self.bcs:
            boundary_values.update(bc.get_boundary_values())

        dofs = np.array(sorted(boundary_values.keys()), dtype=np.int64)
        values = np.array([boundary_values[dof] for dof in dofs], dtype=float)
        return dofs, values

    def _setup_derivative_forms(self, residual: _typing.ResidualFunction) -> None:
        """Derives the forms of all first and second derivatives.

        Args:
            residual: The callable defining the weak form of the PDE.

        """
        self.grad_state_form = _utils.expand_form(
            fenics.derivative(self.cost_form, self.state)
        )
        self.grad_control_form = _utils.expand_form(
            fenics.derivative(self.cost_form, self.control)
        )
        self.jac_state_form = _utils.expand_form(
            fenics.derivative(self.residual_form, self.state)
        )
        self.jac_control_form = _utils.expand_form(
            fenics.derivative(self.residual_form, self.control)
        )

        lagrangian = self.obj_weight * self.cost_form + residual(
            self.state, self.control, self.multiplier
        )
        lagrangian_state = fenics.derivative(lagrangian, self.state)
        lagrangian_control = fenics.derivative(lagrangian, self.control)
        self.hess_state_state_form = _utils.expand_form(
            fenics.derivative(lagrangian_state, self.state)
        )
        self.hess_state_control_form = _utils.expand_form(
            fenics.derivative(lagrangian_state, self.control)
        )
        self.hess_control_control_form = _utils.expand_form(
            fenics.derivative(lagrangian_control, self.control)
        )

    def _update(self, x: np.ndarray) -> None:
        """Writes the variables into the state and control functions.

        Args:
            x: The vector of variables.

        """
        x = np.asarray(x, dtype=float).ravel()
        if self._current_x is not None and np.array_equal(x, self._current_x):
            return

        state_values = np.zeros(self.state_dim)
        state_values[self.dirichlet_dofs] = self.dirichlet_values
        state_values[self.free_dofs] = x[: self.npde]
        self.state.vector().set_local(state_values)
        self.state.vector().apply("")

        self.control.vector().set_local(x[self.npde :])
        self.control.vector().apply("")

        self._current_x = x.copy()

    def _update_multiplier(self, y: np.ndarray, obj_weight: float) -> None:
        multiplier_values = np.zeros(self.state_dim)
        multiplier_values[self.free_dofs] = y
        self.multiplier.vector().set_local(multiplier_values)
        self.multiplier.vector().apply("")
        self.obj_weight.assign(float(obj_weight))

    def _obj(self, x: np.ndarray) -> float:
        self._update(x)
        return float(fenics.assemble(self.cost_form))

    def _grad(self, x: np.ndarray) -> np.ndarray:
        self._update(x)
        grad_state = _utils.assemble_array(self.grad_state_form, self.state_dim)
        grad_control = _utils.assemble_array(self.grad_control_form, self.control_dim)
        return np.concatenate([grad_state[self.free_dofs], grad_control])

    def _cons(self, x: np.ndarray) -> np.ndarray:
        self._update(x)
        residual = _utils.assemble_array(self.residual_form, self.state_dim)
        return residual[self.free_dofs]

    @log.profile_execution_time("assembling the constraint Jacobian")
    def _jac(self, x: np.ndarray) -> sparse.csr_matrix:
        self._update(x)
        jac_state = _utils.assemble_sparse(
            self.jac_state_form, (self.state_dim, self.state_dim)
        )
        jac_control = _utils.assemble_sparse(
            self.jac_control_form, (self.state_dim, self.control_dim)
        )
        return sparse.hstack(
            [
                _utils.restrict(jac_state, self.free_dofs, self.free_dofs),
                _utils.restrict(jac_control, self.free_dofs, None),
            ],
            format="csr",
        )

    @log.profile_execution_time("assembling the Hessian of the Lagrangian")
    def _hess(
        self, x: np.ndarray, y: np.ndarray, obj_weight: float
    ) -> sparse.csr_matrix:
        self._update(x)
        self._update_multiplier(y, obj_weight)

        hess_state_state = _utils.restrict(
            _utils.assemble_sparse(
                self.hess_state_state_form, (self.state_dim, self.state_dim)
            ),
            self.free_dofs,
            self.free_dofs,
        )
        hess_state_control = _utils.restrict(
            _utils.assemble_sparse(
                self.hess_state_control_form, (self.state_dim, self.control_dim)
            ),
            self.free_dofs,
            None,
        )
        hess_control_control = _utils.assemble_sparse(
            self.hess_control_control_form, (self.control_dim, self.control_dim)
        )

        return sparse.bmat(
            [
                [hess_state_state, hess_state_control],
                [hess_state_control.T, hess_control_control],
            ],
            format="csr",
        )

    def _jac_sparsity(self) -> tuple[np.ndarray, np.ndarray]:
        # PETSc keeps the structural zeros of the assembled forms
        jacobian = sparse.coo_matrix(self._jac(self.meta.x0))
        jacobian.sum_duplicates()
        return jacobian.row, jacobian.col

    def _hess_sparsity(self) -> tuple[np.ndarray, np.ndarray]:
        hessian = self._hess(self.meta.x0, np.ones(self.ncon), 1.0)
        lower = sparse.tril(hessian, format="coo")
        lower.sum_duplicates()
        return lower.row, lower.col

    def state_and_control(
        self, x: np.ndarray
    ) -> tuple[fenics.Function, fenics.Function]:
        """Creates the state and control functions corresponding to a point.

        Args:
            x: The vector of variables.

        Returns:
            A tuple (y, u) of new functions, with the Dirichlet values of the state
            reinserted.

        """
        self._update(x)
        state = fenics.Function(self.state_space)
        state.vector().vec().aypx(0.0, self.state.vector().vec())
        state.vector().apply("")
        control = fenics.Function(self.control_space)
        control.vector().vec().aypx(0.0, self.control.vector().vec())
        control.vector().apply("")

        return state, control
