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

r"""Distributed control of the Poisson equation.

The problem reads

.. math::
    \begin{aligned}
        \min_{y, u} \quad & \frac{1}{2} \int_\Omega \lvert y - y_d \rvert^2 \text{ d}x
        + \frac{\alpha}{2} \int_\Omega \lvert u \rvert^2 \text{ d}x \\
        \text{s.t.} \quad & -\Delta y = h + u \quad \text{in } \Omega, \\
        & y = 0 \quad \text{on } \partial\Omega,
    \end{aligned}

with :math:`y_d(x) = -x_1^2` and the force term
:math:`h(x) = -\sin(\omega x_1) \sin(\omega x_2)`. By default,
:math:`\Omega = (-1, 1)^2`, :math:`\alpha = 10^{-2}` and
:math:`\omega = \pi - 1/8`.
"""

from __future__ import annotations

import fenics
import numpy as np

try:
    import ufl_legacy as ufl
except ImportError:
    import ufl

from pdenlp import io
from pdenlp import log
from pdenlp._utils import forms as forms_module
from pdenlp.geometry import mesh as mesh_module
from pdenlp.models import pde_model


def poisson_control_model(config: io.Config | None = None) -> pde_model.PDENLPModel:
    """Builds the discretized Poisson control problem.

    The state is discretized with Lagrange elements of degree
    ``[Discretization] state_degree`` and homogeneous Dirichlet conditions on the
    whole boundary, the control with Lagrange elements of degree
    ``[Discretization] control_degree`` without boundary conditions. The initial
    guess is zero.

    Args:
        config: The configuration. If this is ``None``, the default configuration
            is used.

    Returns:
        The model of the problem.

    """
    if config is None:
        config = io.Config()
    config.validate_config()

    n = config.getint("Discretization", "n")
    state_degree = config.getint("Discretization", "state_degree")
    control_degree = config.getint("Discretization", "control_degree")
    quadrature_degree = config.getint("Discretization", "quadrature_degree")
    alpha = config.getfloat("Problem", "alpha")
    omega = config.getfloat("Problem", "omega")

    log.begin("Setting up the Poisson control problem.", level=log.INFO)
    mesh, _, boundaries, _, _, _ = mesh_module.regular_box_mesh(
        n,
        start_x=config.getfloat("Discretization", "start_x"),
        start_y=config.getfloat("Discretization", "start_y"),
        end_x=config.getfloat("Discretization", "end_x"),
        end_y=config.getfloat("Discretization", "end_y"),
        diagonal=config.get("Discretization", "diagonal"),
    )
    dx = fenics.Measure(
        "dx", mesh, metadata={"quadrature_degree": quadrature_degree}
    )

    state_space = fenics.FunctionSpace(mesh, "CG", state_degree)
    control_space = fenics.FunctionSpace(mesh, "CG", control_degree)
    bcs = forms_module.create_dirichlet_bcs(
        state_space, fenics.Constant(0.0), boundaries, [1, 2, 3, 4]
    )

    x = fenics.SpatialCoordinate(mesh)
    y_d = -x[0] ** 2
    h = -fenics.sin(omega * x[0]) * fenics.sin(omega * x[1])

    def cost(y: fenics.Function, u: fenics.Function) -> ufl.Form:
        return (
            fenics.Constant(0.5) * (y_d - y) * (y_d - y) * dx
            + fenics.Constant(0.5 * alpha) * u * u * dx
        )

    def residual(
        y: fenics.Function, u: fenics.Function, v: fenics.Function
    ) -> ufl.Form:
        return fenics.dot(fenics.grad(v), fenics.grad(y)) * dx - v * u * dx - v * h * dx

    num_state_free = forms_module.number_of_free_dofs(state_space, bcs)
    x0 = np.zeros(num_state_free + control_space.dim())

    model = pde_model.PDENLPModel(
        x0,
        cost,
        residual,
        state_space,
        control_space,
        bcs,
        name=config.get("Problem", "name"),
    )
    log.end()

    return model
