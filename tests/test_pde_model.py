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
from fenics import *
import numpy as np
import pytest

import pdenlp
from pdenlp._exceptions import InputError


@pytest.fixture
def geometry():
    mesh, _, boundaries, dx, _, _ = pdenlp.regular_mesh(4)
    return mesh, boundaries, dx


@pytest.fixture
def spaces(geometry):
    mesh, _, _ = geometry
    return FunctionSpace(mesh, "CG", 2), FunctionSpace(mesh, "CG", 1)


@pytest.fixture
def bcs(spaces, geometry):
    return pdenlp.create_dirichlet_bcs(
        spaces[0], Constant(0.0), geometry[1], [1, 2, 3, 4]
    )


@pytest.fixture
def forms(geometry):
    dx = geometry[2]

    def cost(y, u):
        return Constant(0.5) * (y - 1.0) * (y - 1.0) * dx + Constant(0.5) * u * u * dx

    def residual(y, u, v):
        return dot(grad(y), grad(v)) * dx - u * v * dx

    return cost, residual


@pytest.mark.parametrize("n", [2, 4, 8])
def test_number_of_variables(config, n):
    config.set("Discretization", "n", str(n))
    model = pdenlp.poisson_control_model(config)

    assert model.nvar == model.npde + model.ncontrol
    assert model.npde == (2 * n - 1) ** 2
    assert model.ncontrol == (n + 1) ** 2
    assert model.ncon == model.npde
    assert np.all(model.meta.lcon == 0.0)
    assert np.all(model.meta.ucon == 0.0)
    assert not model.meta.has_bounds


def test_literal_scenario():
    model = pdenlp.poisson_control_model()

    assert model.nvar == 49802
    assert model.ncon == 39601
    assert model.meta.name == "Control elastic membrane"
    assert np.all(model.meta.x0 == 0.0)


def test_initial_guess_size_mismatch(spaces, bcs, forms):
    cost, residual = forms
    state_space, control_space = spaces
    nvar = 7 ** 2 + 5 ** 2

    with pytest.raises(InputError, match="The initial guess has 10 entries"):
        pdenlp.PDENLPModel(
            np.zeros(10), cost, residual, state_space, control_space, bcs
        )

    model = pdenlp.PDENLPModel(
        np.zeros(nvar), cost, residual, state_space, control_space, bcs
    )
    assert model.nvar == nvar


def test_initial_guess_sized_from_all_boundaries(spaces, bcs, forms):
    cost, residual = forms
    state_space, control_space = spaces

    num_state = pdenlp.number_of_free_dofs(state_space, bcs)
    x0 = np.zeros(num_state + control_space.dim())
    model = pdenlp.PDENLPModel(x0, cost, residual, state_space, control_space, bcs)

    assert len(bcs) == 4
    assert model.npde == num_state == 7 ** 2
    assert model.nvar == x0.size


def test_invalid_callables(spaces, bcs, forms):
    cost, residual = forms
    state_space, control_space = spaces
    x0 = np.zeros(7 ** 2 + 5 ** 2)

    with pytest.raises(InputError):
        pdenlp.PDENLPModel(x0, residual, residual, state_space, control_space, bcs)
    with pytest.raises(InputError, match="cost has to return a UFL form"):
        pdenlp.PDENLPModel(
            x0, lambda y, u: 1.0, residual, state_space, control_space, bcs
        )


def test_counters(model, rng):
    x = rng.rand(model.nvar)
    y = rng.rand(model.ncon)
    v = rng.rand(model.nvar)

    model.obj(x)
    model.obj(x)
    model.grad(x)
    model.cons(x)
    model.jac(x)
    model.jac_coord(x)
    model.jprod(x, v)
    model.jtprod(x, y)
    model.hess(x, y)
    model.hess_coord(x, y)
    model.hprod(x, v, y)

    counters = model.counters
    assert counters.neval_obj == 2
    assert counters.neval_grad == 1
    assert counters.neval_cons == 1
    assert counters.neval_jac == 2
    assert counters.neval_jprod == 1
    assert counters.neval_jtprod == 1
    assert counters.neval_hess == 2
    assert counters.neval_hprod == 1
    assert counters.total() == 11

    jacobian = model.jac_op(x)
    jacobian.matvec(v)
    jacobian.rmatvec(y)
    assert model.counters.neval_jac == 3
    assert model.counters.neval_jprod == 2
    assert model.counters.neval_jtprod == 2

    model.reset()
    assert model.counters.total() == 0
    assert model.counters == pdenlp.models.Counters()


def test_kkt_residuals_do_not_count(model, rng):
    model.kkt_residuals(rng.rand(model.nvar), rng.rand(model.ncon))
    assert model.counters.total() == 0


def test_constraints_are_affine(model, rng):
    x = rng.rand(model.nvar)
    c0 = model.cons(np.zeros(model.nvar))

    assert np.allclose(model.cons(x), model.jac(x) @ x + c0)
    assert np.allclose(model.jprod(x, x), model.jac(x) @ x)
    assert model.jac(x).shape == (model.ncon, model.nvar)


def test_jacobian_coordinates(model, rng):
    x = rng.rand(model.nvar)
    rows, cols = model.jac_structure()
    values = model.jac_coord(x)

    jacobian = model.jac(x).toarray()
    assert np.allclose(values, jacobian[rows, cols])
    assert model.nnzj == len(rows)


def test_hessian(model, rng):
    x = rng.rand(model.nvar)
    y = rng.rand(model.ncon)

    hessian = model.hess(x, y)
    assert hessian.shape == (model.nvar, model.nvar)
    assert abs(hessian - hessian.T).max() < 1e-14
    # the constraints are linear, so the multipliers do not enter
    assert abs(hessian - model.hess(x)).max() < 1e-14
    assert abs(model.hess(x, y, obj_weight=0.0)).max() < 1e-14

    rows, cols = model.hess_structure()
    assert np.all(rows >= cols)
    assert np.allclose(model.hess_coord(x, y), hessian.toarray()[rows, cols])

    v = rng.rand(model.nvar)
    assert np.allclose(model.hprod(x, v, y), hessian @ v)


def test_vanishing_derivative_blocks(model):
    assert model.hess_state_control_form is None
    assert model.jac_control_form is not None


def test_gradient_taylor_test(model, rng):
    x = rng.rand(model.nvar)
    assert pdenlp.verification.gradient_test(model, x, rng=rng) == pytest.approx(
        2.0, abs=0.15
    )
    assert model.counters.total() == 0


def test_gradient_matches_finite_differences(model, rng):
    x = rng.rand(model.nvar)
    h = rng.rand(model.nvar)
    eps = 1e-6

    finite_difference = (model.obj(x + eps * h) - model.obj(x - eps * h)) / (2 * eps)
    assert np.dot(model.grad(x), h) == pytest.approx(finite_difference, rel=1e-6)


def test_jacobian_taylor_test(circle_model, rng):
    x = np.array([0.3, -1.2])
    assert pdenlp.verification.jacobian_test(
        circle_model, x, rng=rng
    ) == pytest.approx(2.0, abs=0.15)


def test_kkt_residuals(circle_model):
    primal_feas, dual_feas = circle_model.kkt_residuals(
        np.array([-1.0, -1.0]), np.array([0.5])
    )
    assert primal_feas == pytest.approx(0.0, abs=1e-14)
    assert dual_feas == pytest.approx(0.0, abs=1e-14)

    primal_feas, dual_feas = circle_model.kkt_residuals(
        np.array([1.0, 0.0]), np.array([0.0])
    )
    assert primal_feas == pytest.approx(1.0)
    assert dual_feas == pytest.approx(1.0)


def test_state_and_control(model, rng):
    x = rng.rand(model.nvar)
    state, control = model.state_and_control(x)

    state_values = state.vector().get_local()
    assert np.allclose(state_values[model.dirichlet_dofs], 0.0)
    assert np.allclose(state_values[model.free_dofs], x[: model.npde])
    assert np.allclose(control.vector().get_local(), x[model.npde :])

    model.obj(np.zeros(model.nvar))
    assert np.allclose(control.vector().get_local(), x[model.npde :])
    assert np.allclose(model.control.vector().get_local(), 0.0)
