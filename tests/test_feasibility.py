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
import numpy as np
import pytest

import pdenlp


def test_residual_view_does_not_touch_parent_counters(model, rng):
    nls = pdenlp.FeasibilityResidual(model)
    x = rng.rand(model.nvar)
    v = rng.rand(model.nvar)
    w = rng.rand(model.ncon)

    assert nls.nequ == model.ncon
    assert nls.nvar == model.nvar
    assert np.allclose(nls.residual(x), model.cons(x))
    model.reset()

    nls.jac_residual(x)
    nls.jprod_residual(x, v)
    nls.jtprod_residual(x, w)
    operator = nls.jac_op_residual(x)
    operator.matvec(v)
    operator.rmatvec(w)
    nls.obj(x)
    nls.grad(x)

    assert model.counters.total() == 0
    assert nls.counters.neval_residual == 1
    assert nls.counters.neval_jac_residual == 2
    assert nls.counters.neval_jprod_residual == 2
    assert nls.counters.neval_jtprod_residual == 2
    assert nls.counters.neval_obj == 1
    assert nls.counters.neval_grad == 1


def test_least_squares_derivatives(circle_model, rng):
    nls = pdenlp.FeasibilityResidual(circle_model)
    x = np.array([0.5, 2.0])

    residual = nls.residual(x)
    assert nls.obj(x) == pytest.approx(0.5 * residual[0] ** 2)
    assert np.allclose(nls.grad(x), nls.jac_residual(x).T @ residual)
    assert pdenlp.verification.gradient_test(nls, x, rng=rng) == pytest.approx(
        2.0, abs=0.15
    )


def test_feasibility_solve(model, config):
    initial_norm = np.linalg.norm(model.cons(model.meta.x0))
    stats = pdenlp.feasibility_solve(model, config=config)

    assert stats.solver == "feasibility"
    assert stats.solver_specific["initial_residual_norm"] == pytest.approx(
        initial_norm
    )
    assert stats.primal_feas <= initial_norm
    assert stats.primal_feas == pytest.approx(
        np.linalg.norm(model.cons(stats.solution)), abs=1e-12
    )
    assert stats.primal_feas < 1e-4
    assert stats.counters.neval_residual > 0
    assert stats.counters.neval_jac_residual == stats.solver_specific["njev"]
    assert stats.counters.neval_obj == 0


def test_feasibility_solve_is_repeatable(model, config, rng):
    x0 = rng.rand(model.nvar)
    initial_norm = np.linalg.norm(model.cons(x0))

    first = pdenlp.feasibility_solve(model, x0=x0, config=config)
    second = pdenlp.feasibility_solve(model, x0=x0, config=config)

    assert first.primal_feas <= initial_norm
    assert second.primal_feas <= initial_norm
    assert first.counters == second.counters
    assert np.allclose(first.solution, second.solution)


def test_feasibility_solve_does_not_count_objective(model, config):
    model.reset()
    pdenlp.feasibility_solve(model, config=config)

    assert model.counters.neval_obj == 0
    assert model.counters.neval_grad == 0
    assert model.counters.neval_cons == 0


def test_feasibility_on_nonlinear_constraint(circle_model):
    stats = pdenlp.feasibility_solve(circle_model, x0=np.array([2.0, 1.0]))

    assert stats.solver_specific["initial_residual_norm"] == pytest.approx(3.0)
    assert stats.primal_feas < 1e-6
    assert np.linalg.norm(stats.solution) == pytest.approx(np.sqrt(2.0))
