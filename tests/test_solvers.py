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
import importlib
import json

import fenics
import numpy as np
import pytest

import pdenlp


@pytest.fixture
def x0(model, config):
    return pdenlp.feasibility_solve(model, config=config).solution


@pytest.mark.parametrize("solver", ["ipopt", "sqp"])
def test_solver_converges(model, config, x0, solver):
    stats = pdenlp.solve(model, solver, x0=x0, tol=1e-5, config=config)

    assert stats.solver == solver
    assert stats.success
    assert stats.status == "first_order"
    assert stats.primal_feas < 1e-4
    assert stats.dual_feas < 1e-3
    assert stats.is_converged(1e-4)
    assert stats.iterations > 0
    assert stats.elapsed_time > 0.0
    assert stats.multipliers.shape == (model.ncon,)


def test_solvers_agree(model, config, x0):
    records = [
        pdenlp.solve(model, solver, x0=x0, tol=1e-5, config=config)
        for solver in ["ipopt", "sqp"]
    ]

    assert records[0].objective == pytest.approx(records[1].objective, rel=1e-2)
    assert pdenlp.check_agreement(records, rtol=1e-2)


@pytest.mark.parametrize("solver", ["ipopt", "sqp"])
def test_counter_isolation(model, config, x0, solver):
    first = pdenlp.solve(model, solver, x0=x0, config=config)
    for _ in range(3):
        model.obj(x0)
        model.jac(x0)
    second = pdenlp.solve(model, solver, x0=x0, config=config)

    assert first.counters == second.counters
    assert model.counters == second.counters
    assert first.counters.total() > 0


def test_counter_isolation_across_solvers(model, config, x0):
    fresh = pdenlp.solve(model, "sqp", x0=x0, config=config)
    pdenlp.solve(model, "ipopt", x0=x0, config=config)
    after_ipopt = pdenlp.solve(model, "sqp", x0=x0, config=config)

    assert after_ipopt.counters == fresh.counters
    assert model.counters == fresh.counters


def test_sqp_relative_tolerance_does_not_count(circle_model, config):
    reference = pdenlp.solve(circle_model, "sqp", tol=1e-8, config=config)
    config.set("SQP", "rtol", "1e-300")
    stats = pdenlp.solve(circle_model, "sqp", tol=1e-8, config=config)

    assert stats.solver_specific["gtol"] == reference.solver_specific["gtol"]
    assert stats.counters == reference.counters


def test_solver_aliases(circle_model):
    stats = pdenlp.solve(circle_model, "interior_point")
    assert stats.solver == "ipopt"

    stats = pdenlp.solve(circle_model, "TRUST_CONSTR")
    assert stats.solver == "sqp"


@pytest.mark.parametrize("solver", ["ipopt", "sqp"])
def test_nonlinear_constraint(circle_model, solver):
    stats = pdenlp.solve(circle_model, solver, tol=1e-8)

    assert stats.success
    assert np.allclose(stats.solution, [-1.0, -1.0], atol=1e-6)
    assert stats.objective == pytest.approx(-2.0)
    assert abs(stats.multipliers[0]) == pytest.approx(0.5, abs=1e-6)


@pytest.mark.parametrize("solver", ["ipopt", "sqp"])
def test_non_convergence_is_reported(model, config, solver):
    config.set("Ipopt", "max_iter", "0")
    config.set("SQP", "max_iter", "1")
    config.set("SQP", "initial_tr_radius", "1e-3")

    stats = pdenlp.solve(model, solver, config=config)

    assert stats.status == "max_iter"
    assert not stats.success
    with pytest.raises(pdenlp._exceptions.NotConvergedError):
        pdenlp.verify_convergence(stats, primal_tol=1e-12, dual_tol=1e-12)


@pytest.mark.parametrize("verbose", [True, False])
def test_iteration_output(circle_model, config, caplog, verbose):
    config.set("Solvers", "verbose", str(verbose))
    with caplog.at_level(pdenlp.log.TRACE, logger="pdenlp"):
        pdenlp.solve(circle_model, "ipopt", config=config)

    if fenics.MPI.rank(fenics.MPI.comm_world) == 0:
        assert ("Iteration" in caplog.text) == verbose
        assert "ipopt finished with status first_order" in caplog.text
    fenics.MPI.barrier(fenics.MPI.comm_world)


def test_stats_are_read_only(circle_model):
    stats = pdenlp.solve(circle_model, "ipopt")

    assert not stats.solution.flags.writeable
    with pytest.raises(ValueError):
        stats.solution[0] = 0.0
    with pytest.raises(AttributeError):
        stats.objective = 0.0

    counters = stats.counters
    counters.reset()
    assert stats.counters.total() > 0

    output = json.loads(json.dumps(stats.to_dict()))
    assert output["solver"] == "ipopt"
    assert output["counters"]["neval_obj"] == stats.counters.neval_obj


def test_ipopt_with_vanishing_jacobian_entry_at_start(circle_model_on_axis):
    circle_model = circle_model_on_axis
    rows, cols = circle_model.jac_structure()
    assert list(zip(rows, cols)) == [(0, 0), (0, 1)]
    assert np.allclose(circle_model.jac_coord(np.array([0.5, -1.5])), [1.0, -3.0])

    stats = pdenlp.solve(circle_model, "ipopt", tol=1e-8)

    assert stats.success
    assert np.allclose(stats.solution, [-1.0, -1.0], atol=1e-6)


def test_feasible_point_is_not_success(circle_model):
    stats = pdenlp.solvers.ExecutionStats(
        "ipopt",
        importlib.import_module("pdenlp.solvers.ipopt")._status_names[6],
        circle_model.meta.x0,
        objective=0.0,
        primal_feas=0.0,
        dual_feas=1.0,
        iterations=1,
        elapsed_time=0.1,
        counters=circle_model.counters,
    )

    assert stats.status == "feasible_point"
    assert not stats.success
