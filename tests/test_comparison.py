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
from pdenlp._exceptions import InputError
from pdenlp._exceptions import NotConvergedError
from pdenlp.models import Counters


def make_record(solver, objective, elapsed_time, primal_feas=1e-8, status=None):
    counters = Counters()
    counters.increment("neval_obj", 10)
    counters.increment("neval_jac", 5)
    return pdenlp.ExecutionStats(
        solver,
        status or "first_order",
        np.zeros(3),
        objective=objective,
        primal_feas=primal_feas,
        dual_feas=1e-7,
        iterations=4,
        elapsed_time=elapsed_time,
        counters=counters,
    )


@pytest.fixture
def records():
    return [
        make_record("ipopt", 0.0567, 1.5),
        make_record("sqp", 0.0566, 0.25),
    ]


def test_comparison_needs_two_records(records):
    with pytest.raises(InputError, match="At least two records"):
        pdenlp.compare(records[:1])


def test_rows(records):
    comparison = pdenlp.compare(records)
    rows = comparison.rows

    assert [row["solver"] for row in rows] == ["ipopt", "sqp"]
    assert rows[0]["evaluations"] == 15
    assert rows[1]["elapsed_time"] == pytest.approx(0.25)
    assert comparison.fastest().solver == "sqp"


def test_objective_spread(records):
    comparison = pdenlp.compare(records)
    assert comparison.objective_spread() == pytest.approx(1e-4 / 0.0567)

    assert pdenlp.check_agreement(records, rtol=1e-2)
    assert not pdenlp.check_agreement(
        [records[0], make_record("sqp", 0.06, 1.0)], rtol=1e-2
    )
    assert not pdenlp.check_agreement(
        [records[0], make_record("sqp", np.nan, 1.0)], rtol=1e-2
    )


def test_comparison_does_not_modify_records(records):
    before = [record.to_dict() for record in records]
    comparison = pdenlp.compare(records)
    comparison.format()
    comparison.to_dict()

    assert [record.to_dict() for record in records] == before


def test_format(records):
    table = pdenlp.compare(records).format(precision=2)
    lines = table.split("\n")

    assert len(lines) == 4
    assert lines[0].startswith("Solver")
    assert set(lines[1]) == {"-"}
    assert lines[2].startswith("ipopt")
    assert "5.67e-02" in lines[2]
    assert "0.25" in lines[3]
    assert len({len(line) for line in lines}) == 1


def test_to_dict(records):
    output = pdenlp.compare(records).to_dict()

    assert output["fastest"] == "sqp"
    assert len(output["records"]) == 2
    assert output["records"][0]["counters"]["neval_obj"] == 10


def test_verify_convergence(records):
    pdenlp.verify_convergence(records[0], primal_tol=1e-4)

    record = make_record("sqp", 0.0566, 0.25, primal_feas=1e-2, status="max_iter")
    with pytest.raises(NotConvergedError, match="The sqp failed to converge."):
        pdenlp.verify_convergence(record, primal_tol=1e-4)
    with pytest.raises(NotConvergedError):
        pdenlp.verify_convergence(records[0], primal_tol=1e-4, dual_tol=1e-8)
