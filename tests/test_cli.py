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
import json
import subprocess

from mpi4py import MPI
import pytest

from pdenlp._cli import compare


@pytest.mark.skipif(
    MPI.COMM_WORLD.size > 1,
    reason="This test cannot be run in parallel.",
)
def test_compare_cli(dir_path, tmp_path, capsys):
    result_dir = tmp_path / "results"
    status = compare(
        [
            f"{dir_path}/config_pdenlp.ini",
            "-n",
            "4",
            "--tol",
            "1e-6",
            "-o",
            str(result_dir),
        ]
    )

    assert status == 0
    out = capsys.readouterr().out
    assert "ipopt" in out
    assert "sqp" in out
    assert out.split("\n")[0].startswith("Solver")

    with open(result_dir / "comparison.json", encoding="utf-8") as file:
        output = json.load(file)
    assert output["records"][0]["solver"] == "ipopt"


@pytest.mark.skipif(
    MPI.COMM_WORLD.size > 1,
    reason="This test cannot be run in parallel.",
)
def test_compare_cli_strict(dir_path, capsys):
    argv = [f"{dir_path}/config_pdenlp.ini", "-n", "4", "-q", "--strict"]
    assert compare(argv) == 0
    assert capsys.readouterr().out == ""

    assert compare(argv + ["--solvers", "ipopt"]) == 0
    assert compare(argv + ["--rtol", "1e-14"]) == 1


@pytest.mark.skipif(
    MPI.COMM_WORLD.size > 1,
    reason="This test cannot be run in parallel.",
)
def test_compare_cli_script(dir_path):
    subprocess.run(
        ["pdenlp-compare", f"{dir_path}/config_pdenlp.ini", "-n", "2", "-q"],
        check=True,
    )
