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

"""Management of pdenlp output."""

from __future__ import annotations

from datetime import datetime as dt
import json
import pathlib
from typing import TYPE_CHECKING

import fenics

from pdenlp import log

if TYPE_CHECKING:
    from pdenlp import comparison as comparison_module
    from pdenlp.io import config as config_module
    from pdenlp.models import pde_model
    from pdenlp.solvers import stats as stats_module


class OutputManager:
    """Writes the results of an experiment to files."""

    def __init__(self, config: config_module.Config) -> None:
        """Initializes self.

        Args:
            config: The configuration, its ``[Output]`` section is used.

        """
        self.config = config
        self.result_dir = self.config.get("Output", "result_dir")
        self.result_dir = self.result_dir.rstrip("/")

        self.time_suffix = self.config.getboolean("Output", "time_suffix")
        if self.time_suffix:
            dt_current_time = dt.now()
            self.suffix = (
                f"{dt_current_time.year}_{dt_current_time.month}_"
                f"{dt_current_time.day}_{dt_current_time.hour}_"
                f"{dt_current_time.minute}_{dt_current_time.second}"
            )
            self.result_dir = f"{self.result_dir}_{self.suffix}"

        self.result_path = pathlib.Path(self.result_dir)
        self.checkpoints_path = self.result_path / "checkpoints"

        self.save_results = self.config.getboolean("Output", "save_results")
        self.save_solution = self.config.getboolean("Output", "save_solution")

        if not self.result_path.is_dir() and (self.save_results or self.save_solution):
            self.result_path.mkdir(parents=True, exist_ok=True)
        if not self.checkpoints_path.is_dir() and self.save_solution:
            self.checkpoints_path.mkdir(parents=True, exist_ok=True)

    def write_comparison(
        self,
        comparison: comparison_module.Comparison,
        feasibility: stats_module.ExecutionStats | None = None,
    ) -> None:
        """Saves the comparison and all statistics to ``comparison.json``.

        Args:
            comparison: The comparison of the solver runs.
            feasibility: The statistics of the feasibility initialization.

        """
        if not self.save_results:
            return

        output_dict = comparison.to_dict()
        if feasibility is not None:
            output_dict["feasibility"] = feasibility.to_dict()

        filename = self.result_path / "comparison.json"
        with open(filename, "w", encoding="utf-8") as file:
            json.dump(output_dict, file, indent=4)
        log.debug(f"Saved the comparison to {filename}.")

    def write_solution(
        self, model: pde_model.PDENLPModel, record: stats_module.ExecutionStats
    ) -> None:
        """Saves the state and control of a solver run as XDMF checkpoints.

        Args:
            model: The model which was solved.
            record: The statistics of the run, containing the solution.

        """
        if not self.save_solution:
            return

        state, control = model.state_and_control(record.solution)
        for function, name in [(state, "state"), (control, "control")]:
            filename = str(self.checkpoints_path / f"{record.solver}_{name}.xdmf")
            write_checkpoint(filename, function, name)
            log.debug(f"Saved the {name} of {record.solver} to {filename}.")


def write_checkpoint(filename: str, function: fenics.Function, name: str) -> None:
    """Writes a function to an XDMF file so that it can be read again.

    Args:
        filename: The path to the .xdmf file.
        function: The function which is to be stored.
        name: The label of the function in the file.

    """
    function.rename(name, name)
    comm = function.function_space().mesh().mpi_comm()
    with fenics.XDMFFile(comm, filename) as file:
        file.parameters["flush_output"] = True
        file.parameters["functions_share_mesh"] = False
        file.write_checkpoint(
            function, name, 0, fenics.XDMFFile.Encoding.HDF5, False
        )


def read_checkpoint(
    filename: str, function_space: fenics.FunctionSpace, name: str, step: int = 0
) -> fenics.Function:
    """Reads a function written by :py:func:`write_checkpoint`.

    Args:
        filename: The path to the .xdmf file.
        function_space: The function space of the stored function.
        name: The label of the function in the file.
        step: The checkpoint number. Default is ``0``.

    Returns:
        The function stored in the file.

    """
    function = fenics.Function(function_space)
    comm = function_space.mesh().mpi_comm()
    with fenics.XDMFFile(comm, filename) as file:
        file.read_checkpoint(function, name, step)

    return function
