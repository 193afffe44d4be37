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

"""Solver comparison from the command line."""

from __future__ import annotations

import argparse

from pdenlp import comparison
from pdenlp import io
from pdenlp import log
from pdenlp import mpi
from pdenlp import workflow


def _generate_parser() -> argparse.ArgumentParser:
    """Returns a parser for command line arguments."""
    parser = argparse.ArgumentParser(
        prog="pdenlp-compare",
        description="Solve the distributed Poisson control problem with several "
        "solvers and compare their results.",
    )
    parser.add_argument(
        "config",
        type=str,
        nargs="?",
        default=None,
        help="Path to a .ini config file. If this is not given, the default "
        "configuration is used.",
    )
    parser.add_argument(
        "-n",
        type=int,
        default=None,
        metavar="n",
        help="Number of cells in each coordinate direction. "
        "Overrides [Discretization] n.",
    )
    parser.add_argument(
        "-s",
        "--solvers",
        nargs="+",
        default=None,
        metavar="solver",
        help="The solvers which are compared, e.g., 'ipopt sqp'. "
        "Overrides [Solvers] backends.",
    )
    parser.add_argument(
        "-t",
        "--tol",
        type=float,
        default=None,
        metavar="tol",
        help="The convergence tolerance of the solvers. Overrides [Solvers] tol.",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default=None,
        metavar="result_dir",
        help="Directory where the comparison is saved as comparison.json.",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Whether or not to show information on stdout.",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 if a solver did not converge or the objectives "
        "of the solvers do not agree.",
    )
    parser.add_argument(
        "--rtol",
        type=float,
        default=None,
        metavar="rtol",
        help="Relative tolerance for the agreement of the objectives used with "
        "--strict. Overrides [Comparison] rtol.",
    )

    return parser


def _apply_arguments(config: io.Config, args: argparse.Namespace) -> None:
    """Overrides entries of the config by command line arguments."""
    if args.n is not None:
        config.set("Discretization", "n", str(args.n))
    if args.solvers is not None:
        backends = ", ".join(f'"{solver}"' for solver in args.solvers)
        config.set("Solvers", "backends", f"[{backends}]")
    if args.tol is not None:
        config.set("Solvers", "tol", str(args.tol))
    if args.output is not None:
        config.set("Output", "result_dir", args.output)
        config.set("Output", "save_results", "True")
    if args.rtol is not None:
        config.set("Comparison", "rtol", str(args.rtol))


def compare(argv: list[str] | None = None) -> int:
    """Runs the solver comparison and prints the comparison table.

    Args:
        argv: Command line options. The first (optional) parameter is the path to
            the config file.

    Returns:
        The exit status. This is 0 unless ``--strict`` is given and a solver did
        not converge or the solvers disagree.

    """
    parser = _generate_parser()
    args = parser.parse_args(argv)

    config = io.Config(args.config)
    _apply_arguments(config, args)

    # the table is printed below
    config.set("Output", "verbose", "False")
    if args.quiet:
        log.set_log_level(log.WARNING)

    result = workflow.run_experiment(config)

    if result.comparison is not None:
        table = result.comparison.format(config.getint("Output", "precision"))
    else:
        table = "\n".join(repr(record) for record in result.records)
    if not args.quiet and mpi.COMM_WORLD.rank == 0:
        print(table, flush=True)
    mpi.COMM_WORLD.barrier()

    if not args.strict:
        return 0

    primal_tol = config.getfloat("Comparison", "primal_tol")
    dual_tol = config.getfloat("Comparison", "dual_tol")
    failed = [
        record.solver
        for record in result.records
        if not record.is_converged(primal_tol, dual_tol)
    ]
    if failed:
        log.error(f"The following solvers did not converge: {', '.join(failed)}.")
        return 1
    if len(result.records) >= 2 and not comparison.check_agreement(
        result.records, config.getfloat("Comparison", "rtol")
    ):
        log.error("The objective values of the solvers do not agree.")
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(compare())
