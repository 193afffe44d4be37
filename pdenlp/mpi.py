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

"""MPI communicators used by pdenlp."""

from __future__ import annotations

from mpi4py import MPI

COMM_WORLD = MPI.COMM_WORLD
COMM_SELF = MPI.COMM_SELF


def is_serial(comm: MPI.Comm | None = None) -> bool:
    """Checks whether a communicator consists of a single process.

    Args:
        comm: The communicator. Defaults to ``COMM_WORLD``.

    Returns:
        ``True`` if only one process is attached to the communicator.

    """
    if comm is None:
        comm = COMM_WORLD

    return bool(comm.size == 1)
