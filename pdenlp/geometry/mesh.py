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

"""Basic mesh generation."""

from __future__ import annotations

import functools
from typing import Any, Callable, TYPE_CHECKING

import fenics
from mpi4py import MPI
import numpy as np
from typing_extensions import Literal

from pdenlp import _exceptions
from pdenlp import log
from pdenlp import mpi

if TYPE_CHECKING:
    from pdenlp import _typing


def _get_mesh_stats(
    func: Callable[..., _typing.MeshTuple],
) -> Callable[..., _typing.MeshTuple]:
    """A decorator for mesh generating functions which logs stats.

    Args:
        func: The function to be decorated.

    Returns:
        The decorated function

    """

    @functools.wraps(func)
    def wrapper_stats(*args: Any, **kwargs: Any) -> _typing.MeshTuple:
        """Wrapper function for mesh generating functions.

        Args:
            *args: The arguments for the function.
            **kwargs: The keyword arguments for the function.

        Returns:
            The wrapped function.

        """
        comm = kwargs.get("comm", None)
        if comm is None:
            for arg in args:
                if isinstance(arg, MPI.Comm):
                    comm = arg
        if comm is None:
            comm = mpi.COMM_WORLD

        log.begin("Generating mesh.", level=log.INFO)

        try:
            value = func(*args, **kwargs)
        except _exceptions.InputError:
            log.end()
            raise
        dim = value[0].geometry().dim()

        log.info(
            f"Successfully generated {dim}-dimensional mesh on {comm.size} CPU(s)."
        )
        log.info(
            f"Mesh contains {value[0].num_entities_global(0):,} vertices and "
            f"{value[0].num_entities_global(dim):,} cells of type "
            f"{value[0].ufl_cell().cellname()}."
        )
        log.end()
        return value

    return wrapper_stats


@_get_mesh_stats
def regular_box_mesh(
    n: int = 10,
    start_x: float = 0.0,
    start_y: float = 0.0,
    end_x: float = 1.0,
    end_y: float = 1.0,
    diagonal: Literal["right", "left", "left/right", "right/left", "crossed"] = "right",
    comm: MPI.Comm | None = None,
) -> _typing.MeshTuple:
    r"""Creates a uniform triangular mesh of a rectangle.

    The resulting domain is :math:`[start_x, end_x] \times [start_y, end_y]`, which
    is discretized with ``n`` cells along the shorter side and accordingly many
    along the longer one. The boundary markers are ordered as follows:

      - 1 corresponds to :math:`x=start_x`.

      - 2 corresponds to :math:`x=end_x`.

      - 3 corresponds to :math:`y=start_y`.

      - 4 corresponds to :math:`y=end_y`.

    Args:
        n: Number of elements in the shortest coordinate direction.
        start_x: Start of the x-interval.
        start_y: Start of the y-interval.
        end_x: End of the x-interval.
        end_y: End of the y-interval.
        diagonal: This defines the type of diagonal used to create the mesh.
            This can be one of ``"right"``, ``"left"``, ``"left/right"``,
            ``"right/left"`` or ``"crossed"``.
        comm: MPI communicator that is to be used for creating the mesh.

    Returns:
        A tuple (mesh, subdomains, boundaries, dx, ds, dS), where mesh is the
        generated FEM mesh, subdomains is a mesh function for the subdomains,
        boundaries is a mesh function for the boundaries, dx is a volume measure, ds
        is a surface measure, and dS is a measure for the interior facets.

    """
    if int(n) < 1:
        raise _exceptions.InputError(
            "pdenlp.geometry.regular_box_mesh",
            "n",
            "The number of elements has to be positive.",
        )
    n = int(n)

    if comm is None:
        comm = mpi.COMM_WORLD

    sizes = [end_x - start_x, end_y - start_y]
    for size in sizes:
        if size <= 0:
            raise _exceptions.InputError(
                "pdenlp.geometry.regular_box_mesh",
                "start_",
                "The start values have to be smaller than the end values.",
            )

    size_min = np.min(sizes)
    num_points = [int(np.round(length / size_min * n)) for length in sizes]

    mesh = fenics.RectangleMesh(
        comm,
        fenics.Point(start_x, start_y),
        fenics.Point(end_x, end_y),
        num_points[0],
        num_points[1],
        diagonal=diagonal,
    )

    subdomains = fenics.MeshFunction("size_t", mesh, dim=2)
    boundaries = fenics.MeshFunction("size_t", mesh, dim=1)

    x_min = fenics.CompiledSubDomain(
        "on_boundary && near(x[0], sx, tol)", tol=fenics.DOLFIN_EPS, sx=start_x
    )
    x_max = fenics.CompiledSubDomain(
        "on_boundary && near(x[0], ex, tol)", tol=fenics.DOLFIN_EPS, ex=end_x
    )
    x_min.mark(boundaries, 1)
    x_max.mark(boundaries, 2)

    y_min = fenics.CompiledSubDomain(
        "on_boundary && near(x[1], sy, tol)", tol=fenics.DOLFIN_EPS, sy=start_y
    )
    y_max = fenics.CompiledSubDomain(
        "on_boundary && near(x[1], ey, tol)", tol=fenics.DOLFIN_EPS, ey=end_y
    )
    y_min.mark(boundaries, 3)
    y_max.mark(boundaries, 4)

    dx = fenics.Measure("dx", mesh, subdomain_data=subdomains)
    ds = fenics.Measure("ds", mesh, subdomain_data=boundaries)
    d_interior_facet = fenics.Measure("dS", mesh)

    return mesh, subdomains, boundaries, dx, ds, d_interior_facet


def regular_mesh(
    n: int = 10,
    length_x: float = 1.0,
    length_y: float = 1.0,
    diagonal: Literal["right", "left", "left/right", "right/left", "crossed"] = "right",
    comm: MPI.Comm | None = None,
) -> _typing.MeshTuple:
    r"""Creates a mesh corresponding to the rectangle :math:`[0, L_x] \times [0, L_y]`.

    See :py:func:`regular_box_mesh` for the boundary markers.

    Args:
        n: Number of elements in the shortest coordinate direction.
        length_x: Length in x-direction.
        length_y: Length in y-direction.
        diagonal: The type of diagonal used to create the mesh.
        comm: MPI communicator that is to be used for creating the mesh.

    Returns:
        A tuple (mesh, subdomains, boundaries, dx, ds, dS).

    """
    return regular_box_mesh(
        n,
        start_x=0.0,
        start_y=0.0,
        end_x=length_x,
        end_y=length_y,
        diagonal=diagonal,
        comm=comm,
    )
