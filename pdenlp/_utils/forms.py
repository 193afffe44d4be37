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

"""Utilities for defining forms and boundary conditions."""

from __future__ import annotations

from typing import Any

import fenics

from pdenlp import _exceptions


def create_dirichlet_bcs(
    function_space: fenics.FunctionSpace,
    value: fenics.Constant | fenics.Expression | fenics.Function | float,
    boundaries: fenics.MeshFunction,
    idcs: list[int] | int,
    **kwargs: Any,
) -> list[fenics.DirichletBC]:
    """Create several Dirichlet boundary conditions at once.

    Wraps multiple Dirichlet boundary conditions into a list, in case
    they have the same value but are to be defined for multiple boundaries
    with different markers. Particularly useful for defining homogeneous
    boundary conditions.

    Args:
        function_space: The function space onto which the BCs should be imposed on.
        value: The value of the boundary condition. Has to be compatible with the
            function_space, so that it could also be used as
            ``fenics.DirichletBC(function_space, value, ...)``.
        boundaries: The :py:class:`fenics.MeshFunction` object representing the
            boundaries.
        idcs: A list of indices / boundary markers that determine the boundaries
            onto which the Dirichlet boundary conditions should be applied to.
            Can also be a single entry for a single boundary.
        **kwargs: Keyword arguments for fenics.DirichletBC

    Returns:
        A list of DirichletBC objects that represent the boundary conditions.

    Examples:
        Generate homogeneous Dirichlet boundary conditions for all 4 sides of
        the square (-1, 1)^2 ::

            import fenics
            import pdenlp

            mesh, _, boundaries, _, _, _ = pdenlp.regular_box_mesh(
                25, start_x=-1.0, start_y=-1.0
            )
            V = fenics.FunctionSpace(mesh, "CG", 2)
            bcs = pdenlp.create_dirichlet_bcs(
                V, fenics.Constant(0), boundaries, [1, 2, 3, 4]
            )

    """
    if isinstance(value, (int, float)):
        value = fenics.Constant(value)

    if not isinstance(idcs, list):
        idcs = [idcs]

    bcs_list = []
    for entry in idcs:
        if isinstance(entry, int):
            bcs_list.append(
                fenics.DirichletBC(function_space, value, boundaries, entry, **kwargs)
            )
        else:
            raise _exceptions.InputError(
                "pdenlp.create_dirichlet_bcs",
                "idcs",
                "The boundary markers have to be integers.",
            )

    return bcs_list


def number_of_free_dofs(
    function_space: fenics.FunctionSpace,
    bcs: fenics.DirichletBC | list[fenics.DirichletBC] | None,
) -> int:
    """Counts the degrees of freedom which are not fixed by Dirichlet conditions.

    Degrees of freedom shared by several boundary conditions, e.g., at the corners
    of a rectangle, are counted only once.

    Args:
        function_space: The function space of the state variable.
        bcs: The Dirichlet boundary conditions imposed on the function space.

    Returns:
        The number of free degrees of freedom.

    """
    if bcs is None:
        bcs = []
    elif not isinstance(bcs, list):
        bcs = [bcs]

    fixed_dofs = {dof for bc in bcs for dof in bc.get_boundary_values().keys()}
    return int(function_space.dim() - len(fixed_dofs))
