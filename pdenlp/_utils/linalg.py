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

"""Linear algebra helper functions."""

from __future__ import annotations

import fenics
import numpy as np
from petsc4py import PETSc
from scipy import sparse

try:
    import ufl_legacy as ufl
    from ufl_legacy import algorithms as ufl_algorithms
except ImportError:
    import ufl
    from ufl import algorithms as ufl_algorithms


def expand_form(form: ufl.Form) -> ufl.Form | None:
    """Applies all derivatives of a form and drops it if nothing remains.

    Args:
        form: The UFL form, possibly containing (nested) Gateaux derivatives.

    Returns:
        The form with all derivatives evaluated, or ``None`` if every integral of
        the form vanishes identically.

    """
    expanded_form = ufl_algorithms.expand_derivatives(form)
    if expanded_form.empty():
        return None

    return expanded_form


def assemble_array(form: ufl.Form | None, size: int) -> np.ndarray:
    """Assembles a linear form into a numpy array.

    Args:
        form: The linear form. ``None`` represents a vanishing form.
        size: The size of the resulting array.

    Returns:
        The (local) values of the assembled vector.

    """
    if form is None:
        return np.zeros(size)

    vector = fenics.assemble(form)
    values: np.ndarray = vector.get_local()
    return values


def assemble_sparse(
    form: ufl.Form | None, shape: tuple[int, int]
) -> sparse.csr_matrix:
    """Assembles a bilinear form into a scipy sparse matrix.

    Args:
        form: The bilinear form. ``None`` represents a vanishing form.
        shape: The shape of the resulting matrix (test space, trial space).

    Returns:
        The assembled matrix in CSR format.

    """
    if form is None:
        return sparse.csr_matrix(shape)

    matrix = fenics.PETScMatrix()
    fenics.assemble(form, tensor=matrix)
    return petsc2scipy(matrix.mat(), shape)


def petsc2scipy(
    petsc_matrix: PETSc.Mat, shape: tuple[int, int]
) -> sparse.csr_matrix:
    """Converts a (sequential) PETSc matrix to a sparse scipy matrix.

    Args:
        petsc_matrix: The PETSc matrix.
        shape: The shape of the matrix.

    Returns:
        The corresponding sparse scipy csr matrix.

    """
    indptr, indices, values = petsc_matrix.getValuesCSR()
    return sparse.csr_matrix((values, indices, indptr), shape=shape)


def restrict(
    matrix: sparse.spmatrix,
    rows: np.ndarray | None = None,
    cols: np.ndarray | None = None,
) -> sparse.csr_matrix:
    """Extracts a submatrix.

    Args:
        matrix: The sparse matrix.
        rows: The rows to keep, all rows are kept if this is ``None``.
        cols: The columns to keep, all columns are kept if this is ``None``.

    Returns:
        The submatrix in CSR format.

    """
    result = sparse.csr_matrix(matrix)
    if rows is not None:
        result = result[rows, :]
    if cols is not None:
        result = sparse.csc_matrix(result)[:, cols]

    return sparse.csr_matrix(result)
