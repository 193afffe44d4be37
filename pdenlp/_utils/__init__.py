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

"""Utility and helper functions.

This module includes utility and helper functions used in pdenlp. Some of them are
part of the public API, as they shorten often recurring actions when setting up
a model.
"""

from pdenlp._utils.forms import create_dirichlet_bcs
from pdenlp._utils.forms import number_of_free_dofs
from pdenlp._utils.helpers import check_callable_arity
from pdenlp._utils.helpers import enlist
from pdenlp._utils.helpers import number_of_arguments
from pdenlp._utils.linalg import assemble_array
from pdenlp._utils.linalg import assemble_sparse
from pdenlp._utils.linalg import expand_form
from pdenlp._utils.linalg import petsc2scipy
from pdenlp._utils.linalg import restrict

__all__ = [
    "create_dirichlet_bcs",
    "number_of_free_dofs",
    "check_callable_arity",
    "enlist",
    "number_of_arguments",
    "assemble_array",
    "assemble_sparse",
    "expand_form",
    "petsc2scipy",
    "restrict",
]
