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

"""Helper functions."""

from __future__ import annotations

import inspect
from typing import Any, Callable, TypeVar

from pdenlp import _exceptions

T = TypeVar("T")


def enlist(arg: list[T] | T) -> list[T]:
    """Wraps the input argument into a list, if it isn't a list already.

    Args:
        arg: The input argument, which is to wrapped into a list.

    Returns:
        The object wrapped into a list.

    """
    if isinstance(arg, list):
        return arg
    else:
        return [arg]


def number_of_arguments(function: Callable[..., Any]) -> int:
    """Computes the number of arguments that a function has.

    Args:
        function: The function which is analyzed.

    Returns:
        The number of arguments of the function.

    """
    sig = inspect.signature(function)
    return len(sig.parameters)


def check_callable_arity(
    function: Callable[..., Any], arity: int, obj: str, param: str
) -> None:
    """Ensures that a user supplied callable accepts the expected arguments.

    Args:
        function: The callable supplied by the user.
        arity: The number of positional arguments it is called with.
        obj: The object which checks the input, used for error messages.
        param: The name of the parameter, used for error messages.

    """
    if not callable(function):
        raise _exceptions.InputError(obj, param, f"{param} has to be callable.")

    num_args = number_of_arguments(function)
    if num_args != arity:
        raise _exceptions.InputError(
            obj,
            param,
            f"{param} has to take exactly {arity} arguments, "
            f"but it takes {num_args}.",
        )
