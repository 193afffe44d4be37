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

"""Exceptions raised by pdenlp."""

from __future__ import annotations


class PdeNlpException(Exception):
    """Base class for exceptions raised by pdenlp."""

    pass


class NotConvergedError(PdeNlpException):
    """This exception is raised when a solver result is not accepted as converged.

    pdenlp never raises this from within a solver run. It is only raised when a
    caller explicitly checks a result, e.g., with
    :py:func:`pdenlp.comparison.verify_convergence`.
    """

    def __init__(self, solver: str, message: str | None = None) -> None:
        """Initializes self.

        Args:
            solver: The solver which produced the result.
            message: A message indicating why the result is not accepted.

        """
        super().__init__()
        self.solver = solver
        self.message = message

    def __str__(self) -> str:
        """Returns the string representation of the exception."""
        main_msg = f"The {self.solver} failed to converge."
        post_msg = f"\n{self.message}" if self.message is not None else ""
        return main_msg + post_msg


class InputError(PdeNlpException):
    """This gets raised when the user input to a public API method is wrong."""

    def __init__(self, obj: str, param: str, message: str | None = None) -> None:
        """Initializes self.

        Args:
            obj: The object which raises the exception.
            param: The faulty input parameter.
            message: A message detailing what went wrong.

        """
        super().__init__()
        self.obj = obj
        self.param = param
        self.message = message

    def __str__(self) -> str:
        """Returns the string representation of the exception."""
        main_msg = (
            f"Not a valid input for object {self.obj}. "
            f"The faulty input is for the parameter {self.param}."
        )
        post_msg = f"\n{self.message}" if self.message is not None else ""
        return main_msg + post_msg


class ConfigError(PdeNlpException):
    """This exception gets raised when parameters in the config file are wrong."""

    pre_message = "You have some error(s) in your config file.\n"

    def __init__(self, config_errors: list[str]) -> None:
        """Initializes self.

        Args:
            config_errors: The list of errors that occurred while trying to validate
                the config.

        """
        super().__init__()
        self.config_errors = config_errors

    def __str__(self) -> str:
        """Returns the string representation of the exception."""
        except_str = f"{self.pre_message}"
        for error in self.config_errors:
            except_str += error
        return except_str
