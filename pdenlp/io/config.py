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

"""Management of configuration files."""

from __future__ import annotations

from configparser import ConfigParser
import json
import math
import pathlib
from typing import Any

from pdenlp import _exceptions


def load_config(path: str) -> Config:
    """Loads a config object from a config file.

    Loads the config from a .ini file via the configparser package.

    Args:
        path: The path to the .ini file storing the configuration.

    Returns:
        The output config file, which includes the path to the .ini file.

    """
    return Config(path)


def _check_for_config_list(string: str) -> bool:
    """Checks, if string is a valid python list consisting of numbers or words.

    Args:
        string: The input string.

    Returns:
        ``True`` if the string is valid, ``False`` otherwise

    """
    result = False

    for char in string:
        if not (
            char.isdigit()
            or char.isalpha()
            or char.isspace()
            or char in ["[", "]", ".", ",", "-", '"', "'", "_"]
        ):
            return result

    if len(string) == 0 or string[0] != "[":
        return result
    if string[-1] != "]":
        return result

    return True


class Config(ConfigParser):
    """Class for handling the config in pdenlp."""

    def __init__(self, config_file: str | None = None) -> None:
        """Initializes self.

        Args:
            config_file: Path to the config file.

        """
        super().__init__()
        self.config_errors: list[str] = []

        self.config_scheme: dict[str, dict[str, dict[str, Any]]] = {
            "Discretization": {
                "n": {
                    "type": "int",
                    "attributes": ["positive"],
                },
                "start_x": {
                    "type": "float",
                },
                "end_x": {
                    "type": "float",
                    "larger_than": ("Discretization", "start_x"),
                },
                "start_y": {
                    "type": "float",
                },
                "end_y": {
                    "type": "float",
                    "larger_than": ("Discretization", "start_y"),
                },
                "diagonal": {
                    "type": "str",
                    "possible_options": [
                        "right",
                        "left",
                        "left/right",
                        "right/left",
                        "crossed",
                    ],
                },
                "state_degree": {
                    "type": "int",
                    "attributes": ["positive"],
                },
                "control_degree": {
                    "type": "int",
                    "attributes": ["positive"],
                },
                "quadrature_degree": {
                    "type": "int",
                    "attributes": ["positive"],
                },
            },
            "Problem": {
                "alpha": {
                    "type": "float",
                    "attributes": ["positive"],
                },
                "omega": {
                    "type": "float",
                },
                "name": {
                    "type": "str",
                },
            },
            "Feasibility": {
                "enabled": {
                    "type": "bool",
                },
                "ftol": {
                    "type": "float",
                    "attributes": ["less_than_one", "non_negative"],
                },
                "xtol": {
                    "type": "float",
                    "attributes": ["less_than_one", "non_negative"],
                },
                "gtol": {
                    "type": "float",
                    "attributes": ["less_than_one", "non_negative"],
                },
                "max_nfev": {
                    "type": "int",
                    "attributes": ["non_negative"],
                },
            },
            "Solvers": {
                "backends": {
                    "type": "list",
                },
                "tol": {
                    "type": "float",
                    "attributes": ["less_than_one", "positive"],
                },
                "verbose": {
                    "type": "bool",
                },
            },
            "Ipopt": {
                "max_iter": {
                    "type": "int",
                    "attributes": ["non_negative"],
                },
                "print_level": {
                    "type": "int",
                    "attributes": ["non_negative"],
                },
                "mu_strategy": {
                    "type": "str",
                    "possible_options": ["monotone", "adaptive"],
                },
                "hessian_approximation": {
                    "type": "str",
                    "possible_options": ["exact", "limited-memory"],
                },
            },
            "SQP": {
                "max_iter": {
                    "type": "int",
                    "attributes": ["non_negative"],
                },
                "rtol": {
                    "type": "float",
                    "attributes": ["less_than_one", "non_negative"],
                },
                "xtol": {
                    "type": "float",
                    "attributes": ["less_than_one", "non_negative"],
                },
                "initial_tr_radius": {
                    "type": "float",
                    "attributes": ["positive"],
                },
                "factorization_method": {
                    "type": "str",
                    "possible_options": [
                        "auto",
                        "augmentedsystem",
                        "normalequation",
                        "qrfactorization",
                        "svdfactorization",
                    ],
                },
            },
            "Comparison": {
                "rtol": {
                    "type": "float",
                    "attributes": ["positive"],
                },
                "primal_tol": {
                    "type": "float",
                    "attributes": ["positive"],
                },
                "dual_tol": {
                    "type": "float",
                    "attributes": ["positive"],
                },
            },
            "Output": {
                "verbose": {
                    "type": "bool",
                },
                "save_results": {
                    "type": "bool",
                },
                "save_solution": {
                    "type": "bool",
                },
                "result_dir": {
                    "type": "str",
                },
                "precision": {
                    "type": "int",
                    "attributes": ["positive"],
                },
                "time_suffix": {
                    "type": "bool",
                },
            },
            "DEFAULT": {},
        }
        self.default_config_str = f"""
[Discretization]
n = 100
start_x = -1.0
end_x = 1.0
start_y = -1.0
end_y = 1.0
diagonal = right
state_degree = 2
control_degree = 1
quadrature_degree = 1

[Problem]
alpha = 1e-2
omega = {math.pi - 1.0 / 8.0!r}
name = Control elastic membrane

[Feasibility]
enabled = True
ftol = 1e-8
xtol = 1e-8
gtol = 1e-8
max_nfev = 0

[Solvers]
backends = ["ipopt", "sqp"]
tol = 1e-5
verbose = False

[Ipopt]
max_iter = 3000
print_level = 0
mu_strategy = monotone
hessian_approximation = exact

[SQP]
max_iter = 1000
rtol = 0.0
xtol = 1e-12
initial_tr_radius = 1.0
factorization_method = auto

[Comparison]
rtol = 1e-2
primal_tol = 1e-4
dual_tol = inf

[Output]
verbose = True
save_results = False
save_solution = False
result_dir = ./results
precision = 3
time_suffix = False
"""

        self.read_string(self.default_config_str)

        if config_file is not None:
            file = pathlib.Path(config_file)
            if file.is_file():
                self.read(config_file)
            else:
                raise _exceptions.InputError(
                    "pdenlp.Config",
                    "config_file",
                    f"Could not find the specified config file {config_file}. "
                    "Please supply a path to an existing configuration file.",
                )

    def getlist(self, section: str, option: str, **kwargs: Any) -> list:
        """Extracts a list from a config file.

        Args:
            section: The section where the list is placed.
            option: The option which contains the list.
            **kwargs: A list of keyword arguments that get passed to
                :py:meth:``self.get``

        Returns:
            The list which is specified in section ``section`` and key ``option``.

        """
        if (
            self.config_scheme[section][option]["type"] == "list"
        ) and _check_for_config_list(self.get(section, option)):
            py_list: list = json.loads(
                self.get(section, option, **kwargs).replace("'", '"')
            )
            return py_list
        else:
            raise _exceptions.InputError(
                "Config.getlist",
                "option",
                f"option {option} in section {section} cannot be used as list.",
            )

    def validate_config(self) -> None:
        """Validates the configuration file."""
        self.config_errors = []
        self._check_sections()
        self._check_keys()

        if len(self.config_errors) > 0:
            raise _exceptions.ConfigError(self.config_errors)

    def _check_sections(self) -> None:
        """Checks whether all sections are valid."""
        for section_name in self.keys():
            if section_name not in self.config_scheme:
                self.config_errors.append(
                    f"The following section is not valid: {section_name}\n"
                )

    def _check_keys(self) -> None:
        """Checks the keys of the sections."""
        for section_name, section in self.items():
            for key in section.keys():
                if section_name in self.config_scheme:
                    if key not in self.config_scheme[section_name].keys():
                        self.config_errors.append(
                            f"Key {key} is not valid for section {section_name}.\n"
                        )
                    else:
                        self._check_key_type(section_name, key)
                        self._check_possible_options(section_name, key)
                        self._check_attributes(section_name, key)
                        self._check_larger_than_relation(section_name, key)

    def _check_key_type(self, section: str, key: str) -> None:
        """Checks if the type of the key is correct.

        Args:
            section: The corresponding section
            key: The corresponding key

        """
        key_type = self.config_scheme[section][key]["type"]
        try:
            if key_type.casefold() == "str":
                self.get(section, key)
            elif key_type.casefold() == "bool":
                self.getboolean(section, key)
            elif key_type.casefold() == "int":
                self.getint(section, key)
            elif key_type.casefold() == "float":
                self.getfloat(section, key)
            elif key_type.casefold() == "list":
                if not _check_for_config_list(self.get(section, key)):
                    raise ValueError
        except ValueError:
            self.config_errors.append(
                f"Key {key} in section {section} has the wrong type. "
                f"Required type is {key_type}.\n"
            )

    def _check_possible_options(self, section: str, key: str) -> None:
        """Checks, whether the given option is possible.

        Args:
            section: The corresponding section
            key: The corresponding key

        """
        if "possible_options" in self.config_scheme[section][key].keys():
            if (
                self[section][key].casefold()
                not in self.config_scheme[section][key]["possible_options"]
            ):
                self.config_errors.append(
                    f"Key {key} in section {section} has a wrong value. "
                    f"Possible options are "
                    f"{self.config_scheme[section][key]['possible_options']}.\n"
                )

    def _check_larger_than_relation(self, section: str, key: str) -> None:
        """Checks, whether a given option is larger than its partner.

        Args:
            section: The corresponding section
            key: The corresponding key

        """
        if "larger_than" in self.config_scheme[section][key].keys():
            partner = self.config_scheme[section][key]["larger_than"]
            try:
                higher_value = self.getfloat(section, key)
                lower_value = self.getfloat(partner[0], partner[1])
            except ValueError:
                return
            if lower_value >= higher_value:
                self.config_errors.append(
                    f"The value of key {key} in section {section} is smaller than "
                    f"the value of key {partner[1]} in section {partner[0]}, "
                    f"but it should be larger.\n"
                )

    def _check_attributes(self, section: str, key: str) -> None:
        """Checks the attributes of a key.

        Args:
            section: The corresponding section
            key: The corresponding key

        """
        if "attributes" in self.config_scheme[section][key].keys():
            key_attributes = self.config_scheme[section][key]["attributes"]
            try:
                value = self.getfloat(section, key)
            except ValueError:
                return

            if "non_negative" in key_attributes and value < 0:
                self.config_errors.append(
                    f"Key {key} in section {section} is negative, but it must not be.\n"
                )
            if "positive" in key_attributes and value <= 0:
                self.config_errors.append(
                    f"Key {key} in section {section} is non-positive, "
                    f"but it must be positive.\n"
                )
            if "less_than_one" in key_attributes and value >= 1:
                self.config_errors.append(
                    f"Key {key} in section {section} is larger than one, "
                    f"but it must be smaller.\n"
                )
