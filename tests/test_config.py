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
import math

import pytest

import pdenlp
from pdenlp._exceptions import ConfigError
from pdenlp._exceptions import InputError


def test_default_config_is_valid():
    config = pdenlp.io.Config()
    config.validate_config()

    assert config.getint("Discretization", "n") == 100
    assert config.getfloat("Problem", "alpha") == pytest.approx(1e-2)
    assert config.getfloat("Problem", "omega") == pytest.approx(math.pi - 1.0 / 8.0)
    assert config.get("Problem", "name") == "Control elastic membrane"
    assert config.getlist("Solvers", "backends") == ["ipopt", "sqp"]
    assert config.getfloat("Comparison", "dual_tol") == math.inf


def test_load_config(config):
    assert config.getint("Discretization", "n") == 8
    assert not config.getboolean("Solvers", "verbose")
    config.validate_config()


def test_missing_config_file(dir_path):
    with pytest.raises(InputError, match="Could not find the specified config file"):
        pdenlp.load_config(f"{dir_path}/does_not_exist.ini")


def test_wrong_type(config):
    config.set("Discretization", "n", "abc")
    with pytest.raises(ConfigError, match="Key n in section Discretization"):
        config.validate_config()


def test_wrong_section_and_key(config):
    config.add_section("Algorithm")
    config.set("Solvers", "maxiter", "5")
    with pytest.raises(ConfigError) as e_info:
        config.validate_config()
    assert "The following section is not valid: Algorithm" in str(e_info.value)
    assert "Key maxiter is not valid for section Solvers" in str(e_info.value)


def test_all_errors_are_collected(config):
    config.set("Discretization", "n", "0")
    config.set("Ipopt", "mu_strategy", "probing")
    config.set("Solvers", "tol", "2.0")
    with pytest.raises(ConfigError) as e_info:
        config.validate_config()

    assert len(e_info.value.config_errors) == 3
    assert "non-positive" in str(e_info.value)
    assert "Possible options are" in str(e_info.value)
    assert "is larger than one" in str(e_info.value)


def test_larger_than_relation(config):
    config.set("Discretization", "end_x", "-2.0")
    with pytest.raises(ConfigError, match="but it should be larger"):
        config.validate_config()


def test_possible_options_are_case_insensitive(config):
    config.set("SQP", "factorization_method", "AugmentedSystem")
    config.validate_config()


def test_getlist(config):
    config.set("Solvers", "backends", "['sqp']")
    assert config.getlist("Solvers", "backends") == ["sqp"]

    with pytest.raises(InputError):
        config.getlist("Solvers", "tol")
