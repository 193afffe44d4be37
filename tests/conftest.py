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
import pathlib

import numpy as np
import pytest
from scipy import sparse

import pdenlp
from pdenlp.models import NLPModel
from pdenlp.models import NLPModelMeta


class CircleModel(NLPModel):
    """min x_1 + x_2 s.t. x_1^2 + x_2^2 = 2, with solution (-1, -1)."""

    def __init__(self, x0=(-2.0, -0.5)):
        super().__init__(NLPModelMeta(2, x0=x0, ncon=1, name="circle"))

    def _obj(self, x):
        return float(x[0] + x[1])

    def _grad(self, x):
        return np.ones(2)

    def _cons(self, x):
        return np.array([x[0] ** 2 + x[1] ** 2 - 2.0])

    def _jac(self, x):
        return sparse.csr_matrix(np.array([[2.0 * x[0], 2.0 * x[1]]]))

    def _hess(self, x, y, obj_weight):
        return sparse.csr_matrix(2.0 * y[0] * np.eye(2))

    def _jac_sparsity(self):
        return np.array([0, 0]), np.array([0, 1])

    def _hess_sparsity(self):
        return np.array([0, 1]), np.array([0, 1])


@pytest.fixture()
def dir_path():
    return str(pathlib.Path(__file__).parent)


@pytest.fixture
def config(dir_path):
    return pdenlp.load_config(f"{dir_path}/config_pdenlp.ini")


@pytest.fixture
def rng():
    return np.random.RandomState(300696)


@pytest.fixture
def model(config):
    return pdenlp.poisson_control_model(config)


@pytest.fixture
def circle_model():
    return CircleModel()


@pytest.fixture
def circle_model_on_axis():
    return CircleModel((0.0, -1.5))
