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

"""Taylor tests for verifying the derivatives of a model."""

from __future__ import annotations

from typing import Callable

import numpy as np

from pdenlp import log
from pdenlp.models import nlp_model


def compute_convergence_rates(
    epsilons: list[float], residuals: list[float]
) -> list[float]:
    """Computes the convergence rate of the Taylor test.

    Args:
        epsilons: The step sizes.
        residuals: The corresponding residuals.

    Returns:
        The computed convergence rates

    """
    rates: list[float] = []
    for i in range(1, len(epsilons)):
        rate: float = np.log(residuals[i] / residuals[i - 1]) / np.log(
            epsilons[i] / epsilons[i - 1]
        )
        rates.append(rate)

    return rates


def _taylor_test(
    function: Callable[[np.ndarray], np.ndarray | float],
    derivative: np.ndarray | float,
    x: np.ndarray,
    h: np.ndarray,
    verbose: bool,
) -> float:
    """Computes the convergence rate of the first order Taylor remainder.

    Args:
        function: The function to be tested.
        derivative: The directional derivative of ``function`` at ``x`` in
            direction ``h``.
        x: The point of evaluation.
        h: The direction.
        verbose: Logs the rates, if ``True``.

    Returns:
        The last computed rate.

    """
    scaling = float(np.linalg.norm(x))
    if scaling < 1e-3:
        scaling = 1.0

    value_at_x = function(x)
    epsilons = [scaling * 1e-2 / 2**i for i in range(4)]
    residuals = []
    for eps in epsilons:
        value_at_v = function(x + eps * h)
        remainder = np.atleast_1d(value_at_v - value_at_x - eps * derivative)
        residuals.append(float(np.linalg.norm(remainder)))

    if np.min(residuals) < 1e-14:
        log.warning("The Taylor remainder is close to 0, results may be inaccurate.")

    rates = compute_convergence_rates(epsilons, residuals)
    if verbose:
        log.info(f"Taylor test convergence rate: {rates}")

    min_rate: float = rates[-1]
    return min_rate


def _random_direction(
    model: nlp_model.NLPModel,
    h: np.ndarray | None,
    rng: np.random.RandomState | None,
) -> np.ndarray:
    if h is not None:
        return np.asarray(h, dtype=float)

    custom_rng = rng or np.random.RandomState()
    return custom_rng.rand(model.nvar)


def gradient_test(
    model: nlp_model.NLPModel,
    x: np.ndarray | None = None,
    h: np.ndarray | None = None,
    rng: np.random.RandomState | None = None,
    verbose: bool = True,
) -> float:
    """Performs a Taylor test to verify that the gradient of the objective is correct.

    The evaluations are not counted by the model.

    Args:
        model: The model whose gradient shall be verified.
        x: The point, at which the gradient shall be verified. Defaults to the
            initial guess of the model.
        h: The direction for the directional derivative. If this is ``None``, a
            random direction is chosen.
        rng: A numpy random state for calculating a random direction.
        verbose: Logs the result, if ``True``. Default is ``True``.

    Returns:
        The convergence order from the Taylor test. If this is (approximately) 2 or
        larger, everything works as expected.

    """
    x = np.array(model.meta.x0 if x is None else x, dtype=float)
    h = _random_direction(model, h, rng)

    # pylint: disable=protected-access
    directional_derivative = float(np.dot(model._grad(x), h))
    return _taylor_test(model._obj, directional_derivative, x, h, verbose)


def jacobian_test(
    model: nlp_model.NLPModel,
    x: np.ndarray | None = None,
    h: np.ndarray | None = None,
    rng: np.random.RandomState | None = None,
    verbose: bool = True,
) -> float:
    """Performs a Taylor test to verify that the Jacobian of the constraints is correct.

    For constraints which are affine, the remainder vanishes up to rounding errors
    and the computed rate is meaningless.

    Args:
        model: The model whose Jacobian shall be verified.
        x: The point, at which the Jacobian shall be verified. Defaults to the
            initial guess of the model.
        h: The direction for the directional derivative. If this is ``None``, a
            random direction is chosen.
        rng: A numpy random state for calculating a random direction.
        verbose: Logs the result, if ``True``. Default is ``True``.

    Returns:
        The convergence order from the Taylor test.

    """
    x = np.array(model.meta.x0 if x is None else x, dtype=float)
    h = _random_direction(model, h, rng)

    # pylint: disable=protected-access
    directional_derivative = np.asarray(model._jac(x) @ h)
    return _taylor_test(model._cons, directional_derivative, x, h, verbose)
