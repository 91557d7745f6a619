"""
This module builds and solves the two dual problems that trace a long-only,
fully invested mean-variance efficient frontier.

It leverages `cvxopt` for solving the quadratic program (QP) of the
variance-minimising variant and the second-order cone program (SOCP) of the
return-maximising variant.

Classes:

* `SolveResult`: A dataclass holding the realised return and variance of a solve.
* `Optimization`: A base class holding the validated inputs and the shared
  budget and long-only constraints.
* `MaxReturn`: Maximises expected return under a variance ceiling.
* `MinVariance`: Minimises variance under an expected return floor.

Functions:

* `solve_max_return` and `solve_min_variance`: one-shot wrappers that can be
  passed to :func:`pyvfrontier.sweep.sweep`.
* `return_bounds`: the range of expected returns spanned by the frontier.
"""

from __future__ import annotations

import logging
import numbers
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

import numpy as np
import numpy.typing as npt
import pandas as pd
from cvxopt import matrix, solvers

from .config import DEFAULT_SETTINGS, SolverSettings
from .exceptions import SolveFailure
from .utils.functions import _cholesky_pd, check_dimensions, portfolio_return, portfolio_variance

solvers.options.update({"show_progress": False})

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class SolveResult:
    """
    The outcome of one solved frontier problem.

    Both values are evaluated at the optimal weights. Whichever of the two is
    the constraint of the problem holds its *realised* value, not the
    requested bound: `MaxReturn` may report a variance strictly below the
    ceiling when the ceiling is slack, and `MinVariance` may report a return
    above the floor when the floor is slack.

    The result unpacks as ``expected_return, variance = result``.

    :ivar expected_return: :math:`\\mu^T w^*`.
    :vartype expected_return: float
    :ivar variance: :math:`{w^*}^T \\Sigma w^*`.
    :vartype variance: float
    """
    expected_return: float
    variance: float

    def __iter__(self) -> Iterator[float]:
        yield self.expected_return
        yield self.variance


def _check_bound(bound: float, name: str) -> float:
    if not isinstance(bound, numbers.Real) or not np.isfinite(bound):
        raise ValueError(f"`{name}` must be a finite real number.")
    return float(bound)


class Optimization:
    """
    Base class for the frontier problems.

    Validates the inputs once and holds the constraints every frontier
    portfolio must satisfy:

    .. math::

        -w \\le 0, \\qquad \\mathbf{1}^T w = 1

    The upper bound :math:`w_i \\le 1` is implied by the two and is not passed
    to the solver, which keeps the single-asset problem strictly feasible.

    :cvar _I: The number of assets in the portfolio.
    :cvar _mean: The expected return vector of assets.
    :cvar _cov: The covariance matrix of asset returns.
    :cvar _G: Matrix for inequality constraints, :math:`G w \\le h`.
    :cvar _h: Vector for inequality constraints, :math:`G w \\le h`.
    :cvar _A: Matrix for the budget constraint, :math:`A w = b`.
    :cvar _b: Vector for the budget constraint, :math:`A w = b`.
    """
    _I: int
    _mean: np.ndarray
    _cov: np.ndarray
    _G: matrix
    _h: matrix
    _A: matrix
    _b: matrix

    def __init__(
        self,
        mean: np.ndarray | pd.Series,
        covariance_matrix: np.ndarray | pd.DataFrame,
        settings: Optional[SolverSettings] = None,
    ):
        """
        :param mean: Expected return vector of assets (:math:`N`).
        :param covariance_matrix: Covariance matrix of asset returns (:math:`N \\times N`).
        :param settings: Solver options. Defaults to :data:`~pyvfrontier.config.DEFAULT_SETTINGS`.
        :raises DimensionMismatch: If the covariance matrix does not have
                                   :math:`N^2` elements arranged as a square.
        """
        self._mean, self._cov = check_dimensions(mean, covariance_matrix)
        self._I = self._mean.shape[0]
        self._settings = settings if settings is not None else DEFAULT_SETTINGS

        self._G = matrix(-np.eye(self._I))
        self._h = matrix(np.zeros(self._I))
        self._A = matrix(np.ones((1, self._I)))
        self._b = matrix([1.0])

    def _solve(self, solver, *args, bound: Optional[float] = None, **kwargs) -> npt.NDArray[np.floating]:
        """Runs a `cvxopt` solver and returns the weights, raising on any non-optimal status."""
        problem = type(self).__name__
        try:
            sol = solver(*args, options=self._settings.to_options(), **kwargs)
        except (ArithmeticError, ValueError) as exc:
            raise SolveFailure(
                f"{problem} solver raised a numerical error for bound {bound}: {exc}",
                status="error",
                bound=bound,
            ) from exc
        if sol["status"] != "optimal":
            raise SolveFailure(
                f"{problem} solver failed to find an optimal solution for bound {bound}. "
                f"Status: {sol['status']}",
                status=sol["status"],
                bound=bound,
            )
        logger.debug(f"{problem} solved for bound {bound} in {sol.get('iterations')} iterations.")
        return np.array(sol["x"]).flatten()[: self._I]

    def solve_weights(self, bound: float) -> npt.NDArray[np.floating]:
        """Solves for the optimal weights under `bound`; implemented by subclasses."""
        raise NotImplementedError

    def solve(self, bound: float) -> SolveResult:
        """
        Solves the problem for `bound` and evaluates the optimal portfolio.

        :param bound: The controlling constraint bound of the subclass.
        :return: The realised expected return and variance.
        :rtype: SolveResult
        :raises SolveFailure: If the solver does not reach an optimal solution.
        """
        weights = self.solve_weights(bound)
        return SolveResult(
            expected_return=portfolio_return(weights, self._mean),
            variance=portfolio_variance(weights, self._cov),
        )


class MaxReturn(Optimization):
    """
    Maximises expected return subject to a ceiling on portfolio variance.

    .. math::

        \\max_{w} \\quad & w^T \\mu \\\\
        \\text{subject to} \\quad & w^T \\Sigma w \\le \\sigma^2_{\\max} \\\\
                               & w \\ge 0, \\quad \\mathbf{1}^T w = 1

    With the Cholesky factorisation :math:`\\Sigma = L L^T` the quadratic
    constraint is the second-order cone
    :math:`\\lVert L^T w \\rVert_2 \\le \\sigma_{\\max}`, so the problem is
    solved with `cvxopt.solvers.conelp`.
    """
    def __init__(
        self,
        mean: np.ndarray | pd.Series,
        covariance_matrix: np.ndarray | pd.DataFrame,
        settings: Optional[SolverSettings] = None,
    ):
        super().__init__(mean, covariance_matrix, settings)
        try:
            self._cov_sqrt = _cholesky_pd(self._cov)
        except RuntimeError as exc:
            raise SolveFailure(
                f"Covariance matrix cannot be factored for the variance constraint: {exc}",
                status="error",
            ) from exc
        self._c = matrix(-self._mean)

    def solve_weights(self, max_variance: float) -> npt.NDArray[np.floating]:
        """
        Solves for the maximum-return weights under `max_variance`.

        :param max_variance: The variance ceiling :math:`\\sigma^2_{\\max}`.
        :type max_variance: float
        :return: A 1D NumPy array of optimal portfolio weights.
        :rtype: np.ndarray
        :raises ValueError: If `max_variance` is not a finite real number.
        :raises SolveFailure: If the ceiling is negative or the solver fails.
        """
        max_variance = _check_bound(max_variance, "max_variance")
        if max_variance < 0:
            raise SolveFailure(
                f"Variance ceiling {max_variance} is negative; no portfolio is feasible.",
                status="infeasible",
                bound=max_variance,
            )

        # SOCP constraint: ||L^T w||_2 <= sqrt(max_variance)
        # [ sqrt(max_variance) ]
        # [ L^T w              ] is in the second-order cone
        G_soc = np.zeros((self._I + 1, self._I))
        G_soc[1:, :] = -self._cov_sqrt.T
        h_soc = np.zeros(self._I + 1)
        h_soc[0] = np.sqrt(max_variance)

        G_cone = matrix([self._G, matrix(G_soc)])
        h_cone = matrix([self._h, matrix(h_soc)])
        dims = {"l": self._I, "q": [self._I + 1], "s": []}

        return self._solve(
            solvers.conelp, self._c, G_cone, h_cone,
            dims=dims, A=self._A, b=self._b, bound=max_variance,
        )


class MinVariance(Optimization):
    """
    Minimises portfolio variance subject to a floor on expected return.

    .. math::

        \\min_{w} \\quad & w^T \\Sigma w \\\\
        \\text{subject to} \\quad & w^T \\mu \\ge R_{\\min} \\\\
                               & w \\ge 0, \\quad \\mathbf{1}^T w = 1

    The solver minimises :math:`\\frac{1}{2} w^T P w + q^T w`, hence
    :math:`P = 2 \\Sigma` and :math:`q = 0`. The implementation uses
    `cvxopt.solvers.qp`.
    """
    def __init__(
        self,
        mean: np.ndarray | pd.Series,
        covariance_matrix: np.ndarray | pd.DataFrame,
        settings: Optional[SolverSettings] = None,
    ):
        super().__init__(mean, covariance_matrix, settings)
        self._P = matrix(2 * self._cov)
        self._q = matrix(np.zeros(self._I))
        self._expected_return_row = -matrix(self._mean).T

    def solve_weights(self, min_return: Optional[float] = None) -> npt.NDArray[np.floating]:
        """
        Solves for the minimum-variance weights with return at least `min_return`.

        :param min_return: The return floor :math:`R_{\\min}`. If None, the
                           global minimum variance portfolio is returned.
        :type min_return: Optional[float]
        :return: A 1D NumPy array of optimal portfolio weights.
        :rtype: np.ndarray
        :raises ValueError: If `min_return` is not a finite real number.
        :raises SolveFailure: If the floor exceeds every asset's expected
                              return or the solver fails.
        """
        G, h = self._G, self._h
        if min_return is not None:
            min_return = _check_bound(min_return, "min_return")
            if min_return > self._mean.max():
                raise SolveFailure(
                    f"Return floor {min_return} exceeds the largest expected return "
                    f"{self._mean.max()}; no portfolio is feasible.",
                    status="infeasible",
                    bound=min_return,
                )
            # Add the return floor constraint: -mu^T * w <= -min_return
            G = matrix([self._G, self._expected_return_row])
            h = matrix(np.hstack([np.zeros(self._I), -min_return]))

        return self._solve(
            solvers.qp, self._P, self._q, G, h, self._A, self._b, bound=min_return,
        )


def solve_max_return(
    mean: np.ndarray | pd.Series,
    covariance_matrix: np.ndarray | pd.DataFrame,
    max_variance: float,
    settings: Optional[SolverSettings] = None,
) -> SolveResult:
    """
    Maximum expected return of a long-only portfolio with variance at most `max_variance`.

    The reported variance is the realised :math:`w^T \\Sigma w` at the optimum,
    which is below `max_variance` whenever the ceiling is slack.

    :raises DimensionMismatch: If the inputs describe different numbers of assets.
    :raises SolveFailure: If the problem is infeasible, the solver fails, or the
                          covariance matrix is not positive semi-definite.
    """
    return MaxReturn(mean, covariance_matrix, settings).solve(max_variance)


def solve_min_variance(
    mean: np.ndarray | pd.Series,
    covariance_matrix: np.ndarray | pd.DataFrame,
    min_return: float,
    settings: Optional[SolverSettings] = None,
) -> SolveResult:
    """
    Minimum variance of a long-only portfolio with expected return at least `min_return`.

    The reported return is the realised :math:`w^T \\mu` at the optimum,
    which is above `min_return` whenever the floor is slack.

    :raises DimensionMismatch: If the inputs describe different numbers of assets.
    :raises SolveFailure: If the problem is infeasible or the solver fails.
    """
    return MinVariance(mean, covariance_matrix, settings).solve(min_return)


def return_bounds(
    mean: np.ndarray | pd.Series,
    covariance_matrix: np.ndarray | pd.DataFrame,
    settings: Optional[SolverSettings] = None,
) -> Tuple[float, float]:
    """
    The range of expected returns spanned by the long-only efficient frontier.

    The lower end is the return of the global minimum variance portfolio and
    the upper end is the largest expected return of a single asset. Sweeping
    :func:`solve_min_variance` inside this range traces the efficient part
    of the frontier.

    :return: A ``(low, high)`` tuple.
    :raises SolveFailure: If the global minimum variance problem fails.
    """
    mean, covariance_matrix = check_dimensions(mean, covariance_matrix)
    low = MinVariance(mean, covariance_matrix, settings).solve(None).expected_return
    high = float(mean.max())
    return min(low, high), high


__all__ = [
    "SolveResult",
    "Optimization",
    "MaxReturn",
    "MinVariance",
    "solve_max_return",
    "solve_min_variance",
    "return_bounds",
]
