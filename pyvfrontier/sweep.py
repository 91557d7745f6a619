"""
Parameter sweeps over the controlling bound of a frontier problem.

A sweep solves one problem per value of an inclusive arithmetic range and
collects the realised returns and variances in sweep order. Any callable
with the signature of :func:`~pyvfrontier.optimization.solve_max_return`
or :func:`~pyvfrontier.optimization.solve_min_variance` can be swept.

A sweep aborts on the first step that fails; no partial frontier is
returned.
"""

from __future__ import annotations

import functools
import logging
import numbers
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Tuple

import numpy as np
import numpy.typing as npt
import pandas as pd

from .config import SolverSettings
from .exceptions import InvalidSweepRange, SolveFailure
from .optimization import SolveResult
from .utils.functions import asset_names_of, check_dimensions

logger = logging.getLogger(__name__)

SolveFn = Callable[[np.ndarray, np.ndarray, float], Tuple[float, float]]

# Absorbs floating-point drift in (upper - lower) / step, e.g. 0.03 / 0.01.
_RANGE_TOLERANCE = 1e-9

# Upper limit on the number of bounds in one sweep.
MAX_SWEEP_STEPS = 1_000_000


@dataclass(frozen=True)
class FrontierSample:
    """
    The realised points of one sweep, in sweep order.

    All arrays are read-only and index-aligned: ``returns[k]`` and
    ``variances[k]`` were produced by the problem built for ``bounds[k]``.
    """
    bounds: npt.NDArray[np.floating]
    returns: npt.NDArray[np.floating]
    variances: npt.NDArray[np.floating]
    formulation: str = ""
    asset_names: Optional[List[str]] = None

    def __post_init__(self):
        arrays = []
        for name in ("bounds", "returns", "variances"):
            arr = np.array(getattr(self, name), dtype=float).reshape(-1)
            arr.setflags(write=False)
            object.__setattr__(self, name, arr)
            arrays.append(arr)
        if len({arr.shape[0] for arr in arrays}) != 1:
            raise ValueError("`bounds`, `returns` and `variances` must have the same length.")

    def __len__(self) -> int:
        return self.bounds.shape[0]

    def __iter__(self) -> Iterator[SolveResult]:
        for ret, var in zip(self.returns, self.variances):
            yield SolveResult(expected_return=float(ret), variance=float(var))

    @property
    def volatilities(self) -> npt.NDArray[np.floating]:
        """Standard deviations of the frontier points."""
        return np.sqrt(np.clip(self.variances, 0.0, None))

    def as_tuple(self) -> Tuple[List[float], List[float]]:
        """Returns ``(returns, variances)`` as two lists of floats."""
        return self.returns.tolist(), self.variances.tolist()

    def to_frame(self) -> pd.DataFrame:
        """Tabulates the sweep with one row per bound."""
        return pd.DataFrame(
            {
                "return": self.returns,
                "variance": self.variances,
                "volatility": self.volatilities,
            },
            index=pd.Index(self.bounds, name="bound"),
        )

    def get_min_variance_point(self) -> SolveResult:
        """The sweep point with the lowest variance."""
        if len(self) == 0:
            raise ValueError("The frontier sample is empty.")
        idx = int(np.argmin(self.variances))
        return SolveResult(float(self.returns[idx]), float(self.variances[idx]))

    def get_max_return_point(self) -> SolveResult:
        """The sweep point with the highest expected return."""
        if len(self) == 0:
            raise ValueError("The frontier sample is empty.")
        idx = int(np.argmax(self.returns))
        return SolveResult(float(self.returns[idx]), float(self.variances[idx]))


def sweep_bounds(lower: float, upper: float, step: float) -> npt.NDArray[np.floating]:
    """
    The inclusive arithmetic range ``lower, lower + step, ...`` up to `upper`.

    A negative `step` sweeps downwards from `lower` to `upper`. The last
    value never overshoots `upper`.

    :raises InvalidSweepRange: If any argument is not finite, `step` is
                               zero, `step` points away from `upper`, or the
                               range holds more than `MAX_SWEEP_STEPS` bounds.
    """
    for name, value in (("lower", lower), ("upper", upper), ("step", step)):
        if not isinstance(value, numbers.Real) or not np.isfinite(value):
            raise InvalidSweepRange(f"`{name}` must be a finite real number, got {value!r}.")
    if step == 0:
        raise InvalidSweepRange("`step` must be non-zero.")

    span = upper - lower
    if span != 0 and np.sign(span) != np.sign(step):
        raise InvalidSweepRange(
            f"`step` {step} has the wrong sign for the range [{lower}, {upper}]."
        )

    count = span / step
    if not np.isfinite(count) or count + 1 > MAX_SWEEP_STEPS:
        raise InvalidSweepRange(
            f"`step` {step} over the range [{lower}, {upper}] gives more than "
            f"{MAX_SWEEP_STEPS} bounds."
        )
    n = int(np.floor(count + _RANGE_TOLERANCE)) + 1
    bounds = lower + step * np.arange(n, dtype=float)
    if step > 0:
        return np.minimum(bounds, upper)
    return np.maximum(bounds, upper)


def sweep_frontier(
    solve_fn: SolveFn,
    mean: np.ndarray | pd.Series,
    covariance_matrix: np.ndarray | pd.DataFrame,
    lower: float,
    upper: float,
    step: float,
    settings: Optional[SolverSettings] = None,
) -> FrontierSample:
    """
    Solves `solve_fn` once per bound of ``sweep_bounds(lower, upper, step)``.

    Inputs and the range are validated before the first solve. Steps run
    sequentially in sweep order.

    :param solve_fn: A callable ``(mean, covariance_matrix, bound)`` returning
                     an ``(expected_return, variance)`` pair.
    :param settings: Solver options, forwarded as the `settings` keyword of
                     `solve_fn` when given.
    :return: The realised points of the sweep.
    :rtype: FrontierSample
    :raises DimensionMismatch: If the inputs describe different numbers of assets.
    :raises InvalidSweepRange: If the range is empty or unbounded.
    :raises SolveFailure: On the first step that does not solve; the
                          exception carries the failing bound.
    """
    asset_names = asset_names_of(mean, covariance_matrix)
    mean, covariance_matrix = check_dimensions(mean, covariance_matrix)
    bounds = sweep_bounds(lower, upper, step)

    formulation = getattr(solve_fn, "__name__", type(solve_fn).__name__)
    if settings is not None:
        solve_fn = functools.partial(solve_fn, settings=settings)

    returns, variances = [], []
    for k, bound in enumerate(bounds):
        try:
            ret, var = solve_fn(mean, covariance_matrix, float(bound))
        except SolveFailure as exc:
            logger.error(
                f"Sweep of {formulation} aborted at step {k} of {len(bounds)} "
                f"(bound {bound:.6g}): {exc}"
            )
            raise SolveFailure(
                f"Sweep of {formulation} aborted at step {k} (bound {bound:.6g}): {exc}",
                status=exc.status,
                bound=float(bound),
            ) from exc
        returns.append(ret)
        variances.append(var)

    logger.info(f"Swept {formulation} over {len(bounds)} bounds from {bounds[0]:.6g} to {bounds[-1]:.6g}.")
    return FrontierSample(
        bounds=bounds,
        returns=np.array(returns, dtype=float),
        variances=np.array(variances, dtype=float),
        formulation=formulation,
        asset_names=asset_names,
    )


def sweep(
    solve_fn: SolveFn,
    mean: np.ndarray | pd.Series,
    covariance_matrix: np.ndarray | pd.DataFrame,
    lower: float,
    upper: float,
    step: float,
    settings: Optional[SolverSettings] = None,
) -> Tuple[List[float], List[float]]:
    """
    Sweeps `solve_fn` and returns the index-aligned ``(returns, variances)`` lists.

    See :func:`sweep_frontier` for the arguments and failure behaviour.
    """
    return sweep_frontier(solve_fn, mean, covariance_matrix, lower, upper, step, settings).as_tuple()


__all__ = ["SolveFn", "MAX_SWEEP_STEPS", "FrontierSample", "sweep_bounds", "sweep_frontier", "sweep"]
