__all__ = [
    "PyvFrontierError",
    "DimensionMismatch",
    "InvalidSweepRange",
    "SolveFailure",
    "SolverSettings",
    "SolveResult",
    "Optimization",
    "MaxReturn",
    "MinVariance",
    "solve_max_return",
    "solve_min_variance",
    "return_bounds",
    "FrontierSample",
    "sweep_bounds",
    "sweep_frontier",
    "sweep",
    "plot_frontier",
]

from .exceptions import PyvFrontierError, DimensionMismatch, InvalidSweepRange, SolveFailure
from .config import SolverSettings
from .optimization import (
    SolveResult,
    Optimization,
    MaxReturn,
    MinVariance,
    solve_max_return,
    solve_min_variance,
    return_bounds,
)
from .sweep import FrontierSample, sweep_bounds, sweep_frontier, sweep
from .plotting import plot_frontier

__version__ = "0.1.0"
