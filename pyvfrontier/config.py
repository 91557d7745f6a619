"""Solver configuration shared by the frontier builders."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(slots=True, frozen=True)
class SolverSettings:
    """
    Options forwarded to the `cvxopt` interior-point solvers on every call.

    `max_iters` is the only way to bound the time spent in a single solve.
    A solve that stops on the iteration limit is reported with status
    ``"unknown"`` and surfaces as :class:`~pyvfrontier.exceptions.SolveFailure`.

    :ivar show_progress: Print solver iterations. Defaults to False.
    :ivar abstol: Absolute accuracy of the duality gap.
    :ivar reltol: Relative accuracy of the duality gap.
    :ivar feastol: Tolerance on primal and dual feasibility.
    :ivar max_iters: Maximum number of iterations.
    """
    show_progress: bool = False
    abstol: float = 1e-7
    reltol: float = 1e-6
    feastol: float = 1e-7
    max_iters: int = 100

    def __post_init__(self):
        for name in ("abstol", "reltol", "feastol"):
            if getattr(self, name) <= 0:
                raise ValueError(f"`{name}` must be strictly positive.")
        if self.max_iters < 1:
            raise ValueError("`max_iters` must be at least 1.")

    def to_options(self) -> Dict[str, Any]:
        """Returns the settings as a `cvxopt` options dictionary."""
        return {
            "show_progress": self.show_progress,
            "abstol": self.abstol,
            "reltol": self.reltol,
            "feastol": self.feastol,
            "maxiters": self.max_iters,
        }


DEFAULT_SETTINGS = SolverSettings()

__all__ = ["SolverSettings", "DEFAULT_SETTINGS"]
