"""Exception types raised by :mod:`pyvfrontier`."""

from __future__ import annotations

from typing import Optional


class PyvFrontierError(Exception):
    """Base class for all errors raised by this package."""


class DimensionMismatch(PyvFrontierError, ValueError):
    """The covariance matrix does not match the length of the mean vector."""


class InvalidSweepRange(PyvFrontierError, ValueError):
    """The sweep step is zero, non-finite or points away from the upper bound."""


class SolveFailure(PyvFrontierError, RuntimeError):
    """
    The solver did not reach an optimal solution.

    :ivar status: The termination status reported by the solver
                  (e.g. ``"infeasible"``, ``"unknown"``).
    :vartype status: str
    :ivar bound: The constraint bound the failing problem was built for.
    :vartype bound: Optional[float]
    """

    def __init__(self, message: str, status: str = "unknown", bound: Optional[float] = None):
        super().__init__(message)
        self.status = status
        self.bound = bound


__all__ = ["PyvFrontierError", "DimensionMismatch", "InvalidSweepRange", "SolveFailure"]
