# functions.py
"""Portfolio algebra and input-validation helpers."""

from __future__ import annotations

import warnings
from typing import List, Optional, Tuple

import numpy as np
import numpy.typing as npt
import pandas as pd
from scipy import linalg as sla

from ..exceptions import DimensionMismatch


def portfolio_return(weights: np.ndarray, mean: np.ndarray) -> float:
    """Expected portfolio return :math:`\\mu^T w`."""
    return float(np.dot(mean, weights))


def portfolio_variance(weights: np.ndarray, covariance_matrix: np.ndarray) -> float:
    """Portfolio variance as the quadratic form :math:`w^T \\Sigma w`."""
    return float(weights @ covariance_matrix @ weights)


def _cholesky_pd(mat: npt.NDArray[np.floating], jitter: float = 1e-12) -> npt.NDArray[np.floating]:
    """
    Robust Cholesky decomposition.

    If `mat` is not positive-definite (e.g. a singular but positive
    semi-definite covariance matrix), a small multiple of the identity is
    added to the diagonal and the decomposition is retried once.

    Args:
        mat: The square matrix (N×N) to factor.
        jitter: The constant added to the diagonal on retry. Defaults to 1e-12.

    Returns:
        The lower Cholesky factor of `mat` (or `mat` + `jitter` * `I`).

    Raises:
        ValueError: If `mat` is not a square matrix.
        RuntimeError: If the matrix is not positive-definite even after adding jitter.
    """
    if mat.ndim != 2 or mat.shape[0] != mat.shape[1]:
        raise ValueError("Input to _cholesky_pd must be a square matrix.")
    try:
        return sla.cholesky(mat, lower=True, check_finite=False)
    except sla.LinAlgError:
        mat_jittered = mat + jitter * np.eye(mat.shape[0])
        warnings.warn(
            "Matrix not positive-definite; added jitter for Cholesky decomposition.",
            RuntimeWarning
        )
        try:
            return sla.cholesky(mat_jittered, lower=True, check_finite=False)
        except sla.LinAlgError as exc:
            raise RuntimeError("Matrix not positive-definite after adding jitter.") from exc


def check_dimensions(
    mean: np.ndarray | pd.Series,
    covariance_matrix: np.ndarray | pd.DataFrame,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Converts the inputs to float arrays and checks that they describe the same assets.

    The mean vector must hold at least one entry, and the covariance matrix
    must be square with ``len(mean) ** 2`` elements. pandas inputs are
    accepted and converted to their values.

    Returns:
        A ``(mean, covariance_matrix)`` tuple of a 1D and a 2D float array.

    Raises:
        DimensionMismatch: If any of the above does not hold.
    """
    if isinstance(mean, pd.Series):
        mean = mean.to_numpy(dtype=float)
    if isinstance(covariance_matrix, pd.DataFrame):
        covariance_matrix = covariance_matrix.to_numpy(dtype=float)

    mean = np.asarray(mean, dtype=float).reshape(-1)
    covariance_matrix = np.ascontiguousarray(np.atleast_2d(np.asarray(covariance_matrix, dtype=float)))
    n = mean.shape[0]

    if n == 0:
        raise DimensionMismatch("The mean return vector must hold at least one asset.")
    if covariance_matrix.size != n * n:
        raise DimensionMismatch(
            f"Covariance matrix has {covariance_matrix.size} elements; "
            f"expected {n * n} for {n} assets."
        )
    if covariance_matrix.ndim != 2 or covariance_matrix.shape != (n, n):
        raise DimensionMismatch(
            f"Covariance matrix shape {covariance_matrix.shape} is not ({n}, {n})."
        )
    return mean, covariance_matrix


def asset_names_of(
    mean: np.ndarray | pd.Series,
    covariance_matrix: np.ndarray | pd.DataFrame,
) -> Optional[List[str]]:
    """Infers asset names from pandas inputs, or returns None for plain arrays."""
    names = None
    if isinstance(mean, pd.Series):
        names = [str(name) for name in mean.index]
    if isinstance(covariance_matrix, pd.DataFrame):
        cov_names = [str(name) for name in covariance_matrix.index]
        if names is None:
            names = cov_names
        elif names != cov_names:
            raise ValueError("Inconsistent asset names between mean and covariance matrix.")
    return names
