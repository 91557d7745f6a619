"""Plotting utilities for swept efficient frontiers."""

from __future__ import annotations

from typing import Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from .sweep import FrontierSample

_RISK_LABELS = {"variance": "Variance", "volatility": "Volatility"}


def _require_matplotlib():
    try:
        import matplotlib.pyplot as plt
    except ImportError as exc:  # pragma: no cover - guarded by tests
        raise ImportError(
            "`plot_frontier` requires `matplotlib`. Install it via `pip install matplotlib`."
        ) from exc
    return plt


def _normalize_points(
    returns: Union[FrontierSample, Sequence[float]],
    variances: Optional[Sequence[float]],
) -> Tuple[np.ndarray, np.ndarray]:
    if isinstance(returns, FrontierSample):
        if variances is not None:
            raise ValueError("Pass either a `FrontierSample` or `returns` and `variances`, not both.")
        return returns.returns, returns.variances

    if variances is None:
        raise ValueError("`variances` is required when `returns` is a sequence.")
    returns_arr = np.asarray(returns, dtype=float).reshape(-1)
    variances_arr = np.asarray(variances, dtype=float).reshape(-1)
    if returns_arr.shape != variances_arr.shape:
        raise ValueError(
            f"`returns` and `variances` must have the same length, "
            f"got {returns_arr.shape[0]} and {variances_arr.shape[0]}."
        )
    return returns_arr, variances_arr


def plot_frontier(
    returns: Union[FrontierSample, Sequence[float]],
    variances: Optional[Sequence[float]] = None,
    *,
    ax=None,
    risk: str = "variance",
    label: Optional[str] = None,
    title: Optional[str] = "Efficient Frontier",
    line_kwargs: Optional[Mapping[str, object]] = None,
    risk_label: Optional[str] = None,
    return_label: str = "Expected Return",
    legend: bool = False,
):
    """Plot a swept efficient frontier, risk on the x axis and return on the y axis.

    Points are drawn in the order given, which is the sweep order.

    Args:
        returns: Realised returns of the sweep, or a whole `FrontierSample`.
        variances: Realised variances, index-aligned with `returns`. Omit when
            passing a `FrontierSample`.
        ax: Optional matplotlib axis. If omitted, a new figure and axis are created.
        risk: ``"variance"`` plots the variances as given, ``"volatility"`` plots
            their square roots.
        label: Optional legend label of the frontier line.
        title: Axis title. ``None`` leaves the title untouched.
        line_kwargs: Keyword arguments passed to ``Axes.plot``.
        risk_label: Axis label for the risk dimension. Defaults to the name of `risk`.
        return_label: Axis label for expected returns.
        legend: Whether to render a legend.

    Returns:
        The matplotlib ``Axes`` containing the plot.
    """
    if risk not in _RISK_LABELS:
        raise ValueError(f"Unknown risk measure '{risk}'. Use one of {sorted(_RISK_LABELS)}.")
    returns_arr, variances_arr = _normalize_points(returns, variances)
    x = np.sqrt(np.clip(variances_arr, 0.0, None)) if risk == "volatility" else variances_arr

    plt = _require_matplotlib()
    if ax is None:
        _, ax = plt.subplots()

    line_kwargs = dict(line_kwargs or {})
    line_kwargs.setdefault("marker", "o")
    ax.plot(x, returns_arr, label=label, **line_kwargs)

    ax.set_xlabel(risk_label or _RISK_LABELS[risk])
    ax.set_ylabel(return_label)
    if title is not None:
        ax.set_title(title)
    ax.grid(True, alpha=0.3)

    if legend:
        ax.legend()
    return ax


__all__ = ["plot_frontier"]
