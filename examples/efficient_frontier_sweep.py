"""Minimal example: sweep both frontier problems and plot the two curves."""

from __future__ import annotations

import logging

import pandas as pd

from pyvfrontier import return_bounds, solve_max_return, solve_min_variance, sweep_frontier
from pyvfrontier.plotting import plot_frontier


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="[%(name)s - %(levelname)s] %(message)s")

    mean = pd.Series(
        {"Govt_Bonds": 0.030, "Credit_US": 0.045, "Equity_EU": 0.070, "Equity_US": 0.085}
    )
    cov = pd.DataFrame(
        [
            [0.0020, 0.0012, 0.0004, 0.0002],
            [0.0012, 0.0060, 0.0030, 0.0025],
            [0.0004, 0.0030, 0.0300, 0.0220],
            [0.0002, 0.0025, 0.0220, 0.0350],
        ],
        index=mean.index,
        columns=mean.index,
    )

    low, high = return_bounds(mean, cov)
    print(f"Frontier returns span {low:.4%} to {high:.4%}\n")

    by_return = sweep_frontier(solve_min_variance, mean, cov, 0.035, 0.080, 0.005)
    by_risk = sweep_frontier(solve_max_return, mean, cov, 0.002, 0.030, 0.002)

    print("Minimum variance for each return floor:")
    print(by_return.to_frame().round(6))
    print("\nMaximum return for each variance ceiling:")
    print(by_risk.to_frame().round(6))

    try:
        import matplotlib.pyplot as plt
    except ImportError:
        return
    ax = plot_frontier(by_return, risk="volatility", label="min variance | return floor")
    plot_frontier(by_risk, ax=ax, risk="volatility", label="max return | variance ceiling", legend=True)
    plt.show()


if __name__ == "__main__":
    main()
