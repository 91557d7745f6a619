import numpy as np
import pandas as pd
import pytest

from pyvfrontier import optimization
from pyvfrontier.config import SolverSettings
from pyvfrontier.exceptions import DimensionMismatch, SolveFailure

MEAN = np.array([0.03, 0.08])
COV = np.array([[0.01, 0.002], [0.002, 0.03]])

# Global minimum variance portfolio of MEAN/COV: w = [7/9, 2/9]
GMV_RETURN = 0.03 * 7 / 9 + 0.08 * 2 / 9
GMV_VARIANCE = (0.01 * 0.03 - 0.002 ** 2) / (0.01 + 0.03 - 2 * 0.002)


def test_dimension_mismatch_is_raised_by_both_variants():
    mean = np.array([0.01, 0.02, 0.03])
    cov = np.eye(2)
    with pytest.raises(DimensionMismatch):
        optimization.solve_max_return(mean, cov, 0.5)
    with pytest.raises(DimensionMismatch):
        optimization.solve_min_variance(mean, cov, 0.02)


def test_dimension_mismatch_is_a_value_error():
    with pytest.raises(ValueError):
        optimization.MinVariance(np.array([0.01, 0.02]), np.ones((1, 4)))
    with pytest.raises(ValueError):
        optimization.MaxReturn(np.array([]), np.zeros((0, 0)))


@pytest.mark.parametrize("max_variance", [0.02, 0.03, 0.05, 0.5])
def test_single_asset_max_return(max_variance):
    result = optimization.solve_max_return(np.array([0.05]), np.array([[0.02]]), max_variance)
    assert result.expected_return == pytest.approx(0.05, abs=1e-6)
    assert result.variance == pytest.approx(0.02, abs=1e-6)


@pytest.mark.parametrize("min_return", [-0.1, 0.0, 0.04, 0.05])
def test_single_asset_min_variance(min_return):
    ret, var = optimization.solve_min_variance(np.array([0.05]), np.array([[0.02]]), min_return)
    assert ret == pytest.approx(0.05, abs=1e-6)
    assert var == pytest.approx(0.02, abs=1e-6)


def test_max_return_reports_realised_variance_when_ceiling_is_slack():
    result = optimization.solve_max_return(MEAN, COV, 1.0)
    assert result.expected_return == pytest.approx(0.08, abs=1e-5)
    # All weight in the second asset; far below the requested ceiling.
    assert result.variance == pytest.approx(0.03, abs=1e-5)


def test_max_return_binding_ceiling():
    result = optimization.solve_max_return(MEAN, COV, 0.015)
    assert result.variance == pytest.approx(0.015, abs=1e-5)
    assert GMV_RETURN < result.expected_return < 0.08


def test_min_variance_reports_realised_return_when_floor_is_slack():
    result = optimization.solve_min_variance(MEAN, COV, 0.02)
    assert result.expected_return == pytest.approx(GMV_RETURN, abs=1e-5)
    assert result.expected_return > 0.02
    assert result.variance == pytest.approx(GMV_VARIANCE, abs=1e-6)


def test_min_variance_binding_floor():
    ret, var = optimization.solve_min_variance(MEAN, COV, 0.06)
    # w = [0.4, 0.6]
    assert ret == pytest.approx(0.06, abs=1e-6)
    assert var == pytest.approx(0.01336, abs=1e-6)


def test_dual_formulations_trace_the_same_frontier():
    ret, var = optimization.solve_min_variance(MEAN, COV, 0.06)
    assert ret == pytest.approx(0.06, abs=1e-6)

    dual_ret, dual_var = optimization.solve_max_return(MEAN, COV, var)
    assert dual_ret == pytest.approx(ret, abs=1e-4)
    assert dual_var == pytest.approx(var, abs=1e-5)


@pytest.mark.parametrize(
    "optimizer_cls, bound",
    [
        (optimization.MaxReturn, 0.012),
        (optimization.MaxReturn, 1.0),
        (optimization.MinVariance, None),
        (optimization.MinVariance, 0.07),
    ],
)
def test_weights_are_feasible(optimizer_cls, bound):
    mean = np.array([0.03, 0.06, 0.10])
    cov = np.array([[0.01, 0.002, 0.001], [0.002, 0.02, 0.004], [0.001, 0.004, 0.04]])
    w = optimizer_cls(mean, cov).solve_weights(bound)
    assert w.shape == (3,)
    assert np.isclose(np.sum(w), 1.0, atol=1e-6)
    assert np.all(w >= -1e-6)
    assert np.all(w <= 1 + 1e-6)


def test_solve_result_unpacks_as_pair():
    result = optimization.SolveResult(expected_return=0.05, variance=0.02)
    ret, var = result
    assert (ret, var) == (0.05, 0.02)
    assert tuple(result) == (0.05, 0.02)


def test_inputs_are_not_mutated():
    mean, cov = MEAN.copy(), COV.copy()
    optimization.solve_max_return(mean, cov, 0.02)
    optimization.solve_min_variance(mean, cov, 0.05)
    np.testing.assert_array_equal(mean, MEAN)
    np.testing.assert_array_equal(cov, COV)


def test_pandas_inputs_are_accepted():
    mean = pd.Series(MEAN, index=["Bonds", "Equity"])
    cov = pd.DataFrame(COV, index=mean.index, columns=mean.index)
    ret, _ = optimization.solve_min_variance(mean, cov, 0.06)
    assert ret == pytest.approx(0.06, abs=1e-6)


def test_negative_variance_ceiling_is_infeasible():
    with pytest.raises(SolveFailure) as excinfo:
        optimization.solve_max_return(MEAN, COV, -0.01)
    assert excinfo.value.status == "infeasible"
    assert excinfo.value.bound == -0.01


def test_variance_ceiling_below_minimum_variance_fails():
    with pytest.raises(SolveFailure) as excinfo:
        optimization.solve_max_return(MEAN, COV, GMV_VARIANCE / 2)
    assert excinfo.value.status != "optimal"


def test_return_floor_above_every_asset_fails():
    with pytest.raises(SolveFailure) as excinfo:
        optimization.solve_min_variance(MEAN, COV, 0.09)
    assert excinfo.value.status == "infeasible"
    assert isinstance(excinfo.value, RuntimeError)


@pytest.mark.parametrize("bound", [np.nan, np.inf, "0.05"])
def test_non_finite_bound_is_rejected(bound):
    with pytest.raises(ValueError):
        optimization.solve_min_variance(MEAN, COV, bound)
    with pytest.raises(ValueError):
        optimization.solve_max_return(MEAN, COV, bound)


def test_iteration_limit_surfaces_as_solve_failure():
    settings = SolverSettings(max_iters=1)
    with pytest.raises(SolveFailure) as excinfo:
        optimization.solve_min_variance(MEAN, COV, 0.06, settings=settings)
    assert excinfo.value.status == "unknown"


def test_solver_settings_validation():
    with pytest.raises(ValueError):
        SolverSettings(abstol=0.0)
    with pytest.raises(ValueError):
        SolverSettings(max_iters=0)
    options = SolverSettings(max_iters=50).to_options()
    assert options["maxiters"] == 50
    assert options["show_progress"] is False


def test_return_bounds():
    low, high = optimization.return_bounds(MEAN, COV)
    assert low == pytest.approx(GMV_RETURN, abs=1e-5)
    assert high == pytest.approx(0.08)


def test_covariance_that_cannot_be_factored_raises_solve_failure():
    indefinite = np.array([[1.0, 2.0], [2.0, 1.0]])
    with pytest.warns(RuntimeWarning):
        with pytest.raises(SolveFailure) as excinfo:
            optimization.solve_max_return(MEAN, indefinite, 0.5)
    assert excinfo.value.status == "error"
    assert isinstance(excinfo.value.__cause__, RuntimeError)


def test_return_bounds_accepts_pandas_inputs():
    mean = pd.Series(MEAN, index=["Bonds", "Equity"])
    cov = pd.DataFrame(COV, index=mean.index, columns=mean.index)
    low, high = optimization.return_bounds(mean, cov)
    assert low == pytest.approx(GMV_RETURN, abs=1e-5)
    assert high == pytest.approx(0.08)


def test_base_problem_has_no_formulation():
    with pytest.raises(NotImplementedError):
        optimization.Optimization(MEAN, COV).solve(0.05)
