import logging
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from pyPOWELL import (Algorithm, Options, Problem, Result, Status, Verbosity, free_result,
                      is_success, minimize, status_to_string)
from ._functions import CountingFunction, quadratic, quadratic_with_constraint, rosenbrock


def test_bobyqa_active_upper_bound(problem, options, result):
    problem.xl = np.array([-1.0, -1.0])
    problem.xu = np.array([4.5, 4.5])
    options.rhoend = 1e-3
    options.maxfun = 200 * problem.n

    rc = minimize(Algorithm.BOBYQA, problem, options, result)

    assert is_success(rc)
    assert result.status == rc
    assert result.message == status_to_string(rc)
    assert abs(result.x[0] - 4.5) <= 2e-2
    assert abs(result.x[1] - 4.0) <= 2e-2
    assert result.cstrv == 0.0
    assert 0 < result.nf <= options.maxfun


@pytest.mark.parametrize("algorithm", [Algorithm.UOBYQA, Algorithm.NEWUOA])
def test_unconstrained(algorithm, problem, options, result):
    rc = minimize(algorithm, problem, options, result)

    assert is_success(rc)
    assert np.allclose(result.x, [5.0, 4.0], atol=1e-3)
    assert result.f == pytest.approx(0.0, abs=1e-6)
    assert result.cstrv == 0.0
    assert result.nlconstr is None


def test_x0_is_never_modified(problem, options, result):
    x0 = problem.x0.copy()
    minimize(Algorithm.NEWUOA, problem, options, result)
    assert np.array_equal(problem.x0, x0)
    assert not np.shares_memory(result.x, problem.x0)


def test_lincoa_inequality(problem, options, result):
    problem.m_ineq = 1
    problem.Aineq = np.array([[1.0, 1.0]])
    problem.bineq = np.array([7.0])

    rc = minimize(Algorithm.LINCOA, problem, options, result)

    assert is_success(rc)
    assert np.allclose(result.x, [4.0, 3.0], atol=1e-2)
    assert result.cstrv <= 1e-6


def test_lincoa_equality_and_bounds(problem, options, result):
    problem.m_eq = 1
    problem.Aeq = np.array([[1.0, -1.0]])
    problem.beq = np.array([0.0])
    problem.xl = np.array([0.0, 0.0])
    problem.xu = np.array([10.0, 10.0])

    rc = minimize(Algorithm.LINCOA, problem, options, result)

    assert is_success(rc)
    assert np.allclose(result.x, [4.5, 4.5], atol=1e-2)


def test_lincoa_drops_trivial_zero_rows(problem, options, result):
    problem.m_ineq = 2
    problem.Aineq = np.array([[0.0, 0.0], [1.0, 1.0]])
    problem.bineq = np.array([1.0, 7.0])

    rc = minimize(Algorithm.LINCOA, problem, options, result)

    assert is_success(rc)
    assert np.allclose(result.x, [4.0, 3.0], atol=1e-2)


def test_lincoa_zero_row_that_cannot_hold(problem, options, result):
    counter = CountingFunction(quadratic)
    problem.calfun = counter
    problem.m_ineq = 1
    problem.Aineq = np.array([[0.0, 0.0]])
    problem.bineq = np.array([-1.0])

    assert minimize(Algorithm.LINCOA, problem, options, result) == Status.ZERO_LINEAR_CONSTRAINT
    assert counter.calls == 0


def test_cobyla_nonlinear_constraint(constrained_problem, options, result):
    rc = minimize(Algorithm.COBYLA, constrained_problem, options, result)

    assert is_success(rc)
    assert np.allclose(result.x, [3.0, 4.0], atol=1e-2)
    assert result.nlconstr.shape == (1,)
    assert result.nlconstr[0] == pytest.approx(result.x[0] ** 2 - 9.0)
    assert result.cstrv < 1e-4


def test_cobyla_with_linear_constraints_and_bounds(options, result):
    problem = Problem(2)
    problem.x0 = np.zeros(2)
    problem.calcfc = lambda x: (quadratic(x), np.zeros(0))
    problem.m_ineq = 1
    problem.Aineq = np.array([[1.0, 1.0]])
    problem.bineq = np.array([7.0])
    problem.xl = np.array([-np.inf, -np.inf])
    problem.xu = np.array([3.5, np.inf])

    rc = minimize(Algorithm.COBYLA, problem, options, result)

    assert is_success(rc)
    assert np.allclose(result.x, [3.5, 3.5], atol=1e-2)
    assert result.nlconstr is None


def test_cobyla_uses_cached_starting_values(constrained_problem, options, result):
    counter = CountingFunction(quadratic_with_constraint)
    constrained_problem.calcfc = counter
    constrained_problem.f0, constrained_problem.nlconstr0 = quadratic_with_constraint(constrained_problem.x0)

    rc = minimize(Algorithm.COBYLA, constrained_problem, options, result)

    assert is_success(rc)
    assert counter.calls == result.nf - 1


def test_mismatch_evaluates_nothing(problem, options, result):
    counter = CountingFunction(quadratic_with_constraint)
    problem.calcfc = counter
    problem.m_nlcon = 1

    rc = minimize(Algorithm.NEWUOA, problem, options, result)

    assert rc == Status.PROBLEM_SOLVER_MISMATCH_NONLINEAR_CONSTRAINTS
    assert counter.calls == 0
    assert result.nf == 0
    assert result.x is None


def test_setup_errors_are_returned(problem, options, result):
    assert minimize(Algorithm.NEWUOA, None, options, result) == Status.NULL_PROBLEM
    assert minimize(Algorithm.NEWUOA, problem, None, result) == Status.NULL_OPTIONS
    assert minimize(Algorithm.NEWUOA, problem, options, None) == Status.NULL_RESULT
    problem.calfun = None
    assert minimize(Algorithm.NEWUOA, problem, options, result) == Status.NULL_FUNCTION


@pytest.mark.parametrize("algorithm", [-1, 5, 99])
def test_unknown_algorithm(algorithm, problem, options, result):
    counter = CountingFunction(quadratic)
    problem.calfun = counter
    assert minimize(algorithm, problem, options, result) == Status.INVALID_INPUT
    assert counter.calls == 0


def test_invalid_callback_is_invalid_input(problem, options, result):
    options.callback = 42
    assert minimize(Algorithm.NEWUOA, problem, options, result) == Status.INVALID_INPUT


def test_ftarget(problem, options, result):
    options.ftarget = 1.0
    rc = minimize(Algorithm.NEWUOA, problem, options, result)
    assert rc == Status.FTARGET_ACHIEVED
    assert result.f <= 1.0
    assert result.success


def test_maxfun(options, result):
    problem = Problem(2)
    problem.x0 = np.array([-1.2, 1.0])
    problem.calfun = rosenbrock
    options.maxfun = 10

    rc = minimize(Algorithm.NEWUOA, problem, options, result)

    assert rc == Status.MAXFUN_REACHED
    assert result.nf == 10
    assert result.f <= rosenbrock(problem.x0)
    assert not result.success


def test_default_budget_is_derived(problem, options, result):
    minimize(Algorithm.BOBYQA, problem, options, result)
    assert options.maxfun == 1000
    assert options.npt == 5


@pytest.mark.parametrize("algorithm", list(Algorithm))
def test_non_finite_starting_point(algorithm, options, result):
    counter = CountingFunction(quadratic)
    problem = Problem(2)
    problem.x0 = np.array([np.nan, 0.0])
    if algorithm == Algorithm.COBYLA:
        problem.calcfc = lambda x: (counter(x), np.zeros(0))
    else:
        problem.calfun = counter

    rc = minimize(algorithm, problem, options, result)

    assert rc == Status.NAN_INF_X
    assert counter.calls == 0
    assert result.nf == 0


def test_nan_objective(problem, options, result):
    problem.calfun = lambda x: np.nan
    rc = minimize(Algorithm.UOBYQA, problem, options, result)
    assert rc == Status.NAN_INF_F
    assert result.nf == 1


def test_crossed_bounds(problem, options, result):
    problem.xl = np.array([1.0, 1.0])
    problem.xu = np.array([0.0, 2.0])
    assert minimize(Algorithm.BOBYQA, problem, options, result) == Status.NO_SPACE_BETWEEN_BOUNDS
    assert result.nf == 0


def test_data_is_passed_to_the_objective(problem, options, result):
    seen = []

    def calfun(x, data):
        seen.append(data)
        return quadratic(x - data["shift"])

    problem.calfun = calfun
    options.data = {"shift": np.array([1.0, 1.0])}

    rc = minimize(Algorithm.NEWUOA, problem, options, result)

    assert is_success(rc)
    assert all(data is options.data for data in seen)
    assert np.allclose(result.x, [6.0, 5.0], atol=1e-3)


def test_result_can_be_reused(problem, options):
    result = Result()
    minimize(Algorithm.NEWUOA, problem, options, result)
    first = result.x
    minimize(Algorithm.UOBYQA, problem, options, result)
    assert result.x is not first
    free_result(result)
    free_result(result)


def test_exit_message_is_logged(problem, options, result, caplog):
    options.iprint = Verbosity.EXIT
    with caplog.at_level(logging.INFO, logger="pyPOWELL"):
        minimize(Algorithm.NEWUOA, problem, options, result)
    assert any("Number of function values" in record.getMessage() for record in caplog.records)


def test_out_of_range_npt_is_revised(problem, options, result, caplog):
    options.npt = 100
    with caplog.at_level(logging.WARNING, logger="pyPOWELL"):
        rc = minimize(Algorithm.NEWUOA, problem, options, result)
    assert is_success(rc)
    assert any("npt=100" in record.getMessage() for record in caplog.records)
    assert options.npt == 100


def test_independent_calls_in_threads():
    def solve(shift):
        problem = Problem(2)
        problem.x0 = np.zeros(2)
        problem.calfun = lambda x: quadratic(x - shift)
        result = Result()
        rc = minimize(Algorithm.NEWUOA, problem, Options(), result)
        x = result.x.copy()
        free_result(result)
        return rc, x

    shifts = [np.array([float(i), -float(i)]) for i in range(4)]
    with ThreadPoolExecutor(max_workers=4) as pool:
        outcomes = list(pool.map(solve, shifts))

    for shift, (rc, x) in zip(shifts, outcomes):
        assert is_success(rc)
        assert np.allclose(x, np.array([5.0, 4.0]) + shift, atol=1e-3)


def test_cobyla_infeasible_problem(problem, options, result):
    problem.calfun = None
    problem.calcfc = lambda x: (quadratic(x), np.array([x[0] ** 2 + 1.0]))
    problem.m_nlcon = 1

    rc = minimize(Algorithm.COBYLA, problem, options, result)

    assert rc == Status.SMALL_TR_RADIUS
    assert result.cstrv >= 1.0
    assert result.nlconstr[0] == pytest.approx(result.cstrv)
