import numpy as np
import pytest

from pyPOWELL import Options, Problem, Result, free_result
from ._functions import quadratic, quadratic_with_constraint


@pytest.fixture
def problem():
    problem = Problem(2)
    problem.x0 = np.zeros(2)
    problem.calfun = quadratic
    return problem


@pytest.fixture
def constrained_problem():
    problem = Problem(2)
    problem.x0 = np.zeros(2)
    problem.calcfc = quadratic_with_constraint
    problem.m_nlcon = 1
    return problem


@pytest.fixture
def options():
    return Options()


@pytest.fixture
def result():
    result = Result()
    yield result
    free_result(result)
