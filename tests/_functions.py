import numpy as np


def quadratic(x):
    return (x[0] - 5.0) ** 2 + (x[1] - 4.0) ** 2


def quadratic_with_constraint(x):
    return quadratic(x), np.array([x[0] ** 2 - 9.0])


def rosenbrock(x):
    return 100.0 * (x[1] - x[0] ** 2) ** 2 + (1.0 - x[0]) ** 2


class CountingFunction:
    """Wrap an evaluator and count calls."""

    def __init__(self, fun):
        self.fun = fun
        self.calls = 0

    def __call__(self, x, *args):
        self.calls += 1
        return self.fun(x)
