"""pyPOWELL public package.

This package exposes one entry point to five derivative-free trust-region
methods in the tradition of M. J. D. Powell: UOBYQA and NEWUOA (unconstrained),
BOBYQA (bounds), LINCOA (bounds and linear constraints) and COBYLA (bounds,
linear and nonlinear constraints). A problem is described once, checked
against the capabilities of the chosen algorithm and handed to the matching
solver engine.

Examples
--------
>>> from pyPOWELL import Algorithm, Result, init_problem, init_options, minimize, free_result
>>> problem = init_problem(2)
>>> problem.x0 = [0.0, 0.0]
>>> problem.calfun = lambda x: (x[0] - 5) ** 2 + (x[1] - 4) ** 2
>>> problem.xl, problem.xu = [-1.0, -1.0], [4.5, 4.5]
>>> result = Result()
>>> rc = minimize(Algorithm.BOBYQA, problem, init_options(), result)
>>> print(result.x, result.message)
>>> free_result(result)
"""

from ._algorithms import Algorithm, CAPABILITIES, BOUNDS, LINEAR_CONSTRAINTS, NONLINEAR_CONSTRAINTS
from ._status import Status, status_to_string, is_success
from ._monitor import Monitor, CallbackMonitor, Report
from ._result import Result, create_result, free_result
from ._validate import check_problem
from ._minimize import minimize
from .Problem import Problem, Options, Verbosity, init_problem, init_options, reset_problem, reset_options
