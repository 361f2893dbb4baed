import logging
from typing import Optional
import numpy as np
from ._algorithms import BOUNDS, LINEAR_CONSTRAINTS, NONLINEAR_CONSTRAINTS, capabilities
from ._status import Status
from .Problem._problem import Problem
from .Problem._options import Options, MAXFUN_DIM_DFT

logger = logging.getLogger(__name__)


def check_problem(problem: Optional[Problem], options: Optional[Options], use_constr: bool, algorithm) -> int:
    """
    Check that ``problem`` and ``options`` can be solved by ``algorithm``.

    Checks run in a fixed order and the first failure is returned:

    1. nonlinear constraints given to an algorithm without that capability,
    2. linear constraints given to an algorithm without that capability,
    3. bounds given to an algorithm without that capability,
    4. missing options,
    5. missing starting point,
    6. missing evaluator (``calcfc`` if ``use_constr`` else ``calfun``),
    7. declared sizes disagreeing with the supplied arrays.

    On success ``options.maxfun`` and ``options.npt`` are given their defaults
    (``500 n`` and ``2 n + 1``) if they are 0. No other field is modified and
    no function is evaluated.

    Parameters
    ----------
    problem : Problem
    options : Options
    use_constr : bool
        Whether the algorithm evaluates ``calcfc`` instead of ``calfun``.
    algorithm : Algorithm or int
        Unknown identifiers are treated as having no capability.

    Returns
    -------
    int
        0 or a :class:`Status` code.
    """
    if problem is None:
        return Status.NULL_PROBLEM

    supported = capabilities(algorithm)
    if NONLINEAR_CONSTRAINTS not in supported and problem.has_nonlinear_constraints():
        return Status.PROBLEM_SOLVER_MISMATCH_NONLINEAR_CONSTRAINTS
    if LINEAR_CONSTRAINTS not in supported and problem.has_linear_constraints():
        return Status.PROBLEM_SOLVER_MISMATCH_LINEAR_CONSTRAINTS
    if BOUNDS not in supported and problem.has_bounds():
        return Status.PROBLEM_SOLVER_MISMATCH_BOUNDS

    if options is None:
        return Status.NULL_OPTIONS
    if problem.x0 is None:
        return Status.NULL_X0
    if (use_constr and problem.calcfc is None) or (not use_constr and problem.calfun is None):
        return Status.NULL_FUNCTION

    if not _dimensions_agree(problem):
        return Status.INVALID_INPUT

    if options.maxfun == 0:
        options.maxfun = MAXFUN_DIM_DFT * problem.n
    if options.npt == 0:
        options.npt = 2 * problem.n + 1
    return 0


def _dimensions_agree(problem: Problem) -> bool:
    n = problem.n
    if not isinstance(n, (int, np.integer)) or n <= 0:
        logger.debug("Invalid dimension n=%r.", n)
        return False
    if np.shape(problem.x0) != (n,):
        logger.debug("x0 has shape %s, expected (%d,).", np.shape(problem.x0), n)
        return False
    for name in ("xl", "xu"):
        bound = getattr(problem, name)
        if bound is not None and np.shape(bound) != (n,):
            logger.debug("%s has shape %s, expected (%d,).", name, np.shape(bound), n)
            return False
    return (_system_agrees(problem.m_ineq, problem.Aineq, problem.bineq, n, "ineq")
            and _system_agrees(problem.m_eq, problem.Aeq, problem.beq, n, "eq")
            and _vector_agrees(problem.m_nlcon, problem.nlconstr0, "nlconstr0"))


def _system_agrees(m, A, b, n, name) -> bool:
    if m < 0:
        return False
    if m == 0:
        if A is not None or b is not None:
            logger.debug("m_%s is 0 but the %s system is given.", name, name)
            return False
        return True
    if A is None or b is None or np.shape(A) != (m, n) or np.shape(b) != (m,):
        logger.debug("The %s system does not have %d rows and %d columns.", name, m, n)
        return False
    return True


def _vector_agrees(m, vector, name) -> bool:
    if m < 0:
        return False
    if vector is None:
        return True
    if np.shape(vector) != (m,):
        logger.debug("%s has shape %s, expected (%d,).", name, np.shape(vector), m)
        return False
    return True
