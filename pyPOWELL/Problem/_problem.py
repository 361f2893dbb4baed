from typing import Optional
import numpy as np
from .._status import Status


class Problem:
    """
    Description of an optimization problem shared by all algorithms.

    A problem is created in a sentinel state for a fixed dimension ``n`` and
    then populated by the caller. Every field that is not needed stays ``None``
    (or 0 for the counts). The solve never writes to a problem and never keeps
    a reference to it after :func:`pyPOWELL.minimize` returns.

    Parameters
    ----------
    n : int
        Number of variables. Fixed for the lifetime of the problem.

    Attributes
    ----------
    n : int
        Number of variables.
    x0 : array_like or None
        Starting point of length ``n``. Required. Never mutated.
    calfun : callable or None
        Objective ``calfun(x) -> float`` for the algorithms without nonlinear
        constraints.
    calcfc : callable or None
        Objective and constraints ``calcfc(x) -> (f, nlconstr)`` for COBYLA.
        ``nlconstr`` has length ``m_nlcon``; feasible points have ``nlconstr <= 0``.
    xl, xu : array_like or None
        Lower and upper bounds of length ``n``; ``-inf``/``inf`` entries are unbounded.
    m_ineq : int
        Number of linear inequality constraints ``Aineq @ x <= bineq``.
    Aineq, bineq : array_like or None
        Matrix of shape ``(m_ineq, n)`` and vector of length ``m_ineq``.
    m_eq : int
        Number of linear equality constraints ``Aeq @ x == beq``.
    Aeq, beq : array_like or None
        Matrix of shape ``(m_eq, n)`` and vector of length ``m_eq``.
    m_nlcon : int
        Number of nonlinear constraints returned by ``calcfc``.
    f0 : float
        Objective value at ``x0`` if already known, ``nan`` otherwise.
    nlconstr0 : array_like or None
        Nonlinear constraint values at ``x0`` if already known.

    Notes
    -----
    - Presence and declared size must agree: ``m_ineq == 0`` means ``Aineq`` and
      ``bineq`` are ``None``, and the same holds for the other counts.
    - When ``options.data`` is set, it is passed as a second positional argument
      to ``calfun``/``calcfc``.

    Examples
    --------
    >>> problem = Problem(2)
    >>> problem.x0 = [0.0, 0.0]
    >>> problem.calfun = lambda x: (x[0] - 5) ** 2 + (x[1] - 4) ** 2
    >>> problem.xl, problem.xu = [-1.0, -1.0], [4.5, 4.5]
    """
    def __init__(self, n: int):
        reset_problem(self, n)

    def has_bounds(self) -> bool:
        return self.xl is not None or self.xu is not None

    def has_linear_constraints(self) -> bool:
        return (self.m_ineq > 0 or self.m_eq > 0
                or self.Aineq is not None or self.bineq is not None
                or self.Aeq is not None or self.beq is not None)

    def has_nonlinear_constraints(self) -> bool:
        return self.calcfc is not None or self.nlconstr0 is not None or self.m_nlcon > 0

    def __repr__(self):
        return (f"Problem(n={self.n}, m_ineq={self.m_ineq}, m_eq={self.m_eq}, "
                f"m_nlcon={self.m_nlcon}, bounds={self.has_bounds()})")


def reset_problem(problem: Optional[Problem], n: int) -> int:
    """
    Put ``problem`` back into its sentinel state for dimension ``n``.

    Returns
    -------
    int
        0 on success, ``Status.NULL_PROBLEM`` if ``problem`` is None.
    """
    if problem is None:
        return Status.NULL_PROBLEM

    problem.n = n
    problem.x0 = None
    problem.calfun = None
    problem.calcfc = None
    problem.xl = None
    problem.xu = None
    problem.m_ineq = 0
    problem.Aineq = None
    problem.bineq = None
    problem.m_eq = 0
    problem.Aeq = None
    problem.beq = None
    problem.m_nlcon = 0
    problem.f0 = np.nan
    problem.nlconstr0 = None
    return 0


def init_problem(n: int) -> Problem:
    """Return a new :class:`Problem` of dimension ``n`` in its sentinel state."""
    return Problem(n)
