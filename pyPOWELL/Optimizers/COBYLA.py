import logging
import numpy as np
from scipy.optimize import minimize as scipy_minimize
from ._optimizer import Optimizer, check_bounds, check_linear
from ._evaluator import EvaluationManager
from .._status import Status

logger = logging.getLogger(__name__)


class COBYLA(Optimizer):
    """
    Constrained Optimization BY Linear Approximations.

    The only engine handling nonlinear constraints. It evaluates
    ``calcfc(x) -> (f, nlconstr)`` where feasible points satisfy
    ``nlconstr <= 0``, together with bounds, linear inequalities and linear
    equalities.

    Parameters
    ----------
    calcfc : callable
        ``calcfc(x) -> (f, nlconstr)`` (``calcfc(x, data)`` when ``data`` is given).
    n : int
        Number of variables.
    m_nlcon : int, optional
        Length of ``nlconstr``.
    Aineq, bineq, Aeq, beq : array_like, optional
        Linear systems, see :class:`LINCOA`.
    xl, xu : array_like, optional
        Bounds of length ``n``.
    f0 : float, optional
        Objective value at the starting point if known (``nan`` otherwise).
    nlconstr0 : array_like, optional
        Constraint values at the starting point if known.
    ctol : float, optional
        Feasibility tolerance; ``nan`` selects the default.
    data, rhobeg, rhoend, ftarget, maxfun, iprint, callback
        See :class:`Optimizer`.

    Notes
    -----
    - The backend only handles inequalities, so each linear equality becomes
      two inequalities and every finite bound becomes one.
    - When ``f0`` (and ``nlconstr0`` if ``m_nlcon > 0``) are given, the first
      evaluation at the starting point reuses them instead of calling ``calcfc``.

    Examples
    --------
    >>> def calcfc(x):
    ...     return (x[0] - 5) ** 2 + (x[1] - 4) ** 2, [x[0] ** 2 - 9]
    >>> engine = COBYLA(calcfc, 2, m_nlcon=1)
    >>> x, nlconstr = np.zeros(2), np.zeros(1)
    >>> f, cstrv, nf, info = engine.solve(x, nlconstr)
    """
    def __init__(self, calcfc, n, m_nlcon=0, Aineq=None, bineq=None, Aeq=None, beq=None,
                 xl=None, xu=None, f0=np.nan, nlconstr0=None, ctol=np.nan, data=None,
                 rhobeg=np.nan, rhoend=np.nan, ftarget=-np.inf, maxfun=0, iprint=0, callback=None):
        super().__init__(calcfc, n, data=data, rhobeg=rhobeg, rhoend=rhoend,
                         ftarget=ftarget, maxfun=maxfun, iprint=iprint, callback=callback)
        self.m_nlcon = int(m_nlcon)
        self.Aineq, self.bineq = Aineq, bineq
        self.Aeq, self.beq = Aeq, beq
        self.xl, self.xu = xl, xu
        self.f0 = f0
        self.nlconstr0 = nlconstr0
        if not np.isnan(ctol):
            self.ctol = float(ctol)

    def solve(self, x, nlconstr=None):
        """
        Minimize from ``x`` and overwrite ``x`` with the solution.

        Parameters
        ----------
        x : ndarray
            Starting point, overwritten with the solution.
        nlconstr : ndarray, optional
            Buffer of length ``m_nlcon`` receiving the constraint values at the solution.

        Returns
        -------
        f : float
        cstrv : float
        nf : int
        info : int
        """
        info = self._check_start(x)
        if info != 0:
            return np.nan, 0.0, 0, info
        xl, xu, gap, info = check_bounds(self.name, self.xl, self.xu)
        if info != 0:
            return np.nan, 0.0, 0, info
        Aineq, bineq, info = check_linear(self.name, self.Aineq, self.bineq, equality=False)
        if info != 0:
            return np.nan, 0.0, 0, info
        Aeq, beq, info = check_linear(self.name, self.Aeq, self.beq, equality=True)
        if info != 0:
            return np.nan, 0.0, 0, info

        rhobeg, rhoend = self._revise_radii(gap)
        manager = EvaluationManager(self.fun, x, constrained=True, m_nlcon=self.m_nlcon,
                                    data=self.data, maxfun=self._revise_maxfun(self.n + 1),
                                    ftarget=self.ftarget, ctol=self.ctol, iprint=self.iprint,
                                    monitor=self.callback, n_init=self.n + 1,
                                    xl=xl, xu=xu, Aineq=Aineq, bineq=bineq, Aeq=Aeq, beq=beq,
                                    f0=self.f0, nlconstr0=self.nlconstr0)
        slack = self._slack(manager, xl, xu, Aineq, bineq, Aeq, beq)
        info = self._drive(x, manager, lambda m, x0: self._run(m, x0, slack, rhobeg, rhoend))

        _, f, cstrv, best_nlconstr = manager.best()
        if nlconstr is not None and self.m_nlcon > 0:
            nlconstr[:] = best_nlconstr
        return f, cstrv, manager.nf, info

    def _slack(self, manager, xl, xu, Aineq, bineq, Aeq, beq):
        """Build ``g(x) >= 0`` gathering every constraint, or None if there is none."""
        lower = None if xl is None else np.flatnonzero(np.isfinite(xl))
        upper = None if xu is None else np.flatnonzero(np.isfinite(xu))
        if (self.m_nlcon == 0 and Aineq is None and Aeq is None
                and (lower is None or lower.size == 0) and (upper is None or upper.size == 0)):
            return None

        def slack(x):
            parts = [-manager.nonlinear_constraints(x)]
            if Aineq is not None:
                parts.append(bineq - Aineq @ x)
            if Aeq is not None:
                residual = Aeq @ x - beq
                parts.extend([residual, -residual])
            if lower is not None:
                parts.append(x[lower] - xl[lower])
            if upper is not None:
                parts.append(xu[upper] - x[upper])
            return np.concatenate(parts)
        return slack

    def _run(self, manager, x0, slack, rhobeg, rhoend):
        constraints = () if slack is None else ({"type": "ineq", "fun": slack},)
        res = scipy_minimize(manager.objective, x0, method="COBYLA", constraints=constraints,
                             options={"rhobeg": rhobeg,
                                      "tol": rhoend,
                                      "maxiter": manager.maxfun,
                                      "catol": manager.ctol,
                                      "disp": False})
        logger.debug("COBYLA: scipy returned status %s (%s).", res.status, res.message)
        return cobyla_status(res.status)


# scipy runs COBYLA through PRIMA, whose exit codes are the Status values
def cobyla_status(code) -> Status:
    """Translate a scipy COBYLA exit code; unknown codes become ``DAMAGING_ROUNDING``."""
    try:
        return Status(code)
    except ValueError:
        return Status.DAMAGING_ROUNDING
