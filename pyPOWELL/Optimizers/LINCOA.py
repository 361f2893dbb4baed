import numpy as np
from scipy.optimize import Bounds, LinearConstraint
from ._optimizer import Optimizer, check_bounds, check_linear
from ._evaluator import EvaluationManager


class LINCOA(Optimizer):
    """
    LINearly Constrained Optimization Algorithm.

    Quadratic models interpolated from ``npt`` points, subject to bounds,
    linear inequalities ``Aineq @ x <= bineq`` and linear equalities
    ``Aeq @ x == beq``.

    Parameters
    ----------
    calfun : callable
        ``calfun(x) -> float`` (``calfun(x, data)`` when ``data`` is given).
    n : int
        Number of variables.
    Aineq, bineq : array_like, optional
        Inequality system with shapes ``(m_ineq, n)`` and ``(m_ineq,)``.
    Aeq, beq : array_like, optional
        Equality system with shapes ``(m_eq, n)`` and ``(m_eq,)``.
    xl, xu : array_like, optional
        Bounds of length ``n``.
    npt : int, optional
        Interpolation set size in ``[n+2, (n+1)(n+2)/2]``; 0 selects ``2n+1``.
    ctol : float, optional
        Feasibility tolerance; ``nan`` selects the default.
    data, rhobeg, rhoend, ftarget, maxfun, iprint, callback
        See :class:`Optimizer`.

    Notes
    -----
    Constraint rows with a zero gradient are dropped when they hold for every
    ``x``; otherwise the solve ends with ``Status.ZERO_LINEAR_CONSTRAINT``.
    """
    def __init__(self, calfun, n, Aineq=None, bineq=None, Aeq=None, beq=None, xl=None, xu=None,
                 npt=0, ctol=np.nan, data=None, rhobeg=np.nan, rhoend=np.nan,
                 ftarget=-np.inf, maxfun=0, iprint=0, callback=None):
        super().__init__(calfun, n, data=data, rhobeg=rhobeg, rhoend=rhoend,
                         ftarget=ftarget, maxfun=maxfun, iprint=iprint, callback=callback)
        self.Aineq, self.bineq = Aineq, bineq
        self.Aeq, self.beq = Aeq, beq
        self.xl, self.xu = xl, xu
        self.npt = self._revise_npt(npt if npt > 0 else 2 * self.n + 1)
        if not np.isnan(ctol):
            self.ctol = float(ctol)

    def solve(self, x):
        """
        Minimize from ``x`` and overwrite ``x`` with the solution.

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

        constraints = []
        if Aineq is not None:
            constraints.append(LinearConstraint(Aineq, -np.inf, bineq))
        if Aeq is not None:
            constraints.append(LinearConstraint(Aeq, beq, beq))
        bounds = None
        if xl is not None or xu is not None:
            bounds = Bounds(np.full(self.n, -np.inf) if xl is None else xl,
                            np.full(self.n, np.inf) if xu is None else xu)

        rhobeg, rhoend = self._revise_radii(gap)
        manager = EvaluationManager(self.fun, x, data=self.data,
                                    maxfun=self._revise_maxfun(self.npt),
                                    ftarget=self.ftarget, ctol=self.ctol, iprint=self.iprint,
                                    monitor=self.callback, n_init=self.npt,
                                    xl=xl, xu=xu, Aineq=Aineq, bineq=bineq, Aeq=Aeq, beq=beq)
        info = self._drive(x, manager,
                           lambda m, x0: self._cobyqa(m, x0, rhobeg, rhoend,
                                                      bounds=bounds, constraints=constraints))
        _, f, cstrv, _ = manager.best()
        return f, cstrv, manager.nf, info
