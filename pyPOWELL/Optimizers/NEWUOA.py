import numpy as np
from ._optimizer import Optimizer
from ._evaluator import EvaluationManager


class NEWUOA(Optimizer):
    """
    NEW Unconstrained Optimization Algorithm.

    Quadratic models are interpolated from ``npt`` points, which may be far
    fewer than a full quadratic needs. Accepts neither bounds nor constraints.

    Parameters
    ----------
    calfun : callable
        ``calfun(x) -> float`` (``calfun(x, data)`` when ``data`` is given).
    n : int
        Number of variables.
    npt : int, optional
        Interpolation set size in ``[n+2, (n+1)(n+2)/2]``; 0 selects ``2n+1``.
    data, rhobeg, rhoend, ftarget, maxfun, iprint, callback
        See :class:`Optimizer`.
    """
    def __init__(self, calfun, n, npt=0, data=None, rhobeg=np.nan, rhoend=np.nan,
                 ftarget=-np.inf, maxfun=0, iprint=0, callback=None):
        super().__init__(calfun, n, data=data, rhobeg=rhobeg, rhoend=rhoend,
                         ftarget=ftarget, maxfun=maxfun, iprint=iprint, callback=callback)
        self.npt = self._revise_npt(npt if npt > 0 else 2 * self.n + 1)

    def solve(self, x):
        """
        Minimize from ``x`` and overwrite ``x`` with the solution.

        Returns
        -------
        f : float
        nf : int
        info : int
        """
        info = self._check_start(x)
        if info != 0:
            return np.nan, 0, info

        rhobeg, rhoend = self._revise_radii()
        manager = EvaluationManager(self.fun, x, data=self.data,
                                    maxfun=self._revise_maxfun(self.npt),
                                    ftarget=self.ftarget, ctol=self.ctol, iprint=self.iprint,
                                    monitor=self.callback, n_init=self.npt)
        info = self._drive(x, manager, lambda m, x0: self._cobyqa(m, x0, rhobeg, rhoend))
        return manager.f_best, manager.nf, info
