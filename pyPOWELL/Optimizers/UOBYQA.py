import numpy as np
from ._optimizer import Optimizer
from ._evaluator import EvaluationManager


class UOBYQA(Optimizer):
    """
    Unconstrained Optimization BY Quadratic Approximation.

    Builds full quadratic models of the objective, so the initial sample has
    ``(n+1)(n+2)/2`` points. Accepts neither bounds nor constraints.

    Parameters
    ----------
    calfun : callable
        ``calfun(x) -> float`` (``calfun(x, data)`` when ``data`` is given).
    n : int
        Number of variables.
    data, rhobeg, rhoend, ftarget, maxfun, iprint, callback
        See :class:`Optimizer`.

    Examples
    --------
    >>> engine = UOBYQA(lambda x: (x[0] - 5) ** 2 + (x[1] - 4) ** 2, 2)
    >>> x = np.zeros(2)
    >>> f, nf, info = engine.solve(x)
    """
    def __init__(self, calfun, n, data=None, rhobeg=np.nan, rhoend=np.nan,
                 ftarget=-np.inf, maxfun=0, iprint=0, callback=None):
        super().__init__(calfun, n, data=data, rhobeg=rhobeg, rhoend=rhoend,
                         ftarget=ftarget, maxfun=maxfun, iprint=iprint, callback=callback)

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

        n_init = (self.n + 1) * (self.n + 2) // 2
        rhobeg, rhoend = self._revise_radii()
        manager = EvaluationManager(self.fun, x, data=self.data,
                                    maxfun=self._revise_maxfun(n_init),
                                    ftarget=self.ftarget, ctol=self.ctol, iprint=self.iprint,
                                    monitor=self.callback, n_init=n_init)
        info = self._drive(x, manager, lambda m, x0: self._cobyqa(m, x0, rhobeg, rhoend))
        return manager.f_best, manager.nf, info
