import numpy as np
from scipy.optimize import Bounds
from ._optimizer import Optimizer, check_bounds
from ._evaluator import EvaluationManager


class BOBYQA(Optimizer):
    """
    Bound Optimization BY Quadratic Approximation.

    Like :class:`NEWUOA` with simple bounds ``xl <= x <= xu``. Every point
    evaluated respects the bounds, so the violation is always 0.

    Parameters
    ----------
    calfun : callable
        ``calfun(x) -> float`` (``calfun(x, data)`` when ``data`` is given).
    n : int
        Number of variables.
    xl, xu : array_like, optional
        Bounds of length ``n``; None or infinite entries mean unbounded.
    npt : int, optional
        Interpolation set size in ``[n+2, (n+1)(n+2)/2]``; 0 selects ``2n+1``.
    data, rhobeg, rhoend, ftarget, maxfun, iprint, callback
        See :class:`Optimizer`.

    Notes
    -----
    - The default ``rhobeg`` is capped at a quarter of the smallest gap
      ``xu - xl`` so the initial sample stays inside the box.
    - ``xl > xu`` in any coordinate ends the solve with
      ``Status.NO_SPACE_BETWEEN_BOUNDS`` before any evaluation.

    Examples
    --------
    >>> engine = BOBYQA(fun, 2, xl=[-1, -1], xu=[4.5, 4.5], rhoend=1e-3)
    >>> x = np.zeros(2)
    >>> f, nf, info = engine.solve(x)
    """
    def __init__(self, calfun, n, xl=None, xu=None, npt=0, data=None, rhobeg=np.nan,
                 rhoend=np.nan, ftarget=-np.inf, maxfun=0, iprint=0, callback=None):
        super().__init__(calfun, n, data=data, rhobeg=rhobeg, rhoend=rhoend,
                         ftarget=ftarget, maxfun=maxfun, iprint=iprint, callback=callback)
        self.xl = xl
        self.xu = xu
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
        xl, xu, gap, info = check_bounds(self.name, self.xl, self.xu)
        if info != 0:
            return np.nan, 0, info

        rhobeg, rhoend = self._revise_radii(gap)
        lb = np.full(self.n, -np.inf) if xl is None else xl
        ub = np.full(self.n, np.inf) if xu is None else xu
        manager = EvaluationManager(self.fun, x, data=self.data,
                                    maxfun=self._revise_maxfun(self.npt),
                                    ftarget=self.ftarget, ctol=self.ctol, iprint=self.iprint,
                                    monitor=self.callback, n_init=self.npt)
        info = self._drive(x, manager,
                           lambda m, x0: self._cobyqa(m, x0, rhobeg, rhoend, bounds=Bounds(lb, ub)))
        return manager.f_best, manager.nf, info
