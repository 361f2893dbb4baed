import logging
from typing import Callable, Optional
import numpy as np
from .._monitor import Monitor, Report
from .._status import Status, status_to_string
from ..Problem._options import Verbosity

logger = logging.getLogger(__name__)


class EngineStop(Exception):
    """Raised from inside an evaluation to unwind the backend solver."""
    def __init__(self, info: int):
        super().__init__(status_to_string(info))
        self.info = info


class EvaluationManager:
    """
    Single gateway between a backend solver and the user functions.

    Every point requested by the backend goes through :meth:`evaluate`, which
    counts evaluations, keeps the best point, emits monitor reports and
    raises :class:`EngineStop` when the solve must end.

    Parameters
    ----------
    fun : callable
        ``calfun`` or, if ``constrained``, ``calcfc``.
    x0 : ndarray
        Starting point, used to recognise the cached evaluation.
    constrained : bool, optional
        Whether ``fun`` returns ``(f, nlconstr)``.
    m_nlcon : int, optional
        Expected length of ``nlconstr``.
    data : object, optional
        Passed to ``fun`` as a second argument when not None.
    maxfun : int
        Evaluation budget.
    ftarget : float, optional
        Target objective value.
    ctol : float
        Feasibility tolerance.
    iprint : Verbosity, optional
    monitor : Monitor, optional
    n_init : int, optional
        Size of the initial sample; reports count iterations after it.
    xl, xu, Aineq, bineq, Aeq, beq : ndarray, optional
        Constraints entering the violation measure.
    f0 : float, optional
        Cached objective value at ``x0`` (``nan`` if unknown).
    nlconstr0 : ndarray, optional
        Cached constraint values at ``x0``.
    """
    def __init__(self,
                 fun: Callable,
                 x0: np.ndarray,
                 constrained: bool = False,
                 m_nlcon: int = 0,
                 data=None,
                 maxfun: int = 1,
                 ftarget: float = -np.inf,
                 ctol: float = 0.0,
                 iprint: int = Verbosity.NONE,
                 monitor: Optional[Monitor] = None,
                 n_init: int = 0,
                 xl=None, xu=None,
                 Aineq=None, bineq=None,
                 Aeq=None, beq=None,
                 f0: float = np.nan,
                 nlconstr0=None):
        self.fun = fun
        self.x0 = np.array(x0, dtype=float)
        self.constrained = constrained
        self.m_nlcon = m_nlcon if constrained else 0
        self.args = () if data is None else (data,)
        self.data = data
        self.maxfun = maxfun
        self.ftarget = ftarget
        self.ctol = ctol
        self.iprint = iprint
        self.monitor = monitor
        self.n_init = n_init

        self.xl = xl
        self.xu = xu
        self.Aineq, self.bineq = Aineq, bineq
        self.Aeq, self.beq = Aeq, beq

        self.f0 = f0
        self.nlconstr0 = None if nlconstr0 is None else np.array(nlconstr0, dtype=float)
        self._use_cache = not np.isnan(f0) and (self.m_nlcon == 0 or self.nlconstr0 is not None)

        self.nf = 0
        self.x_best = self.x0.copy()
        self.f_best = np.nan
        self.cstrv_best = np.inf
        self.nlconstr_best = np.zeros(self.m_nlcon)
        self._has_best = False

        self._last_x = None
        self._last = None

    # ------------------------------------------------------------------ evaluation
    def evaluate(self, x):
        """Return ``(f, nlconstr)`` at ``x``, evaluating the user function at most once per point."""
        x = np.array(x, dtype=float)
        if self._last_x is not None and np.array_equal(x, self._last_x):
            return self._last

        if self.nf == 0 and self._use_cache and np.array_equal(x, self.x0):
            f, nlconstr = float(self.f0), self.nlconstr0.copy() if self.m_nlcon > 0 else np.zeros(0)
        else:
            f, nlconstr = self._call(x)
        self.nf += 1
        cstrv = self.violation(x, nlconstr)

        self._last_x, self._last = x, (f, nlconstr)
        self._record(x, f, cstrv, nlconstr)
        self._check_exit(f, cstrv, nlconstr)
        return f, nlconstr

    def objective(self, x) -> float:
        return self.evaluate(x)[0]

    def nonlinear_constraints(self, x) -> np.ndarray:
        return self.evaluate(x)[1]

    def _call(self, x):
        if self.constrained:
            f, nlconstr = self.fun(x.copy(), *self.args)
            nlconstr = np.asarray(nlconstr, dtype=float).reshape(-1)
            if nlconstr.shape[0] != self.m_nlcon:
                raise ValueError(f"calcfc returned {nlconstr.shape[0]} constraint values, "
                                 f"expected m_nlcon={self.m_nlcon}.")
        else:
            f = self.fun(x.copy(), *self.args)
            nlconstr = np.zeros(0)
        return float(f), nlconstr

    def violation(self, x, nlconstr) -> float:
        """Maximal violation of bounds, linear and nonlinear constraints at ``x`` (at least 0)."""
        parts = [np.zeros(1), nlconstr]
        if self.xl is not None:
            parts.append(self.xl - x)
        if self.xu is not None:
            parts.append(x - self.xu)
        if self.Aineq is not None:
            parts.append(self.Aineq @ x - self.bineq)
        if self.Aeq is not None:
            parts.append(np.abs(self.Aeq @ x - self.beq))
        return float(np.max(np.concatenate(parts)))

    # ------------------------------------------------------------------ best point
    def _is_better(self, f, cstrv) -> bool:
        if not self._has_best:
            return True
        if np.isnan(f) or np.isnan(cstrv):
            return False
        feasible = cstrv <= self.ctol
        best_feasible = self.cstrv_best <= self.ctol
        if feasible != best_feasible:
            return feasible
        if feasible:
            return f < self.f_best or np.isnan(self.f_best)
        return cstrv < self.cstrv_best or (cstrv == self.cstrv_best and f < self.f_best)

    def _record(self, x, f, cstrv, nlconstr):
        if self.iprint >= Verbosity.FEVL:
            logger.info("Function number %d    F = %.15g    CSTRV = %.6g    X = %s", self.nf, f, cstrv, x)
        if self._is_better(f, cstrv):
            self.x_best = x.copy()
            self.f_best = f
            self.cstrv_best = cstrv
            self.nlconstr_best = nlconstr.copy()
            self._has_best = True
            if self.iprint >= Verbosity.RHO:
                logger.info("New best point after %d evaluations: F = %.15g, CSTRV = %.6g",
                            self.nf, f, cstrv)

    # ------------------------------------------------------------------ termination
    def _check_exit(self, f, cstrv, nlconstr):
        if np.isnan(f) or np.isposinf(f) or np.any(np.isnan(nlconstr)):
            raise EngineStop(Status.NAN_INF_F)

        if self.monitor is not None:
            report = Report(self.x_best, self.f_best, self.nf, max(self.nf - self.n_init, 0),
                            self.cstrv_best, self.nlconstr_best, self.data)
            self.monitor.report(report)
            if report.terminate:
                raise EngineStop(Status.CALLBACK_TERMINATE)

        if f <= self.ftarget and cstrv <= self.ctol:
            raise EngineStop(Status.FTARGET_ACHIEVED)
        if self.nf >= self.maxfun:
            raise EngineStop(Status.MAXFUN_REACHED)

    def best(self):
        """Return ``(x, f, cstrv, nlconstr)`` of the best point evaluated so far."""
        cstrv = self.cstrv_best if self._has_best else 0.0
        return self.x_best.copy(), self.f_best, cstrv, self.nlconstr_best.copy()
