import logging
from typing import Callable, Optional
import numpy as np
from scipy.optimize import minimize as scipy_minimize
from ._evaluator import EngineStop, EvaluationManager
from .._monitor import Monitor
from .._status import Status, status_to_string
from ..Problem._options import Verbosity, MAXFUN_DIM_DFT, RHOBEG_DFT, RHOEND_DFT, CTOL_DFT, MAXTR_MUL

logger = logging.getLogger(__name__)

# scipy's COBYQA exit statuses (cobyqa.settings.ExitStatus)
_COBYQA_STATUS = {
    0: Status.SMALL_TR_RADIUS,       # RADIUS_SUCCESS
    1: Status.FTARGET_ACHIEVED,      # TARGET_SUCCESS
    2: Status.SMALL_TR_RADIUS,       # FIXED_SUCCESS
    3: Status.CALLBACK_TERMINATE,    # CALLBACK_SUCCESS
    4: Status.SMALL_TR_RADIUS,       # FEASIBLE_SUCCESS
    5: Status.MAXFUN_REACHED,        # MAX_EVAL_WARNING
    6: Status.MAXTR_REACHED,         # MAX_ITER_WARNING
    -1: Status.NO_SPACE_BETWEEN_BOUNDS,  # INFEASIBLE_ERROR
    -2: Status.DAMAGING_ROUNDING,    # LINALG_ERROR
}


class Optimizer:
    """
    Base class of the solver engines.

    An engine receives only the parameters its algorithm understands, runs
    synchronously and writes the solution into the array given to ``solve``.
    The numerical work is delegated to :func:`scipy.optimize.minimize`; all
    evaluations are routed through an :class:`EvaluationManager` so that the
    budget, the target, the monitor and non-finite values are handled the
    same way by every engine.

    Parameters
    ----------
    fun : callable
        Objective (``calcfc`` for COBYLA).
    n : int
        Number of variables.
    data : object, optional
        Opaque user context.
    rhobeg, rhoend : float, optional
        Initial and final trust-region radii; ``nan`` selects the default.
    ftarget : float, optional
        Target objective value.
    maxfun : int, optional
        Evaluation budget; 0 selects ``500 n``.
    iprint : Verbosity, optional
    callback : Monitor, optional
    """
    def __init__(self,
                 fun: Callable,
                 n: int,
                 data=None,
                 rhobeg: float = np.nan,
                 rhoend: float = np.nan,
                 ftarget: float = -np.inf,
                 maxfun: int = 0,
                 iprint: int = Verbosity.NONE,
                 callback: Optional[Monitor] = None):
        self.fun = fun
        self.n = int(n)
        self.data = data
        self.rhobeg = rhobeg
        self.rhoend = rhoend
        self.ftarget = ftarget
        self.maxfun = maxfun if maxfun > 0 else MAXFUN_DIM_DFT * self.n
        self.iprint = int(iprint)
        self.callback = callback
        self.ctol = CTOL_DFT

    def solve(self, x, *args, **kwargs):
        """Run the engine from ``x`` and overwrite ``x`` with the solution."""
        raise NotImplementedError("solve method must be implemented in subclasses.")

    @property
    def name(self) -> str:
        return type(self).__name__

    # ------------------------------------------------------------------ option revision
    def _revise_radii(self, gap: Optional[np.ndarray] = None):
        rhobeg, rhoend = self.rhobeg, self.rhoend
        if np.isnan(rhobeg) or rhobeg <= 0 or not np.isfinite(rhobeg):
            if not np.isnan(rhobeg):
                logger.warning("%s: invalid rhobeg=%g, using the default.", self.name, rhobeg)
            rhobeg = RHOBEG_DFT
            if gap is not None:
                finite = gap[np.isfinite(gap) & (gap > 0)]
                if finite.size:
                    rhobeg = min(rhobeg, 0.25 * float(finite.min()))
        if np.isnan(rhoend) or rhoend < 0 or not np.isfinite(rhoend):
            if not np.isnan(rhoend):
                logger.warning("%s: invalid rhoend=%g, using the default.", self.name, rhoend)
            rhoend = min(RHOEND_DFT, rhobeg)
        if rhoend > rhobeg:
            logger.warning("%s: rhoend=%g exceeds rhobeg=%g, setting rhoend=rhobeg.", self.name, rhoend, rhobeg)
            rhoend = rhobeg
        return float(rhobeg), float(rhoend)

    def _revise_npt(self, npt: int) -> int:
        low, high = self.n + 2, (self.n + 1) * (self.n + 2) // 2
        if npt < low or npt > high:
            revised = min(max(npt, low), high)
            logger.warning("%s: npt=%d is outside [%d, %d], using npt=%d.", self.name, npt, low, high, revised)
            return revised
        return npt

    def _revise_maxfun(self, n_init: int) -> int:
        if self.maxfun < n_init + 1:
            logger.warning("%s: maxfun=%d is too small, using maxfun=%d.", self.name, self.maxfun, n_init + 1)
            return n_init + 1
        return self.maxfun

    # ------------------------------------------------------------------ driver
    def _drive(self, x: np.ndarray, manager: EvaluationManager, run: Callable) -> int:
        """Run ``run(manager, x0)``, then copy the best point into ``x``."""
        x0 = x.copy()
        try:
            info = run(manager, x0)
        except EngineStop as stop:
            info = stop.info
        x_best, f, cstrv, nlconstr = manager.best()
        x[:] = x_best
        if self.iprint >= Verbosity.EXIT:
            logger.info("%s: %s. Number of function values = %d, least value of F = %.15g, "
                        "constraint violation = %.6g, X = %s",
                        self.name, status_to_string(info), manager.nf, f, cstrv, x)
        return info

    def _check_start(self, x: np.ndarray) -> int:
        if not np.all(np.isfinite(x)):
            logger.warning("%s: the starting point contains NaN or Inf.", self.name)
            return Status.NAN_INF_X
        return 0

    def _cobyqa(self, manager: EvaluationManager, x0: np.ndarray, rhobeg: float, rhoend: float,
                bounds=None, constraints=()) -> int:
        res = scipy_minimize(manager.objective, x0, method="COBYQA", bounds=bounds,
                             constraints=constraints,
                             options={"maxfev": manager.maxfun,
                                      "maxiter": MAXTR_MUL * manager.maxfun,
                                      "f_target": self.ftarget,
                                      "feasibility_tol": manager.ctol,
                                      "initial_tr_radius": rhobeg,
                                      "final_tr_radius": rhoend})
        logger.debug("%s: COBYQA returned status %s (%s).", self.name, res.status, res.message)
        return cobyqa_status(res.status)


def cobyqa_status(code) -> Status:
    """Translate a scipy COBYQA exit code; unknown codes become ``DAMAGING_ROUNDING``."""
    return _COBYQA_STATUS.get(int(code), Status.DAMAGING_ROUNDING)


def check_bounds(name: str, xl, xu):
    """Return ``(xl, xu, gap, info)`` with bounds as float arrays (or None)."""
    xl = None if xl is None else np.asarray(xl, dtype=float)
    xu = None if xu is None else np.asarray(xu, dtype=float)
    gap = None
    if xl is not None and xu is not None:
        gap = xu - xl
        if np.any(gap < 0):
            logger.warning("%s: some lower bounds exceed the upper bounds.", name)
            return xl, xu, gap, Status.NO_SPACE_BETWEEN_BOUNDS
    return xl, xu, gap, 0


def check_linear(name: str, A, b, equality: bool):
    """
    Drop linear constraints with a zero gradient that hold everywhere.

    Returns ``(A, b, info)``; ``A`` and ``b`` are None when no row remains,
    ``info`` is ``ZERO_LINEAR_CONSTRAINT`` if a zero row can never be satisfied.
    """
    if A is None:
        return None, None, 0
    A = np.asarray(A, dtype=float)
    b = np.asarray(b, dtype=float)
    zero = ~np.any(A != 0, axis=1)
    if np.any(zero):
        hopeless = (b[zero] != 0) if equality else (b[zero] < 0)
        if np.any(hopeless):
            logger.warning("%s: a linear constraint has a zero gradient and cannot be satisfied.", name)
            return A, b, Status.ZERO_LINEAR_CONSTRAINT
        logger.warning("%s: dropping %d linear constraint(s) with a zero gradient.", name, int(zero.sum()))
        A, b = A[~zero], b[~zero]
    if A.shape[0] == 0:
        return None, None, 0
    return A, b, 0
