from enum import IntEnum
from typing import Optional
import numpy as np
from .._status import Status

MAXFUN_DIM_DFT = 500
RHOBEG_DFT = 1.0
RHOEND_DFT = 1e-6
CTOL_DFT = float(np.sqrt(np.finfo(float).eps))
MAXTR_MUL = 10


class Verbosity(IntEnum):
    """Amount of progress information logged during a solve."""
    NONE = 0
    EXIT = 1
    RHO = 2
    FEVL = 3


class Options:
    """
    Algorithmic options shared by all engines.

    Fields left at their sentinel value are derived later: ``maxfun`` and
    ``npt`` by the validator, the radii and ``ctol`` by the solver engine.

    Attributes
    ----------
    rhobeg : float
        Initial trust-region radius. ``nan`` selects the engine default.
    rhoend : float
        Final trust-region radius. ``nan`` selects the engine default.
    maxfun : int
        Evaluation budget. 0 selects ``MAXFUN_DIM_DFT * n``.
    npt : int
        Interpolation set size for NEWUOA, BOBYQA and LINCOA. 0 selects ``2n + 1``.
    ftarget : float
        Stop as soon as a (feasible) point with ``f <= ftarget`` is found.
        Default ``-inf`` (never).
    iprint : Verbosity
        Logging verbosity. Has no influence on the iterates.
    ctol : float
        Feasibility tolerance. ``nan`` selects ``CTOL_DFT``.
    data : object
        Opaque user context passed unchanged to the evaluators and the monitor.
    callback : Monitor or callable or None
        Progress monitor, see :mod:`pyPOWELL._monitor`.
    """
    def __init__(self):
        reset_options(self)

    def __repr__(self):
        return (f"Options(rhobeg={self.rhobeg}, rhoend={self.rhoend}, maxfun={self.maxfun}, "
                f"npt={self.npt}, ftarget={self.ftarget}, iprint={self.iprint!r})")


def reset_options(options: Optional[Options]) -> int:
    """
    Put ``options`` back into its sentinel state.

    Returns
    -------
    int
        0 on success, ``Status.NULL_OPTIONS`` if ``options`` is None.
    """
    if options is None:
        return Status.NULL_OPTIONS

    options.rhobeg = np.nan
    options.rhoend = np.nan
    options.maxfun = 0
    options.npt = 0
    options.ftarget = -np.inf
    options.iprint = Verbosity.NONE
    options.ctol = np.nan
    options.data = None
    options.callback = None
    return 0


def init_options() -> Options:
    """Return a new :class:`Options` in its sentinel state."""
    return Options()
