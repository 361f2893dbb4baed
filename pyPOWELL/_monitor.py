from typing import Callable, Optional, Union
import numpy as np


class Report:
    """
    One progress event emitted by a solver engine.

    Attributes
    ----------
    x : ndarray
        Best point so far (read-only copy).
    f : float
        Objective value at ``x``.
    nf : int
        Number of evaluations so far.
    tr : int
        Number of iterations performed after the initial sample.
    cstrv : float
        Constraint violation at ``x`` (0 for unconstrained engines).
    nlconstr : ndarray
        Nonlinear constraint values at ``x`` (read-only copy, empty if none).
    data : object
        The opaque user context from the options.
    terminate : bool
        Set to True to ask the engine to stop. Starts False on every event.
    """
    __slots__ = ("x", "f", "nf", "tr", "cstrv", "nlconstr", "data", "terminate")

    def __init__(self, x, f, nf, tr, cstrv=0.0, nlconstr=None, data=None):
        self.x = _frozen(x)
        self.f = float(f)
        self.nf = int(nf)
        self.tr = int(tr)
        self.cstrv = float(cstrv)
        self.nlconstr = _frozen(np.empty(0) if nlconstr is None else nlconstr)
        self.data = data
        self.terminate = False


def _frozen(array):
    array = np.array(array, dtype=float)
    array.setflags(write=False)
    return array


class Monitor:
    """
    Observer of the optimization progress.

    Subclasses implement :meth:`report`. The monitor is called synchronously,
    on the solving thread, after every evaluation. It may only observe the
    report and set ``report.terminate``; the engine then stops at once and
    the solve returns ``Status.CALLBACK_TERMINATE``.

    Examples
    --------
    >>> class StopAfter(Monitor):
    ...     def __init__(self, budget):
    ...         self.budget = budget
    ...     def report(self, report):
    ...         report.terminate = report.nf >= self.budget
    """
    def report(self, report: Report):
        raise NotImplementedError("report method must be implemented in subclasses.")


class CallbackMonitor(Monitor):
    """
    Monitor wrapping a plain function.

    Parameters
    ----------
    callback : callable
        ``callback(x, f, nf, tr, cstrv, nlconstr)``. A truthy return value
        requests termination.
    """
    def __init__(self, callback: Callable):
        self.callback = callback

    def report(self, report: Report):
        if self.callback(report.x, report.f, report.nf, report.tr, report.cstrv, report.nlconstr):
            report.terminate = True


def as_monitor(callback: Optional[Union[Monitor, Callable]]) -> Optional[Monitor]:
    """Return ``callback`` as a :class:`Monitor` (None stays None)."""
    if callback is None or isinstance(callback, Monitor):
        return callback
    if not callable(callback):
        raise TypeError(f"callback must be a Monitor or a callable, got {type(callback).__name__}")
    return CallbackMonitor(callback)
