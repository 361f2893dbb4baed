import logging
from typing import Optional
import numpy as np
from ._status import Status, is_success
from .Problem._problem import Problem

logger = logging.getLogger(__name__)


class Result:
    """
    Outcome of :func:`pyPOWELL.minimize`.

    The result owns its buffers. They are created by :func:`create_result`
    (called by ``minimize``) and dropped by :func:`free_result`, after which
    the result can be released again without effect.

    Attributes
    ----------
    x : ndarray or None
        Solution, independent of ``problem.x0``.
    f : float
        Objective value at ``x``.
    cstrv : float
        Constraint violation at ``x``; 0 for BOBYQA, NEWUOA and UOBYQA.
    nlconstr : ndarray or None
        Nonlinear constraint values at ``x``; present only if ``m_nlcon > 0``.
    nf : int
        Number of evaluations.
    status : int
        A :class:`Status` code.
    message : str or None
        Message of ``status`` (shared, static string).
    """
    def __init__(self):
        self.x = None
        self.f = 0.0
        self.cstrv = 0.0
        self.nlconstr = None
        self._m_nlcon = 0
        self.nf = 0
        self.status = Status.RC_DFT
        self.message = None

    @property
    def success(self) -> bool:
        return is_success(self.status)

    def __repr__(self):
        return (f"Result(x={self.x}, f={self.f}, cstrv={self.cstrv}, nf={self.nf}, "
                f"status={self.status}, message={self.message!r})")


def create_result(result: Optional[Result], problem: Optional[Problem]) -> int:
    """
    Allocate the buffers of ``result`` for ``problem``.

    ``result.x`` starts as a copy of ``problem.x0`` and ``result.nlconstr`` as
    zeros of length ``problem.m_nlcon`` when that count is positive.

    Returns
    -------
    int
        0 on success; ``NULL_RESULT``, ``NULL_PROBLEM`` or ``NULL_X0`` when an
        input is missing; ``INVALID_INPUT`` if ``x0`` does not have ``n``
        entries; ``MEMORY_ALLOCATION_FAILS`` if an allocation fails.
        In the last case the buffers created so far stay attached to
        ``result`` and :func:`free_result` remains safe.
    """
    if result is None:
        return Status.NULL_RESULT
    Result.__init__(result)
    if problem is None:
        return Status.NULL_PROBLEM
    if problem.x0 is None:
        return Status.NULL_X0

    try:
        x = np.array(problem.x0, dtype=float, copy=True)
        if x.size != problem.n:
            logger.debug("x0 has %d entries, expected n=%d.", x.size, problem.n)
            return Status.INVALID_INPUT
        result.x = x.reshape(problem.n)
        if problem.m_nlcon > 0:
            result.nlconstr = np.zeros(problem.m_nlcon, dtype=float)
            result._m_nlcon = problem.m_nlcon
    except MemoryError:
        logger.error("Could not allocate the result buffers for n=%d, m_nlcon=%d.",
                     problem.n, problem.m_nlcon)
        return Status.MEMORY_ALLOCATION_FAILS
    return 0


def free_result(result: Optional[Result]) -> int:
    """
    Drop the buffers of ``result``. Idempotent.

    Returns
    -------
    int
        0, or ``Status.NULL_RESULT`` if ``result`` is None.
    """
    if result is None:
        return Status.NULL_RESULT
    if result.nlconstr is not None:
        result.nlconstr = None
        result._m_nlcon = 0
    if result.x is not None:
        result.x = None
    return 0
