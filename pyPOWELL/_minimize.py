import logging
from typing import Optional
from ._algorithms import Algorithm, uses_constrained_function
from ._monitor import as_monitor
from ._result import Result, create_result
from ._status import Status, status_to_string
from ._validate import check_problem
from .Optimizers import UOBYQA, NEWUOA, BOBYQA, LINCOA, COBYLA
from .Problem._problem import Problem
from .Problem._options import Options

logger = logging.getLogger(__name__)


def _common(options: Options, monitor) -> dict:
    return dict(data=options.data, rhobeg=options.rhobeg, rhoend=options.rhoend,
                ftarget=options.ftarget, maxfun=options.maxfun, iprint=options.iprint,
                callback=monitor)


def _uobyqa(problem, options, monitor, result):
    engine = UOBYQA(problem.calfun, problem.n, **_common(options, monitor))
    result.f, result.nf, info = engine.solve(result.x)
    return info


def _newuoa(problem, options, monitor, result):
    engine = NEWUOA(problem.calfun, problem.n, npt=options.npt, **_common(options, monitor))
    result.f, result.nf, info = engine.solve(result.x)
    return info


def _bobyqa(problem, options, monitor, result):
    engine = BOBYQA(problem.calfun, problem.n, xl=problem.xl, xu=problem.xu, npt=options.npt,
                    **_common(options, monitor))
    result.f, result.nf, info = engine.solve(result.x)
    return info


def _lincoa(problem, options, monitor, result):
    engine = LINCOA(problem.calfun, problem.n,
                    Aineq=problem.Aineq, bineq=problem.bineq, Aeq=problem.Aeq, beq=problem.beq,
                    xl=problem.xl, xu=problem.xu, npt=options.npt, ctol=options.ctol,
                    **_common(options, monitor))
    result.f, result.cstrv, result.nf, info = engine.solve(result.x)
    return info


def _cobyla(problem, options, monitor, result):
    engine = COBYLA(problem.calcfc, problem.n, m_nlcon=problem.m_nlcon,
                    Aineq=problem.Aineq, bineq=problem.bineq, Aeq=problem.Aeq, beq=problem.beq,
                    xl=problem.xl, xu=problem.xu, f0=problem.f0, nlconstr0=problem.nlconstr0,
                    ctol=options.ctol, **_common(options, monitor))
    result.f, result.cstrv, result.nf, info = engine.solve(result.x, result.nlconstr)
    return info


_ENGINES = {
    Algorithm.UOBYQA: _uobyqa,
    Algorithm.NEWUOA: _newuoa,
    Algorithm.BOBYQA: _bobyqa,
    Algorithm.LINCOA: _lincoa,
    Algorithm.COBYLA: _cobyla,
}


def minimize(algorithm, problem: Optional[Problem], options: Optional[Options], result: Optional[Result]) -> int:
    """
    Minimize ``problem`` with ``algorithm``.

    The problem is validated against the capabilities of the algorithm, the
    result buffers are created, and exactly one solver engine is run with the
    parameters it accepts. The call is synchronous; evaluators and the
    monitor run on the calling thread.

    Parameters
    ----------
    algorithm : Algorithm or int
        One of :class:`Algorithm`.
    problem : Problem
        Problem description. Not modified.
    options : Options
        Options. ``maxfun`` and ``npt`` are given their defaults if they are 0.
    result : Result
        Receives the solution. Its buffers must be released with
        :func:`pyPOWELL.free_result` (releasing twice is harmless).

    Returns
    -------
    int
        A :class:`Status` code, also stored in ``result.status`` once the
        engine ran. Setup, capability and resource failures are returned
        without evaluating any function.

    Examples
    --------
    >>> problem = init_problem(2)
    >>> problem.x0 = [0.0, 0.0]
    >>> problem.calfun = lambda x: (x[0] - 5) ** 2 + (x[1] - 4) ** 2
    >>> problem.xl, problem.xu = [-1.0, -1.0], [4.5, 4.5]
    >>> options = init_options()
    >>> result = Result()
    >>> rc = minimize(Algorithm.BOBYQA, problem, options, result)
    >>> free_result(result)
    """
    use_constr = uses_constrained_function(algorithm)

    info = check_problem(problem, options, use_constr, algorithm)
    if info == 0:
        info = create_result(result, problem)
    if info != 0:
        logger.debug("minimize: %s.", status_to_string(info))
        return info

    try:
        engine = _ENGINES[Algorithm(algorithm)]
        monitor = as_monitor(options.callback)
    except (ValueError, KeyError, TypeError) as exc:
        logger.debug("minimize: invalid input: %s", exc)
        return Status.INVALID_INPUT

    info = engine(problem, options, monitor, result)
    result.status = info
    result.message = status_to_string(info)
    return info
