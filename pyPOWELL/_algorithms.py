from enum import IntEnum

BOUNDS = "bounds"
LINEAR_CONSTRAINTS = "linear constraints"
NONLINEAR_CONSTRAINTS = "nonlinear constraints"


class Algorithm(IntEnum):
    """
    Closed enumeration of the available solver engines.

    - ``UOBYQA``: unconstrained, full quadratic models.
    - ``NEWUOA``: unconstrained, underdetermined quadratic models with ``npt`` points.
    - ``BOBYQA``: bound constrained.
    - ``LINCOA``: bound and linearly constrained.
    - ``COBYLA``: bound, linearly and nonlinearly constrained, linear models.
    """
    UOBYQA = 0
    NEWUOA = 1
    BOBYQA = 2
    LINCOA = 3
    COBYLA = 4


CAPABILITIES = {
    Algorithm.UOBYQA: frozenset(),
    Algorithm.NEWUOA: frozenset(),
    Algorithm.BOBYQA: frozenset({BOUNDS}),
    Algorithm.LINCOA: frozenset({BOUNDS, LINEAR_CONSTRAINTS}),
    Algorithm.COBYLA: frozenset({BOUNDS, LINEAR_CONSTRAINTS, NONLINEAR_CONSTRAINTS}),
}


def capabilities(algorithm) -> frozenset:
    """Return the capability set of ``algorithm``; empty for unknown identifiers."""
    try:
        return CAPABILITIES.get(algorithm, frozenset())
    except TypeError:
        return frozenset()


def uses_constrained_function(algorithm) -> bool:
    """True when ``algorithm`` evaluates ``calcfc`` instead of ``calfun``."""
    return algorithm == Algorithm.COBYLA
