from enum import IntEnum


class Status(IntEnum):
    """
    Return codes of :func:`pyPOWELL.minimize` and of the lifecycle helpers.

    The enumeration is closed. Codes fall into four groups:

    - **Numerical outcomes** (negative values and 0-30): terminal classification
      of an optimization attempt reported by a solver engine.
    - **Setup errors** (110-114): a required object or function is missing.
    - **Capability mismatches** (120-122): the problem carries a feature the
      selected algorithm cannot handle.
    - **Other core failures** (100-103): invalid input, allocation failures.

    Notes
    -----
    Only ``SMALL_TR_RADIUS`` and ``FTARGET_ACHIEVED`` count as success, see
    :func:`is_success`. ``RC_DFT`` is the status of a :class:`Result` that has
    never been through a solve.
    """
    SMALL_TR_RADIUS = 0
    FTARGET_ACHIEVED = 1
    TRSUBP_FAILED = 2
    MAXFUN_REACHED = 3
    MAXTR_REACHED = 20
    NAN_INF_X = -1
    NAN_INF_F = -2
    NAN_INF_MODEL = -3
    NO_SPACE_BETWEEN_BOUNDS = 6
    DAMAGING_ROUNDING = 7
    ZERO_LINEAR_CONSTRAINT = 8
    RC_DFT = 11
    CALLBACK_TERMINATE = 30
    INVALID_INPUT = 100
    ASSERTION_FAILS = 101
    VALIDATION_FAILS = 102
    MEMORY_ALLOCATION_FAILS = 103
    NULL_OPTIONS = 110
    NULL_PROBLEM = 111
    NULL_X0 = 112
    NULL_RESULT = 113
    NULL_FUNCTION = 114
    PROBLEM_SOLVER_MISMATCH_NONLINEAR_CONSTRAINTS = 120
    PROBLEM_SOLVER_MISMATCH_LINEAR_CONSTRAINTS = 121
    PROBLEM_SOLVER_MISMATCH_BOUNDS = 122


INVALID_RETURN_CODE = "Invalid return code"

_MESSAGES = {
    Status.SMALL_TR_RADIUS: "Trust region radius reaches its lower bound",
    Status.FTARGET_ACHIEVED: "The target function value is reached",
    Status.TRSUBP_FAILED: "A trust region step failed to reduce the model",
    Status.MAXFUN_REACHED: "Maximum number of function evaluations reached",
    Status.MAXTR_REACHED: "Maximum number of trust region iterations reached",
    Status.NAN_INF_X: "The input X contains NaN of Inf",
    Status.NAN_INF_F: "The objective or constraint functions return NaN or +Inf",
    Status.NAN_INF_MODEL: "NaN or Inf occurs in the model",
    Status.NO_SPACE_BETWEEN_BOUNDS: "No space between bounds",
    Status.DAMAGING_ROUNDING: "Rounding errors are becoming damaging",
    Status.ZERO_LINEAR_CONSTRAINT: "One of the linear constraints has a zero gradient",
    Status.CALLBACK_TERMINATE: "Callback function requested termination of optimization",
    Status.INVALID_INPUT: "Invalid input",
    Status.ASSERTION_FAILS: "Assertion fails",
    Status.VALIDATION_FAILS: "Validation fails",
    Status.MEMORY_ALLOCATION_FAILS: "Memory allocation fails",
    Status.NULL_OPTIONS: "NULL options",
    Status.NULL_PROBLEM: "NULL problem",
    Status.NULL_X0: "NULL x0",
    Status.NULL_RESULT: "NULL result",
    Status.NULL_FUNCTION: "NULL function",
    Status.PROBLEM_SOLVER_MISMATCH_NONLINEAR_CONSTRAINTS:
        "Nonlinear constraints were provided for an algorithm that cannot handle them",
    Status.PROBLEM_SOLVER_MISMATCH_LINEAR_CONSTRAINTS:
        "Linear constraints were provided for an algorithm that cannot handle them",
    Status.PROBLEM_SOLVER_MISMATCH_BOUNDS:
        "Bounds were provided for an algorithm that cannot handle them",
}

SUCCESS_STATUSES = frozenset({Status.SMALL_TR_RADIUS, Status.FTARGET_ACHIEVED})


def status_to_string(code) -> str:
    """
    Translate a status code into its diagnostic message.

    Parameters
    ----------
    code : int
        Any integer. Values outside :class:`Status` are accepted.

    Returns
    -------
    str
        The message for ``code``, or ``"Invalid return code"`` when the code is
        not part of the enumeration. Never ``None``.

    Examples
    --------
    >>> status_to_string(0)
    'Trust region radius reaches its lower bound'
    >>> status_to_string(2**31 - 1)
    'Invalid return code'
    """
    try:
        return _MESSAGES.get(code, INVALID_RETURN_CODE)
    except TypeError:
        # unhashable input
        return INVALID_RETURN_CODE


def is_success(code) -> bool:
    """Return True if ``code`` belongs to the success subset."""
    try:
        return code in SUCCESS_STATUSES
    except TypeError:
        return False
