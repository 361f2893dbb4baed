"""Problem and options containers with their sentinel initializers."""

from ._problem import Problem, init_problem, reset_problem
from ._options import (
    Options,
    Verbosity,
    init_options,
    reset_options,
    MAXFUN_DIM_DFT,
    RHOBEG_DFT,
    RHOEND_DFT,
    CTOL_DFT,
    MAXTR_MUL,
)
