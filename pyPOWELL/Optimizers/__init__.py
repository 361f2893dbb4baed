"""Solver engines, one per algorithm, sharing the :class:`Optimizer` base."""

from ._optimizer import Optimizer
from ._evaluator import EvaluationManager, EngineStop
from .UOBYQA import UOBYQA
from .NEWUOA import NEWUOA
from .BOBYQA import BOBYQA
from .LINCOA import LINCOA
from .COBYLA import COBYLA
