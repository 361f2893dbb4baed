import numpy as np
import pytest

from pyPOWELL import Algorithm, CallbackMonitor, Monitor, Report, Status, minimize
from pyPOWELL._monitor import as_monitor
from ._functions import CountingFunction, quadratic, quadratic_with_constraint


class StopAfter(Monitor):
    def __init__(self, budget):
        self.budget = budget
        self.reports = []

    def report(self, report):
        self.reports.append((report.x.copy(), report.f, report.nf, report.tr, report.cstrv, report.data))
        report.terminate = report.nf >= self.budget


def _problem_for(algorithm, problem, constrained_problem):
    if algorithm == Algorithm.COBYLA:
        return constrained_problem
    if algorithm in (Algorithm.BOBYQA, Algorithm.LINCOA):
        problem.xl = np.array([-1.0, -1.0])
        problem.xu = np.array([4.5, 4.5])
    return problem


@pytest.mark.parametrize("algorithm", list(Algorithm))
def test_stop_on_first_report(algorithm, problem, constrained_problem, options, result):
    problem = _problem_for(algorithm, problem, constrained_problem)
    options.callback = lambda x, f, nf, tr, cstrv, nlconstr: True

    rc = minimize(algorithm, problem, options, result)

    assert rc == Status.CALLBACK_TERMINATE
    assert result.status == Status.CALLBACK_TERMINATE
    assert 1 <= result.nf <= 2
    assert not result.success


def test_monitor_subclass(problem, options, result):
    monitor = StopAfter(5)
    options.callback = monitor

    rc = minimize(Algorithm.NEWUOA, problem, options, result)

    assert rc == Status.CALLBACK_TERMINATE
    assert result.nf == 5
    assert [nf for _, _, nf, _, _, _ in monitor.reports] == [1, 2, 3, 4, 5]


def test_reports_follow_the_best_point(problem, options, result):
    monitor = StopAfter(np.inf)
    options.callback = monitor
    options.data = "context"
    problem.calfun = lambda x, data: quadratic(x)

    minimize(Algorithm.UOBYQA, problem, options, result)

    values = [f for _, f, _, _, _, _ in monitor.reports]
    assert values == sorted(values, reverse=True)
    assert monitor.reports[-1][1] == result.f
    assert all(data == "context" for *_, data in monitor.reports)
    # UOBYQA samples (n + 1)(n + 2) / 2 points before its first iteration
    assert [tr for _, _, _, tr, _, _ in monitor.reports[:6]] == [0] * 6
    assert monitor.reports[-1][3] == result.nf - 6


def test_callback_returning_none_never_stops(problem, options, result):
    calls = []
    options.callback = lambda *args: calls.append(args)

    rc = minimize(Algorithm.NEWUOA, problem, options, result)

    assert rc == Status.SMALL_TR_RADIUS
    assert len(calls) == result.nf


def test_report_is_read_only(constrained_problem, options, result):
    blocked = []

    def callback(x, f, nf, tr, cstrv, nlconstr):
        for array in (x, nlconstr):
            try:
                array[0] = 1e9
            except ValueError:
                blocked.append(nf)

    options.callback = callback
    rc = minimize(Algorithm.COBYLA, constrained_problem, options, result)

    assert rc == Status.SMALL_TR_RADIUS
    assert len(blocked) == 2 * result.nf
    assert np.allclose(result.x, [3.0, 4.0], atol=1e-2)


def test_monitor_sees_constraint_violation(constrained_problem, options, result):
    monitor = StopAfter(np.inf)
    options.callback = monitor
    constrained_problem.x0 = np.array([4.0, 0.0])

    minimize(Algorithm.COBYLA, constrained_problem, options, result)

    assert monitor.reports[0][4] == pytest.approx(7.0)
    assert monitor.reports[-1][4] == pytest.approx(result.cstrv)


def test_stop_counts_only_evaluations_done(problem, options, result):
    counter = CountingFunction(quadratic)
    problem.calfun = counter
    options.callback = StopAfter(3)

    minimize(Algorithm.NEWUOA, problem, options, result)

    assert counter.calls == 3
    assert result.nf == 3
    assert result.f <= quadratic(np.zeros(2))


def test_monitor_exceptions_propagate(problem, options, result):
    def callback(*args):
        raise RuntimeError("stop")

    options.callback = callback
    with pytest.raises(RuntimeError):
        minimize(Algorithm.NEWUOA, problem, options, result)


def test_report_terminate_starts_false():
    report = Report(np.zeros(2), 1.0, 1, 0)
    assert report.terminate is False
    assert report.cstrv == 0.0
    assert report.nlconstr.shape == (0,)
    with pytest.raises(ValueError):
        report.x[0] = 1.0


def test_as_monitor():
    monitor = StopAfter(1)
    assert as_monitor(None) is None
    assert as_monitor(monitor) is monitor
    assert isinstance(as_monitor(quadratic_with_constraint), CallbackMonitor)
    with pytest.raises(TypeError):
        as_monitor("not callable")


def test_base_monitor_is_abstract():
    with pytest.raises(NotImplementedError):
        Monitor().report(Report(np.zeros(1), 0.0, 1, 0))
