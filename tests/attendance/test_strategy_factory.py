from datetime import datetime, time

from yooh.attendance.factory import AttendanceStrategyFactory
from yooh.attendance.strategies.late_strategy import LateStrategy
from yooh.attendance.strategies.normal_strategy import NormalStrategy
from yooh.core.enums import AttendanceStatus


def test_without_threshold_every_sign_is_on_time(make_class):
    session = make_class(start=time(8, 0))
    now = datetime(2026, 2, 2, 8, 55)

    strategy = AttendanceStrategyFactory().for_signing(now=now, session=session)

    assert isinstance(strategy, NormalStrategy)
    assert strategy.decide_sign(now=now, session=session).status == AttendanceStatus.ON_TIME


def test_sign_within_grace_is_on_time(make_class):
    session = make_class(start=time(8, 0))

    strategy = AttendanceStrategyFactory(late_after_minutes=10).for_signing(
        now=datetime(2026, 2, 2, 8, 10), session=session
    )

    assert isinstance(strategy, NormalStrategy)


def test_sign_after_grace_is_late(make_class):
    session = make_class(start=time(8, 0))
    now = datetime(2026, 2, 2, 8, 10, 1)

    strategy = AttendanceStrategyFactory(late_after_minutes=10).for_signing(now=now, session=session)

    assert isinstance(strategy, LateStrategy)
    assert strategy.decide_sign(now=now, session=session).status == AttendanceStatus.LATE


def test_general_check_in_is_on_time():
    factory = AttendanceStrategyFactory(late_after_minutes=0)

    assert isinstance(factory.for_signing(now=datetime(2026, 2, 2, 23, 0), session=None), NormalStrategy)
