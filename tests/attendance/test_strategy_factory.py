from datetime import time

from src.hris_payroll.hris_payroll.attendance.factory import AttendanceStrategyFactory
from src.hris_payroll.hris_payroll.attendance.strategies.early_arrival_strategy import EarlyArrivalStrategy
from src.hris_payroll.hris_payroll.attendance.strategies.late_strategy import LateStrategy
from src.hris_payroll.hris_payroll.attendance.strategies.normal_strategy import NormalStrategy
from src.hris_payroll.hris_payroll.core.enums import AttendanceStatus
from src.hris_payroll.hris_payroll.schedules.resolver import ScheduleWindow

WINDOW = ScheduleWindow(start=time(9, 0), earliest_checkin=time(8, 0), end=time(18, 0), has_schedule=True)


def test_factory_checkin_exactly_on_start_is_normal():
    strategy = AttendanceStrategyFactory().for_checkin(now=time(9, 0), window=WINDOW)

    assert isinstance(strategy, NormalStrategy)
    decision = strategy.decide_checkin(now=time(9, 0), window=WINDOW)
    assert decision.status == AttendanceStatus.HADIR
    assert decision.note is None


def test_factory_checkin_one_minute_late():
    strategy = AttendanceStrategyFactory().for_checkin(now=time(9, 1), window=WINDOW)

    assert isinstance(strategy, LateStrategy)


def test_late_strategy_describes_delay():
    decision = LateStrategy().decide_checkin(now=time(10, 20), window=WINDOW)

    assert decision.status == AttendanceStatus.TERLAMBAT
    assert decision.is_late
    assert decision.late_minutes == 80
    assert decision.note == "Terlambat 1 jam 20 menit (Jadwal: 09:00, Check-in: 10:20)"


def test_early_arrival_notes_minutes_before_start():
    strategy = AttendanceStrategyFactory().for_checkin(now=time(8, 35), window=WINDOW)

    assert isinstance(strategy, EarlyArrivalStrategy)
    decision = strategy.decide_checkin(now=time(8, 35), window=WINDOW)
    assert decision.status == AttendanceStatus.HADIR
    assert decision.note == "Check-in lebih awal 25 menit dari jadwal"
