from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .alpha.service import AlphaService
from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.service import EmployeeService
from .leave.mysql_leave_repository import MySQLLeaveRepository
from .leave.service import LeaveService
from .notifications.email import EmailSender, SmtpConfig, SmtpEmailSender
from .overtime.detector import OvertimeDetector
from .overtime.mysql_overtime_repository import MySQLOvertimeRepository
from .overtime.service import OvertimeService
from .payroll.calculator.standard_calculator import StandardPayrollCalculator
from .payroll.ledger import PayrollLedger
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.service import PayrollService
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.resolver import ScheduleResolver
from .schedules.service import ScheduleService
from .stats.service import StatsService
from .subscription.gateway import MidtransGateway, PaymentGateway
from .subscription.invoice import InvoiceRenderer, ReportLabInvoiceRenderer
from .subscription.mysql_subscription_repository import MySQLSubscriptionRepository
from .subscription.service import SubscriptionService
from .users.mysql_user_repository import MySQLUserRepository
from .users.service import AuthService, UserService
from .users.tokens import TokenService


@dataclass(frozen=True)
class Settings:
    jwt_secret: str
    jwt_expires_hours: int = 24
    reset_token_minutes: int = 60
    frontend_url: str = "http://localhost:3000"
    smtp: Optional[SmtpConfig] = None
    midtrans_server_key: str = ""
    midtrans_client_key: str = ""
    midtrans_is_production: bool = False
    require_subscription: bool = False

    @classmethod
    def from_module(cls, module) -> "Settings":
        smtp = SmtpConfig(
            host=getattr(module, "SMTP_HOST", None),
            port=int(getattr(module, "SMTP_PORT", 587)),
            user=getattr(module, "SMTP_USER", None),
            password=getattr(module, "SMTP_PASS", None),
            from_email=getattr(module, "FROM_EMAIL", None),
            from_name=getattr(module, "FROM_NAME", "HRIS Management"),
        )
        return cls(
            jwt_secret=getattr(module, "JWT_SECRET", None) or getattr(module, "SECRET_KEY"),
            jwt_expires_hours=int(getattr(module, "JWT_EXPIRES_HOURS", 24)),
            reset_token_minutes=int(getattr(module, "RESET_TOKEN_MINUTES", 60)),
            frontend_url=getattr(module, "FRONTEND_URL", "http://localhost:3000"),
            smtp=smtp,
            midtrans_server_key=getattr(module, "MIDTRANS_SERVER_KEY", ""),
            midtrans_client_key=getattr(module, "MIDTRANS_CLIENT_KEY", ""),
            midtrans_is_production=bool(getattr(module, "MIDTRANS_IS_PRODUCTION", False)),
            require_subscription=bool(getattr(module, "REQUIRE_SUBSCRIPTION", False)),
        )


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection
    settings: Settings
    tokens: TokenService

    users_repo: MySQLUserRepository
    employees_repo: MySQLEmployeeRepository
    attendance_repo: MySQLAttendanceRepository
    schedules_repo: MySQLScheduleRepository
    leaves_repo: MySQLLeaveRepository
    overtime_repo: MySQLOvertimeRepository
    payroll_repo: MySQLPayrollRepository
    subscriptions_repo: MySQLSubscriptionRepository

    auth_service: AuthService
    user_service: UserService
    employee_service: EmployeeService
    schedule_service: ScheduleService
    attendance_service: AttendanceService
    leave_service: LeaveService
    overtime_service: OvertimeService
    payroll_service: PayrollService
    alpha_service: AlphaService
    subscription_service: SubscriptionService
    stats_service: StatsService


def build_container(
    *,
    db_config: dict,
    settings: Settings,
    mailer: Optional[EmailSender] = None,
    gateway: Optional[PaymentGateway] = None,
    renderer: Optional[InvoiceRenderer] = None,
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    users_repo = MySQLUserRepository(conn)
    employees_repo = MySQLEmployeeRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    schedules_repo = MySQLScheduleRepository(conn)
    leaves_repo = MySQLLeaveRepository(conn)
    overtime_repo = MySQLOvertimeRepository(conn)
    payroll_repo = MySQLPayrollRepository(conn)
    subscriptions_repo = MySQLSubscriptionRepository(conn)

    tokens = TokenService(settings.jwt_secret, expires_hours=settings.jwt_expires_hours)
    mailer = mailer or SmtpEmailSender(settings.smtp or SmtpConfig(host=None, port=587, user=None, password=None))
    gateway = gateway or MidtransGateway(
        server_key=settings.midtrans_server_key,
        client_key=settings.midtrans_client_key,
        is_production=settings.midtrans_is_production,
        frontend_url=settings.frontend_url,
    )
    renderer = renderer or ReportLabInvoiceRenderer()

    resolver = ScheduleResolver(schedules_repo)
    ledger = PayrollLedger(payroll_repo, employees_repo)
    detector = OvertimeDetector(resolver, overtime_repo)

    auth_service = AuthService(
        users_repo,
        employees_repo,
        tokens,
        mailer,
        frontend_url=settings.frontend_url,
        reset_token_minutes=settings.reset_token_minutes,
    )
    user_service = UserService(users_repo, employees_repo, mailer, frontend_url=settings.frontend_url)
    employee_service = EmployeeService(employees_repo, users_repo)
    schedule_service = ScheduleService(schedules_repo, employees_repo)
    attendance_service = AttendanceService(
        attendance_repo,
        employees_repo,
        resolver,
        ledger,
        detector,
        strategy_factory=AttendanceStrategyFactory(),
    )
    leave_service = LeaveService(leaves_repo, employees_repo)
    overtime_service = OvertimeService(overtime_repo)
    payroll_service = PayrollService(
        payroll_repo,
        employees_repo,
        attendance_repo,
        leaves_repo,
        overtime_repo,
        calculator=StandardPayrollCalculator(),
    )
    alpha_service = AlphaService(attendance_repo, employees_repo, leaves_repo)
    subscription_service = SubscriptionService(subscriptions_repo, users_repo, employees_repo, gateway, renderer)
    stats_service = StatsService(employees_repo, attendance_repo, leaves_repo, payroll_repo)

    return Container(
        conn=conn,
        settings=settings,
        tokens=tokens,
        users_repo=users_repo,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        schedules_repo=schedules_repo,
        leaves_repo=leaves_repo,
        overtime_repo=overtime_repo,
        payroll_repo=payroll_repo,
        subscriptions_repo=subscriptions_repo,
        auth_service=auth_service,
        user_service=user_service,
        employee_service=employee_service,
        schedule_service=schedule_service,
        attendance_service=attendance_service,
        leave_service=leave_service,
        overtime_service=overtime_service,
        payroll_service=payroll_service,
        alpha_service=alpha_service,
        subscription_service=subscription_service,
        stats_service=stats_service,
    )
