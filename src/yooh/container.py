from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .assignments.mysql_assignment_repository import MySQLAssignmentRepository
from .assignments.repository import AssignmentRepository
from .assignments.service import AssignmentService
from .attendance.checker import AttendanceChecker
from .attendance.factory import AttendanceStrategyFactory
from .attendance.ledger import AttendanceLedger
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .classes.mysql_class_repository import MySQLClassRepository
from .classes.repository import ClassRepository
from .classes.service import ClassService
from .common.datetime_utils import now_local
from .core.constants import DEFAULT_CHECK_INTERVAL_SECONDS, DEFAULT_LOCATION_MAX_AGE_SECONDS
from .dashboard.mysql_dashboard_repository import MySQLCourseAttendanceRepository, MySQLCourseRepository
from .dashboard.repository import CourseAttendanceRepository, CourseRepository
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .geo.tracker import LocationTracker
from .reminders.mysql_notification_repository import MySQLNotificationCenter
from .reminders.preferences import ReminderPreferencesService
from .reminders.repository import NotificationCenter
from .reminders.scheduler import ReminderScheduler
from .reminders.service import ReminderService
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .settings.repository import SettingsRepository
from .sync.migration import MigrationService
from .sync.remote_store import MySQLDocumentStore, RemoteStore
from .sync.service import SyncService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService
from .zones.repository import ZoneRepository
from .zones.service import SchoolZoneRegistry
from .zones.settings_zone_repository import SettingsZoneRepository


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    classes_repo: ClassRepository
    assignments_repo: AssignmentRepository
    attendance_repo: AttendanceRepository
    settings_repo: SettingsRepository
    zones_repo: ZoneRepository
    notifications_repo: NotificationCenter
    courses_repo: CourseRepository
    course_attendance_repo: CourseAttendanceRepository
    remote_store: RemoteStore

    tracker: LocationTracker
    sync_service: SyncService
    migration_service: MigrationService
    zone_registry: SchoolZoneRegistry
    class_service: ClassService
    assignment_service: AssignmentService
    ledger: AttendanceLedger
    checker: AttendanceChecker
    reminder_preferences: ReminderPreferencesService
    reminder_service: ReminderService
    auth_service: AuthService
    dashboard_service: DashboardService

    conn: Optional[DatabaseConnection] = None

    def shutdown(self) -> None:
        self.checker.stop()
        self.sync_service.close()


def assemble_container(
    *,
    users_repo: UserRepository,
    classes_repo: ClassRepository,
    assignments_repo: AssignmentRepository,
    attendance_repo: AttendanceRepository,
    settings_repo: SettingsRepository,
    notifications_repo: NotificationCenter,
    courses_repo: CourseRepository,
    course_attendance_repo: CourseAttendanceRepository,
    remote_store: RemoteStore,
    conn: Optional[DatabaseConnection] = None,
    late_after_minutes: Optional[int] = None,
    check_interval_seconds: int = DEFAULT_CHECK_INTERVAL_SECONDS,
    location_max_age_seconds: Optional[int] = DEFAULT_LOCATION_MAX_AGE_SECONDS,
    sync_workers: int = 2,
    clock: Callable[[], datetime] = now_local,
) -> Container:
    """Wire services over the given repositories. Each service is built once and shared."""
    zones_repo = SettingsZoneRepository(settings_repo)

    sync_service = SyncService(
        remote_store,
        classes=classes_repo,
        assignments=assignments_repo,
        attendance=attendance_repo,
        zones=zones_repo,
        workers=sync_workers,
        clock=clock,
    )
    migration_service = MigrationService(
        remote_store,
        classes=classes_repo,
        assignments=assignments_repo,
        attendance=attendance_repo,
        clock=clock,
    )

    tracker = LocationTracker(max_age_seconds=location_max_age_seconds, clock=clock)
    zone_registry = SchoolZoneRegistry(zones_repo, sync=sync_service, clock=clock)
    class_service = ClassService(classes_repo, sync=sync_service, clock=clock)
    assignment_service = AssignmentService(assignments_repo, classes_repo, sync=sync_service, clock=clock)
    ledger = AttendanceLedger(
        attendance_repo,
        strategy_factory=AttendanceStrategyFactory(late_after_minutes=late_after_minutes),
        sync=sync_service,
        clock=clock,
    )
    checker = AttendanceChecker(
        ledger,
        classes_repo,
        zone_registry,
        tracker,
        interval_seconds=check_interval_seconds,
        clock=clock,
    )

    reminder_preferences = ReminderPreferencesService(settings_repo)
    reminder_service = ReminderService(
        reminder_preferences,
        ReminderScheduler(notifications_repo),
        classes_repo,
        assignments_repo,
        clock=clock,
    )

    return Container(
        conn=conn,
        users_repo=users_repo,
        classes_repo=classes_repo,
        assignments_repo=assignments_repo,
        attendance_repo=attendance_repo,
        settings_repo=settings_repo,
        zones_repo=zones_repo,
        notifications_repo=notifications_repo,
        courses_repo=courses_repo,
        course_attendance_repo=course_attendance_repo,
        remote_store=remote_store,
        tracker=tracker,
        sync_service=sync_service,
        migration_service=migration_service,
        zone_registry=zone_registry,
        class_service=class_service,
        assignment_service=assignment_service,
        ledger=ledger,
        checker=checker,
        reminder_preferences=reminder_preferences,
        reminder_service=reminder_service,
        auth_service=AuthService(users_repo),
        dashboard_service=DashboardService(courses_repo, course_attendance_repo, users_repo),
    )


def build_container(
    *,
    db_config: dict,
    remote_db_config: dict,
    late_after_minutes: Optional[int] = None,
    check_interval_seconds: int = DEFAULT_CHECK_INTERVAL_SECONDS,
    location_max_age_seconds: Optional[int] = DEFAULT_LOCATION_MAX_AGE_SECONDS,
    sync_workers: int = 2,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    remote_conn = DatabaseConnection.get_instance(DBConfig.from_dict(remote_db_config))

    return assemble_container(
        conn=conn,
        users_repo=MySQLUserRepository(conn),
        classes_repo=MySQLClassRepository(conn),
        assignments_repo=MySQLAssignmentRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        settings_repo=MySQLSettingsRepository(conn),
        notifications_repo=MySQLNotificationCenter(conn),
        courses_repo=MySQLCourseRepository(conn),
        course_attendance_repo=MySQLCourseAttendanceRepository(conn),
        remote_store=MySQLDocumentStore(remote_conn),
        late_after_minutes=late_after_minutes,
        check_interval_seconds=check_interval_seconds,
        location_max_age_seconds=location_max_age_seconds,
        sync_workers=sync_workers,
    )
