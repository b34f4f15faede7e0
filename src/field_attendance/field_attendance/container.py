from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .binlog.relay import BinlogRelay
from .common.datetime_utils import parse_clock
from .common.executor import BoundedExecutor
from .common.locks import KeyedLock
from .core.enums import Role
from .database.connection import DBConfig, DatabaseConnection
from .employees.face_recognition import FaceRecognitionClient
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.service import EmployeeService
from .locations.mysql_location_repository import MySQLLocationRepository
from .locations.service import LocationService
from .realtime.broker import TopicBroker
from .realtime.publisher import LocationEventPublisher
from .reference.mysql_reference_repository import MySQLReferenceRepository
from .reference.service import LocationDirectory, ReferenceService
from .reports.service import ReportService
from .requests.mysql_request_repository import MySQLExtraWorkRepository, MySQLLeaveRepository
from .requests.service import RequestService
from .security.tokens import TokenService
from .storage.file_storage import FileStorageService
from .users.model import BuiltinAccount
from .users.mysql_user_repository import MySQLUserRepository
from .users.rate_limiter import LoginRateLimiter
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    tokens: TokenService
    auth_service: AuthService
    location_directory: LocationDirectory
    reference_service: ReferenceService
    file_storage: FileStorageService
    face_recognition: FaceRecognitionClient
    employee_service: EmployeeService
    attendance_service: AttendanceService
    request_service: RequestService
    report_service: ReportService
    location_service: LocationService
    broker: TopicBroker
    publisher: LocationEventPublisher
    relay: Optional[BinlogRelay] = None
    conn: Optional[DatabaseConnection] = None


def builtin_accounts(raw: Any) -> list[BuiltinAccount]:
    return [
        BuiltinAccount(
            username=item["username"],
            password=item["password"],
            email=item["email"],
            role=Role(str(item.get("role", Role.EMPLOYEE.value)).lower()),
        )
        for item in raw or ()
    ]


def build_container(settings: Any) -> Container:
    config = DBConfig.from_mapping(getattr(settings, "DB_CONFIG"))
    conn = DatabaseConnection.get_instance(config)

    users_repo = MySQLUserRepository(conn)
    employees_repo = MySQLEmployeeRepository(conn)
    reference_repo = MySQLReferenceRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    leave_repo = MySQLLeaveRepository(conn)
    extra_work_repo = MySQLExtraWorkRepository(conn)
    location_repo = MySQLLocationRepository(conn)

    tokens = TokenService(
        getattr(settings, "JWT_SECRET"),
        expiration_seconds=int(getattr(settings, "JWT_EXPIRATION_SECONDS", 86400)),
        cache_ttl_seconds=int(getattr(settings, "TOKEN_CACHE_TTL_SECONDS", 900)),
    )
    rate_limiter = LoginRateLimiter(
        max_attempts=int(getattr(settings, "LOGIN_MAX_ATTEMPTS", 5)),
        lockout_seconds=float(getattr(settings, "LOGIN_LOCKOUT_SECONDS", 900)),
    )
    auth_service = AuthService(
        users_repo, tokens, rate_limiter, builtin_accounts(getattr(settings, "BUILTIN_ACCOUNTS", ()))
    )

    location_directory = LocationDirectory(reference_repo)
    reference_service = ReferenceService(
        reference_repo,
        default_start=parse_clock(getattr(settings, "OFFICE_START_TIME", "10:00")),
        default_end=parse_clock(getattr(settings, "OFFICE_END_TIME", "18:00")),
    )
    file_storage = FileStorageService(
        getattr(settings, "FILE_STORAGE_PATH", "uploads"),
        max_bytes=int(getattr(settings, "MAX_UPLOAD_BYTES", 5 * 1024 * 1024)),
    )
    face_recognition = FaceRecognitionClient(
        file_storage,
        BoundedExecutor(
            max_workers=int(getattr(settings, "FACE_RECOGNITION_WORKERS", 5)),
            queue_capacity=int(getattr(settings, "FACE_RECOGNITION_QUEUE_CAPACITY", 100)),
            name="face-recognition",
        ),
        api_url=getattr(settings, "FACE_RECOGNITION_API_URL", ""),
        enabled=bool(getattr(settings, "FACE_RECOGNITION_ENABLED", False)),
        timeout_seconds=float(getattr(settings, "FACE_RECOGNITION_TIMEOUT_SECONDS", 30)),
    )
    employee_service = EmployeeService(employees_repo, location_directory, file_storage, face_recognition)
    attendance_service = AttendanceService(
        attendance_repo,
        employees_repo,
        reference_service,
        leave_repo,
        file_storage,
        strategy_factory=AttendanceStrategyFactory(),
        locks=KeyedLock(),
    )
    request_service = RequestService(leave_repo, extra_work_repo, employees_repo)
    report_service = ReportService(attendance_repo, employees_repo, reference_service, leave_repo)
    location_service = LocationService(location_repo, employees_repo)

    broker = TopicBroker()
    publisher = LocationEventPublisher(broker)
    relay = None
    if getattr(settings, "BINLOG_ENABLED", False):
        relay = BinlogRelay(
            config,
            publisher,
            server_id=int(getattr(settings, "BINLOG_SERVER_ID", 100)),
            table=getattr(settings, "BINLOG_TABLE", "wff_location_tracking"),
            retry_initial_seconds=float(getattr(settings, "BINLOG_RETRY_INITIAL_SECONDS", 1)),
            retry_max_seconds=float(getattr(settings, "BINLOG_RETRY_MAX_SECONDS", 60)),
        )

    return Container(
        tokens=tokens,
        auth_service=auth_service,
        location_directory=location_directory,
        reference_service=reference_service,
        file_storage=file_storage,
        face_recognition=face_recognition,
        employee_service=employee_service,
        attendance_service=attendance_service,
        request_service=request_service,
        report_service=report_service,
        location_service=location_service,
        broker=broker,
        publisher=publisher,
        relay=relay,
        conn=conn,
    )
