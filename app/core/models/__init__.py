from app.auth.models import User
from app.core.models.employee import Employee
from app.core.models.scanner_account import ScannerAccount
from app.core.models.attendance_record import AttendanceRecord

__all__ = [
    "AttendanceRecord",
    "Employee",
    "ScannerAccount",
    "User",
]
