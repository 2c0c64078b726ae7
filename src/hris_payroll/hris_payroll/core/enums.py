from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Peran pengguna untuk otorisasi."""

    ADMIN = "Admin"
    HR = "HR"
    KARYAWAN = "Karyawan"


class AccountStatus(str, Enum):
    """Status akun yang menentukan akses setelah login."""

    PENDING = "pending"
    ACTIVE = "active"
    REJECTED = "rejected"


class AttendanceStatus(str, Enum):
    """Status absensi yang disimpan di database."""

    HADIR = "hadir"
    TERLAMBAT = "terlambat"
    ALPA = "alpa"
    IZIN = "izin"
    SAKIT = "sakit"
    PENDING_APPROVAL = "pending_approval"
    APPROVED = "approved"
    REJECTED = "rejected"

    @classmethod
    def parse(cls, value) -> "AttendanceStatus | None":
        if value is None or value == "":
            return None
        return cls(str(value).strip().lower())


class ApprovalStatus(str, Enum):
    """Approval flow state shared by leave, remote-work requests and overtime."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class WorkType(str, Enum):
    WFO = "WFO"
    WFH = "WFH (Work From Home)"
    HYBRID = "Hybrid"


class SubscriptionStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    INACTIVE = "inactive"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"
