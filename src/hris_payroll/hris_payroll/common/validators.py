from __future__ import annotations

import re
from typing import Optional

from ..core.exceptions import ValidationError

PHONE_PATTERN = re.compile(r"^[0-9+\-\s()]+$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} wajib diisi")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} minimal {min_len} karakter")
    return value


def optional_phone(value: Optional[str]) -> Optional[str]:
    if not value or not value.strip():
        return None
    if not PHONE_PATTERN.match(value):
        raise ValidationError("Nomor HP tidak valid.")
    return value.strip()


def clean_optional(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def require_month(month: int) -> int:
    if not 1 <= int(month) <= 12:
        raise ValidationError("Bulan harus antara 1 dan 12.")
    return int(month)
