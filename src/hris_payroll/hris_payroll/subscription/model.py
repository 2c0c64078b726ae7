from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..common.money import rupiah
from ..core.enums import PaymentStatus, SubscriptionStatus


def billing_calculation(total_employees: int, price_per_employee: float) -> str:
    """'20 karyawan × Rp 15.000 = Rp 300.000'"""

    total = price_per_employee * total_employees
    return f"{total_employees} karyawan × {rupiah(price_per_employee)} = {rupiah(total)}"


@dataclass(frozen=True)
class Plan:
    plan_id: int
    plan_name: str
    price: float
    duration_days: int = 30
    max_employees: Optional[int] = None
    features: List[str] = field(default_factory=list)
    is_active: bool = True

    def to_dict(self) -> dict:
        return {
            "plan_id": self.plan_id,
            "plan_name": self.plan_name,
            "price": self.price,
            "duration_days": self.duration_days,
            "max_employees": self.max_employees,
            "features": list(self.features),
            "is_active": self.is_active,
        }


@dataclass(frozen=True)
class Payment:
    """Satu transaksi pembayaran subscription."""

    payment_id: int
    subscription_id: int
    order_id: str
    amount: float
    status: PaymentStatus = PaymentStatus.PENDING
    snap_token: Optional[str] = None
    snap_url: Optional[str] = None
    transaction_id: Optional[str] = None
    payment_type: Optional[str] = None
    payment_date: Optional[datetime] = None
    expired_at: Optional[datetime] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    created_at: Optional[datetime] = None

    @staticmethod
    def decode_metadata(raw: Optional[str]) -> Dict[str, Any]:
        if not raw:
            return {}
        try:
            value = json.loads(raw)
        except ValueError:
            return {}
        return value if isinstance(value, dict) else {}

    def to_dict(self) -> dict:
        return {
            "payment_id": self.payment_id,
            "subscription_id": self.subscription_id,
            "order_id": self.order_id,
            "amount": self.amount,
            "status": self.status,
            "snap_token": self.snap_token,
            "snap_url": self.snap_url,
            "transaction_id": self.transaction_id,
            "payment_type": self.payment_type,
            "payment_date": self.payment_date,
            "expired_at": self.expired_at,
            "metadata": dict(self.metadata),
            "created_at": self.created_at,
        }


@dataclass(frozen=True)
class Subscription:
    subscription_id: int
    user_id: int
    plan_id: int
    status: SubscriptionStatus = SubscriptionStatus.PENDING
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    plan: Optional[Plan] = None
    username: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None

    def is_expired(self, now: datetime) -> bool:
        return self.end_date is not None and now > self.end_date

    def days_remaining(self, now: datetime) -> Optional[int]:
        if self.end_date is None:
            return None
        return math.ceil((self.end_date - now).total_seconds() / 86400)

    def is_usable(self, now: datetime) -> bool:
        return (
            self.status == SubscriptionStatus.ACTIVE
            and self.end_date is not None
            and self.end_date >= now
        )

    def to_dict(self) -> dict:
        body = {
            "subscription_id": self.subscription_id,
            "user_id": self.user_id,
            "plan_id": self.plan_id,
            "status": self.status,
            "start_date": self.start_date,
            "end_date": self.end_date,
            "created_at": self.created_at,
            "plan": self.plan.to_dict() if self.plan else None,
        }
        if self.username is not None:
            body["user"] = {"username": self.username, "email": self.email, "role": self.role}
        return body


@dataclass(frozen=True)
class InvoiceData:
    """Everything the PDF renderer needs for one payment."""

    order_id: str
    payment_date: Optional[datetime]
    company_name: str
    admin_email: str
    plan_name: str
    price_per_employee: float
    total_employees: int
    total_amount: float
    period: str
    calculation: str
    status: PaymentStatus
    payment_type: Optional[str] = None

    @property
    def is_paid(self) -> bool:
        return self.status == PaymentStatus.SUCCESS
