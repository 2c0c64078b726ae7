from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Sequence

from ..core.enums import PaymentStatus, SubscriptionStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, as_optional_int, db_cursor, execute_unique, fetchall, fetchone
from .model import Payment, Plan, Subscription
from .repository import SubscriptionRepository

_PLAN_COLUMNS = "p.plan_id, p.plan_name, p.price, p.duration_days, p.max_employees, p.features, p.is_active"

_SELECT_SUBSCRIPTION = f"""
    SELECT s.subscription_id, s.user_id, s.plan_id, s.status, s.start_date, s.end_date, s.created_at,
           {_PLAN_COLUMNS}, u.username, u.email, u.role
    FROM subscriptions s
    INNER JOIN subscription_plans p ON p.plan_id = s.plan_id
    LEFT JOIN users u ON u.user_id = s.user_id
"""

_SELECT_PAYMENT = """
    SELECT payment_id, subscription_id, order_id, amount, status, snap_token, snap_url, transaction_id,
           payment_type, payment_date, expired_at, metadata, created_at
    FROM payments
"""


def _features(raw: Any) -> list:
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except ValueError:
        return [str(raw)]
    return [str(v) for v in value] if isinstance(value, list) else [str(value)]


def _to_plan(row: Dict[str, Any]) -> Plan:
    return Plan(
        plan_id=int(row["plan_id"]),
        plan_name=row["plan_name"],
        price=as_float(row.get("price")),
        duration_days=int(row.get("duration_days") or 30),
        max_employees=as_optional_int(row.get("max_employees")),
        features=_features(row.get("features")),
        is_active=bool(row.get("is_active", 1)),
    )


def _to_subscription(row: Dict[str, Any]) -> Subscription:
    return Subscription(
        subscription_id=int(row["subscription_id"]),
        user_id=int(row["user_id"]),
        plan_id=int(row["plan_id"]),
        status=SubscriptionStatus(row.get("status") or SubscriptionStatus.PENDING.value),
        start_date=row.get("start_date"),
        end_date=row.get("end_date"),
        created_at=row.get("created_at"),
        plan=_to_plan(row),
        username=row.get("username"),
        email=row.get("email"),
        role=row.get("role"),
    )


def _to_payment(row: Dict[str, Any]) -> Payment:
    return Payment(
        payment_id=int(row["payment_id"]),
        subscription_id=int(row["subscription_id"]),
        order_id=row["order_id"],
        amount=as_float(row.get("amount")),
        status=PaymentStatus(row.get("status") or PaymentStatus.PENDING.value),
        snap_token=row.get("snap_token"),
        snap_url=row.get("snap_url"),
        transaction_id=row.get("transaction_id"),
        payment_type=row.get("payment_type"),
        payment_date=row.get("payment_date"),
        expired_at=row.get("expired_at"),
        metadata=Payment.decode_metadata(row.get("metadata")),
        created_at=row.get("created_at"),
    )


class MySQLSubscriptionRepository(SubscriptionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active_plans(self) -> Sequence[Plan]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PLAN_COLUMNS} FROM subscription_plans p WHERE p.is_active=1 ORDER BY p.price ASC")
            return [_to_plan(r) for r in fetchall(cur)]

    def get_plan(self, plan_id: int) -> Optional[Plan]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PLAN_COLUMNS} FROM subscription_plans p WHERE p.plan_id=%s", (plan_id,))
            row = fetchone(cur)
            return _to_plan(row) if row else None

    def get_for_user(self, user_id: int) -> Optional[Subscription]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_SUBSCRIPTION + " WHERE s.user_id=%s", (user_id,))
            row = fetchone(cur)
            return _to_subscription(row) if row else None

    def get_subscription(self, subscription_id: int) -> Optional[Subscription]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_SUBSCRIPTION + " WHERE s.subscription_id=%s", (subscription_id,))
            row = fetchone(cur)
            return _to_subscription(row) if row else None

    def list_all(self) -> Sequence[Subscription]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_SUBSCRIPTION + " ORDER BY s.created_at DESC, s.subscription_id DESC")
            return [_to_subscription(r) for r in fetchall(cur)]

    def upsert(
        self,
        user_id: int,
        plan_id: int,
        *,
        status: SubscriptionStatus,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO subscriptions(user_id, plan_id, status, start_date, end_date)
                VALUES(%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    plan_id=VALUES(plan_id),
                    status=VALUES(status),
                    start_date=COALESCE(VALUES(start_date), start_date),
                    end_date=COALESCE(VALUES(end_date), end_date)
                """,
                (user_id, plan_id, status.value, start_date, end_date),
            )
            cur.execute("SELECT subscription_id FROM subscriptions WHERE user_id=%s", (user_id,))
            row = fetchone(cur) or {}
            return int(row["subscription_id"])

    def set_status(
        self,
        subscription_id: int,
        status: SubscriptionStatus,
        *,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            if start_date is not None or end_date is not None:
                cur.execute(
                    "UPDATE subscriptions SET status=%s, start_date=%s, end_date=%s WHERE subscription_id=%s",
                    (status.value, start_date, end_date, subscription_id),
                )
            else:
                cur.execute(
                    "UPDATE subscriptions SET status=%s WHERE subscription_id=%s",
                    (status.value, subscription_id),
                )

    def create_payment(
        self,
        *,
        subscription_id: int,
        order_id: str,
        amount: float,
        status: PaymentStatus,
        metadata: Mapping[str, Any],
        expired_at: Optional[datetime] = None,
        payment_type: Optional[str] = None,
        transaction_id: Optional[str] = None,
        payment_date: Optional[datetime] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            execute_unique(
                cur,
                """
                INSERT INTO payments(subscription_id, order_id, amount, status, expired_at, metadata,
                                     payment_type, transaction_id, payment_date)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    subscription_id,
                    order_id,
                    amount,
                    status.value,
                    expired_at,
                    json.dumps(dict(metadata)),
                    payment_type,
                    transaction_id,
                    payment_date,
                ),
                message="Order ID sudah digunakan.",
            )
            return int(cur.lastrowid)

    def attach_snap(self, payment_id: int, *, token: str, url: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE payments SET snap_token=%s, snap_url=%s WHERE payment_id=%s",
                (token, url, payment_id),
            )

    def get_payment(self, payment_id: int) -> Optional[Payment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_PAYMENT + " WHERE payment_id=%s", (payment_id,))
            row = fetchone(cur)
            return _to_payment(row) if row else None

    def get_payment_by_order(self, order_id: str) -> Optional[Payment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_PAYMENT + " WHERE order_id=%s", (order_id,))
            row = fetchone(cur)
            return _to_payment(row) if row else None

    def list_payments(self, subscription_id: int) -> Sequence[Payment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT_PAYMENT + " WHERE subscription_id=%s ORDER BY created_at DESC, payment_id DESC",
                (subscription_id,),
            )
            return [_to_payment(r) for r in fetchall(cur)]

    def update_payment(
        self,
        payment_id: int,
        *,
        status: PaymentStatus,
        transaction_id: Optional[str],
        payment_type: Optional[str],
        payment_date: Optional[datetime] = None,
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE payments
                SET status=%s, transaction_id=%s, payment_type=%s, payment_date=COALESCE(%s, payment_date)
                WHERE payment_id=%s
                """,
                (status.value, transaction_id, payment_type, payment_date, payment_id),
            )
