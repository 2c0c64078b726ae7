from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import PaymentStatus, SubscriptionStatus
from .model import Payment, Plan, Subscription


class SubscriptionRepository(Protocol):
    def list_active_plans(self) -> Sequence[Plan]:
        """Active plans, cheapest first."""

        raise NotImplementedError

    def get_plan(self, plan_id: int) -> Optional[Plan]:
        raise NotImplementedError

    def get_for_user(self, user_id: int) -> Optional[Subscription]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Subscription]:
        raise NotImplementedError

    def upsert(
        self,
        user_id: int,
        plan_id: int,
        *,
        status: SubscriptionStatus,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> int:
        """Create the user's subscription or switch its plan; returns its id."""

        raise NotImplementedError

    def set_status(
        self,
        subscription_id: int,
        status: SubscriptionStatus,
        *,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> None:
        raise NotImplementedError

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
        raise NotImplementedError

    def attach_snap(self, payment_id: int, *, token: str, url: str) -> None:
        raise NotImplementedError

    def get_payment(self, payment_id: int) -> Optional[Payment]:
        raise NotImplementedError

    def get_payment_by_order(self, order_id: str) -> Optional[Payment]:
        raise NotImplementedError

    def list_payments(self, subscription_id: int) -> Sequence[Payment]:
        """Newest first."""

        raise NotImplementedError

    def update_payment(
        self,
        payment_id: int,
        *,
        status: PaymentStatus,
        transaction_id: Optional[str],
        payment_type: Optional[str],
        payment_date: Optional[datetime] = None,
    ) -> None:
        raise NotImplementedError

    def get_subscription(self, subscription_id: int) -> Optional[Subscription]:
        raise NotImplementedError
