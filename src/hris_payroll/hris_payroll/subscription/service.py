from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..common.datetime_utils import now_local, period_of
from ..core.constants import PAYMENT_EXPIRY_HOURS
from ..core.enums import PaymentStatus, Role, SubscriptionStatus
from ..core.exceptions import (
    AuthorizationError,
    NotFoundError,
    PaymentGatewayError,
    SubscriptionRequiredError,
    ValidationError,
)
from ..employees.repository import EmployeeRepository
from ..users.model import AuthUser
from ..users.repository import UserRepository
from .gateway import PaymentGateway, classify
from .invoice import InvoiceRenderer
from .model import InvoiceData, Payment, Plan, Subscription, billing_calculation
from .repository import SubscriptionRepository
from .schemas import PlanChoice

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Quote:
    """Headcount-based price for one billing cycle."""

    plan: Plan
    total_employees: int

    @property
    def price_per_employee(self) -> float:
        return self.plan.price

    @property
    def total_amount(self) -> float:
        return self.plan.price * self.total_employees

    @property
    def calculation(self) -> str:
        return billing_calculation(self.total_employees, self.price_per_employee)

    def metadata(self, **extra: Any) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "plan_name": self.plan.plan_name,
            "price_per_employee": self.price_per_employee,
            "total_employees": self.total_employees,
            "calculation": self.calculation,
        }
        body.update(extra)
        return body


@dataclass(frozen=True)
class InvoiceFile:
    order_id: str
    content: bytes

    @property
    def filename(self) -> str:
        return f"invoice-{self.order_id}.pdf"


class SubscriptionService:
    """Use case: paket langganan per karyawan aktif, pembayaran, dan invoice."""

    def __init__(
        self,
        subscriptions: SubscriptionRepository,
        users: UserRepository,
        employees: EmployeeRepository,
        gateway: PaymentGateway,
        renderer: InvoiceRenderer,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._subscriptions = subscriptions
        self._users = users
        self._employees = employees
        self._gateway = gateway
        self._renderer = renderer
        self._clock = clock

    def plans(self) -> List[Plan]:
        return list(self._subscriptions.list_active_plans())

    def _epoch_ms(self, now: datetime) -> int:
        return int(now.timestamp() * 1000)

    def _quote(
        self,
        plan_id: Optional[int],
        *,
        require_active_plan: bool = True,
        missing_message: str = "Paket tidak ditemukan.",
    ) -> Quote:
        if not plan_id:
            raise ValidationError("Plan ID wajib diisi.")
        plan = self._subscriptions.get_plan(plan_id)
        if not plan:
            raise NotFoundError(missing_message)
        if require_active_plan and not plan.is_active:
            raise ValidationError("Paket tidak tersedia.")

        total_employees = self._employees.count_active()
        if total_employees == 0:
            raise ValidationError("Tidak ada karyawan aktif. Tambahkan karyawan terlebih dahulu.")
        return Quote(plan=plan, total_employees=total_employees)

    def _company_subscription(self, actor: AuthUser) -> Optional[Subscription]:
        """Admins own the subscription; everyone else sees the Admin's one."""

        if actor.role == Role.ADMIN:
            return self._subscriptions.get_for_user(actor.user_id)
        admin = self._users.get_first_admin()
        if not admin:
            return None
        return self._subscriptions.get_for_user(admin.user_id)

    def status(self, actor: AuthUser) -> Dict[str, Any]:
        if actor.role != Role.ADMIN and not self._users.get_first_admin():
            return {"hasSubscription": False, "message": "Tidak ada Admin di sistem."}

        subscription = self._company_subscription(actor)
        if not subscription:
            return {"hasSubscription": False, "message": "Belum ada subscription."}

        now = self._clock()
        payments = self._subscriptions.list_payments(subscription.subscription_id)
        body = subscription.to_dict()
        body["payments"] = [p.to_dict() for p in payments[:1]]
        body["isExpired"] = subscription.is_expired(now)
        body["daysRemaining"] = subscription.days_remaining(now)
        return {"hasSubscription": True, "subscription": body}

    def create(self, actor: AuthUser, data: PlanChoice) -> Dict[str, Any]:
        quote = self._quote(data.plan_id)
        now = self._clock()

        subscription_id = self._subscriptions.upsert(
            actor.user_id,
            quote.plan.plan_id,
            status=SubscriptionStatus.PENDING,
        )
        order_id = f"SUB-{actor.user_id}-{self._epoch_ms(now)}"
        payment_id = self._subscriptions.create_payment(
            subscription_id=subscription_id,
            order_id=order_id,
            amount=quote.total_amount,
            status=PaymentStatus.PENDING,
            expired_at=now + timedelta(hours=PAYMENT_EXPIRY_HOURS),
            metadata=quote.metadata(),
        )

        customer = {
            "first_name": actor.username,
            "email": actor.email or f"{actor.username}@company.com",
        }
        items = [
            {
                "id": str(quote.plan.plan_id),
                "price": quote.total_amount,
                "quantity": 1,
                "name": f"{quote.plan.plan_name} - {quote.total_employees} Karyawan",
            }
        ]
        try:
            session = self._gateway.create_transaction(order_id, quote.total_amount, customer, items)
        except PaymentGatewayError:
            self._subscriptions.update_payment(
                payment_id, status=PaymentStatus.FAILED, transaction_id=None, payment_type=None
            )
            raise
        self._subscriptions.attach_snap(payment_id, token=session.token, url=session.redirect_url)
        log.info(
            "Subscription order %s created: %s x %s = %s",
            order_id,
            quote.total_employees,
            quote.price_per_employee,
            quote.total_amount,
        )

        return {
            "message": "Subscription berhasil dibuat.",
            "subscription_id": subscription_id,
            "payment_id": payment_id,
            "snap_token": session.token,
            "redirect_url": session.redirect_url,
            "order_id": order_id,
            "amount": quote.total_amount,
            "plan_name": quote.plan.plan_name,
            "total_employees": quote.total_employees,
            "price_per_employee": quote.price_per_employee,
            "calculation": quote.calculation,
        }

    def handle_webhook(self, payload: Mapping[str, Any]) -> Payment:
        verified = self._gateway.verify_notification(payload)
        payment = self._subscriptions.get_payment_by_order(verified.order_id)
        if not payment:
            log.warning("Webhook for unknown order %s", verified.order_id)
            raise NotFoundError("Payment tidak ditemukan.")

        outcome = classify(verified)
        log.info(
            "Webhook %s: transaction_status=%s fraud_status=%s -> %s",
            verified.order_id,
            verified.transaction_status,
            verified.fraud_status,
            outcome.value if outcome else "unchanged",
        )

        now = self._clock()
        payment_date = None
        if outcome == PaymentStatus.SUCCESS:
            payment_date = now
            subscription = self._subscriptions.get_subscription(payment.subscription_id)
            duration_days = subscription.plan.duration_days if subscription and subscription.plan else 30
            self._subscriptions.set_status(
                payment.subscription_id,
                SubscriptionStatus.ACTIVE,
                start_date=now,
                end_date=now + timedelta(days=duration_days),
            )
        elif outcome == PaymentStatus.FAILED:
            self._subscriptions.set_status(payment.subscription_id, SubscriptionStatus.INACTIVE)

        self._subscriptions.update_payment(
            payment.payment_id,
            status=outcome or payment.status,
            transaction_id=verified.transaction_id,
            payment_type=verified.payment_type,
            payment_date=payment_date,
        )
        return self._subscriptions.get_payment(payment.payment_id) or payment

    def list_all(self) -> List[Dict[str, Any]]:
        rows = []
        for subscription in self._subscriptions.list_all():
            body = subscription.to_dict()
            body["payments"] = [p.to_dict() for p in self._subscriptions.list_payments(subscription.subscription_id)]
            rows.append(body)
        return rows

    def current_billing(self, actor: AuthUser) -> Dict[str, Any]:
        subscription = self._subscriptions.get_for_user(actor.user_id)
        if not subscription or not subscription.plan:
            return {"hasBilling": False, "message": "Belum ada subscription."}

        quote = Quote(plan=subscription.plan, total_employees=self._employees.count_active())
        payments = self._subscriptions.list_payments(subscription.subscription_id)
        return {
            "hasBilling": True,
            "billing": {
                "period": period_of(self._clock().date()),
                "plan_name": quote.plan.plan_name,
                "price_per_employee": quote.price_per_employee,
                "total_employees": quote.total_employees,
                "total_amount": quote.total_amount,
                "calculation": quote.calculation,
                "subscription_status": subscription.status,
                "start_date": subscription.start_date,
                "end_date": subscription.end_date,
                "last_payment": payments[0].to_dict() if payments else None,
            },
        }

    def _invoice_data(self, payment: Payment, subscription: Subscription) -> InvoiceData:
        owner = self._users.get_by_id(subscription.user_id)
        plan = subscription.plan
        meta = payment.metadata or {}
        return InvoiceData(
            order_id=payment.order_id,
            payment_date=payment.payment_date or self._clock(),
            company_name=owner.username if owner else "Perusahaan",
            admin_email=owner.email if owner else "-",
            plan_name=meta.get("plan_name") or (plan.plan_name if plan else "-"),
            price_per_employee=float(meta.get("price_per_employee") or (plan.price if plan else 0)),
            total_employees=int(meta.get("total_employees") or 0),
            total_amount=payment.amount,
            period=period_of(self._clock().date()),
            calculation=meta.get("calculation") or "-",
            status=payment.status,
            payment_type=payment.payment_type,
        )

    def invoice(self, actor: AuthUser, payment_id: int) -> InvoiceFile:
        payment = self._subscriptions.get_payment(payment_id)
        if not payment:
            raise NotFoundError("Payment tidak ditemukan.")
        subscription = self._subscriptions.get_subscription(payment.subscription_id)
        if not subscription:
            raise NotFoundError("Payment tidak ditemukan.")
        if actor.role != Role.ADMIN and subscription.user_id != actor.user_id:
            raise AuthorizationError("Akses ditolak.")

        content = self._renderer.render(self._invoice_data(payment, subscription))
        return InvoiceFile(order_id=payment.order_id, content=content)

    def activate_dummy(self, actor: AuthUser, data: PlanChoice) -> Dict[str, Any]:
        """Activate immediately without the gateway, recording a paid dummy payment."""

        quote = self._quote(data.plan_id, require_active_plan=False, missing_message="Plan tidak ditemukan.")

        now = self._clock()
        end = now + timedelta(days=quote.plan.duration_days)
        subscription_id = self._subscriptions.upsert(
            actor.user_id,
            quote.plan.plan_id,
            status=SubscriptionStatus.ACTIVE,
            start_date=now,
            end_date=end,
        )
        stamp = self._epoch_ms(now)
        order_id = f"DUMMY-{actor.user_id}-{stamp}"
        self._subscriptions.create_payment(
            subscription_id=subscription_id,
            order_id=order_id,
            amount=quote.total_amount,
            status=PaymentStatus.SUCCESS,
            payment_type="dummy",
            transaction_id=f"TXN-DUMMY-{stamp}",
            payment_date=now,
            metadata=quote.metadata(note="DUMMY SUBSCRIPTION - FOR TESTING ONLY"),
        )
        log.info("Dummy subscription %s activated until %s", subscription_id, end)

        return {
            "message": "Subscription berhasil diaktifkan (DUMMY MODE)",
            "subscription": {
                "subscription_id": subscription_id,
                "plan_name": quote.plan.plan_name,
                "status": SubscriptionStatus.ACTIVE,
                "start_date": now,
                "end_date": end,
            },
            "billing": {
                "order_id": order_id,
                "amount": quote.total_amount,
                "employees": quote.total_employees,
                "calculation": quote.calculation,
            },
        }

    def ensure_active(self) -> None:
        admin = self._users.get_first_admin()
        subscription = self._subscriptions.get_for_user(admin.user_id) if admin else None
        if not subscription or not subscription.is_usable(self._clock()):
            raise SubscriptionRequiredError(
                "Subscription required",
                code="SUBSCRIPTION_REQUIRED",
                details="Anda memerlukan subscription aktif untuk mengakses fitur ini",
            )
