from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Protocol, Sequence

import midtransclient
from midtransclient.error_midtrans import MidtransAPIError

from ..core.enums import PaymentStatus
from ..core.exceptions import PaymentGatewayError

log = logging.getLogger(__name__)

_FAILED_STATUSES = ("deny", "expire", "cancel")


@dataclass(frozen=True)
class CheckoutSession:
    token: str
    redirect_url: str


@dataclass(frozen=True)
class VerifiedNotification:
    order_id: str
    transaction_status: str
    fraud_status: Optional[str] = None
    payment_type: Optional[str] = None
    transaction_id: Optional[str] = None
    transaction_time: Optional[str] = None
    gross_amount: Optional[str] = None


def is_payment_success(transaction_status: str, fraud_status: Optional[str]) -> bool:
    return (transaction_status == "capture" and fraud_status == "accept") or transaction_status == "settlement"


def is_payment_pending(transaction_status: str) -> bool:
    return transaction_status == "pending"


def is_payment_failed(transaction_status: str) -> bool:
    return transaction_status in _FAILED_STATUSES


def classify(notification: VerifiedNotification) -> Optional[PaymentStatus]:
    """Map a gateway transaction state onto our payment status; None when undecided."""

    if is_payment_success(notification.transaction_status, notification.fraud_status):
        return PaymentStatus.SUCCESS
    if is_payment_pending(notification.transaction_status):
        return PaymentStatus.PENDING
    if is_payment_failed(notification.transaction_status):
        return PaymentStatus.FAILED
    return None


class PaymentGateway(Protocol):
    def create_transaction(
        self,
        order_id: str,
        amount: float,
        customer: Mapping[str, Any],
        items: Sequence[Mapping[str, Any]],
    ) -> CheckoutSession:
        raise NotImplementedError

    def verify_notification(self, payload: Mapping[str, Any]) -> VerifiedNotification:
        """Re-fetch the transaction from the gateway; never trust the raw payload."""

        raise NotImplementedError


class MidtransGateway(PaymentGateway):
    """Snap checkout + Core API notification check."""

    def __init__(
        self,
        *,
        server_key: str,
        client_key: str,
        is_production: bool = False,
        frontend_url: str = "http://localhost:3000",
    ):
        self._snap = midtransclient.Snap(
            is_production=is_production,
            server_key=server_key,
            client_key=client_key,
        )
        self._core = midtransclient.CoreApi(
            is_production=is_production,
            server_key=server_key,
            client_key=client_key,
        )
        self._frontend_url = frontend_url.rstrip("/")
        log.info("Midtrans gateway ready (%s)", "PRODUCTION" if is_production else "SANDBOX")

    def create_transaction(
        self,
        order_id: str,
        amount: float,
        customer: Mapping[str, Any],
        items: Sequence[Mapping[str, Any]],
    ) -> CheckoutSession:
        parameter: Dict[str, Any] = {
            "transaction_details": {"order_id": order_id, "gross_amount": int(round(amount))},
            "customer_details": dict(customer),
            "item_details": [dict(i) for i in items],
            "credit_card": {"secure": True},
            "callbacks": {
                "finish": f"{self._frontend_url}/subscription/success",
                "error": f"{self._frontend_url}/subscription/failed",
                "pending": f"{self._frontend_url}/subscription/pending",
            },
        }
        try:
            transaction = self._snap.create_transaction(parameter)
        except MidtransAPIError as e:
            log.exception("Midtrans transaction error for %s", order_id)
            raise PaymentGatewayError("Gagal membuat transaksi pembayaran.", details=e.message) from e
        return CheckoutSession(token=transaction["token"], redirect_url=transaction["redirect_url"])

    def verify_notification(self, payload: Mapping[str, Any]) -> VerifiedNotification:
        try:
            status = self._core.transactions.notification(dict(payload))
        except MidtransAPIError as e:
            log.exception("Midtrans notification verification failed")
            raise PaymentGatewayError("Verifikasi notifikasi pembayaran gagal.", details=e.message) from e
        return VerifiedNotification(
            order_id=status["order_id"],
            transaction_status=status["transaction_status"],
            fraud_status=status.get("fraud_status"),
            payment_type=status.get("payment_type"),
            transaction_id=status.get("transaction_id"),
            transaction_time=status.get("transaction_time"),
            gross_amount=status.get("gross_amount"),
        )
