from __future__ import annotations

from flask import Flask, Response, jsonify, request

from ..common.http import parse_body
from ..container import Container
from ..core.enums import Role
from ..users.guards import current_user, login_required, roles_required
from .schemas import PlanChoice


def register(app: Flask, container: Container) -> None:
    auth = login_required(container.tokens)
    admin_only = roles_required(Role.ADMIN)
    service = container.subscription_service

    @app.get("/api/subscription/plans", endpoint="subscription_plans")
    def plans():
        return jsonify([plan.to_dict() for plan in service.plans()])

    @app.get("/api/subscription/status", endpoint="subscription_status")
    @auth
    def status():
        return jsonify(service.status(current_user()))

    @app.post("/api/subscription/create", endpoint="subscription_create")
    @auth
    @admin_only
    def create():
        return jsonify(service.create(current_user(), parse_body(PlanChoice)))

    @app.post("/api/subscription/webhook", endpoint="subscription_webhook")
    def webhook():
        service.handle_webhook(request.get_json(silent=True) or {})
        return jsonify({"message": "Webhook processed successfully."})

    @app.get("/api/subscription/admin/all", endpoint="subscription_admin_all")
    @auth
    @admin_only
    def list_all():
        return jsonify(service.list_all())

    @app.get("/api/subscription/billing/current", endpoint="subscription_billing_current")
    @auth
    @admin_only
    def current_billing():
        return jsonify(service.current_billing(current_user()))

    @app.get("/api/subscription/invoice/<int:payment_id>", endpoint="subscription_invoice")
    @auth
    def download_invoice(payment_id: int):
        invoice = service.invoice(current_user(), payment_id)
        return Response(
            invoice.content,
            mimetype="application/pdf",
            headers={"Content-Disposition": f"attachment; filename={invoice.filename}"},
        )

    @app.get("/api/subscription/invoice/<int:payment_id>/view", endpoint="subscription_invoice_view")
    @auth
    def view_invoice(payment_id: int):
        invoice = service.invoice(current_user(), payment_id)
        return Response(invoice.content, mimetype="application/pdf", headers={"Content-Disposition": "inline"})

    @app.post("/api/subscription/activate-dummy", endpoint="subscription_activate_dummy")
    @auth
    @admin_only
    def activate_dummy():
        return jsonify(service.activate_dummy(current_user(), parse_body(PlanChoice)))
