from __future__ import annotations

from flask import Flask, jsonify

from ..container import Container
from ..core.enums import Role
from ..users.guards import login_required, roles_required, subscription_required


def register(app: Flask, container: Container) -> None:
    auth = login_required(container.tokens)
    managers = roles_required(Role.ADMIN, Role.HR)
    paid = subscription_required(
        container.subscription_service.ensure_active,
        enabled=container.settings.require_subscription,
    )

    @app.get("/api/stats/dashboard", endpoint="stats_dashboard")
    @auth
    @managers
    @paid
    def dashboard():
        return jsonify(container.stats_service.dashboard())
