# backend/storefront/routes/system.py
"""
Liveness and build information.

/api/health probes the database and reports whether a payment gateway is
wired in. A missing gateway only degrades checkout, so it does not fail the
probe; an unreachable database does (503).
"""

import sys
import time

from flask import Blueprint, current_app
from sqlalchemy import text

from ..extensions import db
from storefront.time_utils import to_utc_z, utcnow

API_VERSION = "1.0.0"

HEALTHY = "healthy"
DEGRADED = "degraded"
UNHEALTHY = "unhealthy"

system_bp = Blueprint("system", __name__, url_prefix="/api")


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


def probe_database() -> dict:
    started = time.perf_counter()
    try:
        db.session.execute(text("SELECT 1"))
    except Exception:
        current_app.logger.exception("Health probe: database unreachable")
        db.session.rollback()
        return {"status": UNHEALTHY, "latency_ms": _elapsed_ms(started), "error": "Database error"}
    return {"status": HEALTHY, "latency_ms": _elapsed_ms(started)}


def probe_payment_gateway() -> dict:
    # Presence only; the provider is never called from a probe
    if current_app.extensions.get("payment_gateway") is None:
        return {"status": DEGRADED, "warning": "Payment gateway is not configured"}
    return {"status": HEALTHY}


@system_bp.get("/health")
def health():
    started = time.perf_counter()
    checks = {
        "database": probe_database(),
        "payment_gateway": probe_payment_gateway(),
    }

    statuses = {check["status"] for check in checks.values()}
    if UNHEALTHY in statuses:
        overall, code = UNHEALTHY, 503
    elif DEGRADED in statuses:
        overall, code = DEGRADED, 200
    else:
        overall, code = HEALTHY, 200

    return {
        "status": overall,
        "timestamp": to_utc_z(utcnow()),
        "total_latency_ms": _elapsed_ms(started),
        "checks": checks,
    }, code


@system_bp.get("/version")
def version():
    """API version and runtime; no configuration values are echoed."""
    return {
        "api_version": API_VERSION,
        "environment": "development" if current_app.debug else "production",
        "python_version": sys.version.split()[0],
        "server_time": to_utc_z(utcnow()),
    }
