# backend/urls.py
"""
PROJECT URLS

The payables ledger exposes no HTTP API of its own; request handling lives in
an outer service. Only the Django admin (audit inspection) and a health check
are routed here.

Security hardening:
- Make Django admin path configurable via settings (ADMIN_PATH)
  to reduce bot scanning/noise and narrow attack surface.
"""

from __future__ import annotations

from django.conf import settings
from django.contrib import admin
from django.db import connections
from django.db.utils import OperationalError
from django.http import JsonResponse
from django.urls import path


# ------------------ HEALTH CHECK ------------------
def health_check(request):
    """
    Minimal operational endpoint:
    - Confirms app is responding
    - Confirms DB connection + simple query works
    """
    try:
        conn = connections["default"]
        with conn.cursor() as cursor:
            cursor.execute("SELECT 1;")
            cursor.fetchone()
        return JsonResponse({"status": "ok", "db": "ok"})
    except OperationalError as e:
        return JsonResponse(
            {"status": "degraded", "db": "down", "error": str(e)}, status=503
        )


# ------------------ ADMIN PATH (HARDENED) ------------------
ADMIN_PATH = getattr(settings, "ADMIN_PATH", "admin/")
if not ADMIN_PATH.endswith("/"):
    ADMIN_PATH = f"{ADMIN_PATH}/"


urlpatterns = [
    path(ADMIN_PATH, admin.site.urls),
    path("health/", health_check, name="health-check"),
]
