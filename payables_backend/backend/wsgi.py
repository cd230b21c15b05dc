# backend/wsgi.py
"""
WSGI entrypoint for the payables ledger project (admin + health check).

Settings resolution:
- DJANGO_SETTINGS_MODULE wins when set (production: backend.settings.prod).
- Otherwise falls back to backend.settings.dev.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "backend.settings.dev")

application = get_wsgi_application()
