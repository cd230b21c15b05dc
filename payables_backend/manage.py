#!/usr/bin/env python
"""
Command-line entrypoint for the payables ledger.

Settings resolution:
- An unset DJANGO_SETTINGS_MODULE, or one pointing at the bare
  "backend.settings" package, falls back to "backend.settings.dev".
- Deployments select "backend.settings.prod" themselves; an explicit
  module is never overridden.

Ledger maintenance:
    python manage.py recompute_balances --dry-run
"""

from __future__ import annotations

import os
import sys

DEFAULT_SETTINGS = "backend.settings.dev"


def _resolve_settings_module() -> str:
    configured = (os.environ.get("DJANGO_SETTINGS_MODULE") or "").strip()
    if configured and configured != "backend.settings":
        return configured
    os.environ["DJANGO_SETTINGS_MODULE"] = DEFAULT_SETTINGS
    return DEFAULT_SETTINGS


def main() -> None:
    _resolve_settings_module()

    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Django is not importable. Install the project "
            "(pip install -e .) inside the active virtual environment."
        ) from exc

    execute_from_command_line(sys.argv)


if __name__ == "__main__":
    main()
