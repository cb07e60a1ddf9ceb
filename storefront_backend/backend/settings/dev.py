# backend/settings/dev.py
"""
PATH: backend/settings/dev.py

DEVELOPMENT + TEST SETTINGS
- SQLite and the per-process cache from base.py
- Storefront frontend dev server allowed as an origin
- pytest and `manage.py test` run against this module
"""

from __future__ import annotations

from .base import *  # noqa: F403
from .base import env

DEBUG = True

ALLOWED_HOSTS = env.list("ALLOWED_HOSTS", default=["localhost", "127.0.0.1", "testserver"])

_frontend_origins = env.list("CORS_ALLOWED_ORIGINS", default=["http://localhost:3000"])
CORS_ALLOWED_ORIGINS = _frontend_origins
CSRF_TRUSTED_ORIGINS = env.list("CSRF_TRUSTED_ORIGINS", default=_frontend_origins)

CORS_ALLOW_CREDENTIALS = True
