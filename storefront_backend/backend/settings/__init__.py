# backend/settings/__init__.py
"""
Storefront settings.

base.py holds everything env-driven; select a profile with DJANGO_SETTINGS_MODULE:
- backend.settings.dev   (local runs, tests)
- backend.settings.prod  (fail-closed deployment profile)
"""
