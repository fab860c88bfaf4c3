# backend/settings/__init__.py
"""
Settings package entrypoint.

Select with DJANGO_SETTINGS_MODULE:
- backend.settings.dev   (local development, tests)
- backend.settings.prod  (production)
"""
