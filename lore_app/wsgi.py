"""WSGI entry point for the lore campaign backend."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "lore_app.settings")

application = get_wsgi_application()
