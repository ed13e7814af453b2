"""WSGI config for the freight_backend project."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "freight_backend.settings.settings")

application = get_wsgi_application()
