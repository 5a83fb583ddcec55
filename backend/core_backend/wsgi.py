"""
WSGI config for the POS backend.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "core_backend.settings")

application = get_wsgi_application()
