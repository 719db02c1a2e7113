"""WSGI entry point for eRents.

Used by production WSGI servers; defaults to the development settings
unless DJANGO_SETTINGS_MODULE is set.
"""

import os
from django.core.wsgi import get_wsgi_application  # type: ignore

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.dev')

application = get_wsgi_application()
