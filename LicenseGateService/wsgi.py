"""
WSGI config for LicenseGateService project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "LicenseGateService.settings.prod")

application = get_wsgi_application()
