"""
WSGI config for the Friendable project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'friendable.settings')

application = get_wsgi_application()
