"""
WSGI config for the Barão Espetinhos project.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'barao.settings')

application = get_wsgi_application()
