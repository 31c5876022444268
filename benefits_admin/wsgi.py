"""
WSGI config for the benefits administration backend.

Exposes the WSGI callable as a module-level variable named ``application``.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'benefits_admin.settings')

application = get_wsgi_application()
