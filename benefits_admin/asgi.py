"""
ASGI config for the benefits administration backend.

The API is plain request/response, so the stock Django ASGI handler is
all that is mounted here.
"""
import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "benefits_admin.settings")

application = get_asgi_application()
