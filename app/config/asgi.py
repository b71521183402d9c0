"""
ASGI config for the messaging backend.

Exposes the ASGI callable as a module-level variable named ``application``.

Protocols:
    http: Django (REST API, admin, docs)
    websocket: Chat relay at ws/chat/<chat_id>/ (see chat.routing)

Run with Uvicorn:
    uvicorn config.asgi:application --app-dir app
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

# Django must be set up before the chat modules import models
django_asgi_app = get_asgi_application()

from channels.routing import ProtocolTypeRouter, URLRouter  # noqa: E402
from channels.security.websocket import AllowedHostsOriginValidator  # noqa: E402

from chat.middleware import JWTAuthMiddleware  # noqa: E402
from chat.routing import websocket_urlpatterns  # noqa: E402

application = ProtocolTypeRouter(
    {
        "http": django_asgi_app,
        # Origin check, then JWT user lookup, then routing to ChatConsumer
        "websocket": AllowedHostsOriginValidator(
            JWTAuthMiddleware(URLRouter(websocket_urlpatterns))
        ),
    }
)
