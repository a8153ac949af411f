from django.urls import re_path

from chat.api.consumers import OrderRoomConsumer


websocket_urlpatterns = [
    re_path(r"ws/orders/$", OrderRoomConsumer.as_asgi()),
]
