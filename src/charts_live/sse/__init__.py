"""Server-sent event delivery of live-reload signals."""

from .broadcaster import ClientConnection, ReloadBroadcaster
from .messages import CONNECTED_FRAME, KEEPALIVE_FRAME, RELOAD_FRAME, format_event

__all__ = [
    'ClientConnection',
    'ReloadBroadcaster',
    'CONNECTED_FRAME',
    'KEEPALIVE_FRAME',
    'RELOAD_FRAME',
    'format_event',
]
