"""MPD server access: connection wrapper and reply models."""

from .client import ServerClient
from .exceptions import TRANSPORT_ERRORS, ServerConnectionError, ServerError
from .models import PlayState, Song, Status

__all__ = [
    "ServerClient",
    "ServerConnectionError",
    "ServerError",
    "TRANSPORT_ERRORS",
    "PlayState",
    "Song",
    "Status",
]
