"""MPD server exceptions for error handling."""

from mpd import MPDError


class ServerError(Exception):
    """Base exception for server operations."""

    pass


class ServerConnectionError(ServerError):
    """Raised when a connection to the server cannot be established."""

    def __init__(self, address: str, reason: str = ""):
        self.address = address
        message = f"can't connect to server at {address}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


# Everything a query can raise once connected: protocol, command and socket errors
TRANSPORT_ERRORS = (MPDError, OSError)
