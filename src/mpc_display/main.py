"""
mpc-display - wires the display and input sides together
"""

import sys
import threading

from blessed import Terminal
from loguru import logger

from mpc_display.core.config import Config
from mpc_display.domain.server.client import ServerClient
from mpc_display.domain.server.exceptions import ServerConnectionError
from mpc_display.ui.blessed.app import Display, ExitCode
from mpc_display.ui.blessed.events.keyboard import KeyHandler
from mpc_display.ui.blessed.signals import session_channels

# How long to wait for the display to notice a quit before exiting anyway
DISPLAY_JOIN_TIMEOUT = 5.0


def _connect(config: Config) -> ServerClient:
    server = config.server
    return ServerClient.connect(server.host, server.port, server.password, server.timeout)


def _display_worker(display: Display, keys: KeyHandler) -> None:
    try:
        display.run()
    except Exception:
        logger.exception("Display loop crashed")
        display.exit_code = ExitCode.ERROR
    finally:
        # Whatever ended the display also ends input
        keys.stop()


def run(config: Config) -> int:
    """Connect both sides, run until quit, return the process exit code."""
    channels = session_channels()
    logger.info(f"Session {channels.token} for {config.server.address}")

    # Two connections: idle blocks the display's one indefinitely
    try:
        display_client = _connect(config)
    except ServerConnectionError as e:
        print(f"mpc-display: {e}", file=sys.stderr)
        return 1
    try:
        input_client = _connect(config)
    except ServerConnectionError as e:
        display_client.close()
        print(f"mpc-display: {e}", file=sys.stderr)
        return 1

    term = Terminal()
    display = Display(display_client, term, config.display, channels)
    keys = KeyHandler(input_client, channels, config.server.keepalive_interval)

    with term.fullscreen(), term.hidden_cursor():
        display_thread = threading.Thread(
            target=_display_worker,
            args=(display, keys),
            daemon=True,
            name="Display",
        )
        display_thread.start()

        try:
            keys.run(term)
        except KeyboardInterrupt:
            logger.info("Ctrl+C detected - requesting quit")
            keys.signals.request_quit()

        display_thread.join(timeout=DISPLAY_JOIN_TIMEOUT)
        stuck = display_thread.is_alive()

    input_client.close()
    if stuck:
        # Still in idle and holding the client lock, so close() would block
        logger.warning("Display did not stop in time, dropping its connection")
        display_client.abort()
    else:
        display_client.close()

    if display.exit_code == ExitCode.ERROR and not keys.signals.quit_requested:
        print("mpc-display: disconnected from server.", file=sys.stderr)
        return 1
    return 0
