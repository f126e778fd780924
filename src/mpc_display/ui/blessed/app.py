"""Display loop: mirror the server and redraw on every change."""

from enum import Enum
from typing import Optional

from blessed import Terminal
from loguru import logger

from mpc_display.core.config import DisplayConfig
from mpc_display.domain.server.client import IDLE_SUBSYSTEMS, ServerClient
from mpc_display.domain.server.exceptions import TRANSPORT_ERRORS
from mpc_display.domain.server.models import PlayState

from .cache import StateCache
from .components.help import render_help
from .helpers.terminal import write_frame
from .projector import ElapsedProjector
from .signals import SessionChannels, Signal, SignalCoordinator


class ExitCode(Enum):
    QUIT = 0
    ERROR = 1


class Display:
    """Owns the display connection, the StateCache and the Signal."""

    def __init__(
        self,
        client: ServerClient,
        term: Terminal,
        options: DisplayConfig,
        channels: SessionChannels,
    ):
        self.client = client
        self.term = term
        self.cache = StateCache(client, term, options)
        self.coordinator = SignalCoordinator(channels)
        self.projector: Optional[ElapsedProjector] = None
        self.exit_code: Optional[ExitCode] = None

    @property
    def signal(self) -> Signal:
        return self.coordinator.signal

    def init(self) -> None:
        """Initial full sync and first draw."""
        self.cache.sync_all()
        logger.info(
            f"Initial sync: {len(self.cache.data.queue)} songs queued, "
            f"state={self.cache.data.state.value}"
        )
        self.redraw()

    def redraw(self) -> None:
        if self.signal == Signal.HELP:
            write_frame(self.term, "\n".join(render_help(self.term)))
        elif self.signal == Signal.NORMAL:
            self.cache.draw()

    def run(self) -> ExitCode:
        """Loop until the Signal turns to QUIT or the connection drops."""
        self.init()
        while self.step():
            pass
        logger.info(f"Display loop finished: {self.exit_code.name}")
        return self.exit_code

    def step(self) -> bool:
        """One idle cycle. Returns False when the loop should end."""
        if self.signal == Signal.QUIT:
            self.exit_code = ExitCode.QUIT
            return False

        if self.signal == Signal.NORMAL and self.cache.data.state == PlayState.PLAY:
            self.projector = ElapsedProjector.start(self.cache)

        try:
            changed = self.client.wait_for_change(IDLE_SUBSYSTEMS)
        except TRANSPORT_ERRORS as e:
            logger.error(f"Lost connection while waiting for changes: {e}")
            self._cancel_projector()
            self.exit_code = ExitCode.ERROR
            return False

        # Real data may now replace the projected clock
        self._cancel_projector()

        logger.debug(f"Changed subsystems: {changed}")
        self.cache.apply_changes(changed)
        if "subscription" in changed:
            self.coordinator.refresh(self.client)

        if self.signal == Signal.QUIT:
            self.exit_code = ExitCode.QUIT
            return False

        self.redraw()
        return True

    def _cancel_projector(self) -> None:
        if self.projector is not None:
            self.projector.cancel()
            self.projector = None
