"""Tests for help/quit signaling over server channels."""

import pytest

from mpc_display.ui.blessed.signals import (
    SessionChannels,
    Signal,
    SignalCoordinator,
    SignalSender,
    session_channels,
)


@pytest.fixture
def channels() -> SessionChannels:
    return SessionChannels("abc123")


class TestSessionChannels:
    def test_names_carry_token(self, channels):
        assert channels.help == "help_abc123"
        assert channels.quit == "quit_abc123"
        assert channels.refresh == "refresh_abc123"

    def test_generated_tokens_differ(self):
        assert session_channels().token != session_channels().token

    def test_explicit_token(self):
        assert session_channels("xyz").quit == "quit_xyz"


class TestSignalCoordinator:
    """Test the NORMAL / HELP / QUIT transitions."""

    def test_help_subscription_opens_help(self, channels):
        coordinator = SignalCoordinator(channels)
        assert coordinator.evaluate(["help_abc123"]) == Signal.HELP

    def test_help_dropped_returns_to_normal(self, channels):
        coordinator = SignalCoordinator(channels, Signal.HELP)
        assert coordinator.evaluate([]) == Signal.NORMAL

    def test_quit_subscription_quits(self, channels):
        coordinator = SignalCoordinator(channels)
        assert coordinator.evaluate(["quit_abc123"]) == Signal.QUIT

    def test_quit_is_terminal(self, channels):
        coordinator = SignalCoordinator(channels)
        coordinator.evaluate(["quit_abc123"])
        assert coordinator.evaluate([]) == Signal.QUIT
        assert coordinator.evaluate(["help_abc123"]) == Signal.QUIT

    def test_closing_help_does_not_quit_in_same_step(self, channels):
        coordinator = SignalCoordinator(channels, Signal.HELP)
        assert coordinator.evaluate(["quit_abc123"]) == Signal.NORMAL
        assert coordinator.evaluate(["quit_abc123"]) == Signal.QUIT

    def test_other_sessions_are_ignored(self, channels):
        coordinator = SignalCoordinator(channels)
        assert coordinator.evaluate(["help_other", "quit_other"]) == Signal.NORMAL

    def test_refresh_reads_server_channels(self, channels, server):
        server.subscribed = ["help_abc123"]
        coordinator = SignalCoordinator(channels)
        assert coordinator.refresh(server) == Signal.HELP
        assert server.calls["channels"] == 1

    def test_refresh_quit_while_closing_help(self, channels, server):
        """Help closed and quit requested before the display lists channels."""
        server.subscribed = ["quit_abc123"]
        coordinator = SignalCoordinator(channels, Signal.HELP)
        assert coordinator.refresh(server) == Signal.QUIT
        assert server.calls["channels"] == 1

    def test_refresh_closing_help_alone_is_normal(self, channels, server):
        coordinator = SignalCoordinator(channels, Signal.HELP)
        assert coordinator.refresh(server) == Signal.NORMAL

    def test_refresh_failure_keeps_signal(self, channels, server):
        server.failing.add("channels")
        coordinator = SignalCoordinator(channels, Signal.HELP)
        assert coordinator.refresh(server) == Signal.HELP


class TestSignalSender:
    """Test the channel operations behind help and quit keys."""

    def test_open_help_subscribes(self, channels, server):
        sender = SignalSender(server, channels)
        assert sender.toggle_help() is True
        assert server.commands == [("subscribe", "help_abc123")]

    def test_close_help_unsubscribes_and_pokes_refresh(self, channels, server):
        sender = SignalSender(server, channels)
        sender.toggle_help()
        assert sender.toggle_help() is False
        assert server.commands == [
            ("subscribe", "help_abc123"),
            ("unsubscribe", "help_abc123"),
            ("subscribe", "refresh_abc123"),
            ("unsubscribe", "refresh_abc123"),
        ]
        assert server.subscribed == []

    def test_quit_subscribes(self, channels, server):
        sender = SignalSender(server, channels)
        sender.request_quit()
        assert sender.quit_requested
        assert server.commands == [("subscribe", "quit_abc123")]

    def test_quit_from_help_drops_help_first(self, channels, server):
        sender = SignalSender(server, channels)
        sender.toggle_help()
        sender.request_quit()
        assert server.commands[-2:] == [
            ("unsubscribe", "help_abc123"),
            ("subscribe", "quit_abc123"),
        ]
        assert not sender.help_active

    def test_send_failures_are_swallowed(self, channels, server):
        server.failing.update({"subscribe", "unsubscribe"})
        sender = SignalSender(server, channels)
        assert sender.toggle_help() is True
        sender.request_quit()
        assert sender.quit_requested
        assert server.subscribed == []

    def test_round_trip_through_coordinator(self, channels, server):
        sender = SignalSender(server, channels)
        coordinator = SignalCoordinator(channels)

        sender.toggle_help()
        assert coordinator.refresh(server) == Signal.HELP
        sender.toggle_help()
        assert coordinator.refresh(server) == Signal.NORMAL
        sender.request_quit()
        assert coordinator.refresh(server) == Signal.QUIT
