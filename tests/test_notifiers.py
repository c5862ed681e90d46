"""Tests for the notifier implementations."""

from unittest.mock import patch

import pytest

from pomofocus.notify.base import (
    BREAK_END_CHIME,
    BREAK_START_CHIME,
    COMPLETION_CHIME,
    LogNotifier,
    Notifier,
    NotifierGroup,
    chime_for,
)
from pomofocus.notify.broadcast import BroadcastNotifier
from pomofocus.notify.desktop import DesktopNotifier
from pomofocus.timer.engine import EnginePolicy
from pomofocus.timer.events import BreakEnded, BreakStarted, IntervalCompleted
from pomofocus.timer.modes import IntervalMode


class Recorder(Notifier):
    def __init__(self):
        self.events = []

    def handle(self, event, policy):
        self.events.append(event)


class Broken(Notifier):
    def handle(self, event, policy):
        raise OSError("no audio device")


class TestEvents:
    def test_completion_message_names_finished_mode(self):
        assert IntervalCompleted(IntervalMode.WORK).message == "Pomodoro completed!"
        assert IntervalCompleted(IntervalMode.LONG_BREAK).message == "Long Break completed!"

    def test_chimes(self):
        assert chime_for(IntervalCompleted(IntervalMode.WORK)) == COMPLETION_CHIME
        assert chime_for(BreakStarted()) == BREAK_START_CHIME
        assert chime_for(BreakEnded()) == BREAK_END_CHIME


class TestNotifierGroup:
    def test_failure_does_not_stop_other_members(self):
        rec = Recorder()
        group = NotifierGroup([Broken(), rec, LogNotifier()])
        group.handle(BreakStarted(), EnginePolicy())
        assert rec.events == [BreakStarted()]

    def test_add(self):
        rec = Recorder()
        group = NotifierGroup()
        group.add(rec)
        group.handle(BreakEnded(), EnginePolicy())
        assert len(rec.events) == 1


class TestBroadcastNotifier:
    async def test_event_payload_includes_chime_when_sound_enabled(self):
        b = BroadcastNotifier()
        q = b.subscribe()
        b.handle(BreakStarted(), EnginePolicy(sound_enabled=True))
        payload = q.get_nowait()
        assert payload["type"] == "event"
        assert payload["event"] == "break_started"
        assert payload["mode"] == "short_break"
        assert list(payload["chime"]["frequencies"]) == [523.25, 659.25, 783.99]

    async def test_no_chime_when_sound_disabled(self):
        b = BroadcastNotifier()
        q = b.subscribe()
        b.handle(IntervalCompleted(IntervalMode.WORK), EnginePolicy(sound_enabled=False))
        payload = q.get_nowait()
        assert payload["chime"] is None
        assert payload["message"] == "Pomodoro completed!"

    async def test_unsubscribe(self):
        b = BroadcastNotifier()
        q = b.subscribe()
        b.unsubscribe(q)
        b.handle(BreakEnded(), EnginePolicy())
        assert q.empty()
        assert b.subscriber_count == 0

    async def test_full_queue_drops_instead_of_raising(self):
        b = BroadcastNotifier()
        q = b.subscribe()
        for _ in range(q.maxsize + 10):
            b.publish({"type": "state"})
        assert q.full()


class TestDesktopNotifier:
    @pytest.mark.parametrize("platform, binary", [
        ("linux", "notify-send"),
        ("darwin", "osascript"),
        ("win32", "powershell"),
    ])
    def test_spawns_platform_command(self, platform, binary):
        with patch("pomofocus.notify.desktop.sys.platform", platform), \
             patch("pomofocus.notify.desktop.subprocess.Popen") as popen:
            assert DesktopNotifier().show("Pomodoro completed!") is True
        assert popen.call_args[0][0][0] == binary

    def test_missing_binary_returns_false(self):
        with patch("pomofocus.notify.desktop.subprocess.Popen", side_effect=FileNotFoundError):
            assert DesktopNotifier().show("hi") is False

    def test_only_completions_pop_up(self):
        n = DesktopNotifier()
        with patch.object(n, "show") as show:
            n.handle(BreakStarted(), EnginePolicy())
            n.handle(IntervalCompleted(IntervalMode.WORK), EnginePolicy())
        show.assert_called_once_with("Pomodoro completed!")
