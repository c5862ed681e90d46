"""
Tests for the /timer/ws live stream.

Starlette's TestClient runs the app on its own event loop; clock advances are
sent through its portal so ticks land on the same loop as the handlers.
"""

from __future__ import annotations

from fastapi.testclient import TestClient


def _next_event(ws, limit=200):
    for _ in range(limit):
        frame = ws.receive_json()
        if frame["type"] == "event":
            return frame
    raise AssertionError("no event frame received")


class TestTimerWebSocket:
    def test_initial_frames_are_state_then_projection(self, app):
        with TestClient(app) as tc:
            with tc.websocket_connect("/timer/ws") as ws:
                state = ws.receive_json()
                projection = ws.receive_json()
        assert state["type"] == "state"
        assert state["phase"] == "idle"
        assert state["display"] == "45:00"
        assert projection["type"] == "projection"
        assert projection["all_complete"] is True

    def test_completion_pushes_events(self, app, clock):
        with TestClient(app) as tc:
            # a one-minute interval keeps the backlog under the subscriber queue size
            tc.put("/settings", json={"pomodoro_minutes": 1})
            with tc.websocket_connect("/timer/ws") as ws:
                ws.receive_json()
                ws.receive_json()
                assert tc.post("/timer/start").json()["phase"] == "running"
                tc.portal.call(clock.advance, 60)

                completed = _next_event(ws)
                started = _next_event(ws)

        assert completed["event"] == "interval_completed"
        assert completed["mode"] == "work"
        assert completed["message"] == "Pomodoro completed!"
        assert completed["chime"]["frequencies"] == [800.0]
        assert started["event"] == "break_started"
        assert started["mode"] == "short_break"
