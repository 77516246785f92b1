import threading
import time
import unittest

from note_drill.core.countdown import Countdown, ManualCountdown
from note_drill.core.events import DrillEventType, EventEmitter
from note_drill.drill_session import DrillMode, DrillSession
from note_drill.note_types import Pitch


class TestCountdown(unittest.TestCase):
    def test_ticks_until_cancelled(self):
        ticked = threading.Event()
        count = []

        def on_tick():
            count.append(1)
            if len(count) >= 3:
                ticked.set()

        countdown = Countdown(on_tick, interval=0.01)
        countdown.start()
        self.assertTrue(ticked.wait(2.0))
        countdown.cancel()
        self.assertFalse(countdown.is_running)

        # A tick already past its running check may still land once
        time.sleep(0.02)
        settled = len(count)
        time.sleep(0.05)
        self.assertEqual(len(count), settled)

    def test_cancel_is_idempotent(self):
        countdown = Countdown(lambda: None, interval=10)
        countdown.cancel()
        countdown.start()
        countdown.cancel()
        countdown.cancel()
        self.assertFalse(countdown.is_running)

    def test_manual_countdown(self):
        calls = []
        countdown = ManualCountdown(lambda: calls.append(1))
        countdown.fire()
        self.assertEqual(calls, [])
        countdown.start()
        countdown.fire(3)
        self.assertEqual(len(calls), 3)
        countdown.cancel()
        countdown.fire()
        self.assertEqual(len(calls), 3)


class TestTimedSessionWithThreads(unittest.TestCase):
    def test_real_countdown_expires_round(self):
        expired = threading.Event()
        events = EventEmitter()
        events.on(DrillEventType.TIMER_EXPIRED, lambda score: expired.set())

        def fast_countdown(callback, interval):
            return Countdown(callback, interval=0.005)

        session = DrillSession(
            [Pitch("C", 4), Pitch("D", 4)],
            lambda target, answer: {"correct": True},
            seed=1,
            timer_duration=5,
            countdown_factory=fast_countdown,
            events=events,
        )
        try:
            session.start_timed()
            self.assertTrue(expired.wait(2.0))
            self.assertEqual(session.time_remaining, 0)
            self.assertFalse(session.is_timer_active)
            self.assertIs(session.mode, DrillMode.TIMED)
        finally:
            session.close()

    def test_close_stops_ticking(self):
        session = DrillSession(
            [Pitch("C", 4)],
            lambda target, answer: {"correct": False},
            seed=1,
            countdown_factory=lambda callback, interval: Countdown(callback, interval=0.005),
        )
        session.start_timed()
        time.sleep(0.03)
        session.close()
        remaining = session.time_remaining
        time.sleep(0.03)
        self.assertEqual(session.time_remaining, remaining)
        self.assertFalse(session.is_timer_active)


class TestEventEmitter(unittest.TestCase):
    def test_on_emit_off(self):
        emitter = EventEmitter()
        received = []
        emitter.on("evt", received.append)
        emitter.on("evt", received.append)  # registered once
        emitter.emit("evt", 1)
        emitter.off("evt", received.append)
        emitter.emit("evt", 2)
        self.assertEqual(received, [1])

    def test_listener_errors_are_contained(self):
        emitter = EventEmitter()
        received = []

        def broken(value):
            raise RuntimeError("boom")

        emitter.on("evt", broken)
        emitter.on("evt", received.append)
        with self.assertLogs("note_drill.core.events", level="ERROR"):
            emitter.emit("evt", 1)
        self.assertEqual(received, [1])

    def test_clear(self):
        emitter = EventEmitter()
        received = []
        emitter.on("evt", received.append)
        emitter.clear()
        emitter.emit("evt", 1)
        self.assertEqual(received, [])


if __name__ == "__main__":
    unittest.main()
