import threading
import unittest

from mathmaster.app.timer import SessionTimer


class SessionTimerTests(unittest.TestCase):
    def test_fires_repeatedly_until_cancelled(self) -> None:
        hits = []
        done = threading.Event()

        def cb() -> None:
            hits.append(1)
            if len(hits) >= 3:
                done.set()

        timer = SessionTimer(0.01, cb)
        timer.start()
        self.assertTrue(timer.running)
        self.assertTrue(done.wait(5.0))
        timer.cancel()
        self.assertFalse(timer.running)
        self.assertGreaterEqual(len(hits), 3)

    def test_context_manager_cancels(self) -> None:
        with SessionTimer(60.0, lambda: None) as timer:
            self.assertTrue(timer.running)
        self.assertFalse(timer.running)


if __name__ == "__main__":
    unittest.main()
