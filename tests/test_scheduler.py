import asyncio
import unittest

from menuaim.scheduler import AsyncioScheduler, RetryTimer
from tests.fakes import ManualScheduler


class TestRetryTimer(unittest.TestCase):
    def setUp(self):
        self.scheduler = ManualScheduler()
        self.timer = RetryTimer(self.scheduler)
        self.fired = []

    def test_fires_after_delay(self):
        self.timer.replace(0.2, lambda: self.fired.append("a"))
        self.assertTrue(self.timer.pending)
        self.scheduler.advance(0.1)
        self.assertEqual(self.fired, [])
        self.scheduler.advance(0.1)
        self.assertEqual(self.fired, ["a"])
        self.assertFalse(self.timer.pending)

    def test_replace_keeps_one_pending(self):
        self.timer.replace(0.2, lambda: self.fired.append("a"))
        self.timer.replace(0.2, lambda: self.fired.append("b"))
        self.assertEqual(len(self.scheduler.pending), 1)
        self.scheduler.advance(1.0)
        self.assertEqual(self.fired, ["b"])

    def test_superseded_callback_never_runs(self):
        """Even if a stale handle escapes cancellation, its token is outdated."""
        self.timer.replace(0.2, lambda: self.fired.append("a"))
        stale = self.scheduler.pending[0]
        self.timer.cancel()
        stale.callback()
        self.assertEqual(self.fired, [])

    def test_cancel_without_pending(self):
        self.timer.cancel()
        self.assertFalse(self.timer.pending)


class TestAsyncioScheduler(unittest.IsolatedAsyncioTestCase):
    async def test_call_later_on_running_loop(self):
        fired = asyncio.Event()
        timer = RetryTimer(AsyncioScheduler())
        timer.replace(0.01, fired.set)
        await asyncio.wait_for(fired.wait(), timeout=1.0)
        self.assertFalse(timer.pending)

    async def test_cancelled_handle_does_not_fire(self):
        fired = []
        timer = RetryTimer(AsyncioScheduler())
        timer.replace(0.01, lambda: fired.append(1))
        timer.cancel()
        await asyncio.sleep(0.05)
        self.assertEqual(fired, [])


if __name__ == '__main__':
    unittest.main()
