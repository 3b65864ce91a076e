import unittest

from roombook.middleware.rate_limit import RateLimiter
from tests.base import ApiTestCase


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class TestRateLimiter(unittest.TestCase):

    def test_allows_up_to_limit_per_window(self):
        clock = FakeClock()
        limiter = RateLimiter(limit=2, window_seconds=60, clock=clock)

        self.assertEqual(limiter.check_and_increment("a"), (True, 60))
        self.assertTrue(limiter.check_and_increment("a")[0])
        allowed, retry_after = limiter.check_and_increment("a")
        self.assertFalse(allowed)
        self.assertEqual(retry_after, 60)

        # other clients have their own budget
        self.assertTrue(limiter.check_and_increment("b")[0])

        clock.now += 45
        self.assertEqual(limiter.check_and_increment("a"), (False, 15))

        clock.now += 15
        self.assertTrue(limiter.check_and_increment("a")[0])

    def test_reset(self):
        limiter = RateLimiter(limit=1, window_seconds=60)
        limiter.check_and_increment("a")
        limiter.reset()
        self.assertTrue(limiter.check_and_increment("a")[0])


class TestRateLimitMiddleware(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.app.state.rate_limiter = RateLimiter(limit=2, window_seconds=60)

    def test_rejects_over_limit(self):
        self.assertEqual(self.client.get("/api/devices").status_code, 200)
        self.assertEqual(self.client.get("/api/auditories").status_code, 200)

        r = self.client.get("/api/bookings")
        self.assertProblem(r, 429, "rate-limited")
        self.assertIn("retry-after", r.headers)
        self.assertEqual(r.headers["x-content-type-options"], "nosniff")
        self.assertEqual(r.headers["referrer-policy"], "no-referrer")

    def test_health_is_exempt(self):
        for _ in range(5):
            self.assertEqual(self.client.get("/api/health").status_code, 200)
