"""
Tests for guide_pipeline/utils/retry.py
"""
import unittest
from unittest.mock import MagicMock

from guide_pipeline.errors import (
    AuthenticationFailed,
    ParseError,
    RateLimited,
    UpstreamServiceError,
    error_for_status,
)
from guide_pipeline.utils.retry import RetryPolicy, call_with_retry


class TestRetryPolicy(unittest.TestCase):

    def test_delays_double_and_cap(self):
        policy = RetryPolicy(max_retries=5, base_delay=1.0, max_delay=8.0)
        self.assertEqual([policy.delay_for(n) for n in range(6)], [1.0, 2.0, 4.0, 8.0, 8.0, 8.0])


class TestCallWithRetry(unittest.TestCase):

    def setUp(self):
        self.sleeps = []

    def _sleep(self, seconds):
        self.sleeps.append(seconds)

    def test_rate_limited_twice_then_success(self):
        func = MagicMock(side_effect=[RateLimited(), RateLimited(), "ok"])

        result = call_with_retry(func, RetryPolicy(max_retries=3), sleep=self._sleep)

        self.assertEqual(result, "ok")
        self.assertEqual(func.call_count, 3)
        self.assertEqual(self.sleeps, [1.0, 2.0])

    def test_server_errors_exhaust_retries(self):
        policy = RetryPolicy(max_retries=3, base_delay=1.0, max_delay=3.0)
        func = MagicMock(side_effect=UpstreamServiceError())

        with self.assertRaises(UpstreamServiceError):
            call_with_retry(func, policy, sleep=self._sleep)

        self.assertEqual(func.call_count, 4)
        self.assertEqual(self.sleeps, [1.0, 2.0, 3.0])
        self.assertEqual(self.sleeps, sorted(self.sleeps))

    def test_authentication_failure_is_not_retried(self):
        for status in (401, 403):
            func = MagicMock(side_effect=error_for_status(status))
            with self.assertRaises(AuthenticationFailed):
                call_with_retry(func, RetryPolicy(), sleep=self._sleep)
            self.assertEqual(func.call_count, 1)
        self.assertEqual(self.sleeps, [])

    def test_parse_error_is_not_retried(self):
        func = MagicMock(side_effect=ParseError())
        with self.assertRaises(ParseError):
            call_with_retry(func, RetryPolicy(), sleep=self._sleep)
        self.assertEqual(func.call_count, 1)

    def test_other_client_errors_are_not_retried(self):
        func = MagicMock(side_effect=error_for_status(400))
        with self.assertRaises(UpstreamServiceError):
            call_with_retry(func, RetryPolicy(), sleep=self._sleep)
        self.assertEqual(func.call_count, 1)

    def test_unclassified_exceptions_propagate(self):
        func = MagicMock(side_effect=KeyError("boom"))
        with self.assertRaises(KeyError):
            call_with_retry(func, RetryPolicy(), sleep=self._sleep)
        self.assertEqual(self.sleeps, [])


class TestErrorForStatus(unittest.TestCase):

    def test_mapping(self):
        self.assertIsInstance(error_for_status(429), RateLimited)
        self.assertIsInstance(error_for_status(401), AuthenticationFailed)
        self.assertTrue(error_for_status(503).retryable)
        self.assertFalse(error_for_status(404).retryable)
        self.assertEqual(error_for_status(500).http_status, 502)


if __name__ == '__main__':
    unittest.main()
