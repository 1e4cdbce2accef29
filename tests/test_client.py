"""
Tests for the report HTTP client.
"""
import os
import sys
import unittest

import httpx

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from purchaseops.client import UNKNOWN_ERROR, ReportClient, ReportFetchError, error_message

from fakes import purchase


def _client(handler):
    return ReportClient('http://dashboard.test', http=httpx.Client(transport=httpx.MockTransport(handler)))


class TestErrorMessage(unittest.TestCase):

    def test_fallback_order(self):
        self.assertEqual(error_message({'error': 'short', 'details': 'long'}), 'long')
        self.assertEqual(error_message({'error': 'short'}), 'short')
        self.assertEqual(error_message({}), UNKNOWN_ERROR)
        self.assertEqual(error_message(None), UNKNOWN_ERROR)


class TestReportClient(unittest.TestCase):

    def test_fetch_success(self):
        seen = {}

        def handler(request):
            seen['url'] = request.url
            return httpx.Response(200, json={
                'rows': [purchase('T1', 10.0)],
                'totals': {'totalRevenue': 10.0, 'totalTransactions': 1, 'totalItems': 1},
                'rowCount': 1,
            })

        with _client(handler) as client:
            payload = client.fetch('2024-03-01', '2024-03-31')
        self.assertEqual(seen['url'].path, '/api/report')
        self.assertEqual(seen['url'].params['startDate'], '2024-03-01')
        self.assertEqual(seen['url'].params['endDate'], '2024-03-31')
        self.assertEqual(payload.rowCount, 1)
        self.assertEqual(payload.totals.totalRevenue, 10.0)
        self.assertEqual(payload.rows[0]['transactionId'], 'T1')

    def test_fetch_error_uses_details(self):
        def handler(request):
            return httpx.Response(500, json={'error': 'Failed to fetch data from Google Analytics', 'details': 'quota'})

        with self.assertRaises(ReportFetchError) as ctx:
            _client(handler).fetch('2024-03-01', '2024-03-31')
        self.assertEqual(str(ctx.exception), 'quota')

    def test_fetch_error_without_json(self):
        def handler(request):
            return httpx.Response(502, text='Bad Gateway')

        with self.assertRaises(ReportFetchError) as ctx:
            _client(handler).fetch('2024-03-01', '2024-03-31')
        self.assertEqual(str(ctx.exception), UNKNOWN_ERROR)

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError('connection refused', request=request)

        with self.assertRaises(ReportFetchError) as ctx:
            _client(handler).fetch('2024-03-01', '2024-03-31')
        self.assertIn('connection refused', str(ctx.exception))


if __name__ == '__main__':
    unittest.main()
