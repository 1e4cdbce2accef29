"""
Tests for table, summary, chart and page rendering.
"""
import os
import sys
import unittest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from purchaseops.aggregate import OTHER_SOURCE, ReportTotals
from purchaseops.charts import build_charts
from purchaseops.client import ReportPayload
from purchaseops.palette import DEFAULT_BADGE, FALLBACK_PALETTE, badge_class, source_color, source_key
from purchaseops.render import (
    render_page,
    render_pagination,
    render_row,
    render_source_summary,
    render_summary_cards,
    render_table,
)
from purchaseops.view import ClientViewState, ViewStatus, load_report, toggle_sort

from fakes import purchase


def _state(rows):
    state = ClientViewState()
    payload = ReportPayload.model_validate({
        'rows': rows,
        'totals': {'totalRevenue': 1.0, 'totalTransactions': 1, 'totalItems': len(rows)},
        'rowCount': len(rows),
    })
    load_report(state, lambda s, e: payload, '2024-03-01', '2024-03-31')
    return state


class TestPalette(unittest.TestCase):

    def test_source_key_strips_punctuation(self):
        self.assertEqual(source_key('(direct)'), 'direct')
        self.assertEqual(source_key('l.Facebook.com'), 'lfacebookcom')

    def test_badge_lookup_and_default(self):
        self.assertEqual(badge_class('Google'), 'badge-google')
        self.assertEqual(badge_class('m.facebook.com'), 'badge-facebook')
        self.assertEqual(badge_class('(direct)'), 'badge-direct')
        self.assertEqual(badge_class('some-blog'), DEFAULT_BADGE)
        self.assertEqual(badge_class(None), DEFAULT_BADGE)

    def test_color_lookup_and_palette(self):
        self.assertEqual(source_color('google', 5), '#4285F4')
        self.assertEqual(source_color('unknown', 1), FALLBACK_PALETTE[1])
        self.assertEqual(source_color('unknown', len(FALLBACK_PALETTE)), FALLBACK_PALETTE[0])


class TestTable(unittest.TestCase):

    def test_markup_is_escaped(self):
        html = render_row(purchase('T1', item='<script>alert("x")</script>', first_source='<b>evil</b>'))
        self.assertNotIn('<script>', html)
        self.assertIn('&lt;script&gt;', html)
        self.assertIn('&lt;b&gt;evil&lt;/b&gt;', html)

    def test_unset_attribution_shows_dash(self):
        html = render_row(purchase('T1', first_source='(not set)', source='(none)'))
        self.assertIn('<td class="empty-utm">-</td>', html)
        self.assertNotIn('(not set)', html)

    def test_source_badge_and_currency(self):
        html = render_row(purchase('T1', revenue=1234.5, first_source='google'))
        self.assertIn('badge badge-google', html)
        self.assertIn('₪1,234.50', html)

    def test_only_current_page_is_rendered(self):
        state = _state([purchase(f'T{i:03d}', 1.0) for i in range(120)])
        toggle_sort(state, 'transactionId')
        html = render_table(state)
        self.assertEqual(html.count('<tr>'), 50 + 1)
        self.assertIn('T000', html)
        self.assertNotIn('T050', html)
        self.assertIn('class="sortable asc" data-col="transactionId"', html)

    def test_pagination_controls(self):
        self.assertEqual(render_pagination(1, 1), '')
        html = render_pagination(1, 3)
        self.assertIn('data-page="0" disabled', html)
        self.assertIn('page-btn active" data-page="1"', html)
        self.assertIn('data-page="2">&rsaquo;', html)


class TestSummaries(unittest.TestCase):

    def test_summary_cards(self):
        html = render_summary_cards(ReportTotals(15.0, 1, 2))
        self.assertIn('id="totalRevenue">₪15.00', html)
        self.assertIn('id="totalTransactions">1', html)
        self.assertIn('id="totalItems">2', html)
        self.assertIn('id="avgTransaction">₪15.00', html)

    def test_summary_cards_zero_transactions(self):
        html = render_summary_cards(ReportTotals(0.0, 0, 0))
        self.assertIn('id="avgTransaction">₪0.00', html)

    def test_source_summary_min_bar_width(self):
        rows = [purchase('T1', 10000.0), purchase('T2', 1.0, first_source='tiny')]
        html = render_source_summary(rows)
        self.assertIn('style="width: 1.00%"', html)
        self.assertIn('0.0%', html)
        self.assertLess(html.index('google'), html.index('tiny'))


class TestCharts(unittest.TestCase):

    def test_chart_configs(self):
        rows = [purchase(f'T{i}', float(10 - i), first_source=f's{i}', date=f'2024-03-{i + 1:02d}') for i in range(10)]
        charts = build_charts(rows)
        self.assertEqual(charts.sources['type'], 'doughnut')
        labels = charts.sources['data']['labels']
        self.assertEqual(len(labels), 9)
        self.assertEqual(labels[-1], OTHER_SOURCE)
        self.assertEqual(len(charts.sources['data']['datasets'][0]['backgroundColor']), 9)
        self.assertEqual(charts.timeline['type'], 'line')
        self.assertEqual(charts.timeline['data']['labels'][0], '2024-03-01')
        self.assertEqual(charts.timeline['data']['datasets'][0]['data'][0], 10.0)


class TestPage(unittest.TestCase):

    def test_populated_page(self):
        html = render_page(_state([purchase('T1', 10.0)]))
        self.assertIn('id="summaryCards"', html)
        self.assertIn('id="tableWrapper"', html)
        self.assertIn('new Chart', html)
        self.assertNotIn('id="errorMsg"', html)

    def test_error_page(self):
        state = ClientViewState(status=ViewStatus.ERROR, error_message='<oops>')
        html = render_page(state)
        self.assertIn('&lt;oops&gt;', html)
        self.assertNotIn('id="tableWrapper"', html)

    def test_empty_page(self):
        html = render_page(_state([]))
        self.assertIn('id="emptyState"', html)
        self.assertNotIn('id="summaryCards"', html)


if __name__ == '__main__':
    unittest.main()
